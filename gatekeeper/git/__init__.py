# Gatekeeper - Git collaborator
"""Git access for the commit gate."""

from gatekeeper.git.snapshot import (
    StagingSnapshotReader,
    get_bypass_sentinel_path,
    get_hooks_path,
    get_precommit_hook_path,
    is_git_repo,
    resolve_common_dir,
    resolve_git_dir,
)

__all__ = [
    "StagingSnapshotReader",
    "get_bypass_sentinel_path",
    "get_hooks_path",
    "get_precommit_hook_path",
    "is_git_repo",
    "resolve_common_dir",
    "resolve_git_dir",
]
