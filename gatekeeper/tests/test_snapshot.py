"""Tests for the staging snapshot reader."""

from unittest.mock import AsyncMock, patch

import pytest

from gatekeeper.errors import CollaboratorError, ContentUnavailable
from gatekeeper.git.snapshot import (
    StagingSnapshotReader,
    get_bypass_sentinel_path,
    get_precommit_hook_path,
    is_git_repo,
    resolve_common_dir,
    resolve_git_dir,
)


def _process(returncode=0, stdout=b"", stderr=b""):
    process = AsyncMock()
    process.returncode = returncode
    process.communicate = AsyncMock(return_value=(stdout, stderr))
    return process


class TestPaths:
    """Tests for repository path helpers."""

    def test_is_git_repo(self, git_repo, tmp_path):
        assert is_git_repo(git_repo) is True
        plain = tmp_path / "plain"
        plain.mkdir()
        assert is_git_repo(plain) is False

    def test_hook_and_sentinel_paths(self, git_repo):
        assert get_precommit_hook_path(git_repo) == git_repo / ".git" / "hooks" / "pre-commit"
        assert get_bypass_sentinel_path(git_repo) == git_repo / ".git" / "GATEKEEPER_SKIP"

    def test_worktree_paths(self, worktree, tmp_path):
        wt_git_dir = tmp_path / "main" / ".git" / "worktrees" / "wt"
        assert is_git_repo(worktree) is True
        assert resolve_git_dir(worktree) == wt_git_dir
        assert get_bypass_sentinel_path(worktree) == wt_git_dir / "GATEKEEPER_SKIP"
        # Hooks are shared by all worktrees
        hook = get_precommit_hook_path(worktree)
        assert hook.resolve() == (tmp_path / "main" / ".git" / "hooks" / "pre-commit").resolve()

    def test_submodule_relative_gitdir(self, tmp_path):
        module_git = tmp_path / ".git" / "modules" / "lib"
        module_git.mkdir(parents=True)
        checkout = tmp_path / "lib"
        checkout.mkdir()
        (checkout / ".git").write_text("gitdir: ../.git/modules/lib\n")

        assert resolve_git_dir(checkout).resolve() == module_git.resolve()
        assert resolve_common_dir(checkout).resolve() == module_git.resolve()

    def test_unrecognized_gitfile_falls_back(self, tmp_path):
        (tmp_path / ".git").write_text("garbage\n")
        assert resolve_git_dir(tmp_path) == tmp_path / ".git"


class TestListStagedPaths:
    """Tests for list_staged_paths."""

    @pytest.mark.asyncio
    async def test_parses_one_path_per_line(self, git_repo):
        process = _process(stdout=b"src/main.rs\nREADME.md\n\n")
        with patch("asyncio.create_subprocess_exec", return_value=process) as mock_exec:
            paths = await StagingSnapshotReader(git_repo).list_staged_paths()

        assert paths == ["src/main.rs", "README.md"]
        assert mock_exec.call_args.args == ("git", "diff", "--cached", "--name-only")
        assert mock_exec.call_args.kwargs["cwd"] == str(git_repo)

    @pytest.mark.asyncio
    async def test_nothing_staged(self):
        with patch("asyncio.create_subprocess_exec", return_value=_process(stdout=b"")):
            assert await StagingSnapshotReader().list_staged_paths() == []

    @pytest.mark.asyncio
    async def test_git_failure(self):
        process = _process(returncode=128, stderr=b"fatal: not a git repository\n")
        with patch("asyncio.create_subprocess_exec", return_value=process):
            with pytest.raises(CollaboratorError, match="not a git repository") as exc_info:
                await StagingSnapshotReader().list_staged_paths()

        assert exc_info.value.stderr == "fatal: not a git repository"
        assert exc_info.value.command == ["git", "diff", "--cached", "--name-only"]

    @pytest.mark.asyncio
    async def test_git_not_installed(self):
        with patch(
            "asyncio.create_subprocess_exec",
            side_effect=FileNotFoundError("No such file or directory: 'git'"),
        ):
            with pytest.raises(CollaboratorError, match="Failed to execute"):
                await StagingSnapshotReader().list_staged_paths()


class TestStagedDiff:
    """Tests for staged_diff."""

    @pytest.mark.asyncio
    async def test_returns_diff_text(self):
        diff = b"diff --git a/a.py b/a.py\n+x = 1\n"
        with patch("asyncio.create_subprocess_exec", return_value=_process(stdout=diff)) as mock_exec:
            result = await StagingSnapshotReader().staged_diff()

        assert result == diff.decode()
        assert mock_exec.call_args.args == ("git", "diff", "--cached")

    @pytest.mark.asyncio
    async def test_empty_diff(self):
        with patch("asyncio.create_subprocess_exec", return_value=_process(stdout=b"")):
            assert await StagingSnapshotReader().staged_diff() == ""


class TestStagedContent:
    """Tests for staged_content."""

    @pytest.mark.asyncio
    async def test_reads_index_version(self):
        with patch(
            "asyncio.create_subprocess_exec", return_value=_process(stdout=b"print('hi')\n")
        ) as mock_exec:
            content = await StagingSnapshotReader().staged_content("app.py")

        assert content == "print('hi')\n"
        assert mock_exec.call_args.args == ("git", "show", ":app.py")

    @pytest.mark.asyncio
    async def test_deleted_file(self):
        process = _process(returncode=128, stderr=b"fatal: path 'gone.py' does not exist\n")
        with patch("asyncio.create_subprocess_exec", return_value=process):
            with pytest.raises(ContentUnavailable) as exc_info:
                await StagingSnapshotReader().staged_content("gone.py")
        assert exc_info.value.path == "gone.py"

    @pytest.mark.asyncio
    async def test_binary_file(self):
        with patch(
            "asyncio.create_subprocess_exec", return_value=_process(stdout=b"\x89PNG\r\n\x00\x00")
        ):
            with pytest.raises(ContentUnavailable, match="binary"):
                await StagingSnapshotReader().staged_content("logo.png")

    @pytest.mark.asyncio
    async def test_non_utf8_file(self):
        with patch("asyncio.create_subprocess_exec", return_value=_process(stdout=b"caf\xe9\n")):
            with pytest.raises(ContentUnavailable, match="UTF-8"):
                await StagingSnapshotReader().staged_content("latin1.txt")

    @pytest.mark.asyncio
    async def test_content_unavailable_is_a_collaborator_error(self):
        process = _process(returncode=1, stderr=b"fatal")
        with patch("asyncio.create_subprocess_exec", return_value=process):
            with pytest.raises(CollaboratorError):
                await StagingSnapshotReader().staged_content("x.py")
