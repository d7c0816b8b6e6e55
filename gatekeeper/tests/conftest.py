# Gatekeeper Tests Configuration
"""Pytest configuration for gatekeeper tests.

Puts the project root on sys.path and keeps the AI credential out of the
environment unless a test sets it explicitly.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Run every test without GROQ_API_KEY and away from any real .env."""
    monkeypatch.delenv("GROQ_API_KEY", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def git_repo(tmp_path):
    """A directory that looks like a Git repository root."""
    (tmp_path / ".git").mkdir()
    return tmp_path


@pytest.fixture
def worktree(tmp_path):
    """A linked worktree laid out as `git worktree add wt` leaves it.

    The checkout's .git is a file pointing at main/.git/worktrees/wt, whose
    commondir points back at main/.git.
    """
    main_git = tmp_path / "main" / ".git"
    wt_git_dir = main_git / "worktrees" / "wt"
    wt_git_dir.mkdir(parents=True)
    (wt_git_dir / "commondir").write_text("../..\n")

    checkout = tmp_path / "wt"
    checkout.mkdir()
    (checkout / ".git").write_text(f"gitdir: {wt_git_dir}\n")
    return checkout
