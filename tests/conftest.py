"""
Pytest configuration and shared fixtures.

Provides an isolated config/data environment, a mock repository adapter,
and real temporary git repositories (bare remote + clones) for the sync
tests.
"""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from easygit.core.config import clear_cache
from easygit.core.repository import RepositoryAdapter

# ==============================================================================
# Environment Isolation
# ==============================================================================


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Point XDG dirs at tmp_path and drop EASYGIT_* overrides and cached config."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))
    monkeypatch.delenv("EASYGIT_SYNC_STRATEGY", raising=False)
    monkeypatch.delenv("EASYGIT_DEFAULT_REMOTE", raising=False)
    clear_cache()
    yield
    clear_cache()


# ==============================================================================
# Mock Adapter
# ==============================================================================


@pytest.fixture
def mock_repo():
    """
    A RepositoryAdapter mock describing a clean, reachable `main` on `origin`.

    Tests adjust return values for the scenario under test and assert on
    the mutating calls (push, push_set_upstream, integrate, stash_*).
    """
    repo = MagicMock(spec=RepositoryAdapter)
    repo.working_dir = "/work/project"
    repo.current_branch.return_value = "main"
    repo.list_configured_remotes.return_value = ["origin"]
    repo.probe_reachable.return_value = None
    repo.fetch.return_value = None
    repo.remote_branch_exists.return_value = True
    repo.ahead_behind.return_value = (0, 0)
    repo.unpushed_count.return_value = 0
    repo.is_working_tree_dirty.return_value = False
    repo.stash_push.return_value = True
    return repo


MUTATING_METHODS = {"push", "push_set_upstream", "integrate", "stash_push", "stash_pop"}


@pytest.fixture
def mutating_calls():
    """Returns a helper listing the mutating adapter methods a mock saw, in order."""

    def _calls(repo) -> list[str]:
        return [name for name, _args, _kwargs in repo.method_calls if name in MUTATING_METHODS]

    return _calls


# ==============================================================================
# Real Git Repositories
# ==============================================================================


def _run_git(cwd: Path, *args: str) -> str:
    """Run a git command in `cwd` and return stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def configure_identity(repo: Path) -> None:
    _run_git(repo, "config", "user.email", "test@example.com")
    _run_git(repo, "config", "user.name", "Test User")
    _run_git(repo, "config", "commit.gpgsign", "false")


def _commit_file(repo: Path, name: str, content: str, message: str | None = None) -> None:
    """Write `name`, stage it, and commit."""
    (repo / name).write_text(content)
    _run_git(repo, "add", name)
    _run_git(repo, "commit", "-m", message or f"Update {name}")


@pytest.fixture
def remote_repo(tmp_path: Path) -> Path:
    """A bare repository with one commit on `main`."""
    remote = tmp_path / "remote.git"
    subprocess.run(
        ["git", "init", "--bare", "--initial-branch=main", str(remote)],
        capture_output=True,
        check=True,
    )

    seed = tmp_path / "seed"
    subprocess.run(
        ["git", "clone", str(remote), str(seed)], capture_output=True, check=True
    )
    configure_identity(seed)
    _run_git(seed, "symbolic-ref", "HEAD", "refs/heads/main")
    _commit_file(seed, "README.md", "# Test Repo\n", "Initial commit")
    _run_git(seed, "push", "origin", "main")
    return remote


def _clone(remote: Path, dest: Path) -> Path:
    subprocess.run(["git", "clone", str(remote), str(dest)], capture_output=True, check=True)
    configure_identity(dest)
    return dest


@pytest.fixture
def local_clone(tmp_path: Path, remote_repo: Path) -> Path:
    """The working clone under test."""
    return _clone(remote_repo, tmp_path / "local")


@pytest.fixture
def other_clone(tmp_path: Path, remote_repo: Path) -> Path:
    """A second clone used to push competing commits to the remote."""
    return _clone(remote_repo, tmp_path / "other")


@pytest.fixture
def run_git():
    """Helper running a git command in a directory and returning stdout."""
    return _run_git


@pytest.fixture
def commit_file():
    """Helper writing, staging and committing one file."""
    return _commit_file
