"""
GitPython implementation of the repository adapter.

Wraps a git.Repo and translates GitCommandError into the adapter's error
types so the reconciliation engine can tell rejections and conflicts apart
from other failures.
"""

from __future__ import annotations

import logging
from pathlib import Path

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo

from easygit.core.repository.adapter import (
    GitError,
    IntegrationConflictError,
    PushRejectedError,
    StaleLeaseError,
)

logger = logging.getLogger(__name__)

_PUSH_FLAGS = {
    "normal": [],
    "force": ["--force"],
    "force-with-lease": ["--force-with-lease"],
}


def _command_output(error: GitCommandError) -> str:
    """Combine stdout and stderr of a failed git command."""
    parts = [str(error.stdout or ""), str(error.stderr or "")]
    return "\n".join(part.strip() for part in parts if part and part.strip())


class GitRepository:
    """
    Repository adapter backed by GitPython.

    Example:
        >>> repo = GitRepository(Path("."))
        >>> repo.fetch("origin")
        >>> repo.ahead_behind("origin", repo.current_branch())
        (2, 0)
    """

    def __init__(self, repo_path: Path | None = None):
        """
        Open the repository containing ``repo_path``.

        Args:
            repo_path: Any path inside the repository (defaults to cwd)

        Raises:
            GitError: If the path is not inside a git repository
        """
        self.repo_path = repo_path or Path.cwd()

        try:
            self.repo = Repo(self.repo_path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise GitError(f"Not a git repository: {self.repo_path}") from e

    @property
    def working_dir(self) -> str:
        return str(self.repo.working_dir)

    def _git(self, *args: str) -> str:
        logger.debug("Running git command: git %s", " ".join(args))
        try:
            return str(self.repo.git.execute(["git", *args]))
        except GitCommandError as e:
            raise GitError(
                f"Git command failed: git {' '.join(args)}",
                command=["git", *args],
                stderr=_command_output(e),
            ) from e

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def current_branch(self) -> str:
        try:
            return self.repo.active_branch.name
        except TypeError as e:
            raise GitError("HEAD is detached; check out a branch before syncing") from e

    def ahead_behind(self, remote: str, branch: str) -> tuple[int, int]:
        output = self._git(
            "rev-list", "--left-right", "--count", f"{branch}...{remote}/{branch}"
        )
        ahead, behind = output.split()
        return int(ahead), int(behind)

    def unpushed_count(self, remote: str, branch: str) -> int:
        output = self._git("rev-list", "--count", branch, "--not", f"--remotes={remote}")
        return int(output.strip() or 0)

    def remote_branch_exists(self, remote: str, branch: str) -> bool:
        try:
            self._git("show-ref", "--verify", "--quiet", f"refs/remotes/{remote}/{branch}")
        except GitError:
            return False
        return True

    def is_working_tree_dirty(self) -> bool:
        return bool(self.repo.is_dirty(untracked_files=True))

    def list_configured_remotes(self) -> list[str]:
        return [remote.name for remote in self.repo.remotes]

    def conflicted_paths(self) -> list[str]:
        output = self._git("diff", "--name-only", "--diff-filter=U")
        return [line.strip() for line in output.splitlines() if line.strip()]

    # ------------------------------------------------------------------
    # Network
    # ------------------------------------------------------------------

    def probe_reachable(self, remote: str) -> None:
        self._git("ls-remote", "--heads", remote)

    def fetch(self, remote: str) -> None:
        self._git("fetch", remote)

    def push(self, remote: str, branch: str, mode: str = "normal") -> None:
        args = ["push", *_PUSH_FLAGS[str(mode)], remote, branch]
        try:
            self._git(*args)
        except GitError as e:
            # "stale info" is also reported as [rejected]; check it first
            if "stale info" in e.stderr:
                raise StaleLeaseError(str(e), command=e.command, stderr=e.stderr) from e
            if "non-fast-forward" in e.stderr or "fetch first" in e.stderr:
                raise PushRejectedError(str(e), command=e.command, stderr=e.stderr) from e
            raise

    def push_set_upstream(self, remote: str, branch: str) -> None:
        self._git("push", "--set-upstream", remote, branch)

    # ------------------------------------------------------------------
    # Working tree
    # ------------------------------------------------------------------

    def integrate(
        self, strategy: str, onto_ref: str, allow_unrelated_histories: bool = False
    ) -> None:
        if strategy == "rebase":
            args = ["rebase", onto_ref]
        else:
            args = ["merge", "--no-edit", onto_ref]
            if allow_unrelated_histories:
                args.append("--allow-unrelated-histories")

        try:
            self._git(*args)
        except GitError as e:
            paths = self.conflicted_paths()
            if paths or "CONFLICT" in e.stderr:
                raise IntegrationConflictError(
                    f"{strategy} onto {onto_ref} stopped on conflicts",
                    conflicted_paths=paths,
                    stderr=e.stderr,
                ) from e
            raise

    def _stash_ref_for(self, label: str) -> str | None:
        for line in self._git("stash", "list").splitlines():
            ref, _, description = line.partition(":")
            if description.rstrip().endswith(label):
                return ref.strip()
        return None

    def stash_push(self, label: str) -> bool:
        self._git("stash", "push", "--include-untracked", "-m", label)
        return self._stash_ref_for(label) is not None

    def stash_pop(self, label: str) -> None:
        ref = self._stash_ref_for(label)
        if ref is None:
            raise GitError(f"No stash entry labelled {label!r}")
        self._git("stash", "pop", ref)
