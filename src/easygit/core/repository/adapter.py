"""
Repository adapter protocol and errors.

The reconciliation engine never talks to git directly; it consumes the
RepositoryAdapter protocol defined here. GitRepository (GitPython) is the
production implementation, and tests substitute mocks.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


class GitError(Exception):
    """Exception raised when a git operation fails."""

    def __init__(self, message: str, command: list[str] | None = None, stderr: str = ""):
        super().__init__(message)
        self.command = command
        self.stderr = stderr


class PushRejectedError(GitError):
    """Push refused because the remote has commits the local branch lacks."""

    pass


class StaleLeaseError(GitError):
    """Force-with-lease push refused because the remote ref moved."""

    pass


class IntegrationConflictError(GitError):
    """Rebase or merge stopped on conflicting changes."""

    def __init__(self, message: str, conflicted_paths: list[str], stderr: str = ""):
        super().__init__(message, stderr=stderr)
        self.conflicted_paths = conflicted_paths


@runtime_checkable
class RepositoryAdapter(Protocol):
    """
    Contract consumed by the reconciliation engine.

    Query methods must reflect the live repository on every call; the
    engine relies on that to never see stale ahead/behind counts.
    """

    @property
    def working_dir(self) -> str:
        """Absolute path of the working tree."""
        ...

    def current_branch(self) -> str:
        """Name of the checked-out branch."""
        ...

    def ahead_behind(self, remote: str, branch: str) -> tuple[int, int]:
        """Commits only on ``branch`` and only on ``remote/branch``."""
        ...

    def unpushed_count(self, remote: str, branch: str) -> int:
        """Commits on ``branch`` not reachable from any ref of ``remote``."""
        ...

    def remote_branch_exists(self, remote: str, branch: str) -> bool:
        """Whether ``refs/remotes/<remote>/<branch>`` exists."""
        ...

    def is_working_tree_dirty(self) -> bool:
        """Whether there are staged, unstaged or untracked changes."""
        ...

    def list_configured_remotes(self) -> list[str]:
        """Names of the configured remotes."""
        ...

    def probe_reachable(self, remote: str) -> None:
        """Cheap read-only round trip to ``remote``; raises GitError on failure."""
        ...

    def fetch(self, remote: str) -> None:
        """Update remote-tracking refs for ``remote``."""
        ...

    def push(self, remote: str, branch: str, mode: str = "normal") -> None:
        """
        Push ``branch`` to ``remote``.

        Raises:
            PushRejectedError: On a non-fast-forward rejection
            StaleLeaseError: When a force-with-lease push finds the remote moved
        """
        ...

    def push_set_upstream(self, remote: str, branch: str) -> None:
        """Push ``branch`` and record ``remote/branch`` as its upstream."""
        ...

    def integrate(
        self, strategy: str, onto_ref: str, allow_unrelated_histories: bool = False
    ) -> None:
        """
        Rebase onto or merge ``onto_ref``.

        Raises:
            IntegrationConflictError: When the operation stops on conflicts
        """
        ...

    def stash_push(self, label: str) -> bool:
        """Stash all local changes under ``label``; returns whether an entry was made."""
        ...

    def stash_pop(self, label: str) -> None:
        """Pop the stash entry carrying ``label``."""
        ...
