"""
Error taxonomy for the reconciliation engine.

Every failure that reaches the caller is an EasyGitError subclass carrying
a short reason and an actionable solution. Stash restore problems are never
raised on their own; they are attached to the primary error's ``warnings``.
"""

from __future__ import annotations

from dataclasses import dataclass

from easygit.core.sync.models import StashRestoreWarning, Strategy


class EasyGitError(Exception):
    """Base exception for all easygit failures."""

    reason: str | None = None
    solution: str | None = None

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.warnings: list[StashRestoreWarning] = []


class ConfigError(EasyGitError):
    """The requested remote is not configured."""

    def __init__(self, remote: str, configured: list[str]) -> None:
        available = ", ".join(configured) if configured else "(none)"
        super().__init__(f'Unknown remote "{remote}". Available remotes: {available}')
        self.remote = remote
        self.configured = configured
        self.reason = f"Configured remotes: {available}"
        self.solution = f"git remote add {remote} <url>  # or pass --remote <name>"


class BranchNotCheckedOut(EasyGitError):
    """Remote commits must be integrated into a branch that is not checked out."""

    def __init__(self, branch: str, checked_out: str) -> None:
        super().__init__(
            f'Cannot integrate remote commits into "{branch}": "{checked_out}" is checked out'
        )
        self.branch = branch
        self.checked_out = checked_out
        self.reason = "Rebase and merge only work on the checked-out branch"
        self.solution = f"git checkout {branch}  # then re-run easygit sync"


class PushRejected(EasyGitError):
    """The remote refused a non-fast-forward push."""

    reason = "The remote has commits that are not in your local branch"
    solution = "easygit sync  # re-run to integrate the remote commits first"

    def __init__(self, remote_branch_ref: str, detail: str = "") -> None:
        super().__init__(f"Push to {remote_branch_ref} rejected (non-fast-forward)")
        self.remote_branch_ref = remote_branch_ref
        self.detail = detail


class StaleLeaseRejected(EasyGitError):
    """A force-with-lease push found the remote moved since the last fetch."""

    reason = "Someone else pushed to the remote while this sync was running"
    solution = "easygit sync  # fetch their commits and reconcile again"

    def __init__(self, remote_branch_ref: str, detail: str = "") -> None:
        super().__init__(
            f"Force push to {remote_branch_ref} rejected: the remote has newer commits"
        )
        self.remote_branch_ref = remote_branch_ref
        self.detail = detail


class ReconciliationConflict(EasyGitError):
    """Integrating remote commits produced conflicts."""

    def __init__(self, strategy: Strategy, conflicted_paths: list[str]) -> None:
        verb = "Rebase" if strategy == Strategy.REBASE else "Merge"
        super().__init__(f"{verb} stopped with conflicts in {len(conflicted_paths)} file(s)")
        self.strategy = strategy
        self.conflicted_paths = conflicted_paths
        self.reason = "Conflicting changes cannot be integrated automatically"
        if strategy == Strategy.REBASE:
            self.solution = (
                "Resolve the files, `git add` them, then `git rebase --continue`"
                "  # or `git rebase --abort`"
            )
        else:
            self.solution = (
                "Resolve the files, `git add` them, then `git commit`"
                "  # or `git merge --abort`"
            )


class UserCancelled(EasyGitError):
    """The user aborted the sync at a prompt."""

    reason = "No changes were made to the local or remote branch"
    solution = "Resolve the divergence manually, or re-run easygit sync"

    def __init__(self, message: str = "Sync cancelled by user") -> None:
        super().__init__(message)


class GitOperationFailed(EasyGitError):
    """A git command failed for a reason the engine does not classify."""

    def __init__(self, message: str, stderr: str = "") -> None:
        super().__init__(message)
        self.stderr = stderr


@dataclass(frozen=True)
class NetworkUnavailable:
    """
    Signal returned (not raised) when the remote cannot be reached.

    Callers route this to the offline queue instead of failing.
    """

    remote: str
    detail: str
