"""
Standardized error handling and exit codes for the easygit CLI.

This module provides consistent error messaging with actionable guidance
and standardized exit codes across all CLI commands.
"""

from enum import IntEnum

from rich.console import Console

from easygit.core.repository import GitError
from easygit.core.sync.errors import EasyGitError, GitOperationFailed, ReconciliationConflict
from easygit.core.sync.models import StashRestoreWarning

console = Console()


class ExitCode(IntEnum):
    """Standard exit codes for easygit CLI operations."""

    SUCCESS = 0
    """Operation completed successfully."""

    GENERAL_ERROR = 1
    """Generic error (git failure, conflict, rejected push)."""

    USER_ERROR = 2
    """User configuration or input error (actionable by user)."""

    CANCELLED = 3
    """The user cancelled at a prompt; nothing was changed."""

    SIGINT = 130
    """Terminated by SIGINT (Ctrl+C) - Unix standard."""


# Known git failure messages, matched case-insensitively against stderr.
# Values are (reason, solution).
GIT_ERROR_GUIDANCE: dict[str, tuple[str, str]] = {
    "authentication failed": (
        "Your git credentials are incorrect, expired, or not configured",
        "git config --global credential.helper  # or refresh your access token",
    ),
    "permission denied (publickey)": (
        "The remote rejected your SSH key",
        "ssh -T git@github.com  # check that your key is added to the agent and the host",
    ),
    "refusing to merge unrelated histories": (
        "The local and remote branches share no common commit",
        "easygit sync --merge --allow-unrelated  # if combining them is intentional",
    ),
    "failed to push some refs": (
        "The remote has updates you don't have locally, or the branch is protected",
        "easygit sync  # re-run to integrate the remote commits first",
    ),
    "not a git repository": (
        "The current directory is not inside a git repository",
        "git init  # or cd to your project root",
    ),
}


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional command or action to fix it

    Example:
        >>> print_error(
        ...     "Push to origin/main rejected",
        ...     reason="The remote has commits that are not in your local branch",
        ...     solution="easygit sync",
        ... )
    """
    console.print(f"[red]Error:[/red] {problem}")

    if reason:
        console.print(f"[dim]{reason}[/dim]")

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {solution}")


def find_git_guidance(message: str) -> tuple[str, str] | None:
    """Look up reason/solution text for a raw git error message."""
    lowered = message.lower()
    for pattern, guidance in GIT_ERROR_GUIDANCE.items():
        if pattern in lowered:
            return guidance
    return None


def print_stash_warnings(warnings: list[StashRestoreWarning]) -> None:
    """Print every stash restore warning with its recovery command."""
    for warning in warnings:
        console.print(f"[yellow]⚠[/yellow]  {warning.message} ([dim]{warning.label}[/dim])")
        console.print(f"[cyan]→ Recover with:[/cyan] {warning.recovery_command}")


def print_sync_error(error: EasyGitError) -> None:
    """Print a reconciliation failure followed by any stash warnings."""
    reason = error.reason
    solution = error.solution

    if isinstance(error, GitOperationFailed) and error.stderr:
        if guidance := find_git_guidance(error.stderr):
            reason, solution = guidance
        else:
            reason = error.stderr.strip().splitlines()[-1]

    print_error(str(error), reason=reason, solution=solution)

    if isinstance(error, ReconciliationConflict) and error.conflicted_paths:
        console.print("[yellow]Conflicted files:[/yellow]")
        for path in error.conflicted_paths:
            console.print(f"  - {path}")

    print_stash_warnings(error.warnings)


def print_git_error(error: GitError) -> None:
    """Print an unclassified git failure, with guidance when the message is known."""
    detail = error.stderr or str(error)
    guidance = find_git_guidance(detail)
    if guidance:
        reason, solution = guidance
        print_error(str(error), reason=reason, solution=solution)
    else:
        print_error(str(error), reason=detail.strip() if detail != str(error) else None)


def print_not_git_repo_error() -> None:
    """Print error when not in a git repository."""
    reason, solution = GIT_ERROR_GUIDANCE["not a git repository"]
    print_error("Not a git repository", reason=reason, solution=solution)


__all__ = [
    "ExitCode",
    "GIT_ERROR_GUIDANCE",
    "find_git_guidance",
    "print_error",
    "print_git_error",
    "print_not_git_repo_error",
    "print_stash_warnings",
    "print_sync_error",
]
