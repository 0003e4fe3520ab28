"""
Single mutating steps shared by the executor and the divergence resolver.

Each step calls the adapter exactly once and translates adapter errors into
the reconciliation error taxonomy. Nothing here retries.
"""

from __future__ import annotations

from easygit.core.repository import (
    GitError,
    IntegrationConflictError,
    PushRejectedError,
    RepositoryAdapter,
    StaleLeaseError,
)
from easygit.core.sync.errors import (
    GitOperationFailed,
    PushRejected,
    ReconciliationConflict,
    StaleLeaseRejected,
)
from easygit.core.sync.models import BranchState, PushMode, Strategy


def push_branch(repo: RepositoryAdapter, state: BranchState, mode: PushMode) -> None:
    """
    Push the local branch to its remote counterpart.

    Raises:
        PushRejected: Non-fast-forward rejection
        StaleLeaseRejected: Lease check failed on a force-with-lease push
        GitOperationFailed: Any other push failure
    """
    try:
        repo.push(state.remote_name, state.current_branch, mode.value)
    except StaleLeaseError as e:
        raise StaleLeaseRejected(state.remote_branch_ref, detail=e.stderr) from e
    except PushRejectedError as e:
        raise PushRejected(state.remote_branch_ref, detail=e.stderr) from e
    except GitError as e:
        raise GitOperationFailed(
            f"Push to {state.remote_branch_ref} failed", stderr=e.stderr
        ) from e


def push_set_upstream(repo: RepositoryAdapter, state: BranchState) -> None:
    """Create the remote branch and track it."""
    try:
        repo.push_set_upstream(state.remote_name, state.current_branch)
    except GitError as e:
        raise GitOperationFailed(
            f"Failed to create remote branch {state.remote_branch_ref}", stderr=e.stderr
        ) from e


def integrate_remote(
    repo: RepositoryAdapter,
    state: BranchState,
    strategy: Strategy,
    allow_unrelated_histories: bool = False,
) -> None:
    """
    Rebase onto or merge the remote tracking ref.

    Conflicts are left in place for the user; they are never aborted or
    resolved here.

    Raises:
        ReconciliationConflict: The integration stopped on conflicts
        GitOperationFailed: Any other failure
    """
    try:
        repo.integrate(strategy.value, state.remote_branch_ref, allow_unrelated_histories)
    except IntegrationConflictError as e:
        raise ReconciliationConflict(strategy, e.conflicted_paths) from e
    except GitError as e:
        raise GitOperationFailed(
            f"{strategy.value.capitalize()} onto {state.remote_branch_ref} failed",
            stderr=e.stderr,
        ) from e
