"""
Dry-run planning.

A pure projection of what the executor (and divergence resolver) would do
for a given state. Never touches the repository.
"""

from __future__ import annotations

from easygit.core.sync.models import (
    BranchState,
    Classification,
    DryRunPlan,
    ForceMode,
    ReconciliationRequest,
    Strategy,
)
from easygit.core.sync.stash import should_stash


def _sync_actions(
    state: BranchState, strategy: Strategy, request: ReconciliationRequest
) -> list[str]:
    ref = state.remote_branch_ref

    if state.classification == Classification.UP_TO_DATE:
        return ["No action needed - branch is up to date"]

    if state.classification == Classification.AHEAD:
        push = f"Push {state.ahead_count} commit(s) to {ref}"
        if request.force_mode == ForceMode.FORCE:
            push += " (--force)"
        elif request.force_mode == ForceMode.FORCE_WITH_LEASE:
            push += " (--force-with-lease)"
        return [push]

    if state.classification == Classification.BEHIND:
        verb = "Rebase onto" if strategy == Strategy.REBASE else "Merge"
        action = f"{verb} {state.behind_count} commit(s) from {ref}"
        if strategy == Strategy.MERGE and request.allow_unrelated_histories:
            action += " (allowing unrelated histories)"
        return [action]

    if state.classification == Classification.DIVERGED:
        return [
            f"Ask how to reconcile {state.ahead_count} local and "
            f"{state.behind_count} remote commit(s):",
            f"  - rebase local commits onto {ref}, then push",
            f"  - merge {ref}, then push",
            f"  - force push with lease to {ref} (asks for confirmation)",
            "  - cancel",
        ]

    return [
        f"Create new remote branch {ref}",
        f"Push {state.ahead_count} commit(s) and set upstream tracking",
    ]


def plan_actions(
    state: BranchState,
    strategy: Strategy,
    request: ReconciliationRequest,
    fetched: bool = True,
) -> DryRunPlan:
    """
    Build the dry-run plan for ``state``.

    Args:
        state: Classified branch state
        strategy: Strategy the behind path would use
        request: Current request (force mode, unrelated histories)
        fetched: Whether ``state`` was computed after a successful fetch

    Returns:
        DryRunPlan listing the actions in execution order
    """
    will_stash = should_stash(state)
    actions = _sync_actions(state, strategy, request)
    if will_stash:
        actions = [
            "Stash uncommitted changes",
            *actions,
            "Restore stashed changes",
        ]

    return DryRunPlan(
        state=state,
        strategy=strategy,
        actions=actions,
        will_stash=will_stash,
        fetched=fetched,
    )
