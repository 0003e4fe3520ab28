"""
Sync executor.

A one-shot state machine: given a classified BranchState and a resolved
strategy it performs exactly one reconciliation path. Failures surface to
the caller; nothing is retried.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from easygit.core.repository import RepositoryAdapter
from easygit.core.sync.divergence import DivergenceResolver
from easygit.core.sync.events import SyncEventCallback
from easygit.core.sync.models import (
    AheadState,
    BehindState,
    BranchState,
    Classification,
    DivergedState,
    ForceMode,
    Integrated,
    NewBranchState,
    PushMode,
    Pushed,
    ReconciliationRequest,
    Strategy,
    SyncOutcome,
    UpToDate,
    UpToDateState,
)
from easygit.core.sync.steps import integrate_remote, push_branch, push_set_upstream

logger = logging.getLogger(__name__)


class SyncExecutor:
    """
    Executes the reconciliation path for one classified state.

    Example:
        >>> executor = SyncExecutor(repo, resolver, callback)
        >>> executor.execute(state, Strategy.REBASE, request)
        Pushed(count=3, remote_branch_ref='origin/main', ...)
    """

    def __init__(
        self,
        repo: RepositoryAdapter,
        divergence_resolver: DivergenceResolver,
        callback: SyncEventCallback,
    ) -> None:
        self.repo = repo
        self.divergence_resolver = divergence_resolver
        self._callback = callback
        self._handlers: dict[
            Classification,
            Callable[[BranchState, Strategy, ReconciliationRequest], SyncOutcome],
        ] = {
            Classification.UP_TO_DATE: self._up_to_date,
            Classification.AHEAD: self._ahead,
            Classification.BEHIND: self._behind,
            Classification.DIVERGED: self._diverged,
            Classification.NEW_BRANCH: self._new_branch,
        }

    def execute(
        self, state: BranchState, strategy: Strategy, request: ReconciliationRequest
    ) -> SyncOutcome:
        logger.debug("Executing %s path for %s", state.classification.value, state.current_branch)
        return self._handlers[state.classification](state, strategy, request)

    def _up_to_date(
        self, state: UpToDateState, strategy: Strategy, request: ReconciliationRequest
    ) -> UpToDate:
        self._callback.on_status("Branch is already up to date", level="success")
        self._callback.on_info(
            f"{state.current_branch} is synchronized with {state.remote_branch_ref}"
        )
        return UpToDate(
            current_branch=state.current_branch, remote_branch_ref=state.remote_branch_ref
        )

    def _ahead(
        self, state: AheadState, strategy: Strategy, request: ReconciliationRequest
    ) -> Pushed:
        mode = PushMode.from_force_mode(request.force_mode)
        if request.force_mode == ForceMode.FORCE:
            self._callback.on_status(
                "Force pushing (this can overwrite remote history)", level="warning"
            )
        elif request.force_mode == ForceMode.FORCE_WITH_LEASE:
            self._callback.on_status("Force pushing with lease", level="warning")

        self._callback.on_progress(
            f"Pushing {state.ahead} commit(s) to {state.remote_branch_ref}..."
        )
        push_branch(self.repo, state, mode)

        self._callback.on_status("Successfully pushed changes", level="success")
        return Pushed(count=state.ahead, remote_branch_ref=state.remote_branch_ref, mode=mode)

    def _behind(
        self, state: BehindState, strategy: Strategy, request: ReconciliationRequest
    ) -> Integrated:
        verb = "Rebasing onto" if strategy == Strategy.REBASE else "Merging"
        self._callback.on_progress(
            f"{verb} {state.behind} commit(s) from {state.remote_branch_ref}..."
        )
        integrate_remote(self.repo, state, strategy, request.allow_unrelated_histories)

        done = "rebased" if strategy == Strategy.REBASE else "merged"
        self._callback.on_status(f"Successfully {done} remote changes", level="success")
        return Integrated(
            strategy=strategy, count=state.behind, remote_branch_ref=state.remote_branch_ref
        )

    def _diverged(
        self, state: DivergedState, strategy: Strategy, request: ReconciliationRequest
    ) -> SyncOutcome:
        # The resolved strategy only applies to the behind path
        return self.divergence_resolver.resolve(state, request)

    def _new_branch(
        self, state: NewBranchState, strategy: Strategy, request: ReconciliationRequest
    ) -> Pushed:
        self._callback.on_progress(f"Creating new remote branch {state.remote_branch_ref}...")
        push_set_upstream(self.repo, state)

        self._callback.on_status(
            "Successfully created remote branch and pushed commits", level="success"
        )
        self._callback.on_info(f"Upstream tracking set to {state.remote_branch_ref}")
        return Pushed(
            count=state.ahead,
            remote_branch_ref=state.remote_branch_ref,
            upstream_set=True,
        )
