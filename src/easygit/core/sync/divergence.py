"""
Divergence resolution.

When local and remote both have unique commits the user picks one of four
choices. Integration always happens before the push, so a conflict stops
the flow before anything reaches the remote.
"""

from __future__ import annotations

import logging

from easygit.core.repository import RepositoryAdapter
from easygit.core.sync.errors import UserCancelled
from easygit.core.sync.events import DivergencePrompter, SyncEventCallback
from easygit.core.sync.models import (
    DivergedState,
    DivergenceChoice,
    Integrated,
    PushMode,
    Pushed,
    ReconciliationRequest,
    Strategy,
    SyncOutcome,
)
from easygit.core.sync.steps import integrate_remote, push_branch

logger = logging.getLogger(__name__)


class DivergenceResolver:
    """Runs the user's choice for a diverged branch."""

    def __init__(
        self,
        repo: RepositoryAdapter,
        prompter: DivergencePrompter,
        callback: SyncEventCallback,
    ) -> None:
        self.repo = repo
        self.prompter = prompter
        self._callback = callback

    def resolve(self, state: DivergedState, request: ReconciliationRequest) -> SyncOutcome:
        """
        Ask for a choice and execute it.

        Raises:
            UserCancelled: Cancel chosen or the force push was not confirmed
            ReconciliationConflict: Integration stopped on conflicts (no push ran)
            StaleLeaseRejected: The remote moved before the force push
        """
        self._callback.on_status("Branch has diverged from remote", level="warning")
        self._callback.on_info(f"Local: {state.ahead} commit(s) not on {state.remote_branch_ref}")
        self._callback.on_info(f"Remote: {state.behind} commit(s) not on {state.current_branch}")

        choice = DivergenceChoice(self.prompter.choose_divergence(state))
        logger.info("Divergence choice for %s: %s", state.current_branch, choice.value)

        if choice == DivergenceChoice.CANCEL:
            raise UserCancelled()
        if choice == DivergenceChoice.FORCE_WITH_LEASE:
            return self._force_push(state)
        return self._integrate_and_push(state, Strategy(choice.value), request)

    def _integrate_and_push(
        self, state: DivergedState, strategy: Strategy, request: ReconciliationRequest
    ) -> Integrated:
        if strategy == Strategy.REBASE:
            self._callback.on_progress("Rebasing local commits on top of remote...")
        else:
            self._callback.on_progress("Merging remote changes...")

        integrate_remote(self.repo, state, strategy, request.allow_unrelated_histories)

        self._callback.on_progress(f"Pushing to {state.remote_branch_ref}...")
        push_branch(self.repo, state, PushMode.NORMAL)

        verb = "rebased" if strategy == Strategy.REBASE else "merged"
        self._callback.on_status(f"Successfully {verb} and pushed", level="success")
        return Integrated(
            strategy=strategy,
            count=state.behind,
            remote_branch_ref=state.remote_branch_ref,
            pushed=True,
        )

    def _force_push(self, state: DivergedState) -> Pushed:
        self._callback.on_status(
            f"Force push will discard {state.behind} remote commit(s) on "
            f"{state.remote_branch_ref}",
            level="warning",
        )
        if not self.prompter.confirm_force_push(state):
            raise UserCancelled("Force push cancelled by user")

        self._callback.on_progress("Force pushing with lease...")
        push_branch(self.repo, state, PushMode.FORCE_WITH_LEASE)

        self._callback.on_status("Force push completed", level="success")
        self._callback.on_info("Notify your team about the history rewrite")
        return Pushed(
            count=state.ahead,
            remote_branch_ref=state.remote_branch_ref,
            mode=PushMode.FORCE_WITH_LEASE,
        )
