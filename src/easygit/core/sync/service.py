"""
Reconciliation service.

The single entry point of the sync engine. Sequences the components:

    probe -> (unreachable: queue) -> fetch -> analyze -> resolve strategy
          -> (dry run: plan) -> stash bracket { executor [-> divergence] }
"""

from __future__ import annotations

import logging

from easygit.core.queue import OfflineQueue
from easygit.core.repository import GitError, RepositoryAdapter
from easygit.core.sync.analyzer import BranchStateAnalyzer
from easygit.core.sync.connectivity import ConnectivityProber, is_network_failure
from easygit.core.sync.divergence import DivergenceResolver
from easygit.core.sync.errors import (
    BranchNotCheckedOut,
    GitOperationFailed,
    NetworkUnavailable,
)
from easygit.core.sync.events import DivergencePrompter, SyncEventCallback, _NoOpCallback
from easygit.core.sync.executor import SyncExecutor
from easygit.core.sync.models import (
    BranchState,
    Classification,
    Queued,
    ReconciliationRequest,
    Strategy,
    SyncOutcome,
)
from easygit.core.sync.planner import plan_actions
from easygit.core.sync.stash import StashSafetyWrapper
from easygit.core.sync.strategy import StrategyConfigStore, resolve_strategy

logger = logging.getLogger(__name__)


class ReconciliationService:
    """
    Runs one sync of a branch against its remote.

    Example:
        >>> service = ReconciliationService(GitRepository(), prompter, callback)
        >>> outcome = service.reconcile(ReconciliationRequest(remote_name="origin"))
        >>> outcome.kind
        'pushed'
    """

    def __init__(
        self,
        repo: RepositoryAdapter,
        prompter: DivergencePrompter,
        callback: SyncEventCallback | None = None,
        config_store: StrategyConfigStore | None = None,
        queue: OfflineQueue | None = None,
    ) -> None:
        self.repo = repo
        self.config_store = config_store
        self.queue = queue or OfflineQueue()
        self._callback = callback or _NoOpCallback()

        self.prober = ConnectivityProber(repo)
        self.analyzer = BranchStateAnalyzer(repo)
        self.stash = StashSafetyWrapper(repo, self._callback)
        self.executor = SyncExecutor(
            repo, DivergenceResolver(repo, prompter, self._callback), self._callback
        )

    def reconcile(self, request: ReconciliationRequest) -> SyncOutcome:
        """
        Reconcile the local branch with its remote counterpart.

        Args:
            request: Parameters of this invocation

        Returns:
            The terminal outcome (UpToDate, Pushed, Integrated, Queued or DryRunPlan)

        Raises:
            EasyGitError: A typed failure; stash restore warnings are attached
            BranchNotCheckedOut: --branch names another branch that needs integration
            GitError: An unexpected adapter failure outside a translated step
        """
        remote = request.remote_name

        self._callback.on_progress(f"Checking connectivity to {remote}...")
        offline = self.prober.probe(remote)

        if offline is None:
            offline = self._fetch(remote)

        if offline is not None and not request.dry_run:
            return self._enqueue(request, offline)

        self._callback.on_progress("Analyzing branch state...")
        state = self.analyzer.analyze(remote, request.branch_name)
        self._check_checked_out(state, request)
        strategy = resolve_strategy(request, self.config_store)
        logger.debug("Resolved strategy %s for %s", strategy.value, state.current_branch)

        if request.dry_run:
            if offline is not None:
                self._callback.on_status(
                    f"{remote} is unreachable; planning from last fetched state",
                    level="warning",
                )
            return plan_actions(state, strategy, request, fetched=offline is None)

        return self._execute(state, request, strategy)

    def _check_checked_out(self, state: BranchState, request: ReconciliationRequest) -> None:
        """Behind and diverged syncs rewrite HEAD, so they need the branch checked out."""
        if request.branch_name is None:
            return
        if state.classification not in (Classification.BEHIND, Classification.DIVERGED):
            return

        checked_out = self.repo.current_branch()
        if checked_out != state.current_branch:
            raise BranchNotCheckedOut(state.current_branch, checked_out)

    def _fetch(self, remote: str) -> NetworkUnavailable | None:
        self._callback.on_progress(f"Fetching from {remote}...")
        try:
            self.repo.fetch(remote)
        except GitError as e:
            detail = e.stderr or str(e)
            if is_network_failure(detail):
                logger.warning("Fetch from %s lost the network: %s", remote, detail)
                return NetworkUnavailable(remote=remote, detail=detail)
            raise GitOperationFailed(f"Failed to fetch from {remote}", stderr=e.stderr) from e
        return None

    def _execute(
        self, state: BranchState, request: ReconciliationRequest, strategy: Strategy
    ) -> SyncOutcome:
        return self.stash.run(state, lambda: self.executor.execute(state, strategy, request))

    def _enqueue(self, request: ReconciliationRequest, offline: NetworkUnavailable) -> Queued:
        branch = request.branch_name or self.repo.current_branch()
        self._callback.on_status(f"Cannot reach {offline.remote}", level="warning")

        operation = self.queue.enqueue(request, branch, self.repo.working_dir)
        if operation is None:
            self._callback.on_status("Could not save the sync to the offline queue", level="error")
            return Queued(operation_id=None, queue_path=self.queue.queue_path, persisted=False)

        self._callback.on_status("Sync queued until the remote is reachable", level="info")
        self._callback.on_info(f"Operation {operation.id} saved to {self.queue.queue_path}")
        return Queued(operation_id=operation.id, queue_path=self.queue.queue_path)
