"""
Tests for the reconciliation service.

Covers the end-to-end flow against a mocked adapter: offline queueing,
idempotent syncs, dry runs, and stash bracketing of the executor.
"""

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from easygit.core.queue import OfflineQueue, OfflineQueueReader
from easygit.core.repository import GitError, GitRepository, IntegrationConflictError
from easygit.core.sync.errors import (
    BranchNotCheckedOut,
    ConfigError,
    GitOperationFailed,
    ReconciliationConflict,
    UserCancelled,
)
from easygit.core.sync.models import (
    Classification,
    DryRunPlan,
    Integrated,
    Pushed,
    Queued,
    ReconciliationRequest,
    Strategy,
    StrategyOverride,
    UpToDate,
)
from easygit.core.sync.service import ReconciliationService

OFFLINE = GitError("ls-remote failed", stderr="ssh: Could not resolve hostname github.com")


@pytest.fixture
def prompter():
    prompter = MagicMock()
    prompter.confirm_force_push.return_value = False
    return prompter


@pytest.fixture
def queue(tmp_path):
    return OfflineQueue(tmp_path / "queue" / "sync-queue.jsonl")


@pytest.fixture
def service(mock_repo, prompter, queue):
    return ReconciliationService(mock_repo, prompter, queue=queue)


class TestOnline:
    def test_probe_then_fetch_then_analyze(self, service, mock_repo):
        service.reconcile(ReconciliationRequest())

        names = [name for name, _args, _kwargs in mock_repo.method_calls]
        assert names.index("probe_reachable") < names.index("fetch")
        assert names.index("fetch") < names.index("ahead_behind")

    def test_up_to_date_is_idempotent(self, service, mock_repo, mutating_calls):
        first = service.reconcile(ReconciliationRequest())
        second = service.reconcile(ReconciliationRequest())

        assert isinstance(first, UpToDate)
        assert isinstance(second, UpToDate)
        assert mutating_calls(mock_repo) == []

    def test_ahead_pushes(self, service, mock_repo):
        mock_repo.ahead_behind.return_value = (3, 0)

        outcome = service.reconcile(ReconciliationRequest())

        assert isinstance(outcome, Pushed)
        assert outcome.count == 3

    def test_behind_uses_configured_strategy(self, mock_repo, prompter, queue):
        store = MagicMock()
        store.get_default_strategy.return_value = "merge"
        service = ReconciliationService(mock_repo, prompter, config_store=store, queue=queue)
        mock_repo.ahead_behind.return_value = (0, 2)

        outcome = service.reconcile(ReconciliationRequest())

        assert isinstance(outcome, Integrated)
        assert outcome.strategy == Strategy.MERGE
        mock_repo.integrate.assert_called_once_with("merge", "origin/main", False)

    def test_behind_dirty_stashes_around_integration(self, service, mock_repo, mutating_calls):
        mock_repo.ahead_behind.return_value = (0, 1)
        mock_repo.is_working_tree_dirty.return_value = True

        service.reconcile(ReconciliationRequest())

        assert mutating_calls(mock_repo) == ["stash_push", "integrate", "stash_pop"]

    def test_conflict_still_restores_stash(self, service, mock_repo):
        mock_repo.ahead_behind.return_value = (0, 1)
        mock_repo.is_working_tree_dirty.return_value = True
        mock_repo.integrate.side_effect = IntegrationConflictError("c", conflicted_paths=["x"])

        with pytest.raises(ReconciliationConflict):
            service.reconcile(ReconciliationRequest())

        mock_repo.stash_pop.assert_called_once()
        mock_repo.push.assert_not_called()

    def test_diverged_cancel_restores_stash(self, service, mock_repo, prompter, mutating_calls):
        mock_repo.ahead_behind.return_value = (1, 1)
        mock_repo.is_working_tree_dirty.return_value = True
        prompter.choose_divergence.return_value = "cancel"

        with pytest.raises(UserCancelled):
            service.reconcile(ReconciliationRequest())

        assert mutating_calls(mock_repo) == ["stash_push", "stash_pop"]

    def test_unknown_remote(self, service, mock_repo):
        with pytest.raises(ConfigError):
            service.reconcile(ReconciliationRequest(remote_name="upstream"))
        mock_repo.fetch.assert_not_called()

    def test_fetch_failure(self, service, mock_repo):
        mock_repo.fetch.side_effect = GitError("fetch failed", stderr="fatal: bad object")

        with pytest.raises(GitOperationFailed, match="fetch"):
            service.reconcile(ReconciliationRequest())

        mock_repo.ahead_behind.assert_not_called()


class TestOffline:
    def test_unreachable_remote_is_queued(self, service, mock_repo, queue, mutating_calls):
        mock_repo.probe_reachable.side_effect = OFFLINE
        request = ReconciliationRequest(strategy_override=StrategyOverride.MERGE)

        outcome = service.reconcile(request)

        assert isinstance(outcome, Queued)
        assert outcome.persisted is True
        assert outcome.queue_path == queue.queue_path
        mock_repo.fetch.assert_not_called()
        assert mutating_calls(mock_repo) == []

        operations = OfflineQueueReader(queue.queue_path).list_operations()
        assert len(operations) == 1
        assert operations[0].id == outcome.operation_id
        assert operations[0].branch == "main"
        assert operations[0].working_directory == "/work/project"
        assert operations[0].request == request

    def test_network_loss_during_fetch_is_queued(self, service, mock_repo):
        mock_repo.fetch.side_effect = OFFLINE

        outcome = service.reconcile(ReconciliationRequest())

        assert isinstance(outcome, Queued)

    def test_branch_override_is_queued(self, service, mock_repo, queue):
        mock_repo.probe_reachable.side_effect = OFFLINE

        service.reconcile(ReconciliationRequest(branch_name="feature"))

        line = queue.queue_path.read_text().strip()
        assert json.loads(line)["branch"] == "feature"
        mock_repo.current_branch.assert_not_called()

    def test_queue_write_failure(self, mock_repo, prompter, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        queue = OfflineQueue(blocker / "sync-queue.jsonl")
        service = ReconciliationService(mock_repo, prompter, queue=queue)
        mock_repo.probe_reachable.side_effect = OFFLINE

        outcome = service.reconcile(ReconciliationRequest())

        assert isinstance(outcome, Queued)
        assert outcome.persisted is False
        assert outcome.operation_id is None


class TestDryRun:
    def test_no_mutating_calls(self, service, mock_repo, mutating_calls):
        mock_repo.ahead_behind.return_value = (2, 3)
        mock_repo.is_working_tree_dirty.return_value = True

        outcome = service.reconcile(ReconciliationRequest(dry_run=True))

        assert isinstance(outcome, DryRunPlan)
        assert outcome.state.classification == Classification.DIVERGED
        assert outcome.will_stash is True
        assert outcome.fetched is True
        assert mutating_calls(mock_repo) == []

    def test_offline_dry_run_is_not_queued(self, service, mock_repo, queue):
        mock_repo.probe_reachable.side_effect = OFFLINE
        mock_repo.ahead_behind.return_value = (1, 0)

        outcome = service.reconcile(ReconciliationRequest(dry_run=True))

        assert isinstance(outcome, DryRunPlan)
        assert outcome.fetched is False
        assert not queue.queue_path.exists()
        mock_repo.fetch.assert_not_called()


class TestBranchOverride:
    """--branch naming a branch other than the checked-out one."""

    def test_behind_other_branch_is_refused(self, service, mock_repo, mutating_calls):
        mock_repo.ahead_behind.return_value = (0, 2)

        with pytest.raises(BranchNotCheckedOut) as exc_info:
            service.reconcile(ReconciliationRequest(branch_name="feature"))

        assert exc_info.value.checked_out == "main"
        assert "git checkout feature" in exc_info.value.solution
        assert mutating_calls(mock_repo) == []

    def test_diverged_other_branch_is_refused_before_prompting(
        self, service, mock_repo, prompter, mutating_calls
    ):
        mock_repo.ahead_behind.return_value = (1, 1)

        with pytest.raises(BranchNotCheckedOut):
            service.reconcile(ReconciliationRequest(branch_name="feature"))

        prompter.choose_divergence.assert_not_called()
        assert mutating_calls(mock_repo) == []

    def test_dry_run_other_branch_is_refused(self, service, mock_repo):
        mock_repo.ahead_behind.return_value = (0, 1)

        with pytest.raises(BranchNotCheckedOut):
            service.reconcile(ReconciliationRequest(branch_name="feature", dry_run=True))

    def test_ahead_other_branch_pushes_it(self, service, mock_repo):
        mock_repo.ahead_behind.return_value = (2, 0)

        outcome = service.reconcile(ReconciliationRequest(branch_name="feature"))

        assert isinstance(outcome, Pushed)
        assert outcome.remote_branch_ref == "origin/feature"
        assert mock_repo.push.call_args.args[:2] == ("origin", "feature")
        mock_repo.integrate.assert_not_called()

    def test_behind_checked_out_branch_named_explicitly(self, service, mock_repo):
        mock_repo.ahead_behind.return_value = (0, 1)

        outcome = service.reconcile(ReconciliationRequest(branch_name="main"))

        assert isinstance(outcome, Integrated)
        mock_repo.integrate.assert_called_once_with("rebase", "origin/main", False)


@pytest.mark.integration
class TestBranchOverrideOnRealRepository:
    def test_behind_other_branch_leaves_both_branches_alone(
        self,
        local_clone: Path,
        other_clone: Path,
        prompter,
        queue,
        run_git,
        commit_file,
    ):
        run_git(other_clone, "checkout", "-b", "feature")
        commit_file(other_clone, "f1.txt", "one\n")
        run_git(other_clone, "push", "origin", "feature")

        run_git(local_clone, "fetch", "origin")
        run_git(local_clone, "branch", "feature", "origin/feature")

        commit_file(other_clone, "f2.txt", "two\n")
        run_git(other_clone, "push", "origin", "feature")

        main_before = run_git(local_clone, "rev-parse", "main")
        feature_before = run_git(local_clone, "rev-parse", "feature")
        service = ReconciliationService(GitRepository(local_clone), prompter, queue=queue)

        with pytest.raises(BranchNotCheckedOut):
            service.reconcile(ReconciliationRequest(branch_name="feature"))

        assert run_git(local_clone, "rev-parse", "main") == main_before
        assert run_git(local_clone, "rev-parse", "feature") == feature_before
        assert run_git(local_clone, "rev-parse", "--abbrev-ref", "HEAD") == "main"
