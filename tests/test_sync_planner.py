"""
Tests for dry-run planning.
"""

from easygit.core.sync.analyzer import build_branch_state
from easygit.core.sync.models import (
    DryRunPlan,
    ForceMode,
    ReconciliationRequest,
    Strategy,
)
from easygit.core.sync.planner import plan_actions


def _state(exists=True, ahead=0, behind=0, dirty=False):
    return build_branch_state("main", "origin", exists, ahead, behind, dirty)


class TestPlanActions:
    def test_up_to_date(self):
        plan = plan_actions(_state(), Strategy.REBASE, ReconciliationRequest())

        assert isinstance(plan, DryRunPlan)
        assert plan.actions == ["No action needed - branch is up to date"]
        assert plan.will_stash is False

    def test_ahead_mentions_push_and_force(self):
        request = ReconciliationRequest(force_mode=ForceMode.FORCE_WITH_LEASE)
        plan = plan_actions(_state(ahead=3), Strategy.REBASE, request)

        assert plan.actions == ["Push 3 commit(s) to origin/main (--force-with-lease)"]

    def test_behind_uses_strategy(self):
        rebase = plan_actions(_state(behind=2), Strategy.REBASE, ReconciliationRequest())
        merge = plan_actions(_state(behind=2), Strategy.MERGE, ReconciliationRequest())

        assert rebase.actions == ["Rebase onto 2 commit(s) from origin/main"]
        assert merge.actions == ["Merge 2 commit(s) from origin/main"]
        assert merge.strategy == Strategy.MERGE

    def test_diverged_lists_menu(self):
        plan = plan_actions(_state(ahead=1, behind=4), Strategy.REBASE, ReconciliationRequest())

        joined = "\n".join(plan.actions)
        assert "1 local and 4 remote" in joined
        assert "rebase" in joined
        assert "merge" in joined
        assert "force push with lease" in joined
        assert "cancel" in joined

    def test_new_branch(self):
        state = _state(exists=False, ahead=2)
        plan = plan_actions(state, Strategy.REBASE, ReconciliationRequest())

        assert plan.actions[0] == "Create new remote branch origin/main"
        assert "set upstream" in plan.actions[1]

    def test_dirty_tree_wraps_actions_with_stash(self):
        plan = plan_actions(_state(behind=1, dirty=True), Strategy.REBASE, ReconciliationRequest())

        assert plan.will_stash is True
        assert plan.actions[0] == "Stash uncommitted changes"
        assert plan.actions[-1] == "Restore stashed changes"

    def test_dirty_ahead_does_not_stash(self):
        plan = plan_actions(_state(ahead=1, dirty=True), Strategy.REBASE, ReconciliationRequest())
        assert plan.will_stash is False

    def test_fetched_flag(self):
        plan = plan_actions(_state(), Strategy.REBASE, ReconciliationRequest(), fetched=False)
        assert plan.fetched is False

    def test_pure(self):
        state = _state(ahead=1, behind=1, dirty=True)
        request = ReconciliationRequest()
        assert plan_actions(state, Strategy.MERGE, request) == plan_actions(
            state, Strategy.MERGE, request
        )
