"""
Branch state analysis.

Derives the reconciliation state of a branch from live adapter queries.
Must run after the fetch so ahead/behind reflect the remote's current refs.
"""

from __future__ import annotations

import logging

from easygit.core.repository import RepositoryAdapter
from easygit.core.sync.models import (
    AheadState,
    BehindState,
    BranchState,
    Classification,
    DivergedState,
    NewBranchState,
    UpToDateState,
)

logger = logging.getLogger(__name__)


def classify(remote_branch_exists: bool, ahead: int, behind: int) -> Classification:
    """
    Classify a branch relationship.

    Precedence: a missing remote branch always means ``new-branch``,
    regardless of the counts. Working-tree state plays no part.

    Example:
        >>> classify(True, 3, 0)
        <Classification.AHEAD: 'ahead'>
        >>> classify(False, 0, 5)
        <Classification.NEW_BRANCH: 'new-branch'>
    """
    if not remote_branch_exists:
        return Classification.NEW_BRANCH
    if ahead == 0 and behind == 0:
        return Classification.UP_TO_DATE
    if ahead > 0 and behind == 0:
        return Classification.AHEAD
    if ahead == 0 and behind > 0:
        return Classification.BEHIND
    return Classification.DIVERGED


def build_branch_state(
    current_branch: str,
    remote_name: str,
    remote_branch_exists: bool,
    ahead: int,
    behind: int,
    working_tree_dirty: bool,
) -> BranchState:
    """Construct the BranchState variant matching ``classify``."""
    common = {
        "current_branch": current_branch,
        "remote_name": remote_name,
        "remote_branch_ref": f"{remote_name}/{current_branch}",
        "working_tree_dirty": working_tree_dirty,
    }
    classification = classify(remote_branch_exists, ahead, behind)

    if classification == Classification.NEW_BRANCH:
        return NewBranchState(ahead=ahead, **common)
    if classification == Classification.UP_TO_DATE:
        return UpToDateState(**common)
    if classification == Classification.AHEAD:
        return AheadState(ahead=ahead, **common)
    if classification == Classification.BEHIND:
        return BehindState(behind=behind, **common)
    return DivergedState(ahead=ahead, behind=behind, **common)


class BranchStateAnalyzer:
    """Computes a fresh BranchState on every call; nothing is cached."""

    def __init__(self, repo: RepositoryAdapter) -> None:
        self.repo = repo

    def analyze(self, remote: str, branch: str | None = None) -> BranchState:
        """
        Analyze ``branch`` (default: current branch) against ``remote``.

        Args:
            remote: Remote name
            branch: Explicit branch override

        Returns:
            The classified BranchState
        """
        current_branch = branch or self.repo.current_branch()
        exists = self.repo.remote_branch_exists(remote, current_branch)

        if exists:
            ahead, behind = self.repo.ahead_behind(remote, current_branch)
        else:
            ahead, behind = self.repo.unpushed_count(remote, current_branch), 0

        dirty = self.repo.is_working_tree_dirty()

        state = build_branch_state(current_branch, remote, exists, ahead, behind, dirty)
        logger.debug(
            "Branch %s vs %s: %s (ahead=%d, behind=%d, dirty=%s)",
            current_branch,
            state.remote_branch_ref,
            state.classification.value,
            ahead,
            behind,
            dirty,
        )
        return state
