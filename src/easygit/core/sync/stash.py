"""
Stash safety wrapper.

Brackets the executor with a conditional auto-stash and exactly one restore
attempt on every exit path: success, typed failure, user cancellation, and
interrupts. A failed restore is a warning attached to whatever the guarded
action produced; it never replaces the primary error.
"""

from __future__ import annotations

import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TypeVar

from easygit.core.repository import GitError, RepositoryAdapter
from easygit.core.sync.errors import EasyGitError, GitOperationFailed
from easygit.core.sync.events import SyncEventCallback
from easygit.core.sync.models import BranchState, Classification, StashRestoreWarning

logger = logging.getLogger(__name__)

STASH_LABEL_PREFIX = "easygit-sync-auto-stash"

T = TypeVar("T")


def should_stash(state: BranchState) -> bool:
    """
    Whether a sync of ``state`` needs the working tree stashed.

    An ahead-only push never touches the working tree.
    """
    return state.working_tree_dirty and state.classification != Classification.AHEAD


def make_stash_label() -> str:
    """Label unique to one invocation, so pre-existing stashes are never touched."""
    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
    return f"{STASH_LABEL_PREFIX}-{stamp}-{secrets.token_hex(3)}"


@dataclass
class StashRecord:
    """The auto-created stash of one invocation."""

    label: str
    created: bool = False
    restore_attempted: bool = False


class StashSafetyWrapper:
    """
    Runs an action with the working tree safely stashed.

    Example:
        >>> wrapper = StashSafetyWrapper(repo, callback)
        >>> outcome = wrapper.run(state, lambda: executor.execute(state, strategy, request))
    """

    def __init__(self, repo: RepositoryAdapter, callback: SyncEventCallback) -> None:
        self.repo = repo
        self._callback = callback

    def run(self, state: BranchState, action: Callable[[], T]) -> T:
        """
        Execute ``action`` inside the stash bracket.

        Args:
            state: Branch state that decides whether to stash
            action: The guarded step

        Returns:
            Whatever ``action`` returns, with a restore warning appended to its
            ``warnings`` list when the pop failed

        Raises:
            Whatever ``action`` raises, unchanged (restore warnings attached to
            EasyGitError instances)
        """
        record = self._stash(state)

        try:
            result = action()
        except EasyGitError as e:
            warning = self._restore(record)
            if warning is not None:
                e.warnings.append(warning)
            raise
        except BaseException:
            self._restore(record)
            raise

        warning = self._restore(record)
        if warning is not None:
            warnings = getattr(result, "warnings", None)
            if isinstance(warnings, list):
                warnings.append(warning)
        return result

    def _stash(self, state: BranchState) -> StashRecord | None:
        if not should_stash(state):
            return None

        record = StashRecord(label=make_stash_label())
        self._callback.on_progress("Stashing uncommitted changes...")
        try:
            record.created = self.repo.stash_push(record.label)
        except GitError as e:
            raise GitOperationFailed(
                "Could not stash uncommitted changes; nothing was synced", stderr=e.stderr
            ) from e

        if record.created:
            logger.info("Created auto-stash %s", record.label)
        else:
            logger.debug("Nothing to stash for %s", state.current_branch)
            return None
        return record

    def _restore(self, record: StashRecord | None) -> StashRestoreWarning | None:
        if record is None or record.restore_attempted:
            return None
        record.restore_attempted = True

        self._callback.on_progress("Restoring stashed changes...")
        try:
            self.repo.stash_pop(record.label)
        except GitError as e:
            logger.warning("Failed to restore auto-stash %s: %s", record.label, e.stderr or e)
            warning = StashRestoreWarning(
                label=record.label,
                message="Could not restore stashed changes automatically",
                recovery_command="git stash list  # then: git stash pop stash@{N}",
            )
            self._callback.on_status(warning.message, level="warning")
            self._callback.on_info(f"Run {warning.recovery_command!r} to restore them")
            return warning

        self._callback.on_status("Restored stashed changes", level="success")
        return None
