"""
Data models for the reconciliation engine.

Defines the immutable request for one sync invocation, the classified
branch state (a closed tagged union over the five reconciliation states),
and the terminal outcomes returned to the caller.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class Classification(str, Enum):
    """Relationship between a local branch and its remote counterpart."""

    UP_TO_DATE = "up-to-date"
    AHEAD = "ahead"
    BEHIND = "behind"
    DIVERGED = "diverged"
    NEW_BRANCH = "new-branch"


class Strategy(str, Enum):
    """How remote commits are integrated into the local branch."""

    REBASE = "rebase"
    MERGE = "merge"


class StrategyOverride(str, Enum):
    """Strategy requested explicitly on the command line."""

    REBASE = "rebase"
    MERGE = "merge"
    NONE = "none"


class ForceMode(str, Enum):
    """Force flag requested for pushes of an ahead branch."""

    NONE = "none"
    FORCE = "force"
    FORCE_WITH_LEASE = "force-with-lease"


class PushMode(str, Enum):
    """Push variant passed to the repository adapter."""

    NORMAL = "normal"
    FORCE = "force"
    FORCE_WITH_LEASE = "force-with-lease"

    @classmethod
    def from_force_mode(cls, force_mode: ForceMode) -> PushMode:
        return {
            ForceMode.NONE: cls.NORMAL,
            ForceMode.FORCE: cls.FORCE,
            ForceMode.FORCE_WITH_LEASE: cls.FORCE_WITH_LEASE,
        }[force_mode]


class DivergenceChoice(str, Enum):
    """The only ways out of a diverged history."""

    REBASE = "rebase"
    MERGE = "merge"
    FORCE_WITH_LEASE = "force-with-lease"
    CANCEL = "cancel"


class ReconciliationRequest(BaseModel):
    """
    Parameters of a single sync invocation.

    Frozen once constructed; the same request object is persisted verbatim
    when the operation is queued for later.

    Example:
        >>> request = ReconciliationRequest(remote_name="origin", dry_run=True)
        >>> request.strategy_override
        <StrategyOverride.NONE: 'none'>
    """

    model_config = ConfigDict(frozen=True)

    remote_name: str = Field(default="origin", description="Remote to reconcile against")
    branch_name: str | None = Field(
        default=None,
        description="Local branch to reconcile (defaults to the current branch)",
    )
    strategy_override: StrategyOverride = Field(
        default=StrategyOverride.NONE,
        description="Explicit --rebase/--merge choice",
    )
    force_mode: ForceMode = Field(
        default=ForceMode.NONE,
        description="Force mode for pushing an ahead branch",
    )
    dry_run: bool = Field(default=False, description="Report planned actions only")
    allow_unrelated_histories: bool = Field(
        default=False,
        description="Pass --allow-unrelated-histories to merges",
    )


# ==============================================================================
# Branch state (closed tagged union)
# ==============================================================================


class _BranchStateBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    current_branch: str
    remote_name: str
    remote_branch_ref: str = Field(description="Remote tracking ref, e.g. 'origin/main'")
    working_tree_dirty: bool = False

    @property
    def remote_branch_exists(self) -> bool:
        return True

    @property
    def ahead_count(self) -> int:
        return 0

    @property
    def behind_count(self) -> int:
        return 0


class UpToDateState(_BranchStateBase):
    """Local and remote point at the same history."""

    classification: Literal[Classification.UP_TO_DATE] = Classification.UP_TO_DATE


class AheadState(_BranchStateBase):
    """Local has commits the remote lacks; nothing to integrate."""

    classification: Literal[Classification.AHEAD] = Classification.AHEAD
    ahead: int = Field(gt=0)

    @property
    def ahead_count(self) -> int:
        return self.ahead


class BehindState(_BranchStateBase):
    """Remote has commits the local branch lacks."""

    classification: Literal[Classification.BEHIND] = Classification.BEHIND
    behind: int = Field(gt=0)

    @property
    def behind_count(self) -> int:
        return self.behind


class DivergedState(_BranchStateBase):
    """Both sides have unique commits; needs an explicit choice."""

    classification: Literal[Classification.DIVERGED] = Classification.DIVERGED
    ahead: int = Field(gt=0)
    behind: int = Field(gt=0)

    @property
    def ahead_count(self) -> int:
        return self.ahead

    @property
    def behind_count(self) -> int:
        return self.behind


class NewBranchState(_BranchStateBase):
    """The branch does not exist on the remote yet."""

    classification: Literal[Classification.NEW_BRANCH] = Classification.NEW_BRANCH
    ahead: int = Field(default=0, ge=0)

    @property
    def remote_branch_exists(self) -> bool:
        return False

    @property
    def ahead_count(self) -> int:
        return self.ahead


BranchState = Annotated[
    Union[UpToDateState, AheadState, BehindState, DivergedState, NewBranchState],
    Field(discriminator="classification"),
]


# ==============================================================================
# Outcomes
# ==============================================================================


class StashRestoreWarning(BaseModel):
    """Non-fatal report that auto-stashed changes could not be restored."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(description="Label of the stash entry that was left behind")
    message: str
    recovery_command: str = Field(default="git stash pop")


class _OutcomeBase(BaseModel):
    warnings: list[StashRestoreWarning] = Field(default_factory=list)


class UpToDate(_OutcomeBase):
    """Nothing to do."""

    kind: Literal["up-to-date"] = "up-to-date"
    current_branch: str
    remote_branch_ref: str


class Pushed(_OutcomeBase):
    """Local commits were pushed."""

    kind: Literal["pushed"] = "pushed"
    count: int
    remote_branch_ref: str
    mode: PushMode = PushMode.NORMAL
    upstream_set: bool = False


class Integrated(_OutcomeBase):
    """Remote commits were rebased or merged in (and optionally pushed)."""

    kind: Literal["integrated"] = "integrated"
    strategy: Strategy
    count: int
    remote_branch_ref: str
    pushed: bool = False


class Queued(_OutcomeBase):
    """The remote was unreachable and the request was queued for later."""

    kind: Literal["queued"] = "queued"
    operation_id: str | None
    queue_path: Path
    persisted: bool = True


class DryRunPlan(_OutcomeBase):
    """Actions a real run would take, computed without mutating anything."""

    kind: Literal["dry-run"] = "dry-run"
    state: BranchState
    strategy: Strategy
    actions: list[str]
    will_stash: bool
    fetched: bool = True


SyncOutcome = Annotated[
    Union[UpToDate, Pushed, Integrated, Queued, DryRunPlan],
    Field(discriminator="kind"),
]
