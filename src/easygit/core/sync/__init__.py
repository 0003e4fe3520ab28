"""
Sync reconciliation engine.

Classifies a local branch against its remote counterpart and performs the
matching reconciliation. The entry point lives in
``easygit.core.sync.service``.
"""

from easygit.core.sync.analyzer import classify
from easygit.core.sync.errors import (
    BranchNotCheckedOut,
    ConfigError,
    EasyGitError,
    GitOperationFailed,
    NetworkUnavailable,
    PushRejected,
    ReconciliationConflict,
    StaleLeaseRejected,
    UserCancelled,
)
from easygit.core.sync.models import (
    AheadState,
    BehindState,
    BranchState,
    Classification,
    DivergedState,
    DivergenceChoice,
    DryRunPlan,
    ForceMode,
    Integrated,
    NewBranchState,
    Pushed,
    PushMode,
    Queued,
    ReconciliationRequest,
    StashRestoreWarning,
    Strategy,
    StrategyOverride,
    SyncOutcome,
    UpToDate,
    UpToDateState,
)
from easygit.core.sync.planner import plan_actions
from easygit.core.sync.strategy import resolve_strategy

__all__ = [
    # Models
    "AheadState",
    "BehindState",
    "BranchState",
    "Classification",
    "DivergedState",
    "DivergenceChoice",
    "DryRunPlan",
    "ForceMode",
    "Integrated",
    "NewBranchState",
    "PushMode",
    "Pushed",
    "Queued",
    "ReconciliationRequest",
    "StashRestoreWarning",
    "Strategy",
    "StrategyOverride",
    "SyncOutcome",
    "UpToDate",
    "UpToDateState",
    # Errors
    "BranchNotCheckedOut",
    "ConfigError",
    "EasyGitError",
    "GitOperationFailed",
    "NetworkUnavailable",
    "PushRejected",
    "ReconciliationConflict",
    "StaleLeaseRejected",
    "UserCancelled",
    # Functions
    "classify",
    "plan_actions",
    "resolve_strategy",
]
