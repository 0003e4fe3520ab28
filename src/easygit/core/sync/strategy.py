"""
Integration strategy resolution.

Precedence: explicit --rebase > explicit --merge > configured default >
rebase.
"""

from __future__ import annotations

from typing import Protocol

from easygit.core.sync.models import ReconciliationRequest, Strategy, StrategyOverride

FALLBACK_STRATEGY = Strategy.REBASE


class StrategyConfigStore(Protocol):
    """Read access to the persisted default strategy."""

    def get_default_strategy(self) -> str | None:
        """Return "rebase", "merge", or None when unset."""
        ...


def resolve_strategy(
    request: ReconciliationRequest, config_store: StrategyConfigStore | None = None
) -> Strategy:
    """
    Pick the strategy for integrating remote commits.

    Only the ``behind`` path uses this; the diverged menu asks separately.

    Args:
        request: Current reconciliation request
        config_store: Source of the persisted default (read at most once)

    Returns:
        The resolved Strategy
    """
    if request.strategy_override == StrategyOverride.REBASE:
        return Strategy.REBASE
    if request.strategy_override == StrategyOverride.MERGE:
        return Strategy.MERGE

    if config_store is not None:
        configured = config_store.get_default_strategy()
        if configured in (Strategy.REBASE.value, Strategy.MERGE.value):
            return Strategy(configured)

    return FALLBACK_STRATEGY
