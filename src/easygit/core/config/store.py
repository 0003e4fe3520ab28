"""
Config-backed strategy store.

Bridges the layered configuration to the sync strategy resolver, which only
needs to know the user's preferred default strategy.
"""

from __future__ import annotations

from pathlib import Path

from .loader import load_config
from .models import EasyGitConfig


class ConfigStrategyStore:
    """
    Reads ``core.sync_strategy`` from the layered configuration.

    Example:
        >>> store = ConfigStrategyStore()
        >>> store.get_default_strategy()
        'rebase'
    """

    def __init__(
        self,
        config: EasyGitConfig | None = None,
        project_dir: Path | None = None,
    ) -> None:
        self._config = config
        self._project_dir = project_dir

    @property
    def config(self) -> EasyGitConfig:
        if self._config is None:
            self._config = load_config(self._project_dir)
        return self._config

    def get_default_strategy(self) -> str | None:
        return self.config.core.sync_strategy

    def get_default_remote(self) -> str:
        return self.config.core.default_remote
