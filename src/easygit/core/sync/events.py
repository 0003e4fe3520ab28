"""
Callbacks the reconciliation engine uses to talk to its front end.

The engine never prints or prompts on its own; the CLI supplies
implementations of these protocols.
"""

from __future__ import annotations

from typing import Protocol

from easygit.core.sync.models import DivergedState


class SyncEventCallback(Protocol):
    """Protocol for reconciliation progress output."""

    def on_progress(self, message: str) -> None:
        """Called when a step starts (e.g., "Fetching from origin...")."""
        ...

    def on_status(self, message: str, level: str = "info") -> None:
        """Called with a step result.

        Args:
            message: Status message (e.g., "Stashed uncommitted changes")
            level: Message level (info, success, warning, error)
        """
        ...

    def on_info(self, message: str) -> None:
        """Called with supplementary detail."""
        ...


class DivergencePrompter(Protocol):
    """Interactive decisions needed when history has diverged."""

    def choose_divergence(self, state: DivergedState) -> str:
        """Return one of the DivergenceChoice values."""
        ...

    def confirm_force_push(self, state: DivergedState) -> bool:
        """Second, explicit confirmation before overwriting remote history."""
        ...


class _NoOpCallback:
    """Default no-op callback implementation."""

    def on_progress(self, message: str) -> None:
        pass

    def on_status(self, message: str, level: str = "info") -> None:
        pass

    def on_info(self, message: str) -> None:
        pass
