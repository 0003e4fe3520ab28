"""
Connectivity probing.

Checks that a remote is configured and answers a read-only request before
any mutating call is attempted. Network-class failures are returned as a
NetworkUnavailable signal so the caller can queue the sync instead.
"""

from __future__ import annotations

import logging

from easygit.core.repository import GitError, RepositoryAdapter
from easygit.core.sync.errors import ConfigError, NetworkUnavailable

logger = logging.getLogger(__name__)

# Lower-cased fragments of ssh/curl/libc errors that mean "no network"
NETWORK_ERROR_PATTERNS = (
    "could not resolve hostname",
    "could not resolve host",
    "connection refused",
    "network is unreachable",
    "no route to host",
    "connection timed out",
    "temporary failure in name resolution",
)


def is_network_failure(message: str) -> bool:
    """Whether a git error message describes a network-class failure."""
    lowered = message.lower()
    return any(pattern in lowered for pattern in NETWORK_ERROR_PATTERNS)


class ConnectivityProber:
    """Verifies a remote exists and is reachable."""

    def __init__(self, repo: RepositoryAdapter) -> None:
        self.repo = repo

    def probe(self, remote: str) -> NetworkUnavailable | None:
        """
        Probe ``remote``.

        Returns:
            None when reachable, NetworkUnavailable when the network is down

        Raises:
            ConfigError: If ``remote`` is not configured
            GitError: For any failure that is not network related
        """
        configured = self.repo.list_configured_remotes()
        if remote not in configured:
            raise ConfigError(remote, configured)

        try:
            self.repo.probe_reachable(remote)
        except GitError as e:
            detail = e.stderr or str(e)
            if is_network_failure(detail):
                logger.warning("Remote %s unreachable: %s", remote, detail)
                return NetworkUnavailable(remote=remote, detail=detail)
            raise

        return None
