"""
Repository adapter.

Exposes the branch/remote/status queries and mutating git operations the
reconciliation engine consumes, behind the RepositoryAdapter protocol.
"""

from easygit.core.repository.adapter import (
    GitError,
    IntegrationConflictError,
    PushRejectedError,
    RepositoryAdapter,
    StaleLeaseError,
)
from easygit.core.repository.git_repository import GitRepository

__all__ = [
    "GitError",
    "GitRepository",
    "IntegrationConflictError",
    "PushRejectedError",
    "RepositoryAdapter",
    "StaleLeaseError",
]
