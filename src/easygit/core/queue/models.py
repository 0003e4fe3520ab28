"""
Data models for the offline sync queue.
"""

from __future__ import annotations

import secrets
import time
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from easygit.core.sync.models import ReconciliationRequest


def generate_operation_id() -> str:
    """
    Generate a time-ordered operation ID.

    Millisecond timestamp plus a short random suffix, so IDs sort by creation
    time and two syncs queued in the same millisecond still differ.
    """
    return f"{time.time_ns() // 1_000_000}-{secrets.token_hex(2)}"


class QueuedOperation(BaseModel):
    """
    A sync request deferred because the remote was unreachable.

    Stored as one JSON line in the queue file and consumed by a later replay.

    Example:
        >>> op = QueuedOperation(
        ...     working_directory="/home/me/project",
        ...     branch="main",
        ...     request=ReconciliationRequest(remote_name="origin"),
        ... )
        >>> op.model_dump_json()
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=generate_operation_id, description="Unique operation ID")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the operation was queued (UTC)",
    )
    working_directory: str = Field(description="Repository working tree to sync")
    branch: str = Field(description="Branch to sync")
    request: ReconciliationRequest = Field(description="Original sync request")
