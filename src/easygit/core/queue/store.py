"""
Append-only storage for queued sync operations.

The queue lives at $XDG_DATA_HOME/easygit/sync-queue.jsonl (default
~/.local/share/easygit/) so it survives process exit and is shared by every
repository of the user. Each line is one QueuedOperation. Lines are only
ever appended; existing entries are never rewritten or reordered.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from pydantic import ValidationError

from easygit.core.queue.models import QueuedOperation
from easygit.core.sync.models import ReconciliationRequest

logger = logging.getLogger(__name__)

QUEUE_FILENAME = "sync-queue.jsonl"


def get_xdg_data_home() -> Path:
    """
    Get XDG data home directory.

    Returns:
        Path to data directory (defaults to ~/.local/share)
    """
    if xdg_home := os.environ.get("XDG_DATA_HOME"):
        return Path(xdg_home)
    return Path.home() / ".local" / "share"


def get_queue_path() -> Path:
    """Default location of the queue file."""
    return get_xdg_data_home() / "easygit" / QUEUE_FILENAME


class OfflineQueue:
    """
    Writer for the offline queue.

    Queuing is best effort: I/O failures are logged and reported as None,
    never raised.

    Example:
        >>> queue = OfflineQueue()
        >>> op = queue.enqueue(request, branch="main", working_directory="/repo")
        >>> op.id if op else "not queued"
    """

    def __init__(self, queue_path: Path | None = None) -> None:
        self.queue_path = queue_path or get_queue_path()

    def enqueue(
        self,
        request: ReconciliationRequest,
        branch: str,
        working_directory: str,
    ) -> QueuedOperation | None:
        """
        Append a new operation for ``request``.

        Args:
            request: The request that could not run
            branch: Branch the request applies to
            working_directory: Repository working tree

        Returns:
            The persisted operation, or None if it could not be written
        """
        operation = QueuedOperation(
            working_directory=working_directory,
            branch=branch,
            request=request,
        )
        return operation if self.append(operation) else None

    def append(self, operation: QueuedOperation) -> bool:
        """Append ``operation`` as a single line; returns False on I/O failure."""
        try:
            self.queue_path.parent.mkdir(parents=True, exist_ok=True)
            with self.queue_path.open("a", encoding="utf-8") as f:
                f.write(operation.model_dump_json())
                f.write("\n")
        except OSError as e:
            logger.warning("Could not queue sync operation at %s: %s", self.queue_path, e)
            return False

        logger.info("Queued sync operation %s for %s", operation.id, operation.branch)
        return True


class OfflineQueueReader:
    """Read access to the offline queue, in insertion order."""

    def __init__(self, queue_path: Path | None = None) -> None:
        self.queue_path = queue_path or get_queue_path()

    def list_operations(self) -> list[QueuedOperation]:
        """
        Return every readable queued operation.

        Corrupt lines are skipped with a warning rather than failing the read.
        """
        if not self.queue_path.exists():
            return []

        operations: list[QueuedOperation] = []
        with self.queue_path.open("r", encoding="utf-8") as f:
            for line_number, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    operations.append(QueuedOperation.model_validate(json.loads(line)))
                except (json.JSONDecodeError, ValidationError) as e:
                    logger.warning(
                        "Skipping invalid queue line %d in %s: %s",
                        line_number,
                        self.queue_path,
                        e,
                    )
        return operations

    def get_operation(self, operation_id: str) -> QueuedOperation | None:
        """Look up one operation by ID (used by `easygit sync queue --id`)."""
        return next((op for op in self.list_operations() if op.id == operation_id), None)
