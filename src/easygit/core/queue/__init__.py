"""
Offline sync queue.

Persists sync requests made while the remote is unreachable, in an
append-only JSON Lines file under the user's data directory.
"""

from easygit.core.queue.models import QueuedOperation, generate_operation_id
from easygit.core.queue.store import (
    OfflineQueue,
    OfflineQueueReader,
    get_queue_path,
    get_xdg_data_home,
)

__all__ = [
    "OfflineQueue",
    "OfflineQueueReader",
    "QueuedOperation",
    "generate_operation_id",
    "get_queue_path",
    "get_xdg_data_home",
]
