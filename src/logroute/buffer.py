"""
Fixed-capacity in-memory history of recent log entries
"""

import json
import logging
from typing import Any, List, Union

from .records import BufferedEntry

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 500


class RingBuffer:
    """Ordered history that evicts the oldest entries past its capacity"""

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = int(capacity)
        self._entries: List[BufferedEntry] = []

    @property
    def capacity(self) -> int:
        return self._capacity

    def resize(self, capacity: int) -> bool:
        """Change the capacity; non-positive values are ignored"""
        if not isinstance(capacity, int) or isinstance(capacity, bool) or capacity <= 0:
            return False
        self._capacity = capacity
        self._trim()
        return True

    def _trim(self) -> None:
        overflow = len(self._entries) - self._capacity
        if overflow > 0:
            del self._entries[:overflow]

    def append(self, entry: BufferedEntry) -> None:
        self._entries.append(entry)
        self._trim()

    def snapshot(self) -> List[BufferedEntry]:
        """Copy of the entries, oldest first"""
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def export(self) -> str:
        """Serialize the history as a JSON array"""
        try:
            return json.dumps([entry.to_dict() for entry in self._entries], indent=2)
        except (TypeError, ValueError):
            logger.debug("Buffer export failed", exc_info=True)
            return "[]"

    def import_entries(self, data: Union[str, bytes, list, tuple, Any], append: bool = True) -> bool:
        """Load entries from a list or from JSON text

        Returns False without touching the history when the input is not a
        sequence of entries.
        """
        items = data
        if isinstance(data, (str, bytes, bytearray)):
            try:
                items = json.loads(data)
            except (ValueError, RecursionError):
                return False
        if not isinstance(items, (list, tuple)):
            return False

        incoming = [
            item if isinstance(item, BufferedEntry) else BufferedEntry.from_dict(item)
            for item in items
        ]
        if not append:
            self._entries.clear()
        self._entries.extend(incoming)
        self._trim()
        return True
