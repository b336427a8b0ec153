"""
Once-per-process suppression of repeated emissions
"""

from typing import Any, Set

KEY_SEPARATOR = "|"


class DedupTracker:
    """Remembers (namespace, key) pairs until explicitly reset"""

    def __init__(self) -> None:
        self._seen: Set[str] = set()

    @staticmethod
    def make_key(namespace: str, key: Any) -> str:
        return f"{namespace}{KEY_SEPARATOR}{key}"

    def check(self, namespace: str, key: Any) -> bool:
        """Mark the key and return True only the first time it is seen"""
        composite = self.make_key(namespace, key)
        if composite in self._seen:
            return False
        self._seen.add(composite)
        return True

    def reset(self) -> None:
        self._seen.clear()

    def __len__(self) -> int:
        return len(self._seen)
