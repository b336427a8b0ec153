"""
Synchronous fan-out of records to registered sinks
"""

import logging
from typing import Any, Callable, List

from ..records import LogRecord

logger = logging.getLogger(__name__)

Sink = Callable[[LogRecord], Any]


class TransportHub:
    """Ordered sink registry; a failing sink never affects the others"""

    def __init__(self) -> None:
        self._sinks: List[Sink] = []

    def add(self, sink: Sink) -> bool:
        """Register a sink; the same sink may be added more than once"""
        if not callable(sink):
            return False
        self._sinks.append(sink)
        return True

    def remove(self, sink: Sink) -> bool:
        """Remove the first registration of this exact sink"""
        for index, registered in enumerate(self._sinks):
            if registered is sink:
                del self._sinks[index]
                return True
        return False

    def notify(self, record: LogRecord) -> None:
        """Invoke every sink in registration order"""
        for sink in list(self._sinks):
            try:
                sink(record)
            except Exception:
                logger.debug("Transport %r failed, skipping", sink, exc_info=True)

    def __contains__(self, sink: object) -> bool:
        return any(registered is sink for registered in self._sinks)

    def __len__(self) -> int:
        return len(self._sinks)
