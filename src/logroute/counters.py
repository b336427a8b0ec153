"""
Per-logger counters and timers
"""

import time
from typing import Callable, Dict, Optional

DEFAULT_LABEL = "default"

MonotonicClock = Callable[[], float]


def resolve_label(label: Optional[object]) -> str:
    """Empty or missing labels use the default label"""
    if label is None or label == "":
        return DEFAULT_LABEL
    return str(label)


class CounterSet:
    """Monotonic counters keyed by label"""

    def __init__(self) -> None:
        self._counts: Dict[str, int] = {}

    def increment(self, label: Optional[object] = None) -> int:
        key = resolve_label(label)
        self._counts[key] = self._counts.get(key, 0) + 1
        return self._counts[key]

    def reset(self, label: Optional[object] = None) -> int:
        self._counts[resolve_label(label)] = 0
        return 0


class TimerSet:
    """Pending elapsed-time measurements keyed by label"""

    def __init__(self, clock: Optional[MonotonicClock] = None) -> None:
        self._clock = clock
        self._started: Dict[str, float] = {}

    def _now(self) -> float:
        if self._clock is not None:
            return self._clock()
        return time.perf_counter()

    def start(self, label: Optional[object] = None) -> None:
        """Start or restart the timer for a label"""
        self._started[resolve_label(label)] = self._now()

    def stop(self, label: Optional[object] = None) -> Optional[float]:
        """Stop a timer and return elapsed milliseconds, or None if not running"""
        key = resolve_label(label)
        started = self._started.pop(key, None)
        if started is None:
            return None
        return (self._now() - started) * 1000.0
