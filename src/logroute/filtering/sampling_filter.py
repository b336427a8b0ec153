"""
Per-namespace random sampling
"""

import random
from typing import Callable, Optional

from ..patterns import first_match, resolve_namespace
from .base import FilterResult, LogFilter
from .config import FilterConfig


class SamplingFilter(LogFilter):
    """Sample calls at the rate of the first matching sampling rule"""

    name = "sampling"

    def __init__(
        self,
        config: FilterConfig,
        random_source: Optional[Callable[[], float]] = None,
    ):
        self.config = config
        self.random_source = random_source

    def _draw(self) -> float:
        if self.random_source is not None:
            return self.random_source()
        return random.random()

    def should_sample(self, namespace: str) -> bool:
        """Draw once against the first matching rule; unmatched always passes"""
        rule = first_match(self.config.sample_rules, resolve_namespace(namespace))
        if rule is None:
            return True
        return self._draw() < rule.value

    def should_log(self, level: str, namespace: str) -> FilterResult:
        if self.should_sample(namespace):
            return FilterResult(should_log=True)
        return FilterResult(should_log=False, reason=f"sampling_filter: {namespace} dropped")
