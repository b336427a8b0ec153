"""
Level-based log filtering with per-namespace overrides
"""

from ..levels import LEVELS
from ..patterns import first_match, resolve_namespace
from .base import FilterResult, LogFilter
from .config import FilterConfig


class LevelFilter(LogFilter):
    """Reject calls below the effective threshold of their namespace"""

    name = "level"

    def __init__(self, config: FilterConfig):
        self.config = config

    def effective_level_weight(self, namespace: str) -> int:
        """First matching level rule wins, else the global threshold"""
        rule = first_match(self.config.level_rules, resolve_namespace(namespace))
        if rule is None:
            return self.config.global_level_weight
        return rule.value

    def should_log(self, level: str, namespace: str) -> FilterResult:
        threshold = self.effective_level_weight(namespace)
        if LEVELS[level] >= threshold:
            return FilterResult(should_log=True)
        return FilterResult(
            should_log=False,
            reason=f"level_filter: {level} < {threshold}",
            metadata={"threshold": threshold},
        )
