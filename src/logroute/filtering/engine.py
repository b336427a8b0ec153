"""
Filtering engine that applies the level, sampling and namespace gates
"""

from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional

from ..levels import normalize_level
from ..patterns import resolve_namespace
from .base import FilterResult, LogFilter
from .config import FilterConfig
from .level_filter import LevelFilter
from .namespace_filter import NamespaceFilter
from .sampling_filter import SamplingFilter


class FilterEngine:
    """Decides whether a call is accepted

    Gates run in a fixed order: level, then sampling, then namespace. The
    sampling draw is only consumed once the level gate has passed.
    """

    def __init__(
        self,
        config: Optional[FilterConfig] = None,
        random_source: Optional[Callable[[], float]] = None,
        collect_metrics: bool = True,
    ):
        self.config = config or FilterConfig()
        self.collect_metrics = collect_metrics
        self.level_filter = LevelFilter(self.config)
        self.sampling_filter = SamplingFilter(self.config, random_source)
        self.namespace_filter = NamespaceFilter(self.config)
        self.filters: List[LogFilter] = [
            self.level_filter,
            self.sampling_filter,
            self.namespace_filter,
        ]
        self.metrics: Dict[str, int] = defaultdict(int)
        self._filter_stats: Dict[str, Dict[str, int]] = defaultdict(
            lambda: defaultdict(int)
        )

    def effective_level_weight(self, namespace: Optional[str]) -> int:
        return self.level_filter.effective_level_weight(resolve_namespace(namespace))

    def should_sample(self, namespace: Optional[str]) -> bool:
        return self.sampling_filter.should_sample(resolve_namespace(namespace))

    def is_namespace_enabled(self, namespace: Optional[str]) -> bool:
        return self.namespace_filter.is_namespace_enabled(resolve_namespace(namespace))

    def should_log(self, level: str, namespace: Optional[str]) -> FilterResult:
        """Apply all gates in order and return the final decision"""
        level = normalize_level(level)
        ns = resolve_namespace(namespace)
        self.metrics["total_evaluated"] += 1

        for filter_obj in self.filters:
            result = filter_obj.should_log(level, ns)

            if self.collect_metrics:
                stats = self._filter_stats[filter_obj.name]
                stats["total"] += 1
                stats["passed" if result.should_log else "rejected"] += 1

            if not result.should_log:
                self.metrics["filtered_out"] += 1
                return result

        self.metrics["passed_through"] += 1
        return FilterResult(should_log=True, reason="all_filters_passed")

    def get_metrics(self) -> Dict[str, Any]:
        """Get filtering metrics"""
        total_evaluated = self.metrics.get("total_evaluated", 0)
        passed_through = self.metrics.get("passed_through", 0)
        filtered_out = self.metrics.get("filtered_out", 0)

        return {
            "summary": {
                "total_evaluated": total_evaluated,
                "passed_through": passed_through,
                "filtered_out": filtered_out,
            },
            "filter_stats": {name: dict(stats) for name, stats in self._filter_stats.items()},
            "pass_rate": passed_through / max(1, total_evaluated),
        }

    def reset_metrics(self) -> None:
        """Reset all metrics"""
        self.metrics.clear()
        self._filter_stats.clear()
