"""
Configuration for log filtering system
"""

import math
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from ..levels import DEFAULT_LEVEL, LEVELS, level_weight
from ..patterns import (
    CATCH_ALL,
    NamespacePredicate,
    PatternRule,
    compile_pattern_map,
    parse_namespace_spec,
)


def _rule_level_weight(value: Any) -> int:
    """Level names in rule tables fall back to debug when unknown"""
    weight = level_weight(value)
    return weight if weight is not None else LEVELS["debug"]


def _rule_sample_rate(value: Any) -> float:
    """Rates outside [0, 1] or non-numeric rates fall back to 1"""
    try:
        rate = float(value)
    except (TypeError, ValueError):
        return 1.0
    if math.isnan(rate) or rate < 0.0 or rate > 1.0:
        return 1.0
    return rate


@dataclass
class FilterConfig:
    """Rule tables consulted for every log call"""

    level: str = DEFAULT_LEVEL
    global_level_weight: int = LEVELS[DEFAULT_LEVEL]
    namespaces: str = "*"
    include_rules: List[NamespacePredicate] = field(default_factory=lambda: [CATCH_ALL])
    exclude_rules: List[NamespacePredicate] = field(default_factory=list)
    level_rules: List[PatternRule[int]] = field(default_factory=list)
    sample_rules: List[PatternRule[float]] = field(default_factory=list)

    def set_level(self, name: str) -> bool:
        """Set the global threshold; unknown names leave it untouched"""
        weight = level_weight(name)
        if weight is None:
            return False
        self.level = name
        self.global_level_weight = weight
        return True

    def enable_namespaces(self, spec: Optional[str]) -> None:
        """Replace the include/exclude lists from a namespace spec"""
        self.include_rules, self.exclude_rules = parse_namespace_spec(spec)
        if isinstance(spec, str) and spec.strip():
            self.namespaces = spec
        else:
            self.namespaces = "*"

    def set_namespace_levels(self, mapping: Optional[Mapping[str, str]]) -> None:
        """Replace the per-namespace level overrides"""
        self.level_rules = compile_pattern_map(mapping, _rule_level_weight)

    def set_sampling(self, mapping: Optional[Mapping[str, float]]) -> None:
        """Replace the per-namespace sampling rates"""
        self.sample_rules = compile_pattern_map(mapping, _rule_sample_rate)

    @classmethod
    def create(
        cls,
        level: str = DEFAULT_LEVEL,
        namespaces: str = "*",
        namespace_levels: Optional[Mapping[str, str]] = None,
        sampling: Optional[Mapping[str, float]] = None,
    ) -> "FilterConfig":
        """Create a filter configuration from plain values"""
        config = cls()
        config.set_level(level)
        config.enable_namespaces(namespaces)
        config.set_namespace_levels(namespace_levels)
        config.set_sampling(sampling)
        return config
