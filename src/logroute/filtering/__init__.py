"""
Namespace-aware level, sampling and include/exclude filtering
"""

from .base import FilterResult, LogFilter
from .config import FilterConfig
from .engine import FilterEngine
from .level_filter import LevelFilter
from .namespace_filter import NamespaceFilter
from .sampling_filter import SamplingFilter

__all__ = [
    "FilterResult",
    "LogFilter",
    "LevelFilter",
    "NamespaceFilter",
    "SamplingFilter",
    "FilterConfig",
    "FilterEngine",
]
