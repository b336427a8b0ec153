"""
Base classes for log filtering system
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class FilterResult:
    """Result of log filtering operation"""

    should_log: bool
    reason: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


class LogFilter(ABC):
    """Abstract base class for log filters"""

    name = "filter"

    @abstractmethod
    def should_log(self, level: str, namespace: str) -> FilterResult:
        """Determine if a call at this level and namespace should be processed"""
        pass
