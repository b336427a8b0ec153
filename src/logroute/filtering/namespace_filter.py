"""
Include/exclude namespace gating
"""

from ..patterns import is_namespace_enabled
from .base import FilterResult, LogFilter
from .config import FilterConfig


class NamespaceFilter(LogFilter):
    """Reject namespaces that are excluded or not included"""

    name = "namespace"

    def __init__(self, config: FilterConfig):
        self.config = config

    def is_namespace_enabled(self, namespace: str) -> bool:
        return is_namespace_enabled(
            namespace, self.config.include_rules, self.config.exclude_rules
        )

    def should_log(self, level: str, namespace: str) -> FilterResult:
        if self.is_namespace_enabled(namespace):
            return FilterResult(should_log=True)
        return FilterResult(should_log=False, reason=f"namespace_filter: {namespace} disabled")
