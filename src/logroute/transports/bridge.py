"""
Forward accepted records into stdlib logging
"""

import logging
from typing import Optional

from ..levels import to_stdlib_level
from ..records import LogRecord

BRIDGED_ATTR = "logroute_bridged"


class LoggingBridge:
    """Sink that re-emits records on stdlib loggers named after the namespace

    Bridged records carry a marker attribute so an installed router handler
    does not feed them back into the router.
    """

    def __init__(self, prefix: str = "", base_logger: Optional[logging.Logger] = None):
        self.prefix = prefix
        self.base_logger = base_logger

    def _get_logger(self, namespace: str) -> logging.Logger:
        if self.base_logger is not None:
            return self.base_logger
        return logging.getLogger(f"{self.prefix}{namespace}")

    def __call__(self, record: LogRecord) -> None:
        extra = {f"ctx_{key}": value for key, value in record.context.items()}
        extra[BRIDGED_ATTR] = True
        extra["logroute_namespace"] = record.namespace
        extra["logroute_timestamp"] = record.timestamp
        if record.stack:
            extra["logroute_stack"] = record.stack
        self._get_logger(record.namespace).log(
            to_stdlib_level(record.level), "%s", record.preview, extra=extra
        )
