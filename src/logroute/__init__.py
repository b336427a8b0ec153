"""
logroute

Runtime log routing: namespaced loggers with per-namespace level and sampling
overrides, redaction, an in-memory history and pluggable delivery sinks.
"""

__version__ = "0.1.0"

from .buffer import RingBuffer
from .config import RouterConfig
from .dedup import DedupTracker
from .filtering import FilterConfig, FilterEngine, FilterResult
from .levels import LEVELS
from .logger import (
    LoggerHandle,
    add_transport,
    clear_buffer,
    create_logger,
    enable_namespaces,
    export_buffer,
    get_buffer,
    get_default_router,
    get_level,
    import_buffer,
    is_namespace_enabled,
    remove_transport,
    reset_once,
    set_default_router,
    set_level,
    set_namespace_levels,
    set_redactor,
    set_sampling,
)
from .patterns import compile_pattern, parse_namespace_spec
from .presentation import ConsolePresenter
from .records import UNDEFINED, BufferedEntry, LogRecord, RecordBuilder, build_preview
from .router import LogRouter, RouterHandler
from .transports import (
    HTTPTransport,
    HTTPTransportConfig,
    LoggingBridge,
    TransportHub,
    create_http_transport,
)

__all__ = [
    "LEVELS",
    "UNDEFINED",
    # Core types
    "RouterConfig",
    "LogRouter",
    "RouterHandler",
    "LoggerHandle",
    "LogRecord",
    "BufferedEntry",
    "RecordBuilder",
    "RingBuffer",
    "DedupTracker",
    "FilterConfig",
    "FilterEngine",
    "FilterResult",
    "TransportHub",
    "ConsolePresenter",
    "compile_pattern",
    "parse_namespace_spec",
    "build_preview",
    # Transports
    "HTTPTransport",
    "HTTPTransportConfig",
    "LoggingBridge",
    "create_http_transport",
    # Default router API
    "create_logger",
    "get_default_router",
    "set_default_router",
    "set_level",
    "get_level",
    "enable_namespaces",
    "is_namespace_enabled",
    "set_namespace_levels",
    "set_sampling",
    "set_redactor",
    "get_buffer",
    "clear_buffer",
    "export_buffer",
    "import_buffer",
    "add_transport",
    "remove_transport",
    "reset_once",
]
