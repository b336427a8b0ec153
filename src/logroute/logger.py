from typing import Any, List, Mapping, Optional

from .config import RouterConfig
from .counters import CounterSet, TimerSet, resolve_label
from .patterns import resolve_namespace
from .records import BufferedEntry, LogRecord, Redactor
from .router import LogRouter
from .transports.hub import Sink

_default_router: Optional[LogRouter] = None


def get_default_router() -> LogRouter:
    """Get the process-wide router, building it from the environment on first use"""
    global _default_router
    if _default_router is None:
        _default_router = LogRouter(RouterConfig.from_env())
        if _default_router.config.auto_install:
            _default_router.install()
    return _default_router


def set_default_router(router: Optional[LogRouter]) -> None:
    """Replace the process-wide router; None rebuilds it lazily"""
    global _default_router
    if _default_router is not None and _default_router is not router:
        _default_router.close()
    _default_router = router


class LoggerHandle:
    """A namespaced logger bound to a router"""

    def __init__(
        self,
        namespace: Optional[str] = None,
        color: Optional[str] = None,
        context: Optional[Mapping[str, Any]] = None,
        router: Optional[LogRouter] = None,
    ):
        self.namespace = resolve_namespace(namespace)
        self.color = color
        self.context = dict(context) if isinstance(context, Mapping) else {}
        self._router = router
        self._counters = CounterSet()
        self._timers = TimerSet()

    @property
    def router(self) -> LogRouter:
        return self._router if self._router is not None else get_default_router()

    def _emit(self, level: str, args: tuple) -> Optional[LogRecord]:
        return self.router.emit(level, self.namespace, args, context=self.context, color=self.color)

    def trace(self, *args: Any) -> Optional[LogRecord]:
        return self._emit("trace", args)

    def debug(self, *args: Any) -> Optional[LogRecord]:
        return self._emit("debug", args)

    def log(self, *args: Any) -> Optional[LogRecord]:
        return self._emit("log", args)

    def info(self, *args: Any) -> Optional[LogRecord]:
        return self._emit("info", args)

    def warn(self, *args: Any) -> Optional[LogRecord]:
        return self._emit("warn", args)

    warning = warn

    def error(self, *args: Any) -> Optional[LogRecord]:
        return self._emit("error", args)

    def assert_(self, condition: Any, *args: Any) -> Optional[LogRecord]:
        """Emit an error when the condition is falsy"""
        if condition:
            return None
        return self._emit("error", ("Assertion failed:",) + args)

    def once(self, key: Any, *args: Any) -> Optional[LogRecord]:
        """Emit at info only the first time this key is used in this namespace"""
        return self.router.once(self.namespace, key, *args, context=self.context, color=self.color)

    def count(self, label: Optional[str] = None) -> Optional[LogRecord]:
        total = self._counters.increment(label)
        return self._emit("info", (f"count {resolve_label(label)}: {total}",))

    def count_reset(self, label: Optional[str] = None) -> Optional[LogRecord]:
        self._counters.reset(label)
        return self._emit("info", (f"countReset {resolve_label(label)}: 0",))

    def time(self, label: Optional[str] = None) -> None:
        self._timers.start(label)

    def time_end(self, label: Optional[str] = None) -> Optional[LogRecord]:
        elapsed = self._timers.stop(label)
        if elapsed is None:
            return None
        return self._emit("info", (f"Timer {resolve_label(label)}: {elapsed:.1f}ms",))

    def table(self, data: Any) -> Optional[LogRecord]:
        return self.router.table(data, self.namespace, color=self.color)

    def with_context(self, context: Optional[Mapping[str, Any]] = None, **fields: Any) -> "LoggerHandle":
        """Derive a logger whose records carry the merged context"""
        merged = dict(self.context)
        if isinstance(context, Mapping):
            merged.update(context)
        merged.update(fields)
        return LoggerHandle(self.namespace, color=self.color, context=merged, router=self._router)

    def __repr__(self) -> str:
        return f"LoggerHandle(namespace={self.namespace!r})"


def create_logger(
    namespace: Optional[str] = None,
    color: Optional[str] = None,
    context: Optional[Mapping[str, Any]] = None,
    router: Optional[LogRouter] = None,
) -> LoggerHandle:
    """Create a namespaced logger; without a router it uses the default one"""
    return LoggerHandle(namespace, color=color, context=context, router=router)


def set_level(level: str) -> None:
    get_default_router().set_level(level)


def get_level() -> str:
    return get_default_router().get_level()


def enable_namespaces(spec: Optional[str]) -> None:
    get_default_router().enable_namespaces(spec)


def is_namespace_enabled(namespace: Optional[str]) -> bool:
    return get_default_router().is_namespace_enabled(namespace)


def set_namespace_levels(mapping: Optional[Mapping[str, str]]) -> None:
    get_default_router().set_namespace_levels(mapping)


def set_sampling(mapping: Optional[Mapping[str, float]]) -> None:
    get_default_router().set_sampling(mapping)


def set_redactor(redactor: Optional[Redactor]) -> None:
    get_default_router().set_redactor(redactor)


def get_buffer() -> List[BufferedEntry]:
    return get_default_router().get_buffer()


def clear_buffer() -> None:
    get_default_router().clear_buffer()


def export_buffer() -> str:
    return get_default_router().export_buffer()


def import_buffer(data: Any, append: bool = True) -> bool:
    return get_default_router().import_buffer(data, append=append)


def add_transport(sink: Sink) -> None:
    get_default_router().add_transport(sink)


def remove_transport(sink: Sink) -> None:
    get_default_router().remove_transport(sink)


def reset_once() -> None:
    get_default_router().reset_once()
