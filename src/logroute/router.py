"""
The log router: one pipeline instance owning filtering, record assembly,
history, deduplication and delivery.

A call goes through the filter engine (level, sampling, namespace), is
assembled into a record, appended to the history as a trimmed entry, fanned
out to transports and finally handed to the presenter. Nothing raised by a
collaborator escapes a logging call.
"""

import logging
import sys
import threading
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .buffer import RingBuffer
from .config import RouterConfig
from .dedup import DedupTracker
from .filtering import FilterConfig, FilterEngine
from .levels import from_stdlib_level, normalize_level
from .patterns import DEFAULT_NAMESPACE, resolve_namespace
from .periodic import PeriodicTask
from .presentation import ConsolePresenter
from .records import (
    BufferedEntry,
    LogRecord,
    RecordBuilder,
    Redactor,
    WallClock,
    format_timestamp,
    summarize_table,
)
from .transports.bridge import BRIDGED_ATTR
from .transports.hub import Sink, TransportHub

logger = logging.getLogger(__name__)

Presenter = Callable[..., Any]

RUNTIME_NAMESPACE = "runtime"


class RouterHandler(logging.Handler):
    """Feeds stdlib logging records into a router

    The logger name becomes the namespace (``root`` maps to ``global``).
    Records produced by the router's own bridge or by this package's
    diagnostics are ignored.
    """

    def __init__(self, router: "LogRouter"):
        super().__init__(logging.NOTSET)
        self.router = router
        self._local = threading.local()

    @staticmethod
    def _is_internal(record: logging.LogRecord) -> bool:
        return getattr(record, BRIDGED_ATTR, False) or record.name == "logroute" or record.name.startswith("logroute.")

    def emit(self, record: logging.LogRecord) -> None:
        if self._is_internal(record) or getattr(self._local, "active", False):
            return
        self._local.active = True
        try:
            namespace = DEFAULT_NAMESPACE if record.name == "root" else record.name
            args: List[Any] = [record.getMessage()]
            if record.exc_info and record.exc_info[1] is not None:
                args.append(record.exc_info[1])
            context = {
                key[4:]: value for key, value in record.__dict__.items() if key.startswith("ctx_")
            }
            self.router.emit(from_stdlib_level(record.levelno), namespace, args, context=context)
        except Exception:
            self.handleError(record)
        finally:
            self._local.active = False


class LogRouter:
    """Process-wide decision-and-delivery pipeline"""

    def __init__(
        self,
        config: Optional[RouterConfig] = None,
        random_source: Optional[Callable[[], float]] = None,
        clock: Optional[WallClock] = None,
        presenter: Optional[Presenter] = None,
    ):
        self.config = (config or RouterConfig()).validated()
        self.filter_config = FilterConfig.create(
            level=self.config.level, namespaces=self.config.namespaces
        )
        self.filter_engine = FilterEngine(self.filter_config, random_source=random_source)
        self.builder = RecordBuilder(capture_stack=self.config.capture_stack, clock=clock)
        self.buffer = RingBuffer(self.config.buffer_size)
        self.dedup = DedupTracker()
        self.hub = TransportHub()
        self.presenter: Presenter = presenter if presenter is not None else ConsolePresenter(self.config)
        self._paused = False

        self._installed: List[Tuple[logging.Logger, RouterHandler, Optional[int]]] = []
        self._guard = PeriodicTask(
            self.config.guard_interval, self._ensure_installed, name="logroute-guard"
        )
        self._previous_hooks: Optional[Tuple[Any, Any]] = None

    # -- pipeline -----------------------------------------------------------

    def emit(
        self,
        level: str,
        namespace: Optional[str],
        args: Sequence[Any] = (),
        context: Optional[Mapping[str, Any]] = None,
        color: Optional[str] = None,
    ) -> Optional[LogRecord]:
        """Route one call; returns the record when accepted"""
        try:
            level = normalize_level(level)
            ns = resolve_namespace(namespace)
            if not self.filter_engine.should_log(level, ns).should_log:
                return None

            record = self.builder.build(level, ns, args, context)
            self._deliver(record, color)
            return record
        except Exception:
            logger.debug("Dropping log call after internal failure", exc_info=True)
            return None

    def _deliver(self, record: LogRecord, color: Optional[str]) -> None:
        self.buffer.append(record.to_entry())
        self.hub.notify(record)
        self._present(record, color)

    def _present(self, record: LogRecord, color: Optional[str]) -> None:
        try:
            self.presenter(record, color=color, paused=self._paused)
        except Exception:
            logger.debug("Presenter failed", exc_info=True)

    def once(self, namespace: Optional[str], key: Any, *args: Any, **kwargs: Any) -> Optional[LogRecord]:
        """Emit at info the first time (namespace, key) is seen"""
        ns = resolve_namespace(namespace)
        if not self.dedup.check(ns, key):
            return None
        return self.emit("info", ns, args, **kwargs)

    def reset_once(self) -> None:
        self.dedup.reset()

    def report_error(self, error: Any, context: Optional[Mapping[str, Any]] = None) -> Optional[LogRecord]:
        return self.emit("error", RUNTIME_NAMESPACE, ["Reported error", error, dict(context or {})])

    def table(
        self, data: Any, namespace: Optional[str] = None, color: Optional[str] = None
    ) -> Optional[LogRecord]:
        """Record a one-line summary of tabular data; not subject to filtering"""
        try:
            args = (f"TABLE {summarize_table(data)}",)
            record = LogRecord(
                timestamp=format_timestamp(self.builder.clock()),
                level="log",
                namespace=resolve_namespace(namespace),
                raw_args=args,
                redacted_args=args,
                preview=args[0],
            )
            self._deliver(record, color)
            return record
        except Exception:
            logger.debug("Dropping table summary after internal failure", exc_info=True)
            return None

    # -- configuration --------------------------------------------------------

    def set_level(self, level: str) -> None:
        """Set the global threshold; unknown level names are ignored"""
        if self.filter_config.set_level(level):
            self.config.level = level

    def get_level(self) -> str:
        return self.config.level

    def enable_namespaces(self, spec: Optional[str]) -> None:
        self.filter_config.enable_namespaces(spec)
        self.config.namespaces = self.filter_config.namespaces

    def is_namespace_enabled(self, namespace: Optional[str]) -> bool:
        return self.filter_engine.is_namespace_enabled(namespace)

    def set_namespace_levels(self, mapping: Optional[Mapping[str, str]]) -> None:
        self.filter_config.set_namespace_levels(mapping)

    def set_sampling(self, mapping: Optional[Mapping[str, float]]) -> None:
        self.filter_config.set_sampling(mapping)

    def set_redactor(self, redactor: Optional[Redactor]) -> None:
        self.builder.redactor = redactor if callable(redactor) else None

    def update_config(self, overrides: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> None:
        """Shallow configuration update; invalid values are ignored"""
        merged: Dict[str, Any] = dict(overrides or {})
        merged.update(kwargs)
        self.config.apply_overrides(merged)

        if "level" in merged:
            self.filter_config.set_level(self.config.level)
        if "namespaces" in merged:
            self.enable_namespaces(self.config.namespaces)
        self.buffer.resize(self.config.buffer_size)
        self.builder.capture_stack = self.config.capture_stack
        self._guard.interval = self.config.guard_interval

    def get_config(self) -> RouterConfig:
        return self.config.copy()

    def get_filter_metrics(self) -> Dict[str, Any]:
        return self.filter_engine.get_metrics()

    def reset_filter_metrics(self) -> None:
        self.filter_engine.reset_metrics()

    # -- history --------------------------------------------------------------

    def get_buffer(self) -> List[BufferedEntry]:
        return self.buffer.snapshot()

    def clear_buffer(self) -> None:
        self.buffer.clear()

    def export_buffer(self) -> str:
        return self.buffer.export()

    def import_buffer(self, data: Any, append: bool = True) -> bool:
        return self.buffer.import_entries(data, append=append)

    # -- delivery -------------------------------------------------------------

    def add_transport(self, sink: Sink) -> None:
        self.hub.add(sink)

    def remove_transport(self, sink: Sink) -> None:
        self.hub.remove(sink)

    def pause(self) -> None:
        """Suspend console output; records are still buffered and delivered"""
        self._paused = True

    def resume(self) -> None:
        self._paused = False

    def is_paused(self) -> bool:
        return self._paused

    # -- stdlib logging integration ------------------------------------------

    def install(self, target: Optional[logging.Logger] = None, level: Optional[int] = None) -> bool:
        """Route a stdlib logger (root by default) through this router"""
        target = target or logging.getLogger()
        if any(installed is target for installed, _, _ in self._installed):
            return False
        handler = RouterHandler(self)
        previous_level = None
        if level is not None:
            previous_level = target.level
            target.setLevel(level)
        target.addHandler(handler)
        self._installed.append((target, handler, previous_level))
        if self.config.sticky_install:
            self._guard.start()
        return True

    def restore(self) -> None:
        """Detach every installed handler and stop the guard"""
        self._guard.stop()
        installed, self._installed = self._installed, []
        for target, handler, previous_level in installed:
            target.removeHandler(handler)
            if previous_level is not None:
                target.setLevel(previous_level)

    def installed(self) -> bool:
        return bool(self._installed)

    def _ensure_installed(self) -> None:
        """Re-attach handlers that something else removed"""
        for target, handler, _ in list(self._installed):
            if handler not in target.handlers:
                logger.debug("Re-attaching router handler to %s", target.name)
                target.addHandler(handler)

    def capture_global_errors(self) -> bool:
        """Log uncaught exceptions on the runtime namespace"""
        if self._previous_hooks is not None:
            return False
        previous_sys, previous_thread = sys.excepthook, threading.excepthook

        def sys_hook(exc_type, exc_value, exc_tb):
            self.emit("error", RUNTIME_NAMESPACE, ["Unhandled error", exc_value])
            previous_sys(exc_type, exc_value, exc_tb)

        def thread_hook(hook_args):
            self.emit(
                "error",
                RUNTIME_NAMESPACE,
                ["Unhandled error", hook_args.exc_value],
                context={"thread": getattr(hook_args.thread, "name", None)},
            )
            previous_thread(hook_args)

        sys.excepthook = sys_hook
        threading.excepthook = thread_hook
        self._previous_hooks = (previous_sys, previous_thread)
        return True

    def release_global_errors(self) -> bool:
        if self._previous_hooks is None:
            return False
        sys.excepthook, threading.excepthook = self._previous_hooks
        self._previous_hooks = None
        return True

    def close(self) -> None:
        """Release background work and global hooks"""
        self.restore()
        self.release_global_errors()
