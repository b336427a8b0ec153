"""
Log records and their assembly: redaction, preview and stack capture
"""

import json
import logging
import numbers
import traceback
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple

from .levels import normalize_level
from .patterns import DEFAULT_NAMESPACE, resolve_namespace

logger = logging.getLogger(__name__)

PREVIEW_LIMIT = 300

Redactor = Callable[[list, Dict[str, str]], Any]
WallClock = Callable[[], datetime]

STACK_POLICIES = ("never", "always", "on-error")


class _Undefined:
    """Marker for an explicitly absent argument"""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC text with millisecond precision, e.g. 2024-05-01T12:00:00.000Z"""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class BufferedEntry:
    """Trimmed projection of a record kept in history"""

    time: str
    level: str
    namespace: str
    preview: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "time": self.time,
            "level": self.level,
            "namespace": self.namespace,
            "preview": self.preview,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "BufferedEntry":
        """Coerce an arbitrary mapping, filling in defaults for missing fields"""
        if not isinstance(data, Mapping):
            data = {}
        return cls(
            time=str(data.get("time") or format_timestamp(utc_now())),
            level=str(data.get("level") or "log"),
            namespace=str(data.get("namespace") or DEFAULT_NAMESPACE),
            preview=str(data.get("preview") or ""),
        )


@dataclass(frozen=True)
class LogRecord:
    """An accepted log call; immutable once built"""

    timestamp: str
    level: str
    namespace: str
    raw_args: Tuple[Any, ...]
    redacted_args: Tuple[Any, ...]
    preview: str
    stack: Optional[str] = None
    context: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def to_entry(self) -> BufferedEntry:
        return BufferedEntry(
            time=self.timestamp,
            level=self.level,
            namespace=self.namespace,
            preview=self.preview,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Wire form; raw arguments are never included"""
        data: Dict[str, Any] = self.to_entry().to_dict()
        data["args"] = list(self.redacted_args)
        if self.context:
            data["context"] = dict(self.context)
        if self.stack:
            data["stack"] = self.stack
        return data


def stringify_for_preview(value: Any) -> str:
    """Render a single argument for the preview line"""
    if isinstance(value, str):
        return value
    if value is None:
        return "null"
    if value is UNDEFINED:
        return "undefined"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, numbers.Number):
        return str(value)
    if isinstance(value, BaseException):
        return f"{type(value).__name__}: {value}"
    if callable(value):
        return "[function]"
    if type(value) is object:
        return "[symbol]"
    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError, RecursionError):
        return "[object]"


def build_preview(args: Sequence[Any]) -> str:
    """Join stringified arguments, stopping once the text passes the limit

    The argument that crosses the limit is kept whole.
    """
    try:
        parts = []
        length = -1
        for arg in args:
            text = stringify_for_preview(arg)
            parts.append(text)
            length += len(text) + 1
            if length > PREVIEW_LIMIT:
                break
        return " ".join(parts)
    except Exception:
        logger.debug("Preview rendering failed", exc_info=True)
        return "[unavailable]"


def summarize_table(data: Any) -> str:
    """One-line shape summary of tabular data"""
    if isinstance(data, (list, tuple)):
        return f"rows {len(data)}"
    if isinstance(data, Mapping):
        return f"object keys {len(data)}"
    if data is None:
        return "null"
    return type(data).__name__


def apply_redaction(
    args: Sequence[Any],
    level: str,
    namespace: str,
    redactor: Optional[Redactor] = None,
) -> Tuple[Any, ...]:
    """Run the redactor; any failure or unusable result keeps the original args"""
    original = tuple(args)
    if redactor is None:
        return original
    try:
        result = redactor(list(original), {"level": level, "namespace": namespace})
    except Exception:
        logger.debug("Redactor raised, keeping original arguments", exc_info=True)
        return original
    if isinstance(result, (str, bytes, bytearray)) or not isinstance(result, Sequence):
        return original
    return tuple(result)


def normalize_stack_policy(policy: Any) -> str:
    """Accept booleans and the legacy ``error`` alias"""
    if policy is True:
        return "always"
    if policy is False or policy is None:
        return "never"
    if policy == "error":
        return "on-error"
    if policy in STACK_POLICIES:
        return policy
    return "never"


def maybe_capture_stack(level: str, policy: Any) -> Optional[str]:
    """Capture the call-site stack when the policy asks for it"""
    policy = normalize_stack_policy(policy)
    if policy == "never":
        return None
    if policy == "on-error" and level not in ("error", "warn"):
        return None
    try:
        return "".join(traceback.format_stack()[:-1])
    except Exception:
        return None


class RecordBuilder:
    """Turns raw call arguments into immutable records"""

    def __init__(
        self,
        redactor: Optional[Redactor] = None,
        capture_stack: Any = "never",
        clock: Optional[WallClock] = None,
    ):
        self.redactor = redactor
        self.capture_stack = normalize_stack_policy(capture_stack)
        self.clock = clock or utc_now

    def build(
        self,
        level: str,
        namespace: Optional[str],
        args: Sequence[Any],
        context: Optional[Mapping[str, Any]] = None,
    ) -> LogRecord:
        level = normalize_level(level)
        ns = resolve_namespace(namespace)
        raw = tuple(args)
        redacted = apply_redaction(raw, level, ns, self.redactor)
        return LogRecord(
            timestamp=format_timestamp(self.clock()),
            level=level,
            namespace=ns,
            raw_args=raw,
            redacted_args=redacted,
            preview=build_preview(redacted),
            stack=maybe_capture_stack(level, self.capture_stack),
            context=MappingProxyType(dict(context or {})),
        )
