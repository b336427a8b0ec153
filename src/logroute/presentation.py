"""
Console rendering of accepted records
"""

import sys
from datetime import datetime
from typing import Any, Dict, Iterable, Optional, TextIO

from .config import RouterConfig
from .patterns import DEFAULT_NAMESPACE
from .records import LogRecord, stringify_for_preview

ANSI_RESET = "\x1b[0m"

ANSI_COLORS: Dict[str, str] = {
    "gray": "\x1b[90m",
    "blue": "\x1b[34m",
    "yellow": "\x1b[33m",
    "red": "\x1b[31m",
    "magenta": "\x1b[35m",
    "cyan": "\x1b[36m",
    "green": "\x1b[32m",
}

LEVEL_COLORS: Dict[str, str] = {
    "trace": ANSI_COLORS["magenta"],
    "debug": ANSI_COLORS["gray"],
    "log": ANSI_COLORS["green"],
    "info": ANSI_COLORS["blue"],
    "warn": ANSI_COLORS["yellow"],
    "error": ANSI_COLORS["red"],
}

LEVEL_ICONS: Dict[str, str] = {
    "trace": "🔍",
    "debug": "🐛",
    "log": "📝",
    "info": "ℹ️",
    "warn": "⚠️",
    "error": "⛔",
}


def format_clock_time(timestamp: str) -> str:
    """Render an ISO timestamp as local HH:MM:SS.mmm"""
    try:
        moment = datetime.fromisoformat(timestamp.replace("Z", "+00:00")).astimezone()
    except (ValueError, AttributeError):
        moment = datetime.now()
    return moment.strftime("%H:%M:%S.") + f"{moment.microsecond // 1000:03d}"


def _render_args(args: Iterable[Any]) -> str:
    return " ".join(stringify_for_preview(arg) for arg in args)


class ConsolePresenter:
    """Writes records as ``[time] [LEVEL] [namespace] args`` lines"""

    def __init__(self, config: Optional[RouterConfig] = None, stream: Optional[TextIO] = None):
        self.config = config or RouterConfig()
        self.stream = stream

    def build_prefix(self, record: LogRecord, color: Optional[str] = None) -> str:
        parts = []
        if self.config.show_time:
            parts.append(f"[{format_clock_time(record.timestamp)}]")
        parts.append(f"[{record.level.upper()}]")
        if self.config.show_namespace and record.namespace != DEFAULT_NAMESPACE:
            parts.append(f"[{record.namespace}]")

        icon = ""
        if self.config.show_icons and record.level in LEVEL_ICONS:
            icon = LEVEL_ICONS[record.level] + " "

        prefix = icon + " ".join(parts)
        if self.config.enable_colors:
            code = ANSI_COLORS.get(color, color) if color else LEVEL_COLORS.get(record.level, "")
            prefix = f"{code}{prefix}{ANSI_RESET}"
        return prefix

    def render(self, record: LogRecord, color: Optional[str] = None) -> str:
        prefix = self.build_prefix(record, color)
        body = _render_args(record.redacted_args)
        line = f"{prefix} {body}" if body else prefix
        if record.stack:
            line = f"{line}\n{record.stack.rstrip()}"
        return line

    def present(self, record: LogRecord, color: Optional[str] = None, paused: bool = False) -> bool:
        """Write the record unless printing is paused or disabled"""
        if paused or not self.config.print_to_native:
            return False
        stream = self.stream or sys.stderr
        try:
            stream.write(self.render(record, color) + "\n")
            stream.flush()
        except Exception:
            return False
        return True

    __call__ = present
