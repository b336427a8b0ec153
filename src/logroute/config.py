import dataclasses
import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .buffer import DEFAULT_CAPACITY
from .levels import DEFAULT_LEVEL, is_level
from .records import STACK_POLICIES, normalize_stack_policy

_BOOL_FIELDS = (
    "enable_colors",
    "show_time",
    "show_namespace",
    "show_icons",
    "print_to_native",
    "sticky_install",
    "auto_install",
)


@dataclass
class RouterConfig:
    """Configuration for the log router"""

    level: str = DEFAULT_LEVEL
    namespaces: str = "*"
    enable_colors: bool = True
    show_time: bool = True
    show_namespace: bool = True
    show_icons: bool = True
    capture_stack: str = "never"
    print_to_native: bool = True
    buffer_size: int = DEFAULT_CAPACITY
    sticky_install: bool = True
    guard_interval: float = 2.0
    auto_install: bool = False

    def copy(self) -> "RouterConfig":
        return dataclasses.replace(self)

    def validated(self) -> "RouterConfig":
        """Copy with every field re-checked; invalid values fall back to defaults"""
        return type(self)().apply_overrides(dataclasses.asdict(self))

    def apply_overrides(self, overrides: Optional[Mapping[str, Any]]) -> "RouterConfig":
        """Apply valid overrides in place; invalid values are ignored"""
        if not isinstance(overrides, Mapping):
            return self

        level = overrides.get("level")
        if is_level(level):
            self.level = level

        namespaces = overrides.get("namespaces")
        if isinstance(namespaces, str):
            self.namespaces = namespaces

        for name in _BOOL_FIELDS:
            value = overrides.get(name)
            if isinstance(value, bool):
                setattr(self, name, value)

        buffer_size = overrides.get("buffer_size")
        if isinstance(buffer_size, int) and not isinstance(buffer_size, bool) and buffer_size > 0:
            self.buffer_size = buffer_size

        guard_interval = overrides.get("guard_interval")
        if isinstance(guard_interval, (int, float)) and not isinstance(guard_interval, bool) and guard_interval > 0:
            self.guard_interval = float(guard_interval)

        capture_stack = overrides.get("capture_stack")
        if isinstance(capture_stack, bool) or capture_stack in STACK_POLICIES or capture_stack == "error":
            self.capture_stack = normalize_stack_policy(capture_stack)

        return self

    @classmethod
    def _parse_bool_env(cls, key: str) -> Optional[bool]:
        """Parse boolean from environment variable; unset gives None"""
        value = os.getenv(key)
        if value is None:
            return None
        return value.strip().lower() not in ("0", "false", "off", "no")

    @classmethod
    def _parse_int_env(cls, key: str) -> Optional[int]:
        value = os.getenv(key)
        if value is None:
            return None
        try:
            return max(1, int(value))
        except ValueError:
            return None

    @classmethod
    def from_env(cls) -> "RouterConfig":
        """Create configuration from environment variables"""
        overrides: dict = {}

        level = os.getenv("LOGROUTE_LEVEL")
        if level:
            overrides["level"] = level.strip().lower()

        namespaces = os.getenv("LOGROUTE_NAMESPACES")
        if namespaces:
            overrides["namespaces"] = namespaces

        for key, name in (
            ("LOGROUTE_COLORS", "enable_colors"),
            ("LOGROUTE_SHOW_TIME", "show_time"),
            ("LOGROUTE_SHOW_ICONS", "show_icons"),
            ("LOGROUTE_AUTO_INSTALL", "auto_install"),
        ):
            value = cls._parse_bool_env(key)
            if value is not None:
                overrides[name] = value

        buffer_size = cls._parse_int_env("LOGROUTE_BUFFER")
        if buffer_size is not None:
            overrides["buffer_size"] = buffer_size

        capture_stack = os.getenv("LOGROUTE_CAPTURE_STACK")
        if capture_stack:
            overrides["capture_stack"] = capture_stack.strip().lower()

        return cls().apply_overrides(overrides)
