"""
Severity levels and their weights
"""

import logging
from typing import Dict, Optional

TRACE = 5

LEVELS: Dict[str, int] = {
    "trace": 10,
    "debug": 20,
    "log": 30,
    "info": 40,
    "warn": 50,
    "error": 60,
}

LEVEL_NAMES = tuple(LEVELS)

DEFAULT_LEVEL = "debug"

# Router level -> stdlib logging level
_TO_STDLIB: Dict[str, int] = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "log": logging.INFO,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

logging.addLevelName(TRACE, "TRACE")


def is_level(name: object) -> bool:
    """Check whether a value names a known level"""
    return isinstance(name, str) and name in LEVELS


def level_weight(name: object) -> Optional[int]:
    """Get the weight for a level name, or None if unknown"""
    if not is_level(name):
        return None
    return LEVELS[name]  # type: ignore[index]


def normalize_level(name: object, default: str = "log") -> str:
    """Return the level name, or the default for unknown levels"""
    return name if is_level(name) else default  # type: ignore[return-value]


def to_stdlib_level(name: str) -> int:
    """Map a router level onto a stdlib logging level"""
    return _TO_STDLIB.get(name, logging.INFO)


def from_stdlib_level(levelno: int) -> str:
    """Map a stdlib logging level onto a router level"""
    if levelno >= logging.ERROR:
        return "error"
    if levelno >= logging.WARNING:
        return "warn"
    if levelno >= logging.INFO:
        return "info"
    if levelno >= logging.DEBUG:
        return "debug"
    return "trace"
