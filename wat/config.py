from __future__ import annotations
import logging
import os
from typing import Optional


_DEFAULT_MAX_DEPTH = 200


def int_from_env(var: str, default: int) -> int:
    raw = os.environ.get(var)
    if not raw:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    return value if value > 0 else default


def get_max_depth() -> int:
    """Maximum number of nested evaluations before a depth failure is raised."""
    return int_from_env('WAT_MAX_DEPTH', _DEFAULT_MAX_DEPTH)


def get_log_level() -> Optional[int]:
    raw = os.environ.get('WAT_LOG_LEVEL')
    if not raw:
        return None
    raw = raw.strip()
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else None


def configure_logging() -> None:
    """Apply WAT_LOG_LEVEL (name or number) to the package logger, if set."""
    level = get_log_level()
    if level is not None:
        logging.getLogger('wat').setLevel(level)
