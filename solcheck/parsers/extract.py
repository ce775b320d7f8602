"""Tolerant lookups used by every normalizer: missing keys and junk values
collapse to a default instead of raising."""

import math
from datetime import datetime, timezone
from typing import Any

from solcheck.models.records import UNKNOWN


def dig(data: Any, *path: str | int, default: Any = None) -> Any:
    current = data
    for key in path:
        if isinstance(current, dict):
            current = current.get(key)
        elif isinstance(current, list) and isinstance(key, int) and -len(current) <= key < len(current):
            current = current[key]
        else:
            return default
        if current is None:
            return default
    return current


def safe_float(val: object, default: float = 0.0) -> float:
    if val is None or isinstance(val, bool):
        return default
    try:
        result = float(val)
    except (ValueError, TypeError):
        return default
    return result if math.isfinite(result) else default


def safe_int(val: object, default: int = 0) -> int:
    if isinstance(val, int) and not isinstance(val, bool):
        return val
    if isinstance(val, str):
        try:
            return int(val)
        except ValueError:
            pass
    return int(safe_float(val, float(default)))


def ts_to_date(ts: int, fmt: str = "%Y-%m-%d") -> str:
    if ts <= 0:
        return UNKNOWN
    return datetime.fromtimestamp(ts, tz=timezone.utc).strftime(fmt)


def safe_str(val: object, default: str = UNKNOWN) -> str:
    if not isinstance(val, str) or not val:
        return default
    return val
