"""Lenient coercion of user-supplied form/JSON values.

Mutations treat anything unparseable as "no input" rather than an error.
"""

import math

# About a thousand years either way; keeps every shifted week inside datetime's range
MAX_WEEK_OFFSET = 52 * 1000


def coerce_id(raw) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() else None
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            return None
    return None


def coerce_minutes(raw) -> float | None:
    """Minutes as a float; missing input is 0, non-finite or garbage is None."""
    if raw is None or raw == "":
        return 0.0
    if isinstance(raw, bool):
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def clean_text(raw) -> str:
    return raw.strip() if isinstance(raw, str) else ""


def clean_optional_text(raw) -> str | None:
    return clean_text(raw) or None


def coerce_offset(raw) -> int:
    """Week offset from a query string; unparseable or out-of-range means this week."""
    value = coerce_id(raw)
    if value is None or abs(value) > MAX_WEEK_OFFSET:
        return 0
    return value
