"""Numeric coercion and formatting helpers shared by the catalog and scripts."""

from __future__ import annotations

import math
from typing import Any

__all__ = [
    "safe_float",
    "format_number",
    "format_deviation",
]


def safe_float(value: Any, default: float | None = None) -> float | None:
    """Return ``value`` converted to ``float`` when possible.

    ``None`` inputs, blank or malformed strings and ``NaN`` all yield
    ``default`` instead of raising. Infinite values are kept as-is so callers
    can reject them explicitly.
    """

    if isinstance(value, bool):
        return default

    try:
        if isinstance(value, str):
            candidate = value.strip()
            if not candidate:
                return default
            number = float(candidate)
        else:
            number = float(value)
    except (TypeError, ValueError):
        return default

    if math.isnan(number):
        return default

    return number


def format_number(
    value: Any,
    *,
    precision: int = 2,
    placeholder: str = "—",
) -> str:
    """Render a number with configurable precision or a placeholder."""

    number = safe_float(value)
    if number is None:
        return placeholder
    return f"{number:.{precision}f}"


def format_deviation(value: Any, *, percentage: bool = True, precision: int = 1) -> str:
    """Render a signed deviation, suffixed with ``%`` when it is relative."""

    number = safe_float(value)
    if number is None:
        return "—"
    suffix = "%" if percentage else ""
    return f"{number:+.{precision}f}{suffix}"
