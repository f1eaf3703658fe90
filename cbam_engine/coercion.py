# -*- coding: utf-8 -*-
"""
Safe value coercion for partially filled form data.

Every aggregator reads numeric, text and boolean fields through the helpers
below so that empty strings, ``None``, unparseable text, ``NaN`` and infinite
values never propagate into a calculation. Invalid numbers read as 0.

Example:
    >>> from cbam_engine.coercion import safe_float
    >>> safe_float("12.5")
    12.5
    >>> safe_float("n/a")
    0.0
"""

from __future__ import annotations

import math
from typing import Any, Optional

_TRUE_STRINGS = frozenset({"true", "1", "yes", "y", "on"})


def parse_number(value: Any) -> Optional[float]:
    """Parse ``value`` into a finite float, returning None when impossible.

    Booleans are not numbers here; a form checkbox never doubles as a quantity.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            result = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        text = value.strip()
        # A single comma without a dot is a decimal comma ("12,5").
        if text.count(",") == 1 and "." not in text:
            text = text.replace(",", ".")
        if not text:
            return None
        try:
            result = float(text)
        except ValueError:
            return None
    else:
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_float(value: Any, default: float = 0.0) -> float:
    """Return ``value`` as a finite float or ``default``."""
    result = parse_number(value)
    return default if result is None else result


def has_number(value: Any) -> bool:
    """True when ``value`` parses to a finite number."""
    return parse_number(value) is not None


def is_blank(value: Any) -> bool:
    """True for None and whitespace-only strings."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def is_invalid_number(value: Any) -> bool:
    """True when a value was entered but cannot be read as a number."""
    return not is_blank(value) and parse_number(value) is None


def safe_text(value: Any) -> str:
    """Return a stripped string; None becomes the empty string."""
    if value is None:
        return ""
    return str(value).strip()


def safe_bool(value: Any) -> bool:
    """Interpret checkbox style values (``True``, ``"yes"``, ``1``)."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return False


def finite_or_zero(value: float) -> float:
    """Replace NaN and infinities (e.g. an overflowing product) with 0."""
    if math.isnan(value) or math.isinf(value):
        return 0.0
    return value


def safe_ratio(numerator: float, denominator: float) -> float:
    """Divide, returning 0 when the denominator is not positive."""
    if denominator <= 0:
        return 0.0
    return finite_or_zero(numerator / denominator)


def as_fraction(value: Any) -> float:
    """Read a share entered either as a fraction (0-1) or a percentage (0-100).

    Values above 1 are treated as percentages. The result is clamped to
    the closed interval [0, 1].
    """
    share = safe_float(value)
    if share > 1.0:
        share = share / 100.0
    return min(max(share, 0.0), 1.0)


def percent_to_fraction(value: Any, default: float = 0.0) -> float:
    """Read a percentage (0-100) as a fraction clamped to [0, 1]."""
    if not has_number(value):
        return default
    return min(max(safe_float(value), 0.0), 100.0) / 100.0


__all__ = [
    "parse_number",
    "safe_float",
    "has_number",
    "is_blank",
    "is_invalid_number",
    "safe_text",
    "safe_bool",
    "finite_or_zero",
    "safe_ratio",
    "as_fraction",
    "percent_to_fraction",
]
