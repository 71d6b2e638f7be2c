"""Coercion of user-entered field values into numbers."""

from __future__ import annotations

import math
import numbers
import re
from decimal import Decimal

_PREFIXED_INT = re.compile(r"^0[xob][0-9a-f]+$", re.IGNORECASE)

NAN = float("nan")


def to_number(value: object) -> float:
    """
    Convert an arbitrary field value into a float.

    Returns ``nan`` when the value is missing, blank, unparseable or not
    finite. Strings are trimmed first and accept plain decimals, scientific
    notation and ``0x``/``0o``/``0b`` integer literals.
    """

    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (numbers.Real, Decimal)):
        try:
            number = float(value)
        except OverflowError:
            return NAN
        return number if math.isfinite(number) else NAN
    if isinstance(value, str):
        text = value.strip()
        if not text or "_" in text:
            return NAN
        try:
            number = float(text)
        except ValueError:
            if not _PREFIXED_INT.match(text):
                return NAN
            try:
                number = float(int(text, 0))
            except OverflowError:
                return NAN
        return number if math.isfinite(number) else NAN
    return NAN


def is_finite(value: float) -> bool:
    return isinstance(value, float) and math.isfinite(value)


def is_whole(value: float) -> bool:
    return is_finite(value) and value.is_integer()


def safe_amount(value: object) -> float:
    """Return ``value`` as a non-negative float, or 0.0 when it is invalid."""

    number = to_number(value)
    if not math.isfinite(number):
        return 0.0
    return max(0.0, number)


def coerce_amount(value: object, default: float = 0.0) -> float:
    """Return ``value`` as a finite float (sign preserved), else ``default``."""

    number = to_number(value)
    return number if math.isfinite(number) else float(default)
