"""
Input checks for the planner engine.

Every helper either returns a normalized value or raises ValidationError;
nothing is silently coerced to 0 or NaN.
"""

import math
from datetime import date, datetime

from dateutil import parser as dtp

from services.errors import ValidationError


def require_number(value, field: str, minimum: float | None = None,
                   maximum: float | None = None, strict: bool = False) -> float:
    """
    Validate a numeric input and return it as a float.

    Args:
        minimum: lower bound (inclusive, or exclusive when strict=True)
        maximum: upper bound (inclusive)
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{field} must be a number, got {value!r}", field=field)

    number = float(value)
    if not math.isfinite(number):
        raise ValidationError(f"{field} must be finite, got {value!r}", field=field)

    if minimum is not None:
        if strict and number <= minimum:
            raise ValidationError(f"{field} must be greater than {minimum:g}", field=field)
        if not strict and number < minimum:
            raise ValidationError(f"{field} must be at least {minimum:g}", field=field)

    if maximum is not None and number > maximum:
        raise ValidationError(f"{field} must be at most {maximum:g}", field=field)

    return number


def require_date(value, field: str) -> date:
    """Accept a date, a datetime or an ISO-8601 string; return a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return dtp.isoparse(value.strip()).date()
        except ValueError:
            raise ValidationError(f"{field} is not an ISO-8601 date: {value!r}", field=field)
    raise ValidationError(f"{field} must be a date, got {value!r}", field=field)


def require_allocation(vector, field: str) -> dict[str, float]:
    """
    Validate an allocation vector: asset key -> percentage in [0, 100].

    Sums are not checked; rounding drift away from 100 is tolerated.
    """
    if not isinstance(vector, dict):
        raise ValidationError(f"{field} must be a mapping of asset -> percentage", field=field)

    cleaned = {}
    for asset, pct in vector.items():
        if not isinstance(asset, str) or not asset.strip():
            raise ValidationError(f"{field} has an invalid asset key: {asset!r}", field=field)
        cleaned[asset] = require_number(pct, f"{field}.{asset}", minimum=0, maximum=100)
    return cleaned


def normalize_allocation(vector, field: str) -> dict[str, float]:
    """
    Validate an allocation and fold its keys to lowercase.

    Keys that collide once folded ("Stocks" and "stocks") are rejected.
    """
    cleaned = {}
    for asset, pct in require_allocation(vector, field).items():
        key = asset.strip().lower()
        if key in cleaned:
            raise ValidationError(f"{field} lists {key!r} more than once", field=field)
        cleaned[key] = pct
    return cleaned
