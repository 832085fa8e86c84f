from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any


# Maximum price per cup: $99,999.99 (9,999,999 cents)
MAX_PRICE_CENTS = 9_999_999

# Largest value a SQLite INTEGER column holds
MAX_ID = 2**63 - 1

# Maximum cups on one invoice; keeps cups * price cents well inside int64
MAX_CUPS = 1_000_000


class ValidationError(ValueError):
    """400-level input problem."""


class NotFoundError(ValueError):
    """404-level missing referenced entity (e.g., unknown store_id)."""


class ConflictError(ValueError):
    """Uniqueness conflict (duplicate username or invoice number)."""


def require_json_object(payload: Any) -> dict:
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def coerce_int(
    key: str,
    value: Any,
    *,
    required: bool = True,
    minimum: int | None = None,
    maximum: int | None = None,
) -> int | None:
    """
    Strict integer coercion.

    Accepts ints and plain digit strings. Rejects bools, floats, decimal
    strings and scientific notation.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise ValidationError(f"{key} is required")
        return None

    if isinstance(value, bool):
        raise ValidationError(f"{key} must be an integer")

    if isinstance(value, int):
        result = value
    elif isinstance(value, str):
        stripped = value.strip()
        # Reject scientific notation (e.g., "1e15", "1E10")
        if "e" in stripped.lower():
            raise ValidationError(f"{key} must be a plain integer (scientific notation not allowed)")
        # Reject decimal points (e.g., "12.5")
        if "." in stripped:
            raise ValidationError(f"{key} must be an integer (no decimals)")
        try:
            result = int(stripped)
        except ValueError:
            raise ValidationError(f"{key} must be an integer")
    elif isinstance(value, float):
        raise ValidationError(f"{key} must be an integer, not a decimal")
    else:
        raise ValidationError(f"{key} must be an integer")

    if minimum is not None and result < minimum:
        raise ValidationError(f"{key} must be >= {minimum}")
    if maximum is not None and result > maximum:
        raise ValidationError(f"{key} must be <= {maximum}")
    return result


def coerce_price_cents(key: str, value: Any) -> int:
    """
    Parse a non-negative money amount with at most two decimals into cents.

    Accepts JSON numbers and numeric strings ("2.5", "2.50").
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{key} is required")
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValidationError(f"{key} must be a number")

    try:
        # str() keeps floats like 2.5 from picking up binary noise
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"{key} must be a number")

    if not amount.is_finite():
        raise ValidationError(f"{key} must be a number")
    if amount < 0:
        raise ValidationError(f"{key} must be >= 0")

    cents = amount * 100
    if cents != cents.to_integral_value():
        raise ValidationError(f"{key} must have at most 2 decimal places")
    cents = int(cents)
    if cents > MAX_PRICE_CENTS:
        raise ValidationError(f"{key} exceeds maximum allowed value")
    return cents


def coerce_bool(key: str, value: Any, *, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise ValidationError(f"{key} must be a boolean")


def coerce_text(key: str, value: Any, *, required: bool = False, max_length: int | None = None) -> str | None:
    if value is None:
        if required:
            raise ValidationError(f"{key} is required")
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")

    text = value.strip()
    if not text:
        if required:
            raise ValidationError(f"{key} is required")
        return None
    if max_length is not None and len(text) > max_length:
        raise ValidationError(f"{key} must be at most {max_length} characters")
    return text
