"""Form and JSON input checks shared by the stores."""

import math

from src.database.models import PAYMENT_METHODS
from src.services.dates import normalize_date_only
from src.services.errors import ParseError, ValidationError

# Form values the public page has historically sent for each method
PAYMENT_ALIASES = {"dinheiro": "cash"}


def require_text(value, field: str) -> str:
    text = (value or "").strip() if isinstance(value, str) else ""
    if not text:
        raise ValidationError(f"{field} is required")
    return text


def optional_text(value) -> str | None:
    if not isinstance(value, str):
        return None
    return value.strip() or None


def parse_amount(value, field: str) -> float:
    """A strictly positive money amount. Accepts "12,50" as well as "12.50"."""
    if value is None or value == "":
        raise ValidationError(f"{field} is required")
    if isinstance(value, str):
        value = value.strip().replace(",", ".")
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field}") from None
    if not math.isfinite(amount) or amount <= 0:
        raise ValidationError(f"Invalid {field}")
    return amount


def parse_percent(value) -> float | None:
    """Commission percent between 0 and 100; blank means "use the default"."""
    if value is None or value == "":
        return None
    try:
        percent = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Invalid commission percent") from None
    if not 0 <= percent <= 100:
        raise ValidationError("Commission percent must be between 0 and 100")
    return percent


def parse_day(value, field: str) -> str:
    if not value:
        raise ValidationError(f"{field} is required")
    try:
        return normalize_date_only(value)
    except ParseError as exc:
        raise ValidationError(str(exc)) from exc


def normalize_payment_method(value) -> str | None:
    """pix or cash; anything else is stored as no method."""
    method = (value or "").strip().lower() if isinstance(value, str) else ""
    method = PAYMENT_ALIASES.get(method, method)
    return method if method in PAYMENT_METHODS else None
