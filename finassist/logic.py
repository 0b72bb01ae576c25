import math
from decimal import Decimal, InvalidOperation


class FinassistError(Exception):
    """Base class for errors surfaced to the user."""


class ValidationError(FinassistError, ValueError):
    """Raised for missing or invalid user input; nothing is mutated."""


class EmptyStateError(FinassistError):
    """Raised when an operation needs at least one transaction."""


DEFAULT_CATEGORY = "other"


def validate_kind(s: str) -> str:
    if s not in {"income", "expense"}:
        raise ValidationError("kind must be income or expense")
    return s


def parse_amount(s) -> float:
    if s is None or (isinstance(s, str) and not s.strip()):
        raise ValidationError("amount required")
    try:
        d = Decimal(str(s).strip())
    except InvalidOperation as e:
        raise ValidationError("amount invalid") from e
    if not d.is_finite():
        raise ValidationError("amount invalid")
    amount = float(d)
    if not math.isfinite(amount) or amount <= 0:
        raise ValidationError("amount must be positive")
    return amount


def validate_description(s) -> str:
    description = (s or "").strip()
    if not description:
        raise ValidationError("description required")
    return description


def normalize_category(s) -> str:
    return (s or "").strip() or DEFAULT_CATEGORY


def validate_question(s) -> str:
    question = (s or "").strip()
    if not question:
        raise ValidationError("question required")
    return question
