import re
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

from errors import ValidationError

EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
MONTH_RE = re.compile(r'(\d{4})-(0[1-9]|1[0-2])')

MAX_NAME_LEN = 100
MAX_DESCRIPTION_LEN = 1000
MAX_FREQUENCY_LEN = 20
MIN_PASSWORD_LEN = 8
# Numeric(12, 2)
MAX_AMOUNT = Decimal('9999999999.99')


def parse_amount(value, field='amount', allow_zero=False):
    """Parse a money value into a scale-2 Decimal.

    Floats are routed through ``str`` so 0.1 stays 0.1. More than two
    fraction digits is rejected rather than rounded.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field} is required")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"{field} must be a number")
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a number")
    if amount < 0 or (amount == 0 and not allow_zero):
        raise ValidationError(f"{field} must be positive")
    if amount > MAX_AMOUNT:
        raise ValidationError(f"{field} is too large")
    if amount != amount.quantize(Decimal('0.01')):
        raise ValidationError(f"{field} must have at most two decimal places")
    return amount.quantize(Decimal('0.01'))


def parse_signed_amount(value, field='balance'):
    """Like parse_amount but allows negatives; credit accounts run below zero."""
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field} is required")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"{field} must be a number")
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a number")
    if abs(amount) > MAX_AMOUNT:
        raise ValidationError(f"{field} is too large")
    if amount != amount.quantize(Decimal('0.01')):
        raise ValidationError(f"{field} must have at most two decimal places")
    return amount.quantize(Decimal('0.01'))


def require_choice(value, choices, field):
    if value not in choices:
        raise ValidationError(f"{field} must be one of: {', '.join(choices)}")
    return value


def require_text(value, field, max_len=MAX_NAME_LEN):
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required")
    value = value.strip()
    if len(value) > max_len:
        raise ValidationError(f"{field} must be at most {max_len} characters")
    return value


def parse_datetime(value, field='date'):
    """Accept ISO 8601 dates or datetimes; aware values are normalised to naive UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValidationError(f"{field} must be an ISO 8601 date")
    else:
        raise ValidationError(f"{field} is required")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_month(value):
    """Validate a ``YYYY-MM`` string and return ``(year, month)``."""
    match = MONTH_RE.fullmatch(value) if isinstance(value, str) else None
    if not match:
        raise ValidationError("month must be in YYYY-MM format")
    return int(match.group(1)), int(match.group(2))


def validate_email(value):
    if not isinstance(value, str) or not EMAIL_RE.match(value.strip()):
        raise ValidationError("A valid email is required")
    return value.strip().lower()


def validate_password(value):
    if not isinstance(value, str) or len(value) < MIN_PASSWORD_LEN:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LEN} characters")
    return value


def parse_bool(value, field):
    if not isinstance(value, bool):
        raise ValidationError(f"{field} must be true or false")
    return value
