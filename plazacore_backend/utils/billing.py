"""Plain billing rules shared by the models, routes and batch jobs."""
from datetime import date
from decimal import Decimal, InvalidOperation

from dateutil.relativedelta import relativedelta

from ..errors import ValidationError

BILL_PREFIXES = {
    "rent": "RENT",
    "electricity": "ELE",
    "gas": "GAS",
    "maintenance": "MAIN",
    "combined": "COMB",
}

METER_BILL_PREFIXES = {
    "electricity": "ELE-MR",
    "gas": "GAS-MR",
}

ZERO = Decimal("0")


def to_decimal(value, field="amount"):
    if value is None or value == "":
        return ZERO
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number")
    if not number.is_finite():
        raise ValidationError(f"{field} must be a number")
    return number


def to_int(value, field):
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a whole number")
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a whole number")


def to_bool(value):
    """JSON booleans as given; strings like "false" or "0" read as False."""
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in ("1", "true", "yes", "y", "on")


def parse_date(value, field="date"):
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(f"{field} must be a date in YYYY-MM-DD format")


def next_bill_number(prefix, year, existing, minted=None):
    """
    Next sequential number for ``{prefix}-{year}-NNN``.

    Every number in ``existing`` (already stored) and ``minted`` (handed out
    earlier in the same run) that starts with the prefix/year pattern is
    parsed; the result is max + 1, zero-padded to three digits.
    """
    pattern = f"{prefix}-{year}-"
    numbers = []
    for bill_number in list(existing) + list(minted or ()):
        if not bill_number or not bill_number.startswith(pattern):
            continue
        suffix = bill_number[len(pattern):]
        if suffix.isdigit():
            numbers.append(int(suffix))
    next_number = max(numbers) + 1 if numbers else 1
    return f"{pattern}{next_number:03d}"


def calculate_consumption(previous, current):
    """Units used between two readings; a lower current reading clamps to zero."""
    consumption = to_decimal(current) - to_decimal(previous)
    return consumption if consumption > 0 else ZERO


def calculate_amount(consumption, rate):
    return to_decimal(consumption) * to_decimal(rate, "rate_per_unit")


def month_bounds(year, month):
    """First day of the month and first day of the following month."""
    start = date(year, month, 1)
    return start, start + relativedelta(months=1)


def parse_month(value):
    """'YYYY-MM' -> (year, month)."""
    try:
        year, month = map(int, value.split("-"))
        date(year, month, 1)
    except (ValueError, AttributeError):
        raise ValidationError("Invalid month format. Use YYYY-MM")
    return year, month
