from decimal import Decimal

import pytest

from plazacore_backend.errors import ValidationError
from plazacore_backend.utils.billing import (
    calculate_amount,
    calculate_consumption,
    next_bill_number,
    parse_month,
    to_bool,
    to_decimal,
    to_int,
)


def test_next_bill_number_follows_highest_existing():
    assert next_bill_number("RENT", 2025, ["RENT-2025-001", "RENT-2025-002"]) == "RENT-2025-003"


def test_next_bill_number_starts_at_one():
    assert next_bill_number("ELE", 2025, []) == "ELE-2025-001"


def test_next_bill_number_ignores_other_years_and_prefixes():
    existing = ["RENT-2024-009", "GAS-2025-007", "RENT-2025-abc", None]
    assert next_bill_number("RENT", 2025, existing) == "RENT-2025-001"


def test_next_bill_number_counts_numbers_minted_in_the_same_run():
    assert next_bill_number("RENT", 2025, ["RENT-2025-001"], {"RENT-2025-004"}) == "RENT-2025-005"


def test_consumption_and_amount():
    consumption = calculate_consumption(1000, 1050)
    assert consumption == 50
    assert calculate_amount(consumption, "8.5") == Decimal("425.0")


def test_lower_current_reading_clamps_to_zero():
    assert calculate_consumption(1200, 1100) == 0


def test_to_decimal_rejects_text():
    with pytest.raises(ValidationError):
        to_decimal("lots", "amount")


def test_to_decimal_blank_is_zero():
    assert to_decimal("") == 0
    assert to_decimal(None) == 0


def test_parse_month():
    assert parse_month("2025-03") == (2025, 3)
    with pytest.raises(ValidationError):
        parse_month("2025-13")


def test_to_decimal_rejects_non_finite_values():
    for value in ("NaN", "Infinity", "-inf", "sNaN"):
        with pytest.raises(ValidationError):
            to_decimal(value)


def test_to_int_and_to_bool():
    assert to_int("7", "month") == 7
    with pytest.raises(ValidationError):
        to_int("march", "month")
    with pytest.raises(ValidationError):
        to_int(None, "month")
    assert to_bool("false") is False
    assert to_bool("0") is False
    assert to_bool("true") is True
    assert to_bool(True) is True
