"""Tests for summing numbers in a selection."""

from decimal import Decimal

from notemark.selection_math import extract_numbers, sum_selection


def test_extract_numbers():
    numbers = extract_numbers("1.23 apples, -4.5 bananas and 6")
    assert [n.value for n in numbers] == [Decimal("1.23"), Decimal("-4.5"), Decimal("6")]
    assert [n.fraction_digits for n in numbers] == [2, 1, 0]


def test_sum_keeps_widest_precision():
    assert sum_selection("1.50 2.5") == "4.00"
    assert sum_selection("1.1\n2.25 3") == "6.35"


def test_integers():
    assert sum_selection("1. milk\n2. eggs\n3. bread") == "6"


def test_no_numbers():
    assert sum_selection("no digits here") is None
    assert sum_selection("") is None


def test_decimal_arithmetic_is_exact():
    assert sum_selection("0.1 0.2") == "0.3"
