"""Summing the numbers found in a selection."""

import re
from decimal import Decimal
from typing import List, NamedTuple, Optional

_NUMBER = re.compile(r"-?\d+(?:\.(\d+))?")


class SelectionNumber(NamedTuple):
    value: Decimal
    fraction_digits: int


def extract_numbers(text: str) -> List[SelectionNumber]:
    """Find decimal numbers in text, remembering how many decimals each had.

    >>> [n.fraction_digits for n in extract_numbers("1.23 apples 4.5 bananas 6")]
    [2, 1, 0]
    """
    numbers = []
    for match in _NUMBER.finditer(text):
        fraction = match.group(1)
        numbers.append(SelectionNumber(Decimal(match.group(0)), len(fraction) if fraction else 0))
    return numbers


def sum_selection(text: str) -> Optional[str]:
    """Sum the numbers in text.

    The result keeps as many decimals as the most precise number, so
    "1.50 2.5" sums to "4.00". Returns None if there are no numbers.
    """
    numbers = extract_numbers(text)
    if not numbers:
        return None
    total = sum((n.value for n in numbers), Decimal(0))
    digits = max(n.fraction_digits for n in numbers)
    return f"{total:.{digits}f}"
