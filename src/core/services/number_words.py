"""
Spell out whole currency amounts in the Indian numbering system.

Digits are grouped as crore (10^7), lakh (10^5), thousand (10^3) and the
final 0-999, e.g. 12,34,56,789 -> "Twelve Crore Thirty Four Lakh Fifty Six
Thousand Seven Hundred Eighty Nine".
"""

import math

_ONES = [
    "", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine",
]
_TEENS = [
    "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen",
    "Sixteen", "Seventeen", "Eighteen", "Nineteen",
]
_TENS = [
    "", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety",
]

# Peeled largest first
_SCALES = [
    (10_000_000, "Crore"),
    (100_000, "Lakh"),
    (1_000, "Thousand"),
]


def _below_thousand(n: int) -> list[str]:
    words: list[str] = []
    if n >= 100:
        words += [_ONES[n // 100], "Hundred"]
        n %= 100
    if n >= 20:
        words.append(_TENS[n // 10])
        n %= 10
    elif n >= 10:
        words.append(_TEENS[n - 10])
        return words
    if n > 0:
        words.append(_ONES[n])
    return words


def _spell(n: int) -> list[str]:
    words: list[str] = []
    for size, name in _SCALES:
        group, n = divmod(n, size)
        if not group:
            continue
        # More than 999 crore: spell the crore count itself
        words += _spell(group) if group >= 1000 else _below_thousand(group)
        words.append(name)
    words += _below_thousand(n)
    return words


def number_to_words(value: int) -> str:
    """Convert a non-negative integer to words.

    Raises:
        ValueError: If ``value`` is negative.
    """
    if value < 0:
        raise ValueError(f"Cannot spell a negative amount: {value}")
    if value == 0:
        return "Zero"
    return " ".join(_spell(value))


def amount_in_words(amount: float, currency_code: str = "INR") -> str:
    """Phrase used on invoices, e.g. ``"INR Two Hundred Fifty Only"``.

    The amount is rounded to paise first so it agrees with the printed
    figure, then the fractional part is dropped. Negative or non-finite
    amounts are spelled as zero.
    """
    whole = math.floor(round(amount, 2)) if math.isfinite(amount) and amount > 0 else 0
    return f"{currency_code} {number_to_words(whole)} Only"
