"""Tests for Indian-system amount spelling."""

import pytest

from src.core.services.number_words import amount_in_words, number_to_words


@pytest.mark.parametrize(
    ("value", "words"),
    [
        (0, "Zero"),
        (7, "Seven"),
        (10, "Ten"),
        (19, "Nineteen"),
        (20, "Twenty"),
        (45, "Forty Five"),
        (100, "One Hundred"),
        (115, "One Hundred Fifteen"),
        (999, "Nine Hundred Ninety Nine"),
        (1000, "One Thousand"),
        (1001, "One Thousand One"),
        (25_250, "Twenty Five Thousand Two Hundred Fifty"),
        (100_000, "One Lakh"),
        (1_000_000, "Ten Lakh"),
        (10_000_000, "One Crore"),
        (10_000_100, "One Crore One Hundred"),
        (123_456_789, "Twelve Crore Thirty Four Lakh Fifty Six Thousand Seven Hundred Eighty Nine"),
    ],
)
def test_number_to_words(value, words):
    assert number_to_words(value) == words


def test_zero_groups_emit_no_scale_word():
    words = number_to_words(1_000_000)
    assert "Zero" not in words
    assert "Thousand" not in words


def test_more_than_999_crore_spells_the_crore_count():
    assert number_to_words(10_000_000_000) == "One Thousand Crore"


def test_no_stray_whitespace():
    words = number_to_words(20_00_05_000)
    assert words == "Twenty Crore Five Thousand"
    assert "  " not in words


def test_negative_raises():
    with pytest.raises(ValueError):
        number_to_words(-1)


class TestAmountInWords:
    def test_fraction_is_dropped(self):
        assert amount_in_words(225.75) == "INR Two Hundred Twenty Five Only"

    def test_rounds_to_paise_before_dropping_fraction(self):
        assert amount_in_words(19.99 * 100) == "INR One Thousand Nine Hundred Ninety Nine Only"
        assert amount_in_words(999.999) == "INR One Thousand Only"

    def test_currency_code(self):
        assert amount_in_words(5, "USD") == "USD Five Only"

    def test_zero_and_negative(self):
        assert amount_in_words(0) == "INR Zero Only"
        assert amount_in_words(-40) == "INR Zero Only"

    def test_non_finite(self):
        assert amount_in_words(float("nan")) == "INR Zero Only"
        assert amount_in_words(float("inf")) == "INR Zero Only"
