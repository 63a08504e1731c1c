import math

import pytest

from moloja.utils.pt_number import (
    normalize_thousands_in_text,
    parse_pt_number_flexible,
    parse_words_thousands,
)


class TestParsePtNumberFlexible:
    def test_dot_thousands(self):
        assert parse_pt_number_flexible("1.500") == 1500

    def test_comma_thousands(self):
        assert parse_pt_number_flexible("23,500") == 23500

    def test_decimal_below_thousand(self):
        assert parse_pt_number_flexible("999.99") == pytest.approx(999.99)

    def test_pt_format_drops_decimals_over_thousand(self):
        assert parse_pt_number_flexible("1.500,00") == 1500

    def test_pt_format_keeps_decimals_below_thousand(self):
        assert parse_pt_number_flexible("12,5") == pytest.approx(12.5)

    def test_space_grouping(self):
        assert parse_pt_number_flexible("1 234") == 1234

    def test_plain_integer(self):
        assert parse_pt_number_flexible("42") == 42

    def test_words_are_not_numbers(self):
        assert math.isnan(parse_pt_number_flexible("mil"))

    def test_empty(self):
        assert math.isnan(parse_pt_number_flexible(""))


class TestNormalizeThousandsInText:
    def test_spelled_out_thousands(self):
        assert normalize_thousands_in_text("dois mil e quinhentos") == "2500"

    def test_tens_thousands(self):
        assert normalize_thousands_in_text("vinte e três mil") == "23000"

    def test_inside_sentence(self):
        assert normalize_thousands_in_text("arroz de dois mil kz") == "arroz de 2000 kz"

    def test_digit_multiplier(self):
        assert normalize_thousands_in_text("luz 15 mil kwanzas") == "luz 15000 kwanzas"

    def test_currency_word_inside_expression(self):
        assert normalize_thousands_in_text("dois mil kwanzas e quinhentos") == "2500"

    def test_trailing_currency_word_kept(self):
        assert normalize_thousands_in_text("paguei três mil e cem kz hoje") == "paguei 3100 kz hoje"

    def test_de_before_multiplier_left_in_text(self):
        assert normalize_thousands_in_text("custa de dois mil e quinhentos") == "custa de 2500"

    def test_de_between_number_words_ignored(self):
        assert normalize_thousands_in_text("cinco de mil") == "5000"

    def test_numeric_tokens(self):
        assert normalize_thousands_in_text("pagou 1.500 hoje") == "pagou 1500 hoje"

    def test_small_numbers_untouched(self):
        assert normalize_thousands_in_text("2 pães de 150") == "2 pães de 150"

    def test_empty(self):
        assert normalize_thousands_in_text("") == ""


def test_parse_words_thousands():
    assert parse_words_thousands("custa mil e duzentos") == 1200
    assert parse_words_thousands("sem números") is None
