"""
Unit tests for price parsing
"""
import pytest

from tradeledger.parsing.price_parser import parse_price_to_cents


@pytest.mark.unit
class TestDecimalPriceText:
    """`price` column text is a decimal amount."""

    @pytest.mark.parametrize("text", ["€12.34", "12,34", "12.34 €", " 12.34 "])
    def test_common_formats(self, text):
        assert parse_price_to_cents(price=text) == 1234

    def test_brazilian_format(self):
        assert parse_price_to_cents(price="R$ 1.234,56") == 123456

    def test_thousands_with_decimal_point(self):
        assert parse_price_to_cents(price="$1,234.56") == 123456

    def test_lone_comma_is_decimal_separator(self):
        """Three digits after a lone comma are still decimals."""
        assert parse_price_to_cents(price="1,234") == 123
        assert parse_price_to_cents(price="1,235") == 124

    def test_rounds_half_up(self):
        assert parse_price_to_cents(price="12.345") == 1235
        assert parse_price_to_cents(price="0.005") == 1

    def test_whole_amount(self):
        assert parse_price_to_cents(price="7") == 700

    def test_price_text_wins_over_cents(self):
        assert parse_price_to_cents(price="1.00", price_cents="5000") == 100

    @pytest.mark.parametrize("text", ["abc", "€", "1.2.3", "--5"])
    def test_unparseable(self, text):
        assert parse_price_to_cents(price=text) is None

    def test_negative_amount_is_returned(self):
        """The validator decides what to do with negatives."""
        assert parse_price_to_cents(price="-1.50") == -150


@pytest.mark.unit
class TestCentsText:
    """`price_cents` column text is already in cents."""

    def test_integer_text(self):
        assert parse_price_to_cents(price_cents="1234") == 1234

    def test_whitespace(self):
        assert parse_price_to_cents(price_cents=" 2850 ") == 2850

    def test_blank_price_falls_through_to_cents(self):
        assert parse_price_to_cents(price="  ", price_cents="99") == 99

    def test_fractional_cents_fail(self):
        assert parse_price_to_cents(price_cents="28.50") is None

    def test_unparseable(self):
        assert parse_price_to_cents(price_cents="n/a") is None


@pytest.mark.unit
class TestNumericValues:
    """Numbers are taken as cents."""

    def test_integer_cents(self):
        assert parse_price_to_cents(price_cents=2850) == 2850

    def test_float_rounds_half_up(self):
        assert parse_price_to_cents(price=12.5) == 13

    def test_price_preferred_over_cents(self):
        assert parse_price_to_cents(price=10, price_cents=20) == 10

    def test_non_finite(self):
        assert parse_price_to_cents(price=float('nan')) is None
        assert parse_price_to_cents(price_cents=float('inf')) is None

    def test_both_absent_is_zero(self):
        assert parse_price_to_cents() == 0
        assert parse_price_to_cents(price="", price_cents="") == 0
