"""
Price parsing for marketplace CSV exports.
Converts currency strings, cent strings and plain numbers to integer cents.
"""

import math
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Union

PriceValue = Union[str, int, float, None]

_NON_NUMERIC = re.compile(r"[^\d,.\-]")
_ONE_CENT = Decimal("1")


def parse_price_to_cents(price: PriceValue = None, price_cents: PriceValue = None) -> Optional[int]:
    """
    Parse a price from its various export formats to integer cents.

    Resolution order:
        - `price` text ("€12.34", "12,34", "R$ 1.234,56") is a decimal amount
        - otherwise `price_cents` text ("1234") is already in cents
        - otherwise whichever value is numeric (preferring `price`) is taken
          as cents; 0 when both are absent

    Blank strings count as absent.

    Args:
        price: Decimal price, text or number
        price_cents: Price in cents, text or number

    Returns:
        Price in cents, or None if the value is not a number
    """
    if _is_present_text(price):
        return _parse_decimal_amount(price)

    if _is_present_text(price_cents):
        return _parse_cents(price_cents)

    for value in (price, price_cents):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            if isinstance(value, float) and not math.isfinite(value):
                return None
            return _round_half_up(Decimal(str(value)))

    return 0


def _is_present_text(value: PriceValue) -> bool:
    return isinstance(value, str) and value.strip() != ""


def _parse_decimal_amount(text: str) -> Optional[int]:
    cleaned = _NON_NUMERIC.sub("", text)

    if ',' in cleaned and '.' in cleaned:
        # Right-most separator is the decimal point
        if cleaned.rfind(',') > cleaned.rfind('.'):
            cleaned = cleaned.replace('.', '').replace(',', '.')
        else:
            cleaned = cleaned.replace(',', '')
    else:
        # A lone comma is always the decimal separator
        cleaned = cleaned.replace(',', '.')

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not amount.is_finite():
        return None
    return _round_half_up(amount * 100)


def _parse_cents(text: str) -> Optional[int]:
    try:
        amount = Decimal(text.strip())
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount != amount.to_integral_value():
        return None
    return int(amount)


def _round_half_up(amount: Decimal) -> int:
    return int(amount.quantize(_ONE_CENT, rounding=ROUND_HALF_UP))
