"""
Price Normalizer: Convert OCR price strings in comma or dot locale to Decimal.

German receipts print "1,19", English ones "1.19". A comma is always read as
the decimal separator.
"""
from decimal import Decimal, InvalidOperation
import re

# ASCII digits, optional sign and decimal part
PRICE_PATTERN = re.compile(r"[+-]?[0-9]+(?:\.[0-9]+)?")


class InvalidPrice(ValueError):
    """Raised when a price string does not parse to a finite number."""

    def __init__(self, text: str):
        super().__init__(f"Invalid price: {text!r}")
        self.text = text


def parse_price(text: str) -> Decimal:
    """
    Parse a textual decimal amount.

    Args:
        text: Price text such as "12,00" or "12.00"

    Returns:
        Parsed Decimal value

    Raises:
        InvalidPrice: If the text is not a finite number (e.g. "abc", "12,0,0")
    """
    cleaned = text.strip()
    if "," in cleaned:
        cleaned = cleaned.replace(",", ".")
    if not PRICE_PATTERN.fullmatch(cleaned):
        raise InvalidPrice(text)
    try:
        value = Decimal(cleaned)
    except InvalidOperation as e:
        raise InvalidPrice(text) from e
    if not value.is_finite():
        raise InvalidPrice(text)
    return value


def is_price_in_range(price: Decimal, min_price: float = 0.0, max_price: float = 1000.0) -> bool:
    """
    Range gate applied by callers after parsing.

    The upper bound rejects OCR-garbled multi-digit totals misread as unit prices.
    """
    return Decimal(str(min_price)) < price < Decimal(str(max_price))
