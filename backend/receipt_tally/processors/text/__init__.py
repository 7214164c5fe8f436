"""
Text normalizers for prices and product names.
"""
from .price_normalizer import InvalidPrice, parse_price, is_price_in_range
from .name_normalizer import normalize_product_name

__all__ = [
    "InvalidPrice", "parse_price", "is_price_in_range",
    "normalize_product_name",
]
