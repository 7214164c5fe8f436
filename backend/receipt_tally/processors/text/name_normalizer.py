"""
Product Name Normalizer

Turns the raw name captured from a receipt line into the key used for
aggregation.

For example:
- "Löwenbräu Original*" → "löwenbräu original"
- "  CHEESEBURGER  -  " → "cheeseburger"
"""

# Extended Latin letters used on German receipts
EXTENDED_LETTERS = frozenset("äöüßÄÖÜ")


def normalize_product_name(raw_name: str) -> str:
    """
    Normalize a product name.

    Rules:
    1. Lower-case
    2. Keep alphanumerics, whitespace and EXTENDED_LETTERS; drop currency
       symbols, asterisks and stray punctuation
    3. Collapse whitespace runs and trim

    Args:
        raw_name: Name substring captured by a cascade pattern

    Returns:
        Normalized name (idempotent)
    """
    if not raw_name:
        return ""
    lowered = raw_name.lower()
    kept = "".join(
        ch for ch in lowered
        if ch.isalnum() or ch.isspace() or ch in EXTENDED_LETTERS
    )
    return " ".join(kept.split())
