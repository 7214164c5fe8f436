"""
Extraction Pipeline: Turn one OCR text block into product records.

Steps per line: trim → noise check → pattern cascade → price parse and
range gate → name checks → name normalization. A line that fails any step
yields no record; that is routine (headers, separators, unparseable
items) and only logged at debug level.
"""
from decimal import Decimal
from typing import Iterator, List, Optional
import logging

from ..core.structures import PatternMatch, Record
from ..text.name_normalizer import normalize_product_name
from ..text.price_normalizer import InvalidPrice, is_price_in_range, parse_price
from .rule_loader import RuleSet, get_rule_set

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 3


def _is_valid_name(raw_name: str) -> bool:
    """Trimmed name must have 3+ characters and at least one letter."""
    name = raw_name.strip()
    if len(name) < MIN_NAME_LENGTH:
        return False
    return any(ch.isalpha() for ch in name)


class ExtractionPipeline:
    """
    Orchestrates LineClassifier + PatternCascade + normalizers.

    The rule set is resolved once in the constructor; the pipeline holds no
    per-text state, so one instance serves a whole batch.
    """

    def __init__(
        self,
        rule_set: Optional[RuleSet] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
    ):
        from ...config import settings
        self.rule_set = rule_set or get_rule_set()
        self.min_price = settings.min_price if min_price is None else min_price
        self.max_price = settings.max_price if max_price is None else max_price

    def extract_line(self, line: str) -> Optional[Record]:
        """
        Extract a record from a single line.

        Returns:
            Record, or None if the line is noise, unmatched or rejected
        """
        line = line.strip()
        if not line:
            return None
        if self.rule_set.classifier.is_noise(line):
            logger.debug(f"Noise line skipped: {line!r}")
            return None

        match = self.rule_set.cascade.extract(line)
        if match is None:
            logger.debug(f"No pattern matched: {line!r}")
            return None

        return self._to_record(match, line)

    def _to_record(self, match: PatternMatch, line: str) -> Optional[Record]:
        """Validate cascade captures and build the record."""
        try:
            price = parse_price(match.price)
        except InvalidPrice:
            logger.debug(f"Invalid price {match.price!r} in line: {line!r}")
            return None
        if not is_price_in_range(price, self.min_price, self.max_price):
            logger.debug(f"Price {price} out of range in line: {line!r}")
            return None

        if not _is_valid_name(match.name):
            logger.debug(f"Rejected name {match.name!r} in line: {line!r}")
            return None
        name = normalize_product_name(match.name)
        if not name:
            return None

        return Record(name=name, price=price)

    def iter_records(self, text: str) -> Iterator[Record]:
        """Yield records line by line, in text order."""
        for raw_line in text.splitlines():
            record = self.extract_line(raw_line)
            if record is not None:
                yield record

    def extract_records(self, text: str) -> List[Record]:
        """
        Extract all records of one receipt.

        Args:
            text: OCR text of one receipt, one receipt line per text line

        Returns:
            Records in line order (may be empty)
        """
        records = list(self.iter_records(text))
        logger.debug(f"Extracted {len(records)} records from {len(text.splitlines())} lines")
        return records


def extract_records(text: str, rule_set_id: Optional[str] = None) -> List[Record]:
    """Convenience wrapper: extract records with a default-configured pipeline."""
    return ExtractionPipeline(rule_set=get_rule_set(rule_set_id)).extract_records(text)


def sum_prices(records: List[Record]) -> Decimal:
    """Sum of record prices (receipt-level subtotal of extracted items)."""
    return sum((r.price for r in records), Decimal("0"))
