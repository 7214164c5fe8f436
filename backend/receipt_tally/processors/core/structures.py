"""
Receipt Processing Data Structures.

This module defines the data structures shared by the extraction and
aggregation stages.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional


@dataclass(frozen=True)
class Record:
    """A (name, price) pair extracted from one receipt line."""
    name: str
    price: Decimal


@dataclass(frozen=True)
class PatternMatch:
    """Raw captures of the cascade pattern that matched a line."""
    pattern: str
    name: str
    price: str
    quantity: Optional[int] = None  # Helps discrimination only, never reaches a Record


@dataclass
class AggregateEntry:
    """Running total accumulated under one canonical product name."""
    canonical_name: str
    total: Decimal = Decimal("0")
    record_count: int = 0
    variants: List[str] = field(default_factory=list)  # Spellings merged here, first-seen order

    def add(self, record: Record) -> None:
        """Fold a record into this entry."""
        self.total += record.price
        self.record_count += 1
        if record.name not in self.variants:
            self.variants.append(record.name)
