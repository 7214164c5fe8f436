"""
Fuzzy Aggregator: Merge spelling variants of the same product across receipts.

Greedy, online, single-pass clustering:
- Each record is scored against every canonical key seen so far.
- If the best score is strictly greater than the threshold, the price is
  added to that key's entry; otherwise the record's own name becomes a new
  canonical key.
- Keys are scanned in lexicographic order and only a strictly higher score
  replaces the current best, so ties go to the lexicographically smallest key.

The first-seen spelling of a product stays its canonical key for the rest of
the run. Feeding the same records in a different order can produce different
clusters; feeding them in the same order always produces the same result.
Cost is O(k) per record for k canonical keys.
"""
from bisect import insort
from decimal import Decimal
from threading import Lock
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Tuple
import logging

from rapidfuzz import fuzz

from ..core.structures import AggregateEntry, Record

logger = logging.getLogger(__name__)

# rapidfuzz scorers, all on a 0-100 scale
SCORERS: Dict[str, Callable[..., float]] = {
    "ratio": fuzz.ratio,
    "partial_ratio": fuzz.partial_ratio,
    "token_sort_ratio": fuzz.token_sort_ratio,
    "token_set_ratio": fuzz.token_set_ratio,
    "WRatio": fuzz.WRatio,
}

def get_scorer(name: str) -> Callable[..., float]:
    """
    Look up a rapidfuzz scorer by name.

    Raises:
        ValueError: If the scorer name is unknown
    """
    try:
        return SCORERS[name]
    except KeyError:
        raise ValueError(
            f"Unknown similarity scorer '{name}' (choose from {', '.join(SCORERS)})"
        ) from None


class FuzzyAggregator:
    """Folds records into canonical name → running total."""

    def __init__(
        self,
        threshold: Optional[float] = None,
        scorer: Optional[str] = None,
    ):
        from ...config import settings
        self.threshold = settings.similarity_threshold if threshold is None else threshold
        self.scorer_name = scorer or settings.similarity_scorer
        self._scorer = get_scorer(self.scorer_name)
        self._entries: Dict[str, AggregateEntry] = {}
        self._sorted_keys: List[str] = []
        # Single writer: greedy clustering is order-dependent
        self._lock = Lock()

    def best_match(self, name: str) -> Optional[Tuple[str, float]]:
        """
        Find the canonical key the name would merge into.

        Returns:
            (key, score) of the best key scoring above the threshold, or None
        """
        best_key = None
        best_score = self.threshold
        for key in self._sorted_keys:
            score = self._scorer(key, name)
            if score > best_score:
                best_key, best_score = key, score
        if best_key is None:
            return None
        return best_key, best_score

    def absorb(self, record: Record) -> str:
        """
        Assign a record to an entry.

        Args:
            record: Extracted record (name already normalized)

        Returns:
            Canonical key the record was added to
        """
        with self._lock:
            found = self.best_match(record.name)
            if found:
                key, score = found
                if key != record.name:
                    logger.debug(f"Merged '{record.name}' into '{key}' (score={score:.1f})")
            else:
                key = record.name
                self._entries[key] = AggregateEntry(canonical_name=key)
                self._insert_key(key)
                logger.debug(f"New product '{key}'")
            self._entries[key].add(record)
            return key

    def absorb_all(self, records: List[Record]) -> None:
        for record in records:
            self.absorb(record)

    def _insert_key(self, key: str) -> None:
        """Keep keys sorted for the deterministic tie-break."""
        insort(self._sorted_keys, key)

    def snapshot(self) -> Mapping[str, Decimal]:
        """Read-only view of canonical name → total."""
        with self._lock:
            return MappingProxyType({k: e.total for k, e in self._entries.items()})

    def entries(self) -> List[AggregateEntry]:
        """Aggregate entries in first-seen order."""
        with self._lock:
            return list(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)


def aggregate_records(
    records: List[Record],
    threshold: Optional[float] = None,
    scorer: Optional[str] = None,
) -> Mapping[str, Decimal]:
    """Aggregate a finite list of records in order and return the totals."""
    aggregator = FuzzyAggregator(threshold=threshold, scorer=scorer)
    aggregator.absorb_all(records)
    return aggregator.snapshot()
