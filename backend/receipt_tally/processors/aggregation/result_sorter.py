"""
Result Sorter: Order aggregated totals for presentation and build the report.
"""
from decimal import Decimal
from typing import Iterable, List, Mapping, Optional, Tuple

from ...models import AnalysisReport, ImageFailure, ProductTotal
from ..core.structures import AggregateEntry


def sort_totals(totals: Mapping[str, Decimal]) -> List[Tuple[str, Decimal]]:
    """
    Order (name, total) pairs by total descending.

    Equal totals are ordered by name so output is reproducible. The mapping
    is not modified.
    """
    return sorted(totals.items(), key=lambda item: (-item[1], item[0]))


def grand_total(totals: Mapping[str, Decimal]) -> Decimal:
    """Sum of all product totals."""
    return sum(totals.values(), Decimal("0"))


def build_report(
    entries: Iterable[AggregateEntry],
    images_processed: int = 0,
    failures: Optional[List[ImageFailure]] = None,
) -> AnalysisReport:
    """
    Build the batch report from aggregate entries.

    Args:
        entries: Aggregate entries (any order)
        images_processed: Number of images OCR'd successfully
        failures: Images skipped because of OCR failures

    Returns:
        AnalysisReport with products sorted by total descending
    """
    by_name = {e.canonical_name: e for e in entries}
    ordered = sort_totals({name: e.total for name, e in by_name.items()})
    products = [
        ProductTotal(
            name=name,
            total=total,
            record_count=by_name[name].record_count,
            variants=list(by_name[name].variants),
        )
        for name, total in ordered
    ]
    return AnalysisReport(
        products=products,
        grand_total=sum((p.total for p in products), Decimal("0")),
        product_count=len(products),
        images_processed=images_processed,
        failures=failures or [],
    )
