"""
Aggregation: fuzzy merging of product names and result ordering.
"""
from .fuzzy_aggregator import FuzzyAggregator, SCORERS, get_scorer, aggregate_records
from .result_sorter import sort_totals, grand_total, build_report

__all__ = [
    "FuzzyAggregator", "SCORERS", "get_scorer", "aggregate_records",
    "sort_totals", "grand_total", "build_report",
]
