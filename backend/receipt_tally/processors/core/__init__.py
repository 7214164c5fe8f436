"""
Processors Core: Shared data structures.

Used by both the extraction pipeline and the aggregation stage.
"""
from .structures import Record, PatternMatch, AggregateEntry

__all__ = [
    "Record", "PatternMatch", "AggregateEntry",
]
