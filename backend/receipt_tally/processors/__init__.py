"""
Processors: text normalization, line extraction and fuzzy aggregation.
"""
