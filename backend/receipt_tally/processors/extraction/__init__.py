"""
Extraction: noise classification, pattern cascade and the line pipeline.
"""
from .line_classifier import LineClassifier, NoiseVocabulary, is_noise
from .pattern_cascade import PatternCascade, PatternDefinition, parse_quantity, extract
from .rule_loader import RuleSet, RuleSetNotFound, get_rule_set, list_rule_sets
from .pipeline import ExtractionPipeline, extract_records

__all__ = [
    "LineClassifier", "NoiseVocabulary", "is_noise",
    "PatternCascade", "PatternDefinition", "parse_quantity", "extract",
    "RuleSet", "RuleSetNotFound", "get_rule_set", "list_rule_sets",
    "ExtractionPipeline", "extract_records",
]
