"""
Line Classifier: Drop receipt boilerplate before pattern matching.

Totals, tax, tender, header/footer and payment lines often have the same
"name + price" shape as product lines ("Summe 3,69"). Discarding them first
keeps the cascade from turning them into products. The vocabulary comes
from the active rule set, so new terms are added in JSON, not here.
"""
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple


@dataclass(frozen=True)
class NoiseVocabulary:
    """Boilerplate vocabulary of one rule set (all terms lower-case)."""
    contains: Tuple[str, ...]
    prefixes: Tuple[str, ...] = ()
    min_line_length: int = 4
    reject_numeric_only: bool = True

    @classmethod
    def from_config(cls, noise_cfg: dict) -> "NoiseVocabulary":
        """Build from the "noise" section of a rule set."""
        contains = _dedupe(noise_cfg.get("contains", []) + noise_cfg.get("extra_contains", []))
        prefixes = _dedupe(noise_cfg.get("prefixes", []) + noise_cfg.get("extra_prefixes", []))
        return cls(
            contains=contains,
            prefixes=prefixes,
            min_line_length=int(noise_cfg.get("min_line_length", 4)),
            reject_numeric_only=bool(noise_cfg.get("reject_numeric_only", True)),
        )


def _dedupe(terms: Iterable[str]) -> Tuple[str, ...]:
    """Lower-case and drop duplicates, keeping first-seen order."""
    return tuple(dict.fromkeys(t.lower() for t in terms if t))


class LineClassifier:
    """Decides whether an OCR line is noise."""

    def __init__(self, vocabulary: NoiseVocabulary):
        self.vocabulary = vocabulary

    def is_noise(self, line: str) -> bool:
        """
        True if the line is boilerplate and must not reach the cascade.

        Args:
            line: One line of OCR text

        Returns:
            True for short lines, lines containing a vocabulary term
            (case-insensitive), lines starting with a boilerplate prefix and
            lines made only of digits and whitespace
        """
        stripped = line.strip()
        if len(stripped) < self.vocabulary.min_line_length:
            return True

        lowered = stripped.lower()
        if any(term in lowered for term in self.vocabulary.contains):
            return True
        if any(lowered.startswith(prefix) for prefix in self.vocabulary.prefixes):
            return True

        if self.vocabulary.reject_numeric_only:
            if all(ch.isdigit() or ch.isspace() for ch in stripped):
                return True

        return False


def is_noise(line: str, rule_set_id: Optional[str] = None) -> bool:
    """Classify a line with the configured (or given) rule set."""
    # Lazy import to avoid circular dependency
    from .rule_loader import get_rule_set
    return get_rule_set(rule_set_id).classifier.is_noise(line)
