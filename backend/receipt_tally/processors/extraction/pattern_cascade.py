"""
Pattern Cascade: Ordered regex patterns, most specific first.

Each pattern captures a name and a price through the named groups "name"
and "price"; quantity patterns also capture "qty". The first pattern that
matches a line wins, even if its captures are later rejected, so a loose
pattern never overrides a specific one on the same line.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern
import logging
import re

from ..core.structures import PatternMatch

logger = logging.getLogger(__name__)

# Glyphs OCR prints instead of the digit 1 in "1x"
ONE_LOOKALIKES = frozenset({"i", "l", "ix", "lx"})


@dataclass(frozen=True)
class PatternDefinition:
    """One compiled cascade step."""
    pattern_id: str
    purpose: str
    regex: Pattern

    @property
    def has_quantity(self) -> bool:
        return "qty" in self.regex.groupindex

    @classmethod
    def from_config(cls, pattern_cfg: Dict[str, str]) -> "PatternDefinition":
        """
        Compile a pattern entry of a rule set.

        Raises:
            ValueError: If the regex is invalid or lacks the name/price groups
        """
        pattern_id = pattern_cfg.get("id") or "unnamed"
        try:
            regex = re.compile(pattern_cfg["regex"])
        except (KeyError, re.error) as e:
            raise ValueError(f"Invalid regex for cascade pattern '{pattern_id}': {e}") from e
        missing = {"name", "price"} - set(regex.groupindex)
        if missing:
            raise ValueError(f"Cascade pattern '{pattern_id}' lacks groups: {sorted(missing)}")
        return cls(
            pattern_id=pattern_id,
            purpose=pattern_cfg.get("purpose", ""),
            regex=regex,
        )


def parse_quantity(qty_text: str) -> int:
    """
    Normalize a captured quantity, correcting OCR misreads of "1".

    "I", "i", "l", "L" (optionally followed by "x") mean 1; anything that
    does not parse as an integer also falls back to 1.
    """
    if qty_text.lower() in ONE_LOOKALIKES:
        return 1
    try:
        return int(qty_text)
    except ValueError:
        return 1


class PatternCascade:
    """Applies pattern definitions in order; first match wins."""

    def __init__(self, patterns: List[PatternDefinition]):
        if not patterns:
            raise ValueError("Pattern cascade needs at least one pattern")
        self.patterns = tuple(patterns)

    def extract(self, line: str) -> Optional[PatternMatch]:
        """
        Match a line against the cascade.

        Args:
            line: One line of OCR text (already classified as non-noise)

        Returns:
            PatternMatch of the first matching pattern, or None
        """
        for definition in self.patterns:
            match = definition.regex.search(line)
            if not match:
                continue
            quantity = None
            if definition.has_quantity and match.group("qty") is not None:
                quantity = parse_quantity(match.group("qty"))
            logger.debug(f"Pattern '{definition.pattern_id}' matched line: {line!r}")
            return PatternMatch(
                pattern=definition.pattern_id,
                name=match.group("name"),
                price=match.group("price"),
                quantity=quantity,
            )
        return None

    def pattern_ids(self) -> List[str]:
        return [p.pattern_id for p in self.patterns]


def extract(line: str, rule_set_id: Optional[str] = None) -> Optional[PatternMatch]:
    """Run the configured (or given) rule set's cascade on one line."""
    # Lazy import to avoid circular dependency
    from .rule_loader import get_rule_set
    return get_rule_set(rule_set_id).cascade.extract(line)
