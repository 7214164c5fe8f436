"""
Rule set loader for the data-driven extraction pipeline.

Loads JSON rule sets from receipt_tally/rule_sets/ by id (file name without
.json). A rule set holds the noise vocabulary and the ordered pattern
cascade. Supports inheritance via "extends" (e.g. us_diner extends default);
list keys prefixed with "extra_" are appended to the base list instead of
replacing it.

Rule sets are compiled once per process and cached, so every line of a run
is matched by the same compiled rules.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, List, Optional
import json
import logging

from .line_classifier import LineClassifier, NoiseVocabulary
from .pattern_cascade import PatternCascade, PatternDefinition

logger = logging.getLogger(__name__)

# Directory containing rule_sets/*.json (inside the package)
RULE_SET_DIR_NAME = "rule_sets"

_rule_set_cache: Dict[str, "RuleSet"] = {}


class RuleSetNotFound(LookupError):
    """Raised when a rule set (or the base it extends) does not exist."""


@dataclass(frozen=True)
class RuleSet:
    """Compiled noise vocabulary + pattern cascade."""
    rule_set_id: str
    description: str
    classifier: LineClassifier
    cascade: PatternCascade


def _deep_merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge overrides into base. Overrides take precedence. Returns new dict."""
    out = dict(base)
    for k, v in overrides.items():
        if k == "extends":
            continue
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        elif k.startswith("extra_") and isinstance(out.get(k), list) and isinstance(v, list):
            out[k] = out[k] + v
        else:
            out[k] = v
    return out


def _get_rule_set_dir() -> Path:
    """Resolve receipt_tally/rule_sets from this file's location."""
    # .../receipt_tally/processors/extraction/rule_loader.py -> receipt_tally/
    package_dir = Path(__file__).resolve().parents[2]
    return package_dir / RULE_SET_DIR_NAME


def list_rule_sets() -> List[str]:
    """Ids of all rule sets shipped with the package, sorted."""
    rule_dir = _get_rule_set_dir()
    if not rule_dir.exists():
        return []
    return sorted(p.stem for p in rule_dir.glob("*.json"))


def load_rule_config(rule_set_id: str, _chain: Optional[List[str]] = None) -> Dict[str, Any]:
    """
    Load a rule set JSON by id, resolving "extends".

    Args:
        rule_set_id: e.g. "default"

    Returns:
        Merged config dict

    Raises:
        RuleSetNotFound: If the file (or a base it extends) is missing
        ValueError: If the file is not valid JSON or the extends chain loops
    """
    chain = (_chain or []) + [rule_set_id]
    if rule_set_id in (_chain or []):
        raise ValueError(f"Rule set inheritance loop: {' -> '.join(chain)}")

    path = _get_rule_set_dir() / f"{rule_set_id}.json"
    if not path.exists():
        raise RuleSetNotFound(f"Rule set not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            cfg = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Failed to parse rule set {path}: {e}") from e

    extends = cfg.pop("extends", None)
    if extends:
        base = load_rule_config(extends, chain)
        cfg = _deep_merge(base, cfg)
        logger.debug(f"Rule set '{rule_set_id}' extends '{extends}'")
    return cfg


def compile_rule_set(cfg: Dict[str, Any]) -> RuleSet:
    """Compile a merged rule set config."""
    rule_set_id = cfg.get("rule_set_id", "custom")
    vocabulary = NoiseVocabulary.from_config(cfg.get("noise", {}) or {})
    patterns = [PatternDefinition.from_config(p) for p in cfg.get("patterns", [])]
    return RuleSet(
        rule_set_id=rule_set_id,
        description=cfg.get("description", ""),
        classifier=LineClassifier(vocabulary),
        cascade=PatternCascade(patterns),
    )


def get_rule_set(rule_set_id: Optional[str] = None) -> RuleSet:
    """
    Get a compiled rule set, loading it on first use.

    Args:
        rule_set_id: Rule set id; defaults to settings.rule_set
    """
    if rule_set_id is None:
        from ...config import settings
        rule_set_id = settings.rule_set

    cached = _rule_set_cache.get(rule_set_id)
    if cached is not None:
        return cached

    rule_set = compile_rule_set(load_rule_config(rule_set_id))
    _rule_set_cache[rule_set_id] = rule_set
    logger.info(
        f"Loaded rule set '{rule_set_id}': {len(rule_set.classifier.vocabulary.contains)} noise terms, "
        f"cascade {rule_set.cascade.pattern_ids()}"
    )
    return rule_set
