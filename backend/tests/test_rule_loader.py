"""Test rule set loading, inheritance and caching."""
import json

import pytest

from receipt_tally.processors.extraction import rule_loader
from receipt_tally.processors.extraction.rule_loader import (
    RuleSetNotFound,
    _deep_merge,
    compile_rule_set,
    get_rule_set,
    list_rule_sets,
    load_rule_config,
)


def test_shipped_rule_sets():
    assert list_rule_sets() == ["default", "us_diner"]


def test_default_rule_set():
    rule_set = get_rule_set("default")
    assert rule_set.rule_set_id == "default"
    assert "summe" in rule_set.classifier.vocabulary.contains
    assert rule_set.classifier.vocabulary.prefixes == ("#", "<<<", "888")
    assert rule_set.cascade.pattern_ids()[0] == "quantity_unit_total"
    assert rule_set.cascade.pattern_ids()[-1] == "fallback"


def test_extends_appends_extra_terms():
    cfg = load_rule_config("us_diner")
    assert cfg["rule_set_id"] == "us_diner"
    assert "extends" not in cfg
    assert "total" in cfg["noise"]["contains"]
    assert cfg["noise"]["extra_contains"] == ["server:", "guests", "host:", "table #"]
    # Patterns inherited unchanged
    assert [p["id"] for p in cfg["patterns"]] == [p["id"] for p in load_rule_config("default")["patterns"]]

    vocabulary = get_rule_set("us_diner").classifier.vocabulary
    assert "total" in vocabulary.contains
    assert "guests" in vocabulary.contains
    assert "food club" in vocabulary.contains


def test_unknown_rule_set():
    with pytest.raises(RuleSetNotFound):
        get_rule_set("does_not_exist")


def test_rule_set_is_compiled_once():
    assert get_rule_set("default") is get_rule_set("default")


def test_default_id_comes_from_settings(monkeypatch):
    from receipt_tally.config import settings
    monkeypatch.setattr(settings, "rule_set", "us_diner")
    assert get_rule_set().rule_set_id == "us_diner"


def test_deep_merge():
    base = {"a": 1, "noise": {"contains": ["x"], "extra_contains": ["y"], "min_line_length": 4}}
    overrides = {"extends": "base", "b": 2, "noise": {"extra_contains": ["z"], "min_line_length": 3}}
    merged = _deep_merge(base, overrides)
    assert merged == {
        "a": 1,
        "b": 2,
        "noise": {"contains": ["x"], "extra_contains": ["y", "z"], "min_line_length": 3},
    }
    # Inputs untouched
    assert base["noise"]["extra_contains"] == ["y"]


def test_inheritance_loop(tmp_path, monkeypatch):
    (tmp_path / "one.json").write_text(json.dumps({"extends": "two"}), encoding="utf-8")
    (tmp_path / "two.json").write_text(json.dumps({"extends": "one"}), encoding="utf-8")
    monkeypatch.setattr(rule_loader, "_get_rule_set_dir", lambda: tmp_path)
    with pytest.raises(ValueError, match="loop"):
        load_rule_config("one")


def test_missing_base(tmp_path, monkeypatch):
    (tmp_path / "child.json").write_text(json.dumps({"extends": "gone"}), encoding="utf-8")
    monkeypatch.setattr(rule_loader, "_get_rule_set_dir", lambda: tmp_path)
    with pytest.raises(RuleSetNotFound):
        load_rule_config("child")


def test_invalid_json(tmp_path, monkeypatch):
    (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
    monkeypatch.setattr(rule_loader, "_get_rule_set_dir", lambda: tmp_path)
    with pytest.raises(ValueError):
        load_rule_config("broken")


def test_compile_custom_rule_set():
    rule_set = compile_rule_set({
        "rule_set_id": "kiosk",
        "noise": {"contains": ["Pfand"], "min_line_length": 3},
        "patterns": [
            {"id": "plain", "regex": "(?P<name>[A-Za-z ]{3,}?)\\s+(?P<price>\\d+,\\d{2})"},
        ],
    })
    assert rule_set.rule_set_id == "kiosk"
    assert rule_set.classifier.is_noise("Pfand 0,25")
    match = rule_set.cascade.extract("Zeitung 2,20")
    assert match.pattern == "plain"
    assert match.name == "Zeitung"


def test_compile_rejects_bad_patterns():
    with pytest.raises(ValueError):
        compile_rule_set({"patterns": [{"id": "bad", "regex": "(?P<name>["}]})
    with pytest.raises(ValueError):
        compile_rule_set({"patterns": [{"id": "no_groups", "regex": "\\d+"}]})
    with pytest.raises(ValueError):
        compile_rule_set({"patterns": []})
