"""Test noise-line classification with the shipped rule sets."""
import pytest

from receipt_tally.processors.extraction.line_classifier import (
    LineClassifier,
    NoiseVocabulary,
    is_noise,
)


@pytest.mark.parametrize("line", [
    "Subtotal: 12.00",
    "MwSt 19%",
    "12345",
    "Summe 3,69",
    "TOTAL EUR 25,98",
    "Gegeben BAR 50,00",
    "Datum: 12.03.2024",
    "Tel: 089 123456",
    "Vielen Dank für Ihren Besuch",
    "VISA CARD ****1234",
    "#0042 Kasse 3",
    "<<< Kopie >>>",
    "888 1234 5678",
    "  12 34 56  ",
    "abc",
    "",
])
def test_noise_lines(line):
    assert is_noise(line, "default"), f"Expected noise: {line!r}"


@pytest.mark.parametrize("line", [
    "4x Gyros 8,90",
    "1x Cheeseburger* 1,19",
    "2x Pommes 2,50",
    "4x Löwenbräu Original a 3,00 12,00",
    "Server Salad 9,50",
])
def test_product_lines_are_not_noise(line):
    assert not is_noise(line, "default"), f"Expected product line: {line!r}"


def test_store_address_lines_are_noise():
    assert is_noise("123 Albany Street", "default")
    assert is_noise("NYC Food Club Member", "default")
    assert is_noise("Albany Street Burger 9,50", "default")


def test_locale_variant_adds_terms():
    """us_diner extends default with table-service terms."""
    assert not is_noise("Server: Dana 0,00", "default")
    assert is_noise("Server: Dana 0,00", "us_diner")
    assert is_noise("Guests 2", "us_diner")
    assert is_noise("Albany Street Burger 9,50", "us_diner")
    # Inherited terms still apply
    assert is_noise("Subtotal: 12.00", "us_diner")


def test_vocabulary_is_configuration():
    vocabulary = NoiseVocabulary.from_config({
        "contains": ["Pfand"],
        "extra_contains": ["LEERGUT", "pfand"],
        "min_line_length": 2,
    })
    assert vocabulary.contains == ("pfand", "leergut")
    classifier = LineClassifier(vocabulary)
    assert classifier.is_noise("Pfand 0,25")
    assert classifier.is_noise("Leergut -0,75")
    assert not classifier.is_noise("Cola 1,50")
    assert not classifier.is_noise("ab")
    assert classifier.is_noise("a")


def test_numeric_only_check_can_be_disabled():
    classifier = LineClassifier(NoiseVocabulary(contains=(), reject_numeric_only=False))
    assert not classifier.is_noise("12345")
