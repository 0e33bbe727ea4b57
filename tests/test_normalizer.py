#!/usr/bin/env python3
"""
Tests for name normalization.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from processing.entity_resolution.normalizer import normalize


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Acme Co.", "acme co"),
        ("ACME CO", "acme co"),
        ("  Acme   Industries  ", "acme industries"),
        ("CO₂ Zero", "co2 zero"),
        ("H²O Labs", "h2o labs"),
        ("Café Crème", "cafe creme"),
        ("Zürich-Ventures!", "zurich ventures"),
        ("São Paulo / Tech", "sao paulo tech"),
        ("ÉCOLE", "ecole"),
        ("Straße", "strasse"),
    ],
)
def test_normalize_examples(raw, expected):
    """Case, diacritics, digit glyphs and punctuation all fold away."""
    assert normalize(raw) == expected, f"{raw!r} should normalize to {expected!r}"


def test_normalize_empty_inputs():
    """None, empty and punctuation-only strings give an empty key."""
    assert normalize(None) == ""
    assert normalize("") == ""
    assert normalize("   ") == ""
    assert normalize("!!! --- ???") == ""


@pytest.mark.parametrize(
    "raw",
    ["Acme Co.", "CO₂ Zero", "Café  Crème", "  x ", "Über-Start_up 3000", "⁴²", "", "...a..b.."],
)
def test_normalize_is_idempotent(raw):
    """Normalizing twice changes nothing."""
    once = normalize(raw)
    assert normalize(once) == once


def test_normalize_output_alphabet():
    """Output is lowercase ASCII alphanumerics with single interior spaces."""
    key = normalize("  Ünïcödé — Straße № 5 (Berlin) ₃  ")
    assert key == key.strip()
    assert "  " not in key
    assert all(ch.isascii() and (ch.islower() or ch.isdigit() or ch == " ") for ch in key), key


def test_variants_share_a_key():
    """Names differing only by case, accents or punctuation spacing are the same entity."""
    variants = ["Moonshot Labs", "moonshot-labs", "MOONSHOT   LABS!", "Moonshöt Labs"]
    keys = {normalize(v) for v in variants}
    assert keys == {"moonshot labs"}
