#!/usr/bin/env python3
"""
Tests for fuzzy name matching.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from processing.entity_resolution.matchers import FuzzyNameMatcher, MatchType


def test_exact_key_matches_itself():
    """A key present verbatim among the candidates always matches at distance 0."""
    matcher = FuzzyNameMatcher()
    result = matcher.match("acme corp", ["acme corx", "acme corp", "acme"])
    assert result.key == "acme corp"
    assert result.distance == 0
    assert result.match_type == MatchType.EXACT_KEY
    assert matcher.best_match("acme corp", {"acme corp"}) == "acme corp"


def test_typo_within_tolerance():
    """One missing character is within the default distance of 2."""
    matcher = FuzzyNameMatcher()
    result = matcher.match("acme corp", ["acme cor"])
    assert result.is_match
    assert result.distance == 1
    assert result.match_type == MatchType.FUZZY_NAME


def test_no_match_beyond_tolerance():
    """Every candidate further than the threshold gives no match."""
    matcher = FuzzyNameMatcher()
    assert matcher.best_match("acme corp", ["beta inc", "gamma llc", "acme corporation"]) is None
    result = matcher.match("acme corp", [])
    assert not result.is_match
    assert result.match_type == MatchType.NO_MATCH


def test_closest_candidate_wins():
    """The minimum distance wins regardless of position."""
    matcher = FuzzyNameMatcher()
    assert matcher.best_match("acme corp", ["acme cxrx", "acme corx"]) == "acme corx"


def test_first_candidate_wins_ties():
    """Among equally close candidates the first one encountered wins."""
    matcher = FuzzyNameMatcher()
    assert matcher.best_match("acme", ["acmx", "acmy"]) == "acmx"
    assert matcher.best_match("acme", ["acmy", "acmx"]) == "acmy"


def test_max_distance_override():
    """A per-call tolerance overrides the instance tolerance."""
    matcher = FuzzyNameMatcher(max_distance=2)
    assert matcher.best_match("acme", ["acxx"]) == "acxx"
    assert matcher.best_match("acme", ["acxx"], max_distance=1) is None
    assert matcher.best_match("acme", ["acme"], max_distance=0) == "acme"

