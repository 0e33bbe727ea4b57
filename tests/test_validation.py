#!/usr/bin/env python3
"""
Tests for property value validation.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.form_layout import AVAILABILITY_OPTIONS
from processing.validation import (
    coerce_intern_searcher,
    map_availability_option,
    parse_comma_list,
    validate_date,
    validate_email,
    validate_funding_stage,
    validate_location,
    validate_number,
    validate_phone,
    validate_url,
    validate_valuation,
)


def test_email():
    assert validate_email(" ada@acme.io ") == "ada@acme.io"
    assert validate_email("ada@acme") is None
    assert validate_email("ada acme.io") is None
    assert validate_email(None) is None


def test_url_adds_missing_scheme():
    assert validate_url("https://acme.io/about") == "https://acme.io/about"
    assert validate_url("www.acme.io") == "https://www.acme.io"
    assert validate_url("acme.io") == "https://acme.io"


def test_url_rejects_garbage():
    """Whitespace, dotless hosts and foreign schemes are dropped."""
    assert validate_url("acme dot io") is None
    assert validate_url("localhost") is None
    assert validate_url("ftp://acme.io") is None
    assert validate_url("") is None


def test_phone():
    assert validate_phone("+1 (555) 123-4567") == "+1 (555) 123-4567"
    assert validate_phone("123") is None, "Too short"
    assert validate_phone("call me maybe") is None


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2021", 2021),
        ("3.5", 3.5),
        ("1e3", 1000),
        ("", None),
        ("abc", None),
        ("nan", None),
        ("inf", None),
    ],
)
def test_number(raw, expected):
    assert validate_number(raw) == expected


def test_number_integral_values_are_int():
    assert isinstance(validate_number("7.0"), int)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("10/18/2025 14:03:22", "2025-10-18T14:03:22"),
        ("25/10/2025 09:00:00", "2025-10-25T09:00:00"),
        ("18.10.2025", "2025-10-18"),
        ("10/18/2025", "2025-10-18"),
        ("2025-10-18", "2025-10-18"),
        ("2025-10-18T14:03:22Z", "2025-10-18T14:03:22+00:00"),
        ("yesterday", None),
        ("", None),
    ],
)
def test_date(raw, expected):
    assert validate_date(raw) == expected


def test_comma_list():
    assert parse_comma_list("B2B, SaaS,, Marketplace ") == ["B2B", "SaaS", "Marketplace"]
    assert parse_comma_list("") == []
    assert parse_comma_list(" , ") == []


def test_vocabulary_selects():
    """Select answers must be one of the known options, verbatim."""
    assert validate_location("Western Europe") == "Western Europe"
    assert validate_location("Mars") is None
    assert validate_valuation("< €5M") == "< €5M"
    assert validate_valuation("about a billion") is None
    assert validate_funding_stage(" Series A ") == "Series A"
    assert validate_funding_stage("series a") is None


def test_intern_or_searcher():
    assert coerce_intern_searcher("INTERN") == "Intern"
    assert coerce_intern_searcher(" searcher ") == "Searcher"
    assert coerce_intern_searcher("both") is None
    assert coerce_intern_searcher("") is None


@pytest.mark.parametrize(
    "answer, expected_index",
    [
        ("Late afternoon works best", 2),
        ("Early afternoon (12:00–15:00)", 1),
        ("Late evening please", 4),
        ("Evening", 3),
        ("mornings", 0),
    ],
)
def test_availability_prefers_full_label(answer, expected_index):
    """The longest matching label wins over a shared first word."""
    assert map_availability_option(answer) == AVAILABILITY_OPTIONS[expected_index]


def test_availability_flexible_and_unknown():
    assert map_availability_option("I'm pretty flexible") == AVAILABILITY_OPTIONS[-1]
    assert map_availability_option("whenever") is None
    assert map_availability_option("") is None
