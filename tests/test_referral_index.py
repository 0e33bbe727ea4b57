#!/usr/bin/env python3
"""
Tests for the referral index.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from conftest import founder_referral_row
from config.form_layout import FounderReferralColumns
from processing.entity_resolution.normalizer import normalize
from processing.entity_resolution.referral_index import ReferralIndex
from processing.models import SubmissionKind

NAME_COLUMN = FounderReferralColumns.STARTUP_NAME


def build(rows):
    return ReferralIndex.build(rows, NAME_COLUMN, SubmissionKind.FOUNDER)


def test_groups_by_normalized_key():
    """Spelling variants of one name land in one bucket, in input order."""
    rows = [
        founder_referral_row("Acme Co.", position=1),
        founder_referral_row("Beta Inc", position=2),
        founder_referral_row("ACME CO", position=3),
    ]
    index = build(rows)

    assert index.keys() == ["acme co", "beta inc"]
    bucket = index.get("acme co")
    assert [r.position for r in bucket.rows] == [1, 3]
    assert bucket.display_name == "Acme Co.", "First raw value seen is the display name"


def test_every_row_matches_its_bucket_key():
    rows = [founder_referral_row(name, position=i) for i, name in enumerate(["Zeta", "zeta!", "Eta", "ZETA"])]
    index = build(rows)
    for key in index:
        for row in index.get(key).rows:
            assert normalize(row.text(NAME_COLUMN)) == key


def test_display_name_is_trimmed_and_stable():
    rows = [founder_referral_row("  Gamma LLC  "), founder_referral_row("gamma llc")]
    assert build(rows).get("gamma llc").display_name == "Gamma LLC"
    assert build(rows).get("gamma llc").display_name == build(rows).get("gamma llc").display_name


def test_skips_empty_names():
    """Rows whose target is blank or punctuation-only are not indexed."""
    index = build([founder_referral_row(""), founder_referral_row("   "), founder_referral_row("---")])
    assert len(index) == 0


def test_claim_removes_bucket():
    index = build([founder_referral_row("Acme"), founder_referral_row("Beta")])
    bucket = index.claim("acme")
    assert bucket is not None and len(bucket.rows) == 1
    assert "acme" not in index
    assert index.claim("acme") is None, "A claimed bucket cannot be claimed twice"
    assert index.keys() == ["beta"]


def test_placeholders_are_leftovers():
    index = build([founder_referral_row("Beta Inc"), founder_referral_row("Gamma LLC"), founder_referral_row("beta inc")])
    index.claim("gamma llc")
    placeholders = index.placeholders()
    assert [p.display_name for p in placeholders] == ["Beta Inc"]
    assert len(placeholders[0].rows) == 2
    assert placeholders[0].kind == SubmissionKind.FOUNDER
