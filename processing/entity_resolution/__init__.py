"""
Entity Resolution Module

Referral reconciliation combining:
- Name normalization (diacritics, digit glyphs, punctuation)
- Fuzzy name matching (rapidfuzz Levenshtein)
- Claim-once referral index with unmatched placeholders
"""

from processing.entity_resolution.normalizer import normalize
from processing.entity_resolution.matchers import (
    FuzzyNameMatcher,
    MatchResult,
    MatchType,
)
from processing.entity_resolution.referral_index import ReferralIndex
from processing.entity_resolution.resolver import (
    ReconciliationEngine,
    ResolverConfig,
    completion_percent,
    tier_label,
)
from processing.entity_resolution.unmatched import (
    UnmatchedReferralHandler,
    placeholder_title,
)

__all__ = [
    "normalize",
    "FuzzyNameMatcher",
    "MatchResult",
    "MatchType",
    "ReferralIndex",
    "ReconciliationEngine",
    "ResolverConfig",
    "completion_percent",
    "tier_label",
    "UnmatchedReferralHandler",
    "placeholder_title",
]
