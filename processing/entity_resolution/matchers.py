"""
Name matching strategies for referral reconciliation.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from rapidfuzz.distance import Levenshtein


class MatchType(Enum):
    """Type of match found."""
    EXACT_KEY = "exact_key"    # Normalized keys identical
    FUZZY_NAME = "fuzzy_name"  # Within edit-distance tolerance
    NO_MATCH = "no_match"


@dataclass
class MatchResult:
    """Result of a name matching attempt."""
    key: Optional[str] = None
    match_type: MatchType = MatchType.NO_MATCH
    distance: Optional[int] = None
    details: dict = field(default_factory=dict)

    @property
    def is_match(self) -> bool:
        return self.key is not None

    def __repr__(self) -> str:
        if self.key is not None:
            return f"<MatchResult({self.key!r}, {self.match_type.value}, distance={self.distance})>"
        return "<MatchResult(no match)>"


class FuzzyNameMatcher:
    """
    Matches normalized names by Levenshtein edit distance (rapidfuzz).

    Candidates are scanned in iteration order; the first candidate at the
    minimum distance wins, so results are reproducible for a fixed input
    order.
    """

    def __init__(self, max_distance: int = 2):
        """
        Initialize fuzzy matcher.

        Args:
            max_distance: Largest edit distance still considered the same entity
        """
        self.max_distance = max_distance

    def best_match(
        self,
        target_key: str,
        candidate_keys: Iterable[str],
        max_distance: Optional[int] = None,
    ) -> Optional[str]:
        """Return the closest candidate key within tolerance, or None."""
        return self.match(target_key, candidate_keys, max_distance).key

    def match(
        self,
        target_key: str,
        candidate_keys: Iterable[str],
        max_distance: Optional[int] = None,
    ) -> MatchResult:
        """
        Find the closest candidate to an already-normalized key.

        Args:
            target_key: Normalized key to look up
            candidate_keys: Normalized keys to compare against
            max_distance: Override for the instance tolerance

        Returns:
            MatchResult with the winning key and its distance
        """
        limit = self.max_distance if max_distance is None else max_distance

        best_key = None
        best_distance = None

        for candidate in candidate_keys:
            if candidate is None:
                continue
            # score_cutoff lets rapidfuzz stop early once a pair is out of range
            cutoff = limit if best_distance is None else min(limit, best_distance - 1)
            if cutoff < 0:
                break
            distance = Levenshtein.distance(target_key, candidate, score_cutoff=cutoff)
            if distance > cutoff:
                continue
            best_key = candidate
            best_distance = distance
            if distance == 0:
                break

        if best_key is None:
            return MatchResult(details={"target": target_key})

        return MatchResult(
            key=best_key,
            match_type=MatchType.EXACT_KEY if best_distance == 0 else MatchType.FUZZY_NAME,
            distance=best_distance,
            details={"target": target_key},
        )

