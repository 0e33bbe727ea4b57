"""
Intake Sync - Data Models

Rows read from the intake sheet, their classification, and the records the
reconciliation pass produces.
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Optional, Sequence


def rounded_percent(part: int, whole: int) -> int:
    """part / whole as a whole percent, halves rounded up (12.5 -> 13). 0 when whole is 0."""
    if whole == 0:
        return 0
    share = Decimal(part) * 100 / Decimal(whole)
    return int(share.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


# Enums
class SubmissionKind(Enum):
    """Which intake pipeline a form belongs to."""
    FOUNDER = "founder"
    SEARCHER = "searcher"


class FormCategory(Enum):
    """Category assigned to a sheet row from its intent cell."""
    FOUNDER = "founder"
    FOUNDER_REFERRAL = "founder referral"
    SEARCHER = "searcher"
    SEARCHER_REFERRAL = "searcher referral"
    UNKNOWN = "unknown"

    @property
    def label(self) -> str:
        """Title-cased name used for the "Form Type" select."""
        return self.value.title()

    @classmethod
    def primary_for(cls, kind: SubmissionKind) -> "FormCategory":
        return cls.FOUNDER if kind is SubmissionKind.FOUNDER else cls.SEARCHER

    @classmethod
    def referral_for(cls, kind: SubmissionKind) -> "FormCategory":
        return cls.FOUNDER_REFERRAL if kind is SubmissionKind.FOUNDER else cls.SEARCHER_REFERRAL


class FormRow:
    """
    One immutable row of the intake sheet.

    The sheet API drops trailing empty cells, so rows have uneven lengths.
    Reads past the end, and None cells, come back as "".
    """

    __slots__ = ("_cells", "position")

    def __init__(self, cells: Sequence[Optional[str]], position: Optional[int] = None):
        self._cells = tuple(cells or ())
        self.position = position

    def cell(self, index: int) -> str:
        """Raw cell value, "" when missing."""
        if index < 0 or index >= len(self._cells):
            return ""
        value = self._cells[index]
        return "" if value is None else str(value)

    def text(self, index: int) -> str:
        """Trimmed cell value."""
        return self.cell(index).strip()

    def has(self, index: int) -> bool:
        return bool(self.text(index))

    def __len__(self) -> int:
        return len(self._cells)

    def __eq__(self, other) -> bool:
        if not isinstance(other, FormRow):
            return NotImplemented
        return self._cells == other._cells and self.position == other.position

    def __hash__(self) -> int:
        return hash((self._cells, self.position))

    def __repr__(self) -> str:
        return f"<FormRow(position={self.position}, cells={len(self._cells)})>"


@dataclass
class ReferralBucket:
    """Referral rows that all name the same entity (same normalized key)."""
    display_name: str
    rows: list[FormRow] = field(default_factory=list)


@dataclass
class DerivedMetrics:
    completion_percent: int = 0
    tier_label: Optional[str] = None


@dataclass
class ReconciledRecord:
    """A primary row with the referral bucket it claimed in this run."""
    kind: SubmissionKind
    primary_row: FormRow
    display_name: str
    key: str
    matched_key: Optional[str] = None
    matched_display_name: Optional[str] = None
    matched_referral_rows: list[FormRow] = field(default_factory=list)
    derived_metrics: DerivedMetrics = field(default_factory=DerivedMetrics)

    @property
    def has_referrals(self) -> bool:
        return bool(self.matched_referral_rows)

    def __repr__(self) -> str:
        return (
            f"<ReconciledRecord({self.display_name}, referrals={len(self.matched_referral_rows)}, "
            f"completion={self.derived_metrics.completion_percent}%)>"
        )


@dataclass
class UnmatchedPlaceholder:
    """A referral bucket no primary row claimed this run."""
    kind: SubmissionKind
    key: str
    display_name: str
    rows: list[FormRow] = field(default_factory=list)


@dataclass
class UpsertOutcome:
    """What a page write did."""
    page_id: str
    created: bool = False
    updated: bool = False
    placeholders_retired: int = 0


@dataclass
class KindResults:
    """Counts for one submission kind."""
    processed: int = 0
    created: int = 0
    updated: int = 0
    errors: int = 0
    invalid_primary: int = 0
    invalid_referral: int = 0
    unmatched: int = 0
    placeholders_written: int = 0
    placeholders_retired: int = 0
    placeholder_errors: int = 0
    retire_errors: int = 0

    @property
    def success_rate(self) -> float:
        if self.processed == 0:
            return 100.0
        return (self.processed - self.errors) / self.processed * 100
