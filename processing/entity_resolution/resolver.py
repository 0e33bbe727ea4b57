"""
Referral Reconciliation Engine

Attaches referral buckets to primary submissions by fuzzy name matching and
derives the metrics written to each primary page.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from config.form_layout import FounderColumns, SearcherColumns
from config.logging import logger
from config.settings import settings
from processing.entity_resolution.matchers import FuzzyNameMatcher
from processing.entity_resolution.normalizer import normalize
from processing.entity_resolution.referral_index import ReferralIndex
from processing.models import (
    DerivedMetrics,
    FormRow,
    KindResults,
    ReconciledRecord,
    SubmissionKind,
    rounded_percent,
)

# Referral count -> tier numeral; anything above the table collapses to TIER_CEILING
TIER_NUMERALS = {1: "I", 2: "II", 3: "III", 4: "IV"}
TIER_CEILING = "V+"

TIER_NOUNS = {
    SubmissionKind.FOUNDER: "Endorsement",
    SubmissionKind.SEARCHER: "Referral",
}

ENTITY_NAME_COLUMNS = {
    SubmissionKind.FOUNDER: FounderColumns.STARTUP_NAME,
    SubmissionKind.SEARCHER: SearcherColumns.NAME,
}


def tier_label(referral_count: int, kind: SubmissionKind) -> Optional[str]:
    """
    Status label for a referral count.

    0 -> None, 1 -> "I Endorsement", 2..4 -> "II".."IV Endorsements",
    5 or more -> "V+ Endorsements" (founders; searchers use "Referral").
    """
    if referral_count <= 0:
        return None

    noun = TIER_NOUNS[kind]
    numeral = TIER_NUMERALS.get(referral_count, TIER_CEILING)
    if referral_count == 1:
        return f"{numeral} {noun}"
    return f"{numeral} {noun}s"


def team_member_count(row: FormRow) -> int:
    """
    Declared founder team size.

    Anything non-numeric counts as 0; counts beyond the member column groups
    the sheet holds are capped at FounderColumns.MAX_TEAM_MEMBERS.
    """
    raw = row.text(FounderColumns.TEAM_MEMBER_COUNT)
    try:
        count = int(float(raw))
    except (ValueError, OverflowError):
        return 0
    return min(max(count, 0), FounderColumns.MAX_TEAM_MEMBERS)


def team_member_columns(member: int) -> list[int]:
    """Columns answered for the ``member``-th (0-based) team member."""
    start = FounderColumns.TEAM_MEMBER_START + member * FounderColumns.TEAM_MEMBER_WIDTH
    return list(range(start, start + FounderColumns.TEAM_MEMBER_WIDTH))


def completion_fields(row: FormRow, kind: SubmissionKind) -> list[int]:
    """Columns counted towards completion for a primary row."""
    if kind is SubmissionKind.SEARCHER:
        return list(SearcherColumns.COMPLETION_FIELDS)

    fields = list(FounderColumns.COMPLETION_FIELDS)
    for member in range(team_member_count(row)):
        fields.extend(team_member_columns(member))
    return fields


def completion_percent(row: FormRow, kind: SubmissionKind) -> int:
    """Share (0-100, halves rounded up) of completion fields that are non-blank."""
    fields = completion_fields(row, kind)
    filled = sum(1 for index in fields if row.has(index))
    return rounded_percent(filled, len(fields))


@dataclass
class ResolverConfig:
    """Configuration for referral reconciliation."""
    # Largest Levenshtein distance between normalized names still treated as a match
    max_distance: int = 2


class ReconciliationEngine:
    """
    Claims referral buckets for primary rows, one row at a time.

    Resolution strategy per primary row:
    1. Normalize the row's entity name
    2. Fuzzy-match it against the keys still in the index
    3. Claim (remove) the matched bucket, or the row's own key when nothing matched
    4. Compute completion % and tier label from the claimed rows

    Rows are handled strictly in input order, so when two primaries could match
    the same bucket the earlier one wins and the later one gets no referrals.

    Usage:
        engine = ReconciliationEngine(SubmissionKind.FOUNDER)
        results = engine.run(founder_rows, index, sink=writer.write_record)
    """

    def __init__(
        self,
        kind: SubmissionKind,
        config: Optional[ResolverConfig] = None,
        matcher: Optional[FuzzyNameMatcher] = None,
    ):
        self.kind = kind
        self.config = config or ResolverConfig(max_distance=settings.FUZZY_MAX_DISTANCE)
        self.matcher = matcher or FuzzyNameMatcher(self.config.max_distance)

    def display_name(self, row: FormRow) -> str:
        return row.text(ENTITY_NAME_COLUMNS[self.kind])

    def reconcile_row(self, row: FormRow, index: ReferralIndex) -> ReconciledRecord:
        """
        Reconcile one primary row against the index, claiming its bucket.

        The index is mutated: the matched key (or the row's own key) is removed
        whether or not anything downstream succeeds.
        """
        display_name = self.display_name(row)
        key = normalize(display_name)

        match = self.matcher.match(key, index.keys(), self.config.max_distance)
        effective_key = match.key if match.is_match else key

        bucket = index.claim(effective_key)
        matched_rows = list(bucket.rows) if bucket else []

        if bucket:
            logger.info(
                f"Claimed {len(matched_rows)} referral(s) '{bucket.display_name}' for "
                f"'{display_name}' ({match.match_type.value}, distance={match.distance})"
            )
        else:
            logger.debug(f"No referrals for '{display_name}'")

        metrics = DerivedMetrics(
            completion_percent=completion_percent(row, self.kind),
            tier_label=tier_label(len(matched_rows), self.kind),
        )

        return ReconciledRecord(
            kind=self.kind,
            primary_row=row,
            display_name=display_name,
            key=key,
            matched_key=effective_key if bucket else None,
            matched_display_name=bucket.display_name if bucket else None,
            matched_referral_rows=matched_rows,
            derived_metrics=metrics,
        )

    def run(
        self,
        primary_rows: Iterable[FormRow],
        index: ReferralIndex,
        sink=None,
        results: Optional[KindResults] = None,
    ) -> KindResults:
        """
        Reconcile every primary row in order and hand each record to ``sink``.

        A failure for one row (reconciling or writing) is logged with the
        entity name, counted, and the loop moves on.

        Args:
            primary_rows: Complete primary rows in sheet order
            index: Referral index for this kind; mutated by claims
            sink: Called with each record; may return an UpsertOutcome
            results: Counters to add to (a fresh KindResults when omitted)

        Returns:
            KindResults with processed / created / updated / errors
        """
        results = results or KindResults()

        for row in primary_rows:
            results.processed += 1
            name = self.display_name(row) or f"row {row.position}"
            try:
                record = self.reconcile_row(row, index)
                if sink is None:
                    continue
                outcome = sink(record)
                if outcome is not None:
                    if outcome.created:
                        results.created += 1
                    elif outcome.updated:
                        results.updated += 1
                    results.placeholders_retired += outcome.placeholders_retired
            except Exception as e:
                logger.error(f"Error processing {self.kind.value} '{name}': {e}")
                results.errors += 1

        results.unmatched = len(index)
        logger.info(
            f"Reconciled {results.processed} {self.kind.value} rows "
            f"({results.errors} errors, {results.unmatched} unmatched referral groups)"
        )
        return results
