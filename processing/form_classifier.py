"""
Form Classifier

Classifies intake sheet rows into form categories from the intent cell
(column 3), groups them, and checks each form carries its minimum fields.

Rules:
1. Intent cell (trimmed, lowercased) found in INTENT_VOCABULARY → that category
2. Anything else → UNKNOWN (logged, counted, never processed)
"""

from dataclasses import dataclass, field
from typing import Iterable

from config.form_layout import (
    FOUNDER_INTENT,
    FOUNDER_REFERRAL_INTENT,
    SEARCHER_INTENT,
    SEARCHER_REFERRAL_INTENT,
    CommonColumns,
    FounderColumns,
    FounderReferralColumns,
    SearcherColumns,
    SearcherReferralColumns,
)
from config.logging import logger
from processing.models import FormCategory, FormRow, SubmissionKind, rounded_percent

INTENT_VOCABULARY = {
    FOUNDER_INTENT: FormCategory.FOUNDER,
    FOUNDER_REFERRAL_INTENT: FormCategory.FOUNDER_REFERRAL,
    SEARCHER_INTENT: FormCategory.SEARCHER,
    SEARCHER_REFERRAL_INTENT: FormCategory.SEARCHER_REFERRAL,
}

# Cells that must be non-blank for a form to be processed
REQUIRED_FIELDS = {
    FormCategory.FOUNDER: [FounderColumns.STARTUP_NAME],
    FormCategory.FOUNDER_REFERRAL: [
        FounderReferralColumns.REFERRER_NAME,
        FounderReferralColumns.STARTUP_NAME,
    ],
    FormCategory.SEARCHER: [SearcherColumns.NAME],
    FormCategory.SEARCHER_REFERRAL: [
        SearcherReferralColumns.REFERRER_NAME,
        SearcherReferralColumns.SEARCHER_NAME,
    ],
    FormCategory.UNKNOWN: [],
}

# Column holding the entity name, per category
ENTITY_NAME_COLUMN = {
    FormCategory.FOUNDER: FounderColumns.STARTUP_NAME,
    FormCategory.FOUNDER_REFERRAL: FounderReferralColumns.STARTUP_NAME,
    FormCategory.SEARCHER: SearcherColumns.NAME,
    FormCategory.SEARCHER_REFERRAL: SearcherReferralColumns.SEARCHER_NAME,
}

# How many unknown intents to echo in the partition summary
UNKNOWN_SAMPLE_SIZE = 5


@dataclass
class CategoryStatistics:
    total: int = 0
    valid: int = 0
    invalid: int = 0

    @property
    def completion_rate(self) -> int:
        """Share of valid forms, as a rounded percent."""
        return rounded_percent(self.valid, self.total)


@dataclass
class FormStatistics:
    """Statistics from a classification pass."""
    total_rows: int = 0
    unknown: int = 0
    by_category: dict[FormCategory, CategoryStatistics] = field(default_factory=dict)


def classify(row: FormRow) -> FormCategory:
    """Category of a single row. Pure: same row, same answer."""
    intent = row.text(CommonColumns.INTENT).lower()
    return INTENT_VOCABULARY.get(intent, FormCategory.UNKNOWN)


def partition(rows: Iterable[FormRow]) -> dict[FormCategory, list[FormRow]]:
    """
    Group rows by category, preserving sheet order inside each group.

    Every category (UNKNOWN included) is present in the result, so the group
    sizes always add up to the number of input rows.
    """
    groups: dict[FormCategory, list[FormRow]] = {category: [] for category in FormCategory}

    for row in rows:
        category = classify(row)
        if category is FormCategory.UNKNOWN:
            logger.debug(f"Unknown form intent at row {row.position}: {row.cell(CommonColumns.INTENT)!r}")
        groups[category].append(row)

    total = sum(len(group) for group in groups.values())
    logger.info(f"Classified {total} rows:")
    for category in FormCategory:
        logger.info(f"  {category.value:<18} {len(groups[category]):>5}")

    unknown = groups[FormCategory.UNKNOWN]
    if unknown:
        logger.warning(f"{len(unknown)} rows have an unknown form intent and will be skipped")
        for row in unknown[:UNKNOWN_SAMPLE_SIZE]:
            intent = row.cell(CommonColumns.INTENT) or "No intent specified"
            logger.warning(f"  - row {row.position}: {intent!r}")

    return groups


def is_complete(row: FormRow, category: FormCategory) -> bool:
    """True when every required cell for ``category`` is non-blank."""
    if category is FormCategory.UNKNOWN:
        return False
    return all(row.has(index) for index in REQUIRED_FIELDS[category])


def split_complete(
    rows: Iterable[FormRow], category: FormCategory
) -> tuple[list[FormRow], list[FormRow]]:
    """Split rows into (complete, incomplete), both in input order."""
    complete, incomplete = [], []
    for row in rows:
        (complete if is_complete(row, category) else incomplete).append(row)

    if incomplete:
        logger.warning(f"Filtered out {len(incomplete)} incomplete {category.value} forms")
    return complete, incomplete


def entity_name(row: FormRow, category: FormCategory) -> str:
    """Trimmed entity name a row describes or refers to."""
    return row.text(ENTITY_NAME_COLUMN[category])


def referral_name_column(kind: SubmissionKind) -> int:
    return ENTITY_NAME_COLUMN[FormCategory.referral_for(kind)]


def form_statistics(groups: dict[FormCategory, list[FormRow]]) -> FormStatistics:
    """Per-category totals and validity rates for a partition."""
    stats = FormStatistics()
    for category, rows in groups.items():
        stats.total_rows += len(rows)
        if category is FormCategory.UNKNOWN:
            stats.unknown = len(rows)
            continue
        valid = sum(1 for row in rows if is_complete(row, category))
        stats.by_category[category] = CategoryStatistics(
            total=len(rows),
            valid=valid,
            invalid=len(rows) - valid,
        )
    return stats
