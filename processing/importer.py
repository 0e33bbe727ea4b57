"""
Intake Importer

Runs one import over the sheet rows: classify, reconcile referrals per
submission kind, write pages, then write placeholders for whatever
referrals stayed unmatched.

Usage:
    importer = IntakeImporter(writer)
    stats = importer.run(rows)
    stats.log_summary()
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

from config.logging import logger
from processing.entity_resolution.referral_index import ReferralIndex
from processing.entity_resolution.resolver import ReconciliationEngine, ResolverConfig
from processing.entity_resolution.unmatched import UnmatchedReferralHandler
from processing.form_classifier import (
    FormStatistics,
    form_statistics,
    partition,
    referral_name_column,
    split_complete,
)
from processing.models import (
    FormCategory,
    FormRow,
    KindResults,
    ReconciledRecord,
    SubmissionKind,
    UpsertOutcome,
)
from processing.page_writer import NotionPageWriter


@dataclass
class ImportStats:
    """Statistics from an import run."""
    total_rows: int = 0
    unknown: int = 0
    dry_run: bool = False
    forms: FormStatistics = field(default_factory=FormStatistics)
    kinds: dict[SubmissionKind, KindResults] = field(default_factory=dict)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @property
    def processed(self) -> int:
        return sum(r.processed for r in self.kinds.values())

    @property
    def errors(self) -> int:
        return sum(r.errors for r in self.kinds.values())

    @property
    def success_rate(self) -> float:
        """(processed - errors) / processed, as a percent; 100 when nothing ran."""
        if self.processed == 0:
            return 100.0
        return (self.processed - self.errors) / self.processed * 100

    def log_summary(self):
        """Log summary statistics."""
        duration = (self.end_time - self.start_time).total_seconds() if self.end_time and self.start_time else 0
        logger.info("=" * 60)
        logger.info("IMPORT COMPLETE" + (" (DRY RUN)" if self.dry_run else ""))
        logger.info("=" * 60)
        logger.info(f"Duration: {duration:.1f} seconds")
        logger.info(f"Rows read: {self.total_rows} ({self.unknown} unknown form type)")
        for category, counts in self.forms.by_category.items():
            logger.info(
                f"  - {category.value}: {counts.total} forms, {counts.valid} valid, "
                f"{counts.invalid} invalid ({counts.completion_rate}% complete)"
            )
        for kind, results in self.kinds.items():
            logger.info(f"{kind.value.title()}s:")
            logger.info(f"  - Processed: {results.processed}")
            logger.info(f"  - Created: {results.created}")
            logger.info(f"  - Updated: {results.updated}")
            logger.info(f"  - Errors: {results.errors}")
            logger.info(f"  - Invalid: {results.invalid_primary} primary, {results.invalid_referral} referral")
            logger.info(
                f"  - Unmatched referrals: {results.unmatched} "
                f"({results.placeholders_written} written, {results.placeholder_errors} failed)"
            )
            logger.info(
                f"  - Placeholders retired: {results.placeholders_retired} ({results.retire_errors} failed)"
            )
        logger.info(f"Success rate: {self.success_rate:.1f}%")
        logger.info("=" * 60)


class IntakeImporter:
    """
    Orchestrates classification, reconciliation and page writes.

    Each submission kind gets its own referral index and engine. Primary rows
    are reconciled in sheet order; every claim happens before that row's
    page writes, so a failed write never frees a bucket for a later row.
    """

    def __init__(
        self,
        writer: Optional[NotionPageWriter] = None,
        config: Optional[ResolverConfig] = None,
    ):
        self.writer = writer
        self.config = config

    def run(
        self,
        rows: Iterable[FormRow],
        kinds: Optional[list[SubmissionKind]] = None,
        dry_run: bool = False,
    ) -> ImportStats:
        """
        Import every row.

        Args:
            rows: Sheet rows in order
            kinds: Submission kinds to process (all when None)
            dry_run: Reconcile and log, but write nothing

        Returns:
            ImportStats with per-kind counts
        """
        if not dry_run and self.writer is None:
            raise ValueError("A page writer is required unless dry_run is set")

        stats = ImportStats(dry_run=dry_run, start_time=datetime.now())
        groups = partition(rows)
        stats.forms = form_statistics(groups)
        stats.total_rows = stats.forms.total_rows
        stats.unknown = stats.forms.unknown

        for kind in kinds or list(SubmissionKind):
            logger.info(f"Processing {kind.value} submissions")
            stats.kinds[kind] = self.run_kind(kind, groups, dry_run)

        stats.end_time = datetime.now()
        return stats

    def run_kind(
        self,
        kind: SubmissionKind,
        groups: dict[FormCategory, list[FormRow]],
        dry_run: bool = False,
    ) -> KindResults:
        """Reconcile and write one submission kind."""
        primary_category = FormCategory.primary_for(kind)
        referral_category = FormCategory.referral_for(kind)

        primaries, invalid_primaries = split_complete(groups[primary_category], primary_category)
        referrals, invalid_referrals = split_complete(groups[referral_category], referral_category)

        results = KindResults(
            invalid_primary=len(invalid_primaries),
            invalid_referral=len(invalid_referrals),
        )

        index = ReferralIndex.build(referrals, referral_name_column(kind), kind)
        logger.info(
            f"{len(primaries)} {primary_category.value} forms, "
            f"{len(referrals)} {referral_category.value} forms in {len(index)} groups"
        )

        engine = ReconciliationEngine(kind, self.config)
        handler = UnmatchedReferralHandler(kind)

        def write_record(record: ReconciledRecord) -> Optional[UpsertOutcome]:
            if dry_run:
                logger.info(
                    f"[dry-run] {record.display_name}: {len(record.matched_referral_rows)} referral(s), "
                    f"{record.derived_metrics.completion_percent}% complete, "
                    f"tier={record.derived_metrics.tier_label}"
                )
                for name in handler.stale_names(record):
                    logger.info(f"[dry-run] Would retire placeholder for '{name}'")
                return None

            outcome = self.writer.upsert_primary(record)
            outcome.placeholders_retired = handler.retire_stale(record, self.writer, results)
            return outcome

        engine.run(primaries, index, sink=write_record, results=results)
        handler.emit(index, None if dry_run else self.writer, results)
        return results
