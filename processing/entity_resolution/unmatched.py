"""
Unmatched referral handling.

Buckets left in a ReferralIndex after reconciliation have no primary
submission. Each becomes a placeholder page; once a later run claims the
bucket, the placeholder is retired (archived).

Placeholder lifecycle:  unseen -> active -> retired  (retired is terminal)
"""

from typing import Optional

from config.logging import logger
from processing.entity_resolution.normalizer import normalize
from processing.entity_resolution.referral_index import ReferralIndex
from processing.models import KindResults, ReconciledRecord, SubmissionKind, UnmatchedPlaceholder

PLACEHOLDER_SUBJECTS = {
    SubmissionKind.FOUNDER: "startup",
    SubmissionKind.SEARCHER: "searcher",
}


def placeholder_title(kind: SubmissionKind, display_name: str) -> str:
    """Page title used for an unmatched referral bucket."""
    return f"⚠️ Unmatched referral for {PLACEHOLDER_SUBJECTS[kind]}: {display_name or 'Unknown'}"


class UnmatchedReferralHandler:
    """Creates placeholders for unclaimed buckets and retires stale ones."""

    def __init__(self, kind: SubmissionKind):
        self.kind = kind

    def collect(self, index: ReferralIndex) -> list[UnmatchedPlaceholder]:
        placeholders = index.placeholders()
        for placeholder in placeholders:
            placeholder.kind = self.kind
        return placeholders

    def emit(
        self,
        index: ReferralIndex,
        writer,
        results: Optional[KindResults] = None,
    ) -> KindResults:
        """
        Write one placeholder page per bucket still in ``index``.

        Failures are isolated per placeholder. With no writer (dry run) the
        placeholders are only logged.
        """
        results = results or KindResults()
        placeholders = self.collect(index)
        results.unmatched = len(placeholders)

        if placeholders:
            logger.info(f"{len(placeholders)} unmatched {self.kind.value} referral group(s)")

        for placeholder in placeholders:
            title = placeholder_title(self.kind, placeholder.display_name)
            if writer is None:
                logger.info(f"[dry-run] Would write placeholder '{title}' ({len(placeholder.rows)} rows)")
                continue
            try:
                writer.upsert_placeholder(placeholder)
                results.placeholders_written += 1
            except Exception as e:
                logger.error(f"Error writing placeholder '{title}': {e}")
                results.placeholder_errors += 1

        return results

    def stale_names(self, record: ReconciledRecord) -> list[str]:
        """
        Display names whose placeholder pages this record makes stale.

        Only records that claimed a bucket retire anything. The bucket's own
        display name comes first; the primary's name is added when it
        normalizes differently (fuzzy matches).
        """
        if not record.matched_display_name:
            return []

        names = [record.matched_display_name]
        if normalize(record.display_name) != normalize(record.matched_display_name):
            names.append(record.display_name)
        return names

    def retire_stale(self, record: ReconciledRecord, writer, results: Optional[KindResults] = None) -> int:
        """
        Archive placeholders made stale by ``record``; returns how many were archived.

        Runs after the primary page was written, so a failed archive is logged
        and counted in ``results.retire_errors`` without failing the record.
        """
        retired = 0
        for name in self.stale_names(record):
            title = placeholder_title(self.kind, name)
            try:
                if writer.retire_placeholder(self.kind, name):
                    logger.info(f"Retired placeholder {title!r}")
                    retired += 1
            except Exception as e:
                logger.error(f"Error retiring placeholder {title!r}: {e}")
                if results is not None:
                    results.retire_errors += 1
        return retired
