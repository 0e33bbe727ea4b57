"""
Referral index: referral rows grouped by the normalized name they refer to.

Built once per run. After construction only the reconciliation pass mutates
it, by claiming (removing) buckets; whatever is left afterwards is unmatched.
"""

from typing import Iterable, Iterator, Optional

from processing.entity_resolution.normalizer import normalize
from processing.models import FormRow, ReferralBucket, SubmissionKind, UnmatchedPlaceholder


class ReferralIndex:
    """Insertion-ordered mapping of normalized key -> ReferralBucket."""

    def __init__(self, kind: Optional[SubmissionKind] = None):
        self.kind = kind
        self._buckets: dict[str, ReferralBucket] = {}

    @classmethod
    def build(
        cls,
        referral_rows: Iterable[FormRow],
        name_column: int,
        kind: Optional[SubmissionKind] = None,
    ) -> "ReferralIndex":
        """
        Group referral rows by the normalized value of ``name_column``.

        Rows with an empty (or non-alphanumeric) name are skipped. The bucket's
        display name is the first trimmed raw value seen for its key.
        """
        index = cls(kind)
        for row in referral_rows:
            raw = row.text(name_column)
            if not raw:
                continue
            key = normalize(raw)
            if not key:
                continue
            bucket = index._buckets.get(key)
            if bucket is None:
                bucket = ReferralBucket(display_name=raw)
                index._buckets[key] = bucket
            bucket.rows.append(row)
        return index

    def keys(self) -> list[str]:
        """Snapshot of current keys in insertion order."""
        return list(self._buckets)

    def get(self, key: str) -> Optional[ReferralBucket]:
        return self._buckets.get(key)

    def claim(self, key: str) -> Optional[ReferralBucket]:
        """Remove and return the bucket for ``key`` (None when absent)."""
        return self._buckets.pop(key, None)

    def placeholders(self) -> list[UnmatchedPlaceholder]:
        """Remaining buckets as placeholders, in insertion order."""
        return [
            UnmatchedPlaceholder(
                kind=self.kind,
                key=key,
                display_name=bucket.display_name,
                rows=list(bucket.rows),
            )
            for key, bucket in self._buckets.items()
        ]

    def __contains__(self, key: str) -> bool:
        return key in self._buckets

    def __len__(self) -> int:
        return len(self._buckets)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __repr__(self) -> str:
        kind = self.kind.value if self.kind else "any"
        return f"<ReferralIndex({kind}, buckets={len(self._buckets)})>"
