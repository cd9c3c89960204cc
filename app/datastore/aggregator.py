"""Summary statistics over the in-memory record set.

Nothing here queries a backend or caches a result: every property is
computed from the records handed in, so callers rebuild an
:class:`Aggregator` whenever their record list changes.
"""

from collections import Counter
from collections.abc import Callable, Iterable
from datetime import timedelta

from app.datastore.records import StudentRecord
from app.datastore.timestamps import now_millis, to_epoch_millis
from app.schemas.common import BaseSchema

UNKNOWN_DOMAIN = "unknown"
DAY = timedelta(hours=24)
WEEK = timedelta(days=7)


class StudentStatistics(BaseSchema):
    """Dashboard summary."""

    total: int
    by_branch: dict[str, int]
    by_year: dict[str, int]
    by_division: dict[str, int]
    by_email_domain: dict[str, int]
    last_24_hours: int
    last_7_days: int


def email_domain(email: str | None) -> str:
    _, at, domain = (email or "").partition("@")
    domain = domain.strip().lower()
    return domain if at and domain else UNKNOWN_DOMAIN


class Aggregator:
    """Grouped and time-windowed counts."""

    def __init__(self, records: Iterable[StudentRecord]):
        self.records = list(records)

    def _count(self, key: Callable[[StudentRecord], str | None]) -> dict[str, int]:
        counts = Counter(value for value in map(key, self.records) if value)
        return dict(counts)

    @property
    def total(self) -> int:
        return len(self.records)

    @property
    def by_branch(self) -> dict[str, int]:
        return self._count(lambda r: r.branch)

    @property
    def by_year(self) -> dict[str, int]:
        return self._count(lambda r: r.year)

    @property
    def by_division(self) -> dict[str, int]:
        return self._count(lambda r: (r.division or "").strip().upper())

    @property
    def by_email_domain(self) -> dict[str, int]:
        return self._count(lambda r: email_domain(r.email))

    def submitted_within(self, window: timedelta, now: int | None = None) -> int:
        """Records submitted at most ``window`` before ``now`` (epoch millis)."""
        if now is None:
            now = now_millis()
        window_ms = int(window.total_seconds() * 1000)
        count = 0
        for record in self.records:
            submitted = to_epoch_millis(record.submitted_at)
            if submitted is not None and 0 <= now - submitted <= window_ms:
                count += 1
        return count

    def summary(self, now: int | None = None) -> StudentStatistics:
        return StudentStatistics(
            total=self.total,
            by_branch=self.by_branch,
            by_year=self.by_year,
            by_division=self.by_division,
            by_email_domain=self.by_email_domain,
            last_24_hours=self.submitted_within(DAY, now),
            last_7_days=self.submitted_within(WEEK, now),
        )
