from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum

EXPIRING_WINDOW = timedelta(days=30)


class DocumentStatus(str, Enum):
    ACTIVE = "ACTIVE"
    EXPIRING = "EXPIRING"
    EXPIRED = "EXPIRED"


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def compute_document_status(expires_at: datetime | None, now: datetime | None = None) -> DocumentStatus:
    """Classify a document by its expiration date.

    Expiring exactly at ``now`` counts as EXPIRED; expiring exactly at the end of
    the 30-day window counts as EXPIRING. Callers recompute the status whenever
    ``expires_at`` is written; stored statuses are not refreshed on read.
    """
    if expires_at is None:
        return DocumentStatus.ACTIVE

    current = as_utc(now or datetime.now(timezone.utc))
    expires = as_utc(expires_at)
    if expires <= current:
        return DocumentStatus.EXPIRED
    if expires <= current + EXPIRING_WINDOW:
        return DocumentStatus.EXPIRING
    return DocumentStatus.ACTIVE
