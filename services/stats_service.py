from __future__ import annotations

from datetime import datetime, timezone

from core.document_status import EXPIRING_WINDOW
from repositories.document_repo import count_documents
from schemas.document_schema import StatsOverview


async def build_overview(user_id: str, now: datetime | None = None) -> StatsOverview:
    now = now or datetime.now(timezone.utc)
    total = await count_documents(user_id=user_id)
    expired = await count_documents(user_id=user_id, expires_until=now)
    expiring = await count_documents(user_id=user_id, expires_after=now, expires_until=now + EXPIRING_WINDOW)
    return StatsOverview(
        total=total,
        active=max(0, total - expired - expiring),
        expiring=expiring,
        expired=expired,
    )
