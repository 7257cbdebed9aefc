from __future__ import annotations

from repositories.settings_repo import upsert_settings
from schemas.settings_schema import UserSettingsOut, UserSettingsUpdate


async def retrieve_user_settings(user_id: str) -> UserSettingsOut:
    return await upsert_settings(user_id)


async def update_user_settings(user_id: str, payload: UserSettingsUpdate) -> UserSettingsOut:
    changes = payload.model_dump(exclude_none=True, mode="json")
    return await upsert_settings(user_id, changes)
