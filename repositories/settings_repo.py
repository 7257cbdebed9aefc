from __future__ import annotations

from pymongo import ReturnDocument

from core.database import db
from schemas.imports import epoch
from schemas.settings_schema import UserSettingsOut, default_settings_document

_SETTINGS_INDEXES_READY = False


async def _ensure_settings_indexes() -> None:
    global _SETTINGS_INDEXES_READY
    if _SETTINGS_INDEXES_READY:
        return

    await db.user_settings.create_index("user_id", name="idx_settings_user_id_unique", unique=True)
    _SETTINGS_INDEXES_READY = True


async def upsert_settings(user_id: str, update_dict: dict | None = None) -> UserSettingsOut:
    """Create the user's settings with defaults if missing, then apply ``update_dict``."""
    await _ensure_settings_indexes()
    update_dict = dict(update_dict or {})

    defaults = {key: value for key, value in default_settings_document(user_id).items() if key not in update_dict}
    operations: dict = {"$setOnInsert": defaults}
    if update_dict:
        operations["$set"] = {**update_dict, "last_updated": epoch()}

    row = await db.user_settings.find_one_and_update(
        {"user_id": user_id},
        operations,
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )
    return UserSettingsOut(**row)  # type: ignore[arg-type]
