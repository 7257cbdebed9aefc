from __future__ import annotations

from datetime import datetime
from typing import Optional

from pymongo import ReturnDocument

from core.database import db
from repositories._ids import object_id_or_none
from schemas.user_schema import UserCreate, UserOut

_USER_INDEXES_READY = False


async def _ensure_user_indexes() -> None:
    global _USER_INDEXES_READY
    if _USER_INDEXES_READY:
        return

    await db.users.create_index("email", name="idx_user_email_unique", unique=True)
    await db.users.create_index("email_verification_token", name="idx_user_verification_token", sparse=True)
    await db.users.create_index("password_reset_token", name="idx_user_reset_token", sparse=True)
    _USER_INDEXES_READY = True


async def create_user(user_data: UserCreate) -> UserOut:
    await _ensure_user_indexes()
    result = await db.users.insert_one(user_data.model_dump())
    stored = await db.users.find_one({"_id": result.inserted_id})
    return UserOut(**stored)  # type: ignore[arg-type]


async def get_user_by_email(email: str) -> Optional[UserOut]:
    await _ensure_user_indexes()
    row = await db.users.find_one({"email": email})
    if row is None:
        return None
    return UserOut(**row)


async def get_user_by_id(user_id: str) -> Optional[UserOut]:
    oid = object_id_or_none(user_id)
    if oid is None:
        return None
    row = await db.users.find_one({"_id": oid})
    if row is None:
        return None
    return UserOut(**row)


async def get_user_by_active_token(*, token_field: str, expires_field: str, token: str, now: datetime) -> Optional[UserOut]:
    row = await db.users.find_one({token_field: token, expires_field: {"$gt": now}})
    if row is None:
        return None
    return UserOut(**row)


async def update_user_fields(user_id: str, update_dict: dict) -> Optional[UserOut]:
    oid = object_id_or_none(user_id)
    if oid is None:
        return None
    row = await db.users.find_one_and_update(
        {"_id": oid},
        {"$set": update_dict},
        return_document=ReturnDocument.AFTER,
    )
    if row is None:
        return None
    return UserOut(**row)
