from __future__ import annotations

from typing import List, Optional

from pymongo import ASCENDING, ReturnDocument

from core.database import db
from repositories._ids import object_id_or_none
from schemas.category_schema import CategoryCreate, CategoryOut

_CATEGORY_INDEXES_READY = False


async def _ensure_category_indexes() -> None:
    global _CATEGORY_INDEXES_READY
    if _CATEGORY_INDEXES_READY:
        return

    await db.categories.create_index(
        [("user_id", ASCENDING), ("name", ASCENDING)],
        name="idx_category_user_name_unique",
        unique=True,
    )
    _CATEGORY_INDEXES_READY = True


def _owned_filter(category_id: str, user_id: str) -> Optional[dict]:
    oid = object_id_or_none(category_id)
    if oid is None:
        return None
    return {"_id": oid, "user_id": user_id}


async def create_category(category: CategoryCreate) -> CategoryOut:
    await _ensure_category_indexes()
    result = await db.categories.insert_one(category.model_dump())
    stored = await db.categories.find_one({"_id": result.inserted_id})
    return CategoryOut(**stored)  # type: ignore[arg-type]


async def create_categories(categories: List[CategoryCreate]) -> int:
    if not categories:
        return 0
    await _ensure_category_indexes()
    result = await db.categories.insert_many([category.model_dump() for category in categories])
    return len(result.inserted_ids)


async def get_category(category_id: str, user_id: str) -> Optional[CategoryOut]:
    query = _owned_filter(category_id, user_id)
    if query is None:
        return None
    row = await db.categories.find_one(query)
    if row is None:
        return None
    return CategoryOut(**row)


async def get_category_by_name(user_id: str, name: str) -> Optional[CategoryOut]:
    row = await db.categories.find_one({"user_id": user_id, "name": name})
    if row is None:
        return None
    return CategoryOut(**row)


async def get_categories(user_id: str) -> List[CategoryOut]:
    cursor = db.categories.find({"user_id": user_id}).sort("created_at", ASCENDING)
    items: List[CategoryOut] = []
    async for row in cursor:
        items.append(CategoryOut(**row))
    return items


async def update_category_fields(category_id: str, user_id: str, update_dict: dict) -> Optional[CategoryOut]:
    query = _owned_filter(category_id, user_id)
    if query is None:
        return None
    if not update_dict:
        return await get_category(category_id, user_id)
    row = await db.categories.find_one_and_update(
        query,
        {"$set": update_dict},
        return_document=ReturnDocument.AFTER,
    )
    if row is None:
        return None
    return CategoryOut(**row)


async def delete_category(category_id: str, user_id: str) -> bool:
    query = _owned_filter(category_id, user_id)
    if query is None:
        return False
    result = await db.categories.delete_one(query)
    return bool(result.deleted_count)
