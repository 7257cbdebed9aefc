from __future__ import annotations

import re
from datetime import datetime
from typing import List, Optional

from pymongo import ASCENDING, DESCENDING, ReturnDocument

from core.database import db
from repositories._ids import object_id_or_none
from schemas.document_schema import DocumentCreate, DocumentOut

_DOCUMENT_INDEXES_READY = False


async def _ensure_document_indexes() -> None:
    global _DOCUMENT_INDEXES_READY
    if _DOCUMENT_INDEXES_READY:
        return

    await db.documents.create_index(
        [("user_id", ASCENDING), ("created_at", DESCENDING)],
        name="idx_document_user_created",
    )
    await db.documents.create_index(
        [("user_id", ASCENDING), ("category_id", ASCENDING)],
        name="idx_document_user_category",
    )
    await db.documents.create_index(
        [("user_id", ASCENDING), ("expires_at", ASCENDING)],
        name="idx_document_user_expires",
    )
    _DOCUMENT_INDEXES_READY = True


def _owned_filter(document_id: str, user_id: str) -> Optional[dict]:
    oid = object_id_or_none(document_id)
    if oid is None:
        return None
    return {"_id": oid, "user_id": user_id}


def build_document_filter(*, user_id: str, category_id: str | None = None, search: str | None = None) -> dict:
    query: dict = {"user_id": user_id}
    if category_id:
        query["category_id"] = category_id
    if search:
        pattern = {"$regex": re.escape(search), "$options": "i"}
        query["$or"] = [{"title": pattern}, {"description": pattern}]
    return query


async def create_document(document: DocumentCreate) -> DocumentOut:
    await _ensure_document_indexes()
    result = await db.documents.insert_one(document.model_dump(mode="python"))
    stored = await db.documents.find_one({"_id": result.inserted_id})
    return DocumentOut(**stored)  # type: ignore[arg-type]


async def get_document(document_id: str, user_id: str) -> Optional[DocumentOut]:
    query = _owned_filter(document_id, user_id)
    if query is None:
        return None
    row = await db.documents.find_one(query)
    if row is None:
        return None
    return DocumentOut(**row)


async def get_documents(*, user_id: str, category_id: str | None = None, search: str | None = None) -> List[DocumentOut]:
    await _ensure_document_indexes()
    query = build_document_filter(user_id=user_id, category_id=category_id, search=search)
    cursor = db.documents.find(query).sort("created_at", DESCENDING)
    items: List[DocumentOut] = []
    async for row in cursor:
        items.append(DocumentOut(**row))
    return items


async def update_document_fields(document_id: str, user_id: str, update_dict: dict) -> Optional[DocumentOut]:
    query = _owned_filter(document_id, user_id)
    if query is None:
        return None
    row = await db.documents.find_one_and_update(
        query,
        {"$set": update_dict},
        return_document=ReturnDocument.AFTER,
    )
    if row is None:
        return None
    return DocumentOut(**row)


async def delete_document(document_id: str, user_id: str) -> bool:
    query = _owned_filter(document_id, user_id)
    if query is None:
        return False
    result = await db.documents.delete_one(query)
    return bool(result.deleted_count)


async def detach_category(*, user_id: str, category_id: str) -> int:
    result = await db.documents.update_many(
        {"user_id": user_id, "category_id": category_id},
        {"$set": {"category_id": None}},
    )
    return result.modified_count


async def count_documents_by_category(user_id: str) -> dict[str, int]:
    pipeline = [
        {"$match": {"user_id": user_id, "category_id": {"$ne": None}}},
        {"$group": {"_id": "$category_id", "count": {"$sum": 1}}},
    ]
    counts: dict[str, int] = {}
    cursor = await db.documents.aggregate(pipeline)
    async for row in cursor:
        counts[str(row["_id"])] = int(row["count"])
    return counts


async def count_documents(*, user_id: str, expires_after: datetime | None = None, expires_until: datetime | None = None) -> int:
    query: dict = {"user_id": user_id}
    bounds: dict = {}
    if expires_after is not None:
        bounds["$gt"] = expires_after
    if expires_until is not None:
        bounds["$lte"] = expires_until
    if bounds:
        query["expires_at"] = bounds
    return await db.documents.count_documents(query)
