from __future__ import annotations

from bson import ObjectId


def object_id_or_none(value: str | None) -> ObjectId | None:
    if value is None or not ObjectId.is_valid(value):
        return None
    return ObjectId(value)
