from bson import ObjectId
from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, model_validator
from datetime import datetime, timezone
from typing import Optional, List, Any
import time

from core.document_status import DocumentStatus
from core.storage.types import StorageProvider


def epoch() -> int:
    return int(time.time())


class MongoOutModel(BaseModel):
    """Base for models read back from Mongo; exposes ``_id`` as a string ``id``."""

    id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("_id", "id"),
        serialization_alias="id",
    )

    @model_validator(mode="before")
    @classmethod
    def convert_objectid(cls, values):
        if isinstance(values, dict) and isinstance(values.get("_id"), ObjectId):
            values = {**values, "_id": str(values["_id"])}
        return values

    model_config = ConfigDict(populate_by_name=True)


DEFAULT_CATEGORIES: List[tuple[str, str]] = [
    ("Personal IDs", "id-card"),
    ("Financial", "bank"),
    ("Medical", "medical"),
    ("Education", "graduation-cap"),
    ("Insurance", "shield"),
    ("Legal", "gavel"),
]
