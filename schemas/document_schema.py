from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from schemas.imports import DocumentStatus, MongoOutModel, StorageProvider, epoch


class DocumentCreate(BaseModel):
    user_id: str
    category_id: Optional[str] = None
    title: str = Field(min_length=1)
    description: Optional[str] = None
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    status: DocumentStatus = DocumentStatus.ACTIVE
    file_name: Optional[str] = None
    file_mime: Optional[str] = None
    file_size: Optional[int] = None
    storage_provider: StorageProvider = StorageProvider.LOCAL
    storage_key: Optional[str] = None
    created_at: int = Field(default_factory=epoch)
    updated_at: int = Field(default_factory=epoch)

    model_config = ConfigDict(use_enum_values=True)


class DocumentUpdate(BaseModel):
    """Partial update; an explicit ``null`` clears the field, an omitted field is untouched."""

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    category_id: Optional[str] = None
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None

    model_config = {"extra": "forbid"}


class DocumentOut(MongoOutModel):
    user_id: str
    category_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    status: DocumentStatus
    file_name: Optional[str] = None
    file_mime: Optional[str] = None
    file_size: Optional[int] = None
    storage_provider: StorageProvider = StorageProvider.LOCAL
    storage_key: Optional[str] = None
    created_at: int
    updated_at: int


class FileUpload(BaseModel):
    file_name: str
    mime_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


class StatsOverview(BaseModel):
    total: int
    active: int
    expiring: int
    expired: int


class DocumentCreateRequest(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    category_id: Optional[str] = None
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
