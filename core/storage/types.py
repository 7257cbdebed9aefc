from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StorageProvider(str, Enum):
    LOCAL = "LOCAL"
    S3 = "S3"


@dataclass(frozen=True)
class StoredObject:
    provider: StorageProvider
    key: str


@dataclass(frozen=True)
class ObjectPayload:
    data: bytes
    mime_type: str | None = None
