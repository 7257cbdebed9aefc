from __future__ import annotations

from typing import Protocol

from core.storage.types import ObjectPayload, StorageProvider, StoredObject


class ObjectStorage(Protocol):
    provider: StorageProvider

    async def put_object(
        self,
        *,
        owner_id: str,
        original_name: str,
        mime_type: str,
        data: bytes,
    ) -> StoredObject:
        ...

    async def get_object(self, *, key: str) -> ObjectPayload:
        ...

    async def delete_object(self, *, key: str) -> None:
        ...
