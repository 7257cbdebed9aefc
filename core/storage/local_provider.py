from __future__ import annotations

import asyncio
import json
import re
from pathlib import Path
from uuid import uuid4

from core.storage.errors import InvalidObjectKeyError, ObjectNotFoundError, StorageIOError
from core.storage.types import ObjectPayload, StorageProvider, StoredObject

MAX_EXTENSION_LENGTH = 12
META_SUFFIX = ".meta.json"

_EXTENSION_PATTERN = re.compile(r"^\.[A-Za-z0-9_-]+$")


def safe_extension(file_name: str) -> str:
    extension = Path(file_name).suffix
    if len(extension) > MAX_EXTENSION_LENGTH or not _EXTENSION_PATTERN.match(extension):
        return ""
    return extension


def validate_object_key(key: str) -> str:
    """Keys must name a single entry directly under the storage root."""
    if (
        not key
        or key == "."
        or "/" in key
        or "\\" in key
        or "\x00" in key
        or ".." in key
        or key.endswith(META_SUFFIX)
    ):
        raise InvalidObjectKeyError(key)
    return key


class LocalStorageProvider:
    provider = StorageProvider.LOCAL

    def __init__(self, root_dir: str | Path) -> None:
        self._root = Path(root_dir)

    @property
    def root(self) -> Path:
        return self._root

    def _ensure_root(self) -> None:
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as err:
            raise StorageIOError(f"Unable to create upload directory '{self._root}'") from err

    def _paths(self, key: str) -> tuple[Path, Path]:
        validate_object_key(key)
        file_path = self._root / key
        return file_path, self._root / f"{key}{META_SUFFIX}"

    def _write(self, key: str, data: bytes, mime_type: str) -> None:
        self._ensure_root()
        file_path, meta_path = self._paths(key)
        try:
            file_path.write_bytes(data)
            meta_path.write_text(json.dumps({"mime_type": mime_type}), encoding="utf-8")
        except OSError as err:
            raise StorageIOError(f"Unable to write object '{key}'") from err

    def _read(self, key: str) -> ObjectPayload:
        file_path, meta_path = self._paths(key)
        try:
            data = file_path.read_bytes()
        except FileNotFoundError as err:
            raise ObjectNotFoundError(key) from err
        except OSError as err:
            raise StorageIOError(f"Unable to read object '{key}'") from err

        mime_type: str | None = None
        try:
            mime_type = json.loads(meta_path.read_text(encoding="utf-8")).get("mime_type")
        except (OSError, ValueError, AttributeError):
            mime_type = None
        return ObjectPayload(data=data, mime_type=mime_type)

    def _remove(self, key: str) -> None:
        for path in self._paths(key):
            try:
                path.unlink(missing_ok=True)
            except OSError as err:
                raise StorageIOError(f"Unable to delete object '{key}'") from err

    async def put_object(
        self,
        *,
        owner_id: str,
        original_name: str,
        mime_type: str,
        data: bytes,
    ) -> StoredObject:
        key = f"{uuid4().hex}{safe_extension(original_name)}"
        await asyncio.to_thread(self._write, key, data, mime_type)
        return StoredObject(provider=self.provider, key=key)

    async def get_object(self, *, key: str) -> ObjectPayload:
        return await asyncio.to_thread(self._read, key)

    async def delete_object(self, *, key: str) -> None:
        await asyncio.to_thread(self._remove, key)
