from __future__ import annotations

import asyncio
from typing import Any
from uuid import uuid4

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from core.storage.errors import ObjectNotFoundError, StorageConfigurationError, StorageIOError
from core.storage.types import ObjectPayload, StorageProvider, StoredObject

DEFAULT_PREFIX = "pi-docs"
_MISSING_KEY_CODES = {"NoSuchKey", "404", "NotFound"}


def _is_missing_key(err: ClientError) -> bool:
    return str(err.response.get("Error", {}).get("Code")) in _MISSING_KEY_CODES


class S3StorageProvider:
    provider = StorageProvider.S3

    def __init__(
        self,
        *,
        bucket_name: str | None,
        region: str | None,
        prefix: str | None = None,
        kms_key_id: str | None = None,
        endpoint_url: str | None = None,
        client: Any | None = None,
    ) -> None:
        missing = [
            name
            for name, value in (("S3_REGION", region), ("S3_BUCKET", bucket_name))
            if not value
        ]
        if missing:
            raise StorageConfigurationError(
                f"S3 storage is not configured. Set {' and '.join(missing)} in the environment."
            )

        self._bucket = bucket_name
        self._prefix = (prefix or DEFAULT_PREFIX).strip("/")
        self._kms_key_id = kms_key_id
        self._client = client or boto3.client("s3", region_name=region, endpoint_url=endpoint_url)

    @property
    def bucket(self) -> str | None:
        return self._bucket

    def _new_key(self, owner_id: str) -> str:
        return f"{self._prefix}/{owner_id}/{uuid4().hex}"

    def _encryption_params(self) -> dict[str, str]:
        if self._kms_key_id:
            return {"ServerSideEncryption": "aws:kms", "SSEKMSKeyId": self._kms_key_id}
        return {"ServerSideEncryption": "AES256"}

    def _put(self, key: str, data: bytes, mime_type: str) -> None:
        try:
            self._client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=data,
                ContentType=mime_type,
                **self._encryption_params(),
            )
        except (ClientError, BotoCoreError) as err:
            raise StorageIOError(f"Failed to upload object '{key}'") from err

    def _get(self, key: str) -> ObjectPayload:
        try:
            response = self._client.get_object(Bucket=self._bucket, Key=key)
            body = response.get("Body")
            if body is None:
                raise ObjectNotFoundError(key)
            data = body.read()
        except ClientError as err:
            if _is_missing_key(err):
                raise ObjectNotFoundError(key) from err
            raise StorageIOError(f"Failed to fetch object '{key}'") from err
        except BotoCoreError as err:
            raise StorageIOError(f"Failed to fetch object '{key}'") from err
        return ObjectPayload(data=data, mime_type=response.get("ContentType"))

    def _delete(self, key: str) -> None:
        try:
            self._client.delete_object(Bucket=self._bucket, Key=key)
        except ClientError as err:
            if _is_missing_key(err):
                return
            raise StorageIOError(f"Failed to delete object '{key}'") from err
        except BotoCoreError as err:
            raise StorageIOError(f"Failed to delete object '{key}'") from err

    async def put_object(
        self,
        *,
        owner_id: str,
        original_name: str,
        mime_type: str,
        data: bytes,
    ) -> StoredObject:
        key = self._new_key(owner_id)
        await asyncio.to_thread(self._put, key, data, mime_type)
        return StoredObject(provider=self.provider, key=key)

    async def get_object(self, *, key: str) -> ObjectPayload:
        return await asyncio.to_thread(self._get, key)

    async def delete_object(self, *, key: str) -> None:
        await asyncio.to_thread(self._delete, key)
