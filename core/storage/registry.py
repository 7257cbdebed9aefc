from __future__ import annotations

from threading import Lock
from typing import Callable

from core.settings import Settings, get_settings
from core.storage.errors import UnknownStorageProviderError
from core.storage.local_provider import LocalStorageProvider
from core.storage.provider import ObjectStorage
from core.storage.s3_provider import S3StorageProvider
from core.storage.types import StorageProvider

StorageFactory = Callable[[], ObjectStorage]


class StorageRegistry:
    """Builds each storage backend on first use and keeps it for the registry's lifetime.

    One registry is created at startup and handed to request handlers through
    ``app.state``; nothing here is module-global.
    """

    def __init__(self, factories: dict[StorageProvider, StorageFactory]) -> None:
        self._factories = dict(factories)
        self._instances: dict[StorageProvider, ObjectStorage] = {}
        self._lock = Lock()

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "StorageRegistry":
        settings = settings or get_settings()
        return cls(
            {
                StorageProvider.LOCAL: lambda: LocalStorageProvider(root_dir=settings.upload_dir),
                StorageProvider.S3: lambda: S3StorageProvider(
                    bucket_name=settings.s3_bucket,
                    region=settings.s3_region,
                    prefix=settings.s3_prefix,
                    kms_key_id=settings.s3_kms_key_id,
                    endpoint_url=settings.s3_endpoint_url,
                ),
            }
        )

    @staticmethod
    def resolve_provider(provider: StorageProvider | str) -> StorageProvider:
        if isinstance(provider, StorageProvider):
            return provider
        try:
            return StorageProvider(str(provider).upper())
        except ValueError as err:
            raise UnknownStorageProviderError(str(provider)) from err

    def get(self, provider: StorageProvider | str) -> ObjectStorage:
        variant = self.resolve_provider(provider)
        instance = self._instances.get(variant)
        if instance is not None:
            return instance

        with self._lock:
            instance = self._instances.get(variant)
            if instance is None:
                factory = self._factories.get(variant)
                if factory is None:
                    raise UnknownStorageProviderError(variant.value)
                instance = factory()
                self._instances[variant] = instance
            return instance
