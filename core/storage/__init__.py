from core.storage.errors import (
    InvalidObjectKeyError,
    ObjectNotFoundError,
    StorageConfigurationError,
    StorageError,
    StorageIOError,
    UnknownStorageProviderError,
)
from core.storage.local_provider import LocalStorageProvider
from core.storage.provider import ObjectStorage
from core.storage.registry import StorageRegistry
from core.storage.s3_provider import S3StorageProvider
from core.storage.types import ObjectPayload, StorageProvider, StoredObject

__all__ = [
    "InvalidObjectKeyError",
    "LocalStorageProvider",
    "ObjectNotFoundError",
    "ObjectPayload",
    "ObjectStorage",
    "S3StorageProvider",
    "StorageConfigurationError",
    "StorageError",
    "StorageIOError",
    "StorageProvider",
    "StorageRegistry",
    "StoredObject",
    "UnknownStorageProviderError",
]
