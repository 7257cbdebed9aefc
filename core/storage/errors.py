from __future__ import annotations


class StorageError(Exception):
    """Base class for object storage failures."""


class StorageConfigurationError(StorageError):
    pass


class UnknownStorageProviderError(StorageError):
    def __init__(self, provider: str) -> None:
        super().__init__(f"Unknown storage provider '{provider}'")
        self.provider = provider


class ObjectNotFoundError(StorageError):
    def __init__(self, key: str) -> None:
        super().__init__(f"Object '{key}' not found")
        self.key = key


class InvalidObjectKeyError(StorageError):
    def __init__(self, key: str) -> None:
        super().__init__("Object key is not a valid storage key")
        self.key = key


class StorageIOError(StorageError):
    pass
