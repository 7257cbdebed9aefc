from __future__ import annotations

from fastapi import Request

from core.storage import StorageRegistry


def get_storage_registry(request: Request) -> StorageRegistry:
    registry = getattr(request.app.state, "storage_registry", None)
    if registry is None:
        registry = StorageRegistry.from_settings()
        request.app.state.storage_registry = registry
    return registry
