from __future__ import annotations

import logging
from typing import List

from fastapi import status

from core.document_status import compute_document_status
from core.errors import AppException, ErrorCode, invalid_category, resource_not_found
from core.storage import ObjectPayload, StorageError, StorageRegistry, StoredObject
from repositories.category_repo import get_category
from repositories.document_repo import (
    create_document,
    delete_document,
    get_document,
    get_documents,
    update_document_fields,
)
from repositories.settings_repo import upsert_settings
from schemas.document_schema import DocumentCreate, DocumentCreateRequest, DocumentOut, DocumentUpdate, FileUpload
from schemas.imports import StorageProvider, epoch

logger = logging.getLogger(__name__)

NON_NULLABLE_FIELDS = {"title"}


async def _ensure_category_owned(user_id: str, category_id: str | None) -> None:
    if category_id and await get_category(category_id, user_id) is None:
        raise invalid_category(category_id)


async def release_stored_object(registry: StorageRegistry, *, provider: StorageProvider | str, key: str) -> bool:
    """Best-effort delete of a stored file; failures are logged and swallowed."""
    try:
        await registry.get(provider).delete_object(key=key)
    except StorageError:
        logger.warning("Failed to delete stored object %s from %s", key, provider, exc_info=True)
        return False
    return True


async def retrieve_document(*, user_id: str, document_id: str) -> DocumentOut:
    document = await get_document(document_id, user_id)
    if document is None:
        raise resource_not_found("Document", document_id)
    return document


async def list_documents_for_user(
    *,
    user_id: str,
    category_id: str | None = None,
    search: str | None = None,
) -> List[DocumentOut]:
    return await get_documents(user_id=user_id, category_id=category_id, search=search or None)


async def create_document_for_user(
    *,
    user_id: str,
    payload: DocumentCreateRequest,
    upload: FileUpload | None,
    registry: StorageRegistry,
) -> DocumentOut:
    await _ensure_category_owned(user_id, payload.category_id)

    stored: StoredObject | None = None
    if upload is not None:
        settings = await upsert_settings(user_id)
        stored = await registry.get(settings.storage_provider).put_object(
            owner_id=user_id,
            original_name=upload.file_name,
            mime_type=upload.mime_type,
            data=upload.data,
        )

    record = DocumentCreate(
        user_id=user_id,
        category_id=payload.category_id,
        title=payload.title,
        description=payload.description,
        issued_at=payload.issued_at,
        expires_at=payload.expires_at,
        status=compute_document_status(payload.expires_at),
        file_name=upload.file_name if upload else None,
        file_mime=upload.mime_type if upload else None,
        file_size=upload.size if upload else None,
        storage_provider=stored.provider if stored else StorageProvider.LOCAL,
        storage_key=stored.key if stored else None,
    )

    try:
        return await create_document(record)
    except Exception:
        if stored is not None:
            await release_stored_object(registry, provider=stored.provider, key=stored.key)
        raise


async def update_document_for_user(*, user_id: str, document_id: str, payload: DocumentUpdate) -> DocumentOut:
    await retrieve_document(user_id=user_id, document_id=document_id)

    changes = {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or field not in NON_NULLABLE_FIELDS
    }
    await _ensure_category_owned(user_id, changes.get("category_id"))

    if "expires_at" in changes:
        changes["status"] = compute_document_status(changes["expires_at"]).value
    changes["updated_at"] = epoch()

    updated = await update_document_fields(document_id, user_id, changes)
    if updated is None:
        raise resource_not_found("Document", document_id)
    return updated


async def download_document(
    *,
    user_id: str,
    document_id: str,
    registry: StorageRegistry,
) -> tuple[DocumentOut, ObjectPayload]:
    document = await retrieve_document(user_id=user_id, document_id=document_id)
    if not document.storage_key:
        raise AppException(status_code=status.HTTP_404_NOT_FOUND, code=ErrorCode.NO_FILE, message="No file attached")

    payload = await registry.get(document.storage_provider).get_object(key=document.storage_key)
    return document, payload


async def remove_document_for_user(*, user_id: str, document_id: str, registry: StorageRegistry) -> bool:
    document = await retrieve_document(user_id=user_id, document_id=document_id)

    if document.storage_key:
        await release_stored_object(registry, provider=document.storage_provider, key=document.storage_key)

    if not await delete_document(document_id, user_id):
        raise resource_not_found("Document", document_id)
    return True
