from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, File, Form, Path, Query, UploadFile, status

from api.dependencies import get_storage_registry
from core.response_envelope import attachment_response, document_response
from core.storage import StorageRegistry
from schemas.document_schema import DocumentCreateRequest, DocumentUpdate, FileUpload
from security.auth import verify_any_token
from security.principal import AuthPrincipal
from services.document_service import (
    create_document_for_user,
    download_document,
    list_documents_for_user,
    remove_document_for_user,
    retrieve_document,
    update_document_for_user,
)

router = APIRouter(prefix="/documents", tags=["Documents"])


@router.get("")
@document_response(message="Documents fetched successfully", success_example=[])
async def list_documents(
    category_id: str | None = Query(default=None),
    search: str | None = Query(default=None),
    principal: AuthPrincipal = Depends(verify_any_token),
):
    return await list_documents_for_user(user_id=principal.user_id, category_id=category_id, search=search)


@router.post("")
@document_response(
    message="Document created successfully",
    status_code=status.HTTP_201_CREATED,
    response_codes={400: "Invalid category or storage not configured", 401: "Unauthorized"},
)
async def create_document(
    title: str = Form(..., min_length=1),
    description: str | None = Form(default=None),
    category_id: str | None = Form(default=None),
    issued_at: datetime | None = Form(default=None),
    expires_at: datetime | None = Form(default=None),
    file: UploadFile | None = File(default=None),
    principal: AuthPrincipal = Depends(verify_any_token),
    registry: StorageRegistry = Depends(get_storage_registry),
):
    upload = None
    if file is not None:
        upload = FileUpload(
            file_name=file.filename or "document",
            mime_type=file.content_type or "application/octet-stream",
            data=await file.read(),
        )

    payload = DocumentCreateRequest(
        title=title,
        description=description,
        category_id=category_id or None,
        issued_at=issued_at,
        expires_at=expires_at,
    )
    return await create_document_for_user(
        user_id=principal.user_id,
        payload=payload,
        upload=upload,
        registry=registry,
    )


@router.get("/{document_id}")
@document_response(message="Document fetched successfully", response_codes={404: "Document not found"})
async def get_document(
    document_id: str = Path(..., description="Document identifier"),
    principal: AuthPrincipal = Depends(verify_any_token),
):
    return await retrieve_document(user_id=principal.user_id, document_id=document_id)


@router.patch("/{document_id}")
@document_response(message="Document updated successfully", response_codes={404: "Document not found"})
async def update_document(
    payload: DocumentUpdate,
    document_id: str = Path(..., description="Document identifier"),
    principal: AuthPrincipal = Depends(verify_any_token),
):
    return await update_document_for_user(user_id=principal.user_id, document_id=document_id, payload=payload)


@router.get("/{document_id}/download", responses={200: {"content": {"application/octet-stream": {}}}})
async def download_document_file(
    document_id: str = Path(..., description="Document identifier"),
    principal: AuthPrincipal = Depends(verify_any_token),
    registry: StorageRegistry = Depends(get_storage_registry),
):
    document, stored = await download_document(user_id=principal.user_id, document_id=document_id, registry=registry)
    return attachment_response(
        data=stored.data,
        mime_type=stored.mime_type or document.file_mime,
        file_name=document.file_name,
    )


@router.delete("/{document_id}")
@document_response(message="Document deleted successfully", success_example={"deleted": True})
async def delete_document(
    document_id: str = Path(..., description="Document identifier"),
    principal: AuthPrincipal = Depends(verify_any_token),
    registry: StorageRegistry = Depends(get_storage_registry),
):
    await remove_document_for_user(user_id=principal.user_id, document_id=document_id, registry=registry)
    return {"deleted": True}
