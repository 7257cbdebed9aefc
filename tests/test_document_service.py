from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from core.errors import AppException, ErrorCode
from core.storage import LocalStorageProvider, ObjectNotFoundError, StorageProvider, StorageRegistry
from schemas.document_schema import DocumentCreateRequest, DocumentOut, DocumentUpdate, FileUpload
from schemas.imports import DocumentStatus
from schemas.settings_schema import UserSettingsOut
from services import document_service


def _registry(tmp_path) -> StorageRegistry:
    return StorageRegistry({StorageProvider.LOCAL: lambda: LocalStorageProvider(tmp_path / "uploads")})


def _document_out(**overrides) -> DocumentOut:
    payload = {
        "_id": "doc-1",
        "user_id": "user-1",
        "category_id": None,
        "title": "Passport",
        "status": DocumentStatus.ACTIVE,
        "storage_provider": StorageProvider.LOCAL,
        "storage_key": None,
        "created_at": 1,
        "updated_at": 1,
    }
    payload.update(overrides)
    return DocumentOut(**payload)


def _stub_settings(monkeypatch, provider: StorageProvider = StorageProvider.LOCAL) -> None:
    async def _upsert_settings(user_id: str, update_dict=None):
        return UserSettingsOut(user_id=user_id, storage_provider=provider)

    monkeypatch.setattr(document_service, "upsert_settings", _upsert_settings)


def _capture_create(monkeypatch) -> list:
    created = []

    async def _create_document(record):
        created.append(record)
        return _document_out(**record.model_dump())

    monkeypatch.setattr(document_service, "create_document", _create_document)
    return created


@pytest.mark.asyncio
async def test_create_with_file_stores_bytes_and_metadata(monkeypatch, tmp_path):
    registry = _registry(tmp_path)
    _stub_settings(monkeypatch)
    created = _capture_create(monkeypatch)
    expires_at = datetime.now(timezone.utc) + timedelta(days=10)

    document = await document_service.create_document_for_user(
        user_id="user-1",
        payload=DocumentCreateRequest(title="Passport", expires_at=expires_at),
        upload=FileUpload(file_name="passport.pdf", mime_type="application/pdf", data=b"0123456789"),
        registry=registry,
    )

    record = created[0]
    assert record.status == DocumentStatus.EXPIRING.value
    assert record.file_size == 10
    assert record.file_mime == "application/pdf"
    assert record.storage_provider == StorageProvider.LOCAL.value
    stored = await registry.get(StorageProvider.LOCAL).get_object(key=record.storage_key)
    assert stored.data == b"0123456789"
    assert document.status is DocumentStatus.EXPIRING


@pytest.mark.asyncio
async def test_create_without_file_skips_storage(monkeypatch, tmp_path):
    registry = _registry(tmp_path)
    created = _capture_create(monkeypatch)

    async def _fail_settings(*args, **kwargs):
        raise AssertionError("settings are only needed for uploads")

    monkeypatch.setattr(document_service, "upsert_settings", _fail_settings)

    document = await document_service.create_document_for_user(
        user_id="user-1",
        payload=DocumentCreateRequest(title="Notes only"),
        upload=None,
        registry=registry,
    )

    assert created[0].storage_key is None
    assert document.status is DocumentStatus.ACTIVE
    assert not (tmp_path / "uploads").exists()


@pytest.mark.asyncio
async def test_create_rejects_category_owned_by_someone_else(monkeypatch, tmp_path):
    async def _get_category(category_id, user_id):
        return None

    monkeypatch.setattr(document_service, "get_category", _get_category)

    with pytest.raises(AppException) as exc_info:
        await document_service.create_document_for_user(
            user_id="user-1",
            payload=DocumentCreateRequest(title="Passport", category_id="cat-9"),
            upload=None,
            registry=_registry(tmp_path),
        )

    assert exc_info.value.code is ErrorCode.BAD_CATEGORY


@pytest.mark.asyncio
async def test_failed_insert_releases_stored_file(monkeypatch, tmp_path):
    registry = _registry(tmp_path)
    _stub_settings(monkeypatch)

    async def _create_document(record):
        raise RuntimeError("mongo unavailable")

    monkeypatch.setattr(document_service, "create_document", _create_document)

    with pytest.raises(RuntimeError):
        await document_service.create_document_for_user(
            user_id="user-1",
            payload=DocumentCreateRequest(title="Passport"),
            upload=FileUpload(file_name="a.txt", mime_type="text/plain", data=b"x"),
            registry=registry,
        )

    local = registry.get(StorageProvider.LOCAL)
    assert not [path for path in local.root.iterdir() if not path.name.endswith(".meta.json")]


@pytest.mark.asyncio
async def test_update_recomputes_status_only_when_expiry_changes(monkeypatch):
    captured = {}

    async def _get_document(document_id, user_id):
        return _document_out()

    async def _update_document_fields(document_id, user_id, changes):
        captured.update(changes)
        return _document_out(**{key: value for key, value in changes.items() if key != "updated_at"})

    monkeypatch.setattr(document_service, "get_document", _get_document)
    monkeypatch.setattr(document_service, "update_document_fields", _update_document_fields)

    await document_service.update_document_for_user(
        user_id="user-1",
        document_id="doc-1",
        payload=DocumentUpdate(description="Renewed"),
    )
    assert "status" not in captured

    captured.clear()
    past = datetime.now(timezone.utc) - timedelta(days=1)
    updated = await document_service.update_document_for_user(
        user_id="user-1",
        document_id="doc-1",
        payload=DocumentUpdate(expires_at=past),
    )
    assert captured["status"] == DocumentStatus.EXPIRED.value
    assert updated.status is DocumentStatus.EXPIRED

    captured.clear()
    await document_service.update_document_for_user(
        user_id="user-1",
        document_id="doc-1",
        payload=DocumentUpdate.model_validate({"expires_at": None, "title": None}),
    )
    assert captured["status"] == DocumentStatus.ACTIVE.value
    assert captured["expires_at"] is None
    assert "title" not in captured


@pytest.mark.asyncio
async def test_missing_document_is_not_found(monkeypatch, tmp_path):
    async def _get_document(document_id, user_id):
        return None

    monkeypatch.setattr(document_service, "get_document", _get_document)

    with pytest.raises(AppException) as exc_info:
        await document_service.download_document(user_id="user-1", document_id="doc-x", registry=_registry(tmp_path))

    assert exc_info.value.status_code == 404
    assert exc_info.value.code is ErrorCode.NOT_FOUND


@pytest.mark.asyncio
async def test_download_without_file_raises_no_file(monkeypatch, tmp_path):
    async def _get_document(document_id, user_id):
        return _document_out(storage_key=None)

    monkeypatch.setattr(document_service, "get_document", _get_document)

    with pytest.raises(AppException) as exc_info:
        await document_service.download_document(user_id="user-1", document_id="doc-1", registry=_registry(tmp_path))

    assert exc_info.value.code is ErrorCode.NO_FILE


@pytest.mark.asyncio
async def test_remove_deletes_stored_file_then_record(monkeypatch, tmp_path):
    registry = _registry(tmp_path)
    stored = await registry.get(StorageProvider.LOCAL).put_object(
        owner_id="user-1", original_name="id.png", mime_type="image/png", data=b"png"
    )
    deleted = []

    async def _get_document(document_id, user_id):
        return _document_out(storage_key=stored.key)

    async def _delete_document(document_id, user_id):
        deleted.append(document_id)
        return True

    monkeypatch.setattr(document_service, "get_document", _get_document)
    monkeypatch.setattr(document_service, "delete_document", _delete_document)

    assert await document_service.remove_document_for_user(user_id="user-1", document_id="doc-1", registry=registry)
    assert deleted == ["doc-1"]
    with pytest.raises(ObjectNotFoundError):
        await registry.get(StorageProvider.LOCAL).get_object(key=stored.key)


@pytest.mark.asyncio
async def test_release_stored_object_swallows_storage_errors(tmp_path):
    released = await document_service.release_stored_object(
        _registry(tmp_path), provider=StorageProvider.LOCAL, key="../escape"
    )

    assert released is False
