from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException, status

from core.storage.errors import (
    InvalidObjectKeyError,
    ObjectNotFoundError,
    StorageConfigurationError,
    StorageError,
    UnknownStorageProviderError,
)


class ErrorCode(str, Enum):
    AUTH_INVALID_TOKEN = "AUTH_INVALID_TOKEN"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    EMAIL_IN_USE = "EMAIL_IN_USE"
    ALREADY_VERIFIED = "ALREADY_VERIFIED"
    INVALID_TOKEN = "INVALID_TOKEN"
    EMAIL_SEND_FAILED = "EMAIL_SEND_FAILED"
    NOT_FOUND = "NOT_FOUND"
    NO_FILE = "NO_FILE"
    BAD_CATEGORY = "BAD_CATEGORY"
    CATEGORY_EXISTS = "CATEGORY_EXISTS"
    BAD_STORAGE_PROVIDER = "BAD_STORAGE_PROVIDER"
    STORAGE_NOT_CONFIGURED = "STORAGE_NOT_CONFIGURED"
    STORAGE_KEY_INVALID = "STORAGE_KEY_INVALID"
    STORAGE_IO_FAILED = "STORAGE_IO_FAILED"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    TOO_MANY_REQUESTS = "TOO_MANY_REQUESTS"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AppException(HTTPException):
    def __init__(
        self,
        *,
        status_code: int,
        code: ErrorCode,
        message: str,
        details: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        detail = {
            "message": message,
            "code": code.value,
            "details": details,
        }
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.code = code
        self.message = message


def auth_invalid_token(details: Any | None = None) -> AppException:
    return AppException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        code=ErrorCode.AUTH_INVALID_TOKEN,
        message="Invalid token",
        details=details,
    )


def invalid_credentials() -> AppException:
    return AppException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        code=ErrorCode.INVALID_CREDENTIALS,
        message="Invalid email or password",
    )


def resource_not_found(resource: str, resource_id: str | None = None) -> AppException:
    details = {"resource": resource}
    if resource_id:
        details["resource_id"] = resource_id
    return AppException(
        status_code=status.HTTP_404_NOT_FOUND,
        code=ErrorCode.NOT_FOUND,
        message=f"{resource} not found",
        details=details,
    )


def invalid_category(category_id: str) -> AppException:
    return AppException(
        status_code=status.HTTP_400_BAD_REQUEST,
        code=ErrorCode.BAD_CATEGORY,
        message="Invalid category_id",
        details={"category_id": category_id},
    )


def invalid_or_expired_token(purpose: str) -> AppException:
    return AppException(
        status_code=status.HTTP_400_BAD_REQUEST,
        code=ErrorCode.INVALID_TOKEN,
        message=f"Invalid or expired {purpose} token",
    )


def from_storage_error(exc: StorageError) -> AppException:
    if isinstance(exc, ObjectNotFoundError):
        return AppException(
            status_code=status.HTTP_404_NOT_FOUND,
            code=ErrorCode.NOT_FOUND,
            message="Stored file not found",
        )
    if isinstance(exc, StorageConfigurationError):
        return AppException(
            status_code=status.HTTP_400_BAD_REQUEST,
            code=ErrorCode.STORAGE_NOT_CONFIGURED,
            message=str(exc),
        )
    if isinstance(exc, UnknownStorageProviderError):
        return AppException(
            status_code=status.HTTP_400_BAD_REQUEST,
            code=ErrorCode.BAD_STORAGE_PROVIDER,
            message="Unknown storage provider",
            details={"provider": exc.provider},
        )
    if isinstance(exc, InvalidObjectKeyError):
        return AppException(
            status_code=status.HTTP_400_BAD_REQUEST,
            code=ErrorCode.STORAGE_KEY_INVALID,
            message="Invalid storage key",
        )
    return AppException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code=ErrorCode.STORAGE_IO_FAILED,
        message="File storage operation failed",
    )
