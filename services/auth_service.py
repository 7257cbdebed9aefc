from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone

from fastapi import status
from pymongo.errors import DuplicateKeyError

from core.errors import AppException, ErrorCode, invalid_credentials, invalid_or_expired_token, resource_not_found
from core.queue.manager import QueueManager
from core.settings import get_settings
from core.task import SEND_EMAIL_TASK
from repositories.category_repo import create_categories
from repositories.settings_repo import upsert_settings
from repositories.user_repo import (
    create_user,
    get_user_by_active_token,
    get_user_by_email,
    get_user_by_id,
    update_user_fields,
)
from schemas.category_schema import CategoryCreate
from schemas.imports import DEFAULT_CATEGORIES, epoch
from schemas.user_schema import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    ResetPasswordRequest,
    UserCreate,
    UserOut,
    UserProfile,
)
from security.encrypting_jwt import create_access_token
from security.hash import check_password, hash_password
from services.email_service import (
    PASSWORD_RESET_TTL_HOURS,
    VERIFICATION_TTL_HOURS,
    EmailContent,
    build_password_reset_email,
    build_verification_email,
)

logger = logging.getLogger(__name__)

FORGOT_PASSWORD_MESSAGE = "If the email exists, a password reset link has been sent"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_token() -> str:
    return secrets.token_hex(32)


def _email_in_use() -> AppException:
    return AppException(
        status_code=status.HTTP_409_CONFLICT,
        code=ErrorCode.EMAIL_IN_USE,
        message="Email is already registered",
    )


def queue_email(*, to: str, content: EmailContent) -> None:
    QueueManager.get_instance().enqueue(
        SEND_EMAIL_TASK,
        {"to": to, "subject": content.subject, "html": content.html, "text": content.text},
    )


async def register_user(payload: RegisterRequest) -> AuthResponse:
    if await get_user_by_email(payload.email) is not None:
        raise _email_in_use()

    verification_token = _new_token()
    try:
        user = await create_user(
            UserCreate(
                email=payload.email,
                name=payload.name,
                password=payload.password,
                email_verification_token=verification_token,
                email_verification_expires=_now() + timedelta(hours=VERIFICATION_TTL_HOURS),
            )
        )
    except DuplicateKeyError as err:
        raise _email_in_use() from err

    user_id = user.id or ""
    await upsert_settings(user_id)
    await create_categories([CategoryCreate(user_id=user_id, name=name, icon=icon) for name, icon in DEFAULT_CATEGORIES])

    content = build_verification_email(token=verification_token, name=user.name, frontend_url=get_settings().frontend_url)
    try:
        queue_email(to=user.email, content=content)
    except Exception:
        logger.warning("Failed to queue verification email for user %s", user_id, exc_info=True)

    return AuthResponse(token=create_access_token(user_id), user=UserProfile.from_user(user))


async def authenticate_user(payload: LoginRequest) -> AuthResponse:
    user = await get_user_by_email(payload.email)
    if user is None or not user.password or not check_password(payload.password, user.password):
        raise invalid_credentials()
    return AuthResponse(token=create_access_token(user.id or ""), user=UserProfile.from_user(user))


async def retrieve_user(user_id: str) -> UserOut:
    user = await get_user_by_id(user_id)
    if user is None:
        raise resource_not_found("User", user_id)
    return user


async def send_verification_email(user_id: str) -> MessageResponse:
    user = await retrieve_user(user_id)
    if user.email_verified:
        raise AppException(
            status_code=status.HTTP_400_BAD_REQUEST,
            code=ErrorCode.ALREADY_VERIFIED,
            message="Email is already verified",
        )

    token = _new_token()
    await update_user_fields(
        user_id,
        {
            "email_verification_token": token,
            "email_verification_expires": _now() + timedelta(hours=VERIFICATION_TTL_HOURS),
            "last_updated": epoch(),
        },
    )

    content = build_verification_email(token=token, name=user.name, frontend_url=get_settings().frontend_url)
    try:
        queue_email(to=user.email, content=content)
    except Exception as err:
        logger.error("Failed to queue verification email for user %s", user_id, exc_info=True)
        raise AppException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            code=ErrorCode.EMAIL_SEND_FAILED,
            message="Failed to send verification email",
        ) from err
    return MessageResponse(message="Verification email sent")


async def verify_email(token: str) -> MessageResponse:
    user = await get_user_by_active_token(
        token_field="email_verification_token",
        expires_field="email_verification_expires",
        token=token,
        now=_now(),
    )
    if user is None:
        raise invalid_or_expired_token("verification")

    await update_user_fields(
        user.id or "",
        {
            "email_verified": True,
            "email_verification_token": None,
            "email_verification_expires": None,
            "last_updated": epoch(),
        },
    )
    return MessageResponse(message="Email verified successfully")


async def request_password_reset(email: str) -> MessageResponse:
    user = await get_user_by_email(email)
    if user is None:
        return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)

    token = _new_token()
    await update_user_fields(
        user.id or "",
        {
            "password_reset_token": token,
            "password_reset_expires": _now() + timedelta(hours=PASSWORD_RESET_TTL_HOURS),
            "last_updated": epoch(),
        },
    )

    content = build_password_reset_email(token=token, name=user.name, frontend_url=get_settings().frontend_url)
    try:
        queue_email(to=user.email, content=content)
    except Exception as err:
        logger.error("Failed to queue password reset email for user %s", user.id, exc_info=True)
        raise AppException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            code=ErrorCode.EMAIL_SEND_FAILED,
            message="Failed to send password reset email",
        ) from err
    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)


async def reset_password(payload: ResetPasswordRequest) -> MessageResponse:
    user = await get_user_by_active_token(
        token_field="password_reset_token",
        expires_field="password_reset_expires",
        token=payload.token,
        now=_now(),
    )
    if user is None:
        raise invalid_or_expired_token("password reset")

    await update_user_fields(
        user.id or "",
        {
            "password": hash_password(payload.password),
            "password_reset_token": None,
            "password_reset_expires": None,
            "last_updated": epoch(),
        },
    )
    return MessageResponse(message="Password reset successfully")
