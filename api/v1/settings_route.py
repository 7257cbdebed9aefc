from __future__ import annotations

from fastapi import APIRouter, Depends

from core.response_envelope import document_response
from schemas.settings_schema import UserSettingsUpdate
from security.auth import verify_any_token
from security.principal import AuthPrincipal
from services.settings_service import retrieve_user_settings, update_user_settings

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("")
@document_response(message="Settings fetched successfully")
async def get_settings_for_user(principal: AuthPrincipal = Depends(verify_any_token)):
    return await retrieve_user_settings(principal.user_id)


@router.patch("")
@document_response(message="Settings updated successfully", response_codes={422: "Invalid payload"})
async def patch_settings_for_user(payload: UserSettingsUpdate, principal: AuthPrincipal = Depends(verify_any_token)):
    return await update_user_settings(principal.user_id, payload)
