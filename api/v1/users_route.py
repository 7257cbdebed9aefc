from __future__ import annotations

from fastapi import APIRouter, Depends

from core.response_envelope import document_response
from schemas.user_schema import UserUpdate
from security.auth import verify_any_token
from security.principal import AuthPrincipal
from services.user_service import retrieve_profile, update_profile

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me")
@document_response(message="Profile fetched successfully")
async def get_my_profile(principal: AuthPrincipal = Depends(verify_any_token)):
    return await retrieve_profile(principal.user_id)


@router.patch("/me")
@document_response(message="Profile updated successfully")
async def update_my_profile(payload: UserUpdate, principal: AuthPrincipal = Depends(verify_any_token)):
    return await update_profile(principal.user_id, payload)
