from __future__ import annotations

from fastapi import APIRouter, Depends

from core.response_envelope import document_response
from security.auth import verify_any_token
from security.principal import AuthPrincipal
from services.stats_service import build_overview

router = APIRouter(prefix="/stats", tags=["Stats"])


@router.get("/overview")
@document_response(
    message="Overview fetched successfully",
    success_example={"total": 0, "active": 0, "expiring": 0, "expired": 0},
)
async def overview(principal: AuthPrincipal = Depends(verify_any_token)):
    return await build_overview(principal.user_id)
