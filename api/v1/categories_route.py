from __future__ import annotations

from fastapi import APIRouter, Depends, Path, status

from core.response_envelope import document_response
from schemas.category_schema import CategoryBase, CategoryUpdate
from security.auth import verify_any_token
from security.principal import AuthPrincipal
from services.category_service import (
    create_category_for_user,
    list_categories_for_user,
    remove_category_for_user,
    update_category_for_user,
)

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("")
@document_response(message="Categories fetched successfully", success_example=[])
async def list_categories(principal: AuthPrincipal = Depends(verify_any_token)):
    return await list_categories_for_user(principal.user_id)


@router.post("")
@document_response(
    message="Category created successfully",
    status_code=status.HTTP_201_CREATED,
    response_codes={409: "Category name already exists"},
)
async def create_category(payload: CategoryBase, principal: AuthPrincipal = Depends(verify_any_token)):
    return await create_category_for_user(principal.user_id, payload)


@router.patch("/{category_id}")
@document_response(message="Category updated successfully", response_codes={404: "Category not found"})
async def update_category(
    payload: CategoryUpdate,
    category_id: str = Path(..., description="Category identifier"),
    principal: AuthPrincipal = Depends(verify_any_token),
):
    return await update_category_for_user(principal.user_id, category_id, payload)


@router.delete("/{category_id}")
@document_response(message="Category deleted successfully", success_example={"deleted": True})
async def delete_category(
    category_id: str = Path(..., description="Category identifier"),
    principal: AuthPrincipal = Depends(verify_any_token),
):
    await remove_category_for_user(principal.user_id, category_id)
    return {"deleted": True}
