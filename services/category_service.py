from __future__ import annotations

from typing import List

from fastapi import status
from pymongo.errors import DuplicateKeyError

from core.errors import AppException, ErrorCode, resource_not_found
from repositories.category_repo import (
    create_category,
    delete_category,
    get_categories,
    get_category,
    get_category_by_name,
    update_category_fields,
)
from repositories.document_repo import count_documents_by_category, detach_category
from schemas.category_schema import CategoryBase, CategoryCreate, CategoryOut, CategoryUpdate
from schemas.imports import epoch


def _category_exists(name: str) -> AppException:
    return AppException(
        status_code=status.HTTP_409_CONFLICT,
        code=ErrorCode.CATEGORY_EXISTS,
        message="Category name already exists",
        details={"name": name},
    )


async def list_categories_for_user(user_id: str) -> List[CategoryOut]:
    categories = await get_categories(user_id)
    counts = await count_documents_by_category(user_id)
    for category in categories:
        category.documents_count = counts.get(category.id or "", 0)
    return categories


async def create_category_for_user(user_id: str, payload: CategoryBase) -> CategoryOut:
    if await get_category_by_name(user_id, payload.name) is not None:
        raise _category_exists(payload.name)
    try:
        return await create_category(CategoryCreate(user_id=user_id, **payload.model_dump()))
    except DuplicateKeyError as err:
        raise _category_exists(payload.name) from err


async def update_category_for_user(user_id: str, category_id: str, payload: CategoryUpdate) -> CategoryOut:
    category = await get_category(category_id, user_id)
    if category is None:
        raise resource_not_found("Category", category_id)

    changes = payload.model_dump(exclude_none=True)
    if "name" in changes and changes["name"] != category.name:
        if await get_category_by_name(user_id, changes["name"]) is not None:
            raise _category_exists(changes["name"])
    if changes:
        changes["last_updated"] = epoch()

    try:
        updated = await update_category_fields(category_id, user_id, changes)
    except DuplicateKeyError as err:
        raise _category_exists(changes.get("name", category.name)) from err
    if updated is None:
        raise resource_not_found("Category", category_id)
    return updated


async def remove_category_for_user(user_id: str, category_id: str) -> bool:
    if await get_category(category_id, user_id) is None:
        raise resource_not_found("Category", category_id)

    await detach_category(user_id=user_id, category_id=category_id)
    if not await delete_category(category_id, user_id):
        raise resource_not_found("Category", category_id)
    return True
