from __future__ import annotations

from core.errors import resource_not_found
from repositories.user_repo import update_user_fields
from schemas.imports import epoch
from schemas.user_schema import UserProfile, UserUpdate
from services.auth_service import retrieve_user


async def retrieve_profile(user_id: str) -> UserProfile:
    return UserProfile.from_user(await retrieve_user(user_id))


async def update_profile(user_id: str, payload: UserUpdate) -> UserProfile:
    changes = payload.model_dump(exclude_none=True)
    if not changes:
        return await retrieve_profile(user_id)

    user = await update_user_fields(user_id, {**changes, "last_updated": epoch()})
    if user is None:
        raise resource_not_found("User", user_id)
    return UserProfile.from_user(user)
