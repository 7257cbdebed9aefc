from schemas.imports import *

DEFAULT_AUTO_LOCK_MINUTES = 5


class UserSettingsUpdate(BaseModel):
    dark_mode: Optional[bool] = None
    biometric_enabled: Optional[bool] = None
    auto_lock_minutes: Optional[int] = Field(default=None, ge=0, le=240)
    storage_provider: Optional[StorageProvider] = None

    model_config = {"extra": "forbid"}


def default_settings_document(user_id: str) -> dict[str, Any]:
    return {
        "user_id": user_id,
        "dark_mode": False,
        "biometric_enabled": False,
        "auto_lock_minutes": DEFAULT_AUTO_LOCK_MINUTES,
        "storage_provider": StorageProvider.LOCAL.value,
        "date_created": epoch(),
    }


class UserSettingsOut(MongoOutModel):
    user_id: str
    dark_mode: bool = False
    biometric_enabled: bool = False
    auto_lock_minutes: int = DEFAULT_AUTO_LOCK_MINUTES
    storage_provider: StorageProvider = StorageProvider.LOCAL
    date_created: Optional[int] = None
    last_updated: Optional[int] = None
