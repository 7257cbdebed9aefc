from __future__ import annotations

from pymongo import AsyncMongoClient

from core.settings import get_settings

_settings = get_settings()

client = AsyncMongoClient(_settings.mongo_url, tz_aware=True, serverSelectionTimeoutMS=2000)
db = client[_settings.db_name]
