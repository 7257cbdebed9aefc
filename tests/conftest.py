from __future__ import annotations

import os

# Settings are read once at import time by core.database; pin a test environment first.
os.environ.setdefault("ENV", "test")
os.environ.setdefault("SECRET_KEY", "pi-docs-test-secret-key-0123456789abcdef")
os.environ.setdefault("MONGO_URL", "mongodb://127.0.0.1:27017")
os.environ.setdefault("DB_NAME", "pi_docs_test")
os.environ.pop("REDIS_URL", None)
os.environ.pop("CELERY_BROKER_URL", None)
