from __future__ import annotations

import logging
import math
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import redis
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from limits.storage import RedisStorage
from limits.strategies import FixedWindowRateLimiter
from starlette.middleware.base import BaseHTTPMiddleware

from core import task as _task_registration  # noqa: F401
from core.database import client as mongo_client
from core.errors import ErrorCode, from_storage_error
from core.logging_config import setup_logging
from core.queue import CeleryQueueProvider, InlineQueueProvider, QueueManager
from core.rate_limits import ANONYMOUS, USER, build_rate_limits
from core.response_envelope import (
    apply_response_documentation,
    document_response,
    error_response,
    http_exception_response,
)
from core.settings import get_settings
from core.storage import StorageError, StorageRegistry
from core.validation_errors import format_validation_error_details
from security.encrypting_jwt import decode_access_token

settings = get_settings()
setup_logging(settings.env)
logger = logging.getLogger(__name__)

redis_client = (
    redis.Redis.from_url(settings.redis_url, socket_connect_timeout=2, decode_responses=True)
    if settings.redis_url
    else None
)


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class RequestTimingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        response.headers["X-Process-Time"] = str(time.time() - start_time)
        return response


RATE_LIMITS = build_rate_limits(settings.role_rate_limits)


def get_client_identity(request: Request) -> tuple[str, str]:
    fallback_id = request.headers.get("X-Forwarded-For") or (request.client.host if request.client else "unknown")

    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return fallback_id, ANONYMOUS

    payload = decode_access_token(auth_header.split(" ", maxsplit=1)[1])
    if payload is None:
        return fallback_id, ANONYMOUS
    return payload["sub"], USER


class RateLimitingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, limiter: FixedWindowRateLimiter):
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next):
        client_id, client_type = get_client_identity(request)
        rate_limit_rule = RATE_LIMITS[client_type]

        allowed = self.limiter.hit(rate_limit_rule, client_id)
        reset_time, remaining = self.limiter.get_window_stats(rate_limit_rule, client_id)
        seconds_until_reset = max(math.ceil(reset_time - time.time()), 0)

        headers = {
            "X-RateLimit-Limit": str(rate_limit_rule.amount),
            "X-RateLimit-Remaining": str(max(remaining, 0)),
            "X-RateLimit-Reset": str(seconds_until_reset),
        }

        if not allowed:
            headers["Retry-After"] = str(seconds_until_reset)
            return error_response(
                status_code=429,
                message="Too Many Requests",
                data={
                    "code": ErrorCode.TOO_MANY_REQUESTS.value,
                    "details": {"retry_after_seconds": seconds_until_reset, "client_type": client_type},
                },
                headers=headers,
                request_id=getattr(request.state, "request_id", None),
            )

        response = await call_next(request)
        for key, value in headers.items():
            response.headers[key] = value
        return response


def configure_queue() -> None:
    if settings.celery_broker_url:
        from celery_worker import celery_app

        QueueManager.configure(CeleryQueueProvider(celery_app=celery_app))
    else:
        logger.info("No Celery broker configured; background tasks run inline")
        QueueManager.configure(InlineQueueProvider())


async def shutdown_queue() -> None:
    provider = QueueManager.get_instance().provider
    if isinstance(provider, InlineQueueProvider):
        await provider.drain()
    QueueManager.reset()


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.storage_registry = StorageRegistry.from_settings(settings)
    configure_queue()
    logger.info("Pi Docs API started (env=%s)", settings.env)
    try:
        yield
    finally:
        await shutdown_queue()


app = FastAPI(lifespan=lifespan, title="Pi Docs API")
app.add_middleware(RequestIdMiddleware)
app.add_middleware(RequestTimingMiddleware)
if settings.redis_url:
    app.add_middleware(RateLimitingMiddleware, limiter=FixedWindowRateLimiter(RedisStorage(settings.redis_url)))
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def log_context(request: Request, status_code: int) -> dict[str, object]:
    return {
        "request_id": getattr(request.state, "request_id", None),
        "http_method": request.method,
        "path": request.url.path,
        "status_code": status_code,
    }


@app.exception_handler(HTTPException)
async def custom_http_exception_handler(request: Request, exc: HTTPException):
    return http_exception_response(exc=exc, request=request)


@app.exception_handler(StorageError)
async def storage_exception_handler(request: Request, exc: StorageError):
    app_exc = from_storage_error(exc)
    if app_exc.status_code >= 500:
        logger.error("Storage failure: %s", exc, extra=log_context(request, app_exc.status_code))
    return http_exception_response(exc=app_exc, request=request)


@app.exception_handler(RequestValidationError)
async def custom_validation_exception_handler(request: Request, exc: RequestValidationError):
    return error_response(
        status_code=422,
        message="Validation error",
        data={"code": ErrorCode.VALIDATION_FAILED.value, "details": format_validation_error_details(exc.errors())},
        request_id=getattr(request.state, "request_id", None),
    )


@app.exception_handler(Exception)
async def custom_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, extra=log_context(request, 500))
    details = str(exc) if (settings.debug_include_error_details and not settings.is_production) else None
    return error_response(
        status_code=500,
        message="Internal Server Error",
        data={"code": ErrorCode.INTERNAL_ERROR.value, "details": details},
        request_id=getattr(request.state, "request_id", None),
    )


@app.get("/", tags=["Health"], include_in_schema=False)
@document_response(
    message="Successfully fetched data",
    success_example={"message": "Pi Docs API"},
)
def read_root(request: Request):
    return {"message": "Pi Docs API", "request_id": getattr(request.state, "request_id", None)}


@app.get("/health", tags=["Health"])
@document_response(
    message="Health check completed",
    success_example={"status": "healthy", "services": {"mongo": {"status": "healthy"}}},
)
async def health_check():
    services: dict[str, dict[str, str | float]] = {}
    overall_status = "healthy"

    start = time.perf_counter()
    try:
        await mongo_client.admin.command("ping")
        services["mongo"] = {
            "status": "healthy",
            "latency_ms": round((time.perf_counter() - start) * 1000, 2),
            "message": "MongoDB ping successful",
        }
    except Exception as exc:
        overall_status = "degraded"
        services["mongo"] = {
            "status": "unhealthy",
            "latency_ms": round((time.perf_counter() - start) * 1000, 2),
            "message": str(exc),
        }

    if redis_client is not None:
        start = time.perf_counter()
        try:
            redis_client.ping()
            services["redis"] = {
                "status": "healthy",
                "latency_ms": round((time.perf_counter() - start) * 1000, 2),
                "message": "Redis ping successful",
            }
        except Exception as exc:
            overall_status = "degraded"
            services["redis"] = {
                "status": "unhealthy",
                "latency_ms": round((time.perf_counter() - start) * 1000, 2),
                "message": str(exc),
            }

    return {
        "status": overall_status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": services,
    }


# --- auto-routes-start ---
from api.v1.auth_route import router as v1_auth_route_router
from api.v1.categories_route import router as v1_categories_route_router
from api.v1.documents_route import router as v1_documents_route_router
from api.v1.settings_route import router as v1_settings_route_router
from api.v1.stats_route import router as v1_stats_route_router
from api.v1.users_route import router as v1_users_route_router

app.include_router(v1_auth_route_router, prefix='/v1')
app.include_router(v1_categories_route_router, prefix='/v1')
app.include_router(v1_documents_route_router, prefix='/v1')
app.include_router(v1_settings_route_router, prefix='/v1')
app.include_router(v1_stats_route_router, prefix='/v1')
app.include_router(v1_users_route_router, prefix='/v1')
# --- auto-routes-end ---

apply_response_documentation(app)
