import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from gigboard.config import settings
from gigboard.core.errors import (
    GuardViolation,
    NotFound,
    NotOwner,
    PartialFailure,
    TransientIOError,
    ValidationError,
    WorkflowError,
)
from gigboard.core.rate_limiter import rate_limiter
from gigboard.database import init_db, engine
from gigboard.logging_config import setup_logging
from gigboard.routers import applications, feed, jobs, messages, notifications, profiles
from gigboard.services.notifications import close_all as close_notification_inboxes

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="GigBoard API",
    description="Local gig marketplace: job feed, applications, hiring and chat.",
    version="1.0.0",
)

cors_origins = [o.strip() for o in settings.cors_allow_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(feed.router)
app.include_router(jobs.router)
app.include_router(applications.router)
app.include_router(messages.router)
app.include_router(profiles.router)
app.include_router(notifications.router)


def _status_for(exc: WorkflowError) -> int:
    if isinstance(exc, NotFound):
        return 404
    if isinstance(exc, NotOwner):
        return 403
    if isinstance(exc, GuardViolation):
        return 409
    if isinstance(exc, ValidationError):
        return 400
    if isinstance(exc, PartialFailure):
        return 502
    if isinstance(exc, TransientIOError):
        return 503
    return 400


@app.exception_handler(WorkflowError)
async def workflow_error_handler(request, exc: WorkflowError):
    code = _status_for(exc)
    if isinstance(exc, PartialFailure):
        logger.error(
            "Partial failure on %s %s: failed_step=%s completed=%s",
            request.method, request.url.path, exc.failed_step, exc.completed_steps,
        )
        return JSONResponse(status_code=code, content=exc.to_dict())
    if code >= 500:
        logger.warning("Store unavailable on %s %s: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=code, content={"detail": exc.message, "error": type(exc).__name__})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request, exc):
    logger.exception("Unhandled server error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.middleware("http")
async def apply_rate_limits(request, call_next):
    path = request.url.path
    if request.method != "POST":
        return await call_next(request)

    client_ip = request.client.host if request.client else "unknown"
    limit = None
    bucket = path
    if path.startswith("/jobs/") and path.endswith("/apply"):
        limit = settings.rate_limit_apply_per_min
        bucket = "apply"
    elif path == "/messages":
        limit = settings.rate_limit_messages_per_min

    if limit is not None and limit > 0:
        key = f"{client_ip}:{bucket}"
        allowed, retry_after = rate_limiter.allow(key, limit=limit, window_seconds=60)
        if not allowed:
            return JSONResponse(
                status_code=429,
                content={"detail": "Too many requests. Please retry shortly."},
                headers={"Retry-After": str(retry_after)},
            )

    return await call_next(request)


@app.get("/health/live")
def health_live():
    return {"status": "ok"}


@app.get("/health/ready")
def health_ready():
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"status": "ready"}
    except Exception:
        logger.exception("Readiness check failed")
        return JSONResponse(status_code=503, content={"status": "not_ready"})


@app.on_event("startup")
def on_startup():
    logger.info("Starting GigBoard API")
    env = (settings.app_env or "development").lower()
    if settings.secret_key == "replace-with-a-long-random-secret-key":
        if env in {"production", "prod"}:
            raise RuntimeError("SECRET_KEY placeholder is not allowed in production")
        logger.warning("SECRET_KEY is using placeholder default. Set SECRET_KEY in .env for secure deployments.")
    init_db()


@app.on_event("shutdown")
def on_shutdown():
    closed = close_notification_inboxes()
    logger.info("Stopping GigBoard API (closed %d notification inbox(es))", closed)


@app.get("/")
def root():
    return {"message": "GigBoard API. See /docs for endpoints."}
