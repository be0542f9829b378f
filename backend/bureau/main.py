"""
Marriage Bureau — FastAPI Application Entry Point

Aggregates all routers, configures logging and middleware, maps domain
errors to HTTP responses, and initializes the database on startup.
"""
import logging
import os
import time
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from bureau.config import get_settings
from bureau.database import SessionLocal, init_db
from bureau.errors import BureauError
from bureau.routes import (
    access_requests_router, admin_router, auth_router, inquiries_router,
    payment_settings_router, profiles_router,
)
from bureau.services.account_service import AccountService

settings = get_settings()

# ─── Logging ─────────────────────────────────────────────────────────
os.makedirs(settings.LOG_DIR, exist_ok=True)
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    handlers=[
        logging.StreamHandler(),
        logging.FileHandler(os.path.join(settings.LOG_DIR, "server.log")),
    ],
)
logger = logging.getLogger("bureau")

BOOT_TIME = time.time()


# ─── Startup ─────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables, bootstrap the admin account and log boot info."""
    init_db()

    db = SessionLocal()
    try:
        AccountService.ensure_admin_account(db)
    finally:
        db.close()

    logger.info(
        "\n%s\n  %s v%s\n  TIME: %s\n  DATABASE: %s\n  ASSET STORE: %s\n  DEBUG: %s\n%s",
        "=" * 60,
        settings.APP_NAME,
        settings.APP_VERSION,
        datetime.now().isoformat(),
        settings.DATABASE_URL,
        f"[OK] s3://{settings.AWS_S3_BUCKET}" if settings.AWS_S3_BUCKET else "[!] Not configured",
        settings.DEBUG,
        "=" * 60,
    )
    yield
    logger.info("Shutting down %s", settings.APP_NAME)


# ─── Application Instance ───────────────────────────────────────────
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description=(
        "API for a marriage bureau: member accounts, matrimonial profiles, "
        "paid access to premium profile details via UPI payment claims reviewed "
        "by admins, inquiries, and a hash-chained audit trail."
    ),
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


# ─── Middleware ──────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every API request with timing."""
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 1)

    if request.url.path.startswith("/api"):
        logger.info("%s %s -> %s (%sms)", request.method, request.url.path, response.status_code, duration)

    return response


# ─── Error Handling ──────────────────────────────────────────────────
@app.exception_handler(BureauError)
async def bureau_error_handler(request: Request, exc: BureauError) -> JSONResponse:
    """Domain errors keep their status and carry a stable reason code."""
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
    else:
        logger.warning("%s %s refused: %s", request.method, request.url.path, exc.code)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error_code": exc.code},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies, forms and query strings get the same envelope as domain refusals."""
    fields = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"] if loc not in ("body", "query", "path"))
        fields.append({"field": field or None, "issue": error["msg"]})
    logger.warning("%s %s refused: validation_error", request.method, request.url.path)
    return JSONResponse(
        status_code=422,
        content={"detail": "Request validation failed", "error_code": "validation_error", "fields": fields},
    )


# ─── API Routers ─────────────────────────────────────────────────────
app.include_router(auth_router)
app.include_router(profiles_router)
app.include_router(access_requests_router)
app.include_router(inquiries_router)
app.include_router(payment_settings_router)
app.include_router(admin_router)


@app.get("/health", tags=["Health"])
def deep_health():
    """Detailed health check including dependency statuses."""
    db_ok = False
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        db_ok = True
    except SQLAlchemyError as e:
        logger.error("Health check database failure: %s", e)
    finally:
        db.close()

    return {
        "status": "healthy" if db_ok else "degraded",
        "database": "connected" if db_ok else "disconnected",
        "asset_store": "configured" if settings.AWS_S3_BUCKET else "unconfigured",
        "uptime_seconds": round(time.time() - BOOT_TIME, 1),
        "version": settings.APP_VERSION,
    }
