# app/main.py
"""
FastAPI application entry point.
Includes CORS, request timing, error handlers, and all routers.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from app.routers import people, entries, occupancy, scan, health
from app.database import create_tables
from app.config import settings
from app.errors import TrackerError
from app.utils.logger import get_logger
import time

logger = get_logger(__name__)


# ── Startup / Shutdown ───────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 Entry Tracker starting up...")
    if settings.STORAGE_BACKEND.lower() == "sql":
        create_tables()
        logger.info("✅ Database tables ready")
    logger.info(f"🗄️  Storage backend: {settings.STORAGE_BACKEND}")
    logger.info(f"🕒 Daily reports in {settings.REPORT_TIMEZONE}")
    logger.info(f"🌐 Listening on http://{settings.BACKEND_HOST}:{settings.BACKEND_PORT}")
    yield
    logger.info("🛑 Entry Tracker shutting down...")


app = FastAPI(
    title="Entry Tracker API",
    description="QR-based entry/exit attendance tracking with live occupancy.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# ── CORS (the scanner UI is served separately) ───────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],   # Restrict to the dashboard origin in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Domain Error Handler ─────────────────────────────────────────────────────
@app.exception_handler(TrackerError)
async def tracker_error_handler(request: Request, exc: TrackerError):
    log = logger.error if exc.status_code >= 500 else logger.info
    log(f"{exc.error} on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.error, "code": exc.code},
    )


# ── Global Exception Handler ─────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(people.router,    prefix="/api/v1", tags=["👤 People"])
app.include_router(entries.router,   prefix="/api/v1", tags=["📒 Entries"])
app.include_router(occupancy.router, prefix="/api/v1", tags=["👥 Occupancy"])
app.include_router(scan.router,      prefix="/api/v1", tags=["📷 Scan"])
app.include_router(health.router,    prefix="/api/v1", tags=["💚 Health"])
