# server/main.py
"""
Maintenance Desk - Main FastAPI Application

Maintenance ticket intake and tracking.
Features:
- Ticket intake with validated photo uploads
- Race-safe control numbers (RMF-{code}-{YYYY}-{MM}-{SEQ})
- Status lifecycle with accomplished-date stamping
- Remark threads per ticket
"""
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from core.config import (
    APP_DEBUG,
    APP_HOST,
    APP_PORT,
    CORS_ORIGINS,
    INTAKE_RATE_LIMIT_ENABLED,
    UPLOAD_DIR,
    settings,
)
from core.database import init_db, test_connection
from core.logger import get_logger
from middleware import IntakeRateLimitMiddleware, add_request_id_middleware, register_error_handlers
from routes import include_routes

logger = get_logger(__name__)


# ==================== LIFESPAN ====================

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 Starting Maintenance Desk API")
    Path(UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
    if test_connection():
        init_db()
    else:
        logger.warning("Database unreachable at startup; tables not initialized")
    yield
    logger.info("Maintenance Desk API stopped")


def create_app(rate_limit: bool = INTAKE_RATE_LIMIT_ENABLED) -> FastAPI:
    """Build the application. Tests pass rate_limit=False."""
    app = FastAPI(
        title=settings.api_title,
        description="Maintenance ticket intake with control numbers, status tracking and remarks",
        version=settings.api_version,
        lifespan=lifespan,
    )

    # ==================== MIDDLEWARE SETUP ====================

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if rate_limit:
        app.add_middleware(IntakeRateLimitMiddleware)

    app.middleware("http")(add_request_id_middleware)

    # ==================== ERROR HANDLERS ====================

    register_error_handlers(app)

    # ==================== ROUTE REGISTRATION ====================

    include_routes(app)

    # Stored uploads are served by their generated filename
    app.mount("/files", StaticFiles(directory=UPLOAD_DIR, check_dir=False), name="files")

    @app.get("/")
    def root():
        return {"service": settings.api_title, "version": settings.api_version, "docs": "/docs"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=APP_HOST, port=APP_PORT, reload=APP_DEBUG)
