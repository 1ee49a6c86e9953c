"""Student Registry API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global handlers cover request validation and unhandled exceptions;
      failed Outcomes are rendered by the routes themselves
    - CORS configured from settings (not hardcoded)
    - Storage initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Lifespan keeps an already-initialized storage manager (tests install their own)
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import app.infrastructure.storage as storage_module
from app.api.error_handlers import register_error_handlers
from app.api.routes import health, students
from app.config import Settings, get_settings
from app.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


def init_from_settings(settings: Settings) -> storage_module.StorageManager:
    return storage_module.init_storage(
        settings.db_file_path,
        settings.db_backup_path,
        bounds=settings.validation_bounds(),
        default_limit=settings.default_page_limit,
        max_limit=settings.max_page_limit,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format, settings.log_dir or None)
    if storage_module.storage_manager is None:
        init_from_settings(settings)
    logger.info(
        "Student Registry API started",
        extra={"path": settings.db_file_path},
    )
    yield
    logger.info("Student Registry API shutting down")


app = FastAPI(
    title="Student Registry API", version="1.0.0", lifespan=lifespan,
)

# CORS — configured from settings, not hardcoded
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(students.router)

register_error_handlers(app)


def run() -> None:
    """Console entry point: serve on the configured host and port."""
    current = get_settings()
    uvicorn.run(app, host=current.host, port=current.port)


if __name__ == "__main__":
    run()
