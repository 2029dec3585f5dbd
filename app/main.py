"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import SQLModel

from app.api.auth import router as auth_router
from app.api.errors import register_exception_handlers
from app.api.tasks import router as tasks_router
from app.config import configure_logging, get_settings
from app.db.session import engine

settings = get_settings()
configure_logging(settings.LOG_LEVEL)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Validate configuration and create database tables on startup."""
    settings.validate()
    # Import models to register them with SQLModel
    from app.models import AccessToken, Task, User  # noqa: F401
    SQLModel.metadata.create_all(engine)
    logger.info("Application started")
    yield
    engine.dispose()

app = FastAPI(
    title="Task Manager API",
    description="Token-authenticated REST API for per-user tasks",
    version="1.0.0",
    lifespan=lifespan,
)

cors_origins = [settings.FRONTEND_URL, *settings.CORS_ORIGINS]
# Remove duplicates and empty strings
cors_origins = [origin for origin in set(cors_origins) if origin]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Register routers
app.include_router(auth_router)
app.include_router(tasks_router)


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}
