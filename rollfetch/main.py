"""FastAPI application: the versioned API plus the merged-PDF file mount."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from rollfetch.api.v1.api import api_router
from rollfetch.core.config import settings
from rollfetch.core.logging_config import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Tests keep pytest's own log capture
    if not settings.TESTING:
        setup_logging()
    yield


def mount_merged_output(app: FastAPI) -> None:
    """Serve ``MERGED_DIR`` read-only under ``MERGED_URL_PREFIX``."""
    settings.MERGED_DIR.mkdir(parents=True, exist_ok=True)
    app.mount(
        settings.MERGED_URL_PREFIX,
        StaticFiles(directory=settings.MERGED_DIR),
        name="merged",
    )


def create_app() -> FastAPI:
    """Build the API application from the current settings."""
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.PROJECT_VERSION,
        description="Fetch result PDFs for a roll number range and merge them",
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        lifespan=lifespan,
    )

    if settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.BACKEND_CORS_ORIGINS),
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    app.include_router(api_router, prefix=settings.API_V1_STR)
    mount_merged_output(app)

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        return {
            "message": "Welcome to the Roll Result Fetcher API",
            "version": settings.PROJECT_VERSION,
            "docs": app.docs_url,
        }

    @app.get(f"{settings.API_V1_STR}/health", include_in_schema=False)
    async def health_check() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
