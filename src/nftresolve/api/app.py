"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nftresolve import __version__
from nftresolve.api.errors import register_exception_handlers
from nftresolve.api.routes import collection_router, health_router, nft_router
from nftresolve.config import get_settings
from nftresolve.services.factory import build_resolution_stack

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan manager.

    Handles startup and shutdown of resources.
    """
    settings = get_settings()

    stack = await build_resolution_stack(settings)
    app.state.resolution_stack = stack
    app.state.resolution_service = stack.service
    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application...")
    await stack.close()
    logger.info("Application shutdown complete")


def create_app(
    *,
    title: str = "nftresolve API",
    description: str = "NFT metadata resolution across Ethereum, Polygon and Starknet",
    version: str = __version__,
    cors_origins: list[str] | None = None,
    use_lifespan: bool = True,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        title: API title for OpenAPI docs
        description: API description for OpenAPI docs
        version: API version
        cors_origins: List of allowed CORS origins
        use_lifespan: Build the pipeline on startup (disable to inject one)

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title=title,
        description=description,
        version=version,
        lifespan=lifespan if use_lifespan else None,
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins if cors_origins is not None else settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health_router, prefix="/api/v1")
    app.include_router(nft_router, prefix="/api/v1")
    app.include_router(collection_router, prefix="/api/v1")

    return app


# For uvicorn direct execution
app = create_app()
