"""
FastAPI application entrypoint for the Music Swiper gateway.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from music_swiper.api.routes import router as api_router
from music_swiper.core.config import get_settings
from music_swiper.core.errors import ApiError, api_error_handler, validation_error_handler
from music_swiper.core.logging import configure_logging


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Music Swiper API",
        version="0.1.0",
        description="OAuth gateway and Spotify passthrough for the swipe front-end.",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_uri],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    @app.get("/", response_class=PlainTextResponse, include_in_schema=False)
    async def root() -> str:
        return "Music Swiper API is running"

    app.include_router(api_router, prefix=settings.api_base_path)
    return app


app = create_app()

__all__ = ["app", "create_app"]
