"""FastAPI application factory."""
from __future__ import annotations

from typing import List

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from blinkvocab import __version__
from blinkvocab.api.v1 import api_router
from blinkvocab.config import settings


tags_metadata: List[dict[str, str]] = [
    {"name": "auth", "description": "Register learners and issue authentication tokens."},
    {"name": "users", "description": "Read the authenticated learner's profile."},
    {"name": "review", "description": "Submit answers and reschedule words."},
    {"name": "tasks", "description": "Due reviews and new words for today."},
    {"name": "dashboard", "description": "Progress totals, due counts and recent activity."},
    {"name": "words", "description": "Browse, inspect and manually add words."},
    {"name": "market", "description": "Browse and join curated dictionaries."},
    {"name": "health", "description": "Liveness probe."},
]


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Spaced repetition vocabulary trainer.",
        version=__version__,
        openapi_tags=tags_metadata,
        docs_url=f"{settings.API_V1_STR}/docs",
        redoc_url=f"{settings.API_V1_STR}/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.warning(f"Request validation failed for {request.url.path}")
        return JSONResponse(
            status_code=422,
            content={"detail": jsonable_encoder(exc.errors()), "message": "Validation failed"},
        )

    app.include_router(api_router, prefix=settings.API_V1_STR)
    return app


app = create_app()
