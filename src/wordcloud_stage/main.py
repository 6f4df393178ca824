"""Main entry point for the Word Cloud Stage application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from wordcloud_stage.api.v1 import (
    entries_router,
    identity_router,
    order_router,
    sessions_router,
    summary_router,
    uploads_router,
)
from wordcloud_stage.core.errors import QuotaRejectedError, WordCloudError
from wordcloud_stage.core.logging import configure_logging
from wordcloud_stage.core.settings import settings
from wordcloud_stage.db.session import create_tables
from wordcloud_stage.services.notifier import get_notifier

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Word Cloud Stage API",
    description="Live word cloud collection for presenters and participants",
    version=settings.app_version,
)

# Presenter and participant frontends call the API cross-origin.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Aggregate and data-URI payloads compress well.
app.add_middleware(GZipMiddleware, minimum_size=1024)

app.include_router(sessions_router, prefix="/api/v1")
app.include_router(entries_router, prefix="/api/v1")
app.include_router(summary_router, prefix="/api/v1")
app.include_router(order_router, prefix="/api/v1")
app.include_router(identity_router, prefix="/api/v1")
app.include_router(uploads_router, prefix="/api/v1")


@app.exception_handler(QuotaRejectedError)
async def quota_rejected_handler(request: Request, exc: QuotaRejectedError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "outcome": exc.outcome,
            "reason": exc.reason,
            "attempts_left": exc.attempts_left,
            "cooldown_remaining_seconds": exc.cooldown_remaining_seconds,
        },
    )


@app.exception_handler(WordCloudError)
async def word_cloud_error_handler(request: Request, exc: WordCloudError) -> JSONResponse:
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("Unhandled service error on %s", request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=exc.status_code,
            content={"outcome": "server_error", "detail": "Internal server error"},
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"outcome": exc.outcome, "detail": str(exc)},
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unexpected error on %s", request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"outcome": "server_error", "detail": "Internal server error"},
    )


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging()
    create_tables()


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await get_notifier().close()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Describe the service and where its docs live."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Live word cloud collection for presenters and participants",
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("wordcloud_stage.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
