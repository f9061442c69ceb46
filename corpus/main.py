"""
Post Corpus API

Read-only FastAPI service over the blog's front-matter documents.
"""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from corpus.config import get_settings
from corpus.middleware import (
    RequestIDLogFilter,
    RequestIDMiddleware,
    SecurityHeadersMiddleware,
)
from corpus.routers import documents
from corpus.services.documents import check_content_dir, resolve_content_dir
from corpus.services.errors import CorpusError, DuplicateIdentity, MalformedMetadata

logger = logging.getLogger(__name__)

settings = get_settings()

VERSION = "0.1.0"

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s [%(request_id)s]: %(message)s",
)
for _handler in logging.getLogger().handlers:
    _handler.addFilter(RequestIDLogFilter())


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: startup and shutdown."""
    if not check_content_dir():
        logger.warning("Content directory %s does not exist", resolve_content_dir())
    yield


app = FastAPI(
    title="Post Corpus API",
    description="Blog posts and pages parsed from front-matter Markdown",
    version=VERSION,
    lifespan=lifespan,
)

# Security headers and request IDs on every response
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestIDMiddleware)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET"],
    allow_headers=["Content-Type", "X-Request-ID"],
)

# Routers
app.include_router(documents.router, prefix="/api/corpus")


@app.exception_handler(CorpusError)
async def corpus_error_handler(request: Request, exc: CorpusError) -> JSONResponse:
    """Surface a broken corpus as a 500 naming the offending documents."""
    content: dict[str, Any] = {"error": type(exc).__name__, "detail": str(exc)}
    if isinstance(exc, MalformedMetadata):
        content["source"] = exc.source
        content["errors"] = list(exc.errors)
    elif isinstance(exc, DuplicateIdentity):
        content["identity"] = exc.identity
        content["sources"] = exc.sources
    logger.error("Corpus error on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content=content)


def _run_health_checks() -> dict[str, Any]:
    """Run all health checks, returning the full response body."""
    checks = {"content": "ok" if check_content_dir() else "fail"}
    failed = [k for k, v in checks.items() if v != "ok"]

    if failed:
        overall = "degraded"
        logger.warning("Health check degraded, failed: %s", ", ".join(failed))
    else:
        overall = "ok"

    return {
        "status": overall,
        "service": "post-corpus-api",
        "version": VERSION,
        "checks": checks,
    }


@app.get("/api/corpus/health")
async def health_check() -> JSONResponse:
    """Health check verifying the content directory is reachable."""
    return JSONResponse(content=_run_health_checks(), status_code=200)
