"""FastAPI application."""

import time
from contextlib import asynccontextmanager
from typing import AsyncIterator
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from keyguard.api.routers import health, scans
from keyguard.core.config import get_settings
from keyguard.core.exceptions import PersistenceError
from keyguard.core.logging import get_logger, setup_logging
from keyguard.version import __version__

logger = get_logger("api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the scan store on startup; drain running scans on shutdown."""
    from keyguard.database import close_db, init_db

    setup_logging()
    await init_db()
    logger.info("api_started", version=__version__)

    yield

    # Running scans must reach a terminal state before the engine goes away
    orchestrator = scans.get_orchestrator()
    await orchestrator.wait_all()
    await close_db()
    logger.info("api_stopped")


app = FastAPI(
    title="KeyGuard API",
    description="Find exposed API keys in public web pages, scripts and stylesheets",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.middleware("http")
async def bind_request_context(request: Request, call_next) -> Response:
    """Tag every log line emitted during a request with its request id."""
    request_id = request.headers.get("X-Request-Id") or uuid4().hex
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id)

    started = time.perf_counter()
    response = await call_next(request)
    response.headers["X-Request-Id"] = request_id

    logger.debug(
        "request_handled",
        method=request.method,
        path=request.url.path,
        status=response.status_code,
        duration_ms=round((time.perf_counter() - started) * 1000, 1),
    )
    return response


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    logger.error("store_unavailable", path=request.url.path, error=exc.message)
    return JSONResponse(status_code=500, content={"detail": "Scan store unavailable"})


app.include_router(health.router, tags=["Health"])
app.include_router(scans.router, prefix="/api/v1", tags=["Scans"])
