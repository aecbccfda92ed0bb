"""Liveness and readiness endpoints."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from keyguard.database import check_db
from keyguard.scanners.patterns import PATTERNS
from keyguard.version import __version__

router = APIRouter()


@router.get("/")
async def root() -> dict:
    """Service banner."""
    return {
        "name": "KeyGuard API",
        "version": __version__,
        "docs": "/docs",
    }


@router.get("/health")
async def health_check() -> dict:
    """Liveness: the process is up and the signature table is loaded."""
    return {
        "status": "healthy",
        "version": __version__,
        "patterns": len(PATTERNS),
    }


@router.get("/health/ready")
async def readiness_check() -> JSONResponse:
    """Readiness: the scan store is reachable."""
    database_ok = await check_db()
    return JSONResponse(
        status_code=200 if database_ok else 503,
        content={
            "status": "ready" if database_ok else "unavailable",
            "database": database_ok,
        },
    )
