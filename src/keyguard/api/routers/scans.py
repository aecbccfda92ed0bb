"""Scan API endpoints."""

import hmac
from functools import lru_cache
from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException
from pydantic import BaseModel, Field

from keyguard.ai.recommender import get_recommender
from keyguard.core.config import get_settings
from keyguard.core.logging import get_logger
from keyguard.database.store import DatabaseScanStore
from keyguard.models import ProgressSnapshot, ScanJob
from keyguard.orchestration.orchestrator import ScanOrchestrator

logger = get_logger("api.scans")


@lru_cache
def get_orchestrator() -> ScanOrchestrator:
    """Process-wide orchestrator backed by the database store."""
    return ScanOrchestrator(store=DatabaseScanStore(), recommender=get_recommender())


async def verify_api_key(
    x_api_key: Annotated[str | None, Header()] = None,
) -> None:
    """Reject requests without the configured API key.

    Authentication is disabled when no ``API_KEY`` is configured.
    """
    expected = get_settings().get_api_key()
    if expected is None:
        return
    if x_api_key is None or not hmac.compare_digest(x_api_key.encode(), expected.encode()):
        raise HTTPException(status_code=401, detail="Invalid or missing API key")


router = APIRouter(dependencies=[Depends(verify_api_key)])

OrchestratorDep = Annotated[ScanOrchestrator, Depends(get_orchestrator)]
OwnerHeader = Annotated[str | None, Header()]


class CreateScanRequest(BaseModel):
    """Request to create a new scan."""

    url: str = Field(examples=["https://example.com"])


class ScanListResponse(BaseModel):
    """List of scans response."""

    items: list[ScanJob]
    total: int


@router.post("/scans", response_model=ScanJob, status_code=201)
async def create_scan(
    request: CreateScanRequest,
    orchestrator: OrchestratorDep,
    x_owner_id: OwnerHeader = None,
) -> ScanJob:
    """
    Create and start a new credential scan.

    The scan runs in the background. Poll GET /scans/{scan_id} and
    GET /scans/{scan_id}/progress to follow it.
    """
    try:
        return await orchestrator.start(request.url, owner_id=x_owner_id)
    except ValueError as e:
        logger.info("scan_rejected", url=request.url, error=str(e))
        raise HTTPException(status_code=400, detail=str(e)) from None


@router.get("/scans", response_model=ScanListResponse)
async def list_scans(
    orchestrator: OrchestratorDep,
    x_owner_id: OwnerHeader = None,
) -> ScanListResponse:
    """List the caller's scans, newest first."""
    if not x_owner_id:
        raise HTTPException(status_code=400, detail="X-Owner-Id header is required")

    jobs = await orchestrator.store.list_for_owner(x_owner_id)
    return ScanListResponse(items=jobs, total=len(jobs))


@router.get("/scans/{scan_id}", response_model=ScanJob)
async def get_scan(scan_id: str, orchestrator: OrchestratorDep) -> ScanJob:
    """Get scan details by ID."""
    job = await orchestrator.store.get(scan_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Scan not found")
    return job


@router.get("/scans/{scan_id}/progress", response_model=ProgressSnapshot)
async def get_scan_progress(scan_id: str, orchestrator: OrchestratorDep) -> ProgressSnapshot:
    """Get the latest progress snapshot for a scan."""
    snapshot = await orchestrator.progress.get(scan_id)
    if snapshot is None:
        raise HTTPException(status_code=404, detail="Scan progress not found")
    return snapshot
