"""Scan store implementations."""

from sqlalchemy.exc import SQLAlchemyError

from keyguard.core.exceptions import PersistenceError
from keyguard.core.interfaces import IScanStore
from keyguard.database.connection import get_session
from keyguard.database.repository import ScanRepository
from keyguard.models import ProgressSnapshot, ScanJob


class DatabaseScanStore(IScanStore):
    """SQL-backed store; each call runs in its own session."""

    async def create_or_replace(self, job: ScanJob) -> None:
        try:
            async with get_session() as session:
                await ScanRepository(session).save(job)
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to save scan {job.id}: {e}", details={"scan_id": job.id}
            ) from e

    async def get(self, scan_id: str) -> ScanJob | None:
        try:
            async with get_session() as session:
                record = await ScanRepository(session).get_by_id(scan_id)
                return record.to_job() if record else None
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to load scan {scan_id}: {e}", details={"scan_id": scan_id}
            ) from e

    async def list_for_owner(self, owner_id: str) -> list[ScanJob]:
        try:
            async with get_session() as session:
                records = await ScanRepository(session).list_by_owner(owner_id)
                return [record.to_job() for record in records]
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to list scans: {e}", details={"owner_id": owner_id}
            ) from e

    async def upsert_progress(self, snapshot: ProgressSnapshot) -> None:
        try:
            async with get_session() as session:
                await ScanRepository(session).save_progress(snapshot)
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to save progress for {snapshot.scan_id}: {e}",
                details={"scan_id": snapshot.scan_id},
            ) from e

    async def get_progress(self, scan_id: str) -> ProgressSnapshot | None:
        try:
            async with get_session() as session:
                record = await ScanRepository(session).get_progress(scan_id)
                return record.to_snapshot() if record else None
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to load progress for {scan_id}: {e}",
                details={"scan_id": scan_id},
            ) from e


class MemoryScanStore(IScanStore):
    """In-process store for one-shot CLI runs and tests.

    Jobs are copied on the way in and out so callers never share a
    mutable instance with the store.
    """

    def __init__(self) -> None:
        self._jobs: dict[str, ScanJob] = {}
        self._progress: dict[str, ProgressSnapshot] = {}

    async def create_or_replace(self, job: ScanJob) -> None:
        self._jobs[job.id] = job.model_copy(deep=True)

    async def get(self, scan_id: str) -> ScanJob | None:
        job = self._jobs.get(scan_id)
        return job.model_copy(deep=True) if job else None

    async def list_for_owner(self, owner_id: str) -> list[ScanJob]:
        jobs = [job for job in self._jobs.values() if job.owner_id == owner_id]
        jobs.sort(key=lambda job: job.start_time, reverse=True)
        return [job.model_copy(deep=True) for job in jobs]

    async def upsert_progress(self, snapshot: ProgressSnapshot) -> None:
        self._progress[snapshot.scan_id] = snapshot.model_copy()

    async def get_progress(self, scan_id: str) -> ProgressSnapshot | None:
        snapshot = self._progress.get(scan_id)
        return snapshot.model_copy() if snapshot else None
