"""Repository layer for database operations."""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from keyguard.database.models import ProgressRecord, ScanRecord
from keyguard.models import ProgressSnapshot, ScanJob


class ScanRepository:
    """Repository for scan and progress rows."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, scan_id: str) -> ScanRecord | None:
        """Get a scan record by ID."""
        result = await self.session.execute(
            select(ScanRecord).where(ScanRecord.id == scan_id)
        )
        return result.scalar_one_or_none()

    async def save(self, job: ScanJob) -> ScanRecord:
        """Insert a scan record, or overwrite the existing one."""
        record = await self.get_by_id(job.id)
        if record is None:
            record = ScanRecord.from_job(job)
        else:
            record.apply(job)

        self.session.add(record)
        await self.session.flush()
        return record

    async def list_by_owner(self, owner_id: str) -> list[ScanRecord]:
        """List an owner's scan records, newest first."""
        result = await self.session.execute(
            select(ScanRecord)
            .where(ScanRecord.owner_id == owner_id)
            .order_by(ScanRecord.start_time.desc(), ScanRecord.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_progress(self, scan_id: str) -> ProgressRecord | None:
        """Get the progress row for a scan."""
        result = await self.session.execute(
            select(ProgressRecord).where(ProgressRecord.scan_id == scan_id)
        )
        return result.scalar_one_or_none()

    async def save_progress(self, snapshot: ProgressSnapshot) -> ProgressRecord:
        """Insert or overwrite the progress row for a scan."""
        record = await self.get_progress(snapshot.scan_id)
        if record is None:
            record = ProgressRecord(scan_id=snapshot.scan_id, stage=snapshot.stage, message=snapshot.message)

        record.stage = snapshot.stage
        record.percent = snapshot.percent
        record.message = snapshot.message
        record.updated_at = snapshot.updated_at or datetime.utcnow()

        self.session.add(record)
        await self.session.flush()
        return record
