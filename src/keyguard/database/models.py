"""SQLModel ORM models for database storage."""

import json
from datetime import datetime
from typing import Any

from sqlmodel import Column, Field, SQLModel, Text

from keyguard.models import Finding, ProgressSnapshot, ScanJob, ScanStatus, ScanSummary


class ScanRecord(SQLModel, table=True):
    """Database model for storing scan jobs."""

    __tablename__ = "scans"

    id: str = Field(primary_key=True, max_length=36)
    owner_id: str | None = Field(default=None, index=True)
    url: str = Field(sa_column=Column(Text, nullable=False))
    status: str = Field(default=ScanStatus.SCANNING.value, index=True)

    start_time: datetime = Field(default_factory=datetime.utcnow, index=True)
    end_time: datetime | None = None

    total_checks: int = 0
    completed_checks: int = 0

    recommendation: str | None = Field(default=None, sa_column=Column(Text))
    error: str | None = Field(default=None, sa_column=Column(Text))

    # Store complex data as JSON
    findings_json: str = Field(default="[]", sa_column=Column(Text))
    summary_json: str = Field(default="{}", sa_column=Column(Text))

    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)

    @property
    def findings(self) -> list[dict[str, Any]]:
        """Parse findings from JSON."""
        return json.loads(self.findings_json)

    @findings.setter
    def findings(self, value: list[dict[str, Any]]) -> None:
        """Store findings as JSON."""
        self.findings_json = json.dumps(value, default=str)

    @property
    def summary(self) -> dict[str, Any]:
        """Parse summary from JSON."""
        return json.loads(self.summary_json)

    @summary.setter
    def summary(self, value: dict[str, Any]) -> None:
        """Store summary as JSON."""
        self.summary_json = json.dumps(value)

    def apply(self, job: ScanJob) -> None:
        """Copy every field of a job onto this record."""
        self.owner_id = job.owner_id
        self.url = job.url
        self.status = job.status.value
        self.start_time = job.start_time
        self.end_time = job.end_time
        self.total_checks = job.total_checks
        self.completed_checks = job.completed_checks
        self.recommendation = job.recommendation
        self.error = job.error
        self.findings = [f.model_dump(mode="json") for f in job.findings]
        self.summary = job.summary.model_dump(mode="json")

    @classmethod
    def from_job(cls, job: ScanJob) -> "ScanRecord":
        record = cls(id=job.id, url=job.url, start_time=job.start_time)
        record.apply(job)
        return record

    def to_job(self) -> ScanJob:
        return ScanJob(
            id=self.id,
            owner_id=self.owner_id,
            url=self.url,
            status=ScanStatus(self.status),
            start_time=self.start_time,
            end_time=self.end_time,
            findings=[Finding.model_validate(f) for f in self.findings],
            total_checks=self.total_checks,
            completed_checks=self.completed_checks,
            recommendation=self.recommendation,
            summary=ScanSummary.model_validate(self.summary or {}),
            error=self.error,
        )


class ProgressRecord(SQLModel, table=True):
    """Latest progress snapshot per scan."""

    __tablename__ = "scan_progress"

    scan_id: str = Field(primary_key=True, max_length=36)
    stage: str
    percent: int = 0
    message: str = Field(sa_column=Column(Text, nullable=False))
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    def to_snapshot(self) -> ProgressSnapshot:
        return ProgressSnapshot(
            scan_id=self.scan_id,
            stage=self.stage,
            percent=self.percent,
            message=self.message,
            updated_at=self.updated_at,
        )
