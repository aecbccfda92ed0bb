"""Scan job, finding and progress models."""

from datetime import datetime
from uuid import uuid4

from pydantic import ConfigDict, Field, model_validator

from keyguard.models.base import BaseSchema, ScanStatus, Severity

TOTAL_CHECKS = 100


class Finding(BaseSchema):
    """One detected credential occurrence."""

    # Context snippets are kept byte-for-byte, so no whitespace stripping.
    model_config = ConfigDict(frozen=True, str_strip_whitespace=False)

    id: str = Field(default_factory=lambda: str(uuid4()))
    key_type: str
    masked_value: str
    location: str
    severity: Severity
    confidence: float = Field(ge=0.0, le=1.0)
    description: str = ""
    provider: str = ""
    context: str
    line_number: int | None = Field(default=None, ge=1)
    recommendation: str


class ScanSummary(BaseSchema):
    """Finding counts per severity."""

    critical: int = Field(default=0, ge=0)
    high: int = Field(default=0, ge=0)
    medium: int = Field(default=0, ge=0)
    low: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)


class ProgressSnapshot(BaseSchema):
    """Latest progress of a running scan."""

    scan_id: str
    stage: str
    percent: int = Field(ge=0, le=100)
    message: str
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class ScanJob(BaseSchema):
    """Persisted unit of work and its terminal outcome."""

    model_config = ConfigDict(str_strip_whitespace=False)

    id: str = Field(default_factory=lambda: str(uuid4()))
    owner_id: str | None = None
    url: str
    status: ScanStatus = ScanStatus.SCANNING
    start_time: datetime = Field(default_factory=datetime.utcnow)
    end_time: datetime | None = None
    findings: list[Finding] = Field(default_factory=list)
    total_checks: int = Field(default=TOTAL_CHECKS, ge=0)
    completed_checks: int = Field(default=0, ge=0)
    recommendation: str | None = None
    summary: ScanSummary = Field(default_factory=ScanSummary)
    error: str | None = None

    @model_validator(mode="after")
    def validate_checks(self) -> "ScanJob":
        if self.completed_checks > self.total_checks:
            raise ValueError("completed_checks cannot exceed total_checks")
        return self

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def duration_seconds(self) -> float | None:
        if self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return None

    def to_json_dict(self) -> dict:
        """Convert to JSON-serializable dictionary."""
        return self.model_dump(mode="json")
