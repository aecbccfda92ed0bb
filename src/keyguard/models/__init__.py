"""Pydantic data models for KeyGuard."""

from keyguard.models.base import BaseSchema, ResourceKind, ScanStatus, Severity
from keyguard.models.target import ScanTarget
from keyguard.models.scan import (
    TOTAL_CHECKS,
    Finding,
    ProgressSnapshot,
    ScanJob,
    ScanSummary,
)
from keyguard.models.resource import Pattern, ResourceReference

__all__ = [
    "BaseSchema",
    "ResourceKind",
    "ScanStatus",
    "Severity",
    "ScanTarget",
    "TOTAL_CHECKS",
    "Finding",
    "ProgressSnapshot",
    "ScanJob",
    "ScanSummary",
    "Pattern",
    "ResourceReference",
]
