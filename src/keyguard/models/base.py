"""Base models and enums."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        extra="forbid",
    )


class ScanStatus(str, Enum):
    """Scan job status."""

    SCANNING = "scanning"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not ScanStatus.SCANNING


class Severity(str, Enum):
    """Finding severity levels."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ResourceKind(str, Enum):
    """Kinds of sub-resource references found in a document."""

    SCRIPT_SRC = "script-src"
    SCRIPT_INLINE = "script-inline"
    STYLESHEET_HREF = "stylesheet-href"
