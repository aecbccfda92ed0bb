"""Abstract interfaces for the scan pipeline's collaborators."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from keyguard.models import Finding, ProgressSnapshot, ScanJob


class IScanStore(ABC):
    """Persistence for scan jobs and their latest progress.

    Implementations must accept concurrent writes for distinct scan ids
    and give read-your-writes visibility. Storage failures are raised as
    ``PersistenceError``.
    """

    @abstractmethod
    async def create_or_replace(self, job: ScanJob) -> None:
        """Insert or fully overwrite a job."""
        ...

    @abstractmethod
    async def get(self, scan_id: str) -> ScanJob | None:
        """Get a job by id."""
        ...

    @abstractmethod
    async def list_for_owner(self, owner_id: str) -> list[ScanJob]:
        """Jobs tagged with an owner, newest first."""
        ...

    @abstractmethod
    async def upsert_progress(self, snapshot: ProgressSnapshot) -> None:
        """Replace the progress snapshot for ``snapshot.scan_id``."""
        ...

    @abstractmethod
    async def get_progress(self, scan_id: str) -> ProgressSnapshot | None:
        """Get the latest progress snapshot."""
        ...


class IRecommender(ABC):
    """Remediation text service."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name."""
        ...

    @abstractmethod
    async def recommend(self, findings: Sequence[Finding], url: str) -> str:
        """Write remediation guidance; raises ``RecommendationError`` on failure."""
        ...
