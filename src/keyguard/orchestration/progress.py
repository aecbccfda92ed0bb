"""Latest-value progress tracking for running scans."""

from keyguard.core.exceptions import PersistenceError
from keyguard.core.interfaces import IScanStore
from keyguard.core.logging import get_logger
from keyguard.models import ProgressSnapshot


class ProgressReporter:
    """Writes the latest progress snapshot for each scan.

    Progress is advisory: storage failures are logged and dropped, and a
    percent lower than the last one reported for a scan is raised to it.
    """

    def __init__(self, store: IScanStore) -> None:
        self.logger = get_logger("progress")
        self._store = store
        self._last_percent: dict[str, int] = {}

    async def update(
        self,
        scan_id: str,
        stage: str,
        percent: int,
        message: str,
    ) -> ProgressSnapshot:
        """Overwrite the snapshot for a scan."""
        percent = max(0, min(100, percent))
        previous = self._last_percent.get(scan_id)
        if previous is not None and percent < previous:
            self.logger.warning(
                "progress_regression_clamped",
                scan_id=scan_id,
                stage=stage,
                percent=percent,
                previous=previous,
            )
            percent = previous
        self._last_percent[scan_id] = percent

        snapshot = ProgressSnapshot(
            scan_id=scan_id,
            stage=stage,
            percent=percent,
            message=message,
        )

        try:
            await self._store.upsert_progress(snapshot)
        except PersistenceError as e:
            self.logger.warning(
                "progress_write_failed",
                scan_id=scan_id,
                stage=stage,
                error=str(e),
            )

        return snapshot

    async def get(self, scan_id: str) -> ProgressSnapshot | None:
        """Latest snapshot for a scan, if any."""
        return await self._store.get_progress(scan_id)

    def forget(self, scan_id: str) -> None:
        """Drop in-memory state for a finished scan."""
        self._last_percent.pop(scan_id, None)
