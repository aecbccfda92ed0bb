"""Tests for progress reporting."""

from keyguard.core.exceptions import PersistenceError
from keyguard.database.store import MemoryScanStore
from keyguard.orchestration.progress import ProgressReporter


class FailingProgressStore(MemoryScanStore):
    async def upsert_progress(self, snapshot):
        raise PersistenceError("disk full")


async def test_latest_snapshot_wins(memory_store: MemoryScanStore):
    reporter = ProgressReporter(memory_store)

    await reporter.update("scan-1", "fetch", 10, "Fetching website content")
    await reporter.update("scan-1", "html", 30, "Analyzing HTML content")

    snapshot = await reporter.get("scan-1")
    assert snapshot is not None
    assert snapshot.stage == "html"
    assert snapshot.percent == 30
    assert snapshot.message == "Analyzing HTML content"


async def test_unknown_scan(memory_store: MemoryScanStore):
    reporter = ProgressReporter(memory_store)
    assert await reporter.get("missing") is None


async def test_percent_never_decreases(memory_store: MemoryScanStore):
    reporter = ProgressReporter(memory_store)

    await reporter.update("scan-1", "stylesheets", 70, "Scanning CSS files")
    snapshot = await reporter.update("scan-1", "failed", 10, "Scan failed")

    assert snapshot.percent == 70
    assert snapshot.stage == "failed"
    assert (await memory_store.get_progress("scan-1")).percent == 70


async def test_percent_is_clamped_to_range(memory_store: MemoryScanStore):
    reporter = ProgressReporter(memory_store)

    assert (await reporter.update("scan-1", "x", 150, "over")).percent == 100
    assert (await reporter.update("scan-2", "x", -5, "under")).percent == 0


async def test_scans_are_independent(memory_store: MemoryScanStore):
    reporter = ProgressReporter(memory_store)

    await reporter.update("scan-1", "done", 100, "Scan completed")
    snapshot = await reporter.update("scan-2", "fetch", 10, "Fetching website content")

    assert snapshot.percent == 10


async def test_forget_resets_floor(memory_store: MemoryScanStore):
    reporter = ProgressReporter(memory_store)

    await reporter.update("scan-1", "done", 100, "Scan completed")
    reporter.forget("scan-1")
    snapshot = await reporter.update("scan-1", "fetch", 10, "Fetching website content")

    assert snapshot.percent == 10


async def test_storage_failure_is_swallowed():
    reporter = ProgressReporter(FailingProgressStore())

    snapshot = await reporter.update("scan-1", "fetch", 10, "Fetching website content")

    assert snapshot.percent == 10
