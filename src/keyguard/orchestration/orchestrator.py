"""Scan orchestrator: job state machine and background pipeline."""

import asyncio
from collections.abc import Sequence
from datetime import datetime

from keyguard.ai.fallback import fallback_report, no_findings_report
from keyguard.core.config import get_settings
from keyguard.core.exceptions import (
    FetchError,
    ParseError,
    PersistenceError,
    RecommendationError,
    UrlError,
)
from keyguard.core.interfaces import IRecommender, IScanStore
from keyguard.core.logging import get_logger
from keyguard.models import (
    TOTAL_CHECKS,
    Finding,
    ResourceKind,
    ResourceReference,
    ScanJob,
    ScanStatus,
    ScanTarget,
)
from keyguard.orchestration.progress import ProgressReporter
from keyguard.orchestration.summary import summarize
from keyguard.scanners.detector import Detector
from keyguard.scanners.fetcher import ContentFetcher, extract_references, parse, resolve

PRIMARY_LOCATION = "HTML"


class Stage:
    """Pipeline stages as (label, percent)."""

    FETCH = ("fetch", 10)
    HTML = ("html", 30)
    SCRIPTS = ("scripts", 50)
    STYLESHEETS = ("stylesheets", 70)
    RECOMMENDATION = ("recommendation", 90)
    DONE = ("done", 100)


class ScanOrchestrator:
    """Runs one background pipeline per scan and owns each job's state.

    ``start`` persists a new job and returns immediately; the pipeline runs
    as an ``asyncio.Task`` keyed by scan id. The terminal write is the only
    write of the job's result fields.
    """

    def __init__(
        self,
        store: IScanStore,
        recommender: IRecommender | None = None,
        detector: Detector | None = None,
        max_concurrent_scans: int | None = None,
        max_concurrent_fetches: int | None = None,
        http_timeout: float | None = None,
    ) -> None:
        settings = get_settings()
        self.logger = get_logger("orchestrator")
        self.store = store
        self.recommender = recommender
        self.detector = detector or Detector()
        self.progress = ProgressReporter(store)
        self._http_timeout = http_timeout
        self._max_fetches = max_concurrent_fetches or settings.max_concurrent_fetches
        self._scan_slots = asyncio.Semaphore(
            max_concurrent_scans or settings.max_concurrent_scans
        )
        self._tasks: dict[str, asyncio.Task[None]] = {}

    async def start(self, url: str, owner_id: str | None = None) -> ScanJob:
        """Persist a new scan and launch its pipeline in the background.

        Raises ``PersistenceError`` if the initial job cannot be stored;
        in that case no pipeline is started.
        """
        target = ScanTarget(url=url, owner_id=owner_id)
        job = ScanJob(url=target.url, owner_id=target.owner_id)

        await self.store.create_or_replace(job)

        self.logger.info(
            "scan_started",
            scan_id=job.id,
            url=job.url,
            owner_id=job.owner_id,
        )

        task = asyncio.create_task(self._run(job), name=f"scan-{job.id}")
        self._tasks[job.id] = task
        task.add_done_callback(lambda _: self._tasks.pop(job.id, None))

        return job

    async def wait(self, scan_id: str) -> None:
        """Wait for a launched pipeline to finish, if it is still running."""
        task = self._tasks.get(scan_id)
        if task is not None:
            await asyncio.shield(task)

    async def wait_all(self) -> None:
        """Wait for every running pipeline."""
        tasks = list(self._tasks.values())
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def run(self, url: str, owner_id: str | None = None) -> ScanJob:
        """Start a scan and wait for its terminal state."""
        job = await self.start(url, owner_id)
        await self.wait(job.id)
        final = await self.store.get(job.id)
        return final or job

    def is_running(self, scan_id: str) -> bool:
        return scan_id in self._tasks

    async def _run(self, job: ScanJob) -> None:
        """Background entry point; never lets an exception escape."""
        async with self._scan_slots:
            try:
                await self._pipeline(job)
            except PersistenceError as e:
                self.logger.error(
                    "scan_persistence_failed",
                    scan_id=job.id,
                    error=str(e),
                )
            except Exception as e:
                self.logger.exception("scan_crashed", scan_id=job.id, error=str(e))
                try:
                    stored = await self.store.get(job.id)
                    if stored is None or not stored.is_terminal:
                        await self._fail(job, f"Internal error: {e}", reached=0)
                except PersistenceError as write_error:
                    self.logger.error(
                        "scan_persistence_failed",
                        scan_id=job.id,
                        error=str(write_error),
                    )
            finally:
                self.progress.forget(job.id)

    async def _pipeline(self, job: ScanJob) -> None:
        reached = 0

        async with ContentFetcher(timeout=self._http_timeout) as fetcher:
            # 1. Primary document
            stage, reached = Stage.FETCH
            await self.progress.update(job.id, stage, reached, "Fetching website content")
            try:
                html = await fetcher.fetch(job.url)
            except FetchError as e:
                self.logger.warning("primary_fetch_failed", scan_id=job.id, url=job.url, error=str(e))
                await self._fail(job, str(e), reached)
                return

            # 2. Parse and scan the document itself
            stage, reached = Stage.HTML
            await self.progress.update(job.id, stage, reached, "Analyzing HTML content")
            try:
                document = parse(html)
                references = extract_references(document)
            except ParseError as e:
                self.logger.warning("primary_parse_failed", scan_id=job.id, error=str(e))
                await self._fail(job, str(e), reached)
                return

            findings = self.detector.detect(html, PRIMARY_LOCATION)

            scripts = [r for r in references if r.kind is not ResourceKind.STYLESHEET_HREF]
            stylesheets = [r for r in references if r.kind is ResourceKind.STYLESHEET_HREF]

            self.logger.info(
                "references_extracted",
                scan_id=job.id,
                scripts=len(scripts),
                stylesheets=len(stylesheets),
            )

            # 3. Scripts, external and inline, in document order
            stage, reached = Stage.SCRIPTS
            await self.progress.update(job.id, stage, reached, "Scanning JavaScript files")
            findings.extend(await self._scan_resources(fetcher, job, scripts))

            # 4. Stylesheets
            stage, reached = Stage.STYLESHEETS
            await self.progress.update(job.id, stage, reached, "Scanning CSS files")
            findings.extend(await self._scan_resources(fetcher, job, stylesheets))

        # 5. Summary and remediation text
        summary = summarize(findings)

        stage, reached = Stage.RECOMMENDATION
        await self.progress.update(job.id, stage, reached, "Generating recommendations")
        recommendation = await self._recommend(job, findings)

        # 6. Terminal write
        start_time = await self._original_start_time(job)
        final = job.model_copy(
            update={
                "status": ScanStatus.COMPLETED,
                "start_time": start_time,
                "end_time": datetime.utcnow(),
                "findings": findings,
                "summary": summary,
                "recommendation": recommendation,
                "completed_checks": TOTAL_CHECKS,
            }
        )
        await self.store.create_or_replace(final)

        stage, reached = Stage.DONE
        await self.progress.update(job.id, stage, reached, "Scan completed")

        self.logger.info(
            "scan_completed",
            scan_id=job.id,
            url=job.url,
            findings=summary.total,
            critical=summary.critical,
            high=summary.high,
            duration=final.duration_seconds,
        )

    async def _scan_resources(
        self,
        fetcher: ContentFetcher,
        job: ScanJob,
        references: Sequence[ResourceReference],
    ) -> list[Finding]:
        """Fetch and scan resources; results keep the order of ``references``.

        A resource that cannot be resolved or fetched contributes nothing.
        """
        semaphore = asyncio.Semaphore(self._max_fetches)

        async def scan_one(reference: ResourceReference) -> list[Finding]:
            if not reference.is_external:
                return self.detector.detect(reference.value, reference.location)

            async with semaphore:
                try:
                    url = resolve(job.url, reference.value)
                    content = await fetcher.fetch(url)
                except (UrlError, FetchError) as e:
                    self.logger.warning(
                        "resource_skipped",
                        scan_id=job.id,
                        kind=reference.kind.value,
                        reference=reference.value,
                        error=str(e),
                    )
                    return []

            return self.detector.detect(content, reference.location)

        results = await asyncio.gather(*(scan_one(r) for r in references))
        return [finding for result in results for finding in result]

    async def _recommend(self, job: ScanJob, findings: Sequence[Finding]) -> str:
        if not findings:
            return no_findings_report(job.url)

        if self.recommender is None:
            return fallback_report(findings, job.url)

        try:
            return await self.recommender.recommend(findings, job.url)
        except RecommendationError as e:
            self.logger.warning(
                "recommendation_fallback",
                scan_id=job.id,
                provider=e.provider or self.recommender.name,
                error=str(e),
            )
            return fallback_report(findings, job.url)

    async def _original_start_time(self, job: ScanJob) -> datetime:
        stored = await self.store.get(job.id)
        return stored.start_time if stored else job.start_time

    async def _fail(self, job: ScanJob, reason: str, reached: int) -> None:
        """Terminal write for a failed scan: no findings, no recommendation."""
        failed = job.model_copy(
            update={
                "status": ScanStatus.FAILED,
                "end_time": datetime.utcnow(),
                "findings": [],
                "recommendation": None,
                "completed_checks": reached,
                "error": reason,
            }
        )
        await self.store.create_or_replace(failed)
        await self.progress.update(job.id, "failed", reached, f"Scan failed: {reason}")

        self.logger.error("scan_failed", scan_id=job.id, url=job.url, error=reason)
