import aiohttp
from typing import List, Optional

from core.config import settings
from core.logger import get_logger
from core.performance import get_performance_monitor
from models.report import ChangeReport, RevisionsOutcome, SyncResult
from models.sourcemap import ExtractionOutcome
from repositories.link_repo import LinkRepository
from services.components.batch_scheduler import run_batches
from services.components.source_extractor import SourceExtractor
from services.report.builder import ChangeReportBuilder
from services.revisions_service import RevisionsService
from services.scraper.fetcher import SourcemapFetcher
from services.storage.file_store import LocalFileStore

logger = get_logger(__name__)


class SyncService:
    """
    One mirror run: refresh revisions.json, extract every sourcemap listed in
    links.json into the mirror, then write the change report.
    """

    def __init__(
        self,
        links_file: Optional[str] = None,
        mirror_root: Optional[str] = None,
        concurrency: Optional[int] = None,
        skip_revisions: bool = False,
        dry_run: bool = False,
        fetcher: Optional[SourcemapFetcher] = None,
    ):
        self.concurrency = concurrency or settings.CONCURRENCY
        self.skip_revisions = skip_revisions
        self.dry_run = dry_run

        self.fetcher = fetcher or SourcemapFetcher()
        self.links = LinkRepository(links_file or settings.LINKS_FILE, fetcher=self.fetcher)
        self.store = LocalFileStore(mirror_root or settings.MIRROR_ROOT)
        self.extractor = SourceExtractor(self.store, fetcher=self.fetcher)
        self.revisions = RevisionsService(self.fetcher, store=self.store)
        self.reporter = ChangeReportBuilder()

        self.commit_message_file = settings.COMMIT_MESSAGE_FILE
        self.telegram_message_file = settings.TELEGRAM_MESSAGE_FILE

    async def run(self) -> SyncResult:
        urls = self.links.build_urls(self.links.load_links())
        monitor = get_performance_monitor()

        session = await self.fetcher.create_session(self.concurrency)
        async with session:
            revisions = await self.refresh_revisions(session)

            logger.info(
                f"Starting download sourcemaps ({len(urls)} links, concurrency: {self.concurrency})"
            )
            with monitor.measure("sourcemap_sync", {"links": len(urls)}):
                outcomes = await self.process_all(session, urls)

        duration = monitor.last_duration("sourcemap_sync")
        report = self.reporter.build(outcomes)
        logger.info(f"Duration: {duration:.2f}s")

        result = SyncResult(
            outcomes=outcomes, report=report, revisions=revisions, duration=duration
        )

        if report.is_empty:
            logger.info("No files changed. Exiting without commit.")
            return result

        logger.info(
            f"[SYNC] {report.changed_count} changed, {report.failed_count} failed",
            context={"revisions_ok": revisions.success},
        )
        if self.dry_run:
            logger.info("[SYNC] Dry run, report files not written")
            return result

        await self.write_report(report)
        result.persisted = True
        return result

    async def refresh_revisions(self, session: aiohttp.ClientSession) -> RevisionsOutcome:
        if self.skip_revisions:
            return RevisionsOutcome(success=True, skipped=True)
        with get_performance_monitor().measure("revisions_refresh"):
            return await self.revisions.refresh(session)

    async def process_all(self, session: aiohttp.ClientSession, urls: List[str]) -> List[ExtractionOutcome]:
        async def job(url: str) -> ExtractionOutcome:
            return await self.extractor.process(session, url)

        return await run_batches(urls, self.concurrency, job)

    async def write_report(self, report: ChangeReport) -> None:
        await self.store.write_text(self.commit_message_file, report.commit_message)
        await self.store.write_text(self.telegram_message_file, report.notification_message)
        logger.info(
            f"[SYNC] Report written to {self.commit_message_file} and {self.telegram_message_file}"
        )
