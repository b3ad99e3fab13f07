"""
SourceExtractor component: reconciles the sources embedded in a sourcemap
with the local mirror.
"""
import aiohttp
from typing import List, Optional

from core.exceptions import MirrorException
from core.logger import get_logger
from core.utils import strip_source_scheme
from models.sourcemap import ExtractionOutcome, FileOutcome, SourcemapDocument
from services.components.hash_calculator import HashCalculator
from services.scraper.fetcher import SourcemapFetcher
from services.storage.file_store import LocalFileStore

logger = get_logger(__name__)


class SourceExtractor:
    """
    Writes new and changed sources into the mirror and classifies each file.

    Content hashes are the only change signal: cache metadata of the remote
    host is not stable per source entry.
    """

    def __init__(
        self,
        store: LocalFileStore,
        fetcher: Optional[SourcemapFetcher] = None,
        hasher: Optional[HashCalculator] = None,
    ):
        self.store = store
        self.fetcher = fetcher or SourcemapFetcher()
        self.hasher = hasher or HashCalculator()

    async def extract(self, document: SourcemapDocument) -> List[FileOutcome]:
        """
        Reconciles every embedded source of a sourcemap with the mirror.

        Entries without content produce no outcome. Entries whose path would
        leave the mirror root are skipped.

        Args:
            document: Decoded sourcemap

        Returns:
            One FileOutcome per written or verified file, in sourcemap order
        """
        files: List[FileOutcome] = []

        for source, content in document.embedded_sources():
            local_path = self.store.resolve(strip_source_scheme(source))
            if local_path is None:
                logger.warning(f"[EXTRACTOR] Skipping source outside mirror root: {source}")
                continue

            files.append(await self._reconcile(local_path, content))

        return files

    async def _reconcile(self, local_path: str, content: str) -> FileOutcome:
        new_hash = self.hasher.calculate_hash(content)

        async with self.store.lock(local_path):
            previous_modified = None

            if await self.store.exists(local_path):
                existing = await self.store.read_text(local_path)
                if self.hasher.calculate_hash(existing) == new_hash:
                    return FileOutcome(path=local_path, is_changed=False)
                # Must be captured before the write below
                previous_modified = await self.store.modified_time(local_path)

            await self.store.write_text(local_path, content)

        logger.debug(
            f"[EXTRACTOR] {'Updated' if previous_modified else 'Created'} {local_path}"
        )
        return FileOutcome(
            path=local_path, is_changed=True, previous_modified=previous_modified
        )

    async def process(self, session: aiohttp.ClientSession, url: str) -> ExtractionOutcome:
        """
        Fetches one sourcemap and extracts it. Never raises: every failure
        becomes an unsuccessful outcome carrying the error message.
        """
        try:
            document = await self.fetcher.fetch(session, url)
            files = await self.extract(document)
        except MirrorException as e:
            logger.warning(f"[EXTRACTOR] {url} failed: {e.describe()}")
            return ExtractionOutcome.failure(url, str(e))
        except Exception as e:
            logger.error(f"[EXTRACTOR] Unexpected error for {url}: {e}", exc_info=True)
            return ExtractionOutcome.failure(url, str(e) or type(e).__name__)

        changed = sum(1 for f in files if f.is_changed)
        logger.debug(f"[EXTRACTOR] {url}: {len(files)} files, {changed} changed")
        return ExtractionOutcome(url=url, success=True, files=files)
