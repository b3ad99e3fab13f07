import json
import aiohttp
from typing import List, Optional

from core.config import settings
from core.exceptions import FormatException, MirrorException, StorageException
from core.logger import get_logger
from models.report import RevisionsOutcome
from services.scraper.fetcher import SourcemapFetcher
from services.storage.file_store import LocalFileStore

logger = get_logger(__name__)


class RevisionsService:
    """
    Keeps revisions.json, the sorted list of every js/css bundle path the
    host knows about, up to date.

    A failure here is reported on its own and never stops the sourcemap sync.
    """

    def __init__(
        self,
        fetcher: SourcemapFetcher,
        output_path: Optional[str] = None,
        store: Optional[LocalFileStore] = None,
    ):
        self.fetcher = fetcher
        self.output_path = output_path or settings.REVISIONS_FILE
        self.store = store or LocalFileStore()

    @staticmethod
    def extract_paths(manifest) -> List[str]:
        if not isinstance(manifest, dict):
            raise FormatException("Invalid revisions format")

        paths = []
        for section in ("js", "css"):
            entries = manifest.get(section)
            if not isinstance(entries, dict):
                raise FormatException("Invalid revisions format", {"section": section})
            paths.extend(entries.keys())
        return sorted(paths)

    async def refresh(self, session: aiohttp.ClientSession) -> RevisionsOutcome:
        url = self.fetcher.revisions_url()
        try:
            manifest = await self.fetcher.fetch_json(session, url)
            paths = self.extract_paths(manifest)
            await self._write(paths)
        except StorageException as e:
            logger.warning(f"[REVISIONS] Can't write {self.output_path}: {e.describe()}")
            return RevisionsOutcome(success=False, error=str(e))
        except MirrorException as e:
            logger.warning(f"[REVISIONS] Can't download revisions.json: {e.describe()}")
            return RevisionsOutcome(success=False, error=str(e))

        logger.info(f"[REVISIONS] Saved {len(paths)} paths to {self.output_path}")
        return RevisionsOutcome(success=True, paths=paths)

    async def _write(self, paths: List[str]) -> None:
        await self.store.write_text(self.output_path, json.dumps(paths, indent=2, ensure_ascii=False))
