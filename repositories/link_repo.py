import json
from typing import List, Optional

from core.exceptions import ConfigurationException
from core.logger import get_logger
from core.utils import dedupe
from services.scraper.fetcher import SourcemapFetcher

logger = get_logger(__name__)


class LinkRepository:
    """
    Repository for the list of sourcemap targets.
    Targets are path fragments such as "/js/app.min.js", read from a JSON array.
    """

    def __init__(self, path: str, fetcher: Optional[SourcemapFetcher] = None):
        self.path = path
        self.fetcher = fetcher or SourcemapFetcher()

    def load_links(self) -> List[str]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            raise ConfigurationException(f"Links file not found: {self.path}")
        except (OSError, ValueError) as e:
            raise ConfigurationException(
                f"Cannot read links file {self.path}", {"error": str(e)}
            )

        if not isinstance(data, list):
            raise ConfigurationException(f"Links file {self.path} must contain a JSON array")

        invalid = [item for item in data if not isinstance(item, str) or not item]
        if invalid:
            raise ConfigurationException(
                f"Links file {self.path} contains non-string entries",
                {"examples": invalid[:3]},
            )

        links = dedupe(data)
        if len(links) != len(data):
            logger.warning(f"[LINKS] Ignored {len(data) - len(links)} duplicate links")

        logger.debug(f"[LINKS] Loaded {len(links)} links from {self.path}")
        return links

    def build_urls(self, links: List[str]) -> List[str]:
        """Expands path fragments into sourcemap URLs on the configured host."""
        return [self.fetcher.build_url(link) for link in links]
