import aiohttp
import asyncio
import json
from typing import Any
from pydantic import ValidationError
from core import constants
from core.config import settings
from core.logger import get_logger
from core.exceptions import FormatException, HttpStatusException, TransportException
from core.utils import truncate_text
from models.sourcemap import SourcemapDocument

logger = get_logger(__name__)


class SourcemapFetcher:
    """
    Handles network operations for fetching sourcemaps and the revisions manifest.
    Every request carries the sandbox session cookie. Nothing is retried.
    """
    def __init__(self, host: str = None, sandbox_key: str = None, timeout: int = None):
        self.host = host or settings.HOST
        sandbox_key = settings.SANDBOX_KEY if sandbox_key is None else sandbox_key
        self.timeout = aiohttp.ClientTimeout(
            total=timeout or settings.REQUEST_TIMEOUT,
            connect=constants.DEFAULT_CONNECT_TIMEOUT,
        )
        self.headers = {
            "User-Agent": settings.USER_AGENT,
            "Accept": "application/json,*/*;q=0.8",
            "Accept-Encoding": "gzip, deflate",
        }
        if sandbox_key:
            self.headers["Cookie"] = f"{constants.SANDBOX_COOKIE_NAME}={sandbox_key}"

    def build_url(self, link: str) -> str:
        """`/js/app.min.js` -> `https://{host}/js/app.min.js.map`"""
        return f"https://{self.host}{link}{constants.SOURCEMAP_SUFFIX}"

    def revisions_url(self) -> str:
        return f"https://{self.host}{constants.REVISIONS_PATH}"

    async def create_session(self, concurrency: int = None) -> aiohttp.ClientSession:
        """Creates and returns a new aiohttp session."""
        limit = concurrency or settings.CONCURRENCY
        connector = aiohttp.TCPConnector(limit=limit, limit_per_host=limit)
        return aiohttp.ClientSession(
            timeout=self.timeout,
            connector=connector,
            headers=self.headers,
        )

    async def fetch_json(self, session: aiohttp.ClientSession, url: str) -> Any:
        """
        GETs a URL and decodes the body as JSON.

        Raises:
            HttpStatusException: non-2xx response
            TransportException: connection, DNS or timeout failure
            FormatException: body is not JSON
        """
        try:
            async with session.get(url) as resp:
                if not 200 <= resp.status < 300:
                    raise HttpStatusException(resp.status, {"url": url})
                body = await resp.read()
        except asyncio.TimeoutError:
            raise TransportException("Timeout", {"url": url})
        except aiohttp.ClientError as e:
            raise TransportException(str(e) or type(e).__name__, {"url": url})

        try:
            return json.loads(body)
        except (ValueError, UnicodeDecodeError) as e:
            raise FormatException(
                "Invalid JSON response",
                {"url": url, "error": truncate_text(str(e), 120)},
            )

    async def fetch(self, session: aiohttp.ClientSession, url: str) -> SourcemapDocument:
        """
        Fetches and decodes one sourcemap.

        Raises:
            HttpStatusException, TransportException: see fetch_json
            FormatException: not JSON, or sources/sourcesContent missing or misaligned
        """
        try:
            data = await self.fetch_json(session, url)
        except FormatException as e:
            raise FormatException(constants.INVALID_SOURCEMAP_MESSAGE, e.details)

        if not isinstance(data, dict):
            raise FormatException(constants.INVALID_SOURCEMAP_MESSAGE, {"url": url})

        try:
            return SourcemapDocument.model_validate(data)
        except ValidationError as e:
            raise FormatException(
                constants.INVALID_SOURCEMAP_MESSAGE,
                {"url": url, "errors": e.error_count()},
            )
