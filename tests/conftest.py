import pytest
import json
from typing import Any, Dict
from unittest.mock import AsyncMock, MagicMock, Mock

from services.scraper.fetcher import SourcemapFetcher
from services.storage.file_store import LocalFileStore

# =============================================================================
# Mock Fixtures - HTTP
# =============================================================================


def _make_response(status: int = 200, body: Any = b"") -> MagicMock:
    """aiohttp-like response; dict/list bodies are JSON encoded."""
    if isinstance(body, (dict, list)):
        body = json.dumps(body).encode("utf-8")
    elif isinstance(body, str):
        body = body.encode("utf-8")

    response = MagicMock()
    response.status = status
    response.read = AsyncMock(return_value=body)
    return response


@pytest.fixture
def make_response():
    """Factory for aiohttp-like responses."""
    return _make_response


@pytest.fixture
def mock_session():
    """
    Builds a mock aiohttp ClientSession from a {url: response | exception} map.
    Requested URLs are recorded in `session.requested`.
    """

    def _build(routes: Dict[str, Any]) -> MagicMock:
        session = MagicMock()
        session.requested = []

        def _get(url, *args, **kwargs):
            session.requested.append(url)
            value = routes[url]
            if isinstance(value, Exception):
                raise value
            context = MagicMock()
            context.__aenter__ = AsyncMock(return_value=value)
            context.__aexit__ = AsyncMock(return_value=False)
            return context

        session.get = Mock(side_effect=_get)
        session.__aenter__ = AsyncMock(return_value=session)
        session.__aexit__ = AsyncMock(return_value=False)
        return session

    return _build


# =============================================================================
# Component Fixtures
# =============================================================================


@pytest.fixture
def fetcher() -> SourcemapFetcher:
    return SourcemapFetcher(host="spaces.test", sandbox_key="beta")


@pytest.fixture
def mirror_root(tmp_path):
    root = tmp_path / "mirror"
    root.mkdir()
    return root


@pytest.fixture
def store(mirror_root) -> LocalFileStore:
    return LocalFileStore(str(mirror_root))


# =============================================================================
# Sample Data Fixtures
# =============================================================================


@pytest.fixture
def sample_sourcemap() -> Dict[str, Any]:
    return {
        "version": 3,
        "file": "app.min.js",
        "mappings": "AAAA",
        "sources": ["webpack:///src/app.js"],
        "sourcesContent": ["const x=1;"],
    }


@pytest.fixture
def multi_file_sourcemap() -> Dict[str, Any]:
    return {
        "version": 3,
        "sources": [
            "webpack:///src/app.js",
            "webpack:///src/utils/format.js",
            "webpack:///webpack/bootstrap",
            "webpack:///src/empty.js",
        ],
        "sourcesContent": [
            "import { format } from './utils/format';\n",
            "export const format = (v) => `${v}`;\r\n",
            None,
            "",
        ],
    }
