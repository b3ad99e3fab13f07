"""
LocalFileStore: filesystem access for the mirrored source tree.

All blocking calls run in the default executor so that every filesystem
operation is a suspension point for the event loop.
"""
import asyncio
import os
import tempfile
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Dict, Optional

from core.exceptions import StorageException
from core.logger import get_logger
from core.utils import from_timestamp, normalize_relative_path

logger = get_logger(__name__)


class LocalFileStore:
    """
    Reads and writes files of the local mirror.

    Writes are atomic: content goes to a temporary file next to the target
    and is moved into place with os.replace.
    """

    def __init__(self, root: str = "."):
        self.root = root
        self._locks: Dict[str, asyncio.Lock] = {}

    def resolve(self, relative_path: str) -> Optional[str]:
        """
        Maps a source-relative path to its path inside the mirror.

        Returns None when the path is empty or escapes the mirror root.
        """
        normalized = normalize_relative_path(relative_path)
        if normalized is None:
            return None
        return os.path.join(self.root, *normalized.split("/"))

    @asynccontextmanager
    async def lock(self, path: str):
        """Serializes read-compare-write sequences on one path."""
        lock = self._locks.get(path)
        if lock is None:
            lock = self._locks[path] = asyncio.Lock()
        async with lock:
            yield

    async def _run(self, func, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func, *args)

    async def exists(self, path: str) -> bool:
        try:
            return await self._run(os.path.isfile, path)
        except (OSError, ValueError):
            return False

    async def read_text(self, path: str) -> str:
        try:
            return await self._run(self._read_sync, path)
        except (OSError, UnicodeDecodeError) as e:
            raise StorageException(
                f"Cannot read {path}: {e}", {"path": path, "error": type(e).__name__}
            )

    async def modified_time(self, path: str) -> datetime:
        try:
            stat = await self._run(os.stat, path)
        except OSError as e:
            raise StorageException(f"Cannot stat {path}: {e}", {"path": path})
        return from_timestamp(stat.st_mtime)

    async def write_text(self, path: str, content: str) -> None:
        try:
            await self._run(self._write_sync, path, content)
        except OSError as e:
            raise StorageException(
                f"Cannot write {path}: {e}", {"path": path, "error": type(e).__name__}
            )
        logger.debug(f"[FILE_STORE] Wrote {path} ({len(content)} chars)")

    @staticmethod
    def _read_sync(path: str) -> str:
        # newline="" keeps line endings byte-exact for hashing
        with open(path, "r", encoding="utf-8", newline="") as f:
            return f.read()

    @staticmethod
    def _write_sync(path: str, content: str) -> None:
        directory = os.path.dirname(path) or "."
        os.makedirs(directory, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".tmp-", suffix=".part")
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(content)
            # mkstemp creates 0600 files
            os.chmod(tmp_path, 0o644)
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
