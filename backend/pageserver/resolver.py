"""File resolver: maps a lookup key to an open byte stream under the public directory.

The file is stat'ed and opened before a ``FileStream`` is handed back, so a
missing or unreadable file fails here, before any response header is written.
"""

import errno
import logging
import stat
from pathlib import Path
from typing import AsyncIterator, Optional

import anyio
from anyio import AsyncFile

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024


class AssetNotFoundError(FileNotFoundError):
    """Raised when a lookup key does not name a regular file in the public directory."""

    def __init__(self, key: str):
        super().__init__(errno.ENOENT, "ENOENT: no such file or directory", key)
        self.key = key


class FileStream:
    """An opened file: ``stream`` yields its bytes, ``type`` is its extension.

    ``type`` keeps the leading dot (``".html"``) and is ``""`` for files
    without an extension. The handle is closed once ``stream`` is exhausted
    or ``aclose()`` is called.
    """

    def __init__(self, handle: AsyncFile, type: str, chunk_size: int = DEFAULT_CHUNK_SIZE):
        self._handle = handle
        self._chunk_size = chunk_size
        self.type = type
        self.stream = self._iter_chunks()

    async def _iter_chunks(self) -> AsyncIterator[bytes]:
        try:
            while True:
                chunk = await self._handle.read(self._chunk_size)
                if not chunk:
                    break
                yield chunk
        finally:
            await self._handle.aclose()

    async def aclose(self) -> None:
        await self._handle.aclose()


class FileResolver:
    """Resolves request paths and page names against ``public_dir``."""

    def __init__(self, public_dir: str, chunk_size: int = DEFAULT_CHUNK_SIZE):
        self.public_dir = Path(public_dir).resolve()
        self.chunk_size = chunk_size

    def _full_path(self, key: str) -> Optional[Path]:
        """Join ``key`` under the public directory; None if it escapes it."""
        relative = key.lstrip("/")
        try:
            full = (self.public_dir / relative).resolve()
        except (OSError, ValueError):
            return None
        if not full.is_relative_to(self.public_dir):
            return None
        return full

    async def get_file_stream(self, key: str) -> FileStream:
        full = self._full_path(key)
        if full is None:
            logger.debug(f"Rejected lookup outside public dir: {key!r}")
            raise AssetNotFoundError(key)

        try:
            info = await anyio.Path(full).stat()
        except (FileNotFoundError, NotADirectoryError, ValueError):
            raise AssetNotFoundError(key) from None
        # Directories and special files are not served
        if not stat.S_ISREG(info.st_mode):
            raise AssetNotFoundError(key)

        handle = await anyio.open_file(full, "rb")
        return FileStream(handle, full.suffix, self.chunk_size)
