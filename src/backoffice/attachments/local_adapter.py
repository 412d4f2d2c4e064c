"""Local directory attachment store.

Objects are written as files under one directory and addressed by
``file://`` URIs. Removal only ever touches files directly inside that
directory, whatever path the locator names.
"""

import asyncio
from pathlib import Path
from urllib.parse import unquote, urlparse
from uuid import uuid4

import structlog

from backoffice.attachments.port import AttachmentStore

logger = structlog.get_logger(__name__)


class LocalDirectoryStore(AttachmentStore):
    def __init__(self, directory: str | Path):
        self.directory = Path(directory).resolve()

    def _path_for(self, locator: str) -> Path:
        name = Path(unquote(urlparse(locator).path)).name
        return self.directory / name

    def _write(self, content: bytes, suggested_name: str) -> str:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / f"{uuid4()}{Path(suggested_name).suffix}"
        path.write_bytes(content)
        return path.as_uri()

    def _unlink(self, locator: str) -> bool:
        path = self._path_for(locator)
        if not path.is_file():
            return False
        path.unlink()
        return True

    async def store(self, content: bytes, suggested_name: str) -> str:
        locator = await asyncio.to_thread(self._write, content, suggested_name)
        logger.info("Attachment stored", locator=locator, size=len(content))
        return locator

    async def remove(self, locator: str) -> bool:
        removed = await asyncio.to_thread(self._unlink, locator)
        logger.info("Attachment removed", locator=locator, removed=removed)
        return removed
