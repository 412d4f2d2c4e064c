"""Contract share kept as files in one local directory."""

import asyncio
from datetime import UTC, datetime
from pathlib import Path

import structlog
from protean.exceptions import ObjectNotFoundError

from backoffice.contracts.port import MAX_LISTED, ContractFile, ContractShare, check_share_name, share_name_for

logger = structlog.get_logger(__name__)


class LocalContractShare(ContractShare):
    def __init__(self, directory: str | Path):
        self.directory = Path(directory).resolve()

    def _path(self, name: str) -> Path:
        return self.directory / check_share_name(name)

    def _write(self, content: bytes, name: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self._path(name).write_bytes(content)

    def _list(self, max_files: int) -> list[ContractFile]:
        if not self.directory.is_dir():
            return []
        files = []
        for path in sorted(p for p in self.directory.iterdir() if p.is_file()):
            stat = path.stat()
            files.append(
                ContractFile(
                    name=path.name,
                    size=stat.st_size,
                    last_modified=datetime.fromtimestamp(stat.st_mtime, UTC),
                )
            )
            if len(files) >= max_files:
                break
        return files

    def _read(self, name: str) -> bytes:
        path = self._path(name)
        if not path.is_file():
            raise ObjectNotFoundError(f"Contract file {name} not found")
        return path.read_bytes()

    def _unlink(self, name: str) -> bool:
        path = self._path(name)
        if not path.is_file():
            return False
        path.unlink()
        return True

    async def upload(self, content: bytes, file_name: str, logical_name: str | None = None) -> str:
        name = share_name_for(file_name, logical_name)
        await asyncio.to_thread(self._write, content, name)
        logger.info("Contract file written", name=name, size=len(content))
        return name

    async def list_files(self, max_files: int = MAX_LISTED) -> list[ContractFile]:
        return await asyncio.to_thread(self._list, max_files)

    async def download(self, name: str) -> bytes:
        return await asyncio.to_thread(self._read, name)

    async def delete(self, name: str) -> bool:
        removed = await asyncio.to_thread(self._unlink, name)
        logger.info("Contract file removed", name=name, removed=removed)
        return removed
