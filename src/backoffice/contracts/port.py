"""Interface for the contract file share.

Contracts are plain files in one flat share, addressed by their share name.
Uploads get a fresh name built from a logical name, so two uploads of
``lease.pdf`` never overwrite each other.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from pathlib import PurePosixPath
from uuid import uuid4

from protean.exceptions import ValidationError

DEFAULT_BASE_NAME = "contract"
MAX_LISTED = 500


@dataclass(frozen=True)
class ContractFile:
    name: str
    size: int
    last_modified: datetime | None = None


def share_name_for(file_name: str, logical_name: str | None = None) -> str:
    """``<base>_<32 hex><extension>``, where base is the logical name or the uploaded file's stem."""
    upload = PurePosixPath(file_name.replace("\\", "/"))
    base = logical_name.strip() if logical_name and logical_name.strip() else upload.stem
    check_share_name(base or DEFAULT_BASE_NAME, field="display_name")
    return f"{base or DEFAULT_BASE_NAME}_{uuid4().hex}{upload.suffix}"


def check_share_name(name: str, field: str = "name") -> str:
    """Reject blank names and anything that could leave the share's directory."""
    if not name or not name.strip():
        raise ValidationError({field: ["A file name is required"]})
    if "/" in name or "\\" in name or name in (".", ".."):
        raise ValidationError({field: [f"Invalid file name: {name!r}"]})
    return name


class ContractShare(ABC):
    """Abstract interface for contract share adapters."""

    @abstractmethod
    async def upload(self, content: bytes, file_name: str, logical_name: str | None = None) -> str:
        """Store ``content`` under a fresh share name and return that name."""
        ...

    @abstractmethod
    async def list_files(self, max_files: int = MAX_LISTED) -> list[ContractFile]:
        """Files in the share, by name, at most ``max_files`` of them."""
        ...

    @abstractmethod
    async def download(self, name: str) -> bytes:
        """Return the file's content.

        Raises:
            ObjectNotFoundError: when no file has that name.
        """
        ...

    @abstractmethod
    async def delete(self, name: str) -> bool:
        """Remove the file. Returns False when it did not exist."""
        ...
