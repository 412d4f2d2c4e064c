"""Contract file workflows: upload, listing, download and removal."""

import structlog
from protean.exceptions import ValidationError

from backoffice.contracts import get_contract_share
from backoffice.contracts.port import MAX_LISTED, ContractFile, ContractShare, check_share_name
from backoffice.events.contracts import ContractDeleted, ContractUploaded
from backoffice.events.dispatch import publish_event

logger = structlog.get_logger(__name__)


async def upload_contract(
    content: bytes,
    file_name: str,
    display_name: str | None = None,
    share: ContractShare | None = None,
) -> str:
    """Store a contract and announce it. Returns the name it was stored under.

    ``display_name``, when given, replaces the uploaded file's stem in the
    stored name; the extension always comes from ``file_name``.
    """
    if not content:
        raise ValidationError({"file": ["Please choose a file."]})
    share = share or get_contract_share()

    name = await share.upload(content, file_name, display_name)
    logger.info("Contract uploaded", name=name, size=len(content))
    await publish_event(ContractUploaded(file_name=name))
    return name


async def list_contracts(max_files: int = MAX_LISTED, share: ContractShare | None = None) -> list[ContractFile]:
    share = share or get_contract_share()
    return await share.list_files(max_files)


async def download_contract(name: str, share: ContractShare | None = None) -> bytes:
    share = share or get_contract_share()
    return await share.download(check_share_name(name))


async def delete_contract(name: str, share: ContractShare | None = None) -> bool:
    """Remove a contract. Announced only when a file was actually removed."""
    share = share or get_contract_share()
    removed = await share.delete(check_share_name(name))
    if removed:
        logger.info("Contract deleted", name=name)
        await publish_event(ContractDeleted(file_name=name))
    return removed
