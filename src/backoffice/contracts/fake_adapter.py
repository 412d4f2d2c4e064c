"""Dict-backed contract share for tests and local runs."""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError

from backoffice.contracts.port import MAX_LISTED, ContractFile, ContractShare, check_share_name, share_name_for


class ShareUnavailable(Exception):
    pass


class FakeContractShare(ContractShare):
    def __init__(self):
        self.files: dict[str, tuple[bytes, datetime]] = {}
        self.should_succeed = True
        self.failure_reason = "File share unavailable"

    def configure(self, should_succeed: bool = True, failure_reason: str = "File share unavailable"):
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def _check_available(self) -> None:
        if not self.should_succeed:
            raise ShareUnavailable(self.failure_reason)

    async def upload(self, content: bytes, file_name: str, logical_name: str | None = None) -> str:
        self._check_available()
        name = share_name_for(file_name, logical_name)
        self.files[name] = (content, datetime.now(UTC))
        return name

    async def list_files(self, max_files: int = MAX_LISTED) -> list[ContractFile]:
        self._check_available()
        return [
            ContractFile(name=name, size=len(content), last_modified=modified)
            for name, (content, modified) in sorted(self.files.items())
        ][:max_files]

    async def download(self, name: str) -> bytes:
        self._check_available()
        check_share_name(name)
        if name not in self.files:
            raise ObjectNotFoundError(f"Contract file {name} not found")
        return self.files[name][0]

    async def delete(self, name: str) -> bool:
        self._check_available()
        check_share_name(name)
        return self.files.pop(name, None) is not None
