"""Selects the process-wide contract share from settings."""

from backoffice.config import get_settings
from backoffice.contracts.port import ContractShare

_share_instance: ContractShare | None = None


def get_contract_share() -> ContractShare:
    """Return the configured contract share (singleton).

    Uses FakeContractShare by default. Set CONTRACT_SHARE=local to keep
    files in CONTRACT_DIR.
    """
    global _share_instance
    if _share_instance is None:
        settings = get_settings()
        if settings.contract_share == "fake":
            from backoffice.contracts.fake_adapter import FakeContractShare

            _share_instance = FakeContractShare()
        elif settings.contract_share == "local":
            from backoffice.contracts.local_adapter import LocalContractShare

            _share_instance = LocalContractShare(settings.contract_dir)
        else:
            raise ValueError(f"Unknown contract share: {settings.contract_share}")
    return _share_instance


def set_contract_share(share: ContractShare) -> None:
    global _share_instance
    _share_instance = share


def reset_contract_share() -> None:
    """Reset the contract share singleton (useful for testing)."""
    global _share_instance
    _share_instance = None
