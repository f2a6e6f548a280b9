# file: errors.py
"""Error types raised by the contracts, the ledger and the helpers around them."""


class BrokersError(Exception):
    """Base exception for the brokers package."""
    pass


class ContractRevert(BrokersError):
    """A contract call reverted. The ledger rolls back every state change of the transaction."""

    def __init__(self, revert_message: str):
        super().__init__(revert_message)
        self.revert_message = revert_message


class NotOwnerError(ContractRevert):
    """Caller (or the named `from` address) does not own the token."""
    pass


class NotApprovedError(ContractRevert):
    """Transfer attempted without approval from the token owner."""
    pass


class AccessDeniedError(ContractRevert):
    """Owner-gated method called by somebody else."""
    pass


class UnknownTokenError(ContractRevert):
    """Token id was never minted, or the token contract does not exist."""
    pass


class UnknownListingError(ContractRevert):
    pass


class InvalidAddressError(ContractRevert):
    pass


class AlreadyRegisteredError(ContractRevert):
    """Address is already in the inspector registry."""
    pass


class LedgerError(BrokersError):
    """Misuse of the ledger itself (unknown address, no active transaction)."""
    pass


class MetadataUploadError(BrokersError):
    """Publishing metadata to IPFS failed."""
    pass
