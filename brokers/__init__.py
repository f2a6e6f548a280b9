from brokers.accounts import Signer, get_signers
from brokers.errors import (
    AccessDeniedError,
    AlreadyRegisteredError,
    ContractRevert,
    InvalidAddressError,
    LedgerError,
    NotApprovedError,
    NotOwnerError,
    UnknownListingError,
    UnknownTokenError,
)
from brokers.ledger import Ledger, Receipt
from brokers.marketplace import Listing, Marketplace
from brokers.property_nft import Property
from brokers.units import from_tokens, tokens

__version__ = "0.1.0"
