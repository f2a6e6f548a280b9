# file: marketplace.py
"""`Marketplace`: takes custody of listed property tokens and keeps the inspector registry.

The deployer is the owner. Only the owner may register inspectors; anybody
holding a token can list it once the marketplace has been approved for it.
"""
import logging
from dataclasses import dataclass

from brokers.config import ZERO_ADDRESS
from brokers.errors import (
    AccessDeniedError,
    AlreadyRegisteredError,
    ContractRevert,
    InvalidAddressError,
    NotApprovedError,
    NotOwnerError,
    UnknownListingError,
    UnknownTokenError,
)
from brokers.ledger import Contract, to_address, transaction

logger = logging.getLogger(__name__)

# ERC-721 surface the marketplace relies on when taking custody
TOKEN_METHODS = ("ownerOf", "getApproved", "isApprovedForAll", "transferFrom")


@dataclass(frozen=True)
class Listing:
    listing_id: int
    token_contract: str
    token_id: int
    price: int
    seller: str


class Marketplace(Contract):

    def __init__(self, ledger, address, nft_address):
        super().__init__(ledger, address)
        self._nft_address = to_address(nft_address)
        self._owner = self.msg_sender
        self._listing_count = 0
        self._listings = {}       # listing_id -> Listing
        self._inspector_count = 0
        self._inspectors = {}     # registration index -> inspector address

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------
    def nftAddress(self) -> str:
        return self._nft_address

    def owner(self) -> str:
        return self._owner

    def listingCount(self) -> int:
        return self._listing_count

    def listings(self, listing_id: int) -> Listing:
        if listing_id not in self._listings:
            raise UnknownListingError(f"Listing {listing_id} does not exist")
        return self._listings[listing_id]

    def inspectorCount(self) -> int:
        return self._inspector_count

    def registeredLandInspectors(self, index: int) -> str:
        return self._inspectors.get(index, ZERO_ADDRESS)

    def isInspector(self, address) -> bool:
        return to_address(address) in self._inspectors.values()

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------
    @transaction
    def list(self, token_id: int, price: int = 0) -> int:
        """List a token of the bound collection."""
        return self._list(self.msg_sender, price, self._nft_address, token_id)

    @transaction
    def ListProperty(self, price: int, token_contract, token_id: int) -> int:
        """List `token_id` of `token_contract` for `price` wei; returns the listing id."""
        return self._list(self.msg_sender, price, to_address(token_contract), token_id)

    @transaction
    def addInspector(self, inspector) -> int:
        if self.msg_sender != self._owner:
            raise AccessDeniedError("Only owner can call this method")

        inspector = to_address(inspector)
        if inspector == ZERO_ADDRESS:
            raise InvalidAddressError("Inspector cannot be the zero address")
        if self.isInspector(inspector):
            raise AlreadyRegisteredError("Inspector already registered")

        self._inspector_count += 1
        index = self._inspector_count
        self._inspectors[index] = inspector
        self.emit("InspectorAdded", index=index, inspector=inspector)

        logger.info("[Marketplace] inspector #%d registered: %s", index, inspector)
        return index

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------
    def _list(self, seller: str, price: int, token_contract: str, token_id: int) -> int:
        if price < 0:
            raise ContractRevert("Price cannot be negative")
        if not self.ledger.is_contract(token_contract):
            raise UnknownTokenError(f"No token contract at {token_contract}")
        nft = self.ledger.at(token_contract)
        if not all(callable(getattr(nft, name, None)) for name in TOKEN_METHODS):
            raise UnknownTokenError(f"Contract at {token_contract} is not a token contract")

        if nft.ownerOf(token_id) != seller:
            raise NotOwnerError("Only the token owner can list it")
        if nft.getApproved(token_id) != self.address and not nft.isApprovedForAll(seller, self.address):
            raise NotApprovedError("Marketplace is not approved for this token")

        nft.transferFrom(seller, self.address, token_id, sender=self)

        self._listing_count += 1
        listing = Listing(
            listing_id=self._listing_count,
            token_contract=token_contract,
            token_id=token_id,
            price=price,
            seller=seller,
        )
        self._listings[listing.listing_id] = listing
        self.emit(
            "Offered",
            listingId=listing.listing_id,
            tokenContract=token_contract,
            tokenId=token_id,
            price=price,
            seller=seller,
        )

        logger.info(
            "[Marketplace] listing #%d: token #%d of %s by %s for %d wei",
            listing.listing_id,
            token_id,
            token_contract,
            seller,
            price,
        )
        return listing.listing_id
