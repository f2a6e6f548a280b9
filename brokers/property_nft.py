# file: property_nft.py
"""`Property`: ERC-721 collection where each token is one real-estate listing."""
import logging

from brokers.config import PROPERTY_NAME, PROPERTY_SYMBOL, ZERO_ADDRESS
from brokers.errors import InvalidAddressError, NotApprovedError, NotOwnerError, UnknownTokenError
from brokers.ledger import Contract, to_address, transaction

logger = logging.getLogger(__name__)


class Property(Contract):

    def __init__(self, ledger, address, name=PROPERTY_NAME, symbol=PROPERTY_SYMBOL):
        super().__init__(ledger, address)
        self._name = name
        self._symbol = symbol
        self._token_ids = 0
        self._owners = {}            # token_id -> owner address
        self._balances = {}          # owner address -> count
        self._token_uris = {}        # token_id -> metadata URI
        self._token_approvals = {}   # token_id -> approved spender
        self._operator_approvals = {}  # owner -> {operator: bool}

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------
    def name(self) -> str:
        return self._name

    def symbol(self) -> str:
        return self._symbol

    def totalSupply(self) -> int:
        return self._token_ids

    def balanceOf(self, owner) -> int:
        owner = to_address(owner)
        if owner == ZERO_ADDRESS:
            raise InvalidAddressError("ERC721: address zero is not a valid owner")
        return self._balances.get(owner, 0)

    def ownerOf(self, token_id: int) -> str:
        self._require_minted(token_id)
        return self._owners[token_id]

    def tokenURI(self, token_id: int) -> str:
        self._require_minted(token_id)
        return self._token_uris[token_id]

    def getApproved(self, token_id: int) -> str:
        self._require_minted(token_id)
        return self._token_approvals.get(token_id, ZERO_ADDRESS)

    def isApprovedForAll(self, owner, operator) -> bool:
        return self._operator_approvals.get(to_address(owner), {}).get(to_address(operator), False)

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------
    @transaction
    def mint(self, token_uri: str) -> int:
        """Mint the next token id to the caller with an immutable metadata URI."""
        self._token_ids += 1
        token_id = self._token_ids
        minter = self.msg_sender

        self._owners[token_id] = minter
        self._balances[minter] = self._balances.get(minter, 0) + 1
        self._token_uris[token_id] = token_uri
        self.emit("Transfer", from_=ZERO_ADDRESS, to=minter, tokenId=token_id)

        logger.info("[Property] minted token #%d for %s (%s)", token_id, minter, token_uri)
        return token_id

    @transaction
    def approve(self, to, token_id: int) -> None:
        owner = self.ownerOf(token_id)
        caller = self.msg_sender
        if caller != owner and not self.isApprovedForAll(owner, caller):
            raise NotOwnerError("ERC721: approve caller is not token owner or approved for all")

        spender = to_address(to)
        self._token_approvals[token_id] = spender
        self.emit("Approval", owner=owner, approved=spender, tokenId=token_id)
        logger.info("[Property] %s approved %s for token #%d", caller, spender, token_id)

    @transaction
    def setApprovalForAll(self, operator, approved: bool) -> None:
        owner = self.msg_sender
        operator = to_address(operator)
        if operator == owner:
            raise InvalidAddressError("ERC721: approve to caller")

        self._operator_approvals.setdefault(owner, {})[operator] = bool(approved)
        self.emit("ApprovalForAll", owner=owner, operator=operator, approved=bool(approved))

    @transaction
    def transferFrom(self, from_, to, token_id: int) -> None:
        owner = self.ownerOf(token_id)
        caller = self.msg_sender
        if not self._is_approved_or_owner(caller, token_id):
            raise NotApprovedError("ERC721: caller is not token owner or approved")
        if to_address(from_) != owner:
            raise NotOwnerError("ERC721: transfer from incorrect owner")
        receiver = to_address(to)
        if receiver == ZERO_ADDRESS:
            raise InvalidAddressError("ERC721: transfer to the zero address")

        self._token_approvals.pop(token_id, None)
        self._balances[owner] -= 1
        self._balances[receiver] = self._balances.get(receiver, 0) + 1
        self._owners[token_id] = receiver
        self.emit("Transfer", from_=owner, to=receiver, tokenId=token_id)

        logger.info("[Property] token #%d transferred %s -> %s", token_id, owner, receiver)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------
    def _require_minted(self, token_id) -> None:
        if token_id not in self._owners:
            raise UnknownTokenError("ERC721: invalid token ID")

    def _is_approved_or_owner(self, spender: str, token_id: int) -> bool:
        owner = self._owners[token_id]
        return (
            spender == owner
            or self.isApprovedForAll(owner, spender)
            or self._token_approvals.get(token_id) == spender
        )
