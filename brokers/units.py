# file: units.py
from decimal import Decimal

from eth_utils import from_wei, to_wei


def tokens(n) -> int:
    """Whole ether (int, str or Decimal) -> wei."""
    return to_wei(Decimal(str(n)), "ether")


def from_tokens(wei: int) -> Decimal:
    return from_wei(wei, "ether")
