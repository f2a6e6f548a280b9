# file: accounts.py
"""Signer identities: development signers and encrypted keystore files."""
import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Union

from eth_account import Account
from eth_account.signers.local import LocalAccount

from brokers.config import DEV_ACCOUNT_PATH, DEV_MNEMONIC, DEV_SIGNER_COUNT, KEYSTORE_DIR

logger = logging.getLogger(__name__)

Account.enable_unaudited_hdwallet_features()


class Signer:
    """An address able to send transactions, backed by a local private key."""

    def __init__(self, account: LocalAccount, alias: str = ""):
        self._account = account
        self.alias = alias

    @property
    def address(self) -> str:
        return self._account.address

    @property
    def key(self) -> bytes:
        return bytes(self._account.key)

    def __eq__(self, other):
        other_address = getattr(other, "address", other)
        return isinstance(other_address, str) and other_address.lower() == self.address.lower()

    def __hash__(self):
        return hash(self.address.lower())

    def __str__(self):
        return self.address

    def __repr__(self):
        return f"<Signer {self.alias or '?'} {self.address}>"


@lru_cache(maxsize=None)
def _derive(mnemonic: str, index: int) -> LocalAccount:
    return Account.from_mnemonic(mnemonic, account_path=DEV_ACCOUNT_PATH.format(index=index))


def get_signers(count: int = DEV_SIGNER_COUNT, mnemonic: str = DEV_MNEMONIC) -> List[Signer]:
    """First `count` signers of the development mnemonic, in derivation order."""
    if count < 0:
        raise ValueError("count must not be negative")
    return [Signer(_derive(mnemonic, i), alias=f"dev{i}") for i in range(count)]


def new_signer(alias: str = "") -> Signer:
    return Signer(Account.create(), alias=alias)


# =============================================================================
# KEYSTORES
# =============================================================================

def save_keystore(
    signer: Signer,
    password: str,
    alias: Optional[str] = None,
    directory: Union[str, Path] = KEYSTORE_DIR,
    iterations: Optional[int] = None,
) -> Path:
    """Encrypt the signer's key into `<directory>/<alias>.json`. Existing aliases are never overwritten."""
    alias = alias or signer.alias
    if not alias:
        raise ValueError("Alias cannot be empty")

    directory = Path(directory).expanduser()
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{alias}.json"
    if path.exists():
        raise FileExistsError(f"Alias '{alias}' already exists in {directory}")

    keystore = Account.encrypt(signer.key, password, iterations=iterations)
    with open(path, "w") as f:
        json.dump(keystore, f)

    logger.info("[Accounts] saved keystore %s for %s", alias, signer.address)
    return path


def load_keystore(
    alias_or_path: Union[str, Path], password: str, directory: Union[str, Path] = KEYSTORE_DIR
) -> Signer:
    """Decrypt a keystore by alias (looked up in `directory`) or by file path.

    A wrong password raises ``ValueError`` from eth_account.
    """
    path = Path(alias_or_path).expanduser()
    if not path.is_file():
        path = Path(directory).expanduser() / f"{alias_or_path}.json"
    if not path.is_file():
        raise FileNotFoundError(f"No keystore found for '{alias_or_path}'")

    with open(path, "r") as f:
        keystore = json.load(f)

    private_key = Account.decrypt(keystore, password)
    return Signer(Account.from_key(private_key), alias=path.stem)


def import_keystore(
    source: Union[str, Path],
    alias: str,
    password: str,
    directory: Union[str, Path] = KEYSTORE_DIR,
    iterations: Optional[int] = None,
) -> Signer:
    """Re-home a keystore file produced elsewhere (geth, clef, ...) under `alias`, keeping its password."""
    signer = load_keystore(source, password)
    signer.alias = alias
    save_keystore(signer, password, alias=alias, directory=directory, iterations=iterations)
    return signer


def list_aliases(directory: Union[str, Path] = KEYSTORE_DIR) -> List[str]:
    directory = Path(directory).expanduser()
    if not directory.is_dir():
        return []
    return sorted(p.stem for p in directory.glob("*.json"))
