# file: config.py
import os
from pathlib import Path

# =============================================================================
# COLLECTION
# =============================================================================
PROPERTY_NAME = "Properties"
PROPERTY_SYMBOL = "DREAM"

# =============================================================================
# DEVELOPMENT CHAIN
# =============================================================================
CHAIN_ID = int(os.environ.get("BROKERS_CHAIN_ID", "31337"))
ZERO_ADDRESS = "0x" + "0" * 40

# Same mnemonic and derivation path as the local hardhat/anvil node, so signer 0
# is 0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266.
DEV_MNEMONIC = os.environ.get(
    "BROKERS_MNEMONIC", "test test test test test test test test test test test junk"
)
DEV_ACCOUNT_PATH = "m/44'/60'/0'/0/{index}"
DEV_SIGNER_COUNT = int(os.environ.get("BROKERS_SIGNER_COUNT", "10"))

KEYSTORE_DIR = Path(
    os.environ.get("BROKERS_KEYSTORE_DIR", Path.home() / ".brokers" / "accounts")
).expanduser()

# =============================================================================
# IPFS
# =============================================================================
IPFS_BACKEND_URL = os.environ.get("BROKERS_IPFS_BACKEND_URL", "http://127.0.0.1:8000")
IPFS_GATEWAY_URL = os.environ.get("BROKERS_IPFS_GATEWAY_URL", "https://ipfs.io/ipfs/")
IPFS_TIMEOUT = float(os.environ.get("BROKERS_IPFS_TIMEOUT", "20"))
