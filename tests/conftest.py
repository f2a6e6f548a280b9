import pytest

from brokers import Ledger, Marketplace, Property, get_signers

PROPERTY_URI = "https://ipfs.io/ipfs/QmQUozrHLAusXDxrvsESJ3PYB3rUeUuBAvVWw6nop2uu7c/2.png"

@pytest.fixture(scope="session")
def accounts():
    return get_signers(5)

@pytest.fixture
def owner(accounts):
    return accounts[0]

@pytest.fixture
def seller(accounts):
    return accounts[1]

@pytest.fixture
def buyer(accounts):
    return accounts[2]

@pytest.fixture
def inspector(accounts):
    return accounts[3]

@pytest.fixture
def stranger(accounts):
    return accounts[4]

@pytest.fixture
def ledger():
    return Ledger()

@pytest.fixture
def property_nft(ledger, owner):
    return ledger.deploy(Property, sender=owner)

@pytest.fixture
def marketplace(ledger, property_nft, owner):
    return ledger.deploy(Marketplace, property_nft.address, sender=owner)

@pytest.fixture
def minted_token_id(property_nft, seller):
    return property_nft.mint(PROPERTY_URI, sender=seller).return_value

@pytest.fixture
def approved_token_id(property_nft, marketplace, seller, minted_token_id):
    property_nft.approve(marketplace.address, minted_token_id, sender=seller)
    return minted_token_id
