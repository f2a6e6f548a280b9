import json

import pytest
from eth_account import Account

from brokers.accounts import (
    get_signers,
    import_keystore,
    list_aliases,
    load_keystore,
    new_signer,
    save_keystore,
)

# Well-known addresses of the development mnemonic
DEV_ADDRESSES = [
    "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266",
    "0x70997970C51812dc3A010C7d01b50e0d17dc79C8",
    "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC",
]

def test_dev_signers(accounts):
    assert [s.address for s in accounts[:3]] == DEV_ADDRESSES
    assert accounts[0].alias == "dev0"
    assert len(get_signers(2)) == 2

def test_signer_equality(accounts):
    first = accounts[0]
    assert first == DEV_ADDRESSES[0]
    assert first == DEV_ADDRESSES[0].lower()
    assert first == get_signers(1)[0]
    assert first != accounts[1]
    assert str(first) == DEV_ADDRESSES[0]

def test_negative_count():
    with pytest.raises(ValueError):
        get_signers(-1)

def test_keystore_save_and_load(tmp_path):
    signer = new_signer("alice")
    path = save_keystore(signer, "secret", directory=tmp_path, iterations=1024)

    assert path == tmp_path / "alice.json"
    assert list_aliases(tmp_path) == ["alice"]

    loaded = load_keystore("alice", "secret", directory=tmp_path)
    assert loaded.address == signer.address
    assert loaded.alias == "alice"

def test_keystore_wrong_password(tmp_path):
    save_keystore(new_signer("bob"), "right", directory=tmp_path, iterations=1024)

    with pytest.raises(ValueError):
        load_keystore("bob", "wrong", directory=tmp_path)

def test_keystore_alias_exists(tmp_path):
    signer = new_signer("carol")
    save_keystore(signer, "pw", directory=tmp_path, iterations=1024)

    with pytest.raises(FileExistsError):
        save_keystore(signer, "pw", directory=tmp_path, iterations=1024)

def test_keystore_requires_alias(tmp_path):
    with pytest.raises(ValueError, match="Alias"):
        save_keystore(new_signer(), "pw", directory=tmp_path)

def test_missing_keystore(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_keystore("nobody", "pw", directory=tmp_path)

def test_import_keystore(tmp_path, accounts):
    source = tmp_path / "UTC--2024-01-01--geth"
    source.write_text(json.dumps(Account.encrypt(accounts[1].key, "geth", iterations=1024)))

    imported = import_keystore(source, "voter1", "geth", directory=tmp_path / "store", iterations=1024)

    assert imported.address == accounts[1].address
    assert load_keystore("voter1", "geth", directory=tmp_path / "store") == accounts[1]
