from __future__ import annotations

import base64

import pytest

from txsigner.keys import (
    SECP256K1_ORDER,
    InvalidDerivationPathError,
    InvalidMnemonicError,
    InvalidPrivateKeyBytesError,
    InvalidPrivateKeyEncodingError,
    SigningKey,
    parse_derivation_path,
)

MNEMONIC = " ".join(["abandon"] * 11 + ["about"])
COSMOS_PATH = "m/44'/118'/0'/0/0"


def test_from_bytes_round_trips_scalar() -> None:
    raw = bytes(range(1, 33))

    key = SigningKey.from_bytes(raw)

    assert key.to_bytes() == raw


@pytest.mark.parametrize(
    "raw",
    [
        b"\x00" * 32,
        SECP256K1_ORDER.to_bytes(32, "big"),
        b"\xff" * 32,
        b"\x01" * 31,
        b"\x01" * 33,
    ],
)
def test_from_bytes_rejects_invalid_scalars(raw: bytes) -> None:
    with pytest.raises(InvalidPrivateKeyBytesError):
        SigningKey.from_bytes(raw)


def test_from_base64_rejects_bad_encoding() -> None:
    with pytest.raises(InvalidPrivateKeyEncodingError):
        SigningKey.from_base64("not base64!")
    with pytest.raises(InvalidPrivateKeyEncodingError):
        SigningKey.from_base64("AQE")


def test_from_base64_rejects_short_keys() -> None:
    with pytest.raises(InvalidPrivateKeyBytesError):
        SigningKey.from_base64(base64.b64encode(b"\x01" * 16).decode())


def test_mnemonic_derivation_is_deterministic() -> None:
    first = SigningKey.from_mnemonic(MNEMONIC, COSMOS_PATH)
    second = SigningKey.from_mnemonic(MNEMONIC, COSMOS_PATH)

    assert first.to_bytes() == second.to_bytes()
    assert len(first.to_bytes()) == 32


def test_mnemonic_derivation_depends_on_path() -> None:
    first = SigningKey.from_mnemonic(MNEMONIC, "m/44'/118'/0'/0/0")
    second = SigningKey.from_mnemonic(MNEMONIC, "m/44'/118'/0'/0/1")

    assert first.to_bytes() != second.to_bytes()


@pytest.mark.parametrize("path", ["m/44h/118h/0h/0/0", "m/44H/118'/0'/0/0"])
def test_only_apostrophe_marks_hardened_elements(path: str) -> None:
    with pytest.raises(InvalidDerivationPathError):
        parse_derivation_path(path)


def test_invalid_mnemonic_is_rejected() -> None:
    with pytest.raises(InvalidMnemonicError) as excinfo:
        SigningKey.from_mnemonic(" ".join(["abandon"] * 12), COSMOS_PATH)

    assert "abandon" not in str(excinfo.value)


@pytest.mark.parametrize(
    "path",
    ["", "44'/118'/0'/0/0", "m/", "m//0", "m/44'/abc", "m/2147483648", "M/44'", "m/-1"],
)
def test_malformed_paths_are_rejected(path: str) -> None:
    with pytest.raises(InvalidDerivationPathError):
        parse_derivation_path(path)


def test_path_is_checked_before_mnemonic() -> None:
    with pytest.raises(InvalidDerivationPathError):
        SigningKey.from_mnemonic("definitely not a mnemonic", "m/44'/x")


def test_public_key_and_address() -> None:
    key = SigningKey.from_mnemonic(MNEMONIC, COSMOS_PATH)

    public_key = key.public_key_bytes()

    assert len(public_key) == 33
    assert public_key[0] in (2, 3)
    assert key.account_address("osmo").startswith("osmo1")
    assert key.account_address("cosmos").startswith("cosmos1")


def test_close_drops_key_material() -> None:
    with SigningKey.from_bytes(b"\x01" * 32) as key:
        assert not key.closed

    assert key.closed
    with pytest.raises(ValueError):
        key.to_bytes()


def test_repr_hides_key_material() -> None:
    key = SigningKey.from_bytes(b"\x02" * 32)

    assert "02" not in repr(key)
    assert repr(key) == "SigningKey(<secp256k1>)"


def test_closed_keys_compare_by_identity() -> None:
    open_key = SigningKey.from_bytes(b"\x03" * 32)
    closed_key = SigningKey.from_bytes(b"\x03" * 32)
    closed_key.close()

    assert closed_key == closed_key
    assert closed_key != open_key
    assert open_key != closed_key
    assert open_key == SigningKey.from_bytes(b"\x03" * 32)
