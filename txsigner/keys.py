"""secp256k1 signing keys and their derivation.

Keys are produced either directly from 32 raw scalar bytes or from a BIP39
English mnemonic walked down a BIP32 derivation path (Cosmos chains use
``m/44'/118'/0'/0/0``).  BIP39/BIP32 handling is delegated to ``bip_utils``;
the resulting key is held as a ``cryptography`` EC private key.
"""

from __future__ import annotations

import base64
import binascii
import hmac
import logging
import re

from bip_utils import (
    AtomAddrEncoder,
    Bip32KeyError,
    Bip32Path,
    Bip32PathError,
    Bip32PathParser,
    Bip32Slip10Secp256k1,
    Bip39Languages,
    Bip39MnemonicValidator,
    Bip39SeedGenerator,
)
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

logger = logging.getLogger(__name__)

PRIVATE_KEY_SIZE = 32
SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

_HARDENED_OFFSET = 0x80000000
_PATH_ELEMENT = re.compile(r"(\d{1,10})('?)", re.ASCII)


class ResolveError(RuntimeError):
    """Base class for failures while resolving a signing key."""


class InvalidMnemonicError(ResolveError):
    """Raised when a phrase is not a valid BIP39 English mnemonic."""


class InvalidDerivationPathError(ResolveError):
    """Raised when a BIP32 derivation path string is malformed."""

    def __init__(self, path: object, reason: str | None = None) -> None:
        message = f"Invalid derivation path `{path}`"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.path = path


class DerivationFailedError(ResolveError):
    """Raised when BIP32 child key derivation fails."""


class InvalidPrivateKeyEncodingError(ResolveError):
    """Raised when a private key is not valid base64."""


class InvalidPrivateKeyBytesError(ResolveError):
    """Raised when decoded key bytes are not a usable secp256k1 scalar."""


def parse_derivation_path(path: str) -> Bip32Path:
    """Parse an absolute BIP32 path such as ``m/44'/118'/0'/0/0``.

    Hardened elements are marked with ``'``.  Every index must be below
    2**31 before hardening.
    """

    if not isinstance(path, str):
        raise InvalidDerivationPathError(path, "expected a string")

    elements = path.split("/")
    if elements[0] != "m":
        raise InvalidDerivationPathError(path, "must start with 'm'")

    normalized = ["m"]
    for element in elements[1:]:
        match = _PATH_ELEMENT.fullmatch(element)
        if match is None:
            raise InvalidDerivationPathError(path, f"bad element `{element}`")
        index = int(match.group(1))
        if index >= _HARDENED_OFFSET:
            raise InvalidDerivationPathError(path, f"index {index} out of range")
        normalized.append(f"{index}'" if match.group(2) else str(index))

    try:
        return Bip32PathParser.Parse("/".join(normalized))
    except (Bip32PathError, ValueError) as exc:
        raise InvalidDerivationPathError(path, str(exc)) from exc


def mnemonic_to_seed(phrase: str) -> bytes:
    """Validate ``phrase`` and return its 64-byte BIP39 seed (empty passphrase)."""

    if not isinstance(phrase, str) or not Bip39MnemonicValidator(Bip39Languages.ENGLISH).IsValid(phrase):
        raise InvalidMnemonicError("Invalid BIP39 mnemonic phrase")
    return Bip39SeedGenerator(phrase, Bip39Languages.ENGLISH).Generate("")


def decode_private_key(encoded: str) -> bytes:
    """Decode a base64 private key; the bytes are not range checked here."""

    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, TypeError, ValueError) as exc:
        raise InvalidPrivateKeyEncodingError("Private key is not valid base64") from exc


class SigningKey:
    """A secp256k1 private key used to sign transactions.

    The key material is never included in ``repr``.  ``close()`` (or leaving a
    ``with`` block) drops the held key; any later use raises ``ValueError``.
    """

    __slots__ = ("_key",)

    def __init__(self, key: ec.EllipticCurvePrivateKey) -> None:
        if not isinstance(key.curve, ec.SECP256K1):
            raise InvalidPrivateKeyBytesError(f"Expected a secp256k1 key, got {key.curve.name}")
        self._key: ec.EllipticCurvePrivateKey | None = key

    @classmethod
    def from_bytes(cls, raw: bytes) -> "SigningKey":
        """Build a key from a 32-byte big-endian scalar."""

        if len(raw) != PRIVATE_KEY_SIZE:
            raise InvalidPrivateKeyBytesError(
                f"Private key must be {PRIVATE_KEY_SIZE} bytes, got {len(raw)}"
            )
        scalar = int.from_bytes(raw, "big")
        if not 0 < scalar < SECP256K1_ORDER:
            raise InvalidPrivateKeyBytesError("Private key is outside the secp256k1 scalar range")
        return cls(ec.derive_private_key(scalar, ec.SECP256K1()))

    @classmethod
    def from_base64(cls, encoded: str) -> "SigningKey":
        return cls.from_bytes(decode_private_key(encoded))

    @classmethod
    def from_mnemonic(cls, phrase: str, derivation_path: str) -> "SigningKey":
        """Derive the key at ``derivation_path`` from a BIP39 mnemonic.

        The path is checked before the phrase so a malformed path is reported
        whatever the mnemonic looks like.
        """

        path = parse_derivation_path(derivation_path)
        seed = mnemonic_to_seed(phrase)
        try:
            node = Bip32Slip10Secp256k1.FromSeed(seed).DerivePath(path)
            raw = node.PrivateKey().Raw().ToBytes()
        except (Bip32KeyError, ValueError) as exc:
            raise DerivationFailedError(
                f"Unable to derive key at `{derivation_path}`: {exc}"
            ) from exc
        logger.debug("Derived signing key at %s", derivation_path)
        return cls.from_bytes(raw)

    def _require_key(self) -> ec.EllipticCurvePrivateKey:
        if self._key is None:
            raise ValueError("Signing key has been closed")
        return self._key

    def to_bytes(self) -> bytes:
        """Return the 32-byte big-endian private scalar."""

        value = self._require_key().private_numbers().private_value
        return value.to_bytes(PRIVATE_KEY_SIZE, "big")

    def public_key_bytes(self) -> bytes:
        """Return the 33-byte compressed SEC1 public key."""

        return self._require_key().public_key().public_bytes(
            serialization.Encoding.X962, serialization.PublicFormat.CompressedPoint
        )

    def account_address(self, prefix: str) -> str:
        """Return the bech32 account address for ``prefix`` (e.g. ``osmo``)."""

        return AtomAddrEncoder.EncodeKey(self.public_key_bytes(), hrp=prefix)

    @property
    def closed(self) -> bool:
        return self._key is None

    def close(self) -> None:
        self._key = None

    def __enter__(self) -> "SigningKey":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __eq__(self, other: object) -> bool:
        """Compare key material in constant time.

        A closed key has no material left, so it is only equal to itself.
        """

        if not isinstance(other, SigningKey):
            return NotImplemented
        if self.closed or other.closed:
            return self is other
        return hmac.compare_digest(self.to_bytes(), other.to_bytes())

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        state = "closed" if self.closed else "secp256k1"
        return f"SigningKey(<{state}>)"
