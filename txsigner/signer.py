"""Resolution of the transaction signer from user supplied credentials.

A signer can be named three ways: an account from the config registry, a raw
mnemonic, or a raw base64 private key.  The command line only lets one of them
through (see :func:`add_signer_arguments`), and :meth:`CredentialSpec.select`
applies the fixed priority order account, mnemonic, private key again so that
programmatic callers get the same behavior.
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, field
from typing import Mapping, Union

from .config import Account, MnemonicAccount, PrivateKeyAccount
from .keys import ResolveError, SigningKey

logger = logging.getLogger(__name__)


class UnknownAccountError(ResolveError):
    """Raised when a named signer account is not in the registry."""

    def __init__(self, name: str) -> None:
        super().__init__(f"signer account: `{name}` is not defined")
        self.name = name


class NoCredentialSuppliedError(ResolveError):
    """Raised when no signer credential was given at all."""

    def __init__(self) -> None:
        super().__init__("Unable to retrieve signer private key: no signer credential supplied")


@dataclass(frozen=True)
class AccountCredential:
    name: str


@dataclass(frozen=True)
class MnemonicCredential:
    phrase: str = field(repr=False)


@dataclass(frozen=True)
class PrivateKeyCredential:
    encoded: str = field(repr=False)


Credential = Union[AccountCredential, MnemonicCredential, PrivateKeyCredential]


@dataclass(frozen=True)
class CredentialSpec:
    """The three mutually exclusive signer inputs as given by the user."""

    account: str | None = None
    mnemonic: str | None = field(default=None, repr=False)
    private_key: str | None = field(default=None, repr=False)

    def select(self) -> Credential:
        """Return the credential chosen by the priority chain.

        Only the first populated field counts, so an account name wins over
        a mnemonic or private key supplied alongside it.
        """

        if self.account is not None:
            return AccountCredential(self.account)
        if self.mnemonic is not None:
            return MnemonicCredential(self.mnemonic)
        if self.private_key is not None:
            return PrivateKeyCredential(self.private_key)
        raise NoCredentialSuppliedError()


def _key_from_account(
    name: str, accounts: Mapping[str, Account], derivation_path: str
) -> SigningKey:
    account = accounts.get(name)
    if account is None:
        raise UnknownAccountError(name)
    if isinstance(account, MnemonicAccount):
        return SigningKey.from_mnemonic(account.mnemonic, derivation_path)
    if isinstance(account, PrivateKeyAccount):
        return SigningKey.from_base64(account.private_key)
    raise TypeError(f"Unsupported account entry for `{name}`: {type(account).__name__}")


def resolve_signing_key(
    credential: CredentialSpec | Credential,
    accounts: Mapping[str, Account],
    derivation_path: str,
) -> SigningKey:
    """Resolve exactly one :class:`SigningKey` from ``credential``.

    Every failure is raised as a :class:`ResolveError` subclass; there is no
    fallback from one credential source to another.
    """

    if isinstance(credential, CredentialSpec):
        credential = credential.select()

    if isinstance(credential, AccountCredential):
        logger.debug("Resolving signer from account %s", credential.name)
        return _key_from_account(credential.name, accounts, derivation_path)
    if isinstance(credential, MnemonicCredential):
        logger.debug("Resolving signer from mnemonic at %s", derivation_path)
        return SigningKey.from_mnemonic(credential.phrase, derivation_path)
    if isinstance(credential, PrivateKeyCredential):
        logger.debug("Resolving signer from raw private key")
        return SigningKey.from_base64(credential.encoded)
    raise TypeError(f"Unsupported credential: {type(credential).__name__}")


def add_signer_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the mutually exclusive ``--signer-*`` flags to ``parser``."""

    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--signer-account",
        default=None,
        help="Specifies predefined account as a tx signer",
    )
    group.add_argument(
        "--signer-mnemonic",
        default=None,
        help="Specifies mnemonic as a tx signer",
    )
    group.add_argument(
        "--signer-private-key",
        default=None,
        help="Specifies private_key as a tx signer (base64 encoded string)",
    )


def credential_from_args(args: argparse.Namespace) -> CredentialSpec:
    return CredentialSpec(
        account=getattr(args, "signer_account", None),
        mnemonic=getattr(args, "signer_mnemonic", None),
        private_key=getattr(args, "signer_private_key", None),
    )
