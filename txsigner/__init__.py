"""Signer resolution and coin parsing for Cosmos-SDK transaction tooling."""

from .coin import (
    AmountOverflowError,
    Coin,
    CoinNoMatchError,
    CoinParseError,
    MAX_COIN_AMOUNT,
    MissingAmountError,
    MissingDenomError,
    coin_argument,
    parse_coin,
    parse_coins,
)
from .config import (
    Account,
    ConfigurationError,
    MnemonicAccount,
    PrivateKeyAccount,
    SignerConfig,
    load_signer_config,
)
from .keys import (
    DerivationFailedError,
    InvalidDerivationPathError,
    InvalidMnemonicError,
    InvalidPrivateKeyBytesError,
    InvalidPrivateKeyEncodingError,
    ResolveError,
    SigningKey,
)
from .signer import (
    AccountCredential,
    Credential,
    CredentialSpec,
    MnemonicCredential,
    NoCredentialSuppliedError,
    PrivateKeyCredential,
    UnknownAccountError,
    add_signer_arguments,
    credential_from_args,
    resolve_signing_key,
)

__all__ = [
    "Coin",
    "CoinParseError",
    "CoinNoMatchError",
    "MissingAmountError",
    "MissingDenomError",
    "AmountOverflowError",
    "MAX_COIN_AMOUNT",
    "coin_argument",
    "parse_coin",
    "parse_coins",
    "Account",
    "ConfigurationError",
    "MnemonicAccount",
    "PrivateKeyAccount",
    "SignerConfig",
    "load_signer_config",
    "ResolveError",
    "UnknownAccountError",
    "InvalidMnemonicError",
    "InvalidDerivationPathError",
    "DerivationFailedError",
    "InvalidPrivateKeyEncodingError",
    "InvalidPrivateKeyBytesError",
    "NoCredentialSuppliedError",
    "SigningKey",
    "AccountCredential",
    "MnemonicCredential",
    "PrivateKeyCredential",
    "Credential",
    "CredentialSpec",
    "add_signer_arguments",
    "credential_from_args",
    "resolve_signing_key",
]
