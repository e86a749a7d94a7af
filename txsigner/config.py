"""Shared configuration loader for txsigner.

The configuration holds the named signer accounts and the HD derivation path
used when a key is derived from a mnemonic.  Values come from an optional YAML
file, environment variables, and explicit overrides, in increasing order of
precedence.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Union

import yaml


class ConfigurationError(RuntimeError):
    """Raised when configuration is invalid."""


DEFAULT_CONFIG_PATH = Path.home() / ".txsigner.yaml"
DEFAULT_DERIVATION_PATH = "m/44'/118'/0'/0/0"
DEFAULT_ACCOUNT_PREFIX = "cosmos"

ENV_DERIVATION_PATH = "TXSIGNER_DERIVATION_PATH"
ENV_ACCOUNT_PREFIX = "TXSIGNER_ACCOUNT_PREFIX"

_CONFIG_PATH_OVERRIDE: Path | None = None


@dataclass(frozen=True)
class MnemonicAccount:
    """Registry entry whose key is derived from a BIP39 mnemonic."""

    mnemonic: str = field(repr=False)


@dataclass(frozen=True)
class PrivateKeyAccount:
    """Registry entry holding a base64 encoded raw private key."""

    private_key: str = field(repr=False)


Account = Union[MnemonicAccount, PrivateKeyAccount]


@dataclass
class SignerConfig:
    """Configuration container for signer resolution."""

    accounts: dict[str, Account] = field(default_factory=dict)
    derivation_path: str = DEFAULT_DERIVATION_PATH
    account_prefix: str = DEFAULT_ACCOUNT_PREFIX


def set_default_config_path(path: str | Path | None) -> None:
    """Remember a user-supplied config path for future loads."""

    global _CONFIG_PATH_OVERRIDE
    _CONFIG_PATH_OVERRIDE = Path(path).expanduser() if path else None


def _load_config_file(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.exists():
        if required:
            raise ConfigurationError(f"Config file not found: {path}")
        return {}

    try:
        loaded = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as exc:  # pragma: no cover - delegated to PyYAML
        raise ConfigurationError(f"Invalid YAML in config file {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise ConfigurationError(f"Expected {path} to contain a YAML object")
    return loaded


def _first_value(*values: Any, default: Any = None) -> Any:
    for value in values:
        if value is not None:
            return value
    return default


def _parse_account(name: str, raw: Any, *, source: Path) -> Account:
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Account `{name}` in {source} must be a mapping")

    mnemonic = raw.get("mnemonic")
    private_key = raw.get("private_key")
    if (mnemonic is None) == (private_key is None):
        raise ConfigurationError(
            f"Account `{name}` in {source} must define exactly one of 'mnemonic' or 'private_key'"
        )

    value = mnemonic if mnemonic is not None else private_key
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError(f"Account `{name}` in {source} has an empty or non-string secret")

    if mnemonic is not None:
        return MnemonicAccount(mnemonic=mnemonic)
    return PrivateKeyAccount(private_key=private_key)


def parse_accounts(section: Any, *, source: Path) -> dict[str, Account]:
    """Validate the ``accounts`` mapping of a config file."""

    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"Expected 'accounts' to be a mapping in {source}")
    return {
        str(name): _parse_account(str(name), raw, source=source)
        for name, raw in section.items()
    }


def load_signer_config(
    *,
    config_path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> SignerConfig:
    """Load signer configuration from environment variables and optional YAML.

    An explicitly requested file (argument or :func:`set_default_config_path`)
    must exist; the implicit ``~/.txsigner.yaml`` may be absent, in which case
    no named accounts are available.
    """

    env_map = os.environ if env is None else env
    explicit_path = config_path is not None or _CONFIG_PATH_OVERRIDE is not None
    path = (
        Path(config_path).expanduser()
        if config_path is not None
        else _CONFIG_PATH_OVERRIDE or DEFAULT_CONFIG_PATH
    )

    file_config = _load_config_file(path, required=explicit_path)
    override_map = dict(overrides or {})

    accounts = parse_accounts(file_config.get("accounts"), source=path)

    derivation_path = _first_value(
        override_map.get("derivation_path"),
        env_map.get(ENV_DERIVATION_PATH) or None,
        file_config.get("derivation_path"),
        default=DEFAULT_DERIVATION_PATH,
    )
    if not isinstance(derivation_path, str):
        raise ConfigurationError(f"Invalid derivation_path in {path}: {derivation_path!r}")

    account_prefix = _first_value(
        override_map.get("account_prefix"),
        env_map.get(ENV_ACCOUNT_PREFIX) or None,
        file_config.get("account_prefix"),
        default=DEFAULT_ACCOUNT_PREFIX,
    )
    if not isinstance(account_prefix, str) or not account_prefix:
        raise ConfigurationError(f"Invalid account_prefix in {path}: {account_prefix!r}")

    return SignerConfig(
        accounts=accounts,
        derivation_path=derivation_path,
        account_prefix=account_prefix,
    )
