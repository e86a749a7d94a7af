"""Command-line interface for inspecting coins and signers.

``parse-coin`` shows how coin arguments are understood, and ``show-signer``
resolves a signer exactly as a transaction command would and prints its public
identity.  Private key material is never printed.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Sequence

from .coin import CoinParseError, coin_argument
from .config import ConfigurationError, load_signer_config, set_default_config_path
from .signer import ResolveError, add_signer_arguments, credential_from_args, resolve_signing_key

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class CLIError(RuntimeError):
    """Raised when CLI arguments are invalid."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="txsigner CLI")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to the signer YAML config (default: ~/.txsigner.yaml)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    coin_parser = subparsers.add_parser(
        "parse-coin", help="parse amount/denom strings such as 1000uosmo"
    )
    coin_parser.add_argument("coins", nargs="+", type=coin_argument, help="Coins to parse")

    signer_parser = subparsers.add_parser(
        "show-signer", help="resolve the tx signer and print its public key and address"
    )
    add_signer_arguments(signer_parser)
    signer_parser.add_argument(
        "--prefix",
        default=None,
        help="Bech32 account prefix (default: account_prefix from config)",
    )
    signer_parser.add_argument(
        "--derivation-path",
        default=None,
        help="BIP32 derivation path override (default: derivation_path from config)",
    )
    return parser


def cmd_parse_coin(args: argparse.Namespace) -> None:
    for coin in args.coins:
        print(json.dumps({"amount": str(coin.amount), "denom": coin.denom}))


def cmd_show_signer(args: argparse.Namespace) -> None:
    overrides = {
        key: value
        for key, value in (
            ("account_prefix", args.prefix),
            ("derivation_path", args.derivation_path),
        )
        if value is not None
    }
    config = load_signer_config(overrides=overrides)
    credential = credential_from_args(args)

    with resolve_signing_key(credential, config.accounts, config.derivation_path) as key:
        summary = {
            "address": key.account_address(config.account_prefix),
            "public_key": key.public_key_bytes().hex(),
            "derivation_path": config.derivation_path,
        }
    print(json.dumps(summary, indent=2))


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    set_default_config_path(args.config)
    try:
        if args.command == "parse-coin":
            cmd_parse_coin(args)
        elif args.command == "show-signer":
            cmd_show_signer(args)
        else:  # pragma: no cover - argparse enforces choices
            raise CLIError(f"Unknown command: {args.command}")
    except KeyboardInterrupt:  # pragma: no cover - interactive use
        logger.info("Interrupted by user")
    except (CLIError, CoinParseError, ConfigurationError, ResolveError) as exc:
        parser.exit(1, f"error: {exc}\n")


if __name__ == "__main__":
    main(sys.argv[1:])
