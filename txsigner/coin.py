"""Amount/denomination parsing for transaction commands.

Coins are written the way the chain prints them: a run of decimal digits
immediately followed by the denomination, e.g. ``1000uosmo``.  There is no
separator, so the leading digit run is always consumed greedily as the amount
and everything after it is taken verbatim as the denom.  A denom that itself
starts with a digit cannot be expressed.
"""

from __future__ import annotations

import argparse
import re
from dataclasses import dataclass

# On-chain amounts are unsigned 128-bit integers.
MAX_COIN_AMOUNT = 2**128 - 1
_MAX_AMOUNT_DIGITS = len(str(MAX_COIN_AMOUNT))

_COIN_PATTERN = re.compile(r"(\d+)(.*)", re.ASCII)


class CoinParseError(ValueError):
    """Raised when a string cannot be parsed into a :class:`Coin`."""

    def __init__(self, message: str, text: str) -> None:
        super().__init__(message)
        self.text = text


class CoinNoMatchError(CoinParseError):
    """Raised when the input is not ``<digits><denom>`` shaped."""


class MissingAmountError(CoinParseError):
    """Raised when the amount part of the input is empty.

    Inputs without a leading digit run fail the shape check first and are
    reported as :class:`CoinNoMatchError`.
    """


class MissingDenomError(CoinParseError):
    """Raised when nothing follows the amount."""


class AmountOverflowError(CoinParseError):
    """Raised when the amount does not fit the on-chain integer width."""


@dataclass(frozen=True)
class Coin:
    """An on-chain token quantity.

    ``amount`` must be an ``int`` in ``[0, MAX_COIN_AMOUNT]`` and ``denom`` a
    non-empty string; anything else raises ``ValueError``.
    """

    amount: int
    denom: str

    def __post_init__(self) -> None:
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise ValueError(f"Coin amount must be an int, got {self.amount!r}")
        if not 0 <= self.amount <= MAX_COIN_AMOUNT:
            raise ValueError(f"Coin amount {self.amount} is outside [0, {MAX_COIN_AMOUNT}]")
        if not isinstance(self.denom, str) or not self.denom:
            raise ValueError(f"Coin denom must be a non-empty string, got {self.denom!r}")

    @classmethod
    def parse(cls, text: str) -> "Coin":
        return parse_coin(text)

    def __str__(self) -> str:
        return f"{self.amount}{self.denom}"


def parse_coin(text: str) -> Coin:
    """Parse ``text`` such as ``"1000uosmo"`` into a :class:`Coin`.

    Raises a :class:`CoinParseError` subclass describing which part of the
    input was unusable.  Leading or trailing whitespace is not stripped.
    """

    if not isinstance(text, str):
        raise CoinNoMatchError(f"Unable to parse `{text!r}` as Coin.", str(text))

    match = _COIN_PATTERN.fullmatch(text)
    if match is None:
        raise CoinNoMatchError(f"Unable to parse `{text}` as Coin.", text)

    amount_text, denom = match.groups()
    if not denom:
        raise MissingDenomError(f"`{text}` does not contain valid denom", text)

    # Length check first; int() refuses very long digit strings.
    significant = amount_text.lstrip("0")
    if len(significant) > _MAX_AMOUNT_DIGITS or int(significant or "0") > MAX_COIN_AMOUNT:
        raise AmountOverflowError(
            f"`{text}` amount exceeds the maximum coin amount ({MAX_COIN_AMOUNT})", text
        )
    return Coin(amount=int(significant or "0"), denom=denom)


def parse_coins(text: str) -> list[Coin]:
    """Parse a comma separated coin list such as ``"10uosmo,5uion"``."""

    if not isinstance(text, str) or not text:
        raise CoinNoMatchError(f"Unable to parse `{text}` as Coin.", str(text))
    return [parse_coin(piece) for piece in text.split(",")]


def coin_argument(text: str) -> Coin:
    """argparse ``type=`` adapter for coin-valued flags."""

    try:
        return parse_coin(text)
    except CoinParseError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc
