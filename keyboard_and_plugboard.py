# keyboard_and_plugboard.py
from __future__ import annotations

import string
from collections.abc import Iterable
from typing import Tuple, Union

from debug import Debug
from errors import InvalidOrdinal, InvalidPlugConnection, InvalidRotorSetting, InvalidSymbol

debug = Debug()

ALPHABET: str = string.ascii_uppercase
SIZE: int = len(ALPHABET)

_ORDINALS: dict[str, int] = {ch: i + 1 for i, ch in enumerate(ALPHABET)}

# a letter "A".."Z" or its 1-based ordinal 1..26
RotorSetting = Union[str, int]
# "AB" or ("A", "B")
PlugConnection = Union[str, Tuple[str, str]]


# ── Keyboard: letter <-> ordinal ──────────────────────────────────
def is_symbol(raw: object) -> bool:
    return isinstance(raw, str) and raw in _ORDINALS


def try_parse_symbol(raw: str) -> str | None:
    """Return *raw* if it is one of the 26 letters, else None. Never raises."""
    return raw if is_symbol(raw) else None


def to_ordinal(symbol: str) -> int:
    try:
        return _ORDINALS[symbol]
    except (KeyError, TypeError):
        raise InvalidSymbol(symbol) from None


def from_ordinal(value: int) -> str:
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= SIZE:
        raise InvalidOrdinal(value)
    return ALPHABET[value - 1]


def setting_ordinal(setting: RotorSetting) -> int:
    """Normalise a ring/start setting (letter or 1-based number) to 1..26."""
    if isinstance(setting, bool):
        raise InvalidRotorSetting(setting)
    if isinstance(setting, int):
        if not 1 <= setting <= SIZE:
            raise InvalidRotorSetting(setting)
        return setting
    if is_symbol(setting):
        return _ORDINALS[setting]
    raise InvalidRotorSetting(setting)


# ── Plugboard ─────────────────────────────────────────────────────
def parse_connection(raw: PlugConnection) -> tuple[str, str]:
    """Normalise ``"AB"`` / ``("A", "B")`` to a pair of distinct letters."""
    if isinstance(raw, str):
        if len(raw) != 2:
            raise InvalidPlugConnection(
                f"invalid plug connection {raw!r} - must be exactly two letters "
                "that should be connected"
            )
        a, b = raw
    else:
        try:
            a, b = raw
        except (TypeError, ValueError):
            raise InvalidPlugConnection(
                f"invalid plug connection {raw!r} - must be a pair of letters"
            ) from None

    for ch in (a, b):
        if not is_symbol(ch):
            raise InvalidPlugConnection(
                f"invalid plug connection - {ch!r} is not a valid Enigma letter"
            )
    if a == b:
        raise InvalidPlugConnection(f"Plugboard cannot map a letter to itself: {a}")
    return a, b


class Plugboard:
    """Self-inverse letter swap; every letter maps to itself unless paired."""

    def __init__(self, pairs: Iterable[PlugConnection] = ()) -> None:
        self._map: list[str] = list(ALPHABET)
        for raw in pairs:
            self.connect(raw)

    def connect(self, raw: PlugConnection) -> None:
        a, b = parse_connection(raw)
        for ch, other in ((a, b), (b, a)):
            current = self._map[_ORDINALS[ch] - 1]
            if current != ch and current != other:
                raise InvalidPlugConnection(
                    f"invalid plug connection - {ch!r} is already connected to {current!r}"
                )

        # passed validation → commit swap
        self._map[_ORDINALS[a] - 1] = b
        self._map[_ORDINALS[b] - 1] = a

    def swap(self, symbol: str) -> str:
        mapped = self._map[_ORDINALS[symbol] - 1]
        debug.log("plugboard", f"{symbol}->{mapped}")
        return mapped

    forward = swap        # alias: signal in
    backward = swap       # alias: signal out

    def pairs(self) -> list[str]:
        return [a + b for a, b in zip(ALPHABET, self._map) if a < b]

    def copy(self) -> "Plugboard":
        clone = Plugboard()
        clone._map = self._map.copy()
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Plugboard):
            return NotImplemented
        return self._map == other._map

    # nicety for debugging
    def __repr__(self) -> str:
        return f"<Plugboard {' '.join(self.pairs())}>"
