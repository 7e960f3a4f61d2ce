# rotor_and_reflector.py
from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from debug import Debug
from errors import AsymmetricReflector, InvalidWiringEncoding
from keyboard_and_plugboard import (
    ALPHABET,
    SIZE,
    RotorSetting,
    from_ordinal,
    is_symbol,
    setting_ordinal,
    to_ordinal,
)

debug = Debug()


# ── wiring definition ─────────────────────────────────────────────
@dataclass(frozen=True)
class WiringDefinition:
    """Forward substitution of one wheel plus its turnover notches.

    ``forward[i]`` is the letter the contact at ordinal ``i + 1`` is wired
    to, so every letter has exactly one target by construction.
    """

    forward: tuple[str, ...]
    notches: frozenset[str] = frozenset()
    reverse: tuple[str, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        forward = tuple(self.forward)
        if len(forward) != SIZE:
            raise InvalidWiringEncoding(
                f"Invalid Enigma rotor configuration - expected {SIZE} wired letters, "
                f"got {len(forward)}"
            )
        for letter, mapped in zip(ALPHABET, forward):
            if not is_symbol(mapped):
                raise InvalidWiringEncoding(
                    f"Invalid Enigma rotor configuration - letter {letter} is wired "
                    f"to invalid value {mapped!r}"
                )
        duplicates = sorted({c for c in forward if forward.count(c) > 1})
        if duplicates:
            raise InvalidWiringEncoding(
                "Invalid Enigma rotor configuration - wiring must be a permutation of "
                f"the alphabet, {''.join(duplicates)} wired more than once"
            )

        notches = frozenset(self.notches)
        for notch in notches:
            if not is_symbol(notch):
                raise InvalidWiringEncoding(
                    "Invalid Enigma rotor configuration - notch must be set to a "
                    f"letter, but was {notch!r}"
                )

        reverse = [""] * SIZE
        for i, mapped in enumerate(forward):
            reverse[to_ordinal(mapped) - 1] = ALPHABET[i]

        object.__setattr__(self, "forward", forward)
        object.__setattr__(self, "notches", notches)
        object.__setattr__(self, "reverse", tuple(reverse))

    @classmethod
    def from_mapping(
        cls, wiring: Mapping[str, str], notches: Iterable[str] = ()
    ) -> "WiringDefinition":
        """Build from an explicit letter → letter mapping."""
        for letter in ALPHABET:
            if letter not in wiring:
                raise InvalidWiringEncoding(
                    f"Invalid Enigma rotor configuration - missing wiring for letter {letter}"
                )
        extra = sorted(set(wiring) - set(ALPHABET))
        if extra:
            raise InvalidWiringEncoding(
                f"Invalid Enigma rotor configuration - unknown contacts {extra}"
            )
        return cls(tuple(wiring[letter] for letter in ALPHABET), frozenset(notches))

    def encode(self) -> str:
        """Compact form: 26 letters, then ``_`` and the notches if any."""
        text = "".join(self.forward)
        if self.notches:
            text += "_" + "".join(sorted(self.notches))
        return text

    def is_symmetric(self) -> bool:
        return all(self.forward[to_ordinal(c) - 1] == ALPHABET[i]
                   for i, c in enumerate(self.forward))


def validate_symmetry(wiring: WiringDefinition) -> WiringDefinition:
    """Raise AsymmetricReflector unless wiring[wiring[x]] == x for every x."""
    for letter, wired in zip(ALPHABET, wiring.forward):
        reverse = wiring.forward[to_ordinal(wired) - 1]
        if reverse != letter:
            raise AsymmetricReflector(letter, wired, reverse)
    return wiring


# ── rotor ─────────────────────────────────────────────────────────
class Rotor:
    def __init__(self, wiring: WiringDefinition) -> None:
        self.wiring = wiring

        # integer lookup tables
        self._fwd = [to_ordinal(c) - 1 for c in wiring.forward]
        self._rev = [to_ordinal(c) - 1 for c in wiring.reverse]
        self._notches = frozenset(to_ordinal(n) - 1 for n in wiring.notches)

        self.position = 0
        self.ring_setting = 0

    # ── ring & position helpers ──────────────────────────────────
    def set_ring_position(self, setting: RotorSetting) -> "Rotor":
        self.ring_setting = setting_ordinal(setting) - 1
        return self

    def set_position(self, setting: RotorSetting) -> "Rotor":
        self.position = setting_ordinal(setting) - 1
        return self

    def get_position(self) -> str:
        return from_ordinal(self.position + 1)

    def get_ring_position(self) -> int:
        return self.ring_setting + 1

    # ── stepping -------------------------------------------------
    def at_notch(self) -> bool:
        return self.position in self._notches

    def step(self) -> bool:
        """Advance one and return True when leaving a notch (carry)."""
        carry = self.at_notch()
        self.position = (self.position + 1) % SIZE
        debug.log("stepping", f"Rotor pos {self.get_position()}, carry={carry}")
        return carry

    # ── signal paths ---------------------------------------------
    def _pass(self, table: list[int], symbol: str) -> str:
        offset = self.position - self.ring_setting
        shift = (to_ordinal(symbol) - 1 + offset) % SIZE
        mapped = (table[shift] - offset) % SIZE
        return ALPHABET[mapped]

    def forward(self, symbol: str) -> str:
        out = self._pass(self._fwd, symbol)
        debug.log("rotor", f"{symbol}->{out} (fwd, pos={self.get_position()})")
        return out

    def backward(self, symbol: str) -> str:
        out = self._pass(self._rev, symbol)
        debug.log("rotor", f"{symbol}->{out} (rev, pos={self.get_position()})")
        return out

    # ── niceties --------------------------------------------------
    def __repr__(self) -> str:
        return f"<Rotor pos={self.get_position()} ring={self.get_ring_position()}>"


class Reflector:
    def __init__(self, wiring: WiringDefinition) -> None:
        self.wiring = validate_symmetry(wiring)
        self._map = [to_ordinal(c) - 1 for c in wiring.forward]

    def reflect(self, symbol: str) -> str:
        out = ALPHABET[self._map[to_ordinal(symbol) - 1]]
        debug.log("reflector", f"{symbol}->{out}")
        return out

    def __repr__(self) -> str:
        return f"<Reflector {''.join(self.wiring.forward)}>"
