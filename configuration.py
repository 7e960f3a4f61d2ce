# configuration.py
from __future__ import annotations

import dataclasses
import json
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from debug import Debug
from errors import (
    InvalidConfiguration,
    RotorCountMismatch,
    UnknownUnsupportedCharacterPolicy,
)
from keyboard_and_plugboard import (
    ALPHABET,
    PlugConnection,
    Plugboard,
    RotorSetting,
    parse_connection,
    setting_ordinal,
)

debug = Debug()

UnsupportedCharacters = Literal["drop", "keep", "fail"]
POLICIES: tuple[str, ...] = ("drop", "keep", "fail")

# the order in which a machine applies the fields
FIELD_ORDER: tuple[str, ...] = (
    "rotor_ids",
    "ring_positions",
    "start_positions",
    "plug_connections",
    "reflector_id",
    "unsupported_characters",
)

# JSON key → field name
_ALIASES: dict[str, str] = {
    "rotors": "rotor_ids",
    "rotor_ids": "rotor_ids",
    "wheel_order": "rotor_ids",
    "ring_set": "ring_positions",
    "rings": "ring_positions",
    "ring_settings": "ring_positions",
    "ring_positions": "ring_positions",
    "positions": "start_positions",
    "start_positions": "start_positions",
    "plugs": "plug_connections",
    "plugboard": "plug_connections",
    "plug_connections": "plug_connections",
    "reflector": "reflector_id",
    "reflector_id": "reflector_id",
    "unsupported": "unsupported_characters",
    "unsupported_characters": "unsupported_characters",
}

_split_re = re.compile(r"[\s,]+")


def validate_policy(policy: object) -> str:
    if policy not in POLICIES:
        raise UnknownUnsupportedCharacterPolicy(policy)
    return policy  # type: ignore[return-value]


@dataclass(frozen=True, slots=True)
class Configuration:
    """One complete operating setup of the machine.

    Rotors are listed left (slow) to right (fast); ring and start
    positions run parallel to them. Values are normalised to tuples, and
    plug connections to two-letter strings, so instances are hashable and
    compare by value.
    """

    rotor_ids: tuple[str, ...] = ("I", "II", "III")
    ring_positions: tuple[RotorSetting, ...] = (1, 1, 1)
    start_positions: tuple[RotorSetting, ...] = ("A", "A", "A")
    plug_connections: tuple[PlugConnection, ...] = ()
    reflector_id: str = "UKW_B"
    unsupported_characters: UnsupportedCharacters = "drop"

    def __post_init__(self) -> None:
        rotor_ids = parse_rotor_ids(self.rotor_ids)
        if not rotor_ids:
            raise InvalidConfiguration("at least one rotor is required")

        rings = parse_settings(self.ring_positions)
        starts = parse_settings(self.start_positions)
        for what, settings in (("ring positions", rings), ("start positions", starts)):
            if len(settings) != len(rotor_ids):
                raise RotorCountMismatch(what, len(rotor_ids), len(settings))
            for setting in settings:
                setting_ordinal(setting)

        plugs = tuple("".join(parse_connection(p)) for p in parse_plugs(self.plug_connections))
        Plugboard(plugs)  # rejects letters used twice

        object.__setattr__(self, "rotor_ids", rotor_ids)
        object.__setattr__(self, "ring_positions", rings)
        object.__setattr__(self, "start_positions", starts)
        object.__setattr__(self, "plug_connections", plugs)
        object.__setattr__(self, "unsupported_characters",
                           validate_policy(self.unsupported_characters))

    def replace(self, **changes: Any) -> "Configuration":
        """Return a copy with *changes* applied.

        Changing the rotor count without giving ring or start positions
        fills those with the defaults (ring 1, position A).
        """
        changes = {k: v for k, v in changes.items() if v is not None}
        unknown = set(changes) - set(FIELD_ORDER)
        if unknown:
            raise InvalidConfiguration(f"unknown configuration fields: {sorted(unknown)}")

        if "rotor_ids" in changes:
            count = len(parse_rotor_ids(changes["rotor_ids"]))
            if "ring_positions" not in changes and len(self.ring_positions) != count:
                changes["ring_positions"] = (1,) * count
            if "start_positions" not in changes and len(self.start_positions) != count:
                changes["start_positions"] = ("A",) * count
        return dataclasses.replace(self, **changes)

    def as_dict(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in FIELD_ORDER}


# ── text helpers (shared with the CLI and JSON files) ────────────
def parse_rotor_ids(value: str | Sequence[str]) -> tuple[str, ...]:
    """``"I,II,III"`` / ``"I II III"`` / ``["I", "II", "III"]`` → tuple."""
    if isinstance(value, str):
        return tuple(s for s in _split_re.split(value.strip()) if s)
    return tuple(value)


def parse_settings(value: str | Sequence[RotorSetting]) -> tuple[RotorSetting, ...]:
    """Ring/start settings as a sequence, ``"ADU"`` or ``"1 4 21"`` / ``"1,4,21"``."""
    if not isinstance(value, str):
        return tuple(value)
    text = value.strip().upper()
    if not text:
        return ()
    parts = [p for p in _split_re.split(text) if p]
    if len(parts) == 1 and not parts[0].isdigit() and all(ch in ALPHABET for ch in parts[0]):
        return tuple(parts[0])
    return tuple(int(p) if p.isdigit() else p for p in parts)


def parse_plugs(value: str | Sequence[PlugConnection]) -> tuple[PlugConnection, ...]:
    """``"AB CD"`` / ``"AB,CD"`` / ``["AB", ("C", "D")]`` → tuple of connections."""
    if isinstance(value, str):
        return tuple(p for p in _split_re.split(value.strip().upper()) if p)
    return tuple(tuple(p) if isinstance(p, list) else p for p in value)


DEFAULT_CONFIGURATION = Configuration()


# ── JSON persistence ─────────────────────────────────────────────
def from_dict(data: Mapping[str, Any]) -> dict[str, Any]:
    """Map a loose JSON object onto configuration field names.

    The result is a *partial* configuration: keys that are absent stay
    absent so the caller decides what they fall back to.
    """
    if not isinstance(data, Mapping):
        raise InvalidConfiguration("configuration must be a JSON object")

    partial: dict[str, Any] = {}
    for key, value in data.items():
        name = _ALIASES.get(key)
        if name is None:
            raise InvalidConfiguration(f"unknown configuration key {key!r}")
        if name in partial:
            raise InvalidConfiguration(f"configuration key {key!r} given twice")
        if name in ("reflector_id", "unsupported_characters"):
            if not isinstance(value, str):
                raise InvalidConfiguration(
                    f"configuration key {key!r} must be a string, got {value!r}"
                )
        elif not isinstance(value, (str, list)):
            raise InvalidConfiguration(
                f"configuration key {key!r} must be a string or a list, got {value!r}"
            )
        if name == "rotor_ids":
            value = parse_rotor_ids(value)
        elif name in ("ring_positions", "start_positions"):
            value = parse_settings(value)
        elif name == "plug_connections":
            value = parse_plugs(value)
        partial[name] = value
    return partial


def to_dict(config: Configuration) -> dict[str, Any]:
    return {
        "rotors": list(config.rotor_ids),
        "ring_set": list(config.ring_positions),
        "positions": list(config.start_positions),
        "plugs": list(config.plug_connections),
        "reflector": config.reflector_id,
        "unsupported": config.unsupported_characters,
    }


def load_config(path: str | Path) -> dict[str, Any]:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    partial = from_dict(data)
    debug.log("config", f"loaded {sorted(partial)} from {path}")
    return partial


def save_config(config: Configuration, path: str | Path) -> None:
    Path(path).write_text(json.dumps(to_dict(config), indent=2), encoding="utf-8")
