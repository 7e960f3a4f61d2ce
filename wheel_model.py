# wheel_model.py
from __future__ import annotations

import json
import re
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any, Union

from debug import Debug
from errors import InvalidWiringEncoding, UnknownWiringId
from keyboard_and_plugboard import ALPHABET
from rotor_and_reflector import WiringDefinition

debug = Debug()

_compact_re = re.compile(r"^([A-Z]{26})(?:_([A-Z]{1,26}))?$")

# what Model.add accepts for one entry
WheelSpec = Union[WiringDefinition, str, Mapping[str, Any]]


def parse_wiring(text: str) -> WiringDefinition:
    """Parse ``"EKMFLGDQVZNTOWYHXUSPAIBRCJ_Q"`` style compact strings."""
    m = _compact_re.match(text) if isinstance(text, str) else None
    if not m:
        raise InvalidWiringEncoding(
            "Invalid Enigma rotor configuration - configuration string must contain "
            "exactly 26 uppercase letters, then optionally an underscore and more "
            f"letters for setting the notches, got {text!r}"
        )
    wiring, notches = m.groups()
    return WiringDefinition(tuple(wiring), frozenset(notches or ""))


def build_wiring(spec: WheelSpec) -> WiringDefinition:
    """Turn any accepted wheel description into a validated WiringDefinition.

    Accepted forms: a ready WiringDefinition, a compact string, or a mapping
    ``{"wiring": ..., "notches": ...}`` where *wiring* is either 26 letters or
    a letter → letter mapping and *notches* a string or list of letters.
    """
    if isinstance(spec, WiringDefinition):
        return spec
    if isinstance(spec, str):
        return parse_wiring(spec)
    if isinstance(spec, Mapping):
        if "wiring" not in spec:
            raise InvalidWiringEncoding(f"structured wheel is missing 'wiring': {dict(spec)!r}")
        wiring = spec["wiring"]
        notches = spec.get("notches", ())
        if not isinstance(notches, (str, list, tuple)):
            raise InvalidWiringEncoding(f"notches must be letters, got {notches!r}")
        if isinstance(wiring, Mapping):
            return WiringDefinition.from_mapping(wiring, notches)
        if isinstance(wiring, str):
            if len(wiring) != len(ALPHABET):
                raise InvalidWiringEncoding(
                    f"wiring {wiring!r} must contain exactly {len(ALPHABET)} letters"
                )
            return WiringDefinition(tuple(wiring), frozenset(notches))
        raise InvalidWiringEncoding(f"unsupported wiring value {wiring!r}")
    raise InvalidWiringEncoding(f"unsupported wheel description {spec!r}")


class Model:
    """Named catalogue of rotor and reflector wirings.

    Rotors and reflectors share one namespace. A model is only ever extended
    through `add`; machines read from it and never change it, so one
    model can back any number of machines.
    """

    def __init__(self, wheels: Mapping[str, WheelSpec] | None = None) -> None:
        self._wheels: dict[str, WiringDefinition] = {}
        self._frozen = False
        for wheel_id, spec in (wheels or {}).items():
            self.add(wheel_id, spec)

    def freeze(self) -> "Model":
        """Reject any further `add`; used for the built-in catalogues."""
        self._frozen = True
        return self

    def add(self, wheel_id: str, spec: WheelSpec) -> "Model":
        if self._frozen:
            raise TypeError("model is read-only, merge it into a new Model instead")
        try:
            self._wheels[wheel_id] = build_wiring(spec)
        except InvalidWiringEncoding as err:
            raise InvalidWiringEncoding(f"wheel {wheel_id!r}: {err}") from err
        debug.log("model", f"added wheel {wheel_id}")
        return self

    def get(self, wheel_id: str) -> WiringDefinition:
        try:
            return self._wheels[wheel_id]
        except KeyError:
            raise UnknownWiringId(wheel_id, self.ids()) from None

    def ids(self) -> list[str]:
        return list(self._wheels)

    @property
    def wheels(self) -> Mapping[str, WiringDefinition]:
        return MappingProxyType(self._wheels)

    @staticmethod
    def merge(first: "Model", second: "Model") -> "Model":
        """Right-biased union; neither input is modified."""
        merged = Model()
        merged._wheels = {**first._wheels, **second._wheels}
        return merged

    def __contains__(self, wheel_id: object) -> bool:
        return wheel_id in self._wheels

    def __iter__(self) -> Iterator[str]:
        return iter(self._wheels)

    def __len__(self) -> int:
        return len(self._wheels)

    def to_dict(self) -> dict[str, str]:
        return {wheel_id: w.encode() for wheel_id, w in self._wheels.items()}

    def __repr__(self) -> str:
        return f"<Model {' '.join(self._wheels)}>"


# ── JSON loading ──────────────────────────────────────────────────
def model_from_dict(data: Mapping[str, Any]) -> Model:
    if not isinstance(data, Mapping):
        raise InvalidWiringEncoding("machine config must be a JSON object of id → wheel")
    return Model(data)


def load_model(path: str | Path) -> Model:
    """Read a custom machine definition (id → compact string or {wiring, notches})."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    model = model_from_dict(data)
    debug.log("model", f"loaded {len(model)} wheels from {path}")
    return model


def save_model(model: Model, path: str | Path) -> None:
    Path(path).write_text(json.dumps(model.to_dict(), indent=2), encoding="utf-8")
