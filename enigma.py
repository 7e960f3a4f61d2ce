# enigma.py  ─────────────────────────────────────────────────────────
"""The cipher machine: plugboard, rotors and reflector wired together.

An Enigma is not thread-safe. Key presses step the rotors, so
calls to `enter` on one machine must be serialised by the
caller. The Model it reads from is never modified and
may be shared freely.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from configuration import (
    DEFAULT_CONFIGURATION,
    FIELD_ORDER,
    Configuration,
    UnsupportedCharacters,
    validate_policy,
)
from debug import Debug
from errors import (
    InvalidConfiguration,
    RotorCountMismatch,
    UnknownUnsupportedCharacterPolicy,
    UnsupportedCharacter,
)
from keyboard_and_plugboard import (
    PlugConnection,
    Plugboard,
    RotorSetting,
    setting_ordinal,
    try_parse_symbol,
)
from rotor_and_reflector import Reflector, Rotor
from suites import DEFAULT_MODEL
from wheel_model import Model

debug = Debug()


class Enigma:
    def __init__(
        self,
        model: Model | None = None,
        configuration: Configuration | Mapping[str, Any] | None = None,
    ) -> None:
        self.model: Model = model if model is not None else DEFAULT_MODEL
        self.rotor_ids: list[str] = []
        self.rotors: list[Rotor] = []
        self.plugboard = Plugboard()
        self.reflector_id: str = DEFAULT_CONFIGURATION.reflector_id
        self.reflector: Reflector = Reflector(DEFAULT_MODEL.get(self.reflector_id))
        self.unsupported_characters: UnsupportedCharacters = (
            DEFAULT_CONFIGURATION.unsupported_characters
        )

        if isinstance(configuration, Configuration):
            config = configuration
        else:
            config = DEFAULT_CONFIGURATION.replace(**dict(configuration or {}))
        self.configure_from(config)

    # ── configuration ───────────────────────────────────────────

    def configure(
        self,
        *,
        rotor_ids: Sequence[str] | None = None,
        ring_positions: Sequence[RotorSetting] | None = None,
        start_positions: Sequence[RotorSetting] | None = None,
        plug_connections: Iterable[PlugConnection] | None = None,
        reflector_id: str | None = None,
        unsupported_characters: UnsupportedCharacters | None = None,
    ) -> "Enigma":
        """Apply only the given fields, in rotor → ring → start → plugs →
        reflector → policy order. Changing rotors resets ring and start
        positions unless they are given in the same call.

        Every field is checked before any is applied, so a rejected call
        leaves the machine exactly as it was.
        """
        ids, rotors = self.rotor_ids, self.rotors
        if rotor_ids is not None:
            ids = list(rotor_ids)
            if not ids:
                raise InvalidConfiguration("at least one rotor is required")
            rotors = [Rotor(self.model.get(rotor_id)) for rotor_id in ids]

        rings = starts = None
        if ring_positions is not None:
            rings = self._check_count("ring positions", ring_positions, len(rotors))
        if start_positions is not None:
            starts = self._check_count("start positions", start_positions, len(rotors))
        plugboard = Plugboard(plug_connections) if plug_connections is not None else None
        reflector = (Reflector(self.model.get(reflector_id))
                     if reflector_id is not None else None)
        policy = (validate_policy(unsupported_characters)
                  if unsupported_characters is not None else None)

        # everything validated → commit
        if rotor_ids is not None:
            self.rotor_ids, self.rotors = ids, rotors
            debug.log("config", f"rotors {ids}")
        if rings is not None:
            for rotor, ring in zip(self.rotors, rings):
                rotor.set_ring_position(ring)
        if starts is not None:
            for rotor, pos in zip(self.rotors, starts):
                rotor.set_position(pos)
        if plugboard is not None:
            self.plugboard = plugboard
            debug.log("config", f"plugboard {plugboard.pairs()}")
        if reflector is not None:
            self.reflector, self.reflector_id = reflector, reflector_id  # type: ignore[assignment]
            debug.log("config", f"reflector {reflector_id}")
        if policy is not None:
            self.unsupported_characters = policy  # type: ignore[assignment]
        return self

    def configure_from(self, config: Configuration) -> "Enigma":
        return self.configure(**{name: getattr(config, name) for name in FIELD_ORDER})

    def snapshot(self) -> Configuration:
        """Current setup, with the rotors' *current* positions as start positions."""
        return Configuration(
            rotor_ids=tuple(self.rotor_ids),
            ring_positions=tuple(r.get_ring_position() for r in self.rotors),
            start_positions=tuple(self.get_positions()),
            plug_connections=tuple(self.plugboard.pairs()),
            reflector_id=self.reflector_id,
            unsupported_characters=self.unsupported_characters,
        )

    # ── rotors ──────────────────────────────────────────────────

    def set_rotors(self, rotor_ids: Sequence[str]) -> "Enigma":
        return self.configure(rotor_ids=rotor_ids)

    @staticmethod
    def _check_count(what: str, settings: Sequence[RotorSetting], count: int) -> list[int]:
        if len(settings) != count:
            raise RotorCountMismatch(what, count, len(settings))
        return [setting_ordinal(s) for s in settings]

    def set_ring_positions(self, ring_positions: Sequence[RotorSetting]) -> "Enigma":
        """Apply ring-stellung (1-based or letter) to every rotor, left to right."""
        return self.configure(ring_positions=ring_positions)

    def set_start_positions(self, start_positions: Sequence[RotorSetting]) -> "Enigma":
        """Turn each rotor to its visible window letter, left to right."""
        return self.configure(start_positions=start_positions)

    set_positions = set_start_positions

    def get_positions(self) -> list[str]:
        return [rotor.get_position() for rotor in self.rotors]

    # ── plugboard, reflector, policy ─────────────────────────────

    def set_plug_connections(self, connections: Iterable[PlugConnection]) -> "Enigma":
        """Replace every plug. Nothing changes if any connection is rejected."""
        return self.configure(plug_connections=connections)

    def add_plug_connection(self, connection: PlugConnection) -> "Enigma":
        self.plugboard.connect(connection)
        return self

    def set_reflector(self, reflector_id: str) -> "Enigma":
        return self.configure(reflector_id=reflector_id)

    def set_unsupported_character_behaviour(
        self, behaviour: UnsupportedCharacters
    ) -> "Enigma":
        return self.configure(unsupported_characters=behaviour)

    # ── stepping logic  ─────────────────────────────────────────

    def _step_rotors(self) -> None:
        """Advance rotors one key-press.

        The fast rotor always turns. A rotor sitting on its notch lets the
        pawl to its left engage, which turns its left neighbour and the
        notched rotor itself. That second push is the double step of the
        middle rotor. Each rotor moves at most once per key press.
        """
        count = len(self.rotors)
        turning = [False] * count
        turning[-1] = True
        for i in range(count - 1):
            if self.rotors[i + 1].at_notch():
                turning[i] = turning[i + 1] = True

        for rotor, turn in zip(self.rotors, turning):
            if turn:
                rotor.step()

    # ── encipher ───────────────────────────────────────────────

    def press_key(self, letter: str) -> str:
        """Press one key (a valid letter) and return the lit lamp."""
        self._step_rotors()
        debug.log("stepping", f"Rotor pos {''.join(self.get_positions())}")

        signal = self.plugboard.forward(letter)

        for rotor in reversed(self.rotors):
            signal = rotor.forward(signal)

        signal = self.reflector.reflect(signal)

        for rotor in self.rotors:
            signal = rotor.backward(signal)

        out_ch = self.plugboard.backward(signal)
        debug.log("encipher", f"{letter}->{out_ch}")
        return out_ch

    def enter(self, text: str) -> str:
        """Transcode *text*; rotor state carries over to the next call.

        Lowercase letters are upper-cased. Any other character is handled
        by the unsupported-character policy: dropped, copied unchanged, or
        rejected with UnsupportedCharacter.
        """
        out: list[str] = []
        for raw in text:
            letter = try_parse_symbol(raw.upper())
            if letter is None:
                policy = self.unsupported_characters
                if policy == "drop":
                    continue
                if policy == "keep":
                    out.append(raw)
                    continue
                if policy == "fail":
                    raise UnsupportedCharacter(raw)
                raise UnknownUnsupportedCharacterPolicy(policy)
            out.append(self.press_key(letter))
        return "".join(out)

    def __repr__(self) -> str:
        return (f"<Enigma rotors={','.join(self.rotor_ids)} "
                f"pos={''.join(self.get_positions())} reflector={self.reflector_id} "
                f"{self.plugboard!r}>")
