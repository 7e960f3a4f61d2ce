# errors.py
from __future__ import annotations


class EnigmaError(ValueError):
    """Base class for every fault raised by the cipher engine."""


class InvalidSymbol(EnigmaError):
    def __init__(self, value: object) -> None:
        super().__init__(f"{value!r} is not a letter supported by enigma")
        self.value = value


class InvalidOrdinal(EnigmaError):
    def __init__(self, value: object) -> None:
        super().__init__(f"invalid number {value!r}, must be between 1 and 26")
        self.value = value


class InvalidRotorSetting(EnigmaError):
    def __init__(self, setting: object) -> None:
        super().__init__(
            f"invalid rotor setting {setting!r} - use a letter A-Z or a number 1-26"
        )
        self.setting = setting


class UnknownWiringId(EnigmaError):
    def __init__(self, wiring_id: str, known: list[str]) -> None:
        super().__init__(
            f"Can't find rotor with id {wiring_id!r} in current model configuration. "
            f"Available rotors are: {', '.join(known)}"
        )
        self.wiring_id = wiring_id
        self.known = known


class InvalidWiringEncoding(EnigmaError):
    """Raised for malformed compact strings or structured wiring data."""


class AsymmetricReflector(EnigmaError):
    def __init__(self, letter: str, wired: str, reverse: str) -> None:
        super().__init__(
            f"Wiring is not symmetrical - {letter!r} is wired to {wired!r}, "
            f"but {wired!r} is wired to {reverse!r}"
        )
        self.pair = (letter, wired)


class RotorCountMismatch(EnigmaError):
    def __init__(self, what: str, expected: int, got: int) -> None:
        super().__init__(
            f"the current setup uses {expected} rotors, but {got} {what} were provided"
        )
        self.expected = expected
        self.got = got


class InvalidPlugConnection(EnigmaError):
    """Raised for malformed or conflicting plugboard connections."""


class UnsupportedCharacter(EnigmaError):
    def __init__(self, character: str) -> None:
        super().__init__(f"Enigma failed - encountered unsupported character {character!r}")
        self.character = character


class UnknownUnsupportedCharacterPolicy(EnigmaError):
    def __init__(self, policy: object) -> None:
        super().__init__(
            f"unknown unsupported character behaviour {policy!r}, "
            "expected one of drop, keep, fail"
        )
        self.policy = policy


class InvalidConfiguration(EnigmaError):
    """Raised when a configuration mapping or file cannot be interpreted."""
