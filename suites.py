# suites.py
from types import MappingProxyType
from typing import Mapping

from wheel_model import Model, parse_wiring

ETW = parse_wiring("ABCDEFGHIJKLMNOPQRSTUVWXYZ")

# Enigma I: three rotors, three reflectors
ENIGMA_I = Model({
    "ETW":   ETW,
    "UKW_A": "EJMZALYXVBWFCRQUONTSPIKHGD",
    "UKW_B": "YRUHQSLDPXNGOKMIEBFZCWVJAT",
    "UKW_C": "FVPJIAOYEDRZXWGCTKUQSBNMHL",
    "I":     "EKMFLGDQVZNTOWYHXUSPAIBRCJ_Q",
    "II":    "AJDKSIRUXBLHWTMCQGZNPYFVOE_E",
    "III":   "BDFHJLCPRTXVZNYEIWGAKMUSQO_V",
}).freeze()

# Enigma M3: superset with the naval rotors
ENIGMA_M3 = Model.merge(ENIGMA_I, Model({
    "IV":    "ESOVPZJAYQUIRHXLNFTGKDCMWB_J",
    "V":     "VZBRGITYUPSDNHLXAWMJQOFECK_Z",
    "VI":    "JPGVOUMFYQBENHZRDKASXLICTW_ZM",
    "VII":   "NZJHGRCXMYSWBOUFAIVLPEKQDT_ZM",
    "VIII":  "FKQHTLXOCBJSPDZRAMEWNIUYGV_ZM",
})).freeze()

DEFAULT_MODEL = ENIGMA_M3

SUITES: Mapping[str, Model] = MappingProxyType({
    "I":  ENIGMA_I,
    "M3": ENIGMA_M3,
})

def rotor_ids(model: Model) -> list[str]:
    """Ids usable as moving rotors (everything but entry wheel and reflectors)."""
    return [i for i in model if i != "ETW" and not model.get(i).is_symmetric()]


def reflector_ids(model: Model) -> list[str]:
    return [i for i in model if i != "ETW" and model.get(i).is_symmetric()]
