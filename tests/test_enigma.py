"""
Machine tests: known answers, stepping (double step included), plugboard,
reflector, unsupported characters and reconfiguration.
"""
import random

import pytest

from configuration import Configuration
from enigma import Enigma
from errors import (
    AsymmetricReflector,
    InvalidPlugConnection,
    InvalidRotorSetting,
    RotorCountMismatch,
    UnknownUnsupportedCharacterPolicy,
    UnknownWiringId,
    UnsupportedCharacter,
)
from keyboard_and_plugboard import ALPHABET, Plugboard
from suites import DEFAULT_MODEL, ENIGMA_I
from wheel_model import Model


def random_letters(seed: int, n: int) -> str:
    rng = random.Random(seed)
    return "".join(rng.choice(ALPHABET) for _ in range(n))


class TestKnownAnswers:
    def test_default_setup(self):
        assert Enigma().enter("AAAAA") == "BDZGO"

    def test_default_setup_decrypts(self):
        assert Enigma().enter("BDZGO") == "AAAAA"

    def test_ring_settings(self):
        machine = Enigma(configuration={"ring_positions": ("B", "B", "B")})
        assert machine.enter("AAAAA") == "EWTYX"

    def test_state_carries_across_calls(self):
        machine = Enigma()
        assert machine.enter("AA") + machine.enter("AAA") == "BDZGO"

    def test_enigma_i_model(self):
        assert Enigma(ENIGMA_I).enter("AAAAA") == "BDZGO"


class TestStepping:
    def test_right_rotor_steps_before_encryption(self):
        machine = Enigma()
        machine.enter("A")
        assert machine.get_positions() == ["A", "A", "B"]

    def test_double_step(self):
        machine = Enigma(configuration={"start_positions": "ADU"})
        seen = []
        for _ in range(4):
            machine.enter("A")
            seen.append("".join(machine.get_positions()))
        # the middle rotor moves on two consecutive key presses
        assert seen == ["ADV", "AEW", "BFX", "BFY"]

    def test_right_notch_turns_middle(self):
        machine = Enigma(configuration={"start_positions": "AAV"})
        machine.enter("A")
        assert machine.get_positions() == ["A", "B", "W"]

    def test_left_rotor_has_no_double_step(self):
        machine = Enigma(configuration={"start_positions": "QAA"})
        machine.enter("A")
        assert machine.get_positions() == ["Q", "A", "B"]

    def test_period_of_three_rotors(self):
        machine = Enigma()
        start = machine.get_positions()
        count = 0
        while True:
            machine.enter("A")
            count += 1
            if machine.get_positions() == start:
                break
        assert count == 26 * 25 * 26

    def test_notchless_rotors_behave_like_odometer_digit(self):
        model = Model.merge(DEFAULT_MODEL, Model({"N": "EKMFLGDQVZNTOWYHXUSPAIBRCJ"}))
        machine = Enigma(model, {"rotor_ids": ("N", "N", "N")})
        machine.enter("A" * 100)
        assert machine.get_positions() == ["A", "A", ALPHABET[100 % 26]]

    def test_single_rotor(self):
        machine = Enigma(configuration={"rotor_ids": ("I",)})
        machine.enter("A" * 30)
        assert machine.get_positions() == ["E"]

    def test_four_rotors_cascade(self):
        machine = Enigma(configuration={
            "rotor_ids": ("I", "II", "III", "I"),
            "start_positions": "AAAQ",
        })
        machine.enter("A")
        assert machine.get_positions() == ["A", "A", "B", "R"]


class TestInvolution:
    @pytest.mark.parametrize("seed", range(5))
    def test_decrypt_encrypt(self, seed):
        config = Configuration(
            rotor_ids=("II", "IV", "V"),
            ring_positions=(1, 20, 11),
            start_positions=("W", "X", "C"),
            plug_connections=("AV", "BS", "CG", "DL", "FU", "HZ", "IN", "KM", "OW", "RX"),
            reflector_id="UKW_B",
        )
        text = random_letters(seed, 500)
        cipher = Enigma(configuration=config).enter(text)
        assert cipher != text
        assert Enigma(configuration=config).enter(cipher) == text

    def test_no_letter_encrypts_to_itself(self):
        text = random_letters(99, 2000)
        cipher = Enigma().enter(text)
        assert all(p != c for p, c in zip(text, cipher))

    def test_lowercase_is_uppercased(self):
        assert Enigma().enter("aaaaa") == "BDZGO"


class TestPlugboard:
    def test_swap_happens_on_both_sides(self):
        plain = Enigma()
        plugged = Enigma(configuration={"plug_connections": ["AB"]})
        expected = Plugboard(["AB"]).swap(plain.enter("B"))
        assert plugged.enter("A") == expected

    def test_symmetric_pair(self):
        a = Enigma().add_plug_connection("AB").enter("A")
        b = Enigma().add_plug_connection(("B", "A")).enter("B")
        plain_b, plain_a = Enigma().enter("B"), Enigma().enter("A")
        swap = Plugboard(["AB"]).swap
        assert a == swap(plain_b)
        assert b == swap(plain_a)

    def test_add_conflicting(self):
        machine = Enigma(configuration={"plug_connections": ["AB"]})
        with pytest.raises(InvalidPlugConnection):
            machine.add_plug_connection("BC")
        assert machine.plugboard.pairs() == ["AB"]

    def test_set_replaces_all(self):
        machine = Enigma(configuration={"plug_connections": ["AB"]})
        machine.set_plug_connections(["CD"])
        assert machine.plugboard.pairs() == ["CD"]

    def test_set_is_atomic(self):
        machine = Enigma(configuration={"plug_connections": ["AB"]})
        with pytest.raises(InvalidPlugConnection):
            machine.set_plug_connections(["CD", "EF", "EG"])
        assert machine.plugboard.pairs() == ["AB"]


class TestReflector:
    def test_other_reflector_changes_output(self):
        machine = Enigma(configuration={"reflector_id": "UKW_C"})
        assert machine.enter("AAAAA") != "BDZGO"

    def test_asymmetric_rejected(self):
        machine = Enigma()
        with pytest.raises(AsymmetricReflector):
            machine.set_reflector("I")
        assert machine.reflector_id == "UKW_B"
        assert machine.enter("AAAAA") == "BDZGO"

    def test_unknown_reflector(self):
        with pytest.raises(UnknownWiringId):
            Enigma().set_reflector("UKW_Z")

    def test_custom_model_reflector(self):
        model = Model.merge(DEFAULT_MODEL, Model({"MIRROR": "BADCFEHGJILKNMPORQTSVUXWZY"}))
        machine = Enigma(model, {"reflector_id": "MIRROR"})
        cipher = machine.enter("ENIGMA")
        assert Enigma(model, {"reflector_id": "MIRROR"}).enter(cipher) == "ENIGMA"


class TestUnsupportedCharacters:
    TEXT = "Hello, World!"

    def test_drop(self):
        out = Enigma().enter(self.TEXT)
        assert len(out) == 10
        assert out.isalpha() and out.isupper()
        assert out == Enigma().enter("HELLOWORLD")

    def test_keep(self):
        out = Enigma(configuration={"unsupported_characters": "keep"}).enter(self.TEXT)
        assert len(out) == len(self.TEXT)
        assert out[5:7] == ", "
        assert out[-1] == "!"
        assert out[:5] + out[7:12] == Enigma().enter("HELLOWORLD")

    def test_fail(self):
        machine = Enigma(configuration={"unsupported_characters": "fail"})
        with pytest.raises(UnsupportedCharacter) as info:
            machine.enter(self.TEXT)
        assert info.value.character == ","

    def test_unsupported_does_not_step(self):
        machine = Enigma(configuration={"unsupported_characters": "keep"})
        machine.enter("1 2 3")
        assert machine.get_positions() == ["A", "A", "A"]

    def test_setter_rejects_unknown_policy(self):
        machine = Enigma()
        with pytest.raises(UnknownUnsupportedCharacterPolicy):
            machine.set_unsupported_character_behaviour("ignore")  # type: ignore[arg-type]
        assert machine.unsupported_characters == "drop"

    def test_corrupted_policy_state(self):
        machine = Enigma()
        machine.unsupported_characters = "bogus"  # type: ignore[assignment]
        with pytest.raises(UnknownUnsupportedCharacterPolicy):
            machine.enter("A!")


class TestConfiguration:
    def test_rotor_change_keeps_plugs_and_reflector(self):
        machine = Enigma(configuration={
            "plug_connections": ["AB", "CD"],
            "reflector_id": "UKW_C",
            "ring_positions": (5, 6, 7),
            "start_positions": "XYZ",
        })
        machine.enter("HELLO")
        machine.configure(rotor_ids=["I", "II", "III"])
        assert machine.plugboard.pairs() == ["AB", "CD"]
        assert machine.reflector_id == "UKW_C"
        assert machine.get_positions() == ["A", "A", "A"]
        assert [r.get_ring_position() for r in machine.rotors] == [1, 1, 1]

    def test_configure_chains(self):
        machine = Enigma().configure(start_positions="AAA").configure(reflector_id="UKW_B")
        assert machine.enter("AAAAA") == "BDZGO"

    def test_configure_from_dict(self):
        machine = Enigma().configure(**{"ring_positions": (2, 2, 2)})
        assert machine.enter("AAAAA") == "EWTYX"

    def test_unknown_rotor_leaves_machine_intact(self):
        machine = Enigma()
        with pytest.raises(UnknownWiringId, match="IX"):
            machine.set_rotors(["I", "IX", "III"])
        assert machine.rotor_ids == ["I", "II", "III"]
        assert machine.enter("AAAAA") == "BDZGO"

    def test_position_count_mismatch(self):
        machine = Enigma()
        with pytest.raises(RotorCountMismatch):
            machine.set_start_positions(["A", "B"])
        with pytest.raises(RotorCountMismatch):
            machine.set_ring_positions([1, 1, 1, 1])

    def test_bad_position_is_atomic(self):
        machine = Enigma()
        with pytest.raises(InvalidRotorSetting):
            machine.set_start_positions(["B", "C", 99])
        assert machine.get_positions() == ["A", "A", "A"]

    def test_rejected_configure_changes_nothing(self):
        machine = Enigma(configuration={"plug_connections": ["AB"]})
        with pytest.raises(RotorCountMismatch):
            machine.configure(rotor_ids=["I", "II", "III", "IV"], ring_positions=[1, 1, 1])
        assert machine.rotor_ids == ["I", "II", "III"]
        assert len(machine.rotors) == 3
        with pytest.raises(UnknownWiringId):
            machine.configure(plug_connections=["CD", "EF"], reflector_id="UKW_Z")
        assert machine.plugboard.pairs() == ["AB"]
        assert machine.reflector_id == "UKW_B"
        with pytest.raises(UnknownUnsupportedCharacterPolicy):
            machine.configure(start_positions="QEV", unsupported_characters="shout")
        assert machine.get_positions() == ["A", "A", "A"]
        assert machine.enter("AAAAA") == Enigma(configuration={"plug_connections": ["AB"]}).enter("AAAAA")

    def test_duplicate_rotors_are_independent(self):
        machine = Enigma(configuration={"rotor_ids": ("I", "I", "I"), "start_positions": "ABC"})
        assert machine.get_positions() == ["A", "B", "C"]
        assert machine.rotors[0] is not machine.rotors[1]

    def test_snapshot_resumes(self):
        machine = Enigma(configuration={"plug_connections": ["QW"], "ring_positions": (3, 2, 1)})
        machine.enter(random_letters(1, 37))
        resumed = Enigma(configuration=machine.snapshot())
        text = random_letters(2, 40)
        assert resumed.enter(text) == machine.enter(text)

    def test_models_are_shared_not_copied(self):
        a, b = Enigma(), Enigma()
        assert a.model is b.model is DEFAULT_MODEL
        a.enter("ABC")
        assert b.get_positions() == ["A", "A", "A"]
