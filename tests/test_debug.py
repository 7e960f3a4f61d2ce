"""
Component logging switches.
"""
import logging

import pytest

from debug import COMPONENTS, Debug
from enigma import Enigma


@pytest.fixture
def dbg():
    d = Debug()
    yield d
    d.disable(*COMPONENTS)
    d.toggle_global(True)


class TestDebug:
    def test_all_off_by_default(self, dbg):
        assert not any(dbg.status().values())

    def test_unknown_component(self, dbg):
        with pytest.raises(ValueError, match="No such component"):
            dbg.enable("flux")

    def test_switches_are_shared(self, dbg):
        Debug().enable("encipher")
        assert dbg.status()["encipher"] is True
        dbg.toggle("encipher")
        assert Debug().status()["encipher"] is False

    def test_enabled_component_logs(self, dbg, caplog):
        caplog.set_level(logging.DEBUG, logger="ENIGMA")
        dbg.enable("encipher")
        Enigma().enter("A")
        assert "[ENCIPHER] A->B" in caplog.text

    def test_global_switch(self, dbg, caplog):
        caplog.set_level(logging.DEBUG, logger="ENIGMA")
        dbg.enable("encipher")
        dbg.toggle_global(False)
        Enigma().enter("A")
        assert "ENCIPHER" not in caplog.text

    def test_every_component_is_wired(self, dbg):
        assert "keyboard" not in COMPONENTS
        with pytest.raises(ValueError, match="No such component"):
            dbg.enable("keyboard")
