# main.py
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import IO, Any, Dict, Sequence

from configuration import (
    DEFAULT_CONFIGURATION,
    POLICIES,
    Configuration,
    load_config,
    parse_plugs,
    parse_rotor_ids,
    parse_settings,
)
from debug import COMPONENTS, Debug
from enigma import Enigma
from errors import EnigmaError
from suites import DEFAULT_MODEL
from wheel_model import Model, load_model

# ────────────────────────────────────────────────────────────────────────
#  0. Logging
# ────────────────────────────────────────────────────────────────────────


debug = Debug()

HELP = """\
Commands:
  /help            show this text
  /position        show the current rotor positions
  /position XYZ    turn the rotors to XYZ (one letter or number per rotor)
  /quit            leave (a blank line works too)
Anything else is en-/decrypted and the machine keeps its rotor state."""


# ────────────────────────────────────────────────────────────────────────
#  1. Building the machine
# ────────────────────────────────────────────────────────────────────────


def build_model(machine_config: str | Path | None) -> Model:
    """Built-in wheels, overridden/extended by a custom JSON file if given."""
    if machine_config is None:
        return DEFAULT_MODEL
    return Model.merge(DEFAULT_MODEL, load_model(machine_config))


def build_configuration(args: argparse.Namespace) -> Configuration:
    """Defaults < JSON file (--config) < individual command-line options."""
    partial: Dict[str, Any] = {}
    if args.config:
        partial.update(load_config(args.config))

    if args.wheel_order:
        partial["rotor_ids"] = parse_rotor_ids(args.wheel_order)
    if args.rings:
        partial["ring_positions"] = parse_settings(args.rings)
    if args.positions:
        partial["start_positions"] = parse_settings(args.positions)
    if args.plugs is not None:
        partial["plug_connections"] = parse_plugs(args.plugs)
    if args.reflector:
        partial["reflector_id"] = args.reflector
    if args.unsupported:
        partial["unsupported_characters"] = args.unsupported

    return DEFAULT_CONFIGURATION.replace(**partial)


def build_machine(args: argparse.Namespace) -> Enigma:
    return Enigma(build_model(args.machine_config), build_configuration(args))


# ────────────────────────────────────────────────────────────────────────
#  2. Streams & runtime commands
# ────────────────────────────────────────────────────────────────────────


def blocks(text: str, size: int) -> str:
    if size <= 0:
        return text
    return " ".join(text[i : i + size] for i in range(0, len(text), size))


def run_enigma(machine: Enigma, source: IO[str], sink: IO[str], block: int = 0) -> None:
    """Transcode *source* line by line; rotor state runs across lines."""
    for line in source:
        sink.write(blocks(machine.enter(line.rstrip("\n")), block))
        sink.write("\n")


def handle_command(machine: Enigma, line: str) -> str:
    """Execute one ``/command`` and return the reply text."""
    name, _, rest = line.strip().partition(" ")
    rest = rest.strip()
    if name == "/help":
        return HELP
    if name == "/position":
        if rest:
            machine.set_positions(parse_settings(rest))
        return "Position: " + "".join(machine.get_positions())
    return f"Unknown command {name!r} - type /help"


def interactive(machine: Enigma, block: int = 0) -> None:
    print(f"\nLoaded rotors {', '.join(machine.rotor_ids)} "
          f"with reflector {machine.reflector_id}.")
    print("Type /help for commands, blank line to quit.\n")
    while True:
        try:
            txt = input("Message > ")
        except EOFError:
            break
        if not txt.strip() or txt.strip() == "/quit":
            break
        if txt.startswith("/"):
            try:
                print(handle_command(machine, txt))
            except EnigmaError as err:
                print(f"❌  {err}")
            continue
        try:
            print(blocks(machine.enter(txt), block))
        except EnigmaError as err:
            print(f"❌  {err}")


# ────────────────────────────────────────────────────────────────────────
#  3. CLI helpers
# ────────────────────────────────────────────────────────────────────────


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="enigma", description="CLI tool for Enigma en-/decryption")
    p.add_argument("text", nargs="?", default="-", help="Text to en-/decrypt, use '-' for stdin (default)")
    p.add_argument("-w", "--wheel-order", metavar="W1,W2,W3", help='Wheel order, usually Roman numerals, e.g. "IV,II,V"')
    p.add_argument("-r", "--rings", metavar="SETTINGS", help='Ring settings, e.g. "1,1,1" or "AAA"')
    p.add_argument("-p", "--positions", metavar="SETTINGS", help='Start positions, e.g. "ADU" or "1 4 21"')
    p.add_argument("--plugs", metavar="PAIRS", help='Plugboard pairs, e.g. "AB CD EF"')
    p.add_argument("--reflector", metavar="ID", help="Reflector id (default UKW_B)")
    p.add_argument("-u", "--unsupported", choices=POLICIES, help="What to do with characters outside A-Z (default drop)")
    p.add_argument("-c", "--config", metavar="FILE", help="Load machine settings from JSON")
    p.add_argument("-m", "--machine-config", metavar="FILE", help="Path to custom machine (wheel) definitions in JSON")
    p.add_argument("-o", "--out", metavar="PATH", default="-", help="Output destination, '-' for stdout (default)")
    p.add_argument("--block", type=int, default=0, help="Group output in blocks of N letters (default off)")
    p.add_argument("--interactive", action="store_true", help="Start a prompt with runtime /commands")
    p.add_argument("--debug", nargs="+", choices=COMPONENTS, metavar="COMPONENT", default=[], help=f"Log components: {', '.join(COMPONENTS)}")
    return p.parse_args(argv)


# ────────────────────────────────────────────────────────────────────────
#  4. Main entry point
# ────────────────────────────────────────────────────────────────────────


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    debug.enable(*args.debug)

    try:
        machine = build_machine(args)
    except (EnigmaError, OSError, json.JSONDecodeError) as err:
        raise SystemExit(f"Failed to load configuration: {err}")

    if args.interactive:
        interactive(machine, args.block)
        return

    try:
        sink: IO[str] = sys.stdout if args.out == "-" else open(args.out, "w", encoding="utf-8")
    except OSError as err:
        raise SystemExit(f"Cannot write output: {err}")

    try:
        if args.text == "-":
            run_enigma(machine, sys.stdin, sink, args.block)
        else:
            sink.write(blocks(machine.enter(args.text), args.block) + "\n")
    except EnigmaError as err:
        raise SystemExit(f"❌  {err}")
    finally:
        if sink is not sys.stdout:
            sink.close()


if __name__ == "__main__":
    main()
