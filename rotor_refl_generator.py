# rotor_refl_generator.py
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from random import Random, SystemRandom
from typing import List

from keyboard_and_plugboard import ALPHABET
from wheel_model import Model

# ─── helpers ────────────────────────────────────────────────────────────


def build_rng(seed: int | None) -> Random | SystemRandom:
    """Return deterministic RNG when *seed* is given, else CSPRNG."""
    return Random(seed) if seed is not None else SystemRandom()  # CSPRNG


def make_rotor(rng: Random | SystemRandom) -> str:
    """Return a random permutation of the alphabet."""
    chars = list(ALPHABET)
    rng.shuffle(chars)
    return "".join(chars)


def make_notches(rng: Random | SystemRandom, max_notches: int) -> str:
    """Between one and *max_notches* turnover letters, alphabetical."""
    k = rng.randint(1, max(1, max_notches))
    return "".join(sorted(rng.sample(ALPHABET, k)))


def make_reflector(rng: Random | SystemRandom) -> str:
    """Return an involutory reflector wiring (no self-maps)."""
    remaining = list(ALPHABET)
    rng.shuffle(remaining)
    wiring = [""] * len(ALPHABET)

    while remaining:
        a, b = remaining.pop(), remaining.pop()
        ia, ib = ALPHABET.index(a), ALPHABET.index(b)
        wiring[ia], wiring[ib] = b, a

    return "".join(wiring)


def _rotor_label(idx: int) -> str:
    return f"L{idx}"


def _refl_label(idx: int) -> str:
    """UKW_D, UKW_E, … so the historical A-C stay free."""
    return f"UKW_{chr(ord('D') + idx)}"


def generate_model(
    rng: Random | SystemRandom,
    *,
    rotors: int = 5,
    reflectors: int = 2,
    max_notches: int = 1,
) -> Model:
    if not 0 <= reflectors <= 23:
        raise ValueError("reflector count must be between 0 and 23")
    model = Model()
    for i in range(rotors):
        model.add(_rotor_label(i + 1), f"{make_rotor(rng)}_{make_notches(rng, max_notches)}")
    for i in range(reflectors):
        model.add(_refl_label(i), make_reflector(rng))
    return model


def emit_json(model: Model) -> str:
    return json.dumps(model.to_dict(), indent=2)


# ─── CLI ───────────────────────────────────────────────────────────────


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generate random Enigma wheels.")
    p.add_argument("--rotors", type=int, default=5, help="How many rotors (default 5)")
    p.add_argument(
        "--reflectors", type=int, default=2, help="How many reflectors (default 2)"
    )
    p.add_argument(
        "--max-notches", type=int, default=1, help="Notches per rotor, at most (default 1)"
    )
    p.add_argument(
        "--seed",
        type=int,
        help="Integer seed for deterministic output "
        "(omit for cryptographically strong randomness)",
    )
    p.add_argument(
        "--outfile",
        type=Path,
        help="Write to this file (stdout if omitted)",
    )
    return p.parse_args(argv)


# ─── main ──────────────────────────────────────────────────────────────


def main(argv: List[str] | None = None) -> None:
    args = parse_args(argv)

    try:
        model = generate_model(
            build_rng(args.seed),
            rotors=args.rotors,
            reflectors=args.reflectors,
            max_notches=args.max_notches,
        )
    except ValueError as err:
        sys.exit(f"Aborted: {err}")
    text = emit_json(model)

    # output --------------------------------------------------------------
    if args.outfile:
        args.outfile.write_text(text, encoding="utf-8")
        print(f"Wrote {args.outfile} ({len(model)} wheels, {len(text)} bytes)")
    else:
        sys.stdout.write(text + "\n")


if __name__ == "__main__":
    main()
