# settings_generator.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from random import Random, SystemRandom
from typing import List

from configuration import Configuration, save_config
from keyboard_and_plugboard import ALPHABET
from suites import SUITES, reflector_ids, rotor_ids
from wheel_model import Model

# ── helpers ───────────────────────────────────────────────────────


def build_rng(seed: int | None) -> Random | SystemRandom:
    """Deterministic RNG when *seed* given; CSPRNG otherwise."""
    return Random(seed) if seed is not None else SystemRandom()


def choose_pairs(alpha: str, k: int, rng: Random | SystemRandom) -> List[str]:
    """Return *k* disjoint plug pairs."""
    max_possible = len(alpha) // 2
    k = min(k, max_possible)
    pool = list(alpha)
    rng.shuffle(pool)
    return [a + b for a, b in zip(pool[::2], pool[1::2])][:k]


def generate_configuration(
    model: Model,
    rng: Random | SystemRandom,
    *,
    rotor_count: int = 3,
    max_pairs: int = 10,
) -> Configuration:
    """A random daily key: distinct rotors, rings, start positions, plugs."""
    available = rotor_ids(model)
    if not 1 <= rotor_count <= len(available):
        raise ValueError(
            f"Need between 1 and {len(available)} rotors for this model, got {rotor_count}"
        )
    reflectors = reflector_ids(model)
    if not reflectors:
        raise ValueError("Model has no symmetric wheel to use as reflector")

    rotors = rng.sample(available, rotor_count)
    return Configuration(
        rotor_ids=tuple(rotors),
        ring_positions=tuple(rng.randint(1, len(ALPHABET)) for _ in rotors),
        start_positions=tuple(rng.choices(ALPHABET, k=rotor_count)),
        plug_connections=tuple(choose_pairs(ALPHABET, max_pairs, rng)),
        reflector_id=rng.choice(reflectors),
    )


def parse_cli(argv: List[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generate an Enigma daily key")
    p.add_argument("--suite", choices=sorted(SUITES), default="M3", help="Machine model (default M3)")
    p.add_argument("--rotors", type=int, default=3, help="How many rotors (default 3)")
    p.add_argument("--pairs", type=int, default=10, help="Plugboard pairs (default 10)")
    p.add_argument("--seed", type=int, help="Deterministic seed (omit for random)")
    p.add_argument(
        "--outfile",
        type=Path,
        default=Path("enigma_config.json"),
        help="Destination JSON file (default: enigma_config.json)",
    )
    return p.parse_args(argv)


# ── main ─────────────────────────────────────────────────────────


def main(argv: List[str] | None = None) -> None:
    args = parse_cli(argv)
    rng = build_rng(args.seed)

    try:
        cfg = generate_configuration(
            SUITES[args.suite], rng, rotor_count=args.rotors, max_pairs=args.pairs
        )
    except ValueError as err:
        sys.exit(f"Aborted: {err}")

    save_config(cfg, args.outfile)
    print(f"✅  Wrote {args.outfile}\n"
        f"   suite       : {args.suite}\n"
        f"   rotors      : {list(cfg.rotor_ids)}\n"
        f"   reflector   : {cfg.reflector_id}\n"
        f"   rings       : {list(cfg.ring_positions)}\n"
        f"   positions   : {''.join(cfg.start_positions)}\n"
        f"   plug pairs  : {len(cfg.plug_connections)}")


if __name__ == "__main__":
    main()
