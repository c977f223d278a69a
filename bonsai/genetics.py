"""
Genetic history encoder.

New DNA segments are minted here when a tree is planted or advances a stage.
This is the one place in the package that uses unseeded randomness: the
identity of a seed and the suffix of each evolution token are fresh draws, so
two trees with identical vitals still diverge. Everything downstream of an
appended segment is deterministic.
"""

from collections.abc import Sequence
from typing import NamedTuple

import numpy as np

from bonsai.config import MAX_STATS, Species

BASE36 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


class Vitals(NamedTuple):
    """Care vitals encoded into an evolution segment (each 0-100)."""

    health: float
    water: float
    fertilizer: float


def random_base36(length: int, rng: np.random.Generator | None = None) -> str:
    """Uppercase base-36 token of the given length."""
    if rng is None:
        rng = np.random.default_rng()
    digits = rng.integers(0, len(BASE36), size=length)
    return "".join(BASE36[int(d)] for d in digits)


def _hex_vital(value: float) -> str:
    clipped = int(np.clip(np.floor(value), 0, MAX_STATS))
    return f"{clipped:02X}"


def new_segment(
    prefix: str,
    vitals: Vitals | None = None,
    rng: np.random.Generator | None = None,
) -> str:
    """
    Mint a DNA segment.

    Without vitals this is a seed token: "{prefix}-XXXX". With vitals it is an
    evolution token "EVO-HHWWFF-XX" where each vital is truncated to 0-100 and
    written as two hex digits. The prefix only shapes seed tokens.
    """
    if vitals is None:
        return f"{prefix}-{random_base36(4, rng)}"

    h = _hex_vital(vitals.health)
    w = _hex_vital(vitals.water)
    f = _hex_vital(vitals.fertilizer)
    return f"EVO-{h}{w}{f}-{random_base36(2, rng)}"


def species_prefix(species: Species) -> str:
    """Seed-token prefix for a species, e.g. PIN for Pine."""
    return species.value[:3].upper()


def stage_prefix(next_stage: int) -> str:
    return f"S{int(next_stage)}"


def append_segment(history: Sequence[str], segment: str) -> tuple[str, ...]:
    """History with segment appended. The input is left untouched."""
    return (*history, segment)


def decode_vitals(segment: str) -> Vitals | None:
    """Recover the vitals encoded in an evolution segment, if any."""
    parts = segment.split("-")
    if len(parts) != 3 or parts[0] != "EVO" or len(parts[1]) != 6:
        return None
    try:
        h, w, f = (int(parts[1][i : i + 2], 16) for i in (0, 2, 4))
    except ValueError:
        return None
    return Vitals(health=float(h), water=float(w), fertilizer=float(f))
