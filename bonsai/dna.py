"""
DNA accessor.

Maps a generation request (depth, purpose offset, node lineage) to a segment
of the tree's genetic history and then to a hash-derived float.

Deeper recursion levels draw from later segments: depth d reads segment
(d // stride) % len(history). A tree that has lived through more stages
therefore carries its newer genes in its outer growth.
"""

from collections.abc import Sequence

from bonsai.hashing import float_at_text

DEFAULT_SEGMENT = "DEFAULT"

# Purpose offsets for each structural decision
SEED = 1
FAN = 2
TILT = 50
LEAF = 99
LENGTH = 100
ANGLE = 200
PRUNE = 300
SWAY = 400
FOLIAGE = 500
TINT = 999

# Keeps per-node offsets clear of every purpose offset above
LINEAGE_STRIDE = 10_000


def segment_for(dna_history: Sequence[str], depth: int, stride: int = 2) -> str:
    """Segment of the history that drives decisions at this depth."""
    if not dna_history:
        return DEFAULT_SEGMENT
    segment = dna_history[(depth // stride) % len(dna_history)]
    return segment or dna_history[0] or DEFAULT_SEGMENT


def float_at(
    dna_history: Sequence[str], depth: int, offset: int, stride: int = 2
) -> float:
    """Float in [0, 1) keyed by (segment, depth, offset)."""
    segment = segment_for(dna_history, depth, stride)
    return float_at_text(f"{segment}{depth}{offset}")


def node_random(
    dna_history: Sequence[str],
    depth: int,
    purpose: int,
    lineage: int = 0,
    stride: int = 2,
) -> float:
    """
    Per-node draw for one structural decision.

    Lineage identifies the node's position in the tree, so two siblings (or
    cousins) never hash the same key. The root has lineage 0 and reads the
    plain float_at stream.
    """
    return float_at(dna_history, depth, purpose + LINEAGE_STRIDE * lineage, stride)


def child_lineage(lineage: int, index: int) -> int:
    """Lineage of a parent's index-th child (fan-out at most 3)."""
    return lineage * 3 + index + 1
