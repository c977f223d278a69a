"""
Procedural branch skeleton for a bonsai.

The generator is a seeded L-system: every structural decision (pruning,
length decay, split angle, fan width, leaf presence) is a draw from the
DNA hash stream keyed by (segment, depth, purpose, lineage). The same genetic
record always yields the same tree, so it can be regenerated every frame or
after a reload without storing any geometry.

Each BranchNode holds its transform relative to its parent:
    - translation: always the end of the parent, (0, parent.length, 0)
    - rotation: `tilt` about x, then `angle` about z (radians)
    - length, start radius, end radius

Nodes own their children outright; there are no back-references.
"""

from __future__ import annotations

import colorsys
import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from matplotlib.colors import to_hex, to_rgb

from bonsai import dna as genes
from bonsai.config import (
    SPECIES_CONFIG,
    STYLE_CONFIG,
    GeneticRecord,
    GrowthStage,
    GrowthStyle,
    LeafPolicy,
    Species,
    SpeciesConfig,
    StyleConfig,
    complexity,
)

PRUNE_THRESHOLD = 0.85
RADIUS_DECAY = 0.7
LENGTH_DECAY_BASE = 0.75
LENGTH_DECAY_RANGE = 0.1
SPLIT_ANGLE = 0.6
ANGLE_VARIANCE = 0.6
MAX_TILT = 0.6
WIRING_SHEAR = 0.2
TINT_RANGE = 0.1
SWAY_AMPLITUDE = 0.02

# Fixed-form foliage cluster: (offset, scale) of each puff
CLUSTER_PUFFS = (
    ((0.0, 0.0, 0.0), 1.0),
    ((0.3, 0.2, 0.0), 0.7),
    ((-0.2, 0.3, 0.2), 0.8),
)
PUFF_RADIUS = 0.4

DEFAULT_SPECIES = Species.OAK
UNKNOWN_STAGE = -1  # grows to depth 1


# =============================================================================
# NODE TYPES
# =============================================================================

@dataclass(frozen=True)
class Foliage:
    """A foliage marker attached at the end of a terminal branch."""

    kind: str  # cluster | needle | broad | flower
    offset: tuple[float, float, float]
    scale: float
    rotation: float = 0.0


@dataclass(frozen=True)
class BranchNode:
    """
    One branch segment and the subtree growing from its tip.

    Attributes:
        depth: 0 for the trunk
        index: position among its siblings
        lineage: unique id of this position in the tree (root = 0)
        length: segment length
        radius: radius at the base
        end_radius: radius at the tip
        angle: z-rotation relative to parent (+ = left)
        tilt: x-rotation relative to parent
        terminal: reached the depth limit (pruned-bare nodes are not terminal)
        sway_phase, sway_amplitude: wind animation parameters
    """

    depth: int
    index: int
    lineage: int
    length: float
    radius: float
    end_radius: float
    angle: float
    tilt: float
    terminal: bool
    sway_phase: float
    sway_amplitude: float
    children: tuple[BranchNode, ...] = ()
    foliage: tuple[Foliage, ...] = ()

    def iter_nodes(self) -> Iterator[BranchNode]:
        """Depth-first, parent before children."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()


@dataclass(frozen=True)
class SeedVisual:
    """Capsule-and-sprout shape shown before the first branching."""

    radius: float
    length: float
    color: str
    sprout_offset: tuple[float, float, float] = (0.1, 0.2, 0.0)
    sprout_rotation: float = -0.5
    sprout_size: tuple[float, float] = (0.1, 0.2)
    sprout_color: str = "#8bc34a"


@dataclass(frozen=True)
class TreeSkeleton:
    """Complete generator output for one evaluation."""

    species: Species
    stage: int
    style: GrowthStyle
    max_depth: int
    leaf_color: str
    bark_color: str
    sway_speed: float
    root: BranchNode | None = None
    seed: SeedVisual | None = None

    def iter_nodes(self) -> Iterator[BranchNode]:
        if self.root is not None:
            yield from self.root.iter_nodes()

    @property
    def num_nodes(self) -> int:
        return sum(1 for _ in self.iter_nodes())

    @property
    def deepest(self) -> int:
        """Deepest node depth, -1 for a seed."""
        return max((node.depth for node in self.iter_nodes()), default=-1)

    def terminals(self) -> list[BranchNode]:
        return [node for node in self.iter_nodes() if node.terminal]

    @property
    def num_foliage(self) -> int:
        return sum(len(node.foliage) for node in self.iter_nodes())

    def summary(self) -> dict[str, float]:
        """Scalar description of the structure."""
        nodes = list(self.iter_nodes())
        return {
            "Nodes": len(nodes),
            "Terminals": sum(1 for n in nodes if n.terminal),
            "Foliage": sum(len(n.foliage) for n in nodes),
            "MaxDepth": self.max_depth,
            "Deepest": self.deepest,
            "TotalLength": sum(n.length for n in nodes),
        }

    def print_summary(self) -> None:
        """Print a formatted summary table to stdout."""
        try:
            stage = GrowthStage(self.stage).name
        except ValueError:
            stage = str(self.stage)
        print("\n" + "=" * 40)
        print(f"{self.species.value.upper()} / {stage} ({self.style.value})")
        print("=" * 40)
        for key, value in self.summary().items():
            if isinstance(value, int):
                print(f"{key:20s}: {value:>10d}")
            else:
                print(f"{key:20s}: {value:>10.3f}")
        print(f"{'LeafColor':20s}: {self.leaf_color:>10s}")
        print("=" * 40)


# =============================================================================
# HELPERS
# =============================================================================

def split_angles(count: int) -> tuple[float, ...]:
    """
    Base z-angles for a split into count children.

    Two children open at +/-SPLIT_ANGLE; wider fans spread evenly across the
    same range, first child on the left.
    """
    if count <= 1:
        return (0.0,) * count
    step = 2 * SPLIT_ANGLE / (count - 1)
    return tuple(SPLIT_ANGLE - step * i for i in range(count))


def shift_lightness(color: str, shift: float) -> str:
    """Offset the HSL lightness of a hex color, clamped to [0, 1]."""
    r, g, b = to_rgb(color)
    h, l, s = colorsys.rgb_to_hls(r, g, b)
    l = min(1.0, max(0.0, l + shift))
    return to_hex(colorsys.hls_to_rgb(h, l, s))


def resolve_species(species: Species | str) -> Species:
    """Species enum for a value, degrading to the default species."""
    try:
        return Species(species)
    except ValueError:
        return DEFAULT_SPECIES


def resolve_stage(stage) -> int:
    """Stage as an int, or UNKNOWN_STAGE for anything that is not a stage."""
    try:
        return int(GrowthStage(stage))
    except (ValueError, TypeError):
        return UNKNOWN_STAGE


def species_config(species: Species | str) -> SpeciesConfig:
    return SPECIES_CONFIG[resolve_species(species)]


def leaf_tint(
    dna_history: Sequence[str], base_color: str, max_depth: int, stride: int = 2
) -> str:
    """One tint per tree: the base leaf color nudged by a single DNA draw."""
    shift = (genes.float_at(dna_history, max_depth, genes.TINT, stride) - 0.5) * TINT_RANGE
    return shift_lightness(base_color, shift)


def seed_visual(
    dna_history: Sequence[str], species: Species | str, stride: int = 2
) -> SeedVisual:
    """Seed capsule, scaled by one DNA draw."""
    h = genes.float_at(dna_history, 0, genes.SEED, stride)
    return SeedVisual(
        radius=0.15 + h * 0.05,
        length=0.3 + h * 0.1,
        color=species_config(species).bark_color,
    )


def sway_angle(node: BranchNode, speed: float, time: float) -> float:
    """Render-time wind offset for a node. Structure is never touched."""
    return node.sway_amplitude * math.sin(time * speed + node.sway_phase)


# =============================================================================
# GENERATION
# =============================================================================

@dataclass(frozen=True)
class _Growth:
    """Inputs carried unchanged through the recursion."""

    dna: tuple[str, ...]
    style: StyleConfig
    species: SpeciesConfig
    max_depth: int
    pruning_count: int
    shear: float

    def draw(self, depth: int, purpose: int, lineage: int) -> float:
        return genes.node_random(self.dna, depth, purpose, lineage, self.style.stride)


def _branch_count(g: _Growth, depth: int, lineage: int) -> int:
    if g.style.fixed_split is not None:
        return g.style.fixed_split
    return math.floor(g.draw(depth, genes.FAN, lineage) * 2) + 2


def _foliage(g: _Growth, depth: int, lineage: int) -> tuple[Foliage, ...]:
    if g.style.leaf_policy is LeafPolicy.CLUSTER:
        return tuple(
            Foliage(kind="cluster", offset=offset, scale=scale)
            for offset, scale in CLUSTER_PUFFS
        )

    if g.draw(depth, genes.LEAF, lineage) <= g.style.leaf_threshold:
        return ()
    return (
        Foliage(
            kind=g.species.leaf_shape,
            offset=(0.0, 0.0, 0.0),
            scale=0.8 + 0.4 * g.draw(depth, genes.FOLIAGE, lineage),
            rotation=(g.draw(depth, genes.FOLIAGE + 1, lineage) - 0.5),
        ),
    )


def _grow(
    g: _Growth,
    depth: int,
    index: int,
    lineage: int,
    length: float,
    radius: float,
    angle: float,
) -> BranchNode | None:
    # Pruning only reaches past the first fork
    if depth > 1:
        if g.draw(depth, genes.PRUNE + g.pruning_count, lineage) > PRUNE_THRESHOLD:
            return None

    terminal = depth >= g.max_depth
    next_length = length * (
        LENGTH_DECAY_BASE + LENGTH_DECAY_RANGE * g.draw(depth, genes.LENGTH, lineage)
    )
    next_radius = radius * RADIUS_DECAY
    tilt = 0.0 if depth == 0 else g.draw(depth, genes.TILT, lineage) * MAX_TILT

    children: tuple[BranchNode, ...] = ()
    foliage: tuple[Foliage, ...] = ()
    if terminal:
        foliage = _foliage(g, depth, lineage)
    else:
        variance = g.draw(depth, genes.ANGLE, lineage) * ANGLE_VARIANCE - ANGLE_VARIANCE / 2
        grown = []
        for i, base in enumerate(split_angles(_branch_count(g, depth, lineage))):
            child = _grow(
                g,
                depth + 1,
                i,
                genes.child_lineage(lineage, i),
                next_length,
                next_radius,
                base * g.species.branch_spread + variance + g.shear,
            )
            if child is not None:
                grown.append(child)
        children = tuple(grown)

    return BranchNode(
        depth=depth,
        index=index,
        lineage=lineage,
        length=length,
        radius=radius,
        end_radius=next_radius,
        angle=angle,
        tilt=tilt,
        terminal=terminal,
        sway_phase=g.draw(depth, genes.SWAY, lineage) * 2 * math.pi,
        sway_amplitude=SWAY_AMPLITUDE * (depth + 1) / (g.max_depth + 1),
        children=children,
        foliage=foliage,
    )


def build_skeleton(
    species: Species | str,
    stage: int,
    dna_history: Sequence[str],
    pruning_count: int = 0,
    wiring_state: int = 0,
    style: GrowthStyle = GrowthStyle.MESH,
) -> TreeSkeleton:
    """
    Generate a tree from raw parameters.

    Tolerates an empty history, an unknown species, and an unknown stage
    value, falling back to defaults so a render never fails.
    """
    style_cfg = STYLE_CONFIG[style]
    resolved = resolve_species(species)
    sp_cfg = SPECIES_CONFIG[resolved]
    history = tuple(dna_history)
    stage = resolve_stage(stage)
    max_depth = complexity(stage, style)

    skeleton = dict(
        species=resolved,
        stage=stage,
        style=style,
        max_depth=max_depth,
        leaf_color=leaf_tint(history, sp_cfg.leaf_color, max_depth, style_cfg.stride),
        bark_color=sp_cfg.bark_color,
        sway_speed=0.3 if stage == GrowthStage.MASTER else 0.5,
    )

    if max_depth == 0:
        return TreeSkeleton(
            **skeleton, seed=seed_visual(history, resolved, style_cfg.stride)
        )

    g = _Growth(
        dna=history,
        style=style_cfg,
        species=sp_cfg,
        max_depth=max_depth,
        pruning_count=pruning_count,
        shear=wiring_state * WIRING_SHEAR,
    )
    root = _grow(
        g,
        depth=0,
        index=0,
        lineage=0,
        length=style_cfg.trunk_length,
        radius=style_cfg.trunk_radius,
        angle=0.0,
    )
    return TreeSkeleton(**skeleton, root=root)


def generate(
    record: GeneticRecord, style: GrowthStyle = GrowthStyle.MESH
) -> TreeSkeleton:
    """Generate the tree for a validated genetic record."""
    return build_skeleton(
        species=record.species,
        stage=record.stage,
        dna_history=record.dna_history,
        pruning_count=record.pruning_count,
        wiring_state=record.wiring_state,
        style=style,
    )


__all__ = [
    "BranchNode",
    "Foliage",
    "SeedVisual",
    "TreeSkeleton",
    "build_skeleton",
    "generate",
    "leaf_tint",
    "resolve_stage",
    "seed_visual",
    "shift_lightness",
    "split_angles",
    "sway_angle",
]
