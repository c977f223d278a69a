"""
3D mesh hierarchy for bonsai skeletons.

Each BranchNode becomes a group whose local transform is

    T(0, parent.length, 0) @ Rx(tilt) @ Ry(0) @ Rz(angle + sway)

(Euler XYZ order, y up). World transforms are accumulated down the tree with
4x4 matrices, and every group emits one tapered cylinder along its local +y
axis. Terminal groups also emit their foliage at the branch tip.

The output is backend-neutral: cylinder endpoints and radii, sphere centers,
and the pot/seed primitives a scene graph needs to instantiate the tree.
"""

from dataclasses import dataclass, field

import jax.numpy as jnp
from jax import Array

from bonsai.config import STAGE_CONFIG, GrowthStage
from bonsai.skeleton import PUFF_RADIUS, BranchNode, TreeSkeleton, sway_angle

SOIL_COLOR = "#3e2723"
TREE_BASE_INSET = 0.2  # trunk starts slightly below the pot rim
SEED_LIFT = 0.1


def translation(x: float, y: float, z: float) -> Array:
    """4x4 translation matrix."""
    return jnp.eye(4).at[:3, 3].set(jnp.array([x, y, z], dtype=jnp.float32))


def rotation_xyz(x: float, y: float, z: float) -> Array:
    """4x4 rotation for Euler angles applied in XYZ order."""
    cx, sx = jnp.cos(x), jnp.sin(x)
    cy, sy = jnp.cos(y), jnp.sin(y)
    cz, sz = jnp.cos(z), jnp.sin(z)
    rx = jnp.array([[1, 0, 0, 0], [0, cx, -sx, 0], [0, sx, cx, 0], [0, 0, 0, 1]])
    ry = jnp.array([[cy, 0, sy, 0], [0, 1, 0, 0], [-sy, 0, cy, 0], [0, 0, 0, 1]])
    rz = jnp.array([[cz, -sz, 0, 0], [sz, cz, 0, 0], [0, 0, 1, 0], [0, 0, 0, 1]])
    return rx @ ry @ rz


def transform_point(matrix: Array, point) -> Array:
    """Apply a 4x4 transform to a 3D point."""
    p = jnp.array([point[0], point[1], point[2], 1.0], dtype=jnp.float32)
    return (matrix @ p)[:3]


@dataclass
class MeshSegment:
    """Tapered cylinder for one branch, in world space."""

    start: Array  # [3]
    end: Array  # [3]
    radius: float
    end_radius: float
    depth: int
    lineage: int
    color: str

    @property
    def length(self) -> Array:
        return jnp.linalg.norm(self.end - self.start)


@dataclass
class FoliageMesh:
    """Low-poly foliage sphere (or glyph anchor) in world space."""

    center: Array  # [3]
    radius: float
    kind: str
    color: str


@dataclass
class PotMesh:
    height: float
    radius_top: float
    radius_bottom: float
    color: str
    soil_radius: float
    soil_height: float
    soil_color: str = SOIL_COLOR


@dataclass
class SeedMesh:
    center: Array  # [3]
    radius: float
    length: float
    color: str
    sprout_center: Array  # [3]
    sprout_rotation: float
    sprout_size: tuple[float, float]
    sprout_color: str


@dataclass
class MeshScene:
    """All primitives for one frame of a bonsai."""

    pot: PotMesh
    segments: list[MeshSegment] = field(default_factory=list)
    foliage: list[FoliageMesh] = field(default_factory=list)
    seed: SeedMesh | None = None

    def segment_arrays(self) -> tuple[Array, Array]:
        """(starts, ends) stacked as [num_segments, 3] arrays."""
        if not self.segments:
            empty = jnp.zeros((0, 3))
            return empty, empty
        starts = jnp.stack([s.start for s in self.segments])
        ends = jnp.stack([s.end for s in self.segments])
        return starts, ends

    def bounds(self) -> tuple[Array, Array]:
        """Axis-aligned (min, max) corners over segments and foliage."""
        pts = [s.start for s in self.segments] + [s.end for s in self.segments]
        pts += [f.center for f in self.foliage]
        if self.seed is not None:
            pts.append(self.seed.center)
        if not pts:
            zero = jnp.zeros(3)
            return zero, zero
        arr = jnp.stack(pts)
        return jnp.min(arr, axis=0), jnp.max(arr, axis=0)


def build_pot(stage: int) -> PotMesh:
    try:
        cfg = STAGE_CONFIG[GrowthStage(stage)]
    except ValueError:
        cfg = STAGE_CONFIG[GrowthStage.SEED]
    return PotMesh(
        height=cfg.pot_depth,
        radius_top=cfg.pot_width,
        radius_bottom=cfg.pot_width * 0.8,
        color=cfg.pot_color,
        soil_radius=cfg.pot_width * 0.95,
        soil_height=cfg.pot_depth - 0.1,
    )


def build_mesh(skeleton: TreeSkeleton, time: float | None = None) -> MeshScene:
    """
    Build world-space mesh primitives from a skeleton.

    Args:
        skeleton: Generator output
        time: Animation time for wind sway (None = at rest)

    Returns:
        MeshScene with exactly one segment per BranchNode
    """
    pot = build_pot(skeleton.stage)
    scene = MeshScene(pot=pot)
    base = translation(0.0, pot.height - TREE_BASE_INSET, 0.0)

    if skeleton.seed is not None:
        seed = skeleton.seed
        group = base @ translation(0.0, SEED_LIFT, 0.0)
        scene.seed = SeedMesh(
            center=transform_point(group, (0.0, 0.1, 0.0)),
            radius=seed.radius,
            length=seed.length,
            color=seed.color,
            sprout_center=transform_point(group, seed.sprout_offset),
            sprout_rotation=seed.sprout_rotation,
            sprout_size=seed.sprout_size,
            sprout_color=seed.sprout_color,
        )
        return scene

    def walk(node: BranchNode, parent_world: Array, offset: float) -> None:
        angle = node.angle
        if time is not None:
            angle += sway_angle(node, skeleton.sway_speed, time)
        world = parent_world @ translation(0.0, offset, 0.0) @ rotation_xyz(node.tilt, 0.0, angle)

        tip = transform_point(world, (0.0, node.length, 0.0))
        scene.segments.append(
            MeshSegment(
                start=transform_point(world, (0.0, 0.0, 0.0)),
                end=tip,
                radius=node.radius,
                end_radius=node.end_radius,
                depth=node.depth,
                lineage=node.lineage,
                color=skeleton.bark_color,
            )
        )

        for leaf in node.foliage:
            local = (leaf.offset[0], node.length + leaf.offset[1], leaf.offset[2])
            radius = leaf.scale * PUFF_RADIUS
            scene.foliage.append(
                FoliageMesh(
                    center=transform_point(world, local),
                    radius=radius,
                    kind=leaf.kind,
                    color=skeleton.leaf_color,
                )
            )

        for child in node.children:
            walk(child, world, node.length)

    if skeleton.root is not None:
        walk(skeleton.root, base, 0.0)
    return scene


__all__ = [
    "FoliageMesh",
    "MeshScene",
    "MeshSegment",
    "PotMesh",
    "SeedMesh",
    "build_mesh",
    "build_pot",
    "rotation_xyz",
    "transform_point",
    "translation",
]
