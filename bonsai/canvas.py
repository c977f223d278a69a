"""
Flattened 2D renderer for bonsai skeletons.

Walks a TreeSkeleton and projects it onto the picture plane (x right, y up):
each branch becomes a tapered line, each foliage marker a glyph keyed by its
kind, and a seed becomes a capsule with a sprout. Tilt (the x-rotation) has no
effect in the plane, so the drawing is the front view of the mesh.

flatten_skeleton() is pure geometry and is what tests exercise;
render_tree() draws the flattened scene with matplotlib.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.patches import Circle, Ellipse, FancyBboxPatch
from matplotlib.patches import Polygon as MplPolygon

from bonsai.config import STAGE_CONFIG, GrowthStage
from bonsai.skeleton import PUFF_RADIUS, BranchNode, SeedVisual, TreeSkeleton, sway_angle

GLYPH_SIZE = 0.5


# =============================================================================
# VECTOR UTILITIES
# =============================================================================

def vec(x: float, y: float) -> np.ndarray:
    """Create a 2D vector."""
    return np.array([x, y], dtype=float)


def vec_rotate(v: np.ndarray, angle: float) -> np.ndarray:
    """Rotate vector by angle (radians), counter-clockwise."""
    c, s = math.cos(angle), math.sin(angle)
    return vec(v[0] * c - v[1] * s, v[0] * s + v[1] * c)


# =============================================================================
# FLATTENED SCENE
# =============================================================================

@dataclass
class CanvasSegment:
    """A branch projected onto the canvas."""

    start: np.ndarray
    end: np.ndarray
    width: float
    end_width: float
    depth: int
    lineage: int


@dataclass
class CanvasLeaf:
    """A foliage glyph placed on the canvas."""

    pos: np.ndarray
    angle: float
    size: float
    kind: str


@dataclass
class CanvasScene:
    """Everything a 2D backend needs to draw one frame."""

    segments: list[CanvasSegment] = field(default_factory=list)
    leaves: list[CanvasLeaf] = field(default_factory=list)
    seed: SeedVisual | None = None
    origin: np.ndarray = field(default_factory=lambda: vec(0, 0))
    scale: float = 1.0


def flatten_skeleton(
    skeleton: TreeSkeleton,
    origin: np.ndarray | None = None,
    scale: float = 1.0,
    time: float | None = None,
) -> CanvasScene:
    """
    Project a skeleton onto the canvas.

    Args:
        skeleton: Generator output
        origin: Base of the trunk in canvas units
        scale: Canvas units per skeleton unit
        time: Animation time for wind sway (None = at rest)

    Returns:
        CanvasScene with exactly one segment per BranchNode
    """
    if origin is None:
        origin = vec(0, 0)
    scene = CanvasScene(seed=skeleton.seed, origin=origin.copy(), scale=scale)
    if skeleton.root is None:
        return scene

    up = vec(0, 1)

    def walk(node: BranchNode, base: np.ndarray, parent_angle: float) -> None:
        abs_angle = parent_angle + node.angle
        if time is not None:
            abs_angle += sway_angle(node, skeleton.sway_speed, time)
        direction = vec_rotate(up, abs_angle)
        end = base + direction * node.length * scale

        scene.segments.append(
            CanvasSegment(
                start=base.copy(),
                end=end.copy(),
                width=node.radius * scale,
                end_width=node.end_radius * scale,
                depth=node.depth,
                lineage=node.lineage,
            )
        )

        for leaf in node.foliage:
            offset = vec_rotate(vec(leaf.offset[0], leaf.offset[1]), abs_angle)
            size = leaf.scale * scale
            size *= PUFF_RADIUS if leaf.kind == "cluster" else GLYPH_SIZE
            scene.leaves.append(
                CanvasLeaf(
                    pos=end + offset * scale,
                    angle=abs_angle + leaf.rotation,
                    size=size,
                    kind=leaf.kind,
                )
            )

        for child in node.children:
            walk(child, end, abs_angle)

    walk(skeleton.root, origin, 0.0)
    return scene


def canvas_bounds(scene: CanvasScene, margin: float = 0.5) -> tuple[float, float, float, float]:
    """(xmin, xmax, ymin, ymax) covering every segment and leaf."""
    pts = [scene.origin]
    for seg in scene.segments:
        pts.extend([seg.start, seg.end])
    for leaf in scene.leaves:
        pts.append(leaf.pos + leaf.size)
        pts.append(leaf.pos - leaf.size)
    if scene.seed is not None:
        top = scene.seed.length + 2 * scene.seed.radius + scene.seed.sprout_size[1]
        pts.append(scene.origin + vec(0, top * scene.scale))
    arr = np.array(pts)
    xmin, ymin = arr.min(axis=0) - margin
    xmax, ymax = arr.max(axis=0) + margin
    return float(xmin), float(xmax), float(ymin), float(ymax)


# =============================================================================
# GLYPHS
# =============================================================================

def leaf_outline(pos: np.ndarray, angle: float, length: float,
                 sharpness: float = 1.6, steps: int = 24) -> np.ndarray:
    """Closed outline of a pointed leaf growing from pos along angle."""
    max_width = length * 0.4
    right, left = [], []
    for i in range(steps + 1):
        t = i / steps
        w = 0.5 * max_width * (math.sin(math.pi * t) ** sharpness)
        y = t * length
        right.append(pos + vec_rotate(vec(+w, y), angle))
        left.append(pos + vec_rotate(vec(-w, y), angle))
    return np.array(list(reversed(right)) + left[1:])


def draw_needles(ax: plt.Axes, leaf: CanvasLeaf, color: str, lead_color: str) -> None:
    """Fan of short needles."""
    for k in range(-3, 4):
        tip = leaf.pos + vec_rotate(vec(0, leaf.size), leaf.angle + k * 0.25)
        ax.plot([leaf.pos[0], tip[0]], [leaf.pos[1], tip[1]],
                color=color, linewidth=1.2, solid_capstyle='round', zorder=12)


def draw_broad_leaf(ax: plt.Axes, leaf: CanvasLeaf, color: str, lead_color: str) -> None:
    """Pointed leaf with a lead outline."""
    pts = leaf_outline(leaf.pos, leaf.angle, leaf.size)
    ax.add_patch(MplPolygon(pts, facecolor=color, edgecolor=lead_color,
                            linewidth=0.8, zorder=12))


def draw_blossom(ax: plt.Axes, leaf: CanvasLeaf, color: str, lead_color: str) -> None:
    """Five-petal blossom with a yellow center."""
    petal_count = 5
    for i in range(petal_count):
        a = leaf.angle + (2 * math.pi / petal_count) * i
        px = leaf.pos[0] + math.cos(a) * leaf.size * 0.4
        py = leaf.pos[1] + math.sin(a) * leaf.size * 0.4
        ax.add_patch(Ellipse((px, py), leaf.size * 0.5, leaf.size * 0.7,
                             angle=math.degrees(a), facecolor=color,
                             edgecolor=lead_color, linewidth=0.6, zorder=15))
    ax.add_patch(Circle(leaf.pos, leaf.size * 0.17, facecolor='#ffdc64',
                        edgecolor=lead_color, linewidth=0.5, zorder=16))


def draw_cluster(ax: plt.Axes, leaf: CanvasLeaf, color: str, lead_color: str) -> None:
    """Round foliage puff."""
    ax.add_patch(Circle(leaf.pos, leaf.size, facecolor=color,
                        edgecolor=lead_color, linewidth=0.6, alpha=0.95, zorder=12))


GLYPH_DRAWERS = {
    'needle': draw_needles,
    'broad': draw_broad_leaf,
    'flower': draw_blossom,
    'cluster': draw_cluster,
}


def draw_seed(ax: plt.Axes, seed: SeedVisual, base: np.ndarray, scale: float,
              lead_color: str) -> None:
    """Seed capsule plus a small sprout leaf."""
    width = 2 * seed.radius * scale
    height = (seed.length + 2 * seed.radius) * scale
    ax.add_patch(FancyBboxPatch(
        (base[0] - width / 2, base[1]), width, height,
        boxstyle=f"round,pad=0,rounding_size={seed.radius * scale}",
        facecolor=seed.color, edgecolor=lead_color, linewidth=1.0, zorder=10))

    sprout_base = base + vec(seed.sprout_offset[0], seed.sprout_offset[1]) * scale
    pts = leaf_outline(sprout_base, seed.sprout_rotation, seed.sprout_size[1] * scale,
                       sharpness=1.0)
    ax.add_patch(MplPolygon(pts, facecolor=seed.sprout_color, edgecolor='none',
                            alpha=0.8, zorder=11))


def draw_pot(ax: plt.Axes, stage: int, scale: float) -> float:
    """Draw the stage's pot centred on x=0. Returns the soil height."""
    try:
        pot = STAGE_CONFIG[GrowthStage(stage)]
    except ValueError:
        pot = STAGE_CONFIG[GrowthStage.SEED]
    top = pot.pot_depth * scale
    w_top = pot.pot_width * scale
    w_bottom = pot.pot_width * 0.8 * scale
    body = np.array([
        [-w_bottom, 0], [w_bottom, 0], [w_top, top], [-w_top, top],
    ])
    ax.add_patch(MplPolygon(body, facecolor=pot.pot_color, edgecolor='#1e1914',
                            linewidth=1.5, zorder=5))
    ax.plot([-w_top * 0.95, w_top * 0.95], [top - 0.1 * scale] * 2,
            color='#3e2723', linewidth=3, zorder=6)
    return top - 0.2 * scale


# =============================================================================
# MAIN RENDER FUNCTION
# =============================================================================

def render_tree(
    skeleton: TreeSkeleton,
    scale: float = 1.0,
    time: float | None = None,
    figsize: tuple = (6, 8),
    lead_color: str = '#1e1914',
    background: str = '#e7e5e4',
) -> tuple[plt.Figure, plt.Axes]:
    """
    Render a bonsai skeleton in its pot.

    Args:
        skeleton: Generator output
        scale: Canvas units per skeleton unit
        time: Animation time for wind sway (None = at rest)
        figsize: Figure size in inches

    Returns:
        (figure, axes) tuple
    """
    fig, ax = plt.subplots(figsize=figsize)
    fig.patch.set_facecolor(background)
    ax.set_facecolor(background)
    ax.set_aspect('equal')
    ax.axis('off')

    soil_y = draw_pot(ax, skeleton.stage, scale)
    scene = flatten_skeleton(skeleton, origin=vec(0, soil_y), scale=scale, time=time)

    # Branches: lead outline under bark fill, thickest first
    for seg in sorted(scene.segments, key=lambda s: s.depth):
        width = 40 * (seg.width + seg.end_width) / 2
        xs, ys = [seg.start[0], seg.end[0]], [seg.start[1], seg.end[1]]
        ax.plot(xs, ys, color=lead_color, linewidth=width + 2,
                solid_capstyle='round', zorder=7)
        ax.plot(xs, ys, color=skeleton.bark_color, linewidth=width,
                solid_capstyle='round', zorder=8)

    for leaf in scene.leaves:
        drawer = GLYPH_DRAWERS.get(leaf.kind, draw_cluster)
        drawer(ax, leaf, skeleton.leaf_color, lead_color)

    if scene.seed is not None:
        draw_seed(ax, scene.seed, scene.origin, scale, lead_color)

    xmin, xmax, ymin, ymax = canvas_bounds(scene)
    pot_half = STAGE_CONFIG[GrowthStage.MASTER].pot_width * scale
    ax.set_xlim(min(xmin, -pot_half), max(xmax, pot_half))
    ax.set_ylim(min(ymin, 0.0) - 0.2, ymax)

    return fig, ax


def save_tree(
    filepath: str,
    skeleton: TreeSkeleton,
    dpi: int = 150,
    scale: float = 1.0,
    time: float | None = None,
    figsize: tuple = (6, 8),
):
    """Render and save a tree to file."""
    fig, ax = render_tree(skeleton, scale=scale, time=time, figsize=figsize)
    fig.savefig(filepath, dpi=dpi, bbox_inches='tight', pad_inches=0.1)
    plt.close(fig)
    print(f"Saved to {filepath}")


__all__ = [
    'CanvasLeaf',
    'CanvasScene',
    'CanvasSegment',
    'flatten_skeleton',
    'canvas_bounds',
    'render_tree',
    'save_tree',
]
