"""
Zen Bonsai Module

A bonsai-growing simulation built around a deterministic procedural tree
generator: the same genetic history always grows the same tree.

Modules:
    config: Species, stage and growth-style tables; record types
    hashing: Seeded string hash stream (cyrb53)
    dna: DNA accessor mapping (depth, purpose, lineage) to hash draws
    genetics: Genetic history encoder (new DNA segments)
    skeleton: Recursive branch skeleton generator
    canvas: Flattened 2D renderer (matplotlib)
    mesh: 3D mesh hierarchy (world transforms)
    care: Care loop (tick, care actions, stage advancement)
    storage: Garden persistence
    advice: Bonsai master prompts and fallbacks
"""

from bonsai.advice import advice_mood, build_advice_prompt, get_advice
from bonsai.canvas import (
    CanvasScene,
    flatten_skeleton,
    render_tree,
    save_tree,
)
from bonsai.care import (
    CareConfig,
    Notification,
    advance_stage,
    create_tree,
    detect_milestones,
    fertilize,
    prune,
    rename,
    run_ticks,
    tick,
    water,
    wire,
)
from bonsai.config import (
    SPECIES_CONFIG,
    STAGE_CONFIG,
    STYLE_CONFIG,
    BonsaiTree,
    ConfigurationError,
    GeneticRecord,
    GrowthStage,
    GrowthStyle,
    LeafPolicy,
    Species,
    complexity,
)
from bonsai.dna import float_at, node_random, segment_for
from bonsai.genetics import Vitals, append_segment, new_segment
from bonsai.hashing import float_at_text, hash_text
from bonsai.mesh import MeshScene, build_mesh
from bonsai.skeleton import (
    BranchNode,
    Foliage,
    SeedVisual,
    TreeSkeleton,
    build_skeleton,
    generate,
    sway_angle,
)
from bonsai.storage import Garden, load_garden, save_garden

__all__ = [
    # Config
    "SPECIES_CONFIG",
    "STAGE_CONFIG",
    "STYLE_CONFIG",
    "BonsaiTree",
    "ConfigurationError",
    "GeneticRecord",
    "GrowthStage",
    "GrowthStyle",
    "LeafPolicy",
    "Species",
    "complexity",
    # Hash stream and DNA
    "hash_text",
    "float_at_text",
    "float_at",
    "node_random",
    "segment_for",
    "Vitals",
    "new_segment",
    "append_segment",
    # Tree generation
    "BranchNode",
    "Foliage",
    "SeedVisual",
    "TreeSkeleton",
    "build_skeleton",
    "generate",
    "sway_angle",
    # Rendering
    "CanvasScene",
    "flatten_skeleton",
    "render_tree",
    "save_tree",
    "MeshScene",
    "build_mesh",
    # Care loop
    "CareConfig",
    "Notification",
    "advance_stage",
    "create_tree",
    "detect_milestones",
    "fertilize",
    "prune",
    "rename",
    "run_ticks",
    "tick",
    "water",
    "wire",
    # Persistence and advice
    "Garden",
    "load_garden",
    "save_garden",
    "advice_mood",
    "build_advice_prompt",
    "get_advice",
]
