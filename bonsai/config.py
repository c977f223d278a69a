"""
Configuration and type definitions for the bonsai simulation.

This module defines the static parameter tables and the record types that
flow between the care loop and the procedural tree generator.

Tables:
    SPECIES_CONFIG: per-species colors, leaf shape, growth speed, spread
    STAGE_CONFIG: per-stage pot geometry and display label
    STYLE_CONFIG: per-growth-style stride, depth table, and leaf policy

Every table must be total over its enum. A gap is a configuration error and
is raised when this module is imported.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ConfigurationError(ValueError):
    """Raised when a static parameter table is incomplete."""


class Species(str, Enum):
    PINE = "Pine"
    MAPLE = "Maple"
    CHERRY = "Cherry"
    OAK = "Oak"


class GrowthStage(IntEnum):
    SEED = 0
    SAPLING = 1
    ADULT = 2
    MASTER = 3


class GrowthStyle(str, Enum):
    """
    Rendering style the generator targets.

    MESH is the canonical 3D recursive path. CANVAS is the flattened 2D path
    with a wider depth table, fan splits, and a leaf-presence roll.
    """

    MESH = "mesh"
    CANVAS = "canvas"


class LeafPolicy(str, Enum):
    """How terminal nodes receive foliage."""

    CLUSTER = "cluster"  # always a fixed three-puff cluster
    GLYPH_ROLL = "glyph_roll"  # one species glyph, present on a DNA roll


WIRING_MODULUS = 5
MAX_STATS = 100.0
CRITICAL_LOW = 20.0


@dataclass(frozen=True)
class SpeciesConfig:
    """Visual and behavioral coefficients for one species."""

    leaf_color: str
    bark_color: str
    leaf_shape: str  # needle | broad | flower
    growth_speed: float
    description: str
    branch_spread: float  # multiplier on the base split angle


@dataclass(frozen=True)
class StageConfig:
    """Container geometry shown at a growth stage."""

    pot_depth: float
    pot_width: float
    pot_color: str
    label: str


@dataclass(frozen=True)
class StyleConfig:
    """
    Structural constants for one growth style.

    stride: depth-to-segment divisor (K)
    complexity: maximum recursion depth per stage, indexed by GrowthStage
    fixed_split: child count when fixed, None for a DNA-derived 2-3 fan
    """

    stride: int
    complexity: tuple[int, int, int, int]
    fixed_split: int | None
    leaf_policy: LeafPolicy
    trunk_length: float = 1.5
    trunk_radius: float = 0.3
    leaf_threshold: float = 0.4  # GLYPH_ROLL only


SPECIES_CONFIG: dict[Species, SpeciesConfig] = {
    Species.PINE: SpeciesConfig(
        leaf_color="#2d4f1e",
        bark_color="#3e2723",
        leaf_shape="needle",
        growth_speed=0.8,
        description="Symbol of longevity and virtue.",
        branch_spread=0.7,
    ),
    Species.MAPLE: SpeciesConfig(
        leaf_color="#b91c1c",
        bark_color="#5d4037",
        leaf_shape="broad",
        growth_speed=1.0,
        description="Represents balance and peace.",
        branch_spread=1.1,
    ),
    Species.CHERRY: SpeciesConfig(
        leaf_color="#fbcfe8",
        bark_color="#4e342e",
        leaf_shape="flower",
        growth_speed=1.2,
        description="A reminder of the transience of life.",
        branch_spread=1.0,
    ),
    Species.OAK: SpeciesConfig(
        leaf_color="#4ade80",
        bark_color="#5c4033",
        leaf_shape="broad",
        growth_speed=0.9,
        description="Strength and endurance.",
        branch_spread=1.2,
    ),
}

STAGE_CONFIG: dict[GrowthStage, StageConfig] = {
    GrowthStage.SEED: StageConfig(
        pot_depth=1.5, pot_width=2.0, pot_color="#5d4037", label="Germination"
    ),
    GrowthStage.SAPLING: StageConfig(
        pot_depth=1.2, pot_width=2.5, pot_color="#4e342e", label="Growth"
    ),
    GrowthStage.ADULT: StageConfig(
        pot_depth=0.8, pot_width=3.5, pot_color="#3e2723", label="Refinement"
    ),
    GrowthStage.MASTER: StageConfig(
        pot_depth=0.4, pot_width=4.0, pot_color="#263238", label="Masterpiece"
    ),
}

STYLE_CONFIG: dict[GrowthStyle, StyleConfig] = {
    GrowthStyle.MESH: StyleConfig(
        stride=2,
        complexity=(0, 3, 5, 7),
        fixed_split=2,
        leaf_policy=LeafPolicy.CLUSTER,
    ),
    GrowthStyle.CANVAS: StyleConfig(
        stride=10,
        complexity=(0, 4, 7, 9),
        fixed_split=None,
        leaf_policy=LeafPolicy.GLYPH_ROLL,
    ),
}

LEAF_SHAPES = ("needle", "broad", "flower")


def validate_tables() -> None:
    """Check every table covers its enum. Raises ConfigurationError."""
    missing = [s.value for s in Species if s not in SPECIES_CONFIG]
    if missing:
        raise ConfigurationError(f"Species without configuration: {missing}")

    missing = [s.name for s in GrowthStage if s not in STAGE_CONFIG]
    if missing:
        raise ConfigurationError(f"Stages without configuration: {missing}")

    missing = [s.value for s in GrowthStyle if s not in STYLE_CONFIG]
    if missing:
        raise ConfigurationError(f"Growth styles without configuration: {missing}")

    for species, cfg in SPECIES_CONFIG.items():
        if cfg.leaf_shape not in LEAF_SHAPES:
            raise ConfigurationError(
                f"{species.value}: unknown leaf shape {cfg.leaf_shape!r}"
            )

    for style, cfg in STYLE_CONFIG.items():
        if len(cfg.complexity) != len(GrowthStage):
            raise ConfigurationError(
                f"{style.value}: complexity table needs {len(GrowthStage)} entries"
            )
        if cfg.complexity[GrowthStage.SEED] != 0:
            raise ConfigurationError(f"{style.value}: SEED complexity must be 0")
        if cfg.stride < 1:
            raise ConfigurationError(f"{style.value}: stride must be positive")


def complexity(stage: int, style: GrowthStyle = GrowthStyle.MESH) -> int:
    """Maximum recursion depth for a stage. Unknown stages degrade to 1."""
    table = STYLE_CONFIG[style].complexity
    try:
        index = int(stage)
    except (ValueError, TypeError):
        return 1
    if 0 <= index < len(table):
        return table[index]
    return 1


class GeneticRecord(BaseModel):
    """
    Read-only snapshot of everything the generator depends on.

    Two records with equal species, stage, dna_history, pruning_count and
    wiring_state always generate the same tree.
    """

    model_config = ConfigDict(frozen=True)

    species: Species = Field(description="Tree species")
    stage: GrowthStage = Field(description="Current growth stage")
    dna_history: tuple[str, ...] = Field(
        min_length=1, description="Genetic segments, oldest first"
    )
    pruning_count: int = Field(default=0, ge=0, description="Times pruned")
    wiring_state: int = Field(
        default=0, ge=0, lt=WIRING_MODULUS, description="Wiring position"
    )
    age: float = Field(default=0.0, ge=0.0, description="Age in cycles")

    @field_validator("dna_history")
    @classmethod
    def _no_blank_seed(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value[0]:
            raise ValueError("the seed segment must not be empty")
        return value


class BonsaiTree(BaseModel):
    """
    A tended tree as the care loop stores it.

    Vitals live in [0, MAX_STATS]. `dna` is append-only: care actions only
    ever extend it. Records saved before DNA existed are given a legacy
    seed segment on load.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique tree id")
    name: str = Field(description="Display name")
    species: Species = Field(description="Tree species")
    stage: GrowthStage = Field(default=GrowthStage.SEED)
    age: float = Field(default=0.0, ge=0.0, description="Age in cycles")
    water: float = Field(default=50.0, ge=0.0, le=MAX_STATS)
    fertilizer: float = Field(default=50.0, ge=0.0, le=MAX_STATS)
    health: float = Field(default=100.0, ge=0.0, le=MAX_STATS)
    seed_value: float = Field(default=0.0, description="Legacy random seed")
    pruning_count: int = Field(default=0, ge=0)
    wiring_state: int = Field(default=0, ge=0, lt=WIRING_MODULUS)
    dna: list[str] = Field(default_factory=list, description="Genetic history")
    created_at: int = Field(default=0, description="Creation time, ms since epoch")

    @model_validator(mode="before")
    @classmethod
    def _legacy_dna(cls, data):
        if isinstance(data, dict) and not data.get("dna") and "species" in data:
            species = Species(data["species"])
            data = {**data, "dna": [f"{species.value}INIT"]}
        return data

    def genetic_record(self) -> GeneticRecord:
        """Frozen snapshot of the fields the generator reads."""
        return GeneticRecord(
            species=self.species,
            stage=self.stage,
            dna_history=tuple(self.dna),
            pruning_count=self.pruning_count,
            wiring_state=self.wiring_state,
            age=self.age,
        )


validate_tables()
