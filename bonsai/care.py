"""
Care loop: vitals decay, care actions, and stage advancement.

Every function takes a BonsaiTree and returns a new one; nothing is mutated
in place. The caller owns scheduling (one tick per second in the game).

Per-tick update:
    water      -= water_decay
    fertilizer -= fertilizer_decay
    health     -= health_penalty   if water or fertilizer is critical
    health     += heal_rate        if both are comfortably high
    age        += age_per_tick

Advancing a stage appends an evolution segment to the DNA history, so the
tree's new outer growth is driven by the vitals it had when it was repotted.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import NamedTuple

import numpy as np

from bonsai.config import (
    CRITICAL_LOW,
    MAX_STATS,
    STAGE_CONFIG,
    WIRING_MODULUS,
    BonsaiTree,
    GrowthStage,
    Species,
)
from bonsai.genetics import (
    Vitals,
    append_segment,
    new_segment,
    random_base36,
    species_prefix,
    stage_prefix,
)


@dataclass(frozen=True)
class CareConfig:
    """Constants for the care loop."""

    # Decay per tick
    water_decay: float = 0.5
    fertilizer_decay: float = 0.2
    age_per_tick: float = 0.1

    # Health response
    critical_low: float = CRITICAL_LOW
    health_penalty: float = 0.5
    heal_threshold: float = 50.0  # both vitals above this to heal
    heal_rate: float = 0.1

    # Care actions
    water_amount: float = 30.0
    fertilizer_amount: float = 30.0

    # Stage advancement: minimum health, and minimum age indexed by current stage
    evolve_min_health: float = 80.0
    evolve_min_age: tuple[float, float, float] = (1.0, 15.0, 0.0)

    # Notifications
    milestone_every: int = 10


DEFAULT_CARE = CareConfig()


class Notification(NamedTuple):
    """Something worth telling the gardener about."""

    kind: str  # stage | milestone | health
    message: str


def _clip(value: float) -> float:
    return float(np.clip(value, 0.0, MAX_STATS))


def create_tree(
    species: Species,
    name: str | None = None,
    rng: np.random.Generator | None = None,
    now_ms: int | None = None,
) -> BonsaiTree:
    """Plant a new seed with a fresh genetic identity."""
    if rng is None:
        rng = np.random.default_rng()
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    species = Species(species)
    return BonsaiTree(
        id=random_base36(9, rng).lower(),
        name=name or f"My {species.value}",
        species=species,
        stage=GrowthStage.SEED,
        age=0.0,
        water=50.0,
        fertilizer=50.0,
        health=MAX_STATS,
        seed_value=float(rng.random()),
        pruning_count=0,
        wiring_state=0,
        dna=[new_segment(species_prefix(species), rng=rng)],
        created_at=now_ms,
    )


def tick(tree: BonsaiTree, config: CareConfig = DEFAULT_CARE) -> BonsaiTree:
    """Advance one tick of decay, health response and aging."""
    health = tree.health
    if tree.water < config.critical_low or tree.fertilizer < config.critical_low:
        health = max(0.0, health - config.health_penalty)
    elif tree.water > config.heal_threshold and tree.fertilizer > config.heal_threshold:
        health = min(MAX_STATS, health + config.heal_rate)

    return tree.model_copy(
        update={
            "water": max(0.0, tree.water - config.water_decay),
            "fertilizer": max(0.0, tree.fertilizer - config.fertilizer_decay),
            "health": health,
            "age": tree.age + config.age_per_tick,
        }
    )


def run_ticks(
    tree: BonsaiTree,
    num_ticks: int,
    config: CareConfig = DEFAULT_CARE,
    on_tick: Callable[[BonsaiTree, BonsaiTree], None] | None = None,
) -> BonsaiTree:
    """Run several ticks, optionally reporting each (previous, current) pair."""
    for _ in range(num_ticks):
        prev, tree = tree, tick(tree, config)
        if on_tick is not None:
            on_tick(prev, tree)
    return tree


def water(tree: BonsaiTree, config: CareConfig = DEFAULT_CARE) -> BonsaiTree:
    return tree.model_copy(update={"water": _clip(tree.water + config.water_amount)})


def fertilize(tree: BonsaiTree, config: CareConfig = DEFAULT_CARE) -> BonsaiTree:
    """Feed the tree. Seeds wait for germination; a masterpiece is no longer fed."""
    if tree.stage in (GrowthStage.SEED, GrowthStage.MASTER):
        return tree
    return tree.model_copy(
        update={"fertilizer": _clip(tree.fertilizer + config.fertilizer_amount)}
    )


def rename(tree: BonsaiTree, name: str) -> BonsaiTree:
    """Give the tree a new name. Blank names are ignored."""
    name = name.strip()
    if not name:
        return tree
    return tree.model_copy(update={"name": name})


def prune(tree: BonsaiTree) -> BonsaiTree:
    """Prune once. Only trees past the seed have branches to cut."""
    if tree.stage < GrowthStage.SAPLING:
        return tree
    return tree.model_copy(update={"pruning_count": tree.pruning_count + 1})


def wire(tree: BonsaiTree) -> BonsaiTree:
    """Move the wiring to its next position. Adult trees only."""
    if tree.stage < GrowthStage.ADULT:
        return tree
    return tree.model_copy(
        update={"wiring_state": (tree.wiring_state + 1) % WIRING_MODULUS}
    )


def advance_stage(
    tree: BonsaiTree,
    config: CareConfig = DEFAULT_CARE,
    rng: np.random.Generator | None = None,
) -> tuple[BonsaiTree, str]:
    """
    Repot the tree into its next growth stage.

    Returns:
        (tree, message): the tree is unchanged when the advance is refused
    """
    if tree.stage >= GrowthStage.MASTER:
        return tree, "The tree has already become a masterpiece."

    if tree.health < config.evolve_min_health:
        return tree, "The tree is too weak to be repotted."

    min_age = config.evolve_min_age[tree.stage]
    if tree.age < min_age:
        return tree, f"The tree is not yet ready. Patience. (Needs Age {min_age:g})"

    next_stage = GrowthStage(tree.stage + 1)
    segment = new_segment(
        stage_prefix(next_stage),
        Vitals(health=tree.health, water=tree.water, fertilizer=tree.fertilizer),
        rng=rng,
    )
    grown = tree.model_copy(
        update={"stage": next_stage, "dna": list(append_segment(tree.dna, segment))}
    )
    return grown, "The roots spread deeper into the earth."


def detect_milestones(
    prev: BonsaiTree | None,
    curr: BonsaiTree,
    config: CareConfig = DEFAULT_CARE,
) -> list[Notification]:
    """Notifications earned between two snapshots of the same tree."""
    if prev is None or prev.id != curr.id:
        return []

    notes = []
    if curr.stage > prev.stage:
        label = STAGE_CONFIG[curr.stage].label
        notes.append(
            Notification(
                "stage",
                f"Your {curr.species.value} has evolved to the {label} stage!",
            )
        )

    prev_age, curr_age = int(prev.age), int(curr.age)
    if curr_age > prev_age and curr_age > 0 and curr_age % config.milestone_every == 0:
        notes.append(
            Notification("milestone", f"The tree has reached {curr_age} cycles of age.")
        )

    if curr.health >= MAX_STATS and prev.health < MAX_STATS:
        notes.append(
            Notification("health", "Your tree is radiating with perfect vitality!")
        )
    return notes
