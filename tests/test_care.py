"""
Tests for the care loop.

These tests verify vitals decay, care action gating, and that advancing a
stage extends the tree's genetic history.
"""

import re

import numpy as np
import pytest

from bonsai import care
from bonsai.config import BonsaiTree, GrowthStage, Species
from bonsai.skeleton import generate


def make_tree(**fields) -> BonsaiTree:
    defaults = dict(id="t1", name="Test", species=Species.OAK, dna=["OAK-0001"])
    defaults.update(fields)
    return BonsaiTree(**defaults)


class TestCreateTree:
    """Tests for planting a new seed."""

    def test_new_seed(self) -> None:
        """A new tree starts as a healthy seed with one DNA segment."""
        tree = care.create_tree(Species.PINE, rng=np.random.default_rng(1), now_ms=1234)
        assert re.fullmatch(r"[0-9a-z]{9}", tree.id)
        assert tree.name == "My Pine"
        assert tree.stage is GrowthStage.SEED
        assert (tree.water, tree.fertilizer, tree.health) == (50.0, 50.0, 100.0)
        assert tree.created_at == 1234
        assert len(tree.dna) == 1
        assert re.fullmatch(r"PIN-[0-9A-Z]{4}", tree.dna[0])

    def test_seeded_trees_identical(self) -> None:
        """The same generator seed plants the same tree."""
        a = care.create_tree(Species.OAK, rng=np.random.default_rng(5), now_ms=0)
        b = care.create_tree(Species.OAK, rng=np.random.default_rng(5), now_ms=0)
        assert a == b


class TestTick:
    """Tests for per-tick decay and health response."""

    def test_decay(self) -> None:
        """Water and fertilizer decay, age advances."""
        tree = care.tick(make_tree(water=50.0, fertilizer=50.0))
        assert tree.water == pytest.approx(49.5)
        assert tree.fertilizer == pytest.approx(49.8)
        assert tree.age == pytest.approx(0.1)
        assert tree.health == 100.0

    def test_critical_vitals_hurt(self) -> None:
        """A parched tree loses health."""
        tree = care.tick(make_tree(water=10.0, fertilizer=60.0, health=80.0))
        assert tree.health == pytest.approx(79.5)

    def test_comfortable_vitals_heal(self) -> None:
        """A well-kept tree slowly recovers."""
        tree = care.tick(make_tree(water=80.0, fertilizer=80.0, health=90.0))
        assert tree.health == pytest.approx(90.1)

    def test_vitals_floor_at_zero(self) -> None:
        """Nothing decays below zero."""
        tree = care.tick(make_tree(water=0.2, fertilizer=0.1, health=0.3))
        assert tree.water == 0.0
        assert tree.fertilizer == 0.0
        assert tree.health == 0.0

    def test_run_ticks_reports_each(self) -> None:
        """run_ticks reports every (previous, current) pair."""
        seen = []
        tree = care.run_ticks(make_tree(), 25, on_tick=lambda p, c: seen.append((p, c)))
        assert len(seen) == 25
        assert seen[-1][1] == tree
        assert tree.age == pytest.approx(2.5)

    def test_tick_does_not_mutate(self) -> None:
        """The input tree is left untouched."""
        tree = make_tree()
        care.tick(tree)
        assert tree.water == 50.0


class TestCareActions:
    """Tests for watering, feeding, pruning and wiring."""

    def test_water_capped(self) -> None:
        """Watering tops out at 100."""
        assert care.water(make_tree(water=90.0)).water == 100.0
        assert care.water(make_tree(water=20.0)).water == 50.0

    def test_fertilize(self) -> None:
        """Feeding adds nutrients, except to a seed or a masterpiece."""
        sapling = make_tree(stage=GrowthStage.SAPLING, fertilizer=10.0)
        assert care.fertilize(sapling).fertilizer == 40.0
        seed = make_tree(stage=GrowthStage.SEED, fertilizer=10.0)
        assert care.fertilize(seed) == seed
        master = make_tree(stage=GrowthStage.MASTER, fertilizer=10.0)
        assert care.fertilize(master) == master

    def test_rename(self) -> None:
        """Names are trimmed and blank names are ignored."""
        tree = make_tree(name="Old")
        assert care.rename(tree, "  Kazan  ").name == "Kazan"
        assert care.rename(tree, "   ") is tree
        assert care.rename(tree, "") is tree

    def test_prune_gated(self) -> None:
        """Seeds cannot be pruned."""
        seed = make_tree(stage=GrowthStage.SEED)
        assert care.prune(seed).pruning_count == 0
        sapling = make_tree(stage=GrowthStage.SAPLING)
        assert care.prune(care.prune(sapling)).pruning_count == 2

    def test_wire_gated_and_cycles(self) -> None:
        """Wiring needs an adult tree and cycles through five positions."""
        sapling = make_tree(stage=GrowthStage.SAPLING)
        assert care.wire(sapling).wiring_state == 0
        adult = make_tree(stage=GrowthStage.ADULT, wiring_state=4)
        assert care.wire(adult).wiring_state == 0
        assert care.wire(care.wire(adult)).wiring_state == 1

    def test_pruning_regrows_tree(self) -> None:
        """Pruning changes the record the generator reads."""
        adult = make_tree(stage=GrowthStage.ADULT)
        assert care.prune(adult).genetic_record().pruning_count == 1
        assert generate(adult.genetic_record()) == generate(adult.genetic_record())


class TestAdvanceStage:
    """Tests for stage advancement."""

    def test_refuses_masterpiece(self) -> None:
        """A masterpiece cannot advance further."""
        tree = make_tree(stage=GrowthStage.MASTER, age=50.0)
        result, message = care.advance_stage(tree)
        assert result is tree
        assert message == "The tree has already become a masterpiece."

    def test_refuses_weak_tree(self) -> None:
        """A weak tree is not repotted."""
        tree = make_tree(stage=GrowthStage.SAPLING, age=20.0, health=70.0)
        result, message = care.advance_stage(tree)
        assert result is tree
        assert message == "The tree is too weak to be repotted."

    @pytest.mark.parametrize("stage,age,needed", [(0, 0.5, "1"), (1, 10.0, "15")])
    def test_refuses_young_tree(self, stage: int, age: float, needed: str) -> None:
        """A tree must reach the stage's minimum age."""
        tree = make_tree(stage=stage, age=age)
        result, message = care.advance_stage(tree)
        assert result is tree
        assert message == f"The tree is not yet ready. Patience. (Needs Age {needed})"

    def test_advance_appends_segment(self) -> None:
        """Advancing records the vitals in a new DNA segment."""
        tree = make_tree(stage=GrowthStage.SEED, age=1.5, health=90.0)
        grown, message = care.advance_stage(tree, rng=np.random.default_rng(0))
        assert message == "The roots spread deeper into the earth."
        assert grown.stage is GrowthStage.SAPLING
        assert grown.dna[0] == tree.dna[0]
        assert re.fullmatch(r"EVO-5A3232-[0-9A-Z]{2}", grown.dna[1])
        assert tree.dna == ["OAK-0001"]
        assert grown.dna == [tree.dna[0], grown.dna[1]]

    def test_adult_advances_at_any_age(self) -> None:
        """Adults need only health to become masterpieces."""
        grown, _ = care.advance_stage(make_tree(stage=GrowthStage.ADULT, age=0.0))
        assert grown.stage is GrowthStage.MASTER
        assert len(grown.dna) == 2

    def test_grow_from_seed(self) -> None:
        """A tended seed can be grown all the way to a masterpiece."""
        rng = np.random.default_rng(11)
        tree = care.create_tree(Species.MAPLE, rng=rng, now_ms=0)
        tree = care.run_ticks(tree, 15)
        tree, _ = care.advance_stage(tree, rng=rng)
        assert tree.stage is GrowthStage.SAPLING
        for _ in range(20):
            tree = care.fertilize(care.water(care.run_ticks(tree, 10)))
        tree, _ = care.advance_stage(tree, rng=rng)
        tree, _ = care.advance_stage(tree, rng=rng)
        assert tree.stage is GrowthStage.MASTER
        assert len(tree.dna) == 4
        assert generate(tree.genetic_record()).num_nodes > 0


class TestMilestones:
    """Tests for notifications between snapshots."""

    def test_stage_change(self) -> None:
        """Evolving announces the new stage."""
        prev = make_tree(stage=GrowthStage.SEED)
        curr = make_tree(stage=GrowthStage.SAPLING)
        notes = care.detect_milestones(prev, curr)
        assert care.Notification("stage", "Your Oak has evolved to the Growth stage!") in notes

    def test_age_milestone(self) -> None:
        """Every tenth cycle of age is celebrated once."""
        notes = care.detect_milestones(make_tree(age=9.95), make_tree(age=10.05))
        assert [n.kind for n in notes] == ["milestone"]
        assert care.detect_milestones(make_tree(age=10.05), make_tree(age=10.15)) == []

    def test_perfect_health(self) -> None:
        """Reaching full health is announced."""
        notes = care.detect_milestones(make_tree(health=99.95), make_tree(health=100.0))
        assert [n.kind for n in notes] == ["health"]

    def test_different_tree_ignored(self) -> None:
        """Switching trees is not a milestone."""
        assert care.detect_milestones(None, make_tree()) == []
        other = make_tree(id="t2", stage=GrowthStage.ADULT)
        assert care.detect_milestones(make_tree(), other) == []
