"""
Tests for parameter tables and record validation.
"""

import pytest
from pydantic import ValidationError

from bonsai import config
from bonsai.config import (
    SPECIES_CONFIG,
    STAGE_CONFIG,
    STYLE_CONFIG,
    BonsaiTree,
    ConfigurationError,
    GeneticRecord,
    GrowthStage,
    GrowthStyle,
    Species,
    complexity,
)


class TestTables:
    """Tests for static parameter tables."""

    def test_tables_are_total(self) -> None:
        """Every species, stage and style has an entry."""
        assert set(SPECIES_CONFIG) == set(Species)
        assert set(STAGE_CONFIG) == set(GrowthStage)
        assert set(STYLE_CONFIG) == set(GrowthStyle)

    def test_missing_species_is_fatal(self, monkeypatch) -> None:
        """A missing species entry raises a configuration error."""
        monkeypatch.delitem(config.SPECIES_CONFIG, Species.OAK)
        with pytest.raises(ConfigurationError):
            config.validate_tables()

    def test_missing_stage_is_fatal(self, monkeypatch) -> None:
        """A missing stage entry raises a configuration error."""
        monkeypatch.delitem(config.STAGE_CONFIG, GrowthStage.MASTER)
        with pytest.raises(ConfigurationError):
            config.validate_tables()

    def test_needles_narrower_than_broadleaves(self) -> None:
        """Needle-leaved species spread narrower than broad-leaved ones."""
        pine = SPECIES_CONFIG[Species.PINE]
        for species, cfg in SPECIES_CONFIG.items():
            if cfg.leaf_shape == "broad":
                assert pine.branch_spread < cfg.branch_spread


class TestComplexity:
    """Tests for the stage-to-depth mapping."""

    def test_mesh_depths(self) -> None:
        """Mesh style grows 0/3/5/7 levels."""
        assert [complexity(s) for s in GrowthStage] == [0, 3, 5, 7]

    def test_canvas_depths(self) -> None:
        """Canvas style grows 0/4/7/9 levels."""
        assert [complexity(s, GrowthStyle.CANVAS) for s in GrowthStage] == [0, 4, 7, 9]

    def test_depth_increases_with_stage(self) -> None:
        """Later stages are never shallower."""
        for style in GrowthStyle:
            depths = [complexity(s, style) for s in GrowthStage]
            assert depths == sorted(depths)

    def test_unknown_stage_degrades(self) -> None:
        """An unknown stage value gives depth 1."""
        assert complexity(9) == 1
        assert complexity(-1) == 1
        assert complexity("ADULT") == 1
        assert complexity(None, GrowthStyle.CANVAS) == 1


class TestGeneticRecord:
    """Tests for record validation at the boundary."""

    def test_valid_record(self) -> None:
        """A well-formed record validates."""
        record = GeneticRecord(
            species="Pine", stage=1, dna_history=["PIN-AB12"], pruning_count=2
        )
        assert record.species is Species.PINE
        assert record.stage is GrowthStage.SAPLING
        assert record.dna_history == ("PIN-AB12",)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"dna_history": []},
            {"dna_history": [""]},
            {"stage": 7},
            {"species": "Willow"},
            {"pruning_count": -1},
            {"wiring_state": 5},
        ],
    )
    def test_malformed_records_rejected(self, overrides: dict) -> None:
        """Malformed records never reach the generator."""
        fields = dict(species="Oak", stage=2, dna_history=["OAK-0001"])
        fields.update(overrides)
        with pytest.raises(ValidationError):
            GeneticRecord(**fields)

    def test_record_is_frozen(self) -> None:
        """A snapshot cannot be edited."""
        record = GeneticRecord(species="Oak", stage=2, dna_history=["OAK-0001"])
        with pytest.raises(ValidationError):
            record.pruning_count = 3


class TestBonsaiTree:
    """Tests for the care-loop record."""

    def test_legacy_dna_repaired(self) -> None:
        """Records without DNA get a legacy seed segment."""
        tree = BonsaiTree(id="abc", name="Old", species="Maple")
        assert tree.dna == ["MapleINIT"]

    def test_genetic_record_snapshot(self) -> None:
        """The snapshot carries the generator's inputs."""
        tree = BonsaiTree(
            id="abc", name="T", species="Oak", stage=2,
            dna=["OAK-0001", "EVO-646464-AA"], pruning_count=4, wiring_state=1,
        )
        record = tree.genetic_record()
        assert record.dna_history == ("OAK-0001", "EVO-646464-AA")
        assert record.pruning_count == 4
        assert record.wiring_state == 1

    def test_vitals_bounded(self) -> None:
        """Vitals above the maximum are rejected."""
        with pytest.raises(ValidationError):
            BonsaiTree(id="x", name="x", species="Oak", water=120)
