"""
Tests for the genetic history encoder.
"""

import re

import numpy as np

from bonsai.config import Species
from bonsai.genetics import (
    Vitals,
    append_segment,
    decode_vitals,
    new_segment,
    random_base36,
    species_prefix,
)


class TestSeedSegment:
    """Tests for seed tokens."""

    def test_format(self) -> None:
        """Seed token is PREFIX-XXXX in uppercase base 36."""
        token = new_segment("PIN")
        assert re.fullmatch(r"PIN-[0-9A-Z]{4}", token)

    def test_seeded_rng_reproducible(self) -> None:
        """An injected generator makes the token reproducible."""
        a = new_segment("OAK", rng=np.random.default_rng(7))
        b = new_segment("OAK", rng=np.random.default_rng(7))
        assert a == b

    def test_species_prefix(self) -> None:
        """Prefix is the first three letters of the species."""
        assert species_prefix(Species.PINE) == "PIN"
        assert species_prefix(Species.CHERRY) == "CHE"


class TestEvolutionSegment:
    """Tests for stage-transition tokens."""

    def test_encodes_vitals_as_hex(self) -> None:
        """Vitals are truncated and written as two hex digits each."""
        token = new_segment("S1", Vitals(health=100, water=50.9, fertilizer=0))
        assert re.fullmatch(r"EVO-643200-[0-9A-Z]{2}", token)

    def test_vitals_clamped(self) -> None:
        """Out-of-range vitals clamp to 0-100."""
        token = new_segment("S2", Vitals(health=150, water=-3, fertilizer=15.2))
        assert token.startswith("EVO-64000F-")

    def test_suffix_breaks_ties(self) -> None:
        """Identical vitals still produce diverging tokens."""
        rng = np.random.default_rng(3)
        vitals = Vitals(health=90, water=60, fertilizer=60)
        tokens = {new_segment("S1", vitals, rng=rng) for _ in range(50)}
        assert len(tokens) > 1

    def test_decode(self) -> None:
        """Encoded vitals can be read back."""
        token = new_segment("S3", Vitals(health=88.4, water=42, fertilizer=71))
        assert decode_vitals(token) == Vitals(88.0, 42.0, 71.0)
        assert decode_vitals("PIN-AB12") is None


class TestHistory:
    """Tests for append-only history handling."""

    def test_append_does_not_mutate(self) -> None:
        """Appending returns a new history and leaves the input alone."""
        history = ["PIN-AB12"]
        extended = append_segment(history, "EVO-646464-AA")
        assert history == ["PIN-AB12"]
        assert extended == ("PIN-AB12", "EVO-646464-AA")

    def test_random_base36_length(self) -> None:
        """Tokens have the requested length."""
        assert len(random_base36(9, np.random.default_rng(0))) == 9
