"""
Tests for the DNA accessor.
"""

from bonsai import dna
from bonsai.hashing import float_at_text


class TestSegmentFor:
    """Tests for depth-to-segment selection."""

    def test_shallow_depths_use_seed(self) -> None:
        """Depths below the stride read the first segment."""
        history = ["PIN-AB12", "EVO-643232-Q1"]
        assert dna.segment_for(history, 0, stride=2) == "PIN-AB12"
        assert dna.segment_for(history, 1, stride=2) == "PIN-AB12"

    def test_stride_selects_later_segments(self) -> None:
        """Each stride of depth moves one segment along the history."""
        history = ["A", "B", "C"]
        assert dna.segment_for(history, 2, stride=2) == "B"
        assert dna.segment_for(history, 5, stride=2) == "C"

    def test_wraps_around_history(self) -> None:
        """Depth beyond the history wraps modulo its length."""
        history = ["A", "B"]
        assert dna.segment_for(history, 4, stride=2) == "A"
        assert dna.segment_for(history, 6, stride=2) == "B"

    def test_large_stride(self) -> None:
        """With stride 10 every shallow depth reads the seed."""
        history = ["A", "B", "C"]
        assert all(dna.segment_for(history, d, stride=10) == "A" for d in range(10))

    def test_empty_history_defaults(self) -> None:
        """An empty history falls back to the default token."""
        assert dna.segment_for([], 3) == dna.DEFAULT_SEGMENT

    def test_blank_segment_falls_back_to_seed(self) -> None:
        """A blank selected segment falls back to the first one."""
        assert dna.segment_for(["SEED", ""], 2, stride=2) == "SEED"


class TestFloatAt:
    """Tests for hash draws keyed by (segment, depth, offset)."""

    def test_key_is_concatenation(self) -> None:
        """The hash key is segment + depth + offset."""
        history = ["OAK-1234"]
        assert dna.float_at(history, 3, 100) == float_at_text("OAK-12343100")

    def test_root_lineage_matches_plain_stream(self) -> None:
        """Lineage 0 reads the plain float_at stream."""
        history = ["OAK-1234"]
        assert dna.node_random(history, 0, dna.LENGTH, 0) == dna.float_at(history, 0, dna.LENGTH)

    def test_lineage_separates_siblings(self) -> None:
        """Sibling lineages draw from different keys."""
        history = ["MAP-ZZ01"]
        left = dna.child_lineage(0, 0)
        right = dna.child_lineage(0, 1)
        draws_left = [dna.node_random(history, 1, p, left) for p in (dna.LENGTH, dna.ANGLE, dna.TILT, dna.SWAY)]
        draws_right = [dna.node_random(history, 1, p, right) for p in (dna.LENGTH, dna.ANGLE, dna.TILT, dna.SWAY)]
        assert draws_left != draws_right

    def test_child_lineages_unique(self) -> None:
        """Lineages are unique across a full ternary tree."""
        seen = {0}
        frontier = [0]
        for _ in range(6):
            nxt = []
            for lineage in frontier:
                for i in range(3):
                    child = dna.child_lineage(lineage, i)
                    assert child not in seen
                    seen.add(child)
                    nxt.append(child)
            frontier = nxt
