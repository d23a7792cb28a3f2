"""Tests for the Rule class."""

import pytest
from lifelattice.core.errors import InvalidRule
from lifelattice.core.lattice import Lattice
from lifelattice.core.rules import CONWAY, PRESETS, Rule


class TestRule:
    """Test cases for Rule construction and parsing."""

    def test_defaults_are_conway(self):
        """The default rule is B3/S23."""
        assert Rule() == CONWAY
        assert CONWAY.notation == "B3/S23"

    def test_unpacks_into_advance(self):
        """A rule unpacks to (birth, survival_min, survival_max)."""
        assert tuple(Rule(2, 1, 4)) == (2, 1, 4)

        lattice = Lattice.from_cells(3, 3, [False] * 9)
        lattice.advance(*CONWAY)
        assert lattice.population == 0

    @pytest.mark.parametrize(
        "args",
        [(9, 2, 3), (3, -1, 3), (3, 2, 9), (3, 4, 2)],
    )
    def test_invalid_thresholds(self, args):
        """Out-of-range or inverted thresholds are rejected."""
        with pytest.raises(InvalidRule):
            Rule(*args)

    def test_non_integer_threshold(self):
        """Thresholds must be plain integers."""
        with pytest.raises(InvalidRule):
            Rule(3.0, 2, 3)

    def test_is_immutable(self):
        """Rules are frozen values."""
        with pytest.raises(AttributeError):
            CONWAY.birth = 4

    def test_notation(self):
        """Survival ranges are spelled out digit by digit."""
        assert Rule(3, 1, 5).notation == "B3/S12345"
        assert Rule(3, 0, 8).notation == "B3/S012345678"
        assert Rule(2, 4, 4).notation == "B2/S4"

    def test_parse_preset(self):
        """Preset names are case-insensitive."""
        assert Rule.parse("conway") is CONWAY
        assert Rule.parse("  Maze ") == PRESETS["maze"]

    def test_parse_notation(self):
        """B/S notation with a contiguous survival run is accepted."""
        assert Rule.parse("B3/S23") == CONWAY
        assert Rule.parse("b3/s1234") == Rule(3, 1, 4)

    def test_parse_triple(self):
        """A comma-separated triple is accepted."""
        assert Rule.parse("3,2,3") == CONWAY
        assert Rule.parse(" 2, 1 ,5 ") == Rule(2, 1, 5)

    @pytest.mark.parametrize("text", ["B36/S23", "B3/S235", "B3/S", "highlife", "3,2", "", "3,9,9"])
    def test_parse_rejects(self, text):
        """Rules this engine cannot express are rejected."""
        with pytest.raises(InvalidRule):
            Rule.parse(text)

    def test_presets_round_trip_through_notation(self):
        """Every preset can be parsed back from its notation."""
        for rule in PRESETS.values():
            assert Rule.parse(rule.notation) == rule
