"""Basic tests for the lifelattice package."""

import lifelattice
from lifelattice import Lattice, PatternLibrary, Rule, Simulation


def test_public_api():
    """Top-level names are importable."""
    assert lifelattice.__version__ == "0.1.0"
    assert lifelattice.CONWAY == Rule(3, 2, 3)
    assert issubclass(lifelattice.DimensionMismatch, lifelattice.LatticeError)


def test_lattice_creation():
    """Test basic lattice creation and cell operations."""
    lattice = Lattice.from_cells(5, 5, [False] * 25)
    assert lattice.width == 5
    assert lattice.height == 5
    assert lattice.cell(0, 0) is False

    lattice.toggle_cell(2, 2)
    assert lattice.cell(2, 2) is True


def test_pattern_library():
    """Test pattern library has some patterns."""
    patterns = PatternLibrary().list_patterns()
    assert len(patterns) > 0
    assert "Glider" in patterns


def test_blinker_end_to_end():
    """A blinker on a 5x5 torus alternates between two phases."""
    lattice = Lattice.from_rows(
        [
            [0, 0, 0, 0, 0],
            [0, 0, 1, 0, 0],
            [0, 0, 1, 0, 0],
            [0, 0, 1, 0, 0],
            [0, 0, 0, 0, 0],
        ]
    )
    simulation = Simulation(lattice)

    simulation.tick()
    assert lattice.live_cells() == {(2, 1), (2, 2), (2, 3)}

    simulation.tick()
    assert lattice.live_cells() == {(1, 2), (2, 2), (3, 2)}
