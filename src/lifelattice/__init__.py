"""Toroidal cellular automaton engine with configurable birth/survival rules."""

__version__ = "0.1.0"

from .core.errors import LatticeError, InvalidDimensions, DimensionMismatch, OutOfRange, InvalidRule
from .core.lattice import Lattice
from .core.rules import Rule, CONWAY, PRESETS
from .core.patterns import Pattern, PatternLibrary
from .core.simulation import Simulation, SimulationConfig

__all__ = [
    "Lattice",
    "Rule",
    "CONWAY",
    "PRESETS",
    "Pattern",
    "PatternLibrary",
    "Simulation",
    "SimulationConfig",
    "LatticeError",
    "InvalidDimensions",
    "DimensionMismatch",
    "OutOfRange",
    "InvalidRule",
]
