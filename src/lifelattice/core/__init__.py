"""Core lattice engine."""

from .lattice import Lattice
from .rules import Rule, CONWAY, PRESETS
from .patterns import Pattern, PatternLibrary
from .simulation import Simulation, SimulationConfig

__all__ = ["Lattice", "Rule", "CONWAY", "PRESETS", "Pattern", "PatternLibrary", "Simulation", "SimulationConfig"]
