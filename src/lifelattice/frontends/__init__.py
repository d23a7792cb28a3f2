"""Frontend interfaces for the lattice engine."""

from .cli import CLILatticeRunner

__all__ = ["CLILatticeRunner"]
