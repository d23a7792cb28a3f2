"""Common seed patterns and an in-memory pattern library."""

from typing import Dict, List, Tuple, Optional, Any
import numpy as np

from .lattice import Lattice, validate_dimensions


class Pattern:
    """A named set of living cells used to seed a lattice."""

    def __init__(
        self,
        name: str,
        cells: List[Tuple[int, int]],
        description: str = "",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize a pattern.

        Args:
            name: Pattern name
            cells: List of (row, column) coordinates for living cells
            description: Optional description
            metadata: Optional metadata dictionary
        """
        self.name = name
        self.cells = cells
        self.description = description
        self.metadata = metadata or {}

    def to_lattice(self, width: int, height: int, row: int = 0, column: int = 0) -> Lattice:
        """Build a lattice containing only this pattern.

        Cells that fall past an edge wrap to the opposite side.

        Args:
            width: Lattice width
            height: Lattice height
            row: Vertical offset
            column: Horizontal offset

        Returns:
            New Lattice seeded with the pattern
        """
        validate_dimensions(width, height)

        buffer = np.zeros(width * height, dtype=bool)
        for cell_row, cell_col in self.cells:
            target_row = (cell_row + row) % height
            target_col = (cell_col + column) % width
            buffer[target_row * width + target_col] = True
        return Lattice.from_cells(width, height, buffer)

    def get_bounding_box(self) -> Tuple[int, int, int, int]:
        """Get bounding box of the pattern.

        Returns:
            Tuple of (min_row, min_column, max_row, max_column)
        """
        if not self.cells:
            return (0, 0, 0, 0)

        rows, cols = zip(*self.cells)
        return (min(rows), min(cols), max(rows), max(cols))

    def get_size(self) -> Tuple[int, int]:
        """Get pattern size as (width, height)."""
        min_row, min_col, max_row, max_col = self.get_bounding_box()
        return (max_col - min_col + 1, max_row - min_row + 1)

    def normalize(self) -> "Pattern":
        """Return a new pattern with coordinates shifted to start at (0, 0)."""
        if not self.cells:
            return Pattern(self.name, [], self.description, self.metadata.copy())

        min_row, min_col, _, _ = self.get_bounding_box()
        normalized_cells = [(r - min_row, c - min_col) for r, c in self.cells]

        return Pattern(self.name, normalized_cells, self.description, self.metadata.copy())

    def to_dict(self) -> Dict[str, Any]:
        """Convert pattern to a plain dictionary."""
        return {
            "name": self.name,
            "cells": self.cells,
            "description": self.description,
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Pattern":
        """Create pattern from dictionary.

        Args:
            data: Dictionary with pattern data

        Returns:
            New Pattern instance
        """
        # Cells may arrive as lists rather than tuples
        cells = [tuple(cell) for cell in data["cells"]]

        return cls(
            name=data["name"],
            cells=cells,
            description=data.get("description", ""),
            metadata=data.get("metadata", {}),
        )

    @classmethod
    def from_lattice(cls, lattice: Lattice, name: str, description: str = "") -> "Pattern":
        """Capture the living cells of a lattice as a pattern."""
        cells = sorted(lattice.live_cells())
        metadata = {"source_size": (lattice.width, lattice.height), "population": len(cells)}

        return cls(name, cells, description, metadata)


def _pulsar_cells() -> List[Tuple[int, int]]:
    bars = (0, 5, 7, 12)
    spans = (2, 3, 4, 8, 9, 10)
    cells = [(r, c) for r in bars for c in spans]
    cells.extend((r, c) for r in spans for c in bars)
    return sorted(cells)


class PatternLibrary:
    """Manages a collection of patterns."""

    CATEGORIES: Dict[str, List[str]] = {
        "Still Life": ["Block", "Beehive", "Loaf"],
        "Oscillators": ["Blinker", "Toad", "Beacon", "Pulsar"],
        "Spaceships": ["Glider", "Lightweight Spaceship"],
        "Methuselahs": ["R-pentomino", "Diehard", "Acorn"],
    }

    def __init__(self) -> None:
        self._patterns: Dict[str, Pattern] = {}
        self._load_builtin_patterns()

    def _load_builtin_patterns(self) -> None:
        """Load built-in common patterns."""
        # Still lifes
        self.add_pattern(Pattern("Block", [(0, 0), (0, 1), (1, 0), (1, 1)], "2x2 still life block"))
        self.add_pattern(
            Pattern("Beehive", [(0, 1), (0, 2), (1, 0), (1, 3), (2, 1), (2, 2)], "Beehive still life")
        )
        self.add_pattern(
            Pattern(
                "Loaf",
                [(0, 1), (0, 2), (1, 0), (1, 3), (2, 1), (2, 3), (3, 2)],
                "Loaf still life",
            )
        )

        # Oscillators
        self.add_pattern(Pattern("Blinker", [(1, 0), (1, 1), (1, 2)], "Period-2 oscillator"))
        self.add_pattern(
            Pattern("Toad", [(0, 1), (0, 2), (0, 3), (1, 0), (1, 1), (1, 2)], "Period-2 oscillator")
        )
        self.add_pattern(
            Pattern("Beacon", [(0, 0), (0, 1), (1, 0), (2, 3), (3, 2), (3, 3)], "Period-2 oscillator")
        )
        self.add_pattern(Pattern("Pulsar", _pulsar_cells(), "Period-3 oscillator"))

        # Spaceships
        self.add_pattern(
            Pattern("Glider", [(0, 1), (1, 2), (2, 0), (2, 1), (2, 2)], "Smallest spaceship, period-4")
        )
        self.add_pattern(
            Pattern(
                "Lightweight Spaceship",
                [(0, 0), (0, 3), (1, 4), (2, 0), (2, 4), (3, 1), (3, 2), (3, 3), (3, 4)],
                "LWSS - Period-4 spaceship",
            )
        )

        # Methuselahs
        self.add_pattern(
            Pattern(
                "R-pentomino",
                [(0, 1), (0, 2), (1, 0), (1, 1), (2, 1)],
                "Famous methuselah that stabilizes after 1103 generations",
            )
        )
        self.add_pattern(
            Pattern(
                "Diehard",
                [(0, 6), (1, 0), (1, 1), (2, 1), (2, 5), (2, 6), (2, 7)],
                "Dies after exactly 130 generations",
            )
        )
        self.add_pattern(
            Pattern(
                "Acorn",
                [(0, 1), (1, 3), (2, 0), (2, 1), (2, 4), (2, 5), (2, 6)],
                "Takes 5206 generations to stabilize",
            )
        )

    def add_pattern(self, pattern: Pattern) -> None:
        """Add a pattern to the library, replacing any with the same name."""
        self._patterns[pattern.name] = pattern

    def get_pattern(self, name: str) -> Optional[Pattern]:
        """Get a pattern by name.

        Args:
            name: Pattern name

        Returns:
            Pattern instance or None if not found
        """
        return self._patterns.get(name)

    def list_patterns(self) -> List[str]:
        """Get list of all pattern names."""
        return list(self._patterns.keys())

    def get_patterns_by_category(self) -> Dict[str, List[str]]:
        """Get patterns organized by category.

        Returns:
            Dictionary mapping categories to pattern name lists
        """
        categories = {cat: list(names) for cat, names in self.CATEGORIES.items()}
        categories["Custom"] = []

        all_builtin = set()
        for cat_patterns in self.CATEGORIES.values():
            all_builtin.update(cat_patterns)

        for name in self._patterns:
            if name not in all_builtin:
                categories["Custom"].append(name)

        # Remove empty categories
        return {cat: patterns for cat, patterns in categories.items() if patterns}
