"""Error types raised by the lattice engine."""


class LatticeError(Exception):
    """Base class for all lattice errors."""


class InvalidDimensions(LatticeError, ValueError):
    """Raised when a lattice is constructed with a non-positive width or height."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        super().__init__(f"Lattice dimensions must be positive integers, got {width}x{height}")


class DimensionMismatch(LatticeError, ValueError):
    """Raised when a cell buffer does not match the requested dimensions."""

    def __init__(self, width: int, height: int, length: int) -> None:
        self.width = width
        self.height = height
        self.length = length
        super().__init__(
            f"Cell buffer has {length} cells, expected {width * height} for a {width}x{height} lattice"
        )


class OutOfRange(LatticeError, IndexError):
    """Raised when direct indexing is given coordinates outside the lattice."""

    def __init__(self, row: int, column: int, width: int, height: int) -> None:
        self.row = row
        self.column = column
        super().__init__(f"Coordinates (row={row}, column={column}) outside {width}x{height} lattice")


class InvalidRule(LatticeError, ValueError):
    """Raised when rule thresholds cannot describe a valid automaton."""
