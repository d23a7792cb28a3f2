"""Toroidal lattice of two-state cells."""

from typing import Iterable, Optional, Sequence, Set, Tuple
import numpy as np
import torch
import torch.nn.functional as F

from .errors import DimensionMismatch, InvalidDimensions, OutOfRange

ALIVE_SYMBOL = "◼"
DEAD_SYMBOL = "◻"

# Moore neighbourhood offsets, self excluded
NEIGHBOR_DELTAS: Tuple[Tuple[int, int], ...] = tuple(
    (delta_row, delta_col)
    for delta_row in (-1, 0, 1)
    for delta_col in (-1, 0, 1)
    if (delta_row, delta_col) != (0, 0)
)


def _is_integer(value) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


def validate_dimensions(width: int, height: int) -> None:
    for value in (width, height):
        if not _is_integer(value) or value <= 0:
            raise InvalidDimensions(width, height)


class Lattice:
    """A fixed-size 2D grid of DEAD/ALIVE cells whose edges wrap around.

    Cells live in a flat, row-major boolean buffer: the cell at ``(row, column)``
    is stored at ``row * width + column``. The buffer length never changes.

    Two things mutate a lattice: :meth:`advance`, which replaces the buffer with
    the next generation, and :meth:`toggle_cell`, which flips one cell in place.
    The lattice is meant to be owned and driven by a single thread.
    """

    def __init__(self, width: int, height: int, seed: Optional[int] = None) -> None:
        """Create a lattice with a random initial state.

        Args:
            width: Number of columns (must be positive)
            height: Number of rows (must be positive)
            seed: Optional seed for this lattice's random fill

        Raises:
            InvalidDimensions: If width or height is not a positive integer
        """
        validate_dimensions(width, height)
        rng = np.random.default_rng(seed)
        self._setup(int(width), int(height), rng.random(int(width) * int(height)) < 0.5)

    def _setup(self, width: int, height: int, cells: np.ndarray) -> None:
        self._width = width
        self._height = height
        self._cells = cells

        # Single-threaded; the lattice is never advanced concurrently
        torch.set_num_threads(1)

        # Reused for every neighbour count
        self._torch_input = torch.zeros(1, 1, height, width, dtype=torch.float32)
        self._torch_kernel = (
            torch.tensor([[1, 1, 1], [1, 0, 1], [1, 1, 1]], dtype=torch.float32).unsqueeze(0).unsqueeze(0)
        )

    @classmethod
    def from_cells(cls, width: int, height: int, cells: Iterable) -> "Lattice":
        """Create a lattice from an explicit row-major cell buffer.

        Args:
            width: Number of columns
            height: Number of rows
            cells: Flat sequence of ``width * height`` truthy/falsy values

        Returns:
            New Lattice holding a copy of ``cells``

        Raises:
            InvalidDimensions: If width or height is not a positive integer
            DimensionMismatch: If the buffer length is not ``width * height``
        """
        validate_dimensions(width, height)
        items = cells if isinstance(cells, np.ndarray) else list(cells)
        try:
            buffer = np.array(items, dtype=bool)
        except ValueError:
            # Ragged nested input
            raise DimensionMismatch(width, height, len(items)) from None

        if buffer.ndim != 1 or buffer.size != width * height:
            raise DimensionMismatch(width, height, len(items))

        lattice = cls.__new__(cls)
        lattice._setup(int(width), int(height), buffer)
        return lattice

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence]) -> "Lattice":
        """Create a lattice from a list of rows.

        Raises:
            InvalidDimensions: If there are no rows or the rows are empty
            DimensionMismatch: If the rows have different lengths
        """
        height = len(rows)
        width = len(rows[0]) if height else 0
        validate_dimensions(width, height)

        flat = []
        for row in rows:
            if len(row) != width:
                raise DimensionMismatch(width, height, sum(len(r) for r in rows))
            flat.extend(row)
        return cls.from_cells(width, height, flat)

    @property
    def width(self) -> int:
        """Number of columns."""
        return self._width

    @property
    def height(self) -> int:
        """Number of rows."""
        return self._height

    @property
    def shape(self) -> Tuple[int, int]:
        """Dimensions as (height, width)."""
        return (self._height, self._width)

    @property
    def population(self) -> int:
        """Number of living cells."""
        return int(np.count_nonzero(self._cells))

    def index_of(self, row: int, column: int) -> int:
        """Return the buffer index of a cell.

        Direct indexing does not wrap; coordinates must already be in range.

        Raises:
            OutOfRange: If ``row`` is not in [0, height) or ``column`` not in [0, width),
                or either coordinate is not an integer
        """
        in_range = (
            _is_integer(row) and _is_integer(column) and 0 <= row < self._height and 0 <= column < self._width
        )
        if not in_range:
            raise OutOfRange(row, column, self._width, self._height)
        return row * self._width + column

    def cell(self, row: int, column: int) -> bool:
        """Return True if the cell at (row, column) is alive."""
        return bool(self._cells[self.index_of(row, column)])

    def live_neighbor_count(self, row: int, column: int) -> int:
        """Count living cells in the Moore neighbourhood of (row, column).

        Neighbour coordinates wrap around both edges. On a lattice one cell
        wide or high the same cell can be sampled more than once.

        Args:
            row: Row coordinate
            column: Column coordinate

        Returns:
            Number of living neighbours (0-8)
        """
        count = 0
        for delta_row, delta_col in NEIGHBOR_DELTAS:
            neighbor_row = (row + delta_row) % self._height
            neighbor_col = (column + delta_col) % self._width
            count += int(self._cells[neighbor_row * self._width + neighbor_col])
        return count

    def count_all_neighbors(self) -> np.ndarray:
        """Count neighbours of every cell with a circular-padded convolution.

        Returns:
            Array of shape (height, width) with each cell's live neighbour count
        """
        grid = self._cells.reshape(self._height, self._width).astype(np.float32)
        self._torch_input[0, 0] = torch.from_numpy(grid)

        padded = F.pad(self._torch_input, (1, 1, 1, 1), mode="circular")
        neighbors = F.conv2d(padded, self._torch_kernel)

        return neighbors[0, 0].numpy().astype(np.int8)

    def advance(self, birth_threshold: int, survival_min: int, survival_max: int) -> None:
        """Advance the lattice by one generation.

        Every cell is evaluated against the current generation and the results
        are written to a new buffer, which then replaces the current one.

        Args:
            birth_threshold: Exact neighbour count that brings a dead cell to life
            survival_min: Fewest neighbours a living cell needs to survive
            survival_max: Most neighbours a living cell can have and survive
        """
        # int64 so thresholds outside the int8 range compare exactly
        counts = self.count_all_neighbors().reshape(-1).astype(np.int64)
        current = self._cells

        born = ~current & (counts == birth_threshold)
        survives = current & (counts >= survival_min) & (counts <= survival_max)

        self._cells = born | survives

    def step(self, rule) -> None:
        """Advance one generation under a :class:`~lifelattice.core.rules.Rule`."""
        self.advance(rule.birth, rule.survival_min, rule.survival_max)

    def toggle_cell(self, row: int, column: int) -> None:
        """Flip the cell at (row, column) between dead and alive.

        Raises:
            OutOfRange: If the coordinates are outside the lattice
        """
        idx = self.index_of(row, column)
        self._cells[idx] = not self._cells[idx]

    def cells_view(self) -> np.ndarray:
        """Return a read-only view of the current cell buffer.

        The view shares memory with the lattice. It is only meaningful until the
        next :meth:`advance` or :meth:`toggle_cell` call.
        """
        view = self._cells.view()
        view.flags.writeable = False
        return view

    def cells_snapshot(self) -> np.ndarray:
        """Return an independent copy of the current cell buffer."""
        return self._cells.copy()

    def to_rows(self) -> np.ndarray:
        """Return a (height, width) copy of the cells."""
        return self._cells.reshape(self._height, self._width).copy()

    def live_cells(self) -> Set[Tuple[int, int]]:
        """Get the (row, column) coordinates of every living cell."""
        indices = np.flatnonzero(self._cells)
        return {(int(idx) // self._width, int(idx) % self._width) for idx in indices}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Lattice):
            return NotImplemented
        return self.shape == other.shape and np.array_equal(self._cells, other._cells)

    def __repr__(self) -> str:
        return f"Lattice(width={self._width}, height={self._height}, population={self.population})"

    def __str__(self) -> str:
        """One line per row, living cells as '◼' and dead cells as '◻'."""
        result = []
        for row in self._cells.reshape(self._height, self._width):
            result.append("".join(ALIVE_SYMBOL if alive else DEAD_SYMBOL for alive in row))
        return "\n".join(result)
