"""Dense 2D grid storage for the Life simulation.

This module implements the fixed-size grid that every other component reads
from and writes to. Cells live in a flat numpy array in row-major order
(``index = x + width * y``); the grid never grows or shrinks after
construction and every access is bounds-checked.
"""

import numpy as np
from typing import Any, Generic, Iterator, List, Tuple, TypeVar
import logging

from ..errors import InvalidParameterError, OutOfBoundsError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# (dx, dy) offsets of the Moore neighborhood, dy outer, dx inner
NEIGHBOR_OFFSETS: Tuple[Tuple[int, int], ...] = tuple(
    (dx, dy)
    for dy in (-1, 0, 1)
    for dx in (-1, 0, 1)
    if not (dx == 0 and dy == 0)
)


def is_integer(value: Any) -> bool:
    """True for Python and numpy integers, False for bools and everything else."""
    return isinstance(value, (int, np.integer)) and not isinstance(value, (bool, np.bool_))


class DenseGrid(Generic[T]):
    """Fixed-size 2D array with bounds-checked access and neighbor queries.

    Attributes:
        width: Grid width in cells
        height: Grid height in cells
        cells: Flat numpy array of length ``width * height``
    """

    def __init__(self, width: int, height: int, default_value: T, dtype: Any = object):
        """Initialize grid with every cell set to ``default_value``.

        Args:
            width: Grid width (cells)
            height: Grid height (cells)
            default_value: Value stored in every cell initially
            dtype: numpy dtype of the backing array. ``object`` keeps the
                stored values as-is (enum members stay enum members).

        Raises:
            InvalidParameterError: If dimensions are not positive integers
        """
        if not is_integer(width) or not is_integer(height):
            raise InvalidParameterError(f"Grid dimensions must be integers, got {width!r}x{height!r}")
        if width < 1 or height < 1:
            raise InvalidParameterError(f"Grid dimensions must be positive, got {width}x{height}")

        self.width = int(width)
        self.height = int(height)
        self.default_value = default_value
        self.cells = np.empty(self.width * self.height, dtype=dtype)
        self.cells.fill(default_value)

        logger.debug(f"Created dense grid {self.width}x{self.height}")

    def in_bounds(self, x: int, y: int) -> bool:
        """Check whether ``(x, y)`` is a valid cell coordinate."""
        return 0 <= x < self.width and 0 <= y < self.height

    def index_of(self, x: int, y: int) -> int:
        """Flat row-major index of ``(x, y)``.

        Raises:
            OutOfBoundsError: If coordinates are not integers or are out of bounds
        """
        if not (is_integer(x) and is_integer(y)) or not self.in_bounds(x, y):
            raise OutOfBoundsError(x, y, self.width, self.height)
        return int(x) + self.width * int(y)

    def coords_of(self, index: int) -> Tuple[int, int]:
        """Inverse of :meth:`index_of`."""
        if not is_integer(index):
            raise OutOfBoundsError(index, 0, self.width, self.height)
        y, x = divmod(int(index), self.width)
        if not 0 <= index < len(self.cells):
            raise OutOfBoundsError(x, y, self.width, self.height)
        return x, y

    def get(self, x: int, y: int) -> T:
        """Get cell value at coordinates.

        Args:
            x: X coordinate (column)
            y: Y coordinate (row)

        Raises:
            OutOfBoundsError: If coordinates are out of bounds
        """
        return self.cells[self.index_of(x, y)]

    def set(self, x: int, y: int, value: T) -> None:
        """Set cell value at coordinates.

        Raises:
            OutOfBoundsError: If coordinates are out of bounds
        """
        self.cells[self.index_of(x, y)] = value

    def neighbors(self, x: int, y: int) -> List[T]:
        """Values of the Moore neighborhood of ``(x, y)``.

        Neighbors outside the grid are skipped (no wraparound), so corner
        cells get 3 values, edge cells 5 and interior cells 8.

        Raises:
            OutOfBoundsError: If coordinates are not integers
        """
        if not (is_integer(x) and is_integer(y)):
            raise OutOfBoundsError(x, y, self.width, self.height)
        result = []
        for dx, dy in NEIGHBOR_OFFSETS:
            nx, ny = x + dx, y + dy
            if 0 <= nx < self.width and 0 <= ny < self.height:
                result.append(self.cells[nx + self.width * ny])
        return result

    def iter(self) -> Iterator[Tuple[int, T]]:
        """Yield ``(index, value)`` for every cell in row-major order."""
        for index in range(len(self.cells)):
            yield index, self.cells[index]

    def iter_coords(self) -> Iterator[Tuple[Tuple[int, int], T]]:
        """Yield ``((x, y), value)`` for every cell in row-major order."""
        for index, value in self.iter():
            yield self.coords_of(index), value

    def fill(self, value: T) -> None:
        """Overwrite every cell with ``value``."""
        self.cells.fill(value)

    def count(self, value: T) -> int:
        """Number of cells equal to ``value``."""
        return int(np.count_nonzero(self.cells == value))

    def copy(self) -> 'DenseGrid[T]':
        """Create a deep copy of the grid."""
        grid = DenseGrid(self.width, self.height, self.default_value, dtype=self.cells.dtype)
        grid.cells[:] = self.cells
        return grid

    def to_array(self, dtype: Any = None) -> np.ndarray:
        """Get a ``(height, width)`` numpy copy of the cells."""
        array = self.cells.reshape(self.height, self.width)
        return array.astype(dtype) if dtype is not None else array.copy()

    def __len__(self) -> int:
        return len(self.cells)

    def __getitem__(self, key: Tuple[int, int]) -> T:
        """Access cell using grid[x, y] syntax."""
        x, y = key
        return self.get(x, y)

    def __setitem__(self, key: Tuple[int, int], value: T) -> None:
        """Set cell using grid[x, y] = value syntax."""
        x, y = key
        self.set(x, y, value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DenseGrid):
            return False
        return (self.width == other.width and
                self.height == other.height and
                bool(np.array_equal(self.cells, other.cells)))

    def __repr__(self) -> str:
        return f"DenseGrid({self.width}x{self.height}, default={self.default_value!r})"
