"""Conway's Game of Life engine.

Owns the simulation grid, seeds it from coherent noise or from an APG pattern
code, and advances it one generation at a time. A renderer only needs
``engine.grid.iter_coords()`` between calls to ``engine.step()``.
"""

import os
from dataclasses import dataclass
from typing import List, Optional, Tuple
import logging

from .conway_rules import CellState, count_alive, next_state
from .grid import DenseGrid, is_integer
from .noise import NOISE_RNG_BITS, Perlin
from .rng import Rng
from ..errors import InvalidParameterError
from ..patterns.apg import ApgCode

logger = logging.getLogger(__name__)

NOISE_THRESHOLD = 0.5
SEED_WEIGHT = 0.35
PATTERN_MARGIN = 5

DEFAULT_WIDTH = 64
DEFAULT_HEIGHT = 64


@dataclass
class LifeConfig:
    """Simulation configuration.

    Attributes:
        width: Grid width in cells
        height: Grid height in cells
        pattern: Optional APG code; the grid is noise-seeded when absent
    """

    width: int
    height: int
    pattern: Optional[str] = None

    def __post_init__(self):
        """Validate configuration after construction."""
        for name in ("width", "height"):
            value = getattr(self, name)
            if not is_integer(value) or value < 1:
                raise InvalidParameterError(f"{name} must be a positive integer, got {value!r}")
            setattr(self, name, int(value))
        if self.pattern is not None and not isinstance(self.pattern, str):
            raise InvalidParameterError(f"pattern must be a string, got {type(self.pattern).__name__}")

    @classmethod
    def from_env(cls) -> 'LifeConfig':
        """Create configuration from APGLIFE_* environment variables."""
        try:
            width = int(os.getenv('APGLIFE_WIDTH', DEFAULT_WIDTH))
            height = int(os.getenv('APGLIFE_HEIGHT', DEFAULT_HEIGHT))
        except ValueError as e:
            raise InvalidParameterError(f"Grid dimensions from environment are not integers: {e}") from e
        pattern = os.getenv('APGLIFE_PATTERN') or None
        return cls(width=width, height=height, pattern=pattern)


class LifeEngine:
    """Game of Life simulation over a fixed-size grid.

    Attributes:
        config: Configuration the engine was built from
        grid: Cell states, ``DEAD`` outside the seeded area
        apg: Parsed pattern when the engine was seeded from an APG code
        generation: Number of steps applied so far
    """

    def __init__(self, config: LifeConfig,
                 noise: Optional[Perlin] = None,
                 rng: Optional[Rng] = None):
        """Build the grid and seed it.

        Args:
            config: Grid dimensions and optional APG pattern
            noise: Noise source for pattern-less seeding (randomized by default)
            rng: Coin-flip source for pattern-less seeding (16-bit by default)

        Raises:
            UnencodableError: If the pattern code is malformed
            UnknownCharacterError: If the pattern body is not valid APG
            OutOfBoundsError: If the pattern does not fit in the grid
        """
        self.config = config
        self.grid: DenseGrid[CellState] = DenseGrid(config.width, config.height, CellState.DEAD)
        self.apg: Optional[ApgCode] = None
        self.generation = 0

        if config.pattern is None:
            self._seed_from_noise(noise if noise is not None else Perlin(randomize=True),
                                  rng if rng is not None else Rng(NOISE_RNG_BITS))
        else:
            self.apg = ApgCode(config.pattern)
            self._place_pattern(self.apg)

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height

    def _seed_from_noise(self, noise: Perlin, rng: Rng) -> None:
        # Noise gates density, the weighted coin flip thins it further
        for (x, y), _ in self.grid.iter_coords():
            if noise.noise(x, y) > NOISE_THRESHOLD and rng.random_bool(SEED_WEIGHT):
                self.grid.set(x, y, CellState.ALIVE)

        logger.debug(f"Noise-seeded {self.width}x{self.height} grid with {self.population()} live cells")

    def pattern_origin(self) -> Tuple[int, int]:
        """Grid position of the pattern's ``(0, 0)`` cell."""
        return self.width // 2 - PATTERN_MARGIN, self.height // 2 - PATTERN_MARGIN

    def _place_pattern(self, apg: ApgCode) -> None:
        origin_x, origin_y = self.pattern_origin()
        for (x, y), state in apg.iter():
            self.grid.set(origin_x + x, origin_y + y, state)

        logger.info(f"Placed {apg.pattern.name.lower()} {apg.source} at ({origin_x}, {origin_y})")

    def living_neighbors(self, x: int, y: int) -> int:
        """Count living neighbors of a cell (no wraparound)."""
        return count_alive(self.grid.neighbors(x, y))

    def dead_neighbors(self, x: int, y: int) -> int:
        """Count dead neighbors of a cell (no wraparound)."""
        neighbors = self.grid.neighbors(x, y)
        return len(neighbors) - count_alive(neighbors)

    def step(self) -> None:
        """Advance the grid one generation.

        All next states are computed from the current generation before any
        cell is written, so neighbor counts never see a half-updated grid.
        """
        updates: List[Tuple[int, int, CellState]] = []
        for (x, y), state in self.grid.iter_coords():
            new_state = next_state(state, self.living_neighbors(x, y))
            if new_state != state:
                updates.append((x, y, new_state))

        for x, y, state in updates:
            self.grid.set(x, y, state)

        self.generation += 1
        logger.debug(f"Generation {self.generation}: {len(updates)} cells changed")

    def run(self, steps: int) -> List[int]:
        """Advance ``steps`` generations.

        Returns:
            Population after each step
        """
        populations = []
        for _ in range(steps):
            self.step()
            populations.append(self.population())
        return populations

    def population(self) -> int:
        """Number of live cells."""
        return self.grid.count(CellState.ALIVE)

    def is_extinct(self) -> bool:
        """Check if all cells are dead."""
        return self.population() == 0

    def live_cells(self) -> List[Tuple[int, int]]:
        """Coordinates of every live cell in row-major order."""
        return [pos for pos, state in self.grid.iter_coords() if state == CellState.ALIVE]

    def __str__(self) -> str:
        """String representation showing live cells as X."""
        lines = []
        for y in range(self.height):
            lines.append(''.join('X' if self.grid.get(x, y) == CellState.ALIVE else '.'
                                 for x in range(self.width)))
        return '\n'.join(lines)

    def __repr__(self) -> str:
        return (f"LifeEngine({self.width}x{self.height}, generation={self.generation}, "
                f"alive={self.population()})")
