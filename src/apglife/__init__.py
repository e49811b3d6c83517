"""
apglife: Conway's Game of Life seeded from noise or APG pattern codes.

The grid, the Life rule and the noise seeder live in ``apglife.core``;
APG code decoding and placement live in ``apglife.patterns``.
"""

from .errors import (
    LifeError,
    OutOfBoundsError,
    UnknownCharacterError,
    UnencodableError,
    InvalidParameterError,
)
from .core.conway_rules import CellState
from .core.grid import DenseGrid
from .core.rng import Rng
from .core.noise import Perlin
from .patterns.apg import ApgCode, ApgDecoder, ApgPattern, parse_strips
from .core.conway import LifeConfig, LifeEngine

__version__ = "0.1.0"

__all__ = [
    'CellState',
    'DenseGrid',
    'Rng',
    'Perlin',
    'ApgCode',
    'ApgDecoder',
    'ApgPattern',
    'parse_strips',
    'LifeConfig',
    'LifeEngine',
    'LifeError',
    'OutOfBoundsError',
    'UnknownCharacterError',
    'UnencodableError',
    'InvalidParameterError',
]
