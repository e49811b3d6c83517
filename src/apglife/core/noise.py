"""Coherent noise for procedural grid seeding.

A 2D slice of Ken Perlin's improved 3D noise. The third coordinate is held
fixed, so :meth:`Perlin.noise` is a smooth function of ``(x, y)`` whose
lattice hashing goes through a duplicated 512-entry permutation table.
"""

from functools import cmp_to_key
from typing import Optional, Tuple
import logging

from .rng import Rng

logger = logging.getLogger(__name__)

# Ken Perlin's reference permutation of 0..255
CANONICAL_PERMUTATION: Tuple[int, ...] = (
    151, 160, 137, 91, 90, 15, 131, 13, 201, 95, 96, 53, 194, 233, 7, 225,
    140, 36, 103, 30, 69, 142, 8, 99, 37, 240, 21, 10, 23, 190, 6, 148, 247,
    120, 234, 75, 0, 26, 197, 62, 94, 252, 219, 203, 117, 35, 11, 32, 57,
    177, 33, 88, 237, 149, 56, 87, 174, 20, 125, 136, 171, 168, 68, 175, 74,
    165, 71, 134, 139, 48, 27, 166, 77, 146, 158, 231, 83, 111, 229, 122,
    60, 211, 133, 230, 220, 105, 92, 41, 55, 46, 245, 40, 244, 102, 143, 54,
    65, 25, 63, 161, 1, 216, 80, 73, 209, 76, 132, 187, 208, 89, 18, 169,
    200, 196, 135, 130, 116, 188, 159, 86, 164, 100, 109, 198, 173, 186, 3,
    64, 52, 217, 226, 250, 124, 123, 5, 202, 38, 147, 118, 126, 255, 82, 85,
    212, 207, 206, 59, 227, 47, 16, 58, 17, 182, 189, 28, 42, 223, 183, 170,
    213, 119, 248, 152, 2, 44, 154, 163, 70, 221, 153, 101, 155, 167, 43,
    172, 9, 129, 22, 39, 253, 19, 98, 108, 110, 79, 113, 224, 232, 178, 185,
    112, 104, 218, 246, 97, 228, 251, 34, 242, 193, 238, 210, 144, 12, 191,
    179, 162, 241, 81, 51, 145, 235, 249, 14, 239, 107, 49, 192, 214, 31,
    181, 199, 106, 157, 184, 84, 204, 176, 115, 121, 50, 45, 127, 4, 150,
    254, 138, 236, 205, 93, 222, 114, 67, 29, 24, 72, 243, 141, 128, 195,
    78, 66, 215, 61, 156, 180,
)

NOISE_Z = 10.0
NOISE_RNG_BITS = 16


def lerp(t: float, a: float, b: float) -> float:
    """Linear interpolation between ``a`` and ``b``."""
    return a + t * (b - a)


def fade(t: float) -> float:
    """Perlin fade curve ``6t^5 - 15t^4 + 10t^3``."""
    return t * t * t * (t * (t * 6 - 15) + 10)


def grad(hash_value: int, x: float, y: float, z: float) -> float:
    """Dot product of ``(x, y, z)`` with the gradient picked by ``hash_value``."""
    h = hash_value & 15
    u = x if h < 8 else y
    if h < 4:
        v = y
    elif h == 12 or h == 14:
        v = x
    else:
        v = z
    return (u if (h & 1) == 0 else -u) + (v if (h & 2) == 0 else -v)


class Perlin:
    """Permutation-table coherent noise generator.

    Attributes:
        rng: Random source used to shuffle the permutation
        randomized: Whether the canonical permutation was reordered
    """

    def __init__(self, randomize: bool = False, rng: Optional[Rng] = None):
        """Build the permutation table.

        Args:
            randomize: Reorder the canonical permutation with coin flips
            rng: Random source for the reordering (16-bit by default)
        """
        self.rng = rng if rng is not None else Rng(NOISE_RNG_BITS)
        self.randomized = randomize

        permutation = list(CANONICAL_PERMUTATION)
        if randomize:
            # Each comparison is a fresh coin flip, which is not a uniform
            # shuffle. list.sort tolerates the inconsistent ordering.
            permutation.sort(key=cmp_to_key(lambda a, b: -1 if self.rng.random_bool() else 1))
        self._permutation: Tuple[int, ...] = tuple(permutation)
        self._p: Tuple[int, ...] = self._permutation + self._permutation

        logger.debug(f"Created perlin noise (randomized={randomize})")

    @property
    def permutation(self) -> list:
        """Copy of the 256-entry permutation in use."""
        return list(self._permutation)

    @property
    def table(self) -> Tuple[int, ...]:
        """The duplicated 512-entry lookup table."""
        return self._p

    def noise(self, x: float, y: float) -> float:
        """Sample noise at ``(x, y)`` on the fixed ``z = 10`` slice.

        Only ``x`` and ``y`` are reduced to their fractional offsets; ``z``
        enters the gradients and the fade at its lattice value, which keeps
        samples at integer cell coordinates away from zero.
        """
        p = self._p
        z = NOISE_Z

        X = int(x // 1) & 255
        Y = int(y // 1) & 255
        Z = int(z // 1) & 255

        x -= x // 1
        y -= y // 1

        u = fade(x)
        v = fade(y)
        w = fade(z)

        A = p[X] + Y
        AA = p[A] + Z
        AB = p[A + 1] + Z
        B = p[X + 1] + Y
        BA = p[B] + Z
        BB = p[B + 1] + Z

        return lerp(w,
                    lerp(v,
                         lerp(u, grad(p[AA], x, y, z),
                              grad(p[BA], x - 1, y, z)),
                         lerp(u, grad(p[AB], x, y - 1, z),
                              grad(p[BB], x - 1, y - 1, z))),
                    lerp(v,
                         lerp(u, grad(p[AA + 1], x, y, z - 1),
                              grad(p[BA + 1], x - 1, y, z - 1)),
                         lerp(u, grad(p[AB + 1], x, y - 1, z - 1),
                              grad(p[BB + 1], x - 1, y - 1, z - 1))))
