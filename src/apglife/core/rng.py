"""Random number utilities backed by a cryptographically strong byte source.

Every draw reads fresh bytes from :mod:`secrets`; an :class:`Rng` holds no
internal seed, only the bit width that decides how many bytes a draw consumes
and which integer ranges are representable.
"""

import math
import secrets
from numbers import Integral, Real
from typing import Optional
import logging

from ..errors import InvalidParameterError

logger = logging.getLogger(__name__)

DEFAULT_BITS = 32


def _is_integral(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    if isinstance(value, Integral):
        return True
    try:
        return float(value).is_integer()
    except OverflowError:
        return False


class Rng:
    """Bit-width parameterised random source.

    Attributes:
        bits: Bit width of each draw (multiple of 8)
        byte_length: Number of random bytes consumed per draw
        rand_max: Largest unsigned value representable in ``bits``
        signed_max: Upper bound for :meth:`random_int`
        signed_min: Lower bound for :meth:`random_int`
    """

    def __init__(self, bits: int = DEFAULT_BITS):
        """Initialize random source.

        Args:
            bits: Bit width, one of 8/16/32/64 or any other positive multiple of 8

        Raises:
            InvalidParameterError: If ``bits`` is not a positive multiple of 8
        """
        if not _is_integral(bits) or bits <= 0 or bits % 8 != 0:
            raise InvalidParameterError(f"Bits must be a positive multiple of 8, got {bits!r}")

        self.bits = int(bits)
        self.byte_length = self.bits // 8
        self.rand_max = (1 << self.bits) - 1
        self.signed_max = self.rand_max // 2
        self.signed_min = self.signed_max - self.rand_max

        logger.debug(f"Created {self.bits}-bit rng")

    def random(self) -> float:
        """Random float in ``[0.0, 1.0]`` scaled by :attr:`rand_max`."""
        raw = int.from_bytes(secrets.token_bytes(self.byte_length), "big")
        return raw / self.rand_max

    def random_bool(self, weight: float = 0.5) -> bool:
        """Weighted coin flip, True with probability ``weight``.

        Raises:
            InvalidParameterError: If weight is outside ``[0.0, 1.0]``
        """
        if not isinstance(weight, Real) or not 0.0 <= weight <= 1.0:
            raise InvalidParameterError(f"Weight should be a value between 0.0 and 1.0, got {weight!r}")
        return self.random() <= weight

    def random_int(self, max_value: Optional[int] = None, min_value: Optional[int] = None) -> int:
        """Random integer in ``[min_value, max_value]`` within the signed range.

        Bounds default to :attr:`signed_min` / :attr:`signed_max`.
        """
        max_value = self.signed_max if max_value is None else max_value
        min_value = self.signed_min if min_value is None else min_value
        self._check_bounds(max_value, min_value, self.signed_min, self.signed_max)
        return self._scale(max_value, min_value)

    def random_uint(self, max_value: Optional[int] = None, min_value: Optional[int] = None) -> int:
        """Random integer in ``[min_value, max_value]`` within the unsigned range."""
        max_value = self.rand_max if max_value is None else max_value
        min_value = 0 if min_value is None else min_value
        self._check_bounds(max_value, min_value, 0, self.rand_max)
        return self._scale(max_value, min_value)

    def _check_bounds(self, max_value, min_value, lowest: int, highest: int) -> None:
        if not _is_integral(max_value) or max_value > highest:
            raise InvalidParameterError(f"Maximum should be an integer <= {highest}, got {max_value!r}")
        if not _is_integral(min_value) or min_value < lowest:
            raise InvalidParameterError(f"Minimum should be an integer >= {lowest}, got {min_value!r}")
        if min_value > max_value:
            raise InvalidParameterError(f"Minimum {min_value} is greater than maximum {max_value}")

    def _scale(self, max_value, min_value) -> int:
        max_value, min_value = int(max_value), int(min_value)
        # round half up, not banker's rounding
        value = int(math.floor(self.random() * (max_value - min_value) + min_value + 0.5))
        # float precision at 64 bits can step past the bounds
        return max(min_value, min(max_value, value))

    def __repr__(self) -> str:
        return f"Rng(bits={self.bits})"
