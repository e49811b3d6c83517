"""APG pattern code decoding and placement.

An APG code such as ``xq4_153`` names a pattern class and period in its
prefix (``xs`` still life, ``xp<n>`` oscillator, ``xq<n>`` spaceship) and
packs the cells into its body. The body is a sequence of column tokens, each
standing for a 5-cell tall column; ``z`` separates 5-row strips, and
``w``, ``x`` and ``y<c>`` abbreviate runs of blank columns.
"""

from enum import Enum
from types import MappingProxyType
from typing import Iterator, List, Mapping, Optional, Tuple
import logging

from ..core.conway_rules import CellState
from ..errors import UnencodableError, UnknownCharacterError

logger = logging.getLogger(__name__)

STRIP_HEIGHT = 5
STRIP_SEPARATOR = 'z'
RUN_MARKER = 'y'
ALPHABET = frozenset('0123456789abcdefghijklmnopqrstuvwxyz')

_TOKENS = '0123456789abcdefghijklmnopqrstuv'

# Column token -> 5-bit column, least significant bit is the top cell
APG_TABLE: Mapping[str, str] = MappingProxyType(
    {token: format(value, '05b') for value, token in enumerate(_TOKENS)}
)

# Character after ``y`` -> number of blank columns. ``y`` itself has no entry.
Y_TABLE: Mapping[str, int] = MappingProxyType({
    **{token: value + 4 for value, token in enumerate(_TOKENS)},
    'w': 36,
    'x': 37,
    'z': 39,
})

BLANK_RUNS: Mapping[str, str] = MappingProxyType({'w': '00', 'x': '000'})


class ApgPattern(Enum):
    """Pattern class encoded by the two-letter APG prefix."""
    STILL_LIFE = 'xs'
    OSCILLATOR = 'xp'
    SPACESHIP = 'xq'


def column_for(token: str) -> str:
    """5-bit column string for a single column token.

    Raises:
        UnknownCharacterError: If ``token`` is not a column token
    """
    try:
        return APG_TABLE[token]
    except KeyError:
        raise UnknownCharacterError(token, 0, "not a column token") from None


class ApgDecoder:
    """Cursor over an APG body that expands run-length abbreviations.

    Each call to :meth:`decode_next` consumes source characters and returns
    the next chunk of column tokens (with ``z`` separators kept), or ``None``
    once the source is exhausted. The decoder is also a Python iterator.
    """

    def __init__(self, source: str):
        self.source = source
        self.index = 0

    def _previous(self) -> Optional[str]:
        # No previous character at the start of the source
        if self.index == 0:
            return None
        return self.source[self.index - 1]

    def decode_next(self) -> Optional[str]:
        """Decode the next chunk, or return ``None`` at end of source."""
        while self.index < len(self.source):
            position = self.index
            current = self.source[position]
            previous = self._previous()
            self.index += 1

            if current not in ALPHABET:
                raise UnknownCharacterError(current, position)

            if previous == RUN_MARKER:
                if current not in Y_TABLE:
                    raise UnknownCharacterError(current, position, "invalid run length")
                return '0' * Y_TABLE[current]
            if current == RUN_MARKER:
                if self.index >= len(self.source):
                    raise UnknownCharacterError(current, position, "unterminated run")
                continue
            if current in BLANK_RUNS:
                return BLANK_RUNS[current]
            return current
        return None

    def decode(self) -> str:
        """Decode the remaining source into one flat token string."""
        return ''.join(self)

    def __iter__(self) -> 'ApgDecoder':
        return self

    def __next__(self) -> str:
        chunk = self.decode_next()
        if chunk is None:
            raise StopIteration
        return chunk


def parse_strips(body: str) -> List[List[str]]:
    """Decode an APG body into strips of 5-bit column strings.

    Empty segments (leading, trailing or doubled ``z``) become empty strips
    so that strip positions are preserved.

    Raises:
        UnknownCharacterError: If the body is not valid APG
    """
    decoded = ApgDecoder(body).decode()
    strips = []
    for segment in decoded.split(STRIP_SEPARATOR):
        strips.append([APG_TABLE[token] for token in segment])
    return strips


def _parse_prefix(prefix: str) -> Tuple[ApgPattern, int]:
    lead = prefix[:2]
    try:
        pattern = ApgPattern(lead)
    except ValueError:
        raise UnencodableError(f"Unknown pattern type {lead!r} in prefix {prefix!r}") from None

    if pattern is ApgPattern.STILL_LIFE:
        return pattern, 1

    suffix = prefix[2:]
    if not (suffix.isascii() and suffix.isdecimal()):
        raise UnencodableError(f"Period {suffix!r} in prefix {prefix!r} is not an integer")
    return pattern, int(suffix)


class ApgCode:
    """Parsed APG code.

    Attributes:
        source: Original code text
        pattern: Pattern class from the prefix
        period: 1 for still lifes, otherwise the prefix's numeric suffix
        strips: Decoded body, one list of 5-bit column strings per strip
        extra: Trailing ``_``-separated segments, kept but unused
    """

    def __init__(self, source: str):
        """Parse an APG code.

        Args:
            source: Code of the form ``<prefix>_<body>[_<extra>]*``

        Raises:
            UnencodableError: If prefix or body is missing or malformed
            UnknownCharacterError: If the body contains invalid characters
        """
        if not isinstance(source, str):
            raise UnencodableError(f"APG code must be a string, got {type(source).__name__}")

        parts = source.split('_')
        if len(parts) < 2 or not parts[0] or not parts[1]:
            raise UnencodableError(f"APG code {source!r} needs a prefix and a body")

        self.source = source
        self.pattern, self.period = _parse_prefix(parts[0])
        self.strips = parse_strips(parts[1])
        self.extra = parts[2:]

        logger.debug(f"Parsed {self.pattern.name} p{self.period} with {len(self.strips)} strips")

    @property
    def width(self) -> int:
        """Number of columns in the widest strip."""
        return max((len(strip) for strip in self.strips), default=0)

    @property
    def height(self) -> int:
        """Number of rows covered by all strips."""
        return STRIP_HEIGHT * len(self.strips)

    @property
    def population(self) -> int:
        """Number of live cells in the pattern."""
        return sum(1 for _, state in self.iter() if state == CellState.ALIVE)

    def iter(self) -> Iterator[Tuple[Tuple[int, int], CellState]]:
        """Yield ``((x, y), state)`` for every cell the pattern covers.

        Strip ``i`` starts ``5 * i`` rows down, column ``j`` sits at ``x = j``,
        and a column string is laid out from ``y = 4`` up to ``y = 0``.
        """
        for strip_index, strip in enumerate(self.strips):
            offset = STRIP_HEIGHT * strip_index
            for x, column in enumerate(strip):
                for row, bit in enumerate(column):
                    y = STRIP_HEIGHT - 1 - row + offset
                    yield (x, y), CellState.DEAD if bit == '0' else CellState.ALIVE

    def __iter__(self) -> Iterator[Tuple[Tuple[int, int], CellState]]:
        return self.iter()

    def __repr__(self) -> str:
        return f"ApgCode({self.source!r}, pattern={self.pattern.name}, period={self.period})"
