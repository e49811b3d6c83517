"""Exception types raised by the apglife core.

Each error subclasses the builtin exception a caller would naturally expect
(IndexError for grid access, ValueError for bad input), so existing
``except IndexError`` / ``except ValueError`` handlers keep working.
"""

from typing import Optional


class LifeError(Exception):
    """Base class for all apglife errors."""


class OutOfBoundsError(LifeError, IndexError):
    """Grid coordinates fall outside ``[0, width) x [0, height)``."""

    def __init__(self, x: int, y: int, width: int, height: int):
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        super().__init__(f"Coordinates ({x}, {y}) out of bounds for {width}x{height} grid")


class UnknownCharacterError(LifeError, ValueError):
    """APG body contains a character the decoder cannot interpret."""

    def __init__(self, character: Optional[str], position: int, reason: str = "unknown character"):
        self.character = character
        self.position = position
        self.reason = reason
        super().__init__(f"{reason} {character!r} at position {position}")


class UnencodableError(LifeError, ValueError):
    """APG code has a malformed prefix or is missing its body."""


class InvalidParameterError(LifeError, ValueError):
    """A numeric parameter is outside the range the component supports."""
