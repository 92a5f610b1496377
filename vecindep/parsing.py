"""Parsing of user-supplied coordinate text.

Coordinates are whitespace-separated; a decimal comma is accepted and
normalized to a decimal point before conversion.
"""

from __future__ import annotations

import logging
import math
from typing import List

logger = logging.getLogger(__name__)


class ParseError(ValueError):
    """Raised when a line of input cannot be read as the requested values."""


def normalize_decimal(token: str) -> str:
    """Replace a decimal comma with a decimal point."""
    return token.replace(",", ".")


def parse_number(token: str) -> float:
    """Parse one finite real number.

    Args:
        token: Text of a single number, with decimal point or comma

    Returns:
        The parsed value

    Raises:
        ParseError: If the token is not a finite number
    """
    # float() also takes digit separators like "1_000"
    if "_" in token:
        raise ParseError(f"'{token}' is not a number")
    try:
        value = float(normalize_decimal(token))
    except ValueError:
        raise ParseError(f"'{token}' is not a number") from None
    if not math.isfinite(value):
        raise ParseError(f"'{token}' is not a finite number")
    return value


def parse_coordinates(text: str, size: int) -> List[float]:
    """Parse a line holding exactly ``size`` coordinates.

    Args:
        text: Input line, e.g. ``"1,5 -2 0.25"``
        size: Required number of coordinates

    Returns:
        List of ``size`` floats

    Raises:
        ParseError: On wrong token count or a non-numeric token
    """
    tokens = text.split()
    if len(tokens) != size:
        raise ParseError(f"Expected {size} numbers, got {len(tokens)}")
    values = [parse_number(token) for token in tokens]
    logger.debug(f"Parsed {text!r} -> {values}")
    return values


def parse_system_size(text: str) -> int:
    """Parse the system size selector.

    Only the integer form is checked here; whether the size is supported is
    decided when the system is constructed.
    """
    token = text.strip()
    try:
        return int(token)
    except ValueError:
        raise ParseError(f"'{token}' is not a whole number") from None
