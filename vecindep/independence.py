"""Linear independence of small vector systems.

This module implements the determinant test for systems of two 2D vectors
or three 3D vectors, together with the error types raised while building
and filling such a system.
"""

from __future__ import annotations

import enum
import logging
import math
from typing import Callable, Dict, List, Sequence

import numpy as np

from vecindep.parsing import ParseError, parse_coordinates

logger = logging.getLogger(__name__)

EPSILON = 1e-9

VECTOR_LABELS = ("A", "B", "C")


class InvalidConfiguration(ValueError):
    """Raised when a vector system cannot be constructed as requested."""


class SystemSize(enum.IntEnum):
    """Supported system sizes (vector count equals dimension)."""

    TWO = 2
    THREE = 3


def det2(m: np.ndarray) -> float:
    """Determinant of a 2x2 matrix whose rows are the vectors A and B."""
    a, b = m
    return float(a[0] * b[1] - a[1] * b[0])


def det3(m: np.ndarray) -> float:
    """Determinant of a 3x3 matrix by cofactor expansion along row A."""
    a, b, c = m
    return float(
        a[0] * (b[1] * c[2] - b[2] * c[1])
        - a[1] * (b[0] * c[2] - b[2] * c[0])
        + a[2] * (b[0] * c[1] - b[1] * c[0])
    )


_DETERMINANTS: Dict[SystemSize, Callable[[np.ndarray], float]] = {
    SystemSize.TWO: det2,
    SystemSize.THREE: det3,
}


def _scaled_determinant(fn: Callable[[np.ndarray], float], m: np.ndarray) -> float:
    """Determinant of ``m`` for rows whose products overflow float64.

    Each row is divided by its largest magnitude, so the expansion runs on
    entries in [-1, 1]; the row scales are combined back in log space.
    A determinant too large for float64 comes back as +/-inf.
    """
    scales = np.max(np.abs(m), axis=1)
    if np.any(scales == 0):
        return 0.0
    det = fn(m / scales[:, np.newaxis])
    if det == 0:
        return 0.0
    log_magnitude = float(np.sum(np.log(scales))) + math.log(abs(det))
    if log_magnitude >= math.log(np.finfo(np.float64).max):
        return math.copysign(math.inf, det)
    return math.copysign(math.exp(log_magnitude), det)


def coerce_size(size) -> SystemSize:
    """Validate a requested system size.

    Raises:
        InvalidConfiguration: If size is not the integer 2 or 3
    """
    # bool is an int subclass; True must not pass as a size
    if isinstance(size, bool) or not isinstance(size, (int, np.integer)):
        raise InvalidConfiguration(f"System size must be 2 or 3, got {size!r}")
    try:
        return SystemSize(int(size))
    except ValueError:
        raise InvalidConfiguration(
            f"System size must be 2 or 3, got {size}"
        ) from None


def _format_value(value: float, precision: int) -> str:
    text = np.format_float_positional(value, precision=precision, trim="-")
    # -0 after rounding reads badly
    return "0" if text in ("-0", "-0.") else text


class IndependenceChecker:
    """A fixed-size vector system with a determinant-based independence test.

    The system holds ``size`` vectors of ``size`` coordinates each, stored
    row-wise in a float64 array and initialised to zero.
    """

    def __init__(self, size: int, epsilon: float = EPSILON):
        """Initialize an all-zero vector system.

        Args:
            size: Number of vectors, which is also their dimension (2 or 3)
            epsilon: Tolerance below which the determinant counts as zero

        Raises:
            InvalidConfiguration: If size is not 2 or 3, or epsilon is not a
                finite non-negative number
        """
        self.size = coerce_size(size)
        try:
            epsilon = float(epsilon)
        except (TypeError, ValueError):
            raise InvalidConfiguration(f"Invalid epsilon: {epsilon!r}") from None
        if not math.isfinite(epsilon) or epsilon < 0:
            raise InvalidConfiguration(f"Epsilon must be finite and >= 0, got {epsilon}")
        self.epsilon = epsilon

        self._vectors = np.zeros((int(self.size), int(self.size)), dtype=np.float64)
        self._filled = [False] * int(self.size)
        self._determinant_fn = _DETERMINANTS[self.size]
        self.evaluated = False

        logger.debug(f"Created {int(self.size)}-vector system (epsilon={self.epsilon:g})")

    @property
    def vectors(self) -> np.ndarray:
        """Read-only copy of the stored vectors, one per row."""
        view = self._vectors.copy()
        view.setflags(write=False)
        return view

    @property
    def populated(self) -> bool:
        """True once every vector has been set at least once."""
        return all(self._filled)

    def label(self, index: int) -> str:
        """Display label of the vector at ``index``."""
        self._check_index(index)
        return VECTOR_LABELS[index]

    def set_coordinates(self, index: int, values: Sequence[float]) -> None:
        """Store the coordinates of one vector.

        Args:
            index: Vector index in ``[0, size)``
            values: Exactly ``size`` finite real numbers

        Raises:
            IndexError: If index is out of range
            ParseError: If values has the wrong length or a non-finite entry;
                the stored vector is left unchanged
        """
        self._check_index(index)
        values = list(values)
        if len(values) != self.size:
            raise ParseError(
                f"Expected {int(self.size)} coordinates, got {len(values)}"
            )

        row: List[float] = []
        for value in values:
            try:
                number = float(value)
            except (TypeError, ValueError):
                raise ParseError(f"Not a number: {value!r}") from None
            if not math.isfinite(number):
                raise ParseError(f"Coordinate must be finite, got {value!r}")
            row.append(number)

        self._vectors[index] = row
        self._filled[index] = True
        self.evaluated = False
        logger.debug(f"Vector {VECTOR_LABELS[index]} set to {row}")

    def set_coordinates_from_text(self, index: int, text: str) -> None:
        """Parse a line of coordinates and store it as vector ``index``.

        Raises:
            ParseError: If the text is malformed; nothing is stored
        """
        self._check_index(index)
        self.set_coordinates(index, parse_coordinates(text, int(self.size)))

    def determinant(self) -> float:
        """Determinant of the matrix whose rows are the stored vectors.

        Falls back to a row-scaled expansion when the direct one overflows,
        so the result is never NaN for finite coordinates.
        """
        with np.errstate(over="ignore", invalid="ignore"):
            det = self._determinant_fn(self._vectors)
        if math.isfinite(det):
            return det
        logger.debug("Direct determinant overflowed, rescaling rows")
        return _scaled_determinant(self._determinant_fn, self._vectors)

    def is_linearly_independent(self) -> bool:
        """Whether the stored vectors are linearly independent.

        Returns:
            True if ``|det| > epsilon``; a determinant within epsilon of zero
            is treated as dependent
        """
        det = self.determinant()
        independent = abs(det) > self.epsilon
        self.evaluated = True
        logger.debug(
            f"Determinant={det:.6g}, epsilon={self.epsilon:g}, "
            f"independent={independent}"
        )
        return independent

    def format_vectors(self, precision: int = 4) -> str:
        """Human-readable listing of the vectors, e.g. ``A = (1, 2.5)``.

        Values are rounded for display only.
        """
        lines = []
        for label, row in zip(VECTOR_LABELS, self._vectors):
            coords = ", ".join(_format_value(v, precision) for v in row)
            lines.append(f"{label} = ({coords})")
        return "\n".join(lines)

    def _check_index(self, index: int) -> None:
        if isinstance(index, bool) or not 0 <= index < self.size:
            raise IndexError(
                f"Vector index {index} out of range for a {int(self.size)}-vector system"
            )

    def __repr__(self) -> str:
        return f"IndependenceChecker(size={int(self.size)}, epsilon={self.epsilon:g})"
