"""Console interaction for the vector independence check.

This module reads the system size and vector coordinates from a line-based
text stream, re-prompting on malformed input, and writes the vector listing
and the final verdict to an output stream.
"""

from __future__ import annotations

import logging
import sys
from typing import Dict, Optional, TextIO, Tuple

from vecindep.independence import (
    EPSILON,
    IndependenceChecker,
    InvalidConfiguration,
    SystemSize,
    coerce_size,
)
from vecindep.parsing import ParseError, parse_system_size

logger = logging.getLogger(__name__)

MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "ask_size": "Choose the vector system size (2 or 3):",
        "ask_vector": "Enter the coordinates of vector {label} ({names}):",
        "invalid_input": "Invalid input: {reason}. Please try again.",
        "vectors_heading": "Entered vectors:",
        "independent": "The vector system is linearly independent.",
        "dependent": "The vector system is linearly dependent.",
    },
    "uk": {
        "ask_size": "Оберіть тип системи векторів (2 або 3):",
        "ask_vector": "Введіть координати вектора {label} ({names}):",
        "invalid_input": "Некоректне введення: {reason}. Спробуйте ще раз.",
        "vectors_heading": "Введені вектори:",
        "independent": "Система векторів є лінійно незалежною.",
        "dependent": "Система векторів не є лінійно незалежною.",
    },
}


class RetryLimitExceeded(ParseError):
    """Raised when a prompt received too many malformed lines in a row."""


def get_messages(language: str) -> Dict[str, str]:
    """Return the message table for ``language``."""
    try:
        return MESSAGES[language]
    except KeyError:
        raise ValueError(
            f"Unsupported language '{language}', expected one of {sorted(MESSAGES)}"
        ) from None


class ConsoleSession:
    """Line-oriented question/answer session over a pair of text streams."""

    def __init__(
        self,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        language: str = "en",
        max_retries: Optional[int] = None,
        precision: int = 4,
    ):
        """Initialize the session.

        Args:
            stdin: Input stream (defaults to ``sys.stdin``)
            stdout: Output stream (defaults to ``sys.stdout``)
            language: Message language ("en" or "uk")
            max_retries: Malformed lines tolerated per prompt before giving
                up; None retries until the input is valid
            precision: Digits after the decimal point in the vector listing
        """
        if max_retries is not None and max_retries < 1:
            raise ValueError(f"max_retries must be >= 1 or None, got {max_retries}")
        if isinstance(precision, bool) or not isinstance(precision, int) or precision < 0:
            raise ValueError(f"precision must be an integer >= 0, got {precision!r}")
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.messages = get_messages(language)
        self.max_retries = max_retries
        self.precision = precision
        self.rejected_lines = 0

    def write(self, text: str = "") -> None:
        print(text, file=self.stdout)

    def read_line(self) -> str:
        """Read one line, raising EOFError when the input is exhausted."""
        line = self.stdin.readline()
        if not line:
            raise EOFError("Input ended before all values were read")
        return line.rstrip("\r\n")

    def _reject(self, reason: Exception, failures: int) -> None:
        self.rejected_lines += 1
        logger.warning(f"Rejected input ({failures} in a row): {reason}")
        self.write(self.messages["invalid_input"].format(reason=reason))
        if self.max_retries is not None and failures >= self.max_retries:
            raise RetryLimitExceeded(
                f"Gave up after {failures} invalid entries: {reason}"
            )

    def ask_system_size(self) -> SystemSize:
        """Prompt for the system size until a supported one is entered."""
        failures = 0
        while True:
            self.write(self.messages["ask_size"])
            line = self.read_line()
            try:
                return coerce_size(parse_system_size(line))
            except (ParseError, InvalidConfiguration) as e:
                failures += 1
                self._reject(e, failures)

    def ask_vector(self, checker: IndependenceChecker, index: int) -> None:
        """Prompt for vector ``index`` until its coordinates parse."""
        label = checker.label(index).lower()
        names = " ".join(f"{label}{i + 1}" for i in range(int(checker.size)))
        failures = 0
        while True:
            self.write(
                self.messages["ask_vector"].format(
                    label=checker.label(index), names=names
                )
            )
            line = self.read_line()
            try:
                checker.set_coordinates_from_text(index, line)
                return
            except ParseError as e:
                failures += 1
                self._reject(e, failures)

    def ask_vectors(self, checker: IndependenceChecker) -> None:
        for index in range(int(checker.size)):
            self.ask_vector(checker, index)

    def show_vectors(self, checker: IndependenceChecker) -> None:
        self.write()
        self.write(self.messages["vectors_heading"])
        self.write(checker.format_vectors(precision=self.precision))

    def show_verdict(self, independent: bool) -> None:
        self.write()
        self.write(self.messages["independent" if independent else "dependent"])

    def run(
        self,
        size: Optional[int] = None,
        epsilon: float = EPSILON,
    ) -> Tuple[IndependenceChecker, bool]:
        """Run the full exchange: size, vectors, listing, verdict.

        Args:
            size: System size; prompted for when None
            epsilon: Tolerance for the determinant test

        Returns:
            Tuple of (checker, independent)

        Raises:
            InvalidConfiguration: If an explicit size is unsupported
            RetryLimitExceeded: If a retry cap is set and exceeded
            EOFError: If the input ends early
        """
        if size is None:
            size = self.ask_system_size()
        checker = IndependenceChecker(size, epsilon=epsilon)

        self.ask_vectors(checker)
        self.show_vectors(checker)
        independent = checker.is_linearly_independent()
        self.show_verdict(independent)
        return checker, independent
