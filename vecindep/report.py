"""Run reports for the independence check.

This module provides a timing utility and a small report container that can
be summarised for the log or written out as JSON.
"""

from __future__ import annotations

import json
import logging
import os
import time
from typing import Dict, List, Optional, Union

from vecindep.independence import VECTOR_LABELS, IndependenceChecker

logger = logging.getLogger(__name__)


class Timer:
    """Wall-clock timer for one check, usable as a context manager.

    The duration is logged at DEBUG level under ``name`` when it stops.
    """

    def __init__(self, name: str = "Timer", logger: Optional[logging.Logger] = None):
        self.name = name
        self.logger = logger or logging.getLogger(__name__)
        self.start_time = None
        self.end_time = None

    def start(self) -> None:
        self.start_time = time.perf_counter()
        self.end_time = None

    def stop(self) -> float:
        """Stop and return the seconds since ``start``; 0.0 if never started."""
        if self.start_time is None:
            self.logger.warning(f"{self.name}: Timer stopped without being started")
            return 0.0

        self.end_time = time.perf_counter()
        elapsed = self.end_time - self.start_time
        self.logger.debug(f"{self.name}: {elapsed:.4f}s")
        return elapsed

    def __enter__(self) -> "Timer":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    @property
    def elapsed(self) -> float:
        """Elapsed time in seconds; frozen once the timer is stopped."""
        if self.start_time is None:
            return 0.0
        end = self.end_time if self.end_time is not None else time.perf_counter()
        return end - self.start_time


class IndependenceReport:
    """Outcome of one independence check."""

    def __init__(
        self,
        size: int,
        vectors: List[List[float]],
        determinant: float,
        epsilon: float,
        independent: bool,
        rejected_lines: int = 0,
        runtime_s: float = 0.0,
    ):
        self.size = size
        self.vectors = vectors
        self.determinant = determinant
        self.epsilon = epsilon
        self.independent = independent
        self.rejected_lines = rejected_lines
        self.runtime_s = runtime_s

    @classmethod
    def from_checker(
        cls,
        checker: IndependenceChecker,
        rejected_lines: int = 0,
        runtime_s: float = 0.0,
    ) -> "IndependenceReport":
        """Build a report from a populated checker.

        Args:
            checker: Checker holding the entered vectors
            rejected_lines: Number of malformed input lines seen
            runtime_s: Wall time of the session in seconds

        Returns:
            The report
        """
        return cls(
            size=int(checker.size),
            vectors=checker.vectors.tolist(),
            determinant=checker.determinant(),
            epsilon=checker.epsilon,
            independent=checker.is_linearly_independent(),
            rejected_lines=rejected_lines,
            runtime_s=runtime_s,
        )

    def to_dict(self) -> Dict[str, Union[int, float, bool, Dict, List]]:
        return {
            "size": self.size,
            "vectors": {
                label: list(row) for label, row in zip(VECTOR_LABELS, self.vectors)
            },
            "determinant": self.determinant,
            "epsilon": self.epsilon,
            "independent": self.independent,
            "rejected_lines": self.rejected_lines,
            "runtime_s": self.runtime_s,
        }

    def summary(self) -> str:
        """Generate a human-readable summary.

        Returns:
            Summary string
        """
        verdict = "independent" if self.independent else "dependent"
        lines = [
            "Independence Check:",
            f"  Vectors: {self.size} x {self.size}D",
            f"  Determinant: {self.determinant:.6g}",
            f"  Epsilon: {self.epsilon:g}",
            f"  Verdict: {verdict}",
            f"  Rejected input lines: {self.rejected_lines}",
            f"  Total runtime: {self.runtime_s:.3f}s",
        ]
        return "\n".join(lines)

    def save(self, path: str) -> None:
        """Write the report as JSON, creating parent directories as needed."""
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved report to {path}")
