"""Linear independence check for systems of 2D and 3D vectors.

Reads two 2D or three 3D vectors, prints them and reports whether they are
linearly independent using a closed-form determinant test.
"""

from __future__ import annotations

__version__ = "0.1.0"
