"""
Hyperoperator inversion для hypernum

Адаптивная бисекция, семейство повторного факториала и полигональные функции.
"""

# Adaptive Bisection
from hypernum.inversion.bisection import Expand, adaptive_bisect

# Factorial family
from hypernum.inversion.factorial import (
    factorial_slog,
    inverse_factorial,
    iterated_factorial,
)

# Polygonal family
from hypernum.inversion.polygonal import (
    bi_polygon,
    bi_polygon_root,
    iterated_bi_polygon_root,
    iterated_polygon_root,
    polygon,
    polygon_log,
    polygon_root,
    tri_polygon,
    tri_polygon_root,
)

__all__ = [
    # Bisection
    "Expand",
    "adaptive_bisect",
    # Factorial: Forward
    "iterated_factorial",
    # Factorial: Inverse
    "inverse_factorial",
    "factorial_slog",
    # Polygonal: Forward
    "polygon",
    "bi_polygon",
    "tri_polygon",
    # Polygonal: Inverse
    "polygon_root",
    "polygon_log",
    "iterated_polygon_root",
    "bi_polygon_root",
    "iterated_bi_polygon_root",
    "tri_polygon_root",
]
