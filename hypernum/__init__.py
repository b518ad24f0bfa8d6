"""
hypernum — нормализация чисел за пределами double и обращение гипероператоров.

Публичный API собран из подпакетов:
- hypernum.core: субстрат ExtendedReal, инженерные наборы, конфигурации, ошибки
- hypernum.normalizers: scientifify, hyperscientifify, hypersplit, факториальные формы
- hypernum.inversion: обращение факториала и полигональных функций
"""

from hypernum.core.domain import (
    Explicit,
    HyperNormalizedForm,
    HyperscientificConfig,
    HypersplitConfig,
    HypersplitForm,
    InheritArgument,
    InheritBoundary,
    NormalizedForm,
    ScientificConfig,
)
from hypernum.core.errors import (
    ConvergentTetrationError,
    EmptyEngineeringSetError,
    HyperDomainError,
    InvalidBaseError,
    UnsupportedRegionError,
)
from hypernum.core.math import (
    EngineeringSet,
    ExtendedReal,
    current_engineering_value,
    next_engineering_value,
    previous_engineering_value,
)
from hypernum.inversion import (
    bi_polygon,
    bi_polygon_root,
    factorial_slog,
    inverse_factorial,
    iterated_bi_polygon_root,
    iterated_factorial,
    iterated_polygon_root,
    polygon,
    polygon_log,
    polygon_root,
    tri_polygon,
    tri_polygon_root,
)
from hypernum.normalizers import (
    factorial_hyperscientifify,
    factorial_scientifify,
    hyperscientifify,
    hyperscientifify_with,
    hypersplit,
    hypersplit_with,
    scientifify,
    scientifify_with,
)

__version__ = "0.1.0"

__all__ = [
    # Substrate
    "ExtendedReal",
    "EngineeringSet",
    # Normal forms
    "NormalizedForm",
    "HyperNormalizedForm",
    "HypersplitForm",
    # Configurations
    "ScientificConfig",
    "HyperscientificConfig",
    "HypersplitConfig",
    "Explicit",
    "InheritArgument",
    "InheritBoundary",
    # Errors
    "HyperDomainError",
    "InvalidBaseError",
    "ConvergentTetrationError",
    "EmptyEngineeringSetError",
    "UnsupportedRegionError",
    # Engineering
    "current_engineering_value",
    "next_engineering_value",
    "previous_engineering_value",
    # Normalizers
    "scientifify",
    "scientifify_with",
    "hyperscientifify",
    "hyperscientifify_with",
    "hypersplit",
    "hypersplit_with",
    "factorial_scientifify",
    "factorial_hyperscientifify",
    # Inversion: Factorial
    "iterated_factorial",
    "inverse_factorial",
    "factorial_slog",
    # Inversion: Polygonal
    "polygon",
    "polygon_root",
    "polygon_log",
    "bi_polygon",
    "bi_polygon_root",
    "iterated_polygon_root",
    "tri_polygon",
    "tri_polygon_root",
    "iterated_bi_polygon_root",
]
