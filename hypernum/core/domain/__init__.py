"""
Domain models and value objects.

Contains normal forms, hypersplit level bounds and normalizer configurations.
"""

from hypernum.core.domain.bounds import (
    BoundInheritance,
    Explicit,
    InheritArgument,
    InheritBoundary,
    LevelBound,
    pad_maximums,
    resolve_level_bounds,
    to_level_bound,
)
from hypernum.core.domain.config import (
    HyperscientificConfig,
    HypersplitConfig,
    RoundingRule,
    ScientificConfig,
)
from hypernum.core.domain.forms import (
    HyperNormalizedForm,
    HypersplitForm,
    NormalizedForm,
)

__all__ = [
    # Normal forms
    "NormalizedForm",
    "HyperNormalizedForm",
    "HypersplitForm",
    # Level bounds
    "BoundInheritance",
    "Explicit",
    "InheritArgument",
    "InheritBoundary",
    "LevelBound",
    "pad_maximums",
    "resolve_level_bounds",
    "to_level_bound",
    # Configurations
    "RoundingRule",
    "ScientificConfig",
    "HyperscientificConfig",
    "HypersplitConfig",
]
