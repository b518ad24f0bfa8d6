"""
Contract Validation Module

Валидация сериализованных конфигураций нормализаторов hypernum.
"""

from .validators import (
    ContractValidator,
    HyperscientificConfigValidator,
    HypersplitConfigValidator,
    SchemaLoader,
    ScientificConfigValidator,
    load_hyperscientific_config,
    load_hypersplit_config,
    load_scientific_config,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "ScientificConfigValidator",
    "HyperscientificConfigValidator",
    "HypersplitConfigValidator",
    # Functions
    "load_scientific_config",
    "load_hyperscientific_config",
    "load_hypersplit_config",
]
