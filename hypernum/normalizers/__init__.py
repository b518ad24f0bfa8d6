"""
Normalizers — разложение значений в нормальные формы.

Научная, гипернаучная, четырёхуровневая (hypersplit) и факториальные формы.
"""

from .factorial_forms import factorial_hyperscientifify, factorial_scientifify
from .hyperscientific import hyperscientifify, hyperscientifify_with
from .hypersplit import hypersplit, hypersplit_with
from .scientific import scientifify, scientifify_with, validate_divergent_base

__all__ = [
    # Scientific
    "scientifify",
    "scientifify_with",
    "validate_divergent_base",
    # Hyperscientific
    "hyperscientifify",
    "hyperscientifify_with",
    # Hypersplit
    "hypersplit",
    "hypersplit_with",
    # Factorial forms
    "factorial_scientifify",
    "factorial_hyperscientifify",
]
