"""
Core math primitives, domain models and contracts.

This module contains the foundational building blocks shared by the
normalizers and the inversion routines: the ExtendedReal substrate,
engineering sets, normal forms, configuration models and the error taxonomy.
"""
