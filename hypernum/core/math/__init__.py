"""
Core math modules для hypernum

Числовой субстрат, инженерные наборы и вспомогательные функции башен.
"""

# Extended Real substrate
from hypernum.core.math.extended_real import (
    CONVERGENT_TETRATION_BASE_LIMIT,
    EXP_LIMIT,
    INF,
    NAN,
    NEG_INF,
    NEG_ONE,
    ONE,
    TEN,
    TWO,
    ZERO,
    ExtendedReal,
    NumberSource,
    lambertw,
)

# Numerical Safeguards
from hypernum.core.math.numerical_safeguards import (
    BISECTION_MAX_ITERATIONS,
    BISECTION_TOLERANCE,
    CORRECTION_LOOP_LIMIT,
    FACTORIAL_LOCAL_MINIMUM,
    HYPERSPLIT_MAX_ROLLOVERS,
    INVERSION_VERIFY_TOLERANCE,
    MAX_SAFE_INTEGER,
    Rounding,
    is_close_extended,
    multabs,
    round_to_multiple,
    to_extended,
)

# Engineering Sets
from hypernum.core.math.engineering import (
    DEFAULT_ENGINEERING,
    EngineeringSet,
    EngineeringSource,
    current_engineering,
    current_engineering_value,
    engineering_value,
    next_engineering,
    next_engineering_value,
    previous_engineering,
    previous_engineering_value,
    upper_current_engineering_value,
)

# Towers
from hypernum.core.math.towers import (
    effective_base,
    iterated_exp_mult,
    iterated_mult_log,
    mult_slog,
)

__all__ = [
    # Extended Real — Types
    "ExtendedReal",
    "NumberSource",
    # Extended Real — Constants
    "CONVERGENT_TETRATION_BASE_LIMIT",
    "EXP_LIMIT",
    "INF",
    "NAN",
    "NEG_INF",
    "NEG_ONE",
    "ONE",
    "TEN",
    "TWO",
    "ZERO",
    # Extended Real — Functions
    "lambertw",
    # Numerical Safeguards — Constants
    "BISECTION_MAX_ITERATIONS",
    "BISECTION_TOLERANCE",
    "CORRECTION_LOOP_LIMIT",
    "FACTORIAL_LOCAL_MINIMUM",
    "HYPERSPLIT_MAX_ROLLOVERS",
    "INVERSION_VERIFY_TOLERANCE",
    "MAX_SAFE_INTEGER",
    # Numerical Safeguards — Types
    "Rounding",
    # Numerical Safeguards — Functions
    "is_close_extended",
    "multabs",
    "round_to_multiple",
    "to_extended",
    # Engineering — Types
    "EngineeringSet",
    "EngineeringSource",
    "DEFAULT_ENGINEERING",
    # Engineering — Functions
    "current_engineering",
    "current_engineering_value",
    "engineering_value",
    "next_engineering",
    "next_engineering_value",
    "previous_engineering",
    "previous_engineering_value",
    "upper_current_engineering_value",
    # Towers
    "effective_base",
    "iterated_exp_mult",
    "iterated_mult_log",
    "mult_slog",
]
