"""
Numerical Safeguards — Coercion, Rounding and Guard Constants

Модуль собирает численные примитивы, общие для нормализаторов и решателей:
- Приведение любых NumberSource к ExtendedReal
- Округление до ближайшего кратного шага (фиксированного или вычисляемого)
- "Мультипликативный модуль" для сравнения величины по обе стороны от 1
- Пороговые константы точности и ограничения итераций

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Нулевой шаг округления означает отсутствие округления
2. Все ограничения итераций являются именованными константами
3. Сравнения с толерантностью никогда не считают NaN равным чему-либо
"""

from typing import Callable, Final, Union

from hypernum.core.math.extended_real import (
    CONVERGENT_TETRATION_BASE_LIMIT,
    ExtendedReal,
    NumberSource,
    ZERO,
)

# =============================================================================
# КОНСТАНТЫ ТОЧНОСТИ
# =============================================================================

# Наибольшее целое, точно представимое в double (2^53 - 1)
# Показатели за этой границей снапаются к граничной мантиссе
MAX_SAFE_INTEGER: Final[int] = 9007199254740991

# Локальный минимум x! на положительной оси
# Ниже него факториал не обратим однозначно
FACTORIAL_LOCAL_MINIMUM: Final[float] = 0.461632144968362341262659542325

# Относительная толерантность проверки результата обращения
INVERSION_VERIFY_TOLERANCE: Final[float] = 1e-9

# Относительная толерантность бисекции по умолчанию
BISECTION_TOLERANCE: Final[float] = 1e-15

# Потолок итераций бисекции
# При достижении возвращается лучшая оценка и пишется WARNING
BISECTION_MAX_ITERATIONS: Final[int] = 10000

# Потолок итераций корректирующих циклов нормализаторов
CORRECTION_LOOP_LIMIT: Final[int] = 10000

# Потолок повторных входов hypersplit при переносе в уровень пентации
HYPERSPLIT_MAX_ROLLOVERS: Final[int] = 100

__all__ = [
    "MAX_SAFE_INTEGER",
    "FACTORIAL_LOCAL_MINIMUM",
    "CONVERGENT_TETRATION_BASE_LIMIT",
    "INVERSION_VERIFY_TOLERANCE",
    "BISECTION_TOLERANCE",
    "BISECTION_MAX_ITERATIONS",
    "CORRECTION_LOOP_LIMIT",
    "HYPERSPLIT_MAX_ROLLOVERS",
    "Rounding",
    "to_extended",
    "round_to_multiple",
    "multabs",
    "is_close_extended",
]

# Шаг округления: фиксированный или функция мантиссы -> шаг
Rounding = Union[NumberSource, Callable[[ExtendedReal], NumberSource]]


# =============================================================================
# ПРИВЕДЕНИЕ ТИПОВ
# =============================================================================


def to_extended(value: NumberSource) -> ExtendedReal:
    """
    Приведение NumberSource к ExtendedReal.

    Строки разбираются с линейной аппроксимацией тетрации ("10^^2.5").

    Examples:
        >>> to_extended(3) == 3
        True
        >>> to_extended("1e400") > 1e308
        True
    """
    return ExtendedReal.from_value(value)


# =============================================================================
# ОКРУГЛЕНИЕ
# =============================================================================


def round_to_multiple(value: NumberSource, rounding: Rounding) -> ExtendedReal:
    """
    Округление до ближайшего кратного шага.

    Args:
        value: Округляемое значение
        rounding: Шаг, либо функция value -> шаг. Нулевой шаг отключает округление.

    Returns:
        round(value / step) * step (половины округляются вверх)

    Examples:
        >>> round_to_multiple(2.357, 0.01) == 2.36
        True
        >>> round_to_multiple(2.357, 0) == 2.357
        True
    """
    value = to_extended(value)
    step = to_extended(rounding(value) if callable(rounding) else rounding)
    if step.is_zero():
        return value
    return (value / step).round() * step


def multabs(value: NumberSource) -> ExtendedReal:
    """
    Мультипликативный модуль: 1/x для |x| < 1, иначе x (0 остаётся 0).

    Examples:
        >>> multabs(0.25) == 4
        True
        >>> multabs(7) == 7
        True
    """
    value = to_extended(value)
    if value.is_zero():
        return ZERO
    if abs(value) < 1:
        return value.recip()
    return value


# =============================================================================
# СРАВНЕНИЯ
# =============================================================================


def is_close_extended(a: NumberSource, b: NumberSource, rel_tol: float = 1e-9) -> bool:
    """
    Сравнение с относительной толерантностью на любых слоях.

    Бесконечности равны только бесконечностям того же знака; NaN не равен ничему.
    """
    a, b = to_extended(a), to_extended(b)
    if a.is_nan() or b.is_nan():
        return False
    if a == b:
        return True
    if a.is_zero() or b.is_zero():
        return abs(a - b) <= rel_tol
    return a.eq_tolerance(b, rel_tol)
