"""
Factorial Inversion — Iterated Factorial, Inverse Factorial, Factorial Slog

Семейство повторного факториала и его обращений:

    iterated_factorial(x, n) = x!!!...!   (n факториалов)
    inverse_factorial(v, n)   = x такой, что iterated_factorial(x, n) = v
    factorial_slog(v, b)      = n такой, что iterated_factorial(b, n) = v

Дробное число факториалов интерполируется геометрически:
x * (x! / x)^frac, затем применяются целые факториалы.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. 1 и 2 — неподвижные точки: 1!!! = 1, 2!!! = 2
2. Обращение ниже iterated_factorial(FACTORIAL_LOCAL_MINIMUM, n) не поддерживается
3. Результат inverse_factorial проверяется с толерантностью 1e-9, иначе NaN
4. factorial_slog определён только для оснований > 2
"""

import logging
import math

from hypernum.core.errors import HyperDomainError, UnsupportedRegionError
from hypernum.core.math.extended_real import (
    NAN,
    NEG_INF,
    ONE,
    TEN,
    TWO,
    ZERO,
    ExtendedReal,
    NumberSource,
    TOWER_ITERATION_LIMIT,
)
from hypernum.core.math.numerical_safeguards import (
    BISECTION_MAX_ITERATIONS,
    FACTORIAL_LOCAL_MINIMUM,
    INVERSION_VERIFY_TOLERANCE,
    MAX_SAFE_INTEGER,
    to_extended,
)
from hypernum.inversion.bisection import Expand, adaptive_bisect

logger = logging.getLogger(__name__)

# Порог, выше которого x! неотличим от 10^x в пределах точности
_FACTORIAL_TOWER_THRESHOLD = ExtendedReal.from_value(MAX_SAFE_INTEGER).pow10()

# Высота башни, выше которой factorial_slog совпадает с обычным slog
_PLAIN_SLOG_HEIGHT = 1e17


# =============================================================================
# ПОВТОРНЫЙ ФАКТОРИАЛ
# =============================================================================


def iterated_factorial(value: NumberSource, iterations: float = 1) -> ExtendedReal:
    """
    Факториал, взятый iterations раз.

    Args:
        value: Аргумент
        iterations: Число факториалов (дробное допускается, отрицательное обращает)

    Returns:
        x!!!... (NaN для дробных итераций ниже локального минимума факториала)

    Examples:
        >>> iterated_factorial(3, 2) == 720
        True
        >>> iterated_factorial(2, 50) == 2
        True
    """
    value = to_extended(value)
    if iterations == 0:
        return value
    if iterations == 1:
        return value.factorial()
    if value < FACTORIAL_LOCAL_MINIMUM and iterations % 1 != 0:
        return NAN
    if iterations < 0:
        return inverse_factorial(value, -iterations)

    whole = math.floor(iterations)
    fraction = iterations - whole
    payload = value
    if fraction != 0:
        payload = payload * (value.factorial() / value).pow(fraction)

    for done in range(min(whole, TOWER_ITERATION_LIMIT)):
        if payload == 1:
            return ONE
        if payload == 2:
            return TWO
        if payload > _FACTORIAL_TOWER_THRESHOLD:
            return TEN.iteratedexp(whole - done, payload)
        payload = payload.factorial()
    return payload


# =============================================================================
# ОБРАТНЫЙ ФАКТОРИАЛ
# =============================================================================


def _factorial_upper_bound(value: ExtendedReal, iterations: float) -> ExtendedReal:
    """Аргумент, чей повторный факториал не меньше value (квадраты, затем степени 10)."""
    upper = TWO
    for _ in range(BISECTION_MAX_ITERATIONS):
        if iterated_factorial(upper, iterations) >= value:
            break
        upper = upper.sqr() if upper.layer == 0 else upper.pow10()
    return upper


def inverse_factorial(value: NumberSource, iterations: float = 1) -> ExtendedReal:
    """
    Обратный факториал: x такой, что iterated_factorial(x, iterations) = value.

    Поиск ведётся бисекцией по iteratedlog верхней оценки, поэтому работает
    и для значений на высоких слоях.

    Args:
        value: Значение повторного факториала
        iterations: Число факториалов (отрицательное применяет факториал)

    Returns:
        x, либо NaN если найденная оценка не проходит проверку 1e-9

    Raises:
        UnsupportedRegionError: Если value ниже iterated_factorial(0.4616..., iterations)

    Examples:
        >>> abs(inverse_factorial(120).to_float() - 5) < 1e-9
        True
        >>> abs(inverse_factorial(720, 2).to_float() - 3) < 1e-9
        True
    """
    value = to_extended(value)
    if value.is_nan():
        return NAN
    if value == 1:
        return ONE
    if value == 2:
        return TWO
    if iterations == 0:
        return value
    if iterations < 0:
        return iterated_factorial(value, -iterations)
    if not value.is_finite():
        return value if value.sign > 0 else NAN

    minimum = iterated_factorial(FACTORIAL_LOCAL_MINIMUM, iterations)
    if value < minimum:
        raise UnsupportedRegionError(
            f"inverse_factorial is unsupported below the local minimum {minimum}, got {value}"
        )

    upper_bound = _factorial_upper_bound(value, iterations)
    layer = int(upper_bound.layer)
    lower = ExtendedReal.from_number(FACTORIAL_LOCAL_MINIMUM) if layer == 0 else ZERO
    upper = upper_bound.iteratedlog(10, layer)

    guess = adaptive_bisect(
        lambda x: iterated_factorial(TEN.iteratedexp(layer, x), iterations),
        value,
        lower,
        upper,
    )
    result = TEN.iteratedexp(layer, guess)
    if iterated_factorial(result, iterations).eq_tolerance(value, INVERSION_VERIFY_TOLERANCE):
        return result
    logger.debug(f"inverse_factorial({value}, {iterations}) failed verification at {result}")
    return NAN


# =============================================================================
# ФАКТОРИАЛЬНЫЙ СУПЕР-ЛОГАРИФМ
# =============================================================================


def factorial_slog(value: NumberSource, base: NumberSource = 3) -> ExtendedReal:
    """
    Сколько раз нужно взять факториал от base, чтобы получить value.

    Args:
        value: Значение
        base: Основание (> 2, иначе повторный факториал не возрастает)

    Returns:
        Число факториалов: -inf для value = 2, NaN ниже 2, 0 при value = base

    Raises:
        HyperDomainError: Если base <= 2

    Examples:
        >>> abs(factorial_slog(720, 3).to_float() - 2) < 1e-9
        True
    """
    value = to_extended(value)
    base = to_extended(base)
    if base.is_nan() or base <= 2:
        raise HyperDomainError(
            f"factorial_slog requires base > 2, iterated factorial is not increasing for base {base}"
        )
    if value.is_nan():
        return NAN
    if value == 2:
        return NEG_INF
    if value < 2:
        return NAN
    if value == base:
        return ZERO
    if value >= base.tetrate(_PLAIN_SLOG_HEIGHT):
        return value.slog(base)

    def evaluate(height: ExtendedReal) -> ExtendedReal:
        return iterated_factorial(base, height.to_float())

    if value < base:
        return adaptive_bisect(evaluate, value, -1, 0, expand=Expand.LOW)
    return adaptive_bisect(evaluate, value, 0, 1, expand=Expand.HIGH)
