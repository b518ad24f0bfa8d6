"""
Adaptive Bisection — Generic Monotone Solver

Общий решатель для всех обращений гипероператоров: ищет аргумент x, при
котором монотонно возрастающая функция f(x) равна target.

Решатель работает с "нижним" и "верхним" концами в смысле значения функции:
low — аргумент, где f(low) <= target, high — аргумент, где f(high) >= target.
Численно low может быть больше high (например, при поиске в пространстве
обратных величин): середина интервала от этого не зависит.

Если один конец заранее неизвестен, решатель расширяет его (удваивает ширину
интервала), пока f впервые не окажется по другую сторону от target. После
первой смены направления работает обычная бисекция.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Точное попадание f(guess) == target возвращается немедленно
2. Сходимость: |high - low| <= tolerance * max(|low|, |high|, 1) или
   середина перестала меняться (исчерпание точности)
3. Число итераций ограничено BISECTION_MAX_ITERATIONS, по достижении
   потолка пишется WARNING и возвращается лучшая оценка
4. NaN от f трактуется как "слишком большое значение"
"""

import logging
from enum import Enum
from typing import Callable, Optional

from hypernum.core.math.extended_real import ONE, ExtendedReal, NumberSource
from hypernum.core.math.numerical_safeguards import (
    BISECTION_MAX_ITERATIONS,
    BISECTION_TOLERANCE,
    to_extended,
)

logger = logging.getLogger(__name__)


class Expand(str, Enum):
    """Какой конец интервала расширяется до первой смены направления."""

    LOW = "low"
    HIGH = "high"


def _widen(bound: ExtendedReal, other: ExtendedReal) -> ExtendedReal:
    return bound + (bound - other)


def _converged(low: ExtendedReal, high: ExtendedReal, tolerance: float) -> bool:
    scale = ExtendedReal.max(ExtendedReal.max(abs(low), abs(high)), ONE)
    return abs(high - low) <= scale * tolerance


def adaptive_bisect(
    evaluate: Callable[[ExtendedReal], ExtendedReal],
    target: NumberSource,
    low: NumberSource,
    high: NumberSource,
    expand: Optional[Expand] = None,
    tolerance: float = BISECTION_TOLERANCE,
    max_iterations: int = BISECTION_MAX_ITERATIONS,
) -> ExtendedReal:
    """
    Поиск x с evaluate(x) == target бисекцией с расширением интервала.

    Args:
        evaluate: Монотонно возрастающая функция аргумента
        target: Искомое значение функции
        low: Аргумент с evaluate(low) <= target (или стартовый конец для расширения)
        high: Аргумент с evaluate(high) >= target (или стартовый конец для расширения)
        expand: Конец, который удваивается до первой смены направления (None = не расширять)
        tolerance: Относительная толерантность сходимости
        max_iterations: Потолок итераций

    Returns:
        Последняя оценка аргумента

    Examples:
        >>> root = adaptive_bisect(lambda x: x * x, 2, 0, 1, expand=Expand.HIGH)
        >>> abs(root.to_float() - 2 ** 0.5) < 1e-12
        True
    """
    target = to_extended(target)
    low = to_extended(low)
    high = to_extended(high)
    bracketed = expand is None

    guess = (low + high) / 2
    previous: Optional[ExtendedReal] = None

    for _ in range(max_iterations):
        if _converged(low, high, tolerance):
            return guess
        guess = (low + high) / 2
        if previous is not None and guess == previous:
            return guess
        previous = guess

        value = evaluate(guess)
        if value == target:
            return guess
        if value < target:
            if not bracketed and expand is Expand.HIGH:
                high = _widen(high, low)
            else:
                low = guess
                bracketed = True
        else:
            if not bracketed and expand is Expand.LOW:
                low = _widen(low, high)
            else:
                high = guess
                bracketed = True

    logger.warning(
        f"Bisection did not converge after {max_iterations} iterations, "
        f"returning estimate {guess} (interval [{low}, {high}])"
    )
    return guess
