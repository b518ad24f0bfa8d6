"""
Factorial Normalizers — Factorial Scientific and Hyperscientific Forms

Две "факториальные" нотации:

    factorial_scientifify:      value = m * e!        (e < 0 означает value = m / |e|!)
    factorial_hyperscientifify: value = m!!!...!      (e факториалов)

Обе следуют схеме scientifify: первая оценка через обращение факториала,
снап показателя к инженерному набору, округление мантиссы и корректирующий
цикл, который возвращает мантиссу в её интервал.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. factorial_scientifify(0) = (0, 0), factorial_scientifify(1) = (1, 1)
2. Мантисса factorial_scientifify лежит в [(e + p)! / e!, (next(e) + p)! / e!)
3. Мантисса factorial_hyperscientifify не меньше limit (если e >= 0)
4. Корректирующие циклы ограничены CORRECTION_LOOP_LIMIT
"""

import logging

from hypernum.core.domain.forms import NormalizedForm
from hypernum.core.math.engineering import (
    EngineeringSet,
    EngineeringSource,
    current_engineering_value,
    next_engineering_value,
    previous_engineering_value,
)
from hypernum.core.math.extended_real import (
    INF,
    NAN,
    NEG_INF,
    ONE,
    ZERO,
    ExtendedReal,
    NumberSource,
)
from hypernum.core.math.numerical_safeguards import (
    CORRECTION_LOOP_LIMIT,
    MAX_SAFE_INTEGER,
    Rounding,
    round_to_multiple,
    to_extended,
)
from hypernum.inversion.factorial import (
    factorial_slog,
    inverse_factorial,
    iterated_factorial,
)

logger = logging.getLogger(__name__)

# Границы, за которыми мантисса снапается к граничному значению
_LARGE_FACTORIAL_VALUE = ExtendedReal.from_string("e9e15")
_SMALL_FACTORIAL_VALUE = ExtendedReal.from_string("e-9e15")


# =============================================================================
# FACTORIAL SCIENTIFIC
# =============================================================================


def factorial_scientifify(
    value: NumberSource,
    rounding: Rounding = 0,
    mantissa_power: NumberSource = 0,
    engineerings: EngineeringSource = 1,
) -> NormalizedForm:
    """
    Факториальная научная форма: value = m * e!.

    Args:
        value: Значение
        rounding: Шаг округления мантиссы (0 = без округления)
        mantissa_power: Сдвиг интервала мантиссы. При 0 мантисса в [1, e + 1),
            при 1 — в [e + 1, (e + 1)(e + 2)), и так далее
        engineerings: Инженерный набор допустимых e

    Returns:
        NormalizedForm(mantissa, exponent); отрицательный exponent означает деление

    Examples:
        >>> m, e = factorial_scientifify(120)
        >>> float(e), round(float(m), 9)
        (5.0, 1.0)
    """
    value = to_extended(value)
    mantissa_power = to_extended(mantissa_power)
    engineering_set = EngineeringSet.of(engineerings)

    if value.is_zero():
        return NormalizedForm(ZERO, ZERO)
    if value == 1:
        return NormalizedForm(ONE, ONE)
    if value.is_nan():
        return NormalizedForm(NAN, NAN)
    if not value.is_finite():
        return NormalizedForm(INF if value.sign > 0 else NEG_INF, INF)
    if value < 0:
        mantissa, exponent = factorial_scientifify(-value, rounding, mantissa_power, engineering_set)
        return NormalizedForm(-mantissa, exponent)

    if value < 1:
        return _small_factorial_form(value, rounding, mantissa_power, engineering_set)
    return _large_factorial_form(value, rounding, mantissa_power, engineering_set)


def _large_factorial_form(
    value: ExtendedReal,
    rounding: Rounding,
    mantissa_power: ExtendedReal,
    engineering_set: EngineeringSet,
) -> NormalizedForm:
    estimate = inverse_factorial(value)
    exponent = current_engineering_value(estimate - mantissa_power, engineering_set)
    unrounded = value / exponent.factorial()
    mantissa = round_to_multiple(unrounded, rounding)

    if value >= _LARGE_FACTORIAL_VALUE:
        logger.debug(f"Factorial exponent {exponent} beyond precision, mantissa snapped")
        return NormalizedForm(
            exponent.factorial() / (exponent - mantissa_power).factorial(), exponent
        )

    for _ in range(CORRECTION_LOOP_LIMIT):
        previous_unrounded = unrounded
        next_exponent = next_engineering_value(exponent, engineering_set)
        upper_limit = (next_exponent + mantissa_power).factorial()
        lower_limit = (current_engineering_value(exponent, engineering_set) + mantissa_power).factorial()
        scaled = mantissa * exponent.factorial()

        if scaled >= upper_limit:
            unrounded = unrounded * exponent.factorial() / next_exponent.factorial()
            exponent = next_exponent
        elif exponent > 0 and scaled < lower_limit:
            previous_exponent = previous_engineering_value(exponent, engineering_set)
            unrounded = unrounded * exponent.factorial() / previous_exponent.factorial()
            exponent = previous_exponent
        else:
            break
        mantissa = round_to_multiple(unrounded, rounding)

        if previous_unrounded == unrounded:
            break
    else:
        logger.warning(f"Factorial mantissa correction did not settle after {CORRECTION_LOOP_LIMIT} steps")

    return NormalizedForm(mantissa, exponent)


def _small_factorial_form(
    value: ExtendedReal,
    rounding: Rounding,
    mantissa_power: ExtendedReal,
    engineering_set: EngineeringSet,
) -> NormalizedForm:
    """value < 1: value = m / e!, возвращается с отрицательным e."""
    estimate = inverse_factorial(value.recip())
    exponent = current_engineering_value(estimate + mantissa_power, engineering_set)
    unrounded = value * exponent.factorial()
    mantissa = round_to_multiple(unrounded, rounding)

    if value <= _SMALL_FACTORIAL_VALUE:
        logger.debug(f"Factorial exponent -{exponent} beyond precision, mantissa snapped")
        mantissa = exponent.factorial() / (exponent - mantissa_power).factorial()
        return NormalizedForm(mantissa, -exponent)

    for _ in range(CORRECTION_LOOP_LIMIT):
        previous_unrounded = unrounded
        previous_exponent = previous_engineering_value(exponent, engineering_set)
        upper_limit = (previous_exponent - mantissa_power).factorial().recip()
        lower_limit = (current_engineering_value(exponent, engineering_set) - mantissa_power).factorial().recip()
        scaled = mantissa / exponent.factorial()

        if exponent > 0 and scaled >= upper_limit:
            exponent = previous_exponent
        elif scaled < lower_limit:
            exponent = next_engineering_value(exponent, engineering_set)
        else:
            break
        unrounded = value * exponent.factorial()
        mantissa = round_to_multiple(unrounded, rounding)

        if previous_unrounded == unrounded:
            break
    else:
        logger.warning(f"Factorial mantissa correction did not settle after {CORRECTION_LOOP_LIMIT} steps")

    return NormalizedForm(mantissa, -exponent)


# =============================================================================
# FACTORIAL HYPERSCIENTIFIC
# =============================================================================


def factorial_hyperscientifify(
    value: NumberSource,
    limit: NumberSource = 3,
    rounding: Rounding = 0,
    engineerings: EngineeringSource = 1,
) -> NormalizedForm:
    """
    Факториальная гипернаучная форма: value = m!!!...! с e факториалами.

    Args:
        value: Значение
        limit: Нижняя граница мантиссы (> 2); ниже неё число факториалов уменьшается
        rounding: Шаг округления мантиссы (0 = без округления)
        engineerings: Инженерный набор допустимых e

    Returns:
        NormalizedForm(mantissa, factorial_count). Значения <= 2 и limit <= 2
        возвращаются как (value, 0).

    Examples:
        >>> m, e = factorial_hyperscientifify(1e10)
        >>> float(e), 3 <= float(m) < 6
        (2.0, True)
    """
    value = to_extended(value)
    limit = to_extended(limit)
    engineering_set = EngineeringSet.of(engineerings)

    if value == INF:
        return NormalizedForm(INF, INF)
    if value <= 2 or limit <= 2:
        return NormalizedForm(value, ZERO)
    if not value.is_finite():
        return NormalizedForm(NAN, NAN)

    height = factorial_slog(value, limit)
    exponent = current_engineering_value(height, engineering_set)
    if exponent < 0 and exponent != height:
        exponent = previous_engineering_value(height, engineering_set)
    unrounded = inverse_factorial(value, exponent.to_float())
    mantissa = round_to_multiple(unrounded, rounding)

    if abs(exponent) > MAX_SAFE_INTEGER:
        logger.debug(f"Factorial count {exponent} beyond safe integer range, mantissa snapped")
        return NormalizedForm(limit, exponent)
    if exponent < 0:
        return NormalizedForm(mantissa, exponent)

    moved_down = False
    for _ in range(CORRECTION_LOOP_LIMIT):
        previous_unrounded = unrounded
        next_exponent = next_engineering_value(exponent, engineering_set)
        gap = next_exponent - current_engineering_value(exponent, engineering_set)
        upper_limit = iterated_factorial(limit, gap.to_float())

        if mantissa >= upper_limit:
            exponent = next_exponent
            if moved_down:
                # Движение в обе стороны: мантисса на границе
                logger.debug(f"Factorial mantissa plateau at {exponent}, snapped to {limit}")
                mantissa = round_to_multiple(limit, rounding)
                break
            unrounded = inverse_factorial(value, exponent.to_float())
            mantissa = round_to_multiple(unrounded, rounding)
        elif mantissa < limit:
            exponent = previous_engineering_value(exponent, engineering_set)
            unrounded = inverse_factorial(value, exponent.to_float())
            mantissa = round_to_multiple(unrounded, rounding)
            moved_down = True
        else:
            break

        if previous_unrounded == unrounded:
            break
    else:
        logger.warning(f"Factorial mantissa correction did not settle after {CORRECTION_LOOP_LIMIT} steps")

    return NormalizedForm(mantissa, exponent)
