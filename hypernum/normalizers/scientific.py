"""
Scientific Normalizer — Mantissa/Exponent Decomposition

scientifify раскладывает значение в пару (m, e) такую, что

    value = m * base^(e / exp_multiplier)

где e допустим для инженерного набора, а m лежит в
[base^mantissa_power, base^(mantissa_power + gap)), gap — шаг набора в e.

Округление мантиссы может вытолкнуть её за границы, поэтому после первой
оценки работает корректирующий цикл: показатель сдвигается к соседнему
инженерному значению, пока мантисса не вернётся в интервал. Если цикл
двигался в обе стороны, мантисса стоит на границе, и она снапается к
нижней границе.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. scientifify(0) = (0, -inf), scientifify(+-inf) = (+-inf, inf), NaN -> (NaN, NaN)
2. Отрицательные значения: мантисса отрицательна, показатель как для |value|
3. |e| > MAX_SAFE_INTEGER: мантисса снапается к base^mantissa_power
4. Корректирующий цикл всегда завершается (CORRECTION_LOOP_LIMIT)
"""

import logging

from hypernum.core.domain.config import ScientificConfig
from hypernum.core.domain.forms import NormalizedForm
from hypernum.core.errors import InvalidBaseError
from hypernum.core.math.engineering import (
    EngineeringSet,
    EngineeringSource,
    current_engineering_value,
    next_engineering_value,
    previous_engineering_value,
)
from hypernum.core.math.extended_real import (
    CONVERGENT_TETRATION_BASE_LIMIT,
    INF,
    NAN,
    NEG_INF,
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
from hypernum.core.math.towers import effective_base

logger = logging.getLogger(__name__)


def validate_divergent_base(base: ExtendedReal, multiplier: ExtendedReal, caller: str) -> None:
    """
    Проверка основания: base > 1 и base^(1/multiplier) > e^(1/e).

    Raises:
        InvalidBaseError: Если основание недопустимо
    """
    if base.is_nan() or base <= 1:
        raise InvalidBaseError(f"{caller} requires base > 1, got {base}")
    if effective_base(base, multiplier) <= CONVERGENT_TETRATION_BASE_LIMIT:
        raise InvalidBaseError(
            f"{caller} requires base^(1/{multiplier}) above e^(1/e), got base {base}"
        )


def scientifify(
    value: NumberSource,
    base: NumberSource = 10,
    rounding: Rounding = 0,
    mantissa_power: NumberSource = 0,
    engineerings: EngineeringSource = 1,
    exp_multiplier: NumberSource = 1,
) -> NormalizedForm:
    """
    Научная форма значения.

    Args:
        value: Значение
        base: Основание (> 1, вне области сходящейся тетрации)
        rounding: Шаг округления мантиссы или функция мантисса -> шаг (0 = без округления)
        mantissa_power: Сдвиг интервала мантиссы: [base^p, base^(p + gap))
        engineerings: Инженерный набор допустимых показателей
        exp_multiplier: Множитель итогового показателя

    Returns:
        NormalizedForm(mantissa, exponent)

    Raises:
        InvalidBaseError: Если base <= 1 или base^(1/exp_multiplier) <= e^(1/e)

    Examples:
        >>> m, e = scientifify(2357)
        >>> float(e)
        3.0
        >>> scientifify("2.357e224", mantissa_power=1).exponent == 223
        True
    """
    value = to_extended(value)
    base = to_extended(base)
    mantissa_power = to_extended(mantissa_power)
    exp_multiplier = to_extended(exp_multiplier)
    engineering_set = EngineeringSet.of(engineerings)
    validate_divergent_base(base, exp_multiplier, "scientifify")
    return scientific_form(value, base, rounding, mantissa_power, engineering_set, exp_multiplier)


def scientific_form(
    value: ExtendedReal,
    base: ExtendedReal,
    rounding: Rounding,
    mantissa_power: ExtendedReal,
    engineering_set: EngineeringSet,
    exp_multiplier: ExtendedReal,
) -> NormalizedForm:
    """Разложение без проверки основания (base > 1 уже гарантировано вызывающим)."""
    if value.is_zero():
        return NormalizedForm(ZERO, NEG_INF)
    if value.is_nan():
        return NormalizedForm(NAN, NAN)
    if not value.is_finite():
        return NormalizedForm(INF if value.sign > 0 else NEG_INF, INF)
    if value < 0:
        mantissa, exponent = scientific_form(
            -value, base, rounding, mantissa_power, engineering_set, exp_multiplier
        )
        return NormalizedForm(-mantissa, exponent)

    raw_exponent = value.log(base)
    target = raw_exponent - mantissa_power
    exponent = current_engineering_value(target, engineering_set)
    if exponent < 0 and exponent != target:
        exponent = previous_engineering_value(target, engineering_set)

    unrounded = base.pow(raw_exponent - exponent)
    mantissa = round_to_multiple(unrounded, rounding)

    if abs(exponent) > MAX_SAFE_INTEGER:
        logger.debug(f"Exponent {exponent} beyond safe integer range, mantissa snapped to boundary")
        mantissa = base.pow(mantissa_power)
    else:
        mantissa, exponent = _correct_mantissa(
            mantissa, unrounded, exponent, base, rounding, mantissa_power, engineering_set
        )

    return NormalizedForm(mantissa, exponent * exp_multiplier)


def _correct_mantissa(
    mantissa: ExtendedReal,
    unrounded: ExtendedReal,
    exponent: ExtendedReal,
    base: ExtendedReal,
    rounding: Rounding,
    mantissa_power: ExtendedReal,
    engineering_set: EngineeringSet,
) -> tuple[ExtendedReal, ExtendedReal]:
    """Корректирующий цикл: возврат мантиссы в интервал после округления."""
    lower_limit = base.pow(mantissa_power)
    moved_down = False

    for _ in range(CORRECTION_LOOP_LIMIT):
        previous_unrounded = unrounded
        next_exponent = next_engineering_value(exponent, engineering_set)
        gap = next_exponent - current_engineering_value(exponent, engineering_set)
        upper_limit = base.pow(gap + mantissa_power)

        if mantissa >= upper_limit:
            unrounded = unrounded / base.pow(next_exponent - exponent)
            exponent = next_exponent
            if moved_down:
                # Движение в обе стороны: мантисса на границе
                logger.debug(f"Mantissa plateau at exponent {exponent}, snapped to {lower_limit}")
                mantissa = round_to_multiple(lower_limit, rounding)
                break
            mantissa = round_to_multiple(unrounded, rounding)
        elif mantissa < lower_limit:
            previous_exponent = previous_engineering_value(exponent, engineering_set)
            unrounded = unrounded * base.pow(exponent - previous_exponent)
            exponent = previous_exponent
            mantissa = round_to_multiple(unrounded, rounding)
            moved_down = True
        else:
            break

        if previous_unrounded == unrounded:
            break
    else:
        logger.warning(f"Mantissa correction did not settle after {CORRECTION_LOOP_LIMIT} steps")

    return mantissa, exponent


def scientifify_with(value: NumberSource, config: ScientificConfig) -> NormalizedForm:
    """scientifify с параметрами из ScientificConfig."""
    return scientifify(
        value,
        base=config.base,
        rounding=config.rounding,
        mantissa_power=config.mantissa_power,
        engineerings=config.engineerings,
        exp_multiplier=config.exp_multiplier,
    )
