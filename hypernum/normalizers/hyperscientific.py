"""
Hyperscientific Normalizer — Hypermantissa/Hyperexponent Decomposition

hyperscientifify — это scientifify на уровень гипероператора выше:

    value = iteratedexp(base^(1/exp_multiplier), e / hyperexp_multiplier, m)

log/pow заменены на slog/iteratedexp, а шаги корректирующего цикла — на
iterated_mult_log/iterated_exp_mult.

Вблизи нулевого гиперпоказателя (окно +-10 наименьших инженерных шагов)
slog численно неустойчив, поэтому там поиск стартует с (value, 0) и только
корректирующий цикл сдвигает пару к правильному интервалу.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Эффективное основание <= 1 отвергается (InvalidBaseError)
2. Сходящаяся башня: value >= предела -> (value / предел, inf)
3. inf -> (inf, inf), -inf -> (-inf, -2), NaN -> (NaN, NaN)
4. Корректирующий цикл всегда завершается (CORRECTION_LOOP_LIMIT)
"""

import logging

from hypernum.core.domain.config import HyperscientificConfig
from hypernum.core.domain.forms import HyperNormalizedForm
from hypernum.core.errors import InvalidBaseError
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
from hypernum.core.math.towers import (
    effective_base,
    iterated_exp_mult,
    iterated_mult_log,
    mult_slog,
)

logger = logging.getLogger(__name__)

# Полуширина окна вокруг нулевого гиперпоказателя (в наименьших шагах)
NEAR_ZERO_WINDOW_STEPS = 10


def hyperscientifify(
    value: NumberSource,
    base: NumberSource = 10,
    rounding: Rounding = 0,
    hypermantissa_power: NumberSource = 0,
    engineerings: EngineeringSource = 1,
    exp_multiplier: NumberSource = 1,
    hyperexp_multiplier: NumberSource = 1,
) -> HyperNormalizedForm:
    """
    Гипернаучная форма значения.

    Args:
        value: Значение
        base: Основание башни
        rounding: Шаг округления гипермантиссы (0 = без округления)
        hypermantissa_power: Сдвиг интервала гипермантиссы: [base^^p, base^^(p + gap))
        engineerings: Инженерный набор допустимых гиперпоказателей
        exp_multiplier: Множитель каждого логарифма (основание base^(1/exp_multiplier))
        hyperexp_multiplier: Множитель итогового гиперпоказателя

    Returns:
        HyperNormalizedForm(hypermantissa, hyperexponent)

    Raises:
        InvalidBaseError: Если base^(1/exp_multiplier) <= 1

    Examples:
        >>> hyperscientifify(1e100) == (2, 2)
        True
        >>> hyperscientifify(1e100, hypermantissa_power=1) == (100, 1)
        True
    """
    value = to_extended(value)
    base = to_extended(base)
    hypermantissa_power = to_extended(hypermantissa_power)
    exp_multiplier = to_extended(exp_multiplier)
    hyperexp_multiplier = to_extended(hyperexp_multiplier)
    engineering_set = EngineeringSet.of(engineerings)

    tower_base = effective_base(base, exp_multiplier)
    if tower_base.is_nan() or tower_base <= 1:
        raise InvalidBaseError(
            f"hyperscientifify requires base^(1/{exp_multiplier}) > 1, got base {base}"
        )

    if value.is_nan():
        return HyperNormalizedForm(NAN, NAN)
    if not value.is_finite():
        if value.sign > 0:
            return HyperNormalizedForm(INF, INF)
        return HyperNormalizedForm(NEG_INF, ExtendedReal.from_number(-2.0))

    tower_limit = tower_base.tetrate(float("inf"))
    if value >= tower_limit:
        logger.debug(f"Value {value} at or above infinite tower limit {tower_limit}")
        return HyperNormalizedForm(value / tower_limit, INF)

    window = engineering_set.smallest.to_float() * NEAR_ZERO_WINDOW_STEPS
    window_top = iterated_exp_mult(base, 1, window, exp_multiplier)
    window_bottom = iterated_exp_mult(base, 1, -window, exp_multiplier)
    if window_bottom.is_nan():
        window_bottom = NEG_INF

    if window_bottom < value < window_top:
        exponent = ZERO
        unrounded = value
    else:
        height = mult_slog(value, base, exp_multiplier)
        target = height - hypermantissa_power
        exponent = current_engineering_value(target, engineering_set)
        if exponent < 0 and exponent != target:
            exponent = previous_engineering_value(target, engineering_set)
        unrounded = iterated_mult_log(value, base, exponent.to_float(), exp_multiplier)

    mantissa = round_to_multiple(unrounded, rounding)

    if abs(exponent) > MAX_SAFE_INTEGER:
        logger.debug(f"Hyperexponent {exponent} beyond safe integer range, hypermantissa snapped")
        mantissa = iterated_exp_mult(base, 1, hypermantissa_power.to_float(), exp_multiplier)
    else:
        mantissa, exponent = _correct_hypermantissa(
            mantissa,
            unrounded,
            exponent,
            base,
            rounding,
            hypermantissa_power,
            engineering_set,
            exp_multiplier,
        )

    return HyperNormalizedForm(mantissa, exponent * hyperexp_multiplier)


def _correct_hypermantissa(
    mantissa: ExtendedReal,
    unrounded: ExtendedReal,
    exponent: ExtendedReal,
    base: ExtendedReal,
    rounding: Rounding,
    hypermantissa_power: ExtendedReal,
    engineering_set: EngineeringSet,
    exp_multiplier: ExtendedReal,
) -> tuple[ExtendedReal, ExtendedReal]:
    lower_limit = iterated_exp_mult(base, 1, hypermantissa_power.to_float(), exp_multiplier)
    moved_down = False

    for _ in range(CORRECTION_LOOP_LIMIT):
        previous_unrounded = unrounded
        next_exponent = next_engineering_value(exponent, engineering_set)
        gap = next_exponent - current_engineering_value(exponent, engineering_set)
        upper_limit = iterated_exp_mult(
            base, 1, (gap + hypermantissa_power).to_float(), exp_multiplier
        )

        if mantissa >= upper_limit:
            unrounded = iterated_mult_log(
                unrounded, base, (next_exponent - exponent).to_float(), exp_multiplier
            )
            exponent = next_exponent
            if moved_down:
                logger.debug(f"Hypermantissa plateau at {exponent}, snapped to {lower_limit}")
                mantissa = round_to_multiple(lower_limit, rounding)
                break
            mantissa = round_to_multiple(unrounded, rounding)
        elif mantissa < lower_limit:
            previous_exponent = previous_engineering_value(exponent, engineering_set)
            unrounded = iterated_exp_mult(
                base, unrounded, (exponent - previous_exponent).to_float(), exp_multiplier
            )
            exponent = previous_exponent
            mantissa = round_to_multiple(unrounded, rounding)
            moved_down = True
        else:
            break

        if previous_unrounded == unrounded:
            break
    else:
        logger.warning(
            f"Hypermantissa correction did not settle after {CORRECTION_LOOP_LIMIT} steps"
        )

    return mantissa, exponent


def hyperscientifify_with(value: NumberSource, config: HyperscientificConfig) -> HyperNormalizedForm:
    """hyperscientifify с параметрами из HyperscientificConfig."""
    return hyperscientifify(
        value,
        base=config.base,
        rounding=config.rounding,
        hypermantissa_power=config.hypermantissa_power,
        engineerings=config.engineerings,
        exp_multiplier=config.exp_multiplier,
        hyperexp_multiplier=config.hyperexp_multiplier,
    )
