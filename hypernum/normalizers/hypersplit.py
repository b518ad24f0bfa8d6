"""
Hypersplit Decomposer — Four-Level Hyperoperator Split

hypersplit раскладывает значение в четвёрку (M, E, T, P):

    value = b^^b^^...^^(b^b^...^(M * b^E))    (T раз "b^", P раз "b^^")

Каждый уровень ограничен сверху своей границей (maximums); достигнув её,
значение переносится на следующий уровень. original_maximums действуют,
пока следующий уровень равен 0 (например, мантисса может расти до 100,
пока показатель не начал расти, а затем ограничена 10).

Отключение уровней:
- maximums[0] == 0 убирает мантиссу
- maximums[1] <= exp_mult убирает показатель
- затем maximums[2] <= hyperexp_mult убирает тетрацию

Округление мантиссы может перенести значение через границу тетрации; тогда
разложение повторяется с ещё одной принудительной пентацией. Повторы идут
циклом с монотонно растущим счётчиком пентаций; после HYPERSPLIT_MAX_ROLLOVERS
переносов последняя попытка оставляет тетрацию на границе (WARNING).

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Сходящаяся тетрация (base^(1/exp_mult) <= e^(1/e)) отвергается
2. Значения в [minnum, original_maximums[0]) возвращаются как есть
3. Каждый цикл ограничен (CORRECTION_LOOP_LIMIT, HYPERSPLIT_MAX_ROLLOVERS)
"""

import logging
import math
from dataclasses import dataclass
from typing import Sequence, Union

from hypernum.core.domain.bounds import LevelBound, pad_maximums, resolve_level_bounds
from hypernum.core.domain.config import HypersplitConfig
from hypernum.core.domain.forms import HypersplitForm
from hypernum.core.errors import ConvergentTetrationError
from hypernum.core.math.engineering import (
    EngineeringSet,
    EngineeringSource,
    next_engineering_value,
    previous_engineering_value,
)
from hypernum.core.math.extended_real import (
    CONVERGENT_TETRATION_BASE_LIMIT,
    ONE,
    ZERO,
    ExtendedReal,
    NumberSource,
)
from hypernum.core.math.numerical_safeguards import (
    CORRECTION_LOOP_LIMIT,
    HYPERSPLIT_MAX_ROLLOVERS,
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
from hypernum.normalizers.hyperscientific import hyperscientifify
from hypernum.normalizers.scientific import scientific_form

logger = logging.getLogger(__name__)


# =============================================================================
# ПАРАМЕТРЫ УРОВНЕЙ
# =============================================================================


@dataclass(frozen=True)
class _SplitParams:
    """Разрешённые параметры одного вызова hypersplit."""

    base: ExtendedReal
    caps: tuple[ExtendedReal, ...]
    original_caps: tuple[ExtendedReal, ...]
    limits: tuple[ExtendedReal, ...]
    original_limits: tuple[ExtendedReal, ...]
    mantissa_removed: bool
    amount_removed: int
    minnum: ExtendedReal
    rounding: Rounding
    engineerings: EngineeringSet
    hyperengineerings: EngineeringSet
    pentaengineerings: EngineeringSet
    exp_mult: ExtendedReal
    hyperexp_mult: ExtendedReal
    pentaexp_mult: ExtendedReal

    def pentation_step(self, value: ExtendedReal) -> ExtendedReal:
        """Снятие одной пентации: slog с множителями."""
        return mult_slog(value, self.base, self.exp_mult) * self.hyperexp_mult


@dataclass(frozen=True)
class _Rollover:
    """Сигнал переноса в уровень пентации (достигнутый счётчик пентаций)."""

    pentation: ExtendedReal


def _level_limits(
    base: ExtendedReal,
    caps: Sequence[ExtendedReal],
    mantissa_scale: ExtendedReal,
    tetration_payload: Union[ExtendedReal, None],
    mantissa_removed: bool,
    engineerings: EngineeringSet,
    hyperengineerings: EngineeringSet,
    exp_mult: ExtendedReal,
    hyperexp_mult: ExtendedReal,
) -> list[ExtendedReal]:
    """
    Пороговые значения уровней: [мантисса, показатель, тетрация].

    Args:
        caps: Границы уровней
        mantissa_scale: Граница мантиссы, на которую умножается граница показателя
        tetration_payload: Payload башни для границы тетрации (None = граница показателя)
    """
    limits = [caps[0]]
    if mantissa_removed:
        limits.append(iterated_exp_mult(base, caps[1], 1, exp_mult))
    else:
        top_exponent = previous_engineering_value(caps[1], engineerings)
        exponent_limit = iterated_exp_mult(base, top_exponent, 1, exp_mult) * mantissa_scale
        limits.append(ExtendedReal.max(exponent_limit, limits[0]))
    payload = limits[1] if tetration_payload is None else tetration_payload
    height = previous_engineering_value(caps[2] / hyperexp_mult, hyperengineerings)
    tetration_limit = iterated_exp_mult(base, payload, height.to_float(), exp_mult)
    limits.append(ExtendedReal.max(tetration_limit, limits[1]))
    return limits


def _resolve_params(
    base: ExtendedReal,
    maximums: Sequence[NumberSource],
    original_maximums: Union[Sequence[Union[LevelBound, NumberSource]], None],
    minnum: NumberSource,
    mantissa_rounding: Rounding,
    engineerings: EngineeringSource,
    hyperengineerings: EngineeringSource,
    pentaengineerings: EngineeringSource,
    exp_mult: NumberSource,
    hyperexp_mult: NumberSource,
    pentaexp_mult: NumberSource,
) -> _SplitParams:
    exp_mult = to_extended(exp_mult)
    hyperexp_mult = to_extended(hyperexp_mult)
    engineering_set = EngineeringSet.of(engineerings)
    hyperengineering_set = EngineeringSet.of(hyperengineerings)

    if effective_base(base, exp_mult) <= CONVERGENT_TETRATION_BASE_LIMIT:
        raise ConvergentTetrationError(
            f"hypersplit does not support convergent tetrations, got base {base}"
        )

    raw_caps = pad_maximums(maximums, base)
    original_caps = resolve_level_bounds(original_maximums, raw_caps)

    caps = list(raw_caps)
    mantissa_removed = caps[0].is_zero()
    amount_removed = 0
    if caps[1] <= exp_mult:
        amount_removed = 1
        caps[1] = ONE
        if caps[2] <= hyperexp_mult:
            amount_removed = 2
            caps[2] = ONE

    limits = _level_limits(
        base,
        caps,
        caps[0],
        None,
        mantissa_removed,
        engineering_set,
        hyperengineering_set,
        exp_mult,
        hyperexp_mult,
    )
    # Граница показателя масштабируется текущей (а не исходной) границей мантиссы
    original_limits = _level_limits(
        base,
        original_caps,
        caps[0],
        limits[1],
        mantissa_removed,
        engineering_set,
        hyperengineering_set,
        exp_mult,
        hyperexp_mult,
    )

    return _SplitParams(
        base=base,
        caps=tuple(caps),
        original_caps=tuple(original_caps),
        limits=tuple(limits),
        original_limits=tuple(original_limits),
        mantissa_removed=mantissa_removed,
        amount_removed=amount_removed,
        minnum=to_extended(minnum),
        rounding=mantissa_rounding,
        engineerings=engineering_set,
        hyperengineerings=hyperengineering_set,
        pentaengineerings=EngineeringSet.of(pentaengineerings),
        exp_mult=exp_mult,
        hyperexp_mult=hyperexp_mult,
        pentaexp_mult=to_extended(pentaexp_mult),
    )


# =============================================================================
# HYPERSPLIT
# =============================================================================


def hypersplit(
    value: NumberSource,
    base: NumberSource = 10,
    maximums: Sequence[NumberSource] = (10, 10, 10),
    original_maximums: Union[Sequence[Union[LevelBound, NumberSource]], None] = None,
    minnum: NumberSource = 1,
    mantissa_rounding: Rounding = 0,
    engineerings: EngineeringSource = 1,
    hyperengineerings: EngineeringSource = 1,
    pentaengineerings: EngineeringSource = 1,
    exp_mult: NumberSource = 1,
    hyperexp_mult: NumberSource = 1,
    pentaexp_mult: NumberSource = 1,
) -> HypersplitForm:
    """
    Четырёхуровневое разложение значения.

    Args:
        value: Значение
        base: Основание показателя, тетрации и пентации
        maximums: Границы мантиссы, показателя и тетрации (недостающие повторяют последнюю)
        original_maximums: Границы при нулевом следующем уровне (None = maximums)
        minnum: Значения в [minnum, original_maximums[0]) возвращаются как есть
            (отрицательный minnum отключает это правило)
        mantissa_rounding: Шаг округления мантиссы
        engineerings: Инженерный набор показателя
        hyperengineerings: Инженерный набор тетрации
        pentaengineerings: Инженерный набор пентации
        exp_mult: Множитель каждого показателя
        hyperexp_mult: Множитель каждой тетрации
        pentaexp_mult: Множитель итоговой пентации

    Returns:
        HypersplitForm(mantissa, exponent, tetration, pentation)

    Raises:
        ConvergentTetrationError: Если base^(1/exp_mult) <= e^(1/e)

    Examples:
        >>> hypersplit(1e100) == (1, 2, 1, 0)
        True
        >>> hypersplit(5) == (5, 0, 0, 0)
        True
    """
    value = to_extended(value)
    params = _resolve_params(
        to_extended(base),
        maximums,
        original_maximums,
        minnum,
        mantissa_rounding,
        engineerings,
        hyperengineerings,
        pentaengineerings,
        exp_mult,
        hyperexp_mult,
        pentaexp_mult,
    )

    offset = ZERO
    current = value
    for _ in range(HYPERSPLIT_MAX_ROLLOVERS):
        outcome = _split(current, offset, params, allow_rollover=True)
        if isinstance(outcome, HypersplitForm):
            return outcome
        next_offset = next_engineering_value(outcome.pentation, params.pentaengineerings)
        logger.debug(f"Rollover into pentation {next_offset} for value {value}")
        current = _remove_pentations(current, next_offset - offset, params)
        offset = next_offset

    logger.warning(
        f"hypersplit reached {HYPERSPLIT_MAX_ROLLOVERS} rollovers for value {value}, "
        f"tetration left at its cap"
    )
    return _split(current, offset, params, allow_rollover=False)


def _remove_pentations(value: ExtendedReal, amount: ExtendedReal, params: _SplitParams) -> ExtendedReal:
    for _ in range(math.ceil(amount.to_float())):
        value = params.pentation_step(value)
    return value


def _split(
    value: ExtendedReal, offset: ExtendedReal, params: _SplitParams, allow_rollover: bool
) -> Union[HypersplitForm, _Rollover]:
    """Одна попытка разложения, начиная с уже снятых offset пентаций."""
    base = params.base
    caps, original_caps = params.caps, params.original_caps
    limits, original_limits = params.limits, params.original_limits
    mantissa_removed, amount_removed = params.mantissa_removed, params.amount_removed
    rounding = params.rounding

    if value.is_zero() and amount_removed == 0:
        return HypersplitForm(ZERO, ZERO, ZERO, offset * params.pentaexp_mult)
    if (
        not mantissa_removed
        and params.minnum >= 0
        and params.minnum <= abs(value) < original_caps[0]
    ):
        return HypersplitForm(value, ZERO, ZERO, offset * params.pentaexp_mult)

    small_form = _split_small(value, offset, params)
    if small_form is not None:
        return small_form

    negative = value < 0
    if negative:
        value = -value
    negative_exponent = value < 1 and amount_removed < 1 and value.recip() >= original_limits[1]
    if negative_exponent:
        value = value.recip()

    pentation = offset
    if mantissa_removed and amount_removed > 1:
        for _ in range(CORRECTION_LOOP_LIMIT):
            if value < base:
                break
            value = params.pentation_step(value)
            pentation = pentation + 1
        pentation = round_to_multiple((pentation + value.log(base)) * params.pentaexp_mult, rounding)
        return HypersplitForm(ZERO, ZERO, ZERO, pentation)

    entry_limit = original_limits[2] if pentation.is_zero() else limits[2]
    if value >= entry_limit:
        for _ in range(CORRECTION_LOOP_LIMIT):
            if value < limits[2]:
                break
            increase = next_engineering_value(pentation, params.pentaengineerings) - pentation
            value = _remove_pentations(value, increase, params)
            pentation = pentation + increase

    hypermantissa, tetration = value, ZERO
    if mantissa_removed and amount_removed > 0:
        tetration = round_to_multiple(params.pentation_step(value), rounding)
        if allow_rollover and tetration >= caps[2]:
            return _Rollover(pentation)
        return HypersplitForm(ZERO, ZERO, tetration, pentation * params.pentaexp_mult)

    if amount_removed > 1:
        hypermantissa = round_to_multiple(hypermantissa, rounding)
    elif (pentation.is_zero() and value >= original_limits[1]) or (pentation > 0 and value >= limits[1]):
        hypermantissa, tetration = _split_tetration(value, params)

    mantissa, exponent, tetration = _split_exponent(hypermantissa, tetration, params)

    tetration = tetration * params.hyperexp_mult
    tetration_cap = original_caps[2] if pentation.is_zero() else caps[2]
    if allow_rollover and tetration >= tetration_cap:
        return _Rollover(pentation)

    exponent = exponent * params.exp_mult
    if negative_exponent:
        exponent = -exponent
    if negative:
        mantissa = -mantissa
    if amount_removed > 0:
        exponent = ZERO
    if amount_removed > 1:
        tetration = ZERO
    return HypersplitForm(mantissa, exponent, tetration, pentation * params.pentaexp_mult)


def _split_small(
    value: ExtendedReal, offset: ExtendedReal, params: _SplitParams
) -> Union[HypersplitForm, None]:
    """Значения < 1 при отключённом показателе (и, возможно, тетрации)."""
    if not value < 1 or params.amount_removed == 0:
        return None
    base, rounding = params.base, params.rounding

    if params.amount_removed == 1:
        if params.mantissa_removed:
            tetration = round_to_multiple(params.pentation_step(value), rounding)
            return HypersplitForm(ZERO, ZERO, tetration, offset * params.pentaexp_mult)
        tetration = previous_engineering_value(ZERO, params.hyperengineerings)
        for _ in range(CORRECTION_LOOP_LIMIT):
            if not (value < 0 and tetration > -2):
                break
            tetration = previous_engineering_value(tetration, params.hyperengineerings)
        mantissa = iterated_mult_log(value, base, tetration.to_float(), params.exp_mult)
        return HypersplitForm(
            mantissa, ZERO, tetration * params.hyperexp_mult, offset * params.pentaexp_mult
        )

    if params.mantissa_removed:
        pentation = round_to_multiple(params.pentation_step(value), rounding)
        return HypersplitForm(ZERO, ZERO, ZERO, (offset + pentation) * params.pentaexp_mult)
    pentation = next_engineering_value(ZERO, params.pentaengineerings)
    value = _remove_pentations(value, pentation, params)
    return HypersplitForm(value, ZERO, ZERO, (offset + pentation) * params.pentaexp_mult)


def _split_tetration(value: ExtendedReal, params: _SplitParams) -> tuple[ExtendedReal, ExtendedReal]:
    """Снятие тетраций, пока гипермантисса не окажется ниже границы показателя."""
    base, exp_mult = params.base, params.exp_mult
    exponent_limit = params.limits[1]
    hypermantissa_power = mult_slog(exponent_limit, base, exp_mult)
    hypermantissa, tetration = hyperscientifify(
        value, base, 0, hypermantissa_power, params.hyperengineerings, exp_mult
    )

    for _ in range(CORRECTION_LOOP_LIMIT):
        previous = hypermantissa
        if hypermantissa >= exponent_limit:
            next_tetration = next_engineering_value(tetration, params.hyperengineerings)
            hypermantissa = iterated_mult_log(
                hypermantissa, base, (next_tetration - tetration).to_float(), exp_mult
            )
            tetration = next_tetration
        else:
            previous_tetration = previous_engineering_value(tetration, params.hyperengineerings)
            lowered = iterated_exp_mult(
                base, hypermantissa, (tetration - previous_tetration).to_float(), exp_mult
            )
            if not lowered < exponent_limit:
                break
            hypermantissa, tetration = lowered, previous_tetration
        if previous == hypermantissa:
            break
    return hypermantissa, tetration


def _mantissa_bounds(exponent: ExtendedReal, params: _SplitParams) -> tuple[ExtendedReal, ExtendedReal]:
    """Интервал мантиссы [lower, upper) при данном показателе."""
    upper = params.original_limits[0] if exponent.is_zero() else params.limits[0]
    previous = previous_engineering_value(exponent, params.engineerings)
    return upper / params.base.pow(exponent - previous), upper


def _split_exponent(
    hypermantissa: ExtendedReal, tetration: ExtendedReal, params: _SplitParams
) -> tuple[ExtendedReal, ExtendedReal, ExtendedReal]:
    """
    Разложение гипермантиссы в мантиссу и показатель.

    Returns:
        (mantissa, exponent, tetration): тетрация может вырасти, если
        округление перенесло показатель через его границу.
    """
    base, rounding = params.base, params.rounding
    mantissa, exponent = hypermantissa, ZERO

    for _ in range(CORRECTION_LOOP_LIMIT):
        mantissa, exponent = hypermantissa, ZERO
        if params.mantissa_removed:
            mantissa, exponent = ZERO, round_to_multiple(hypermantissa.log(base), rounding)
        elif params.amount_removed < 1 and mantissa >= params.original_caps[0]:
            # Нижняя граница мантиссы чуть ниже нужной; корректирующий цикл ниже доводит её
            mantissa_power = params.limits[0].log(base) - params.engineerings.smallest
            mantissa, exponent = scientific_form(
                hypermantissa, base, 0, mantissa_power, params.engineerings, ONE
            )

        if params.amount_removed < 1 and not params.mantissa_removed:
            mantissa, exponent = _correct_mantissa(mantissa, exponent, params)
        else:
            mantissa = round_to_multiple(mantissa, rounding)

        exponent_cap = params.original_caps[1] if tetration.is_zero() else params.caps[1]
        if exponent < exponent_cap:
            break
        # Округление перенесло показатель через границу
        next_tetration = next_engineering_value(tetration, params.hyperengineerings)
        hypermantissa = iterated_mult_log(
            hypermantissa, base, (next_tetration - tetration).to_float(), params.exp_mult
        )
        tetration = next_tetration

    return mantissa, exponent, tetration


def _correct_mantissa(
    unrounded: ExtendedReal, exponent: ExtendedReal, params: _SplitParams
) -> tuple[ExtendedReal, ExtendedReal]:
    base, rounding = params.base, params.rounding
    mantissa = round_to_multiple(unrounded, rounding)
    moved_down = False

    for _ in range(CORRECTION_LOOP_LIMIT):
        previous_unrounded = unrounded
        lower, upper = _mantissa_bounds(exponent, params)
        if mantissa >= upper:
            next_exponent = next_engineering_value(exponent, params.engineerings)
            unrounded = unrounded / base.pow(next_exponent - exponent)
            exponent = next_exponent
            if moved_down:
                boundary, _ = _mantissa_bounds(exponent, params)
                logger.debug(f"Mantissa plateau at exponent {exponent}, snapped to {boundary}")
                mantissa = round_to_multiple(boundary, rounding)
                break
            mantissa = round_to_multiple(unrounded, rounding)
        elif mantissa < lower:
            previous_exponent = previous_engineering_value(exponent, params.engineerings)
            unrounded = unrounded * base.pow(exponent - previous_exponent)
            exponent = previous_exponent
            mantissa = round_to_multiple(unrounded, rounding)
            moved_down = True
        else:
            break
        if previous_unrounded == unrounded:
            break

    return mantissa, exponent


def hypersplit_with(value: NumberSource, config: HypersplitConfig) -> HypersplitForm:
    """hypersplit с параметрами из HypersplitConfig."""
    return hypersplit(
        value,
        base=config.base,
        maximums=config.maximums,
        original_maximums=config.original_maximums,
        minnum=config.minnum,
        mantissa_rounding=config.mantissa_rounding,
        engineerings=config.engineerings,
        hyperengineerings=config.hyperengineerings,
        pentaengineerings=config.pentaengineerings,
        exp_mult=config.exp_mult,
        hyperexp_mult=config.hyperexp_mult,
        pentaexp_mult=config.pentaexp_mult,
    )
