"""
Engineering Sets — Mixed-Radix Exponent Bucketing

Инженерный набор обобщает "показатель кратен 3" из инженерной нотации.
Набор шагов [s_0 > s_1 > ... > s_k] задаёт смешанную систему счисления:
значение x >= 0 жадно раскладывается в коэффициенты

    c_i = floor(remainder / s_i),  remainder -= c_i * s_i

и "текущее инженерное значение" равно sum(c_i * s_i). Например, для [5, 2]
допустимы значения 0, 2, 4, 5, 7, 9, 10, 12, 14, ...

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Набор непуст, все шаги строго положительны
2. Шаги дедуплицированы и отсортированы по убыванию
3. next(current(x)) > current(x) для |x| <= MAX_SAFE_INTEGER; выше шаг
   может теряться в точности double, и next(current(x)) == current(x)
4. Для набора [1] функции совпадают с floor/ceil по целым
"""

from dataclasses import dataclass
from typing import Iterable, Union

from hypernum.core.errors import EmptyEngineeringSetError, HyperDomainError
from hypernum.core.math.extended_real import (
    INF,
    NEG_INF,
    ZERO,
    ExtendedReal,
    NumberSource,
)
from hypernum.core.math.numerical_safeguards import to_extended

# =============================================================================
# ENGINEERING SET
# =============================================================================


@dataclass(frozen=True)
class EngineeringSet:
    """
    Валидированный набор инженерных шагов.

    Attributes:
        steps: Шаги, строго убывающие, все > 0
    """

    steps: tuple[ExtendedReal, ...]

    def __post_init__(self) -> None:
        if not self.steps:
            raise EmptyEngineeringSetError("EngineeringSet requires at least one step")
        for step in self.steps:
            if step.is_nan() or not step.is_finite() or step <= 0:
                raise EmptyEngineeringSetError(
                    f"Engineering steps must be finite and positive, got {step}"
                )
        for larger, smaller in zip(self.steps, self.steps[1:]):
            if not larger > smaller:
                raise EmptyEngineeringSetError(
                    "EngineeringSet steps must be strictly descending; use EngineeringSet.of()"
                )

    @classmethod
    def of(cls, source: "EngineeringSource") -> "EngineeringSet":
        """
        Построение набора из скаляра, последовательности или другого набора.

        Examples:
            >>> [float(s) for s in EngineeringSet.of([2, 5, 2]).steps]
            [5.0, 2.0]
            >>> EngineeringSet.of(3).smallest == 3
            True
        """
        if isinstance(source, EngineeringSet):
            return source
        if isinstance(source, (ExtendedReal, int, float, str)):
            raw = [to_extended(source)]
        else:
            raw = [to_extended(item) for item in source]

        unique: list[ExtendedReal] = []
        for step in sorted(raw, key=_sort_key, reverse=True):
            if not unique or unique[-1] != step:
                unique.append(step)
        return cls(tuple(unique))

    @property
    def smallest(self) -> ExtendedReal:
        return self.steps[-1]

    @property
    def largest(self) -> ExtendedReal:
        return self.steps[0]

    def __len__(self) -> int:
        return len(self.steps)


EngineeringSource = Union[EngineeringSet, NumberSource, Iterable[NumberSource]]

# Набор по умолчанию: обычные целые показатели
DEFAULT_ENGINEERING = EngineeringSet((ExtendedReal.from_number(1.0),))


def _sort_key(step: ExtendedReal):
    # Неположительные и NaN шаги отсеет __post_init__
    if step.is_nan():
        return (0, 0.0, 0.0)
    return (step.sign, step.layer * step.sign, step.mag * step.sign)


# =============================================================================
# КОЭФФИЦИЕНТНЫЕ ФОРМЫ
# =============================================================================


def current_engineering(value: NumberSource, engineerings: EngineeringSource) -> list[ExtendedReal]:
    """
    Жадное разложение значения по шагам набора.

    Args:
        value: Неотрицательное значение
        engineerings: Инженерный набор

    Returns:
        Коэффициенты при шагах, в порядке убывания шагов

    Raises:
        HyperDomainError: Если value < 0

    Examples:
        >>> [float(c) for c in current_engineering(13, [5, 2])]
        [2.0, 1.0]
    """
    value = to_extended(value)
    steps = EngineeringSet.of(engineerings).steps
    if value < 0:
        raise HyperDomainError(f"current_engineering does not support negative values, got {value}")
    if value.is_zero():
        return [ZERO] * len(steps)

    coefficients: list[ExtendedReal] = []
    remainder = value
    for step in steps:
        portion = ExtendedReal.max((remainder / step).floor(), ZERO)
        remainder = remainder - portion * step
        coefficients.append(portion)
    return coefficients


def engineering_value(coefficients: Iterable[NumberSource], engineerings: EngineeringSource) -> ExtendedReal:
    """Сумма coefficient_i * step_i (лишние коэффициенты игнорируются)."""
    steps = EngineeringSet.of(engineerings).steps
    result = ZERO
    for coefficient, step in zip(coefficients, steps):
        result = result + to_extended(coefficient) * step
    return result


def next_engineering(value: NumberSource, engineerings: EngineeringSource) -> list[ExtendedReal]:
    """
    Коэффициенты наименьшего представимого значения, строго большего value.

    Для каждой позиции (от меньших шагов к большим) коэффициент увеличивается
    на 1, все меньшие позиции обнуляются; берётся минимальный результат > value.
    """
    value = to_extended(value)
    engineering_set = EngineeringSet.of(engineerings)
    old = current_engineering(value, engineering_set)
    best_value = INF
    best = list(old)
    for position in range(len(engineering_set) - 1, -1, -1):
        candidate = list(old)
        candidate[position] = candidate[position] + 1
        for lower in range(position + 1, len(engineering_set)):
            candidate[lower] = ZERO
        candidate_value = engineering_value(candidate, engineering_set)
        if candidate_value > value and candidate_value < best_value:
            best_value = candidate_value
            best = candidate
    return best


def previous_engineering(value: NumberSource, engineerings: EngineeringSource) -> list[ExtendedReal]:
    """
    Коэффициенты наибольшего представимого значения, строго меньшего value.

    Для каждой ненулевой позиции коэффициент уменьшается на 1, а освободившийся
    шаг жадно раскладывается по меньшим позициям, не заполняя его целиком.
    """
    value = to_extended(value)
    engineering_set = EngineeringSet.of(engineerings)
    steps = engineering_set.steps
    old = current_engineering(value, engineering_set)
    best_value = NEG_INF
    best = list(old)
    for position in range(len(steps) - 1, -1, -1):
        if not old[position] > 0:
            continue
        candidate = list(old[: position + 1])
        candidate[position] = candidate[position] - 1
        candidate_value = engineering_value(candidate, engineering_set)
        difference = steps[position]
        for lower in range(position + 1, len(steps)):
            coefficient = ExtendedReal.max((difference / steps[lower]).floor(), ZERO)
            portion = coefficient * steps[lower]
            if portion == difference:
                coefficient = coefficient - 1
                portion = portion - steps[lower]
            difference = difference - portion
            candidate_value = candidate_value + portion
            candidate.append(coefficient)
        if candidate_value < value and candidate_value > best_value:
            best_value = candidate_value
            best = candidate
    return best


# =============================================================================
# ЗНАЧЕНИЯ
# =============================================================================


def current_engineering_value(value: NumberSource, engineerings: EngineeringSource) -> ExtendedReal:
    """
    Наибольшее представимое значение <= value.

    Для отрицательных value: -upper_current_engineering_value(-value).

    Examples:
        >>> current_engineering_value(224, 3) == 222
        True
        >>> current_engineering_value(-224, 3) == -225
        True
    """
    value = to_extended(value)
    engineering_set = EngineeringSet.of(engineerings)
    if value.is_zero():
        return ZERO
    if value < 0:
        return -upper_current_engineering_value(-value, engineering_set)
    return engineering_value(current_engineering(value, engineering_set), engineering_set)


def next_engineering_value(value: NumberSource, engineerings: EngineeringSource) -> ExtendedReal:
    """
    Наименьшее представимое значение > value.

    Examples:
        >>> next_engineering_value(0, [5, 2]) == 2
        True
        >>> next_engineering_value(5, [5, 2]) == 7
        True
    """
    value = to_extended(value)
    engineering_set = EngineeringSet.of(engineerings)
    if value.is_zero():
        return engineering_set.smallest
    if value < 0:
        return -previous_engineering_value(-value, engineering_set)
    return engineering_value(next_engineering(value, engineering_set), engineering_set)


def previous_engineering_value(value: NumberSource, engineerings: EngineeringSource) -> ExtendedReal:
    """
    Наибольшее представимое значение < value.

    Examples:
        >>> previous_engineering_value(5, [5, 2]) == 4
        True
        >>> previous_engineering_value(0, 3) == -3
        True
    """
    value = to_extended(value)
    engineering_set = EngineeringSet.of(engineerings)
    if value.is_zero():
        return -engineering_set.smallest
    if value < 0:
        return -next_engineering_value(-value, engineering_set)
    current = current_engineering_value(value, engineering_set)
    if current != value:
        return current
    return engineering_value(previous_engineering(value, engineering_set), engineering_set)


def upper_current_engineering_value(value: NumberSource, engineerings: EngineeringSource) -> ExtendedReal:
    """Наименьшее представимое значение >= value."""
    value = to_extended(value)
    current = current_engineering_value(value, engineerings)
    if value == current:
        return current
    return next_engineering_value(value, engineerings)
