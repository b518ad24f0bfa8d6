"""
Level Bounds — Границы уровней hypersplit

Граница уровня в original_maximums — это либо явное значение, либо ссылка
на другую уже известную границу:

- Explicit(value): явное значение
- InheritArgument: та же граница из maximums (того же уровня)
- InheritBoundary: уже разрешённая граница предыдущего уровня

Сериализованная форма: число (или строка числа), "inherit_argument",
"inherit_boundary".
"""

from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Union

from hypernum.core.errors import HyperDomainError
from hypernum.core.math.extended_real import ExtendedReal, NumberSource
from hypernum.core.math.numerical_safeguards import to_extended

# Количество уровней с границами: мантисса, показатель, тетрация
LEVEL_COUNT = 3


class BoundInheritance(str, Enum):
    """Способ наследования границы уровня."""

    ARGUMENT = "inherit_argument"
    BOUNDARY = "inherit_boundary"


@dataclass(frozen=True)
class Explicit:
    """Явная граница уровня."""

    value: ExtendedReal


InheritArgument = BoundInheritance.ARGUMENT
InheritBoundary = BoundInheritance.BOUNDARY

LevelBound = Union[Explicit, BoundInheritance]


def to_level_bound(raw: Union["LevelBound", NumberSource]) -> LevelBound:
    """
    Приведение сырого значения к LevelBound.

    Examples:
        >>> to_level_bound("inherit_boundary") is InheritBoundary
        True
        >>> to_level_bound(100)
        Explicit(value=ExtendedReal('100'))
    """
    if isinstance(raw, (Explicit, BoundInheritance)):
        return raw
    if isinstance(raw, str) and raw in (InheritArgument.value, InheritBoundary.value):
        return BoundInheritance(raw)
    return Explicit(to_extended(raw))


def pad_maximums(maximums: Sequence[NumberSource], base: ExtendedReal) -> list[ExtendedReal]:
    """
    Дополнение maximums до трёх уровней.

    Пустой список заменяется на [base]; недостающие уровни повторяют последний.
    """
    resolved = [to_extended(item) for item in maximums]
    if not resolved:
        resolved.append(base)
    while len(resolved) < LEVEL_COUNT:
        resolved.append(resolved[-1])
    return resolved[:LEVEL_COUNT]


def resolve_level_bounds(
    bounds: Sequence[Union[LevelBound, NumberSource]] | None,
    maximums: Sequence[ExtendedReal],
) -> list[ExtendedReal]:
    """
    Разрешение original_maximums в конкретные значения.

    Args:
        bounds: Границы уровней (None означает InheritArgument для всех)
        maximums: Уже дополненные maximums (три значения)

    Returns:
        Три значения границ. Недостающие уровни разрешаются как InheritBoundary.

    Raises:
        HyperDomainError: Если первый уровень наследует несуществующую предыдущую границу
    """
    if bounds is None:
        return list(maximums[:LEVEL_COUNT])

    levels = [to_level_bound(item) for item in bounds][:LEVEL_COUNT]
    if not levels:
        return list(maximums[:LEVEL_COUNT])
    while len(levels) < LEVEL_COUNT:
        levels.append(InheritBoundary)

    resolved: list[ExtendedReal] = []
    for index, level in enumerate(levels):
        if isinstance(level, Explicit):
            resolved.append(level.value)
        elif level is InheritArgument:
            resolved.append(maximums[index])
        else:
            if not resolved:
                raise HyperDomainError("The first level bound cannot inherit a previous boundary")
            resolved.append(resolved[-1])
    return resolved
