"""
Normal Forms — Результаты нормализации

Все формы являются NamedTuple: их можно распаковывать как обычные пары и
четвёрки (m, e = scientifify(x)), но поля также доступны по имени.
"""

from typing import NamedTuple

from hypernum.core.math.extended_real import ExtendedReal


class NormalizedForm(NamedTuple):
    """
    Научная форма: value = mantissa * base^exponent.

    Attributes:
        mantissa: Мантисса в [base^mantissa_power, base^(mantissa_power + gap))
        exponent: Показатель (уже умноженный на exp_multiplier)
    """

    mantissa: ExtendedReal
    exponent: ExtendedReal


class HyperNormalizedForm(NamedTuple):
    """
    Гипернаучная форма: value = iteratedexp(base, hyperexponent, hypermantissa).

    Attributes:
        hypermantissa: Payload башни
        hyperexponent: Высота башни (уже умноженная на hyperexp_multiplier)
    """

    hypermantissa: ExtendedReal
    hyperexponent: ExtendedReal


class HypersplitForm(NamedTuple):
    """
    Четырёхуровневая форма (M, E, T, P).

    value = b^^...^^(b^b^...^(M * b^E)) где T раз b^ и P раз b^^.

    Attributes:
        mantissa: M (0, если уровень мантиссы отключён)
        exponent: E (0, если уровень показателя отключён)
        tetration: T, количество экспонент
        pentation: P, количество тетраций
    """

    mantissa: ExtendedReal
    exponent: ExtendedReal
    tetration: ExtendedReal
    pentation: ExtendedReal
