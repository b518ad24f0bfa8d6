"""
Towers — Multiplier-Aware Tower Helpers

Итерированные экспоненты и логарифмы, где каждый логарифм дополнительно
умножается на mult. Это эквивалентно башне по основанию base^(1/mult):

    log_base(x) * mult == log_{base^(1/mult)}(x)

Поэтому все три функции сводятся к tetrate/iteratedlog/slog эффективного
основания.
"""

from hypernum.core.math.extended_real import ExtendedReal, NumberSource
from hypernum.core.math.numerical_safeguards import to_extended


def effective_base(base: NumberSource, mult: NumberSource) -> ExtendedReal:
    """base^(1/mult)."""
    return to_extended(base).pow(to_extended(mult).recip())


def iterated_exp_mult(
    base: NumberSource, payload: NumberSource, height: float, mult: NumberSource = 1
) -> ExtendedReal:
    """
    Башня высоты height над payload, каждый шаг base^(x / mult).

    Examples:
        >>> iterated_exp_mult(10, 1, 2) == 1e10
        True
        >>> iterated_exp_mult(10, 2, 1, 2) == 10
        True
    """
    return effective_base(base, mult).tetrate(height, to_extended(payload))


def iterated_mult_log(
    value: NumberSource, base: NumberSource, times: float, mult: NumberSource = 1
) -> ExtendedReal:
    """Обратная к iterated_exp_mult по payload: times раз log_base(x) * mult."""
    return to_extended(value).iteratedlog(effective_base(base, mult), times)


def mult_slog(value: NumberSource, base: NumberSource, mult: NumberSource = 1) -> ExtendedReal:
    """Обратная к iterated_exp_mult по высоте (при payload = 1)."""
    return to_extended(value).slog(effective_base(base, mult))
