"""
Errors — Domain Error Taxonomy

Все ошибки конфигурации и входных данных наследуют HyperDomainError,
который сам является ValueError: вызывающий код может ловить либо
конкретный класс, либо ValueError целиком.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Ошибки поднимаются в точке обнаружения, без повторных попыток
2. Sentinel-случаи (0, inf, NaN) не являются ошибками
3. Исчерпание точности не является ошибкой (снап к границе + DEBUG лог)
"""


class HyperDomainError(ValueError):
    """Недопустимая конфигурация или вход для нормализации/инверсии."""

    pass


class InvalidBaseError(HyperDomainError):
    """
    Основание вне поддерживаемой области.

    Поднимается для base <= 1, а также для оснований в области сходящейся
    тетрации там, где требуется расходящаяся башня.
    """

    pass


class ConvergentTetrationError(InvalidBaseError):
    """Бесконечная башня по основанию сходится (base <= e^(1/e))."""

    pass


class EmptyEngineeringSetError(HyperDomainError):
    """Набор инженерных шагов пуст или содержит неположительный шаг."""

    pass


class UnsupportedRegionError(HyperDomainError):
    """Обращение функции ниже её минимума области определения."""

    pass
