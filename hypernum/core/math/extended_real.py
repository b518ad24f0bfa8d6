"""
ExtendedReal — Layered Arbitrary-Magnitude Number

Числовой субстрат для всего движка нормализации. Значение хранится как
тройка (sign, layer, mag):

- layer == 0: value = sign * mag
- layer == 1: value = sign * 10^mag
- layer >= 2: value = sign * 10^(sign(mag) * |value(layer - 1, |mag|)|)

Отрицательный mag на слое >= 1 означает очень малое число
(10^-x, 10^-10^x, ...). Бесконечности хранятся с layer = mag = inf.

Тетрация и супер-логарифм используют линейную аппроксимацию для дробных
высот: base^^x = x + 1 при -1 < x <= 0. При такой аппроксимации slog
является точной обратной функцией к tetrate с payload = 1.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Значения неизменяемы: каждая операция возвращает новый экземпляр
2. После нормализации слой 0 содержит модули в [1/9e15, 9e15)
3. Существует полный порядок на всех не-NaN значениях
4. Все циклы ограничены (не более 10000 итераций)
"""

import math
import re
from dataclasses import dataclass
from typing import Final, Union

# =============================================================================
# КОНСТАНТЫ ПРЕДСТАВЛЕНИЯ
# =============================================================================

# Граница перехода на следующий слой
EXP_LIMIT: Final[float] = 9e15

# Граница перехода на предыдущий слой (log10(EXP_LIMIT))
LAYER_DOWN: Final[float] = math.log10(9e15)

# Наименьший модуль, хранимый на слое 0
FIRST_NEG_LAYER: Final[float] = 1 / 9e15

# Разница порядков, после которой меньший операнд сложения теряется
MAX_SIGNIFICANT_DIGITS: Final[int] = 17

# e^(1/e): основания не выше этого дают сходящуюся бесконечную башню
CONVERGENT_TETRATION_BASE_LIMIT: Final[float] = 1.44466786100976613366

# e^(-e): основания ниже этого дают осциллирующую бесконечную башню
OSCILLATING_TETRATION_BASE_LIMIT: Final[float] = 0.06598803584531253708

# Предел итераций для tetrate/iteratedlog
TOWER_ITERATION_LIMIT: Final[int] = 10000

# Количество слоёв подряд, записываемых как "eee..." в строковом виде
MAX_ES_IN_A_ROW: Final[int] = 5

_LN10: Final[float] = math.log(10)

NumberSource = Union["ExtendedReal", int, float, str]


# =============================================================================
# FLOAT ВСПОМОГАТЕЛЬНЫЕ ФУНКЦИИ
# =============================================================================


def _sign(value: float) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def _pow10_float(value: float) -> float:
    """10^value без OverflowError (переполнение даёт inf)."""
    try:
        return 10.0 ** value
    except OverflowError:
        return math.inf


def _js_round(value: float) -> float:
    """Округление половин вверх, как Math.round."""
    return float(math.floor(value + 0.5))


def lambertw(z: float, tol: float = 1e-10) -> float:
    """
    Главная ветвь W-функции Ламберта (W(z) * e^W(z) = z) для z >= -1/e.

    Метод Галлея с начальным приближением через разложение в точке ветвления.

    Args:
        z: Аргумент (z >= -1/e)
        tol: Относительная точность остановки

    Returns:
        W(z), либо NaN при z < -1/e

    Examples:
        >>> abs(lambertw(1.0) - 0.5671432904097838) < 1e-12
        True
        >>> lambertw(0.0)
        0.0
    """
    if math.isnan(z) or z < -1 / math.e:
        return math.nan
    if z == math.inf:
        return math.inf
    if z == 0:
        return 0.0
    if z <= -1 / math.e + 1e-15:
        return -1.0

    if z < 0:
        p = math.sqrt(2 * (math.e * z + 1))
        w = -1 + p - p * p / 3
    elif z < 3:
        w = math.log1p(z) * 0.6
    else:
        w = math.log(z) - math.log(math.log(z))

    for _ in range(100):
        ew = math.exp(w)
        wew = w * ew
        wewz = wew - z
        denom = wew + ew - (w + 2) * wewz / (2 * w + 2)
        if denom == 0:
            return w
        wn = w - wewz / denom
        if abs(wn - w) <= tol * abs(wn):
            return wn
        w = wn
    return w


def _normalize(sign: int, layer: float, mag: float) -> tuple[int, float, float]:
    """Приведение тройки к канонической форме."""
    if math.isnan(mag) or math.isnan(layer):
        return (0, math.nan, math.nan)

    if sign == 0 or (mag == 0 and layer == 0) or (
        mag == -math.inf and 0 < layer < math.inf
    ):
        return (0, 0, 0.0)

    if layer == 0 and mag < 0:
        mag = -mag
        sign = -sign

    if math.isinf(mag) or math.isinf(layer):
        return (sign, math.inf, math.inf)

    if layer == 0 and mag < FIRST_NEG_LAYER:
        return (sign, 1, math.log10(mag))

    absmag = abs(mag)
    signmag = 1 if mag >= 0 else -1

    if absmag >= EXP_LIMIT:
        return (sign, layer + 1, signmag * math.log10(absmag))

    while absmag < LAYER_DOWN and layer > 0:
        layer -= 1
        if layer == 0:
            mag = _pow10_float(mag)
        else:
            mag = signmag * _pow10_float(absmag)
            absmag = abs(mag)
            signmag = 1 if mag >= 0 else -1

    if layer == 0:
        if mag < 0:
            mag = -mag
            sign = -sign
        elif mag == 0:
            return (0, 0, 0.0)

    return (sign, layer, mag)


# =============================================================================
# EXTENDED REAL
# =============================================================================


@dataclass(frozen=True, eq=False)
class ExtendedReal:
    """
    Неизменяемое знаковое число произвольной величины.

    Не создавайте напрямую через конструктор: используйте from_value,
    from_number или from_components — они нормализуют представление.
    """

    sign: int
    layer: float
    mag: float

    # -------------------------------------------------------------------------
    # Конструирование
    # -------------------------------------------------------------------------

    @classmethod
    def from_components(cls, sign: int, layer: float, mag: float) -> "ExtendedReal":
        return cls(*_normalize(sign, layer, mag))

    @classmethod
    def from_number(cls, value: float) -> "ExtendedReal":
        if math.isnan(value):
            return cls(0, math.nan, math.nan)
        if math.isinf(value):
            return cls(_sign(value), math.inf, math.inf)
        return cls.from_components(_sign(value), 0, abs(value))

    @classmethod
    def from_int(cls, value: int) -> "ExtendedReal":
        if abs(value) < 2**53:
            return cls.from_number(float(value))
        return cls.from_components(_sign(value), 1, math.log10(abs(value)))

    @classmethod
    def from_string(cls, text: str) -> "ExtendedReal":
        """
        Разбор строкового представления.

        Поддерживаемые формы:
            "123.45", "1e400", "-2.5e-999", "ee100" (10^10^100),
            "1e1e100", "(e^7)12.5" (7 слоёв над 12.5), "10^^5", "3^^2.5",
            "inf", "-inf", "nan"

        Raises:
            ValueError: Если строка не распознана
        """
        s = text.strip().replace(",", "")
        lowered = s.lower()
        if lowered in ("inf", "+inf", "infinity", "+infinity"):
            return INF
        if lowered in ("-inf", "-infinity"):
            return NEG_INF
        if lowered == "nan":
            return NAN

        if "^^" in s:
            base_text, height_text = s.split("^^", 1)
            return cls.from_string(base_text).tetrate(float(height_text))

        layered = re.fullmatch(r"([+-]?)\(e\^(\d+)\)(.+)", s)
        if layered:
            sign = -1 if layered.group(1) == "-" else 1
            inner = float(layered.group(3))
            return cls.from_components(sign, int(layered.group(2)), inner)

        try:
            plain = float(s)
        except ValueError:
            plain = None
        if plain is not None and not math.isinf(plain) and (plain != 0 or "e" not in lowered):
            return cls.from_number(plain)

        head, sep, tail = s.partition("e")
        if not sep:
            raise ValueError(f"Cannot parse ExtendedReal from {text!r}")
        sign = 1
        if head in ("", "+", "-"):
            if head == "-":
                sign = -1
            mantissa = ONE
        else:
            mantissa = cls.from_string(head)
        exponent = cls.from_string(tail)
        result = mantissa * exponent.pow10()
        return -result if sign < 0 else result

    @classmethod
    def from_value(cls, value: NumberSource) -> "ExtendedReal":
        if isinstance(value, ExtendedReal):
            return value
        if isinstance(value, bool):
            return ONE if value else ZERO
        if isinstance(value, int):
            return cls.from_int(value)
        if isinstance(value, float):
            return cls.from_number(value)
        if isinstance(value, str):
            return cls.from_string(value)
        raise TypeError(f"Cannot convert {type(value).__name__} to ExtendedReal")

    # -------------------------------------------------------------------------
    # Предикаты и преобразования
    # -------------------------------------------------------------------------

    def is_nan(self) -> bool:
        return math.isnan(self.mag)

    def is_finite(self) -> bool:
        return math.isfinite(self.mag) and math.isfinite(self.layer)

    def is_zero(self) -> bool:
        return self.sign == 0 and not self.is_nan()

    def is_integer(self) -> bool:
        """Целое ли значение (значения слоя >= 1 с mag > 0 всегда целые)."""
        if not self.is_finite():
            return False
        if self.layer == 0:
            return float(self.mag).is_integer()
        return self.mag > 0

    def to_float(self) -> float:
        if self.is_nan():
            return math.nan
        if not self.is_finite():
            return self.sign * math.inf
        if self.layer == 0:
            return self.sign * self.mag
        if self.layer == 1:
            return self.sign * _pow10_float(self.mag)
        if self.mag > 0:
            return self.sign * math.inf
        return 0.0

    def __float__(self) -> float:
        return self.to_float()

    def __hash__(self) -> int:
        return hash((self.sign, self.layer, self.mag))

    def __repr__(self) -> str:
        return f"ExtendedReal('{self}')"

    def __str__(self) -> str:
        if self.is_nan():
            return "nan"
        if not self.is_finite():
            return "-inf" if self.sign < 0 else "inf"
        prefix = "-" if self.sign < 0 else ""
        if self.layer == 0:
            number = self.mag
            if number >= 1e21 or (number != 0 and number < 1e-7):
                return prefix + repr(number)
            return prefix + (str(int(number)) if number.is_integer() else repr(number))
        if self.layer == 1:
            exponent = math.floor(self.mag)
            mantissa = _pow10_float(self.mag - exponent)
            if mantissa >= 10:
                mantissa /= 10
                exponent += 1
            return f"{prefix}{mantissa!r}e{exponent}"
        if self.layer <= MAX_ES_IN_A_ROW:
            return prefix + "e" * int(self.layer - 1) + str(
                ExtendedReal.from_components(1, 1, self.mag)
                if abs(self.mag) < EXP_LIMIT
                else repr(self.mag)
            )
        return f"{prefix}(e^{int(self.layer)}){self.mag!r}"

    # -------------------------------------------------------------------------
    # Сравнения
    # -------------------------------------------------------------------------

    def cmpabs(self, other: NumberSource) -> int:
        b = ExtendedReal.from_value(other)
        layer_a = self.layer if self.mag > 0 else -self.layer
        layer_b = b.layer if b.mag > 0 else -b.layer
        if layer_a > layer_b:
            return 1
        if layer_a < layer_b:
            return -1
        if self.mag > b.mag:
            return 1
        if self.mag < b.mag:
            return -1
        return 0

    def cmp(self, other: NumberSource) -> int:
        b = ExtendedReal.from_value(other)
        if self.sign > b.sign:
            return 1
        if self.sign < b.sign:
            return -1
        return self.sign * self.cmpabs(b)

    def _comparable(self, other: object) -> "ExtendedReal | None":
        if isinstance(other, (ExtendedReal, int, float, str)):
            b = ExtendedReal.from_value(other)
            if self.is_nan() or b.is_nan():
                return None
            return b
        raise TypeError(f"Cannot compare ExtendedReal with {type(other).__name__}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, (ExtendedReal, int, float, str)):
            return NotImplemented
        b = self._comparable(other)
        return b is not None and self.cmp(b) == 0

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __lt__(self, other: NumberSource) -> bool:
        b = self._comparable(other)
        return b is not None and self.cmp(b) < 0

    def __le__(self, other: NumberSource) -> bool:
        b = self._comparable(other)
        return b is not None and self.cmp(b) <= 0

    def __gt__(self, other: NumberSource) -> bool:
        b = self._comparable(other)
        return b is not None and self.cmp(b) > 0

    def __ge__(self, other: NumberSource) -> bool:
        b = self._comparable(other)
        return b is not None and self.cmp(b) >= 0

    def eq_tolerance(self, other: NumberSource, tolerance: float = 1e-7) -> bool:
        """
        Относительное сравнение с толерантностью (работает между соседними слоями).

        Examples:
            >>> ExtendedReal.from_value(1e100).eq_tolerance(1.0000000001e100)
            True
            >>> ExtendedReal.from_value(1.0).eq_tolerance(1.1)
            False
        """
        b = ExtendedReal.from_value(other)
        if self.is_nan() or b.is_nan():
            return False
        if not self.is_finite() or not b.is_finite():
            return self.sign == b.sign and self.is_finite() == b.is_finite()
        if self.sign != b.sign:
            return False
        if abs(self.layer - b.layer) > 1:
            return False
        mag_a, mag_b = self.mag, b.mag
        if self.layer > b.layer:
            mag_b = _sign(mag_b) * math.log10(abs(mag_b))
        if self.layer < b.layer:
            mag_a = _sign(mag_a) * math.log10(abs(mag_a))
        return abs(mag_a - mag_b) <= tolerance * max(abs(mag_a), abs(mag_b))

    @staticmethod
    def max(a: NumberSource, b: NumberSource) -> "ExtendedReal":
        a, b = ExtendedReal.from_value(a), ExtendedReal.from_value(b)
        if a.is_nan() or b.is_nan():
            return NAN
        return a if a >= b else b

    @staticmethod
    def min(a: NumberSource, b: NumberSource) -> "ExtendedReal":
        a, b = ExtendedReal.from_value(a), ExtendedReal.from_value(b)
        if a.is_nan() or b.is_nan():
            return NAN
        return a if a <= b else b

    # -------------------------------------------------------------------------
    # Арифметика
    # -------------------------------------------------------------------------

    def __neg__(self) -> "ExtendedReal":
        return ExtendedReal(-self.sign, self.layer, self.mag)

    def __pos__(self) -> "ExtendedReal":
        return self

    def __abs__(self) -> "ExtendedReal":
        return ExtendedReal(abs(self.sign), self.layer, self.mag)

    def recip(self) -> "ExtendedReal":
        if self.is_nan() or self.is_zero():
            return NAN
        if not self.is_finite():
            return ZERO
        if self.layer == 0:
            return ExtendedReal.from_components(self.sign, 0, 1 / self.mag)
        return ExtendedReal.from_components(self.sign, self.layer, -self.mag)

    def _log10_float(self) -> float:
        """log10(|self|) для слоёв 0 и 1."""
        if self.layer == 0:
            return math.log10(self.mag)
        return self.mag

    def __add__(self, other: NumberSource) -> "ExtendedReal":
        if not isinstance(other, (ExtendedReal, int, float, str)):
            return NotImplemented
        a, b = self, ExtendedReal.from_value(other)
        if a.is_nan() or b.is_nan():
            return NAN
        if not a.is_finite():
            if not b.is_finite() and a.sign != b.sign:
                return NAN
            return a
        if not b.is_finite():
            return b
        if a.is_zero():
            return b
        if b.is_zero():
            return a
        if a.sign == -b.sign and a.layer == b.layer and a.mag == b.mag:
            return ZERO
        if a.layer >= 2 or b.layer >= 2:
            return a if a.cmpabs(b) >= 0 else b
        if a.layer == 0 and b.layer == 0:
            return ExtendedReal.from_number(a.sign * a.mag + b.sign * b.mag)

        big, small = (a, b) if a.cmpabs(b) >= 0 else (b, a)
        log_big, log_small = big._log10_float(), small._log10_float()
        if log_big - log_small > MAX_SIGNIFICANT_DIGITS:
            return big
        mantissa = small.sign + big.sign * _pow10_float(log_big - log_small)
        if mantissa == 0:
            return ZERO
        return ExtendedReal.from_components(
            _sign(mantissa), 1, log_small + math.log10(abs(mantissa))
        )

    def __radd__(self, other: NumberSource) -> "ExtendedReal":
        return self.__add__(other)

    def __sub__(self, other: NumberSource) -> "ExtendedReal":
        if not isinstance(other, (ExtendedReal, int, float, str)):
            return NotImplemented
        return self + (-ExtendedReal.from_value(other))

    def __rsub__(self, other: NumberSource) -> "ExtendedReal":
        return ExtendedReal.from_value(other) - self

    def __mul__(self, other: NumberSource) -> "ExtendedReal":
        if not isinstance(other, (ExtendedReal, int, float, str)):
            return NotImplemented
        a, b = self, ExtendedReal.from_value(other)
        if a.is_nan() or b.is_nan():
            return NAN
        if a.is_zero() or b.is_zero():
            if not a.is_finite() or not b.is_finite():
                return NAN
            return ZERO
        sign = a.sign * b.sign
        if not a.is_finite() or not b.is_finite():
            return ExtendedReal(sign, math.inf, math.inf)
        if a.layer == 0 and b.layer == 0:
            product = a.mag * b.mag
            if math.isfinite(product) and product > 0:
                return ExtendedReal.from_components(sign, 0, product)
        exponent = abs(a).log10() + abs(b).log10()
        result = exponent.pow10()
        return -result if sign < 0 else result

    def __rmul__(self, other: NumberSource) -> "ExtendedReal":
        return self.__mul__(other)

    def __truediv__(self, other: NumberSource) -> "ExtendedReal":
        if not isinstance(other, (ExtendedReal, int, float, str)):
            return NotImplemented
        b = ExtendedReal.from_value(other)
        if b.is_zero():
            if self.is_zero() or self.is_nan():
                return NAN
            return ExtendedReal(self.sign, math.inf, math.inf)
        return self * b.recip()

    def __rtruediv__(self, other: NumberSource) -> "ExtendedReal":
        return ExtendedReal.from_value(other) / self

    def __pow__(self, other: NumberSource) -> "ExtendedReal":
        if not isinstance(other, (ExtendedReal, int, float, str)):
            return NotImplemented
        return self.pow(other)

    def __rpow__(self, other: NumberSource) -> "ExtendedReal":
        return ExtendedReal.from_value(other).pow(self)

    def sqr(self) -> "ExtendedReal":
        return self * self

    # -------------------------------------------------------------------------
    # Степени и логарифмы
    # -------------------------------------------------------------------------

    def log10(self) -> "ExtendedReal":
        if self.is_nan() or self.sign < 0:
            return NAN
        if self.is_zero():
            return NEG_INF
        if not self.is_finite():
            return INF
        if self.layer == 0:
            return ExtendedReal.from_number(math.log10(self.mag))
        return ExtendedReal.from_components(_sign(self.mag), self.layer - 1, abs(self.mag))

    def ln(self) -> "ExtendedReal":
        return self.log10() * _LN10

    def log(self, base: NumberSource) -> "ExtendedReal":
        """Логарифм по произвольному основанию."""
        b = ExtendedReal.from_value(base)
        if self.is_nan() or b.is_nan() or self.sign < 0 or b.sign <= 0 or b == 1:
            return NAN
        if self.layer == 0 and b.layer == 0 and self.sign > 0:
            return ExtendedReal.from_number(math.log(self.mag) / math.log(b.mag))
        return self.log10() / b.log10()

    def pow10(self) -> "ExtendedReal":
        """10^self."""
        if self.is_nan():
            return NAN
        if not self.is_finite():
            return INF if self.sign > 0 else ZERO
        sign, layer, mag = self.sign, self.layer, self.mag
        if layer == 0:
            new_mag = _pow10_float(sign * mag)
            if math.isfinite(new_mag) and new_mag >= 0.1:
                return ExtendedReal.from_components(1, 0, new_mag)
            if sign == 0:
                return ONE
            layer, mag = 1, math.log10(mag)
        if sign > 0 and mag >= 0:
            return ExtendedReal.from_components(1, layer + 1, mag)
        if sign < 0 and mag >= 0:
            return ExtendedReal.from_components(1, layer + 1, -mag)
        return ONE

    def exp(self) -> "ExtendedReal":
        if self.layer == 0 and self.is_finite() and self.mag <= 709:
            return ExtendedReal.from_number(math.exp(self.sign * self.mag))
        return (self / _LN10).pow10()

    def pow(self, exponent: NumberSource) -> "ExtendedReal":
        """self^exponent (для отрицательного основания только целые показатели)."""
        a, b = self, ExtendedReal.from_value(exponent)
        if a.is_nan() or b.is_nan():
            return NAN
        if b.is_zero() or a == 1:
            return ONE
        if a.is_zero():
            return ZERO if b.sign > 0 else INF
        if a.layer == 0 and b.layer == 0:
            try:
                result = math.pow(a.sign * a.mag, b.sign * b.mag)
            except OverflowError:
                result = None
            except ValueError:
                return NAN
            if result is not None and math.isfinite(result) and result != 0:
                return ExtendedReal.from_number(result)

        result = (abs(a).log10() * b).pow10()
        if a.sign < 0:
            if not b.is_integer():
                return NAN
            if b.layer == 0 and int(b.mag) % 2 == 1:
                return -result
        return result

    def root(self, degree: NumberSource) -> "ExtendedReal":
        return self.pow(ExtendedReal.from_value(degree).recip())

    def sqrt(self) -> "ExtendedReal":
        if self.layer == 0 and self.sign >= 0 and self.is_finite():
            return ExtendedReal.from_number(math.sqrt(self.mag))
        return self.pow(0.5)

    # -------------------------------------------------------------------------
    # Округления
    # -------------------------------------------------------------------------

    def _integral(self, func) -> "ExtendedReal":
        if not self.is_finite():
            return self
        if self.mag < 0:
            return self._tiny_integral(func)
        if self.layer == 0:
            return ExtendedReal.from_number(float(func(self.sign * self.mag)))
        return self

    def _tiny_integral(self, func) -> "ExtendedReal":
        return ExtendedReal.from_number(float(func(self.sign * FIRST_NEG_LAYER / 2)))

    def floor(self) -> "ExtendedReal":
        return self._integral(math.floor)

    def ceil(self) -> "ExtendedReal":
        return self._integral(math.ceil)

    def trunc(self) -> "ExtendedReal":
        return self._integral(math.trunc)

    def round(self) -> "ExtendedReal":
        return self._integral(_js_round)

    def mod(self, divisor: NumberSource) -> "ExtendedReal":
        """Остаток со знаком делимого (как оператор % для чисел)."""
        b = ExtendedReal.from_value(divisor)
        if b.is_zero():
            return ZERO
        if self.layer == 0 and b.layer == 0:
            return ExtendedReal.from_number(math.fmod(self.sign * self.mag, b.sign * b.mag))
        if self.cmpabs(b) < 0:
            return self
        return self - (self / b).trunc() * b

    # -------------------------------------------------------------------------
    # Гипероператоры
    # -------------------------------------------------------------------------

    def tetrate(self, height: float = 2, payload: NumberSource = 1) -> "ExtendedReal":
        """
        Тетрация: self^self^...^payload (height раз), дробные высоты линейно.

        Args:
            height: Высота башни (float, может быть дробной, отрицательной, inf)
            payload: Начальное значение на вершине башни (default: 1)

        Returns:
            Значение башни. Отрицательная высота делегируется в iteratedlog.

        Examples:
            >>> ExtendedReal.from_value(10).tetrate(2) == 1e10
            True
            >>> ExtendedReal.from_value(2).tetrate(3) == 16
            True
        """
        payload = ExtendedReal.from_value(payload)
        if height == 1:
            return self.pow(payload)
        if height == 0:
            return payload
        if self == 1:
            return ONE
        if self == -1:
            return self.pow(payload)
        if height == math.inf:
            return self._infinite_tower()
        if math.isnan(height):
            return NAN
        if height < 0:
            return payload.iteratedlog(self, -height)

        whole_height = math.trunc(height)
        frac_height = height - whole_height

        if (
            whole_height > TOWER_ITERATION_LIMIT
            and self > 0
            and (self < 1 or (self <= CONVERGENT_TETRATION_BASE_LIMIT and payload <= CONVERGENT_TETRATION_BASE_LIMIT))
        ):
            return self._infinite_tower()

        if frac_height != 0:
            if payload == 1:
                payload = self.pow(frac_height)
            else:
                payload = payload.layeradd(frac_height, self)

        i = 0
        while i < whole_height:
            payload = self.pow(payload)
            if not payload.is_finite():
                return payload
            if payload.layer - self.layer > 3:
                return ExtendedReal.from_components(
                    payload.sign, payload.layer + (whole_height - i - 1), payload.mag
                )
            if i > TOWER_ITERATION_LIMIT:
                return payload
            i += 1
        return payload

    def _infinite_tower(self) -> "ExtendedReal":
        """Предел self^^n при n → inf."""
        base = self.to_float()
        if OSCILLATING_TETRATION_BASE_LIMIT <= base <= CONVERGENT_TETRATION_BASE_LIMIT:
            if base > 1.444667861009099:
                return ExtendedReal.from_number(math.e)
            negln = -math.log(base)
            return ExtendedReal.from_number(lambertw(negln) / negln)
        if base > CONVERGENT_TETRATION_BASE_LIMIT:
            return INF
        return NAN

    def iteratedexp(self, height: float = 2, payload: NumberSource = 1) -> "ExtendedReal":
        """Синоним tetrate: self как основание, payload на вершине."""
        return self.tetrate(height, payload)

    def iteratedlog(self, base: NumberSource = 10, times: float = 1) -> "ExtendedReal":
        """
        Логарифм по основанию base, взятый times раз (дробная часть линейно).

        Examples:
            >>> ExtendedReal.from_value("ee100").iteratedlog(10, 2) == 100
            True
        """
        b = ExtendedReal.from_value(base)
        if times < 0:
            return b.tetrate(-times, self)
        result = self
        whole = math.trunc(times)
        fraction = times - whole

        if result.is_finite() and result.layer - b.layer > 3:
            layer_loss = min(whole, result.layer - b.layer - 3)
            whole -= layer_loss
            result = ExtendedReal.from_components(result.sign, result.layer - layer_loss, result.mag)

        i = 0
        while i < whole:
            result = result.log(b)
            if not result.is_finite():
                return result
            if i > TOWER_ITERATION_LIMIT:
                return result
            i += 1

        if 0 < fraction < 1:
            result = result.layeradd(-fraction, b)
        return result

    def slog(self, base: NumberSource = 10) -> "ExtendedReal":
        """
        Супер-логарифм (обратная к тетрации по высоте), линейная аппроксимация.

        Examples:
            >>> ExtendedReal.from_value(1e10).slog(10) == 2
            True
            >>> ExtendedReal.from_value(1).slog(10) == 0
            True
        """
        b = ExtendedReal.from_value(base)
        if self.is_nan() or b.is_nan() or b.sign <= 0 or b == 1:
            return NAN
        if b < 1:
            if self == 1:
                return ZERO
            if self.is_zero():
                return ExtendedReal.from_number(-1.0)
            return NAN
        if not self.is_finite():
            return INF if self.sign > 0 else NAN
        if self.mag < 0 or self.is_zero():
            return ExtendedReal.from_number(-1.0)

        if b < CONVERGENT_TETRATION_BASE_LIMIT:
            tower = b._infinite_tower()
            if self == tower:
                return INF
            if self > tower:
                return NAN

        result = 0.0
        copy = self
        if copy.layer - b.layer > 3:
            layer_loss = copy.layer - b.layer - 3
            result += layer_loss
            copy = ExtendedReal.from_components(copy.sign, copy.layer - layer_loss, copy.mag)

        for _ in range(100):
            if copy < 0:
                copy = b.pow(copy)
                result -= 1
            elif copy <= 1:
                return ExtendedReal.from_number(result + copy.to_float() - 1)
            else:
                result += 1
                copy = copy.log(b)
        return ExtendedReal.from_number(result)

    def layeradd(self, diff: float, base: NumberSource = 10) -> "ExtendedReal":
        """Сдвиг значения на diff уровней башни по основанию base."""
        b = ExtendedReal.from_value(base)
        slog_dest = self.slog(b).to_float() + diff
        if slog_dest >= 0:
            return b.tetrate(slog_dest)
        if not math.isfinite(slog_dest):
            return NAN
        if slog_dest >= -1:
            return b.tetrate(slog_dest + 1).log(b)
        return b.tetrate(slog_dest + 2).log(b).log(b)

    # -------------------------------------------------------------------------
    # Гамма и факториал
    # -------------------------------------------------------------------------

    def gamma(self) -> "ExtendedReal":
        if self.is_nan():
            return NAN
        if self.mag < 0:
            return self.recip()
        if self.layer == 0:
            x = self.sign * self.mag
            if x < 171:
                try:
                    return ExtendedReal.from_number(math.gamma(x))
                except ValueError:
                    return NAN
            return ExtendedReal.from_number(math.lgamma(x)).exp()
        if not self.is_finite():
            return self if self.sign > 0 else NAN
        if self.layer == 1:
            return (self * (self.ln() - 1)).exp()
        return self.exp()

    def factorial(self) -> "ExtendedReal":
        """x! = gamma(x + 1), асимптотика Стирлинга для слоёв >= 1."""
        if self.is_nan():
            return NAN
        if self.mag < 0 or self.layer == 0:
            return (self + 1).gamma()
        if not self.is_finite():
            return self if self.sign > 0 else NAN
        if self.layer == 1:
            return (self * (self.ln() - 1)).exp()
        return self.exp()


# =============================================================================
# ЧАСТО ИСПОЛЬЗУЕМЫЕ ЗНАЧЕНИЯ
# =============================================================================

ZERO: Final[ExtendedReal] = ExtendedReal(0, 0, 0.0)
ONE: Final[ExtendedReal] = ExtendedReal(1, 0, 1.0)
NEG_ONE: Final[ExtendedReal] = ExtendedReal(-1, 0, 1.0)
TWO: Final[ExtendedReal] = ExtendedReal(1, 0, 2.0)
TEN: Final[ExtendedReal] = ExtendedReal(1, 0, 10.0)
INF: Final[ExtendedReal] = ExtendedReal(1, math.inf, math.inf)
NEG_INF: Final[ExtendedReal] = ExtendedReal(-1, math.inf, math.inf)
NAN: Final[ExtendedReal] = ExtendedReal(0, math.nan, math.nan)
