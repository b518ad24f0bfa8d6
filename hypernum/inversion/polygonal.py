"""
Polygonal Inversion — Polygonal Numbers and Their Iterations

Три уровня полигональных функций и их обращения:

    polygon(n, s)           = ((n - 1)(s - 2) + 2) * n / 2     (квадратичный рост)
    bi_polygon(n, s, p)     = polygon(...polygon(p, s)..., s)  (n раз, дважды экспоненциальный)
    tri_polygon(n, s, b, p) = bi_polygon(...bi_polygon(p, s, b)..., s, b)  (n раз, тетрационный)

Обращения:
    polygon_root / polygon_log — по n и по s
    iterated_polygon_root      — bi_polygon с отрицательным числом итераций
    bi_polygon_root            — n по bi_polygon(n, s, p)
    iterated_bi_polygon_root   — tri_polygon с отрицательным числом итераций
    tri_polygon_root           — n по tri_polygon(n, s, b, p)

Для payload > 1 вложенный polygon быстро выходит на A * B^(2^n) + C, где
A = 2 / (s - 2), C = (s - 4) / (2(s - 2)), а B подбирается по последней
точно вычисленной итерации. Дробные итерации интерполируются по n в этой
формуле.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. sides < 2 и отрицательный payload поднимают HyperDomainError
2. sides == 2 — тождественное отображение (polygon(n, 2) = n)
3. Хаотические области (payload < 1 при sides >= 6 в прямом направлении,
   payload ниже (s - 4)/(s - 2) для корней) принимают только целые
   итерации, дробные возвращают NaN
4. Уточнение обращений — adaptive_bisect в пространстве slog
"""

import logging
import math

from hypernum.core.errors import HyperDomainError
from hypernum.core.math.extended_real import (
    NAN,
    NEG_INF,
    ONE,
    TEN,
    ZERO,
    ExtendedReal,
    NumberSource,
    TOWER_ITERATION_LIMIT,
)
from hypernum.core.math.numerical_safeguards import (
    BISECTION_MAX_ITERATIONS,
    MAX_SAFE_INTEGER,
    to_extended,
)
from hypernum.inversion.bisection import Expand, adaptive_bisect

logger = logging.getLogger(__name__)

# Граница "достаточно большого" payload для пропуска итераций корня
_LARGE_PAYLOAD = ExtendedReal.from_number(1e100)

# Граница, выше которой bi_polygon неотличим от двух слоёв башни
_TOWER_THRESHOLD = ExtendedReal.from_value(MAX_SAFE_INTEGER).pow10()

# Граница пропуска итераций bi_polygon_root: 10^10^10^MAX_SAFE_INTEGER
_SAFE_TOWER = TEN.iteratedexp(3, MAX_SAFE_INTEGER)

# Относительная малость, ниже которой polygon(x) ~ x * (4 - s) / 2
_SMALL_PAYLOAD_RATIO = 1e16


def _validate_sides(sides: ExtendedReal) -> None:
    if sides.is_nan() or sides < 2:
        raise HyperDomainError(
            f"Repeated polygonal functions require sides >= 2, got {sides}"
        )


def _validate_payload(payload: ExtendedReal) -> None:
    if payload < 0:
        raise HyperDomainError(
            f"Repeated polygonal functions require a non-negative payload, got {payload}"
        )


# =============================================================================
# POLYGON
# =============================================================================


def polygon(value: NumberSource, sides: NumberSource) -> ExtendedReal:
    """
    n-е s-угольное число (s = 3 — треугольные, s = 4 — квадраты).

    Examples:
        >>> polygon(4, 3) == 10
        True
        >>> polygon(5, 4) == 25
        True
    """
    value = to_extended(value)
    sides = to_extended(sides)
    return ((value - 1) * (sides - 2) + 2) * value / 2


def polygon_root(value: NumberSource, sides: NumberSource) -> ExtendedReal:
    """
    n по polygon(n, s) = value (положительный корень).

    Examples:
        >>> polygon_root(10, 3) == 4
        True
    """
    value = to_extended(value)
    sides = to_extended(sides)
    if sides == 2:
        return value
    discriminant = (sides - 2) * 8 * value + (sides.sqr() - sides * 8 + 16)
    return (discriminant.sqrt() + sides - 4) / (sides * 2 - 4)


def polygon_log(value: NumberSource, base: NumberSource) -> ExtendedReal:
    """
    s по polygon(n, s) = value при известном n = base.

    Examples:
        >>> polygon_log(10, 4) == 3
        True
    """
    value = to_extended(value)
    base = to_extended(base)
    return (value + base * (base - 2)) / ((base.sqr() - base) / 2)


# =============================================================================
# BI-POLYGON
# =============================================================================


def _iterate_until_stable(payload: ExtendedReal, sides: ExtendedReal, step: ExtendedReal) -> list:
    """Итерации polygon, пока прибавление step ещё меняет значение (плюс одна сверху)."""
    iterations = [payload]
    for _ in range(TOWER_ITERATION_LIMIT):
        last = iterations[-1]
        if last + step == last:
            break
        iterations.append(polygon(last, sides))
    iterations.append(polygon(iterations[-1], sides))
    return iterations


def _double_exponential_constants(
    iterations: list, sides: ExtendedReal
) -> tuple[ExtendedReal, ExtendedReal, ExtendedReal]:
    """Константы A, B, C приближения A * B^(2^n) + C по последней итерации."""
    a = ((sides - 2) / 2).recip()
    c = (sides - 4) / ((sides - 2) * 2)
    final_index = len(iterations) - 1
    b = ((iterations[-1] - c) / a).root(ExtendedReal.from_number(2.0).pow(final_index))
    return a, b, c


def _double_exponential(
    height: NumberSource, a: ExtendedReal, b: ExtendedReal, c: ExtendedReal
) -> ExtendedReal:
    return b.pow(ExtendedReal.from_number(2.0).pow(height)) * a + c


def _double_exponential_height(
    value: ExtendedReal, a: ExtendedReal, b: ExtendedReal, c: ExtendedReal
) -> ExtendedReal:
    return ((value - c) / a).log(b).log(2)


def bi_polygon(value: NumberSource, sides: NumberSource, payload: NumberSource = 2) -> ExtendedReal:
    """
    polygon(x, sides), применённый value раз к payload.

    Args:
        value: Число применений (дробное интерполируется, отрицательное обращает)
        sides: Число сторон (>= 2)
        payload: Начальное значение (default: 2)

    Returns:
        Результат итераций; NaN для комплексных и хаотических случаев

    Raises:
        HyperDomainError: Если sides < 2 или payload < 0

    Examples:
        >>> bi_polygon(2, 3) == 6
        True
        >>> bi_polygon(3, 4, 3) == 6561
        True
    """
    value = to_extended(value)
    sides = to_extended(sides)
    payload = to_extended(payload)
    if sides == 2:
        return payload
    _validate_sides(sides)
    if payload == 1:
        return ONE
    if payload.is_zero():
        return ZERO
    _validate_payload(payload)
    if value < 0:
        return iterated_polygon_root(payload, -value, sides)

    if payload > 1:
        step = ExtendedReal.max(4 - sides, 1)
        iterations = _iterate_until_stable(payload, sides, step)
        a, b, c = _double_exponential_constants(iterations, sides)
        count = value.to_float()

        if count < len(iterations) and count % 1 == 0:
            return iterations[int(count)]
        if count < len(iterations) - 1:
            fraction = count % 1
            lower_n = _double_exponential_height(iterations[math.floor(count)], a, b, c).to_float()
            upper_n = _double_exponential_height(iterations[math.ceil(count)], a, b, c).to_float()
            if not (math.isfinite(lower_n) and math.isfinite(upper_n)):
                # Слишком мало для формулы: интерполяция квадратных корней
                lower_n = iterations[math.floor(count)].sqrt().to_float()
                upper_n = iterations[math.ceil(count)].sqrt().to_float()
                return ExtendedReal.from_number(upper_n * fraction + lower_n * (1 - fraction)).sqr()
            return _double_exponential(upper_n * fraction + lower_n * (1 - fraction), a, b, c)
        return _double_exponential(value, a, b, c)

    if sides == 4:
        return payload.pow(ExtendedReal.from_number(2.0).pow(value))

    if sides < 6:
        # Для малых x polygon(x) ~ x * (4 - s) / 2: итерации сходятся к 0
        added = 4 - sides
        iterations = []
        last = payload
        for _ in range(TOWER_ITERATION_LIMIT):
            iterations.append(last)
            if last + added == added:
                break
            last = polygon(last, sides)
        iterations.append(polygon(iterations[-1], sides))
        count = value.to_float()

        if count < len(iterations) and count % 1 == 0:
            return iterations[int(count)]
        if count < len(iterations) - 1:
            lower_n = iterations[math.floor(count)]
            upper_n = iterations[math.ceil(count)]
            if lower_n < 0 or upper_n < 0:
                return NAN
            fraction = count % 1
            return upper_n.pow(fraction) * lower_n.pow(1 - fraction)
        return iterations[-1] * (added / 2).pow(value - (len(iterations) - 1))

    # sides >= 6: хаотическая область, только целые итерации
    if not value.is_integer():
        return NAN
    done = ZERO
    while done < value:
        done = done + 1
        previous = payload
        payload = polygon(payload, sides)
        if payload.is_zero():
            return ZERO
        if payload == previous.sqr():
            return payload.pow(ExtendedReal.from_number(2.0).pow(value - done))
    return payload


def iterated_polygon_root(
    payload: NumberSource, iterations: NumberSource, sides: NumberSource
) -> ExtendedReal:
    """
    polygon_root, применённый iterations раз (bi_polygon с отрицательной высотой).

    Целые итерации выполняются напрямую (большие payload сокращаются корнем
    степени 2^k), дробная часть — через bi_polygon, после чего оценка
    уточняется бисекцией в пространстве slog.

    Raises:
        HyperDomainError: Если sides < 2 или payload < 0

    Examples:
        >>> abs(iterated_polygon_root(6, 2, 3).to_float() - 2) < 1e-9
        True
    """
    payload = to_extended(payload)
    original = payload
    iterations = to_extended(iterations)
    sides = to_extended(sides)
    if sides == 2:
        return payload
    _validate_sides(sides)
    if payload == 1:
        return ONE
    if payload.is_zero():
        return ZERO
    _validate_payload(payload)
    if iterations < 0:
        return bi_polygon(-iterations, sides, payload)
    a = ((sides - 2) / 2).recip()

    if payload > 1:
        done = ZERO
        safe_limit = ExtendedReal.max(_LARGE_PAYLOAD, sides.sqr())
        if payload > safe_limit:
            safe = payload.root(safe_limit).log(2) - 1
            safe = ExtendedReal.min(ExtendedReal.max(safe.floor(), ZERO), iterations.ceil())
            if safe > 0:
                depth = ExtendedReal.from_number(2.0).pow(safe)
                payload = payload.root(depth) * a.pow(1 - depth.recip())
                done = safe
        while iterations > done:
            payload = polygon_root(payload, sides)
            done = done + 1
            if payload == 1:
                return ONE
        if done != iterations:
            payload = bi_polygon(done - iterations, sides, payload)
        if not payload.is_finite():
            return payload

        guess = adaptive_bisect(
            lambda height: bi_polygon(iterations, sides, TEN.tetrate(height.to_float())),
            original,
            0,
            (payload * 2).slog(10),
            expand=Expand.HIGH,
        )
        return TEN.tetrate(guess.to_float())

    if sides == 4:
        return payload.root(ExtendedReal.from_number(2.0).pow(iterations))

    if sides < 4 or payload >= (sides - 4) / (sides - 2):
        done = ZERO
        if sides < 4:
            # Для малых x polygon_root(x) ~ x / multiplier
            multiplier = (4 - sides) / 2
            threshold = multiplier / _SMALL_PAYLOAD_RATIO
            if payload < threshold:
                safe = (payload / threshold).log(multiplier).floor()
                safe = ExtendedReal.min(ExtendedReal.max(safe, ZERO), iterations.floor())
                if safe > 0:
                    payload = payload / multiplier.pow(safe)
                    done = safe
        while iterations > done:
            payload = polygon_root(payload, sides)
            done = done + 1
            if payload == 1:
                return ONE
        if done != iterations:
            payload = bi_polygon(done - iterations, sides, payload)

        guess = adaptive_bisect(
            lambda height: bi_polygon(iterations, sides, TEN.tetrate(height.to_float()).recip()),
            original,
            (payload * 2).recip().slog(10),
            0,
            expand=Expand.LOW,
        )
        return TEN.tetrate(guess.to_float()).recip()

    # Хаотическая область, только целые итерации
    if not iterations.is_integer():
        return NAN
    done = ZERO
    while done < iterations:
        done = done + 1
        payload = polygon_root(payload, sides)
        if payload.is_zero():
            return ZERO
    return payload


def bi_polygon_root(value: NumberSource, sides: NumberSource, zero_value: NumberSource = 2) -> ExtendedReal:
    """
    n по bi_polygon(n, sides, zero_value) = value.

    Args:
        value: Значение bi_polygon
        sides: Число сторон (>= 2)
        zero_value: payload, для которого корень равен 0 (default: 2)

    Returns:
        Число итераций; -inf для value = 1, NaN ниже 1 и для sides = 2

    Raises:
        HyperDomainError: Если sides < 2

    Examples:
        >>> abs(bi_polygon_root(6, 3).to_float() - 2) < 1e-9
        True
    """
    value = to_extended(value)
    sides = to_extended(sides)
    zero_value = to_extended(zero_value)
    if sides == 2:
        return NAN
    _validate_sides(sides)
    if zero_value == 1:
        return NAN
    if value == 1:
        return NEG_INF
    if value < 1 or value.is_nan():
        return NAN

    step = ExtendedReal.max(4 - sides, 1)
    iterations = _iterate_until_stable(zero_value, sides, step)
    a, b, c = _double_exponential_constants(iterations, sides)

    if value == zero_value:
        return ZERO
    if value >= iterations[-1]:
        return _double_exponential_height(value, a, b, c)

    def evaluate(height: ExtendedReal) -> ExtendedReal:
        return bi_polygon(height, sides, zero_value)

    if value > zero_value:
        return adaptive_bisect(evaluate, value, 0, len(iterations) - 1, expand=Expand.HIGH)
    return adaptive_bisect(evaluate, value, -1, 0, expand=Expand.LOW)


# =============================================================================
# TRI-POLYGON
# =============================================================================


def tri_polygon(
    value: float, sides: NumberSource, base: NumberSource = 2, payload: NumberSource = 2
) -> ExtendedReal:
    """
    bi_polygon(x, sides, base), применённый value раз к payload.

    Растёт тетрационно. Дробная часть value интерполируется линейно в
    пространстве slog между payload и bi_polygon(payload).

    Args:
        value: Число применений (отрицательное обращает)
        sides: Число сторон (>= 2)
        base: payload каждого bi_polygon (default: 2)
        payload: Начальное значение (default: 2)

    Examples:
        >>> tri_polygon(1, 3) == 6
        True
    """
    sides = to_extended(sides)
    base = to_extended(base)
    payload = to_extended(payload)
    value = float(value)
    if sides == 2:
        return payload
    _validate_sides(sides)
    if value < 0:
        return iterated_bi_polygon_root(payload, -value, sides, base)

    whole = math.floor(value)
    fraction = value - whole
    if fraction != 0:
        floor_height = payload.slog(10).to_float()
        ceiling_height = bi_polygon(payload, sides, base).slog(10).to_float()
        payload = TEN.tetrate(ceiling_height * fraction + floor_height * (1 - fraction))

    for done in range(1, whole + 1):
        payload = bi_polygon(payload, sides, base)
        if payload > _TOWER_THRESHOLD:
            # Каждый bi_polygon теперь добавляет два слоя
            return TEN.iteratedexp((whole - done) * 2, payload)
    return payload


def _safe_tower_iterations(value: ExtendedReal) -> int:
    """Сколько bi_polygon_root можно заменить снятием двух слоёв башни."""
    if value <= _SAFE_TOWER:
        return 0
    height = (value.slog(10) - _SAFE_TOWER.slog(10)) / 2 + 1
    return int(height.floor().to_float())


def iterated_bi_polygon_root(
    payload: NumberSource, iterations: float, sides: NumberSource, zero_value: NumberSource = 2
) -> ExtendedReal:
    """
    bi_polygon_root, применённый iterations раз (tri_polygon с отрицательной высотой).

    Raises:
        HyperDomainError: Если sides < 2

    Examples:
        >>> abs(iterated_bi_polygon_root(6, 1, 3).to_float() - 2) < 1e-9
        True
    """
    payload = to_extended(payload)
    original = payload
    sides = to_extended(sides)
    zero_value = to_extended(zero_value)
    iterations = float(iterations)
    if sides == 2:
        return payload
    _validate_sides(sides)
    if payload < 1 or payload.is_nan():
        return NAN

    done = _safe_tower_iterations(payload)
    if done > 0:
        payload = payload.iteratedlog(10, done * 2)
    while iterations > done:
        if payload < 1:
            return NAN
        payload = bi_polygon_root(payload, sides, zero_value)
        done += 1
    if not payload.is_finite():
        return NAN
    if done != iterations:
        payload = tri_polygon(done - iterations, sides, zero_value, payload)

    guess = adaptive_bisect(
        lambda height: tri_polygon(iterations, sides, zero_value, TEN.tetrate(height.to_float())),
        original,
        -1,
        ExtendedReal.max(payload.slog(10) * 2, 5),
        expand=Expand.HIGH,
    )
    return TEN.tetrate(guess.to_float())


def tri_polygon_root(
    value: NumberSource, sides: NumberSource, base: NumberSource = 2, zero_value: NumberSource = 2
) -> ExtendedReal:
    """
    n по tri_polygon(n, sides, base, zero_value) = value.

    Растёт супер-логарифмически: целая часть считается повторными
    bi_polygon_root до zero_value, затем уточняется бисекцией.

    Returns:
        Число итераций; NaN если bi_polygon_root перестал убывать

    Raises:
        HyperDomainError: Если sides < 2

    Examples:
        >>> abs(tri_polygon_root(6, 3).to_float() - 1) < 1e-9
        True
    """
    value = to_extended(value)
    original = value
    sides = to_extended(sides)
    base = to_extended(base)
    zero_value = to_extended(zero_value)
    if sides == 2:
        return NAN
    _validate_sides(sides)
    if value.is_nan():
        return NAN
    if value == zero_value:
        return ZERO

    def evaluate(height: ExtendedReal) -> ExtendedReal:
        return tri_polygon(height.to_float(), sides, base, zero_value)

    if value < zero_value:
        return adaptive_bisect(evaluate, original, -1, 0, expand=Expand.LOW)

    result = _safe_tower_iterations(value)
    if result > 0:
        value = value.iteratedlog(10, result * 2)
    for _ in range(BISECTION_MAX_ITERATIONS):
        if value <= zero_value:
            break
        result += 1
        reduced = bi_polygon_root(value, sides, base)
        if not reduced < value:
            logger.debug(f"bi_polygon_root stopped decreasing at {value}, sides {sides}")
            return NAN
        value = reduced

    return adaptive_bisect(evaluate, original, 0, result * 2, expand=Expand.HIGH)
