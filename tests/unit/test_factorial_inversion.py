"""
Тесты для Adaptive Bisection и семейства повторного факториала

Проверяет:
1. adaptive_bisect: расширение интервала, точное попадание, потолок итераций
2. iterated_factorial: целые и дробные итерации, неподвижные точки
3. inverse_factorial: обращение, граничные значения, область определения
4. factorial_slog: высота башни факториалов
5. factorial_scientifify / factorial_hyperscientifify
"""

import logging
import math

import pytest

from hypernum.core.errors import HyperDomainError, UnsupportedRegionError
from hypernum.inversion.bisection import Expand, adaptive_bisect
from hypernum.inversion.factorial import (
    factorial_slog,
    inverse_factorial,
    iterated_factorial,
)
from hypernum.normalizers.factorial_forms import (
    factorial_hyperscientifify,
    factorial_scientifify,
)

# =============================================================================
# ТЕСТЫ ADAPTIVE BISECTION
# =============================================================================


class TestAdaptiveBisect:
    """Тесты для adaptive_bisect"""

    def test_bracketed_interval(self) -> None:
        """Без расширения: корень из 2 на [0, 2]"""
        root = adaptive_bisect(lambda x: x * x, 2, 0, 2)
        assert root.to_float() == pytest.approx(math.sqrt(2), rel=1e-12)

    def test_expand_high(self) -> None:
        """Верхний конец удваивается, пока f не превысит target"""
        root = adaptive_bisect(lambda x: x * x, 2, 0, 1, expand=Expand.HIGH)
        assert root.to_float() == pytest.approx(math.sqrt(2), rel=1e-12)

    def test_expand_low(self) -> None:
        """Нижний конец удваивается вниз: x^3 = -8"""
        root = adaptive_bisect(lambda x: x * x * x, -8, 0, 1, expand=Expand.LOW)
        assert root.to_float() == pytest.approx(-2, rel=1e-12)

    def test_exact_hit_returns_immediately(self) -> None:
        """f(guess) == target возвращается без дальнейших итераций"""
        calls = []

        def evaluate(x):
            calls.append(x)
            return x

        assert adaptive_bisect(evaluate, 0.5, 0, 1) == 0.5
        assert len(calls) == 1

    def test_nan_is_treated_as_too_high(self) -> None:
        """NaN сдвигает верхний конец"""

        def evaluate(x):
            return x if x < 3 else float("nan")

        root = adaptive_bisect(evaluate, 1.5, 0, 8)
        assert root.to_float() == pytest.approx(1.5, rel=1e-12)

    def test_iteration_ceiling_logs_warning(self, caplog) -> None:
        """При исчерпании итераций пишется WARNING и возвращается оценка"""
        with caplog.at_level(logging.WARNING, logger="hypernum.inversion.bisection"):
            estimate = adaptive_bisect(lambda x: x, 0.3, 0, 1, max_iterations=3)
        assert 0 <= estimate.to_float() <= 1
        assert any("did not converge" in record.message for record in caplog.records)


# =============================================================================
# ТЕСТЫ ITERATED FACTORIAL
# =============================================================================


class TestIteratedFactorial:
    """Тесты для iterated_factorial"""

    def test_single_factorial(self) -> None:
        """5! = 120"""
        assert iterated_factorial(5) == 120

    def test_double_factorial(self) -> None:
        """3!! = 6! = 720"""
        assert iterated_factorial(3, 2) == 720

    def test_zero_iterations(self) -> None:
        """0 итераций возвращают аргумент"""
        assert iterated_factorial(3, 0) == 3

    @pytest.mark.parametrize("fixed_point", [1, 2])
    def test_fixed_points(self, fixed_point) -> None:
        """1 и 2 — неподвижные точки"""
        assert iterated_factorial(fixed_point, 50) == fixed_point

    def test_fractional_iterations_interpolate(self) -> None:
        """3 с половиной факториала лежит между 3 и 6"""
        half = iterated_factorial(3, 0.5).to_float()
        assert half == pytest.approx(3 * math.sqrt(2))
        assert 3 < half < 6

    def test_fractional_below_local_minimum(self) -> None:
        """Дробные итерации ниже локального минимума — NaN"""
        assert iterated_factorial(0.3, 1.5).is_nan()

    def test_negative_iterations_invert(self) -> None:
        """Отрицательное число итераций — обратный факториал"""
        assert iterated_factorial(120, -1).to_float() == pytest.approx(5, rel=1e-9)

    def test_large_tower(self) -> None:
        """Много итераций не переполняются"""
        result = iterated_factorial(3, 5)
        assert result.is_finite()
        assert result.layer >= 3


# =============================================================================
# ТЕСТЫ INVERSE FACTORIAL
# =============================================================================


class TestInverseFactorial:
    """Тесты для inverse_factorial"""

    def test_single_inverse(self) -> None:
        """120 = 5!"""
        assert inverse_factorial(120).to_float() == pytest.approx(5, rel=1e-9)

    def test_double_inverse(self) -> None:
        """720 = 3!!"""
        assert inverse_factorial(720, 2).to_float() == pytest.approx(3, rel=1e-9)

    def test_non_integer_result(self) -> None:
        """Обращение проверяется прямым факториалом"""
        result = inverse_factorial(1000)
        assert iterated_factorial(result).to_float() == pytest.approx(1000, rel=1e-9)

    def test_large_value(self) -> None:
        """Значения на первом слое обращаются"""
        result = inverse_factorial("1e1000")
        assert iterated_factorial(result).eq_tolerance("1e1000", 1e-9)
        assert 400 < result.to_float() < 500

    @pytest.mark.parametrize("value", [1, 2])
    def test_fixed_points(self, value) -> None:
        """1 и 2 возвращаются как есть"""
        assert inverse_factorial(value) == value

    def test_sentinels(self) -> None:
        """NaN -> NaN, inf -> inf"""
        assert inverse_factorial(float("nan")).is_nan()
        assert inverse_factorial(float("inf")) == float("inf")

    def test_below_local_minimum_raises(self) -> None:
        """Ниже минимума gamma обращение не поддерживается"""
        with pytest.raises(UnsupportedRegionError):
            inverse_factorial(0.5)

    def test_unsupported_region_is_domain_error(self) -> None:
        """UnsupportedRegionError ловится как HyperDomainError"""
        with pytest.raises(HyperDomainError):
            inverse_factorial(0.5)


# =============================================================================
# ТЕСТЫ FACTORIAL SLOG
# =============================================================================


class TestFactorialSlog:
    """Тесты для factorial_slog"""

    def test_integer_height(self) -> None:
        """720 = 3!! -> 2"""
        assert factorial_slog(720, 3).to_float() == pytest.approx(2, abs=1e-9)

    def test_value_equal_to_base(self) -> None:
        """factorial_slog(base) = 0"""
        assert factorial_slog(3, 3) == 0

    def test_value_below_base(self) -> None:
        """Ниже основания высота отрицательна"""
        height = factorial_slog(2.5, 3).to_float()
        assert -1 < height < 0

    def test_two_and_below(self) -> None:
        """2 -> -inf, ниже 2 -> NaN"""
        assert factorial_slog(2, 3) == float("-inf")
        assert factorial_slog(1.5, 3).is_nan()

    @pytest.mark.parametrize("base", [2, 1.5, 0])
    def test_base_not_above_two_raises(self, base) -> None:
        """Основание <= 2 отвергается"""
        with pytest.raises(HyperDomainError):
            factorial_slog(100, base)


# =============================================================================
# ТЕСТЫ ФАКТОРИАЛЬНЫХ ФОРМ
# =============================================================================


class TestFactorialScientifify:
    """Тесты для factorial_scientifify"""

    def test_exact_factorial(self) -> None:
        """120 = 1 * 5!"""
        mantissa, exponent = factorial_scientifify(120)
        assert exponent == 5
        assert mantissa.to_float() == pytest.approx(1)

    def test_mantissa_between_factorials(self) -> None:
        """1000 = m * 6!, m в [1, 7)"""
        mantissa, exponent = factorial_scientifify(1000)
        assert exponent == 6
        assert mantissa.to_float() == pytest.approx(1000 / 720)

    def test_value_below_one(self) -> None:
        """0.5 = 1 / 2!"""
        mantissa, exponent = factorial_scientifify(0.5)
        assert exponent == -2
        assert mantissa.to_float() == pytest.approx(1)

    def test_negative_value(self) -> None:
        """-120 -> (-1, 5)"""
        mantissa, exponent = factorial_scientifify(-120)
        assert exponent == 5
        assert mantissa.to_float() == pytest.approx(-1)

    def test_sentinels(self) -> None:
        """0 -> (0, 0), 1 -> (1, 1), inf -> (inf, inf)"""
        assert factorial_scientifify(0) == (0, 0)
        assert factorial_scientifify(1) == (1, 1)
        assert factorial_scientifify(float("inf")) == (float("inf"), float("inf"))
        mantissa, exponent = factorial_scientifify(float("nan"))
        assert mantissa.is_nan() and exponent.is_nan()


class TestFactorialHyperscientifify:
    """Тесты для factorial_hyperscientifify"""

    def test_two_factorials(self) -> None:
        """1e10 = m!! с m в [3, 6)"""
        mantissa, exponent = factorial_hyperscientifify(1e10)
        assert exponent == 2
        assert 3 <= mantissa.to_float() < 6
        assert iterated_factorial(mantissa, 2).to_float() == pytest.approx(1e10, rel=1e-9)

    def test_exact_tower(self) -> None:
        """720 = 3!! = 6!: допустимы обе записи на границе интервала"""
        mantissa, exponent = factorial_hyperscientifify(720)
        assert exponent in (1, 2)
        restored = iterated_factorial(mantissa, exponent.to_float())
        assert restored.to_float() == pytest.approx(720, rel=1e-9)

    def test_small_values_unchanged(self) -> None:
        """Значения <= 2 и limit <= 2 возвращаются как (value, 0)"""
        assert factorial_hyperscientifify(2) == (2, 0)
        assert factorial_hyperscientifify(50, limit=2) == (50, 0)

    def test_infinity(self) -> None:
        """inf -> (inf, inf)"""
        assert factorial_hyperscientifify(float("inf")) == (float("inf"), float("inf"))
