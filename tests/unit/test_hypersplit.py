"""
Тесты для Hypersplit Decomposer

Проверяет:
1. Четырёхуровневое разложение (M, E, T, P) на стандартных границах
2. Правило minnum и original_maximums
3. Отрицательные значения, значения меньше 1 и ноль
4. Отключение уровня мантиссы
5. Разрешение границ уровней (InheritArgument / InheritBoundary)
6. Отказ для сходящихся оснований
7. Отключённые уровни, пентацию, pentaexp_mult и переносы от округления
"""

import logging
import math
import sys

import pytest

from hypernum.core.domain.bounds import (
    Explicit,
    InheritArgument,
    InheritBoundary,
    pad_maximums,
    resolve_level_bounds,
    to_level_bound,
)
from hypernum.core.domain.config import HypersplitConfig
from hypernum.core.errors import ConvergentTetrationError, HyperDomainError, InvalidBaseError
from hypernum.core.math.extended_real import ExtendedReal
from hypernum.normalizers.hypersplit import hypersplit, hypersplit_with


def components(form) -> list:
    return [part.to_float() for part in form]


# =============================================================================
# ТЕСТЫ БАЗОВОГО РАЗЛОЖЕНИЯ
# =============================================================================


class TestHypersplit:
    """Тесты для hypersplit на границах по умолчанию"""

    def test_value_below_mantissa_cap(self) -> None:
        """5 возвращается как есть"""
        assert hypersplit(5) == (5, 0, 0, 0)

    def test_exponent_level(self) -> None:
        """1e5 -> (1, 5, 0, 0)"""
        assert components(hypersplit(1e5)) == pytest.approx([1, 5, 0, 0])

    def test_mantissa_and_exponent(self) -> None:
        """2357 -> (2.357, 3, 0, 0)"""
        assert components(hypersplit(2357)) == pytest.approx([2.357, 3, 0, 0])

    def test_tetration_level(self) -> None:
        """1e100 = 10^(1 * 10^2) -> (1, 2, 1, 0)"""
        assert components(hypersplit(1e100)) == pytest.approx([1, 2, 1, 0])

    def test_exponent_limit_rolls_into_tetration(self) -> None:
        """1e10 достигает границы показателя -> (1, 1, 1, 0)"""
        assert components(hypersplit(1e10)) == pytest.approx([1, 1, 1, 0])

    def test_negative_value(self) -> None:
        """-2357 -> (-2.357, 3, 0, 0)"""
        assert components(hypersplit(-2357)) == pytest.approx([-2.357, 3, 0, 0])

    def test_value_below_one(self) -> None:
        """0.05 -> (5, -2, 0, 0)"""
        assert components(hypersplit(0.05)) == pytest.approx([5, -2, 0, 0])

    def test_tiny_value_uses_negative_exponent(self) -> None:
        """1e-20 = 1 / 10^(2 * 10^1) -> (2, -1, 1, 0)"""
        assert components(hypersplit(1e-20)) == pytest.approx([2, -1, 1, 0])

    def test_zero(self) -> None:
        """0 -> (0, 0, 0, 0)"""
        assert hypersplit(0) == (0, 0, 0, 0)

    def test_result_fields(self) -> None:
        """Поля доступны по имени"""
        form = hypersplit(1e100)
        assert form.tetration.to_float() == pytest.approx(1)
        assert form.pentation == 0


# =============================================================================
# ТЕСТЫ ГРАНИЦ
# =============================================================================


class TestHypersplitBounds:
    """Тесты для maximums, original_maximums и minnum"""

    def test_original_maximum_widens_mantissa(self) -> None:
        """original_maximums=[100]: 50 возвращается как есть"""
        assert hypersplit(50, original_maximums=[100]) == (50, 0, 0, 0)

    def test_mantissa_cap_after_exponent_grows(self) -> None:
        """Как только показатель растёт, мантисса снова ограничена 10"""
        assert components(hypersplit(500, original_maximums=[100])) == pytest.approx([5, 2, 0, 0])

    def test_negative_minnum_disables_passthrough(self) -> None:
        """minnum < 0 отключает возврат как есть"""
        assert components(hypersplit(5, minnum=-1)) == pytest.approx([5, 0, 0, 0])

    def test_minnum_above_value(self) -> None:
        """Значение ниже minnum раскладывается"""
        assert components(hypersplit(0.5, minnum=1)) == pytest.approx([5, -1, 0, 0])

    def test_mantissa_removed(self) -> None:
        """maximums[0] == 0 убирает мантиссу: 1e5 -> (0, 5, 0, 0)"""
        assert components(hypersplit(1e5, maximums=[0, 10, 10])) == pytest.approx([0, 5, 0, 0])

    def test_scalar_maximum_is_padded(self) -> None:
        """Недостающие уровни повторяют последнюю границу"""
        assert hypersplit(1e100, maximums=[10]) == hypersplit(1e100)


# =============================================================================
# ТЕСТЫ ОТКЛЮЧЁННЫХ УРОВНЕЙ
# =============================================================================


class TestHypersplitDisabledLevels:
    """Тесты для раскладок с отключёнными уровнями"""

    def test_exponent_removed(self) -> None:
        """[10, 1, 10]: 1e10 = 10^10^1 -> (1, 0, 2, 0)"""
        assert components(hypersplit(1e10, maximums=[10, 1, 10])) == pytest.approx([1, 0, 2, 0])

    def test_exponent_removed_fractional_mantissa(self) -> None:
        """[10, 1, 10]: 2357 = 10^log10(2357) -> (3.372..., 0, 1, 0)"""
        result = components(hypersplit(2357, maximums=[10, 1, 10]))
        assert result == pytest.approx([math.log10(2357), 0, 1, 0])

    def test_exponent_removed_keeps_small_values(self) -> None:
        """[10, 1, 10]: 5 возвращается как есть"""
        assert hypersplit(5, maximums=[10, 1, 10]) == (5, 0, 0, 0)

    def test_exponent_and_tetration_removed(self) -> None:
        """[10, 1, 1]: 1e10 = 10^^2 -> (2, 0, 0, 1)"""
        assert components(hypersplit(1e10, maximums=[10, 1, 1])) == pytest.approx([2, 0, 0, 1])

    def test_only_pentation_left(self) -> None:
        """[0, 1, 1]: 1e10 -> пентация 1 + log10(2)"""
        result = components(hypersplit(1e10, maximums=[0, 1, 1]))
        assert result == pytest.approx([0, 0, 0, 1 + math.log10(2)])

    def test_only_pentation_left_below_base(self) -> None:
        """[0, 1, 1]: 5 -> пентация log10(5)"""
        result = components(hypersplit(5, maximums=[0, 1, 1]))
        assert result == pytest.approx([0, 0, 0, math.log10(5)])


# =============================================================================
# ТЕСТЫ ПЕНТАЦИИ И ПЕРЕНОСОВ
# =============================================================================


class TestHypersplitPentation:
    """Тесты для уровня пентации и pentaexp_mult"""

    def test_pentation_level(self) -> None:
        """10^^20 -> (2, 1, 0, 1): 10^^(2 * 10^1)"""
        assert components(hypersplit("10^^20")) == pytest.approx([2, 1, 0, 1], rel=1e-6)

    def test_pentaexp_mult_scales_pentation(self) -> None:
        """pentaexp_mult=2 удваивает итоговую пентацию"""
        result = components(hypersplit("10^^20", pentaexp_mult=2))
        assert result == pytest.approx([2, 1, 0, 2], rel=1e-6)

    def test_pentaexp_mult_with_removed_levels(self) -> None:
        """[10, 1, 1] и pentaexp_mult=3: 1e10 -> (2, 0, 0, 3)"""
        result = components(hypersplit(1e10, maximums=[10, 1, 1], pentaexp_mult=3))
        assert result == pytest.approx([2, 0, 0, 3])

    def test_pentaexp_mult_when_only_pentation_left(self) -> None:
        """[0, 1, 1] и pentaexp_mult=2: 1e10 -> 2 * (1 + log10(2))"""
        result = components(hypersplit(1e10, maximums=[0, 1, 1], pentaexp_mult=2))
        assert result == pytest.approx([0, 0, 0, 2 * (1 + math.log10(2))])

    def test_pentaexp_mult_for_values_below_one(self) -> None:
        """[0, 1, 1] и pentaexp_mult=2: slog(0.5) = -0.5 -> пентация -1"""
        result = components(hypersplit(0.5, maximums=[0, 1, 1], pentaexp_mult=2))
        assert result == pytest.approx([0, 0, 0, -1])


class TestHypersplitRollover:
    """Тесты для переноса, вызванного округлением мантиссы"""

    def test_rounding_rolls_exponent_into_tetration(self) -> None:
        """9.99999e9 при шаге 0.01: показатель 10 -> (1, 1, 1, 0)"""
        result = components(hypersplit(9.99999e9, mantissa_rounding=0.01))
        assert result == pytest.approx([1, 1, 1, 0])

    def test_rounding_rolls_tetration_into_pentation(self) -> None:
        """Тетрация округляется до 10 -> перенос в пентацию 1"""
        # 10 слоёв над 9.999995: гипермантисса ~9.99999e9 на тетрации 9
        result = components(hypersplit("(e^10)9.999995", mantissa_rounding=0.01))
        assert result == pytest.approx([1.1, 1, 0, 1])

    def test_rollover_ceiling_keeps_tetration_at_cap(self, monkeypatch, caplog) -> None:
        """Без разрешённых переносов тетрация остаётся на границе с WARNING"""
        monkeypatch.setattr(sys.modules["hypernum.normalizers.hypersplit"], "HYPERSPLIT_MAX_ROLLOVERS", 0)
        with caplog.at_level(logging.WARNING, logger="hypernum.normalizers.hypersplit"):
            result = components(hypersplit("(e^10)9.999995", mantissa_rounding=0.01))
        assert result == pytest.approx([1, 1, 10, 0])
        assert any("rollovers" in record.message for record in caplog.records)


# =============================================================================
# ТЕСТЫ РАЗРЕШЕНИЯ ГРАНИЦ
# =============================================================================


class TestLevelBounds:
    """Тесты для LevelBound и resolve_level_bounds"""

    def test_to_level_bound(self) -> None:
        """Строки наследования и числа приводятся к LevelBound"""
        assert to_level_bound("inherit_argument") is InheritArgument
        assert to_level_bound("inherit_boundary") is InheritBoundary
        assert to_level_bound(100) == Explicit(ExtendedReal.from_value(100))

    def test_pad_maximums(self) -> None:
        """Пустой список заменяется на [base]"""
        padded = pad_maximums([], ExtendedReal.from_value(10))
        assert [item.to_float() for item in padded] == [10, 10, 10]
        padded = pad_maximums([5, 7], ExtendedReal.from_value(10))
        assert [item.to_float() for item in padded] == [5, 7, 7]

    def test_none_inherits_arguments(self) -> None:
        """None -> те же границы, что в maximums"""
        maximums = pad_maximums([5, 6, 7], ExtendedReal.from_value(10))
        resolved = resolve_level_bounds(None, maximums)
        assert [item.to_float() for item in resolved] == [5, 6, 7]

    def test_mixed_inheritance(self) -> None:
        """[100, InheritArgument, InheritBoundary] -> [100, 6, 6]"""
        maximums = pad_maximums([5, 6, 7], ExtendedReal.from_value(10))
        resolved = resolve_level_bounds([100, InheritArgument, InheritBoundary], maximums)
        assert [item.to_float() for item in resolved] == [100, 6, 6]

    def test_missing_levels_inherit_boundary(self) -> None:
        """Недостающие уровни наследуют предыдущую границу"""
        maximums = pad_maximums([5, 6, 7], ExtendedReal.from_value(10))
        resolved = resolve_level_bounds([100], maximums)
        assert [item.to_float() for item in resolved] == [100, 100, 100]

    def test_first_level_cannot_inherit_boundary(self) -> None:
        """У первого уровня нет предыдущей границы"""
        maximums = pad_maximums([10], ExtendedReal.from_value(10))
        with pytest.raises(HyperDomainError):
            resolve_level_bounds([InheritBoundary], maximums)


# =============================================================================
# ТЕСТЫ ВАЛИДАЦИИ
# =============================================================================


class TestHypersplitValidation:
    """Тесты для сходящихся оснований"""

    def test_convergent_base_raises(self) -> None:
        """base = 1.2 < e^(1/e)"""
        with pytest.raises(ConvergentTetrationError):
            hypersplit(5, base=1.2)

    def test_exp_mult_makes_base_convergent(self) -> None:
        """10^(1/10) < e^(1/e)"""
        with pytest.raises(ConvergentTetrationError):
            hypersplit(5, exp_mult=10)

    def test_error_hierarchy(self) -> None:
        """ConvergentTetrationError — это InvalidBaseError"""
        assert issubclass(ConvergentTetrationError, InvalidBaseError)


# =============================================================================
# ТЕСТЫ КОНФИГУРАЦИИ
# =============================================================================


class TestHypersplitWith:
    """Тесты для hypersplit_with"""

    def test_default_config(self) -> None:
        """HypersplitConfig() совпадает с параметрами по умолчанию"""
        assert hypersplit_with(1e100, HypersplitConfig()) == hypersplit(1e100)

    def test_config_with_inheritance(self) -> None:
        """original_maximums со строками наследования"""
        config = HypersplitConfig(original_maximums=[100, "inherit_argument"])
        assert hypersplit_with(50, config) == (50, 0, 0, 0)
