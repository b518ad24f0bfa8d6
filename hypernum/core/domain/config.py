"""
Normalizer Configurations — Модели конфигурации нормализаторов

Immutable Pydantic модели параметров scientifify/hyperscientifify/hypersplit.
Все числовые поля приводятся к ExtendedReal (допускаются int, float и строки
вида "1e400" для значений за пределами double).
Совместимы с JSON Schema контрактами (contracts/schema/*.json).
"""

from typing import Any, Callable, Optional, Union

from pydantic import BaseModel, Field, field_validator

from hypernum.core.domain.bounds import LevelBound, to_level_bound
from hypernum.core.math.engineering import EngineeringSet
from hypernum.core.math.extended_real import ExtendedReal
from hypernum.core.math.numerical_safeguards import to_extended

# Правило округления в конфигурации: шаг или функция мантиссы
RoundingRule = Union[ExtendedReal, Callable[[ExtendedReal], Any]]


def _coerce_rounding(v: Any) -> RoundingRule:
    if callable(v) and not isinstance(v, ExtendedReal):
        return v
    return to_extended(v)


# =============================================================================
# SCIENTIFIC
# =============================================================================


class ScientificConfig(BaseModel):
    """
    Параметры scientifify.

    Пример:
        ScientificConfig(base=10, engineerings=3) даёт инженерную нотацию.
    """

    base: ExtendedReal = Field(default=ExtendedReal.from_number(10.0), description="Основание")
    rounding: RoundingRule = Field(
        default=ExtendedReal.from_number(0.0), description="Шаг округления мантиссы (0 = без округления)"
    )
    mantissa_power: ExtendedReal = Field(
        default=ExtendedReal.from_number(0.0), description="Сдвиг нижней границы мантиссы"
    )
    engineerings: EngineeringSet = Field(
        default_factory=lambda: EngineeringSet.of(1), description="Допустимые шаги показателя"
    )
    exp_multiplier: ExtendedReal = Field(
        default=ExtendedReal.from_number(1.0), description="Множитель итогового показателя"
    )

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @field_validator("base", "mantissa_power", "exp_multiplier", mode="before")
    @classmethod
    def coerce_number(cls, v: Any) -> ExtendedReal:
        """Приведение числовых полей к ExtendedReal"""
        return to_extended(v)

    @field_validator("rounding", mode="before")
    @classmethod
    def coerce_rounding(cls, v: Any) -> RoundingRule:
        return _coerce_rounding(v)

    @field_validator("engineerings", mode="before")
    @classmethod
    def coerce_engineerings(cls, v: Any) -> EngineeringSet:
        return EngineeringSet.of(v)


# =============================================================================
# HYPERSCIENTIFIC
# =============================================================================


class HyperscientificConfig(BaseModel):
    """Параметры hyperscientifify."""

    base: ExtendedReal = Field(default=ExtendedReal.from_number(10.0), description="Основание башни")
    rounding: RoundingRule = Field(
        default=ExtendedReal.from_number(0.0), description="Шаг округления гипермантиссы"
    )
    hypermantissa_power: ExtendedReal = Field(
        default=ExtendedReal.from_number(0.0), description="Сдвиг нижней границы гипермантиссы"
    )
    engineerings: EngineeringSet = Field(
        default_factory=lambda: EngineeringSet.of(1), description="Допустимые шаги гиперпоказателя"
    )
    exp_multiplier: ExtendedReal = Field(
        default=ExtendedReal.from_number(1.0), description="Множитель каждого логарифма"
    )
    hyperexp_multiplier: ExtendedReal = Field(
        default=ExtendedReal.from_number(1.0), description="Множитель итогового гиперпоказателя"
    )

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @field_validator(
        "base", "hypermantissa_power", "exp_multiplier", "hyperexp_multiplier", mode="before"
    )
    @classmethod
    def coerce_number(cls, v: Any) -> ExtendedReal:
        return to_extended(v)

    @field_validator("rounding", mode="before")
    @classmethod
    def coerce_rounding(cls, v: Any) -> RoundingRule:
        return _coerce_rounding(v)

    @field_validator("engineerings", mode="before")
    @classmethod
    def coerce_engineerings(cls, v: Any) -> EngineeringSet:
        return EngineeringSet.of(v)


# =============================================================================
# HYPERSPLIT
# =============================================================================


class HypersplitConfig(BaseModel):
    """
    Параметры hypersplit.

    maximums: границы мантиссы, показателя и тетрации (при достижении
    происходит перенос на следующий уровень).
    original_maximums: границы, действующие пока следующий уровень равен 0.
    """

    base: ExtendedReal = Field(default=ExtendedReal.from_number(10.0), description="Основание")
    maximums: tuple[ExtendedReal, ...] = Field(
        default=(
            ExtendedReal.from_number(10.0),
            ExtendedReal.from_number(10.0),
            ExtendedReal.from_number(10.0),
        ),
        max_length=3,
        description="Границы уровней (мантисса, показатель, тетрация)",
    )
    original_maximums: Optional[tuple[LevelBound, ...]] = Field(
        default=None, max_length=3, description="Границы уровней при нулевом следующем уровне"
    )
    minnum: ExtendedReal = Field(
        default=ExtendedReal.from_number(1.0), description="Нижний порог возврата значения как есть"
    )
    mantissa_rounding: RoundingRule = Field(
        default=ExtendedReal.from_number(0.0), description="Шаг округления мантиссы"
    )
    engineerings: EngineeringSet = Field(default_factory=lambda: EngineeringSet.of(1))
    hyperengineerings: EngineeringSet = Field(default_factory=lambda: EngineeringSet.of(1))
    pentaengineerings: EngineeringSet = Field(default_factory=lambda: EngineeringSet.of(1))
    exp_mult: ExtendedReal = Field(default=ExtendedReal.from_number(1.0))
    hyperexp_mult: ExtendedReal = Field(default=ExtendedReal.from_number(1.0))
    pentaexp_mult: ExtendedReal = Field(default=ExtendedReal.from_number(1.0))

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @field_validator("base", "minnum", "exp_mult", "hyperexp_mult", "pentaexp_mult", mode="before")
    @classmethod
    def coerce_number(cls, v: Any) -> ExtendedReal:
        return to_extended(v)

    @field_validator("maximums", mode="before")
    @classmethod
    def coerce_maximums(cls, v: Any) -> tuple[ExtendedReal, ...]:
        """Скаляр превращается в одноуровневый список"""
        if isinstance(v, (ExtendedReal, int, float, str)):
            v = [v]
        return tuple(to_extended(item) for item in v)

    @field_validator("original_maximums", mode="before")
    @classmethod
    def coerce_original_maximums(cls, v: Any) -> Optional[tuple[LevelBound, ...]]:
        if v is None:
            return None
        if isinstance(v, (ExtendedReal, int, float)):
            v = [v]
        return tuple(to_level_bound(item) for item in v)

    @field_validator("mantissa_rounding", mode="before")
    @classmethod
    def coerce_rounding(cls, v: Any) -> RoundingRule:
        return _coerce_rounding(v)

    @field_validator("engineerings", "hyperengineerings", "pentaengineerings", mode="before")
    @classmethod
    def coerce_engineerings(cls, v: Any) -> EngineeringSet:
        return EngineeringSet.of(v)
