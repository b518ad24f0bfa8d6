"""
Tests for Normalizer Configurations and JSON Schema Contracts

Комплексное тестирование конфигураций нормализаторов:
- Валидность самих схем
- Валидация правильных данных (числа и строки чисел)
- Детекция лишних полей и нарушений типов
- Разбор в Pydantic модели (включая LevelBound строки)
- Неизменяемость моделей
"""

import json

import pytest
from jsonschema import ValidationError
from pydantic import ValidationError as ModelValidationError

from hypernum.core.contracts import (
    HyperscientificConfigValidator,
    HypersplitConfigValidator,
    SchemaLoader,
    ScientificConfigValidator,
    load_hyperscientific_config,
    load_hypersplit_config,
    load_scientific_config,
)
from hypernum.core.domain.bounds import Explicit, InheritArgument, InheritBoundary
from hypernum.core.domain.config import (
    HyperscientificConfig,
    HypersplitConfig,
    ScientificConfig,
)
from hypernum.core.errors import EmptyEngineeringSetError


# =============================================================================
# FIXTURES - VALID DATA SAMPLES
# =============================================================================


@pytest.fixture
def valid_scientific_config():
    """Валидный scientific_config для тестирования."""
    return {
        "base": 10,
        "rounding": 0.01,
        "mantissa_power": 0,
        "engineerings": [3],
        "exp_multiplier": 1,
    }


@pytest.fixture
def valid_hyperscientific_config():
    """Валидный hyperscientific_config для тестирования."""
    return {
        "base": "10",
        "hypermantissa_power": 1,
        "engineerings": 1,
        "exp_multiplier": 1,
        "hyperexp_multiplier": 2,
    }


@pytest.fixture
def valid_hypersplit_config():
    """Валидный hypersplit_config для тестирования."""
    return {
        "base": 10,
        "maximums": [10, 10, 10],
        "original_maximums": [100, "inherit_argument", "inherit_boundary"],
        "minnum": 1,
        "mantissa_rounding": 0,
        "engineerings": [5, 2],
        "hyperengineerings": 1,
        "pentaengineerings": 1,
        "exp_mult": 1,
        "hyperexp_mult": 1,
        "pentaexp_mult": 1,
    }


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class TestSchemaLoader:
    """Тесты для SchemaLoader"""

    @pytest.mark.parametrize(
        "schema_name", ["scientific_config", "hyperscientific_config", "hypersplit_config"]
    )
    def test_schemas_are_valid(self, schema_name) -> None:
        """Все схемы проходят meta-validation"""
        schema = SchemaLoader().load_schema(schema_name)
        assert schema["type"] == "object"
        assert schema["additionalProperties"] is False

    def test_schema_is_cached(self) -> None:
        """Повторная загрузка возвращает тот же объект"""
        loader = SchemaLoader()
        assert loader.load_schema("hypersplit_config") is loader.load_schema("hypersplit_config")

    def test_missing_schema(self) -> None:
        """Отсутствующая схема — FileNotFoundError"""
        with pytest.raises(FileNotFoundError):
            SchemaLoader().load_schema("nonexistent")

    def test_missing_directory(self, tmp_path) -> None:
        """Отсутствующая директория — RuntimeError"""
        with pytest.raises(RuntimeError):
            SchemaLoader(tmp_path / "missing")


# =============================================================================
# SCIENTIFIC CONFIG
# =============================================================================


class TestScientificConfigContract:
    """Тесты для scientific_config"""

    def test_valid_data(self, valid_scientific_config) -> None:
        """Валидные данные проходят схему"""
        validator = ScientificConfigValidator()
        validator.validate(valid_scientific_config)
        assert validator.is_valid(valid_scientific_config)

    def test_empty_object_is_valid(self) -> None:
        """Все поля необязательны"""
        assert ScientificConfigValidator().is_valid({})

    def test_numeric_strings_accepted(self) -> None:
        """Строки чисел за пределами double допускаются"""
        assert ScientificConfigValidator().is_valid({"base": "1e400", "mantissa_power": "-2.5"})

    def test_unknown_field_rejected(self, valid_scientific_config) -> None:
        """additionalProperties: false"""
        valid_scientific_config["unknown"] = 1
        with pytest.raises(ValidationError):
            ScientificConfigValidator().validate(valid_scientific_config)

    def test_wrong_type_rejected(self) -> None:
        """Нечисловая строка отвергается"""
        errors = list(ScientificConfigValidator().iter_errors({"base": "ten"}))
        assert len(errors) > 0

    def test_empty_engineerings_rejected(self) -> None:
        """Пустой набор отвергается схемой"""
        assert not ScientificConfigValidator().is_valid({"engineerings": []})

    def test_load_from_dict(self, valid_scientific_config) -> None:
        """Разбор в ScientificConfig"""
        config = load_scientific_config(valid_scientific_config)
        assert isinstance(config, ScientificConfig)
        assert config.base == 10
        assert config.rounding == 0.01
        assert config.engineerings.smallest == 3

    def test_load_from_json_string(self, valid_scientific_config) -> None:
        """Разбор из JSON строки"""
        config = load_scientific_config(json.dumps(valid_scientific_config))
        assert config.exp_multiplier == 1

    def test_load_rejects_invalid(self) -> None:
        """load_* поднимает jsonschema.ValidationError"""
        with pytest.raises(ValidationError):
            load_scientific_config({"base": [10]})


# =============================================================================
# HYPERSCIENTIFIC CONFIG
# =============================================================================


class TestHyperscientificConfigContract:
    """Тесты для hyperscientific_config"""

    def test_valid_data(self, valid_hyperscientific_config) -> None:
        """Валидные данные проходят схему"""
        HyperscientificConfigValidator().validate(valid_hyperscientific_config)

    def test_load(self, valid_hyperscientific_config) -> None:
        """Разбор в HyperscientificConfig"""
        config = load_hyperscientific_config(valid_hyperscientific_config)
        assert isinstance(config, HyperscientificConfig)
        assert config.base == 10
        assert config.hypermantissa_power == 1
        assert config.hyperexp_multiplier == 2

    def test_scientific_field_rejected(self) -> None:
        """mantissa_power не входит в hyperscientific_config"""
        assert not HyperscientificConfigValidator().is_valid({"mantissa_power": 1})


# =============================================================================
# HYPERSPLIT CONFIG
# =============================================================================


class TestHypersplitConfigContract:
    """Тесты для hypersplit_config"""

    def test_valid_data(self, valid_hypersplit_config) -> None:
        """Валидные данные проходят схему"""
        HypersplitConfigValidator().validate(valid_hypersplit_config)

    def test_null_original_maximums(self) -> None:
        """original_maximums может быть null"""
        assert HypersplitConfigValidator().is_valid({"original_maximums": None})

    def test_too_many_maximums_rejected(self) -> None:
        """Не больше трёх уровней"""
        assert not HypersplitConfigValidator().is_valid({"maximums": [10, 10, 10, 10]})

    def test_unknown_inheritance_rejected(self) -> None:
        """Только inherit_argument и inherit_boundary"""
        assert not HypersplitConfigValidator().is_valid({"original_maximums": ["inherit_nothing"]})

    def test_load_resolves_level_bounds(self, valid_hypersplit_config) -> None:
        """Строки наследования разбираются в LevelBound"""
        config = load_hypersplit_config(valid_hypersplit_config)
        assert isinstance(config, HypersplitConfig)
        first, second, third = config.original_maximums
        assert isinstance(first, Explicit)
        assert first.value == 100
        assert second is InheritArgument
        assert third is InheritBoundary

    def test_engineering_sets_are_parsed(self, valid_hypersplit_config) -> None:
        """Инженерные наборы сортируются по убыванию"""
        config = load_hypersplit_config(valid_hypersplit_config)
        assert [step.to_float() for step in config.engineerings.steps] == [5, 2]


# =============================================================================
# PYDANTIC MODELS
# =============================================================================


class TestConfigModels:
    """Тесты для Pydantic моделей конфигурации"""

    def test_defaults(self) -> None:
        """Значения по умолчанию"""
        config = HypersplitConfig()
        assert [item.to_float() for item in config.maximums] == [10, 10, 10]
        assert config.original_maximums is None
        assert config.minnum == 1

    def test_scalar_maximum(self) -> None:
        """Скалярная граница превращается в список"""
        config = HypersplitConfig(maximums=100)
        assert [item.to_float() for item in config.maximums] == [100]

    def test_callable_rounding_is_kept(self) -> None:
        """Функция округления сохраняется как есть"""

        def step(mantissa):
            return 0.1

        assert ScientificConfig(rounding=step).rounding is step

    def test_frozen(self) -> None:
        """Модели неизменяемы"""
        config = ScientificConfig()
        with pytest.raises(ModelValidationError):
            config.base = 2

    def test_empty_engineerings_rejected(self) -> None:
        """Пустой набор отвергается моделью"""
        with pytest.raises((EmptyEngineeringSetError, ModelValidationError)):
            ScientificConfig(engineerings=[])

    def test_too_many_levels_rejected(self) -> None:
        """maximums длиннее трёх уровней отвергается"""
        with pytest.raises(ModelValidationError):
            HypersplitConfig(maximums=[10, 10, 10, 10])
