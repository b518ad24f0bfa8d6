"""
JSON Schema Contract Validators

Валидация сериализованных конфигураций нормализаторов согласно формальным
JSON Schema контрактам. Использует библиотеку jsonschema (Draft 2020-12).
После успешной валидации данные разбираются в Pydantic модели.

Схемы (hypernum/core/contracts/schema/):
- scientific_config.json
- hyperscientific_config.json
- hypersplit_config.json
"""

import json
from pathlib import Path
from typing import Any, Dict, Union

import jsonschema
from jsonschema import Draft202012Validator

from hypernum.core.domain.config import (
    HyperscientificConfig,
    HypersplitConfig,
    ScientificConfig,
)

# Сырые данные контракта: dict или JSON строка
ContractSource = Union[Dict[str, Any], str]


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Схемы поставляются вместе с пакетом в contracts/schema/.
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'hypersplit_config')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если файл не является валидной JSON Schema
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        # Валидируем саму схему (meta-validation)
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}") from e

        self._schemas[schema_name] = schema
        return schema


# Глобальный экземпляр загрузчика
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Базовый класс для валидаторов контрактов.

    Инкапсулирует логику валидации данных против JSON Schema.
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Валидация данных против схемы.

        Raises:
            jsonschema.ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        """Проверка валидности данных без exception."""
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]):
        """Итератор по всем ошибкам валидации."""
        return self.validator.iter_errors(data)


class ScientificConfigValidator(ContractValidator):
    """Валидатор для scientific_config контракта."""

    def __init__(self):
        super().__init__("scientific_config")


class HyperscientificConfigValidator(ContractValidator):
    """Валидатор для hyperscientific_config контракта."""

    def __init__(self):
        super().__init__("hyperscientific_config")


class HypersplitConfigValidator(ContractValidator):
    """Валидатор для hypersplit_config контракта."""

    def __init__(self):
        super().__init__("hypersplit_config")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def _as_dict(data: ContractSource) -> Dict[str, Any]:
    if isinstance(data, str):
        return json.loads(data)
    return data


def load_scientific_config(data: ContractSource) -> ScientificConfig:
    """
    Валидация и разбор scientific_config.

    Args:
        data: dict или JSON строка

    Returns:
        ScientificConfig

    Raises:
        jsonschema.ValidationError: Если данные не соответствуют схеме
        pydantic.ValidationError: Если значения недопустимы для модели
    """
    payload = _as_dict(data)
    ScientificConfigValidator().validate(payload)
    return ScientificConfig(**payload)


def load_hyperscientific_config(data: ContractSource) -> HyperscientificConfig:
    """Валидация и разбор hyperscientific_config."""
    payload = _as_dict(data)
    HyperscientificConfigValidator().validate(payload)
    return HyperscientificConfig(**payload)


def load_hypersplit_config(data: ContractSource) -> HypersplitConfig:
    """
    Валидация и разбор hypersplit_config.

    Элементы original_maximums могут быть числами, "inherit_argument" или
    "inherit_boundary".
    """
    payload = _as_dict(data)
    HypersplitConfigValidator().validate(payload)
    return HypersplitConfig(**payload)
