"""
JSON Schema Contract Validators

Модуль для валидации JSON данных, отдаваемых коллабораторам (settlement,
ledger наград/штрафов, alerting), согласно формальным JSON Schema контрактам.
Использует библиотеку jsonschema (Draft 2020-12).

Схемы (schema/ рядом с модулем):
- routing_decision.json
- crisis_detection_result.json
- virtual_value_breakdown.json
- tier_boundaries.json
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Type

import jsonschema
from jsonschema import Draft202012Validator, ValidationError
from pydantic import BaseModel

from src.core.domain import (
    CrisisDetectionResult,
    RoutingDecision,
    TierBoundaries,
    VirtualValueBreakdown,
)


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

    @property
    def schema_dir(self) -> Path:
        return self._schema_dir

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'routing_decision')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если схема не проходит meta-validation
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}") from e

        self._schemas[schema_name] = schema
        return schema


# Глобальный экземпляр загрузчика
_SCHEMA_LOADER = SchemaLoader()


# Контракт каждой доменной модели, уходящей коллабораторам
MODEL_SCHEMAS: Mapping[Type[BaseModel], str] = {
    RoutingDecision: "routing_decision",  # settlement/execution
    CrisisDetectionResult: "crisis_detection_result",  # alerting/UI
    VirtualValueBreakdown: "virtual_value_breakdown",  # ledger наград/штрафов
    TierBoundaries: "tier_boundaries",  # storage
}


# =============================================================================
# CONTRACT VALIDATOR
# =============================================================================


class ContractValidator:
    """
    Валидатор одного контракта (схема выбирается по имени).

    Example:
        >>> ContractValidator("routing_decision").is_valid({"tier": "KING"})
        False
    """

    def __init__(self, schema_name: str, loader: SchemaLoader | None = None):
        self.schema_name = schema_name
        self.schema = (loader or _SCHEMA_LOADER).load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    @classmethod
    def for_model(cls, model_type: Type[BaseModel]) -> "ContractValidator":
        """
        Raises:
            KeyError: Если для модели нет контракта
        """
        if model_type not in MODEL_SCHEMAS:
            raise KeyError(f"No contract registered for {model_type.__name__}")
        return cls(MODEL_SCHEMAS[model_type])

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]) -> Iterator[ValidationError]:
        """Итератор по всем ошибкам валидации."""
        return self.validator.iter_errors(data)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_contract(schema_name: str, data: Dict[str, Any]) -> None:
    """
    Raises:
        FileNotFoundError: Если схемы с таким именем нет
        ValidationError: Если данные не соответствуют схеме
    """
    ContractValidator(schema_name).validate(data)


def validate_model(model: BaseModel) -> None:
    """Валидация JSON-представления модели по её контракту.

    Raises:
        KeyError: Если для типа модели нет контракта
        ValidationError: Если данные не соответствуют схеме
    """
    ContractValidator.for_model(type(model)).validate(model.model_dump(mode="json"))
