"""
Contract Validation Module

Валидация JSON контрактов, которые ядро отдаёт коллабораторам.
"""

from .validators import (
    MODEL_SCHEMAS,
    ContractValidator,
    SchemaLoader,
    validate_contract,
    validate_model,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    # Registry
    "MODEL_SCHEMAS",
    # Functions
    "validate_contract",
    "validate_model",
]
