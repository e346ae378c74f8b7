"""
PerformanceDistribution — статистический снапшот исторических score MM

Immutable Pydantic модель. Строится один раз на scoring epoch и заменяется
целиком на следующем epoch (никогда не мутирует на месте).

Два режима:
- Precise: полная отсортированная выборка historical_scores + производные
  статистики (mean, stddev, min, max, sample_count)
- Approximate: только summary-поля (historical_scores пуст), sample_count
  может быть любым >= 0

ИНВАРИАНТЫ:
1. min_score <= max_score
2. min_score <= mean <= max_score, если sample_count > 0
3. sample_count == len(historical_scores), если выборка присутствует
4. historical_scores отсортирована по возрастанию
"""

import statistics
from typing import Final, Iterable

from pydantic import BaseModel, Field, field_validator, model_validator

from src.core.domain.errors import InvalidInputError
from src.core.math.numerical_safeguards import is_valid_float

# Допуск на округление fmean относительно min/max
_MEAN_BOUNDS_TOL: Final[float] = 1e-9


class PerformanceDistribution(BaseModel):
    """
    Распределение исторических performance score.

    Используйте from_scores (precise) или from_summary (approximate)
    вместо прямого конструктора.
    """

    historical_scores: tuple[float, ...] = Field(
        default=(), description="Историческая выборка (по возрастанию)"
    )
    mean: float = Field(..., description="Среднее")
    stddev: float = Field(..., ge=0, description="Популяционное стандартное отклонение")
    min_score: float = Field(..., description="Минимум")
    max_score: float = Field(..., description="Максимум")
    sample_count: int = Field(..., ge=0, description="Размер выборки")
    epoch: int = Field(default=0, ge=0, description="Scoring epoch снапшота")

    model_config = {"frozen": True}

    @field_validator("historical_scores")
    @classmethod
    def validate_sorted_finite(cls, v: tuple[float, ...]) -> tuple[float, ...]:
        """Выборка конечна и отсортирована."""
        for score in v:
            if not is_valid_float(score):
                raise ValueError(f"historical score must be finite, got {score}")
        return tuple(sorted(v))

    @model_validator(mode="after")
    def validate_bounds(self) -> "PerformanceDistribution":
        """Проверка min <= mean <= max и согласованности sample_count."""
        if self.min_score > self.max_score:
            raise ValueError(
                f"min_score {self.min_score} must be <= max_score {self.max_score}"
            )

        if self.historical_scores and self.sample_count != len(self.historical_scores):
            raise ValueError(
                f"sample_count {self.sample_count} != "
                f"len(historical_scores) {len(self.historical_scores)}"
            )

        if self.sample_count > 0:
            tol = _MEAN_BOUNDS_TOL * max(1.0, abs(self.mean))
            if not (self.min_score - tol <= self.mean <= self.max_score + tol):
                raise ValueError(
                    f"mean {self.mean} outside [{self.min_score}, {self.max_score}]"
                )

        return self

    # =========================================================================
    # CONSTRUCTORS
    # =========================================================================

    @classmethod
    def from_scores(
        cls,
        scores: Iterable[float],
        epoch: int = 0,
    ) -> "PerformanceDistribution":
        """
        Построение precise-распределения из выборки.

        Args:
            scores: Исторические score
            epoch: Scoring epoch

        Returns:
            PerformanceDistribution с полной выборкой

        Raises:
            InvalidInputError: Если выборка пуста или содержит NaN/Inf
        """
        values = tuple(float(s) for s in scores)
        if not values:
            raise InvalidInputError("cannot build distribution from an empty sample set")
        for score in values:
            if not is_valid_float(score):
                raise InvalidInputError(f"historical score must be finite, got {score}")

        return cls(
            historical_scores=values,
            mean=statistics.fmean(values),
            stddev=statistics.pstdev(values),
            min_score=min(values),
            max_score=max(values),
            sample_count=len(values),
            epoch=epoch,
        )

    @classmethod
    def from_summary(
        cls,
        mean: float,
        stddev: float,
        min_score: float,
        max_score: float,
        sample_count: int = 0,
        epoch: int = 0,
    ) -> "PerformanceDistribution":
        """
        Построение summary-only распределения (approximate контекст).

        Raises:
            InvalidInputError: Если sample_count < 0 или stddev < 0
        """
        if sample_count < 0:
            raise InvalidInputError(f"sample_count must be non-negative, got {sample_count}")
        if stddev < 0:
            raise InvalidInputError(f"stddev must be non-negative, got {stddev}")

        return cls(
            mean=mean,
            stddev=stddev,
            min_score=min_score,
            max_score=max_score,
            sample_count=sample_count,
            epoch=epoch,
        )

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def has_samples(self) -> bool:
        """True если доступна полная выборка (precise контекст)."""
        return len(self.historical_scores) > 0

    @property
    def is_degenerate(self) -> bool:
        """True если min == max (корни virtual value не определены)."""
        return self.min_score == self.max_score
