"""
IC Reward — incentive-compatible вознаграждение как интеграл virtual value

    R(s) = ∫_{min}^{min(s, max)} φ_u(x) dx,   R(s) = 0 при s < min
    R'(s) = φ_u(s)  (marginal reward)

Так как φ_u >= 0, R монотонно не убывает по s при фиксированном
распределении: честный отчёт о score — оптимальная стратегия MM.

Методы интегрирования соответствуют стратегиям virtual value:
- SIMPSON: составная формула Симпсона, фиксированное чётное число
  сегментов (precise стратегия, константная стоимость)
- UNIT_STEP: сумма с единичным шагом (approximate стратегия, стоимость
  пропорциональна диапазону score)
"""

import logging
from dataclasses import dataclass
from enum import Enum

from src.core.domain.distribution import PerformanceDistribution
from src.core.domain.errors import InvalidInputError
from src.core.domain.valuation import StrategyKind
from src.core.math.integration import (
    DEFAULT_SIMPSON_SEGMENTS,
    DEFAULT_UNIT_STEP,
    simpson_composite,
    unit_step_sum,
)
from src.core.math.numerical_safeguards import validate_finite
from src.mechanism.virtual_value import VirtualValueCalculator

logger = logging.getLogger(__name__)


class IntegrationMethod(str, Enum):
    """Метод интегрирования virtual value."""

    SIMPSON = "SIMPSON"
    UNIT_STEP = "UNIT_STEP"


@dataclass(frozen=True)
class ICRewardConfig:
    """Конфигурация интегрирования IC reward."""

    simpson_segments: int = DEFAULT_SIMPSON_SEGMENTS
    unit_step: float = DEFAULT_UNIT_STEP

    def __post_init__(self) -> None:
        if self.simpson_segments <= 0 or self.simpson_segments % 2 != 0:
            raise ValueError(
                f"simpson_segments must be a positive even number, got {self.simpson_segments}"
            )
        if self.unit_step <= 0:
            raise ValueError(f"unit_step must be positive, got {self.unit_step}")


class ICRewardIntegrator:
    """Cumulative и marginal IC reward."""

    def __init__(
        self,
        calculator: VirtualValueCalculator | None = None,
        config: ICRewardConfig | None = None,
        method: IntegrationMethod | None = None,
    ):
        """
        Args:
            calculator: Калькулятор virtual value (default: precise)
            config: Конфигурация интегрирования
            method: Метод; по умолчанию выбирается по стратегии
                калькулятора (PRECISE → SIMPSON, APPROXIMATE → UNIT_STEP)
        """
        self.calculator = calculator or VirtualValueCalculator()
        self.config = config or ICRewardConfig()

        if method is None:
            if self.calculator.kind == StrategyKind.PRECISE:
                method = IntegrationMethod.SIMPSON
            else:
                method = IntegrationMethod.UNIT_STEP
        self.method = method

    def cumulative_reward(
        self, score: float, distribution: PerformanceDistribution
    ) -> float:
        """R(score): интеграл φ_u от min_score до min(score, max_score).

        Raises:
            InvalidInputError: Если score NaN/Inf
        """
        validate_finite(score, "score", InvalidInputError)

        if score < distribution.min_score:
            return 0.0

        lower = distribution.min_score
        upper = min(score, distribution.max_score)

        def integrand(x: float) -> float:
            return self.calculator.upper_value(x, distribution)

        if self.method == IntegrationMethod.SIMPSON:
            reward = simpson_composite(integrand, lower, upper, self.config.simpson_segments)
        else:
            reward = unit_step_sum(integrand, lower, upper, self.config.unit_step)

        reward = max(0.0, reward)
        logger.debug(
            "ic reward method=%s score=%.6f range=[%.6f, %.6f] reward=%.6f",
            self.method.value,
            score,
            lower,
            upper,
            reward,
        )
        return reward

    def marginal_reward(
        self, score: float, distribution: PerformanceDistribution
    ) -> float:
        """R'(score) = φ_u(score)."""
        validate_finite(score, "score", InvalidInputError)
        return self.calculator.upper_value(score, distribution)
