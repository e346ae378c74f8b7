"""
Tier Boundaries — корни virtual value и аллокация tier

Границы tiers — корни upper- и lower-side virtual value, найденные
бисекцией на [min_score, max_score] с фиксированным бюджетом 100 итераций
и досрочным выходом при |φ(mid)| < tolerance.

Правила сужения:
- upper: φ_u(mid) > 0 → low = mid, иначе high = mid
- lower: φ_l(mid) < 0 → high = mid, иначе low = mid

Аллокация:
    score >= upper_root → MARTYR
    score <= lower_root → SOVEREIGN
    иначе              → REJECT (no-trade gap)
Совпадения с границами включительные: оба разрешаются в назначение,
никогда в отказ.
"""

import logging
from dataclasses import dataclass

from src.core.domain.distribution import PerformanceDistribution
from src.core.domain.errors import BoundaryUndefinedError, InvalidInputError
from src.core.domain.tiers import TierBoundaries, TierDecision
from src.core.domain.valuation import StrategyKind
from src.core.math.numerical_safeguards import validate_finite
from src.core.math.root_finding import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_TOLERANCE,
    BisectionResult,
    bisect_fixed,
)
from src.mechanism.virtual_value import VirtualValueCalculator, VirtualValueStrategy

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class TierSolverConfig:
    """Конфигурация поиска корней."""

    max_iterations: int = DEFAULT_MAX_ITERATIONS
    tolerance: float = DEFAULT_TOLERANCE

    def __post_init__(self) -> None:
        if self.max_iterations <= 0:
            raise ValueError(f"max_iterations must be positive, got {self.max_iterations}")
        if self.tolerance < 0:
            raise ValueError(f"tolerance must be non-negative, got {self.tolerance}")


# =============================================================================
# SOLVER
# =============================================================================


class TierBoundarySolver:
    """Поиск корней virtual value и построение TierBoundaries."""

    def __init__(
        self,
        calculator: VirtualValueCalculator | None = None,
        config: TierSolverConfig | None = None,
    ):
        self.calculator = calculator or VirtualValueCalculator()
        self.config = config or TierSolverConfig()

    def solve(self, distribution: PerformanceDistribution) -> TierBoundaries:
        """Вычисление границ tiers для распределения.

        Args:
            distribution: Снапшот распределения текущего epoch

        Returns:
            TierBoundaries с epoch распределения

        Raises:
            InvalidInputError: Если выборка пуста (корни не определены)
            BoundaryUndefinedError: Если min_score == max_score
        """
        self._check_solvable(distribution)

        upper = self.find_upper_root(distribution)
        lower = self.find_lower_root(distribution)

        boundaries = TierBoundaries.from_roots(
            upper_root=upper.root,
            lower_root=lower.root,
            epoch=distribution.epoch,
            is_valid=True,
            martyr_minimum=max(distribution.min_score, upper.root),
            sovereign_maximum=min(distribution.max_score, lower.root),
        )

        logger.info(
            "tier boundaries epoch=%d upper=%.6f (iter=%d, converged=%s) "
            "lower=%.6f (iter=%d, converged=%s) gap=%.6f",
            boundaries.epoch,
            upper.root,
            upper.iterations,
            upper.converged,
            lower.root,
            lower.iterations,
            lower.converged,
            boundaries.gap_width,
        )
        return boundaries

    def find_upper_root(self, distribution: PerformanceDistribution) -> BisectionResult:
        """Корень φ_u: сужение вверх, пока значение положительно."""
        self._check_solvable(distribution)
        return bisect_fixed(
            lambda s: self.calculator.upper_value(s, distribution),
            distribution.min_score,
            distribution.max_score,
            move_low=lambda value: value > 0,
            max_iterations=self.config.max_iterations,
            tolerance=self.config.tolerance,
        )

    def find_lower_root(self, distribution: PerformanceDistribution) -> BisectionResult:
        """Корень φ_l: сужение вниз, пока значение отрицательно."""
        self._check_solvable(distribution)
        return bisect_fixed(
            lambda s: self.calculator.lower_value(s, distribution),
            distribution.min_score,
            distribution.max_score,
            move_low=lambda value: not value < 0,
            max_iterations=self.config.max_iterations,
            tolerance=self.config.tolerance,
        )

    def _check_solvable(self, distribution: PerformanceDistribution) -> None:
        if distribution.sample_count == 0:
            raise InvalidInputError(
                "tier boundaries are undefined for an empty sample set"
            )
        if distribution.is_degenerate:
            raise BoundaryUndefinedError(
                f"degenerate distribution: min_score == max_score == "
                f"{distribution.min_score}"
            )


def compute_tier_boundaries(
    distribution: PerformanceDistribution,
    strategy: VirtualValueStrategy | StrategyKind = StrategyKind.PRECISE,
    config: TierSolverConfig | None = None,
) -> TierBoundaries:
    """solve(distribution, strategy) без явного solver."""
    solver = TierBoundarySolver(VirtualValueCalculator(strategy), config)
    return solver.solve(distribution)


# =============================================================================
# ALLOCATION
# =============================================================================


def allocate_tier(score: float, boundaries: TierBoundaries) -> TierDecision:
    """Аллокация tier по score.

    Проверка MARTYR выполняется первой: при перекрытии корней
    (upper_root <= lower_root) score >= upper_root всегда MARTYR.

    Raises:
        InvalidInputError: Если score NaN/Inf
    """
    validate_finite(score, "score", InvalidInputError)

    if score >= boundaries.upper_root:
        return TierDecision.MARTYR
    if score <= boundaries.lower_root:
        return TierDecision.SOVEREIGN
    return TierDecision.REJECT
