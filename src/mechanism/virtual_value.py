"""
Virtual Value — score за вычетом information rent и adverse-selection penalty

Один интерфейс, две взаимозаменяемые стратегии:

PRECISE (эмпирические CDF/PDF по полной выборке):
    UPPER: rent    = (1 - F(s)) / (f(s) + eps_pdf)
           penalty = λ * |s - mean| / stddev * rent
           φ_u(s)  = max(0, s - rent - penalty)
    LOWER: rent    = F(s) / (f(s) + eps_pdf)
           cost    = μ * |s - mean| / stddev * rent
           φ_l(s)  = cost - s - rent            (знаковое, без floor)

APPROXIMATE (summary-статистики, целочисленный fixed-point):
    rent    = stddev * SCALE / n                (n == 0 → stddev * SCALE)
    penalty = λ_bps * |s - mean| * rent / (stddev * 10_000)   (stddev == 0 → 0)
    φ_u(s)  = max(0, s * SCALE - rent - penalty)
    LOWER: cost = μ_bps * |s - mean| * rent / (stddev * 10_000),
           φ_l(s) = cost - s * SCALE - rent
    Результат переводится обратно в score-единицы делением на SCALE.

Формулы стратегий алгебраически не совпадают (rent: hazard-based против
standard error). Это разные оценки одной величины; консистентность
проверяется свойствами (знак, монотонность, floor), а не равенством.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Чистые функции: одинаковые входы → побитово одинаковый выход
2. Все деления защищены (safe_divide / mul_div)
3. information_rent >= 0, adverse_selection_penalty >= 0
"""

import logging
from dataclasses import dataclass
from typing import Final

from src.core.domain.distribution import PerformanceDistribution
from src.core.domain.errors import InvalidInputError
from src.core.domain.valuation import StrategyKind, ValuationSide, VirtualValueBreakdown
from src.core.math.empirical import BANDWIDTH_EPS, empirical_cdf, gaussian_kde_pdf, silverman_bandwidth
from src.core.math.numerical_safeguards import (
    BPS_DENOM,
    FIXED_POINT_SCALE,
    from_fixed,
    mul_div,
    safe_divide,
    to_fixed,
    validate_finite,
)

logger = logging.getLogger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

DEFAULT_ADVERSE_SELECTION_PARAM: Final[float] = 0.05
DEFAULT_CRISIS_COST_PARAM: Final[float] = 0.1

# Защита знаменателя rent: f(s) + PDF_EPS
PDF_EPS: Final[float] = 1e-4

# Те же параметры в bps для fixed-point стратегии
DEFAULT_ADVERSE_SELECTION_BPS: Final[int] = 500
DEFAULT_CRISIS_COST_BPS: Final[int] = 1000


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class VirtualValueConfig:
    """Конфигурация расчёта virtual value."""

    # Precise
    adverse_selection_param: float = DEFAULT_ADVERSE_SELECTION_PARAM
    crisis_cost_param: float = DEFAULT_CRISIS_COST_PARAM
    pdf_epsilon: float = PDF_EPS
    bandwidth_epsilon: float = BANDWIDTH_EPS

    # Approximate (fixed-point)
    fixed_point_scale: int = FIXED_POINT_SCALE
    adverse_selection_bps: int = DEFAULT_ADVERSE_SELECTION_BPS
    crisis_cost_bps: int = DEFAULT_CRISIS_COST_BPS

    def __post_init__(self) -> None:
        if self.pdf_epsilon <= 0:
            raise ValueError(f"pdf_epsilon must be positive, got {self.pdf_epsilon}")
        if self.bandwidth_epsilon <= 0:
            raise ValueError(
                f"bandwidth_epsilon must be positive, got {self.bandwidth_epsilon}"
            )
        if self.fixed_point_scale <= 0:
            raise ValueError(
                f"fixed_point_scale must be positive, got {self.fixed_point_scale}"
            )
        if self.adverse_selection_param < 0 or self.crisis_cost_param < 0:
            raise ValueError("adverse selection / crisis cost params must be non-negative")
        if self.adverse_selection_bps < 0 or self.crisis_cost_bps < 0:
            raise ValueError("adverse selection / crisis cost bps must be non-negative")


# =============================================================================
# STRATEGIES
# =============================================================================


class VirtualValueStrategy:
    """Базовая стратегия virtual value.

    Наследники реализуют upper() и lower(); compute() выбирает сторону.
    """

    kind: StrategyKind

    def __init__(self, config: VirtualValueConfig | None = None):
        self.config = config or VirtualValueConfig()

    def compute(
        self,
        score: float,
        distribution: PerformanceDistribution,
        side: ValuationSide = ValuationSide.UPPER,
    ) -> VirtualValueBreakdown:
        validate_finite(score, "score", InvalidInputError)

        if side == ValuationSide.UPPER:
            result = self.upper(score, distribution)
        else:
            result = self.lower(score, distribution)

        logger.debug(
            "virtual value %s/%s score=%.6f rent=%.6f penalty=%.6f value=%.6f",
            self.kind.value,
            side.value,
            score,
            result.information_rent,
            result.adverse_selection_penalty,
            result.virtual_value,
        )
        return result

    def upper(
        self, score: float, distribution: PerformanceDistribution
    ) -> VirtualValueBreakdown:
        raise NotImplementedError

    def lower(
        self, score: float, distribution: PerformanceDistribution
    ) -> VirtualValueBreakdown:
        raise NotImplementedError


class PreciseStrategy(VirtualValueStrategy):
    """Precise стратегия: эмпирическая CDF + гауссовская KDE.

    Требует полную выборку (distribution.has_samples).
    """

    kind = StrategyKind.PRECISE

    def _cdf_pdf(
        self, score: float, distribution: PerformanceDistribution
    ) -> tuple[float, float]:
        if not distribution.has_samples:
            raise InvalidInputError(
                "precise strategy requires historical samples, distribution has none"
            )

        scores = distribution.historical_scores
        bandwidth = silverman_bandwidth(
            distribution.sample_count,
            distribution.stddev,
            self.config.bandwidth_epsilon,
        )
        cdf = empirical_cdf(scores, score)
        pdf = gaussian_kde_pdf(scores, score, bandwidth)
        return cdf, pdf

    def upper(
        self, score: float, distribution: PerformanceDistribution
    ) -> VirtualValueBreakdown:
        cdf, pdf = self._cdf_pdf(score, distribution)

        information_rent = safe_divide(1.0 - cdf, pdf + self.config.pdf_epsilon)
        z = safe_divide(abs(score - distribution.mean), distribution.stddev)
        penalty = self.config.adverse_selection_param * z * information_rent

        return VirtualValueBreakdown(
            raw_score=score,
            information_rent=information_rent,
            adverse_selection_penalty=penalty,
            virtual_value=max(0.0, score - information_rent - penalty),
            side=ValuationSide.UPPER,
            strategy=self.kind,
        )

    def lower(
        self, score: float, distribution: PerformanceDistribution
    ) -> VirtualValueBreakdown:
        cdf, pdf = self._cdf_pdf(score, distribution)

        information_rent = safe_divide(cdf, pdf + self.config.pdf_epsilon)
        z = safe_divide(abs(score - distribution.mean), distribution.stddev)
        crisis_cost = self.config.crisis_cost_param * z * information_rent

        return VirtualValueBreakdown(
            raw_score=score,
            information_rent=information_rent,
            adverse_selection_penalty=crisis_cost,
            virtual_value=crisis_cost - score - information_rent,
            side=ValuationSide.LOWER,
            strategy=self.kind,
        )


class ApproximateStrategy(VirtualValueStrategy):
    """Approximate стратегия: summary-статистики, целочисленная арифметика.

    Все промежуточные величины — int в fixed-point (масштаб
    config.fixed_point_scale); стоимость O(1) на вызов.
    """

    kind = StrategyKind.APPROXIMATE

    def _fixed_inputs(
        self, score: float, distribution: PerformanceDistribution
    ) -> tuple[int, int, int, int]:
        scale = self.config.fixed_point_scale
        score_fp = to_fixed(score, scale)
        deviation_fp = abs(score_fp - to_fixed(distribution.mean, scale))
        stddev_fp = to_fixed(distribution.stddev, scale)

        # n == 0: rent вырождается в stddev
        rent_fp = mul_div(stddev_fp, 1, distribution.sample_count, fallback=stddev_fp)
        return score_fp, deviation_fp, stddev_fp, rent_fp

    def upper(
        self, score: float, distribution: PerformanceDistribution
    ) -> VirtualValueBreakdown:
        scale = self.config.fixed_point_scale
        score_fp, deviation_fp, stddev_fp, rent_fp = self._fixed_inputs(score, distribution)

        penalty_fp = mul_div(
            self.config.adverse_selection_bps * deviation_fp,
            rent_fp,
            stddev_fp * BPS_DENOM,
            fallback=0,
        )
        value_fp = max(0, score_fp - rent_fp - penalty_fp)

        return VirtualValueBreakdown(
            raw_score=score,
            information_rent=from_fixed(rent_fp, scale),
            adverse_selection_penalty=from_fixed(penalty_fp, scale),
            virtual_value=from_fixed(value_fp, scale),
            side=ValuationSide.UPPER,
            strategy=self.kind,
        )

    def lower(
        self, score: float, distribution: PerformanceDistribution
    ) -> VirtualValueBreakdown:
        scale = self.config.fixed_point_scale
        score_fp, deviation_fp, stddev_fp, rent_fp = self._fixed_inputs(score, distribution)

        crisis_cost_fp = mul_div(
            self.config.crisis_cost_bps * deviation_fp,
            rent_fp,
            stddev_fp * BPS_DENOM,
            fallback=0,
        )

        return VirtualValueBreakdown(
            raw_score=score,
            information_rent=from_fixed(rent_fp, scale),
            adverse_selection_penalty=from_fixed(crisis_cost_fp, scale),
            virtual_value=from_fixed(crisis_cost_fp - score_fp - rent_fp, scale),
            side=ValuationSide.LOWER,
            strategy=self.kind,
        )


def make_strategy(
    kind: StrategyKind,
    config: VirtualValueConfig | None = None,
) -> VirtualValueStrategy:
    """Фабрика стратегии по контексту исполнения."""
    if kind == StrategyKind.PRECISE:
        return PreciseStrategy(config)
    if kind == StrategyKind.APPROXIMATE:
        return ApproximateStrategy(config)
    raise ValueError(f"unknown strategy kind: {kind}")


# =============================================================================
# CALCULATOR
# =============================================================================


class VirtualValueCalculator:
    """Фасад над стратегией virtual value.

    Используется TierBoundarySolver, ICRewardIntegrator и SlashingEngine.
    Состояния между вызовами нет.
    """

    def __init__(
        self,
        strategy: VirtualValueStrategy | StrategyKind = StrategyKind.PRECISE,
        config: VirtualValueConfig | None = None,
    ):
        if isinstance(strategy, VirtualValueStrategy):
            self.strategy = strategy
        else:
            self.strategy = make_strategy(strategy, config)

    @property
    def kind(self) -> StrategyKind:
        return self.strategy.kind

    def compute(
        self,
        score: float,
        distribution: PerformanceDistribution,
        side: ValuationSide = ValuationSide.UPPER,
    ) -> VirtualValueBreakdown:
        """Полное разложение virtual value для score."""
        return self.strategy.compute(score, distribution, side)

    def upper_value(self, score: float, distribution: PerformanceDistribution) -> float:
        """φ_u(score) >= 0."""
        return self.strategy.compute(score, distribution, ValuationSide.UPPER).virtual_value

    def lower_value(self, score: float, distribution: PerformanceDistribution) -> float:
        """φ_l(score), знаковое."""
        return self.strategy.compute(score, distribution, ValuationSide.LOWER).virtual_value


def compute_virtual_value(
    score: float,
    distribution: PerformanceDistribution,
    strategy: StrategyKind = StrategyKind.PRECISE,
    side: ValuationSide = ValuationSide.UPPER,
    config: VirtualValueConfig | None = None,
) -> VirtualValueBreakdown:
    """Разовый расчёт virtual value без явного калькулятора."""
    return make_strategy(strategy, config).compute(score, distribution, side)
