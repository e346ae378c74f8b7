"""
Crisis Spread — оптимальный спред MM в кризисе

    multiplier = current_vol / normal_vol        (normal_vol == 0 → 0.01)
    monopoly   = base * multiplier * risk_aversion / (1 + info_advantage)
    adverse    = base * multiplier * param * (1 - info_advantage)
                 * risk_aversion * scale
    total      = monopoly + adverse, затем cap по tier

Tier caps (bps): MARTYR 40, CITIZEN 100, SOVEREIGN без ограничения.
"""

import logging
from dataclasses import dataclass, field
from typing import Final, Mapping, Optional

from src.core.domain.errors import InvalidInputError
from src.core.domain.tiers import Tier
from src.core.domain.valuation import CrisisSpreadBreakdown
from src.core.math.numerical_safeguards import (
    validate_finite,
    validate_in_range,
    validate_non_negative,
)

logger = logging.getLogger(__name__)


DEFAULT_BASE_SPREAD_BPS: Final[float] = 10.0
DEFAULT_NORMAL_VOL: Final[float] = 0.01
DEFAULT_ADVERSE_SELECTION_PARAM: Final[float] = 0.05
DEFAULT_ADVERSE_SELECTION_SCALE: Final[float] = 100.0

# None: спред tier не ограничен
DEFAULT_TIER_SPREAD_CAPS: Final[Mapping[Tier, Optional[float]]] = {
    Tier.MARTYR: 40.0,
    Tier.CITIZEN: 100.0,
    Tier.SOVEREIGN: None,
}


@dataclass(frozen=True)
class CrisisSpreadConfig:
    """Конфигурация расчёта кризисного спреда."""

    base_spread_bps: float = DEFAULT_BASE_SPREAD_BPS
    default_normal_vol: float = DEFAULT_NORMAL_VOL
    adverse_selection_param: float = DEFAULT_ADVERSE_SELECTION_PARAM
    adverse_selection_scale: float = DEFAULT_ADVERSE_SELECTION_SCALE
    tier_caps: Mapping[Tier, Optional[float]] = field(
        default_factory=lambda: dict(DEFAULT_TIER_SPREAD_CAPS)
    )

    def __post_init__(self) -> None:
        if self.base_spread_bps < 0:
            raise ValueError(f"base_spread_bps must be >= 0, got {self.base_spread_bps}")
        if self.default_normal_vol <= 0:
            raise ValueError(
                f"default_normal_vol must be positive, got {self.default_normal_vol}"
            )
        if self.adverse_selection_param < 0:
            raise ValueError(
                f"adverse_selection_param must be >= 0, got {self.adverse_selection_param}"
            )
        if self.adverse_selection_scale < 0:
            raise ValueError(
                f"adverse_selection_scale must be >= 0, got {self.adverse_selection_scale}"
            )
        for tier, cap in self.tier_caps.items():
            if cap is not None and cap < 0:
                raise ValueError(f"spread cap for {tier.value} must be >= 0, got {cap}")


def apply_spread_constraint(
    spread: float,
    tier: Tier,
    caps: Optional[Mapping[Tier, Optional[float]]] = None,
) -> float:
    """min(spread, cap[tier]); tier без cap возвращает spread как есть."""
    table = DEFAULT_TIER_SPREAD_CAPS if caps is None else caps
    cap = table.get(tier)
    if cap is None:
        return spread
    return min(spread, cap)


class CrisisSpreadCalculator:
    """Разложение кризисного спреда на monopoly и adverse-selection компоненты."""

    def __init__(self, config: CrisisSpreadConfig | None = None):
        self.config = config or CrisisSpreadConfig()

    def compute(
        self,
        base_price: float,
        current_vol: float,
        normal_vol: float,
        info_advantage: float,
        risk_aversion: float,
        tier: Tier | None = None,
    ) -> CrisisSpreadBreakdown:
        """Оптимальный кризисный спред.

        Args:
            base_price: Цена актива (в формулу не входит, спред в bps)
            current_vol: Текущая волатильность
            normal_vol: Нормальная волатильность (0 → default_normal_vol)
            info_advantage: Информационное преимущество MM в [0, 1]
            risk_aversion: Неприятие риска MM (>= 0)
            tier: Tier для cap; None — без cap

        Returns:
            CrisisSpreadBreakdown

        Raises:
            InvalidInputError: Если входы вне допустимых диапазонов
        """
        cfg = self.config

        validate_finite(base_price, "base_price", InvalidInputError)
        validate_non_negative(current_vol, "current_vol", InvalidInputError)
        validate_non_negative(normal_vol, "normal_vol", InvalidInputError)
        validate_in_range(info_advantage, "info_advantage", 0.0, 1.0, InvalidInputError)
        validate_non_negative(risk_aversion, "risk_aversion", InvalidInputError)

        if normal_vol == 0:
            logger.warning(
                "normal_vol is zero, substituting default %.4f", cfg.default_normal_vol
            )
            normal_vol = cfg.default_normal_vol

        multiplier = current_vol / normal_vol

        monopoly = (
            cfg.base_spread_bps * multiplier * (1.0 / (1.0 + info_advantage)) * risk_aversion
        )
        adverse = (
            cfg.base_spread_bps
            * multiplier
            * cfg.adverse_selection_param
            * (1.0 - info_advantage)
            * risk_aversion
            * cfg.adverse_selection_scale
        )
        uncapped = monopoly + adverse

        total = uncapped
        if tier is not None:
            total = apply_spread_constraint(uncapped, tier, cfg.tier_caps)

        logger.debug(
            "crisis spread multiplier=%.4f monopoly=%.4f adverse=%.4f "
            "uncapped=%.4f total=%.4f tier=%s",
            multiplier,
            monopoly,
            adverse,
            uncapped,
            total,
            tier.value if tier is not None else None,
        )

        return CrisisSpreadBreakdown(
            base_spread=cfg.base_spread_bps,
            monopoly_component=monopoly,
            adverse_selection_component=adverse,
            total_spread=total,
            volatility_multiplier=multiplier,
            uncapped_spread=uncapped,
            tier=tier,
        )
