"""
Smart Router — распределение ордера между MM по tiers

Normal mode:
    каждому MM quantity // count, приоритет tier информационный
    (MARTYR 50, CITIZEN 20, SOVEREIGN 10)

Crisis mode (waterfall):
    MARTYR (100) → CITIZEN (30) → SOVEREIGN (5)
    каждому MM tier выделяется remaining // count_in_tier, remaining
    уменьшается; следующий tier обрабатывается только при remaining > 0.
    Пустые tiers пропускаются. Остаток от целочисленного деления внутри
    tier не распределяется.
"""

import logging
from dataclasses import dataclass, field
from typing import Final, Mapping, Sequence

from src.core.domain.crisis import CrisisDetectionResult
from src.core.domain.errors import InvalidInputError
from src.core.domain.routing import MarketMakerRef, RoutingDecision
from src.core.domain.tiers import Tier

logger = logging.getLogger(__name__)


NORMAL_PRIORITIES: Final[Mapping[Tier, int]] = {
    Tier.MARTYR: 50,
    Tier.CITIZEN: 20,
    Tier.SOVEREIGN: 10,
}

CRISIS_PRIORITIES: Final[Mapping[Tier, int]] = {
    Tier.MARTYR: 100,
    Tier.CITIZEN: 30,
    Tier.SOVEREIGN: 5,
}

# Порядок waterfall в кризисе
CRISIS_TIER_ORDER: Final[tuple[Tier, ...]] = (Tier.MARTYR, Tier.CITIZEN, Tier.SOVEREIGN)


@dataclass(frozen=True)
class RouterConfig:
    """Таблицы приоритетов tiers."""

    normal_priorities: Mapping[Tier, int] = field(
        default_factory=lambda: dict(NORMAL_PRIORITIES)
    )
    crisis_priorities: Mapping[Tier, int] = field(
        default_factory=lambda: dict(CRISIS_PRIORITIES)
    )

    def __post_init__(self) -> None:
        for name, table in (
            ("normal_priorities", self.normal_priorities),
            ("crisis_priorities", self.crisis_priorities),
        ):
            missing = [t.value for t in Tier if t not in table]
            if missing:
                raise ValueError(f"{name} missing tiers: {missing}")
            negative = {t.value: p for t, p in table.items() if p < 0}
            if negative:
                raise ValueError(f"{name} must be non-negative, got {negative}")


class SmartRouter:
    """Роутер ордеров без состояния между вызовами."""

    def __init__(self, config: RouterConfig | None = None):
        self.config = config or RouterConfig()

    def route(
        self,
        order_quantity: int,
        is_crisis: bool,
        mms: Sequence[MarketMakerRef],
    ) -> list[RoutingDecision]:
        """Распределение ордера.

        Args:
            order_quantity: Количество (целое, >= 0)
            is_crisis: Режим waterfall
            mms: Доступные MM с tiers

        Returns:
            Решения в порядке выдачи; пустой список при отсутствии MM

        Raises:
            InvalidInputError: Если order_quantity < 0
        """
        if order_quantity < 0:
            raise InvalidInputError(f"order_quantity must be non-negative, got {order_quantity}")

        if not mms:
            return []

        if is_crisis:
            decisions = self._route_crisis(order_quantity, mms)
        else:
            decisions = self._route_normal(order_quantity, mms)

        allocated = sum(d.allocated_quantity for d in decisions)
        logger.debug(
            "routed quantity=%d crisis=%s mms=%d decisions=%d allocated=%d dropped=%d",
            order_quantity,
            is_crisis,
            len(mms),
            len(decisions),
            allocated,
            order_quantity - allocated,
        )
        return decisions

    def route_for_detection(
        self,
        order_quantity: int,
        detection: CrisisDetectionResult,
        mms: Sequence[MarketMakerRef],
    ) -> list[RoutingDecision]:
        """route() с режимом из результата CrisisOracle."""
        return self.route(order_quantity, detection.is_crisis, mms)

    def _route_normal(
        self, order_quantity: int, mms: Sequence[MarketMakerRef]
    ) -> list[RoutingDecision]:
        share = order_quantity // len(mms)
        priorities = self.config.normal_priorities
        return [
            RoutingDecision(
                market_maker_id=mm.market_maker_id,
                tier=mm.tier,
                priority=priorities[mm.tier],
                allocated_quantity=share,
            )
            for mm in mms
        ]

    def _route_crisis(
        self, order_quantity: int, mms: Sequence[MarketMakerRef]
    ) -> list[RoutingDecision]:
        decisions: list[RoutingDecision] = []
        remaining = order_quantity
        priorities = self.config.crisis_priorities

        for index, tier in enumerate(CRISIS_TIER_ORDER):
            # MARTYR всегда обрабатывается, следующие tiers только при остатке
            if index > 0 and remaining <= 0:
                break

            members = [mm for mm in mms if mm.tier == tier]
            if not members:
                continue

            share = remaining // len(members)
            for mm in members:
                decisions.append(
                    RoutingDecision(
                        market_maker_id=mm.market_maker_id,
                        tier=tier,
                        priority=priorities[tier],
                        allocated_quantity=share,
                    )
                )
                remaining -= share

        return decisions


def route(
    order_quantity: int,
    is_crisis: bool,
    mms: Sequence[MarketMakerRef],
) -> list[RoutingDecision]:
    """SmartRouter().route(...) с приоритетами по умолчанию."""
    return SmartRouter().route(order_quantity, is_crisis, mms)
