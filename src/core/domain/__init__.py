"""
Domain models and value objects.

Immutable snapshots and transient results of the mechanism:
PerformanceDistribution, TierBoundaries, VirtualValueBreakdown,
CrisisSpreadBreakdown, SlashingResult, CrisisDetectionResult, RoutingDecision.
"""

from src.core.domain.crisis import CrisisDetectionResult, TriggerType
from src.core.domain.distribution import PerformanceDistribution
from src.core.domain.errors import (
    BoundaryUndefinedError,
    InvalidInputError,
    StaleEpochError,
)
from src.core.domain.routing import MarketMakerRef, RoutingDecision
from src.core.domain.tiers import Tier, TierBoundaries, TierDecision
from src.core.domain.valuation import (
    CrisisSpreadBreakdown,
    SlashingResult,
    StrategyKind,
    ValuationSide,
    VirtualValueBreakdown,
)

__all__ = [
    # Errors
    "BoundaryUndefinedError",
    "InvalidInputError",
    "StaleEpochError",
    # Distribution
    "PerformanceDistribution",
    # Tiers
    "Tier",
    "TierBoundaries",
    "TierDecision",
    # Valuation
    "CrisisSpreadBreakdown",
    "SlashingResult",
    "StrategyKind",
    "ValuationSide",
    "VirtualValueBreakdown",
    # Crisis
    "CrisisDetectionResult",
    "TriggerType",
    # Routing
    "MarketMakerRef",
    "RoutingDecision",
]
