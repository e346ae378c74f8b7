"""Mechanism — расчёты Myerson-механизма tiers для MM.

- Virtual value (precise / approximate стратегии)
- Корни virtual value и аллокация tier
- IC reward, кризисный спред, slashing, обновление доверия
"""

from .credibility import (
    CredibilityConfig,
    CredibilityUpdater,
    update_credibility,
    update_credibility_bps,
)
from .crisis_spread import (
    CrisisSpreadCalculator,
    CrisisSpreadConfig,
    apply_spread_constraint,
)
from .ic_reward import ICRewardConfig, ICRewardIntegrator, IntegrationMethod
from .slashing import SlashingConfig, SlashingEngine
from .tier_boundaries import (
    TierBoundarySolver,
    TierSolverConfig,
    allocate_tier,
    compute_tier_boundaries,
)
from .virtual_value import (
    ApproximateStrategy,
    PreciseStrategy,
    VirtualValueCalculator,
    VirtualValueConfig,
    VirtualValueStrategy,
    compute_virtual_value,
    make_strategy,
)

__all__ = [
    "ApproximateStrategy",
    "PreciseStrategy",
    "VirtualValueCalculator",
    "VirtualValueConfig",
    "VirtualValueStrategy",
    "compute_virtual_value",
    "make_strategy",
    "TierBoundarySolver",
    "TierSolverConfig",
    "allocate_tier",
    "compute_tier_boundaries",
    "ICRewardConfig",
    "ICRewardIntegrator",
    "IntegrationMethod",
    "CrisisSpreadCalculator",
    "CrisisSpreadConfig",
    "apply_spread_constraint",
    "SlashingConfig",
    "SlashingEngine",
    "CredibilityConfig",
    "CredibilityUpdater",
    "update_credibility",
    "update_credibility_bps",
]
