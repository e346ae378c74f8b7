"""
Credibility — обновление доверия к MM по результату proof

    posterior = weight * outcome + (1 - weight) * prior

Выпуклая комбинация, weight — параметр протокола. Целочисленная форма
(weight в bps, floor division на 10_000) для fixed-point контекста.
"""

from dataclasses import dataclass
from typing import Final

from src.core.domain.errors import InvalidInputError
from src.core.math.numerical_safeguards import BPS_DENOM, validate_in_range, validate_finite

DEFAULT_WEIGHT: Final[float] = 0.7
DEFAULT_WEIGHT_BPS: Final[int] = 7_000


@dataclass(frozen=True)
class CredibilityConfig:
    """Конфигурация обновления доверия."""

    weight: float = DEFAULT_WEIGHT
    weight_bps: int = DEFAULT_WEIGHT_BPS

    def __post_init__(self) -> None:
        if not 0.0 <= self.weight <= 1.0:
            raise ValueError(f"weight must be in [0, 1], got {self.weight}")
        if not 0 <= self.weight_bps <= BPS_DENOM:
            raise ValueError(f"weight_bps must be in [0, {BPS_DENOM}], got {self.weight_bps}")


def update_credibility(prior: float, outcome: float, weight: float = DEFAULT_WEIGHT) -> float:
    """weight * outcome + (1 - weight) * prior.

    Raises:
        InvalidInputError: Если weight вне [0, 1] или входы NaN/Inf
    """
    validate_finite(prior, "prior", InvalidInputError)
    validate_finite(outcome, "outcome", InvalidInputError)
    validate_in_range(weight, "weight", 0.0, 1.0, InvalidInputError)
    return weight * outcome + (1.0 - weight) * prior


def update_credibility_bps(prior: int, outcome: int, weight_bps: int = DEFAULT_WEIGHT_BPS) -> int:
    """(weight_bps * outcome + (10000 - weight_bps) * prior) // 10000."""
    if not 0 <= weight_bps <= BPS_DENOM:
        raise InvalidInputError(f"weight_bps must be in [0, {BPS_DENOM}], got {weight_bps}")
    return (weight_bps * outcome + (BPS_DENOM - weight_bps) * prior) // BPS_DENOM


class CredibilityUpdater:
    """Обновление доверия с весом из конфига."""

    def __init__(self, config: CredibilityConfig | None = None):
        self.config = config or CredibilityConfig()

    def update(self, prior: float, proof_outcome: float, weight: float | None = None) -> float:
        w = self.config.weight if weight is None else weight
        return update_credibility(prior, proof_outcome, w)

    def update_bps(self, prior: int, proof_outcome: int, weight_bps: int | None = None) -> int:
        w = self.config.weight_bps if weight_bps is None else weight_bps
        return update_credibility_bps(prior, proof_outcome, w)
