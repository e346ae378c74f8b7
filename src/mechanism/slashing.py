"""
Slashing — штраф за overclaim score

    overclaim = max(0, φ_u(claimed) - φ_u(verified))
    slash     = min(overclaim, max_slash_fraction)

claimed <= verified (честный отчёт или underclaim) всегда даёт нулевой штраф.
"""

import logging
from dataclasses import dataclass
from typing import Final

from src.core.domain.distribution import PerformanceDistribution
from src.core.domain.errors import InvalidInputError
from src.core.domain.valuation import SlashingResult
from src.core.math.numerical_safeguards import validate_finite, validate_in_range
from src.mechanism.virtual_value import VirtualValueCalculator

logger = logging.getLogger(__name__)


DEFAULT_MAX_SLASH_FRACTION: Final[float] = 0.5

HONEST_JUSTIFICATION: Final[str] = "MM was honest, no slashing"


@dataclass(frozen=True)
class SlashingConfig:
    """Конфигурация slashing."""

    max_slash_fraction: float = DEFAULT_MAX_SLASH_FRACTION

    def __post_init__(self) -> None:
        if not 0.0 <= self.max_slash_fraction <= 1.0:
            raise ValueError(
                f"max_slash_fraction must be in [0, 1], got {self.max_slash_fraction}"
            )


class SlashingEngine:
    """Расчёт штрафа по заявленному и проверенному score."""

    def __init__(
        self,
        calculator: VirtualValueCalculator | None = None,
        config: SlashingConfig | None = None,
    ):
        self.calculator = calculator or VirtualValueCalculator()
        self.config = config or SlashingConfig()

    def compute(
        self,
        claimed_score: float,
        verified_score: float,
        distribution: PerformanceDistribution,
        max_slash_fraction: float | None = None,
    ) -> SlashingResult:
        """
        Args:
            claimed_score: Заявленный MM score
            verified_score: Score, подтверждённый проверкой
            distribution: Распределение текущего epoch
            max_slash_fraction: Cap штрафа в [0, 1]; None — из конфига

        Raises:
            InvalidInputError: Если score NaN/Inf или cap вне [0, 1]
        """
        validate_finite(claimed_score, "claimed_score", InvalidInputError)
        validate_finite(verified_score, "verified_score", InvalidInputError)

        cap = self.config.max_slash_fraction if max_slash_fraction is None else max_slash_fraction
        validate_in_range(cap, "max_slash_fraction", 0.0, 1.0, InvalidInputError)

        claimed_vv = self.calculator.upper_value(claimed_score, distribution)
        verified_vv = self.calculator.upper_value(verified_score, distribution)

        if claimed_score <= verified_score:
            return SlashingResult(
                slash_amount=0.0,
                justification=HONEST_JUSTIFICATION,
                overclaim=0.0,
                claimed_virtual_value=claimed_vv,
                verified_virtual_value=verified_vv,
            )

        overclaim = max(0.0, claimed_vv - verified_vv)
        slash = min(overclaim, cap)

        if overclaim <= 0:
            justification = HONEST_JUSTIFICATION
        else:
            justification = f"Overclaimed {overclaim:.2f}, slashing {slash:.2f}"
            logger.info(
                "slashing claimed=%.6f verified=%.6f overclaim=%.6f slash=%.6f",
                claimed_score,
                verified_score,
                overclaim,
                slash,
            )

        return SlashingResult(
            slash_amount=slash,
            justification=justification,
            overclaim=overclaim,
            claimed_virtual_value=claimed_vv,
            verified_virtual_value=verified_vv,
        )
