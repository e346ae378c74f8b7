"""
Tiers — уровни обязательств MM и границы между ними

- Tier: MARTYR (максимальное обязательство в кризис), CITIZEN, SOVEREIGN
- TierDecision: результат аллокации по score (MARTYR / SOVEREIGN / REJECT)
- TierBoundaries: корни virtual value, разделяющие tiers, с no-trade gap

TierBoundaries вычисляется TierBoundarySolver (precise контекст) либо
поставляется готовым из внешнего источника (approximate контекст).
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


# =============================================================================
# ENUMS
# =============================================================================


class Tier(str, Enum):
    """Tier обязательства MM (от наиболее к наименее кризис-устойчивому)."""

    MARTYR = "MARTYR"
    CITIZEN = "CITIZEN"
    SOVEREIGN = "SOVEREIGN"


class TierDecision(str, Enum):
    """Результат аллокации tier по score.

    REJECT — score попал в no-trade gap между корнями.
    """

    MARTYR = "MARTYR"
    SOVEREIGN = "SOVEREIGN"
    REJECT = "REJECT"


# =============================================================================
# MODELS
# =============================================================================


class TierBoundaries(BaseModel):
    """Границы tiers (корни virtual value).

    gap_width = max(0, upper_root - lower_root). Epoch монотонен
    между публикациями.
    """

    upper_root: float = Field(..., description="Корень upper-side virtual value")
    lower_root: float = Field(..., description="Корень lower-side virtual value")
    gap_width: float = Field(..., ge=0, description="Ширина no-trade gap")
    epoch: int = Field(default=0, ge=0, description="Epoch вычисления")
    is_valid: bool = Field(default=True, description="Флаг валидности границ")

    # Заполняются solver'ом; для внешних границ отсутствуют
    martyr_minimum: Optional[float] = Field(
        None, description="max(min_score, upper_root) (nullable)"
    )
    sovereign_maximum: Optional[float] = Field(
        None, description="min(max_score, lower_root) (nullable)"
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_gap_width(self) -> "TierBoundaries":
        """gap_width согласован с корнями."""
        expected = max(0.0, self.upper_root - self.lower_root)
        if abs(self.gap_width - expected) > 1e-9 * max(1.0, abs(expected)):
            raise ValueError(
                f"gap_width {self.gap_width} inconsistent with roots "
                f"(expected {expected})"
            )
        return self

    @classmethod
    def from_roots(
        cls,
        upper_root: float,
        lower_root: float,
        epoch: int = 0,
        is_valid: bool = True,
        martyr_minimum: Optional[float] = None,
        sovereign_maximum: Optional[float] = None,
    ) -> "TierBoundaries":
        """Построение границ с вычислением gap_width."""
        return cls(
            upper_root=upper_root,
            lower_root=lower_root,
            gap_width=max(0.0, upper_root - lower_root),
            epoch=epoch,
            is_valid=is_valid,
            martyr_minimum=martyr_minimum,
            sovereign_maximum=sovereign_maximum,
        )
