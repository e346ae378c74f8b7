"""
Valuation — транзиентные результаты расчётов механизма

- VirtualValueBreakdown: score, information rent, adverse-selection penalty,
  virtual value
- CrisisSpreadBreakdown: разложение кризисного спреда на monopoly и
  adverse-selection компоненты
- SlashingResult: штраф за подтверждённый overclaim

Пересчитываются на каждый запрос, не персистятся.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from src.core.domain.tiers import Tier


# =============================================================================
# ENUMS
# =============================================================================


class ValuationSide(str, Enum):
    """Сторона virtual value.

    UPPER — сторона commit (Martyr), значение ограничено снизу нулём.
    LOWER — сторона exit (Sovereign), значение знаковое и используется
    только для проверки знака при поиске корня.
    """

    UPPER = "UPPER"
    LOWER = "LOWER"


class StrategyKind(str, Enum):
    """Стратегия расчёта virtual value."""

    PRECISE = "PRECISE"  # эмпирические CDF/PDF по полной выборке
    APPROXIMATE = "APPROXIMATE"  # summary-статистики, fixed-point


# =============================================================================
# MODELS
# =============================================================================


class VirtualValueBreakdown(BaseModel):
    """Разложение virtual value для одного score."""

    raw_score: float = Field(..., description="Исходный score")
    information_rent: float = Field(..., ge=0, description="Information rent")
    adverse_selection_penalty: float = Field(
        ..., ge=0, description="Adverse-selection penalty (LOWER: crisis cost)"
    )
    virtual_value: float = Field(..., description="Virtual value")
    side: ValuationSide = Field(..., description="Сторона расчёта")
    strategy: StrategyKind = Field(..., description="Стратегия расчёта")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_upper_floor(self) -> "VirtualValueBreakdown":
        """Upper-side virtual value неотрицателен."""
        if self.side == ValuationSide.UPPER and self.virtual_value < 0:
            raise ValueError(
                f"upper-side virtual_value must be >= 0, got {self.virtual_value}"
            )
        return self


class CrisisSpreadBreakdown(BaseModel):
    """Разложение кризисного спреда (bps)."""

    base_spread: float = Field(..., ge=0, description="Базовый спред (bps)")
    monopoly_component: float = Field(..., ge=0, description="Monopoly компонент (bps)")
    adverse_selection_component: float = Field(
        ..., ge=0, description="Adverse-selection компонент (bps)"
    )
    total_spread: float = Field(..., ge=0, description="Итоговый спред после cap (bps)")
    volatility_multiplier: float = Field(..., ge=0, description="current_vol / normal_vol")
    uncapped_spread: float = Field(..., ge=0, description="Спред до tier cap (bps)")
    tier: Optional[Tier] = Field(None, description="Tier, по которому применён cap")

    model_config = {"frozen": True}


class SlashingResult(BaseModel):
    """Результат slashing: штраф и обоснование."""

    slash_amount: float = Field(..., ge=0, description="Штраф (<= max_slash_fraction)")
    justification: str = Field(..., min_length=1, description="Обоснование")
    overclaim: float = Field(..., ge=0, description="Overclaim в единицах virtual value")
    claimed_virtual_value: float = Field(..., description="Virtual value заявленного score")
    verified_virtual_value: float = Field(..., description="Virtual value проверенного score")

    model_config = {"frozen": True}
