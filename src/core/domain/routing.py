"""
Routing — входы и выходы SmartRouter

- MarketMakerRef: пара (market_maker_id, tier), поставляется вызывающим
- RoutingDecision: одна аллокация (order, MM); последовательность решений
  принадлежит вызывающему, состояния между вызовами нет
"""

from pydantic import BaseModel, Field

from src.core.domain.tiers import Tier


class MarketMakerRef(BaseModel):
    """MM, доступный для роутинга."""

    market_maker_id: str = Field(..., min_length=1, description="Идентификатор MM")
    tier: Tier = Field(..., description="Tier обязательства")

    model_config = {"frozen": True}


class RoutingDecision(BaseModel):
    """Аллокация части ордера на MM."""

    market_maker_id: str = Field(..., min_length=1, description="Идентификатор MM")
    tier: Tier = Field(..., description="Tier MM")
    priority: int = Field(..., ge=0, description="Приоритет tier (информационный в normal)")
    allocated_quantity: int = Field(..., ge=0, description="Выделенное количество")

    model_config = {"frozen": True}
