"""
Crisis — результат детектирования кризиса

CrisisDetectionResult производится CrisisOracle один раз на вызов и
потребляется вызывающим сразу (alerting/UI, spread, routing).
"""

from enum import Enum

from pydantic import BaseModel, Field


class TriggerType(str, Enum):
    """Первый сработавший (в фиксированном порядке) триггер кризиса."""

    NONE = "NONE"
    VOLATILITY = "VOLATILITY"
    LIQUIDITY = "LIQUIDITY"
    SPREAD = "SPREAD"


class CrisisDetectionResult(BaseModel):
    """Результат CrisisOracle.detect.

    is_crisis — OR всех проверок; trigger_type — первая сработавшая
    проверка; fired_triggers — все сработавшие, в порядке проверки.
    """

    is_crisis: bool = Field(..., description="Флаг кризиса")
    trigger_type: TriggerType = Field(..., description="Доминирующая причина")
    fired_triggers: tuple[TriggerType, ...] = Field(
        default=(), description="Все сработавшие триггеры (в порядке проверки)"
    )
    volatility_bps: int = Field(..., ge=0, description="Изменение цены (bps)")
    liquidity_remaining_bps: int = Field(..., ge=0, description="Остаток ликвидности (bps)")
    avg_spread_bps: int = Field(..., ge=0, description="Средний спред (bps)")
    timestamp: int = Field(..., ge=0, description="Timestamp наблюдения")

    model_config = {"frozen": True}
