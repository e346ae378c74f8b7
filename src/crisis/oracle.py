"""
Crisis Oracle — детектирование кризиса по рыночным метрикам

Метрики (целочисленные bps, floor division):
    volatility_bps          = |curr - prev| * 10000 // prev     (prev == 0 → 0)
    liquidity_remaining_bps = now * 10000 // before              (before == 0 → 10000)

Проверки выполняются в фиксированном порядке:
1. volatility_bps > 3000          → VOLATILITY
2. liquidity_remaining_bps < 6000 → LIQUIDITY
3. spread_bps > 1000              → SPREAD

is_crisis — OR всех проверок; trigger_type — первая сработавшая.

Стабилизация требует одновременно vol < 2000, liquidity > 7000, spread < 500.
Пороги стабилизации строже порогов кризиса (гистерезис).
"""

import logging
from dataclasses import dataclass
from typing import Callable, Final

from src.core.domain.crisis import CrisisDetectionResult, TriggerType
from src.core.domain.errors import InvalidInputError
from src.core.math.numerical_safeguards import BPS_DENOM, validate_finite

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

CRISIS_VOLATILITY_BPS: Final[int] = 3_000
CRISIS_LIQUIDITY_REMAINING_BPS: Final[int] = 6_000
CRISIS_SPREAD_BPS: Final[int] = 1_000

STABLE_VOLATILITY_BPS: Final[int] = 2_000
STABLE_LIQUIDITY_REMAINING_BPS: Final[int] = 7_000
STABLE_SPREAD_BPS: Final[int] = 500

FULL_LIQUIDITY_BPS: Final[int] = BPS_DENOM


@dataclass(frozen=True)
class OracleConfig:
    """Пороги кризиса и стабилизации (bps)."""

    crisis_volatility_bps: int = CRISIS_VOLATILITY_BPS
    crisis_liquidity_remaining_bps: int = CRISIS_LIQUIDITY_REMAINING_BPS
    crisis_spread_bps: int = CRISIS_SPREAD_BPS
    stable_volatility_bps: int = STABLE_VOLATILITY_BPS
    stable_liquidity_remaining_bps: int = STABLE_LIQUIDITY_REMAINING_BPS
    stable_spread_bps: int = STABLE_SPREAD_BPS

    def __post_init__(self) -> None:
        if self.stable_volatility_bps > self.crisis_volatility_bps:
            raise ValueError(
                "stable_volatility_bps must not exceed crisis_volatility_bps, "
                f"got {self.stable_volatility_bps} > {self.crisis_volatility_bps}"
            )
        if self.stable_liquidity_remaining_bps < self.crisis_liquidity_remaining_bps:
            raise ValueError(
                "stable_liquidity_remaining_bps must not be below "
                "crisis_liquidity_remaining_bps, got "
                f"{self.stable_liquidity_remaining_bps} < {self.crisis_liquidity_remaining_bps}"
            )
        if self.stable_spread_bps > self.crisis_spread_bps:
            raise ValueError(
                "stable_spread_bps must not exceed crisis_spread_bps, "
                f"got {self.stable_spread_bps} > {self.crisis_spread_bps}"
            )


# =============================================================================
# METRICS
# =============================================================================


def calculate_volatility(prev_price: int, curr_price: int) -> int:
    """|curr - prev| * 10000 // prev; 0 при prev == 0."""
    if prev_price == 0:
        return 0
    return abs(curr_price - prev_price) * BPS_DENOM // prev_price


def calculate_liquidity_remaining(liquidity_before: int, liquidity_now: int) -> int:
    """now * 10000 // before; 10000 (без оттока) при before == 0."""
    if liquidity_before == 0:
        return FULL_LIQUIDITY_BPS
    return liquidity_now * BPS_DENOM // liquidity_before


def _validate_counts(**values: int) -> None:
    for name, value in values.items():
        validate_finite(value, name, InvalidInputError)
        if value < 0:
            raise InvalidInputError(f"{name} must be non-negative, got {value}")


# =============================================================================
# ORACLE
# =============================================================================


@dataclass(frozen=True)
class _Metrics:
    volatility_bps: int
    liquidity_remaining_bps: int
    spread_bps: int


class CrisisOracle:
    """Детектор кризиса: упорядоченный список предикатов."""

    def __init__(self, config: OracleConfig | None = None):
        self.config = config or OracleConfig()
        cfg = self.config
        self._checks: tuple[tuple[TriggerType, Callable[[_Metrics], bool]], ...] = (
            (TriggerType.VOLATILITY, lambda m: m.volatility_bps > cfg.crisis_volatility_bps),
            (
                TriggerType.LIQUIDITY,
                lambda m: m.liquidity_remaining_bps < cfg.crisis_liquidity_remaining_bps,
            ),
            (TriggerType.SPREAD, lambda m: m.spread_bps > cfg.crisis_spread_bps),
        )

    def detect(
        self,
        prev_price: int,
        curr_price: int,
        liquidity_before: int,
        liquidity_now: int,
        spread_bps: int,
        timestamp: int,
    ) -> CrisisDetectionResult:
        """Детектирование кризиса по одному наблюдению рынка.

        Args:
            prev_price: Предыдущая цена
            curr_price: Текущая цена
            liquidity_before: Ликвидность до наблюдения
            liquidity_now: Текущая ликвидность
            spread_bps: Средний спред (bps)
            timestamp: Timestamp наблюдения

        Returns:
            CrisisDetectionResult

        Raises:
            InvalidInputError: Если любой вход NaN/Inf или отрицателен
        """
        _validate_counts(
            prev_price=prev_price,
            curr_price=curr_price,
            liquidity_before=liquidity_before,
            liquidity_now=liquidity_now,
            spread_bps=spread_bps,
            timestamp=timestamp,
        )

        metrics = _Metrics(
            volatility_bps=calculate_volatility(prev_price, curr_price),
            liquidity_remaining_bps=calculate_liquidity_remaining(
                liquidity_before, liquidity_now
            ),
            spread_bps=spread_bps,
        )

        fired = tuple(trigger for trigger, check in self._checks if check(metrics))
        is_crisis = bool(fired)
        trigger_type = fired[0] if fired else TriggerType.NONE

        if is_crisis:
            logger.info(
                "crisis detected ts=%d trigger=%s fired=%s vol=%d liq=%d spread=%d",
                timestamp,
                trigger_type.value,
                ",".join(t.value for t in fired),
                metrics.volatility_bps,
                metrics.liquidity_remaining_bps,
                metrics.spread_bps,
            )
        else:
            logger.debug(
                "no crisis ts=%d vol=%d liq=%d spread=%d",
                timestamp,
                metrics.volatility_bps,
                metrics.liquidity_remaining_bps,
                metrics.spread_bps,
            )

        return CrisisDetectionResult(
            is_crisis=is_crisis,
            trigger_type=trigger_type,
            fired_triggers=fired,
            volatility_bps=metrics.volatility_bps,
            liquidity_remaining_bps=metrics.liquidity_remaining_bps,
            avg_spread_bps=metrics.spread_bps,
            timestamp=timestamp,
        )

    def check_stabilization(
        self, volatility_bps: int, liquidity_remaining_bps: int, spread_bps: int
    ) -> bool:
        """Все три метрики внутри полосы стабилизации."""
        cfg = self.config
        return (
            volatility_bps < cfg.stable_volatility_bps
            and liquidity_remaining_bps > cfg.stable_liquidity_remaining_bps
            and spread_bps < cfg.stable_spread_bps
        )

    def check_liquidity_drain(self, liquidity_before: int, liquidity_now: int) -> bool:
        """Отток ликвидности ниже порога кризиса; False при before == 0."""
        if liquidity_before == 0:
            return False
        remaining = calculate_liquidity_remaining(liquidity_before, liquidity_now)
        return remaining < self.config.crisis_liquidity_remaining_bps

    calculate_volatility = staticmethod(calculate_volatility)
    calculate_liquidity_remaining = staticmethod(calculate_liquidity_remaining)


def detect_crisis(
    prev_price: int,
    curr_price: int,
    liquidity_before: int,
    liquidity_now: int,
    spread_bps: int,
    timestamp: int,
) -> CrisisDetectionResult:
    """CrisisOracle().detect(...) с порогами по умолчанию."""
    return CrisisOracle().detect(
        prev_price, curr_price, liquidity_before, liquidity_now, spread_bps, timestamp
    )


def check_stabilization(volatility_bps: int, liquidity_remaining_bps: int, spread_bps: int) -> bool:
    return CrisisOracle().check_stabilization(volatility_bps, liquidity_remaining_bps, spread_bps)


def check_liquidity_drain(liquidity_before: int, liquidity_now: int) -> bool:
    return CrisisOracle().check_liquidity_drain(liquidity_before, liquidity_now)
