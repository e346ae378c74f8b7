"""Crisis — оракул кризиса по цене, ликвидности и спреду."""

from .oracle import (
    CrisisOracle,
    OracleConfig,
    calculate_liquidity_remaining,
    calculate_volatility,
    check_liquidity_drain,
    check_stabilization,
    detect_crisis,
)

__all__ = [
    "CrisisOracle",
    "OracleConfig",
    "calculate_liquidity_remaining",
    "calculate_volatility",
    "check_liquidity_drain",
    "check_stabilization",
    "detect_crisis",
]
