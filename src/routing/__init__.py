"""Routing — распределение ордеров между MM по tiers."""

from .smart_router import RouterConfig, SmartRouter, route

__all__ = [
    "RouterConfig",
    "SmartRouter",
    "route",
]
