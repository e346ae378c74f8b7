"""
Core domain models, mathematical primitives, and contracts.

Building blocks of the market-maker tiering mechanism that are independent
of the host execution and storage layers.
"""
