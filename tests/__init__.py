"""
Test suite for the market-maker tiering mechanism

Contains:
- tests/unit/          : Unit tests for individual modules
"""
