"""Тесты для SlashingEngine и CredibilityUpdater

Покрытие:
- claimed <= verified → нулевой штраф
- claimed > verified → 0 < slash <= max_slash_fraction (approximate и precise)
- Текст обоснования
- Обновление доверия: float и bps формы
"""

import pytest

from src.core.domain import InvalidInputError, PerformanceDistribution, StrategyKind
from src.mechanism.credibility import (
    CredibilityConfig,
    CredibilityUpdater,
    update_credibility,
    update_credibility_bps,
)
from src.mechanism.slashing import SlashingConfig, SlashingEngine
from src.mechanism.virtual_value import VirtualValueCalculator


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def distribution():
    return PerformanceDistribution.from_summary(
        mean=90.0, stddev=5.0, min_score=75.0, max_score=100.0
    )


@pytest.fixture
def engine():
    return SlashingEngine(VirtualValueCalculator(StrategyKind.APPROXIMATE))


@pytest.fixture
def sample_distribution():
    return PerformanceDistribution.from_scores([float(s) for s in range(70, 101)])


# =============================================================================
# ТЕСТЫ: slashing
# =============================================================================


class TestSlashing:
    """Тесты SlashingEngine"""

    @pytest.mark.parametrize("claimed,verified", [(90.0, 90.0), (85.0, 95.0), (75.0, 100.0)])
    def test_honest_or_underclaim_not_slashed(self, engine, distribution, claimed, verified) -> None:
        result = engine.compute(claimed, verified, distribution)
        assert result.slash_amount == 0.0
        assert result.overclaim == 0.0
        assert result.justification == "MM was honest, no slashing"

    def test_overclaim_capped(self, engine, distribution) -> None:
        # φ_u(95) = 89.75, φ_u(90) = 85.0 → overclaim 4.75
        result = engine.compute(95.0, 90.0, distribution)
        assert result.claimed_virtual_value == 89.75
        assert result.verified_virtual_value == 85.0
        assert result.overclaim == pytest.approx(4.75)
        assert result.slash_amount == 0.5
        assert result.justification == "Overclaimed 4.75, slashing 0.50"

    def test_small_overclaim_below_cap(self, engine, distribution) -> None:
        result = engine.compute(90.1, 90.0, distribution)
        assert 0.0 < result.slash_amount < 0.5
        assert result.slash_amount == pytest.approx(0.095)

    @pytest.mark.parametrize(
        "claimed,verified",
        [(76.0, 75.0), (90.5, 80.0), (100.0, 99.0), (99.99, 99.98)],
    )
    def test_overclaim_bounds(self, engine, distribution, claimed, verified) -> None:
        result = engine.compute(claimed, verified, distribution, max_slash_fraction=0.3)
        assert 0.0 < result.slash_amount <= 0.3

    def test_config_cap(self, distribution) -> None:
        engine = SlashingEngine(
            VirtualValueCalculator(StrategyKind.APPROXIMATE), SlashingConfig(max_slash_fraction=0.1)
        )
        assert engine.compute(95.0, 90.0, distribution).slash_amount == 0.1

    def test_invalid_cap_rejected(self, engine, distribution) -> None:
        with pytest.raises(InvalidInputError, match="max_slash_fraction"):
            engine.compute(95.0, 90.0, distribution, max_slash_fraction=1.5)
        with pytest.raises(ValueError):
            SlashingConfig(max_slash_fraction=-0.1)

    def test_non_finite_score_rejected(self, engine, distribution) -> None:
        with pytest.raises(InvalidInputError):
            engine.compute(float("inf"), 90.0, distribution)


class TestPreciseSlashing:
    """SlashingEngine() по умолчанию: precise стратегия на выборке"""

    def test_default_strategy_is_precise(self) -> None:
        assert SlashingEngine().calculator.kind == StrategyKind.PRECISE

    @pytest.mark.parametrize("claimed,verified", [(90.0, 90.0), (85.0, 95.0), (70.0, 100.0)])
    def test_honest_or_underclaim_not_slashed(self, sample_distribution, claimed, verified) -> None:
        result = SlashingEngine().compute(claimed, verified, sample_distribution)
        assert result.slash_amount == 0.0
        assert result.overclaim == 0.0
        assert result.justification == "MM was honest, no slashing"

    @pytest.mark.parametrize(
        "claimed,verified",
        [(80.0, 72.0), (95.0, 85.0), (100.0, 90.0), (88.0, 75.0)],
    )
    def test_overclaim_bounds(self, sample_distribution, claimed, verified) -> None:
        result = SlashingEngine().compute(
            claimed, verified, sample_distribution, max_slash_fraction=0.3
        )
        assert result.claimed_virtual_value > result.verified_virtual_value
        assert 0.0 < result.slash_amount <= 0.3
        assert result.justification.startswith("Overclaimed ")

    def test_overclaim_at_default_cap(self, sample_distribution) -> None:
        result = SlashingEngine().compute(95.0, 85.0, sample_distribution)
        assert result.slash_amount == 0.5

    def test_summary_only_distribution_rejected(self, distribution) -> None:
        with pytest.raises(InvalidInputError, match="historical samples"):
            SlashingEngine().compute(95.0, 90.0, distribution)


# =============================================================================
# ТЕСТЫ: credibility
# =============================================================================


class TestCredibility:
    """Тесты обновления доверия"""

    def test_reference_update(self) -> None:
        assert update_credibility(prior=500, outcome=1000, weight=0.7) == pytest.approx(850)

    def test_reference_update_bps(self) -> None:
        assert update_credibility_bps(prior=500, outcome=1000, weight_bps=7000) == 850

    def test_bps_floor_division(self) -> None:
        # (3333 * 1 + 6667 * 0) // 10000 = 0
        assert update_credibility_bps(0, 1, 3333) == 0

    @pytest.mark.parametrize("weight", [0.0, 0.25, 1.0])
    def test_convex_combination_bounds(self, weight) -> None:
        result = update_credibility(0.2, 0.9, weight)
        assert 0.2 - 1e-12 <= result <= 0.9 + 1e-12

    def test_weight_extremes(self) -> None:
        assert update_credibility(0.2, 0.9, 0.0) == 0.2
        assert update_credibility(0.2, 0.9, 1.0) == 0.9

    def test_invalid_weight(self) -> None:
        with pytest.raises(InvalidInputError, match="weight"):
            update_credibility(0.5, 1.0, 1.2)
        with pytest.raises(InvalidInputError, match="weight_bps"):
            update_credibility_bps(500, 1000, 10_001)

    def test_updater_defaults(self) -> None:
        updater = CredibilityUpdater()
        assert updater.update(500, 1000) == pytest.approx(850)
        assert updater.update_bps(500, 1000) == 850
        assert updater.update(500, 1000, weight=0.5) == pytest.approx(750)

    def test_invalid_config(self) -> None:
        with pytest.raises(ValueError):
            CredibilityConfig(weight=1.1)
        with pytest.raises(ValueError):
            CredibilityConfig(weight_bps=-1)
