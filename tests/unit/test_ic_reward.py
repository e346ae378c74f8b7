"""Тесты для ICRewardIntegrator

Покрытие:
- Монотонность cumulative reward: {mean=90, stddev=5, min=75, max=100} (unit step)
  и выборка 70..100 (Simpson, precise)
- Границы интегрирования (score < min, score > max)
- Marginal reward = upper-side virtual value
- Расхождение Simpson / unit step в пределах step * max slope * range
- Выбор метода по стратегии, валидация config
"""

import pytest

from src.core.domain import InvalidInputError, PerformanceDistribution, StrategyKind
from src.mechanism.ic_reward import ICRewardConfig, ICRewardIntegrator, IntegrationMethod
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
def approximate_calculator():
    return VirtualValueCalculator(StrategyKind.APPROXIMATE)


@pytest.fixture
def integrator(approximate_calculator):
    return ICRewardIntegrator(approximate_calculator)


# =============================================================================
# ТЕСТЫ: cumulative reward
# =============================================================================


class TestCumulativeReward:
    """Тесты cumulative_reward"""

    def test_monotone_reference_points(self, integrator, distribution) -> None:
        r80 = integrator.cumulative_reward(80.0, distribution)
        r90 = integrator.cumulative_reward(90.0, distribution)
        r95 = integrator.cumulative_reward(95.0, distribution)
        assert r80 <= r90 <= r95
        assert r80 > 0.0

    def test_monotone_on_grid(self, integrator, distribution) -> None:
        scores = [70.0 + 0.5 * i for i in range(70)]
        rewards = [integrator.cumulative_reward(s, distribution) for s in scores]
        assert all(a <= b for a, b in zip(rewards, rewards[1:]))

    def test_below_min_is_zero(self, integrator, distribution) -> None:
        assert integrator.cumulative_reward(74.9, distribution) == 0.0
        assert integrator.cumulative_reward(-10.0, distribution) == 0.0

    def test_at_min_is_zero(self, integrator, distribution) -> None:
        assert integrator.cumulative_reward(75.0, distribution) == 0.0

    def test_capped_at_max(self, integrator, distribution) -> None:
        at_max = integrator.cumulative_reward(100.0, distribution)
        assert integrator.cumulative_reward(150.0, distribution) == at_max

    def test_unit_step_value(self, integrator, distribution) -> None:
        """Левая сумма по узлам 75..79: φ_u(s) = s - 5 - 0.05 * (90 - s)"""
        expected = sum(s - 5.0 - 0.05 * (90.0 - s) for s in (75, 76, 77, 78, 79))
        assert integrator.cumulative_reward(80.0, distribution) == pytest.approx(expected)

    def test_precise_reward_non_negative(self) -> None:
        dist = PerformanceDistribution.from_scores([float(s) for s in range(70, 101)])
        integrator = ICRewardIntegrator()
        assert integrator.method == IntegrationMethod.SIMPSON
        for score in (70.0, 80.0, 90.0, 100.0):
            assert integrator.cumulative_reward(score, dist) >= 0.0

    def test_precise_monotone_on_grid(self) -> None:
        dist = PerformanceDistribution.from_scores([float(s) for s in range(70, 101)])
        integrator = ICRewardIntegrator()
        scores = [70.0 + 0.5 * i for i in range(65)]
        rewards = [integrator.cumulative_reward(s, dist) for s in scores]
        assert all(a <= b for a, b in zip(rewards, rewards[1:]))
        assert rewards[-1] == rewards[-3]  # 101.0 и 102.0 обрезаны по max_score

    def test_non_finite_score_rejected(self, integrator, distribution) -> None:
        with pytest.raises(InvalidInputError):
            integrator.cumulative_reward(float("nan"), distribution)


# =============================================================================
# ТЕСТЫ: marginal reward
# =============================================================================


class TestMarginalReward:
    """Тесты marginal_reward"""

    def test_equals_upper_virtual_value(
        self, integrator, approximate_calculator, distribution
    ) -> None:
        for score in (75.0, 88.0, 95.0):
            assert integrator.marginal_reward(score, distribution) == (
                approximate_calculator.upper_value(score, distribution)
            )

    def test_non_negative(self, integrator, distribution) -> None:
        assert integrator.marginal_reward(0.0, distribution) >= 0.0


# =============================================================================
# ТЕСТЫ: методы интегрирования
# =============================================================================


class TestIntegrationMethods:
    """Тесты согласованности методов"""

    def test_default_method_follows_strategy(self, approximate_calculator) -> None:
        assert ICRewardIntegrator(approximate_calculator).method == IntegrationMethod.UNIT_STEP
        assert ICRewardIntegrator().method == IntegrationMethod.SIMPSON

    def test_simpson_and_unit_step_diverge_within_bound(
        self, approximate_calculator, distribution
    ) -> None:
        simpson = ICRewardIntegrator(approximate_calculator, method=IntegrationMethod.SIMPSON)
        unit = ICRewardIntegrator(approximate_calculator, method=IntegrationMethod.UNIT_STEP)

        step = ICRewardConfig().unit_step
        max_slope = 1.05  # наклон φ_u ниже mean
        for score in (80.0, 90.0, 95.0, 100.0):
            a = simpson.cumulative_reward(score, distribution)
            b = unit.cumulative_reward(score, distribution)
            bound = step * max_slope * (score - distribution.min_score)
            assert abs(a - b) <= bound

    def test_simpson_exact_for_piecewise_linear_segment(
        self, approximate_calculator, distribution
    ) -> None:
        """На [75, 90] φ_u линейна: интеграл = 15 * (φ(75) + φ(90)) / 2"""
        simpson = ICRewardIntegrator(approximate_calculator, method=IntegrationMethod.SIMPSON)
        expected = 15.0 * (69.25 + 85.0) / 2.0
        assert simpson.cumulative_reward(90.0, distribution) == pytest.approx(expected, rel=1e-6)

    @pytest.mark.parametrize(
        "kwargs", [{"simpson_segments": 0}, {"simpson_segments": 99}, {"unit_step": 0.0}]
    )
    def test_invalid_config(self, kwargs) -> None:
        with pytest.raises(ValueError):
            ICRewardConfig(**kwargs)
