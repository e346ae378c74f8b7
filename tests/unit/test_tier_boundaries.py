"""Тесты для TierBoundarySolver и allocate_tier

Покрытие:
- Корни на summary-распределении (approximate)
- Корни на выборке (precise): upper у max, lower у min, gap, epoch, martyr_minimum/sovereign_maximum
- Аллокация: включительные границы, no-trade gap, перекрытие корней
- Ошибки: пустая выборка, вырожденное распределение, невалидный config
"""

import pytest

from src.core.domain import (
    BoundaryUndefinedError,
    InvalidInputError,
    PerformanceDistribution,
    StrategyKind,
    TierBoundaries,
    TierDecision,
)
from src.mechanism.tier_boundaries import (
    TierBoundarySolver,
    TierSolverConfig,
    allocate_tier,
    compute_tier_boundaries,
)
from src.mechanism.virtual_value import VirtualValueCalculator


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def summary_distribution():
    """Summary-распределение с sample_count > 0."""
    return PerformanceDistribution.from_summary(
        mean=90.0, stddev=5.0, min_score=75.0, max_score=100.0, sample_count=25, epoch=4
    )


@pytest.fixture
def sample_distribution():
    return PerformanceDistribution.from_scores(
        [float(s) for s in range(70, 101)], epoch=7
    )


@pytest.fixture
def approximate_solver():
    return TierBoundarySolver(VirtualValueCalculator(StrategyKind.APPROXIMATE))


# =============================================================================
# ТЕСТЫ: корни
# =============================================================================


class TestSolve:
    """Тесты поиска корней"""

    def test_approximate_roots_span_range(self, approximate_solver, summary_distribution) -> None:
        """φ_u > 0 на всём диапазоне → upper у max; φ_l < 0 → lower у min"""
        boundaries = approximate_solver.solve(summary_distribution)

        assert boundaries.upper_root == pytest.approx(100.0, abs=1e-6)
        assert boundaries.lower_root == pytest.approx(75.0, abs=1e-6)
        assert boundaries.gap_width == pytest.approx(25.0, abs=1e-6)
        assert boundaries.epoch == 4
        assert boundaries.is_valid

    def test_martyr_minimum_and_sovereign_maximum(
        self, approximate_solver, summary_distribution
    ) -> None:
        boundaries = approximate_solver.solve(summary_distribution)
        assert boundaries.martyr_minimum == max(75.0, boundaries.upper_root)
        assert boundaries.sovereign_maximum == min(100.0, boundaries.lower_root)

    def test_precise_roots_span_range(self, sample_distribution) -> None:
        """Выборка 70..100: φ_u > 0 и φ_l < 0 во всех узлах бисекции"""
        boundaries = compute_tier_boundaries(sample_distribution)

        assert boundaries.upper_root == pytest.approx(100.0, abs=1e-6)
        assert boundaries.lower_root == pytest.approx(70.0, abs=1e-6)
        assert boundaries.gap_width == pytest.approx(30.0, abs=1e-6)
        assert boundaries.martyr_minimum == pytest.approx(100.0, abs=1e-6)
        assert boundaries.sovereign_maximum == pytest.approx(70.0, abs=1e-6)
        assert boundaries.epoch == 7
        assert boundaries.is_valid

    def test_precise_root_search_exhausts_budget(self, sample_distribution) -> None:
        solver = TierBoundarySolver(VirtualValueCalculator(StrategyKind.PRECISE))
        upper = solver.find_upper_root(sample_distribution)
        lower = solver.find_lower_root(sample_distribution)

        assert upper.iterations == 100 and not upper.converged
        assert lower.iterations == 100 and not lower.converged

    def test_solver_is_deterministic(self, sample_distribution) -> None:
        first = compute_tier_boundaries(sample_distribution)
        second = compute_tier_boundaries(sample_distribution)
        assert first == second

    def test_iteration_budget_respected(self, approximate_solver, summary_distribution) -> None:
        upper = approximate_solver.find_upper_root(summary_distribution)
        assert upper.iterations <= 100

        small = TierBoundarySolver(
            VirtualValueCalculator(StrategyKind.APPROXIMATE),
            TierSolverConfig(max_iterations=5),
        )
        result = small.find_upper_root(summary_distribution)
        assert result.iterations == 5
        assert not result.converged

    def test_empty_sample_rejected(self, approximate_solver) -> None:
        dist = PerformanceDistribution.from_summary(
            mean=90.0, stddev=5.0, min_score=75.0, max_score=100.0, sample_count=0
        )
        with pytest.raises(InvalidInputError, match="empty sample set"):
            approximate_solver.solve(dist)

    def test_degenerate_distribution_rejected(self) -> None:
        dist = PerformanceDistribution.from_scores([5.0, 5.0, 5.0])
        with pytest.raises(BoundaryUndefinedError, match="degenerate"):
            compute_tier_boundaries(dist)

    @pytest.mark.parametrize("kwargs", [{"max_iterations": 0}, {"tolerance": -0.1}])
    def test_invalid_config(self, kwargs) -> None:
        with pytest.raises(ValueError):
            TierSolverConfig(**kwargs)


# =============================================================================
# ТЕСТЫ: аллокация
# =============================================================================


class TestAllocateTier:
    """Тесты allocate_tier"""

    @pytest.fixture
    def boundaries(self):
        return TierBoundaries.from_roots(upper_root=95.0, lower_root=80.0)

    @pytest.mark.parametrize(
        "score,expected",
        [
            (100.0, TierDecision.MARTYR),
            (95.0, TierDecision.MARTYR),
            (94.999, TierDecision.REJECT),
            (87.5, TierDecision.REJECT),
            (80.001, TierDecision.REJECT),
            (80.0, TierDecision.SOVEREIGN),
            (10.0, TierDecision.SOVEREIGN),
        ],
    )
    def test_allocation(self, boundaries, score, expected) -> None:
        assert allocate_tier(score, boundaries) == expected

    def test_overlapping_roots_prefer_martyr(self) -> None:
        boundaries = TierBoundaries.from_roots(upper_root=80.0, lower_root=95.0)
        assert allocate_tier(85.0, boundaries) == TierDecision.MARTYR
        assert allocate_tier(79.0, boundaries) == TierDecision.SOVEREIGN

    def test_solved_boundaries_allocation(self, approximate_solver, summary_distribution) -> None:
        boundaries = approximate_solver.solve(summary_distribution)
        assert allocate_tier(boundaries.upper_root, boundaries) == TierDecision.MARTYR
        assert allocate_tier(boundaries.lower_root, boundaries) == TierDecision.SOVEREIGN
        assert allocate_tier(90.0, boundaries) == TierDecision.REJECT

    def test_non_finite_score_rejected(self, boundaries) -> None:
        with pytest.raises(InvalidInputError):
            allocate_tier(float("nan"), boundaries)
