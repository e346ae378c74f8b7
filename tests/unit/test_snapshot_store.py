"""Тесты для SnapshotStore

Покрытие:
- Публикация распределения и границ
- Строгая монотонность epoch (StaleEpochError)
- Неизменяемость опубликованного снапшота
- Согласованность снапшота при конкурентном чтении
"""

import threading

import pytest
from pydantic import ValidationError

from src.core.domain import PerformanceDistribution, StaleEpochError, StrategyKind
from src.mechanism.tier_boundaries import compute_tier_boundaries
from src.storage.snapshot_store import MechanismSnapshot, SnapshotStore


def make_distribution(epoch: int) -> PerformanceDistribution:
    """Helper: summary-распределение для epoch."""
    return PerformanceDistribution.from_summary(
        mean=90.0, stddev=5.0, min_score=75.0, max_score=100.0, sample_count=25, epoch=epoch
    )


@pytest.fixture
def store():
    return SnapshotStore()


class TestPublish:
    """Тесты публикации"""

    def test_initial_snapshot_empty(self, store) -> None:
        snapshot = store.current()
        assert snapshot.distribution is None
        assert snapshot.boundaries is None
        assert snapshot.version == 0

    def test_publish_boundaries(self, store) -> None:
        boundaries = store.publish_boundaries(95.0, 80.0, epoch=1)

        assert boundaries.gap_width == pytest.approx(15.0)
        snapshot = store.current()
        assert snapshot.boundaries == boundaries
        assert snapshot.boundaries_epoch == 1
        assert snapshot.version == 1

    def test_publish_distribution(self, store) -> None:
        dist = make_distribution(3)
        snapshot = store.publish_distribution(dist)
        assert snapshot.distribution == dist
        assert snapshot.distribution_epoch == 3
        assert store.current() is snapshot

    def test_publish_solved_boundaries(self, store) -> None:
        dist = make_distribution(2)
        store.publish_distribution(dist)
        store.publish(compute_tier_boundaries(dist, StrategyKind.APPROXIMATE))

        snapshot = store.current()
        assert snapshot.distribution_epoch == 2
        assert snapshot.boundaries_epoch == 2
        assert snapshot.version == 2

    @pytest.mark.parametrize("stale_epoch", [0, 5])
    def test_stale_boundaries_rejected(self, store, stale_epoch) -> None:
        store.publish_boundaries(95.0, 80.0, epoch=5)
        with pytest.raises(StaleEpochError, match="boundaries epoch must increase"):
            store.publish_boundaries(96.0, 81.0, epoch=stale_epoch)
        assert store.current().boundaries.upper_root == 95.0

    def test_stale_distribution_rejected(self, store) -> None:
        store.publish_distribution(make_distribution(4))
        with pytest.raises(StaleEpochError, match="distribution epoch"):
            store.publish_distribution(make_distribution(4))

    def test_epochs_independent(self, store) -> None:
        store.publish_distribution(make_distribution(10))
        store.publish_boundaries(95.0, 80.0, epoch=1)
        assert store.current().boundaries_epoch == 1

    def test_non_finite_roots_rejected(self, store) -> None:
        with pytest.raises(ValueError, match="new_upper"):
            store.publish_boundaries(float("nan"), 80.0, epoch=1)

    def test_snapshot_immutable(self, store) -> None:
        snapshot = store.current()
        with pytest.raises(ValidationError):
            snapshot.version = 99

    def test_old_snapshot_unchanged_after_publish(self, store) -> None:
        store.publish_boundaries(95.0, 80.0, epoch=1)
        old = store.current()
        store.publish_boundaries(97.0, 82.0, epoch=2)
        assert old.boundaries.upper_root == 95.0
        assert store.current().boundaries.upper_root == 97.0

    def test_initial_snapshot_argument(self) -> None:
        initial = MechanismSnapshot(distribution=make_distribution(7))
        store = SnapshotStore(initial)
        with pytest.raises(StaleEpochError):
            store.publish_distribution(make_distribution(7))


class TestConcurrency:
    """Конкурентное чтение во время публикаций"""

    def test_readers_see_consistent_snapshots(self, store) -> None:
        errors = []
        done = threading.Event()

        def reader() -> None:
            while not done.is_set():
                snapshot = store.current()
                b = snapshot.boundaries
                if b is None:
                    continue
                # Каждая публикация: upper = 100 + epoch, lower = epoch
                if b.upper_root != 100.0 + b.epoch or b.lower_root != float(b.epoch):
                    errors.append(b)

        threads = [threading.Thread(target=reader) for _ in range(4)]
        for t in threads:
            t.start()

        for epoch in range(1, 300):
            store.publish_boundaries(100.0 + epoch, float(epoch), epoch)

        done.set()
        for t in threads:
            t.join()

        assert errors == []
        assert store.current().boundaries_epoch == 299
        assert store.current().version == 299
