"""
Snapshot Store — in-memory хранилище снапшота механизма

Семантика update-then-publish: новый снапшот строится целиком и заменяет
предыдущий одной операцией под lock. Читатели получают неизменяемый
MechanismSnapshot и могут наблюдать устаревший, но согласованный снапшот.

Epoch распределения и epoch границ строго возрастают независимо друг от
друга; публикация с epoch <= текущего отклоняется (StaleEpochError).
"""

import logging
import threading
from typing import Optional

from pydantic import BaseModel, Field

from src.core.domain.distribution import PerformanceDistribution
from src.core.domain.errors import StaleEpochError
from src.core.domain.tiers import TierBoundaries
from src.core.math.numerical_safeguards import validate_finite

logger = logging.getLogger(__name__)


class MechanismSnapshot(BaseModel):
    """Согласованный снапшот распределения и границ."""

    distribution: Optional[PerformanceDistribution] = Field(
        None, description="Текущее распределение"
    )
    boundaries: Optional[TierBoundaries] = Field(None, description="Текущие границы tiers")
    version: int = Field(default=0, ge=0, description="Счётчик публикаций")

    model_config = {"frozen": True}

    @property
    def distribution_epoch(self) -> Optional[int]:
        return self.distribution.epoch if self.distribution is not None else None

    @property
    def boundaries_epoch(self) -> Optional[int]:
        return self.boundaries.epoch if self.boundaries is not None else None


class SnapshotStore:
    """Хранилище снапшота с атомарной заменой."""

    def __init__(self, initial: MechanismSnapshot | None = None):
        self._lock = threading.Lock()
        self._snapshot = initial or MechanismSnapshot()

    def current(self) -> MechanismSnapshot:
        """Текущий снапшот (неизменяемый)."""
        with self._lock:
            return self._snapshot

    def publish_distribution(self, distribution: PerformanceDistribution) -> MechanismSnapshot:
        """Замена распределения.

        Raises:
            StaleEpochError: Если epoch не больше текущего
        """
        with self._lock:
            current = self._snapshot
            self._check_epoch("distribution", current.distribution_epoch, distribution.epoch)
            self._snapshot = current.model_copy(
                update={"distribution": distribution, "version": current.version + 1}
            )
            snapshot = self._snapshot

        logger.info(
            "published distribution epoch=%d samples=%d version=%d",
            distribution.epoch,
            distribution.sample_count,
            snapshot.version,
        )
        return snapshot

    def publish_boundaries(
        self, new_upper: float, new_lower: float, epoch: int
    ) -> TierBoundaries:
        """Публикация новых корней.

        Raises:
            ValueError: Если корни NaN/Inf
            StaleEpochError: Если epoch не больше текущего
        """
        validate_finite(new_upper, "new_upper")
        validate_finite(new_lower, "new_lower")
        boundaries = TierBoundaries.from_roots(new_upper, new_lower, epoch=epoch)
        self.publish(boundaries)
        return boundaries

    def publish(self, boundaries: TierBoundaries) -> MechanismSnapshot:
        """Замена границ готовым TierBoundaries (например, из TierBoundarySolver).

        Raises:
            StaleEpochError: Если epoch не больше текущего
        """
        with self._lock:
            current = self._snapshot
            self._check_epoch("boundaries", current.boundaries_epoch, boundaries.epoch)
            self._snapshot = current.model_copy(
                update={"boundaries": boundaries, "version": current.version + 1}
            )
            snapshot = self._snapshot

        logger.info(
            "published boundaries epoch=%d upper=%.6f lower=%.6f gap=%.6f version=%d",
            boundaries.epoch,
            boundaries.upper_root,
            boundaries.lower_root,
            boundaries.gap_width,
            snapshot.version,
        )
        return snapshot

    @staticmethod
    def _check_epoch(kind: str, current_epoch: Optional[int], new_epoch: int) -> None:
        if current_epoch is not None and new_epoch <= current_epoch:
            raise StaleEpochError(
                f"{kind} epoch must increase: current={current_epoch}, got {new_epoch}"
            )
