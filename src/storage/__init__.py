"""Storage — снапшот распределения и границ tiers с атомарной заменой."""

from .snapshot_store import MechanismSnapshot, SnapshotStore

__all__ = [
    "MechanismSnapshot",
    "SnapshotStore",
]
