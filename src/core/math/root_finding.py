"""
Root Finding — бисекция с фиксированным бюджетом итераций

Бисекция никогда не адаптирует число шагов: максимум max_iterations
вычислений функции, досрочный выход при |f(mid)| < tolerance. Стоимость
вызова ограничена сверху и предсказуема.

Направление сужения задаётся явно предикатом move_low: если move_low(f(mid))
истинно, корень ищется выше mid (low = mid), иначе ниже (high = mid).
"""

from dataclasses import dataclass
from typing import Callable, Final

from src.core.math.numerical_safeguards import validate_finite

# =============================================================================
# CONSTANTS
# =============================================================================

DEFAULT_MAX_ITERATIONS: Final[int] = 100
DEFAULT_TOLERANCE: Final[float] = 0.1


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class BisectionResult:
    """Результат бисекции."""

    root: float
    value_at_root: float | None  # None если бюджет исчерпан без досрочного выхода
    iterations: int
    converged: bool  # True если сработал досрочный выход по tolerance


# =============================================================================
# BISECTION
# =============================================================================


def bisect_fixed(
    func: Callable[[float], float],
    low: float,
    high: float,
    move_low: Callable[[float], bool],
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    tolerance: float = DEFAULT_TOLERANCE,
) -> BisectionResult:
    """
    Бисекция на [low, high] с фиксированным бюджетом итераций.

    Args:
        func: Исследуемая функция
        low: Левая граница
        high: Правая граница
        move_low: Предикат по f(mid): True → low = mid, False → high = mid
        max_iterations: Максимум итераций (> 0)
        tolerance: Порог досрочного выхода по |f(mid)|

    Returns:
        BisectionResult; при исчерпании бюджета root = середина
        финального интервала

    Raises:
        ValueError: Если границы невалидны или бюджет не положителен
    """
    validate_finite(low, "low")
    validate_finite(high, "high")
    if low > high:
        raise ValueError(f"low must be <= high, got low={low}, high={high}")
    if max_iterations <= 0:
        raise ValueError(f"max_iterations must be positive, got {max_iterations}")
    if tolerance < 0:
        raise ValueError(f"tolerance must be non-negative, got {tolerance}")

    for iteration in range(1, max_iterations + 1):
        mid = (low + high) / 2.0
        value = func(mid)

        if abs(value) < tolerance:
            return BisectionResult(
                root=mid,
                value_at_root=value,
                iterations=iteration,
                converged=True,
            )

        if move_low(value):
            low = mid
        else:
            high = mid

    return BisectionResult(
        root=(low + high) / 2.0,
        value_at_root=None,
        iterations=max_iterations,
        converged=False,
    )
