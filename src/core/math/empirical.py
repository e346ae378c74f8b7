"""
Empirical Statistics — эмпирические оценки распределения score

Оценки, на которых строится precise-стратегия virtual value:
- Эмпирическая CDF: доля исторических score <= point
- PDF: гауссовская kernel density estimate (KDE)
- Ширина окна KDE по правилу Сильвермана: h = n^-0.2 * stddev + eps

Все функции чистые и детерминированные: порядок суммирования фиксирован
порядком входной последовательности.
"""

import bisect
import math
import statistics
from typing import Final, Sequence


# =============================================================================
# CONSTANTS
# =============================================================================

# Добавка к ширине окна KDE (защита от h == 0 при stddev == 0)
BANDWIDTH_EPS: Final[float] = 1e-3

# PDF для пустой выборки
EMPTY_SAMPLE_PDF: Final[float] = 1e-3

_INV_SQRT_2PI: Final[float] = 1.0 / math.sqrt(2.0 * math.pi)


# =============================================================================
# CDF / PDF
# =============================================================================


def empirical_cdf(sorted_scores: Sequence[float], point: float) -> float:
    """
    Эмпирическая CDF: доля выборки <= point.

    Args:
        sorted_scores: Выборка, отсортированная по возрастанию
        point: Точка оценки

    Returns:
        F(point) в [0, 1]; 0.0 для пустой выборки

    Examples:
        >>> empirical_cdf([1.0, 2.0, 3.0, 4.0], 2.0)
        0.5
    """
    n = len(sorted_scores)
    if n == 0:
        return 0.0
    return bisect.bisect_right(sorted_scores, point) / n


def silverman_bandwidth(
    sample_count: int,
    stddev: float,
    eps: float = BANDWIDTH_EPS,
) -> float:
    """
    Ширина окна KDE по правилу Сильвермана (упрощённому).

    h = n^-0.2 * stddev + eps

    Examples:
        >>> round(silverman_bandwidth(32, 2.0), 6)
        1.001
    """
    if sample_count <= 0:
        return eps
    return sample_count ** -0.2 * stddev + eps


def gaussian_kde_pdf(
    scores: Sequence[float],
    point: float,
    bandwidth: float | None = None,
) -> float:
    """
    Оценка плотности гауссовским ядром.

    f(x) = (1/n) * Σ φ((x - s_i) / h) / h

    Args:
        scores: Выборка
        point: Точка оценки
        bandwidth: Ширина окна; по умолчанию — правило Сильвермана
            с популяционным stddev выборки

    Returns:
        Плотность f(point) >= 0; EMPTY_SAMPLE_PDF для пустой выборки
    """
    n = len(scores)
    if n == 0:
        return EMPTY_SAMPLE_PDF

    h = bandwidth
    if not h:
        h = silverman_bandwidth(n, statistics.pstdev(scores))

    density = 0.0
    for score in scores:
        z = (point - score) / h
        density += math.exp(-0.5 * z * z) * _INV_SQRT_2PI / h

    return density / n
