"""
Integration — численное интегрирование с фиксированным бюджетом

Два метода с разным профилем стоимости:
- simpson_composite: составная формула Симпсона, фиксированное чётное число
  сегментов, константная стоимость (segments + 1 вычислений функции)
- unit_step_sum: левая сумма Римана с фиксированным шагом, стоимость
  пропорциональна длине интервала

Расхождение методов ограничено сверху величиной
    step * max|f'| * (b - a)
поэтому результаты сравниваются с допуском, а не побитово.

ФОРМУЛЫ:
    Simpson: (h/3) * [f(x0) + 4f(x1) + 2f(x2) + ... + 4f(x_{n-1}) + f(x_n)]
    Unit step: Σ f(x_k) * min(step, b - x_k),  x_k = a + k*step
"""

import math
from typing import Callable, Final

from src.core.math.numerical_safeguards import validate_finite

# =============================================================================
# CONSTANTS
# =============================================================================

DEFAULT_SIMPSON_SEGMENTS: Final[int] = 100
DEFAULT_UNIT_STEP: Final[float] = 1.0


# =============================================================================
# SIMPSON
# =============================================================================


def simpson_composite(
    func: Callable[[float], float],
    a: float,
    b: float,
    segments: int = DEFAULT_SIMPSON_SEGMENTS,
) -> float:
    """
    Составная формула Симпсона на [a, b].

    Args:
        func: Подынтегральная функция
        a: Нижний предел
        b: Верхний предел
        segments: Число сегментов (чётное, > 0)

    Returns:
        Приближение ∫_a^b f(x) dx; 0.0 если a == b

    Raises:
        ValueError: Если segments нечётно или не положительно

    Examples:
        >>> simpson_composite(lambda x: x * x, 0.0, 3.0, segments=2)
        9.0
    """
    if segments <= 0 or segments % 2 != 0:
        raise ValueError(f"segments must be a positive even number, got {segments}")
    validate_finite(a, "a")
    validate_finite(b, "b")

    if a == b:
        return 0.0

    h = (b - a) / segments
    total = 0.0
    for i in range(segments + 1):
        y = func(a + i * h)
        if i == 0 or i == segments:
            total += y
        elif i % 2 == 1:
            total += 4.0 * y
        else:
            total += 2.0 * y

    return (h / 3.0) * total


# =============================================================================
# UNIT STEP
# =============================================================================


def unit_step_sum(
    func: Callable[[float], float],
    a: float,
    b: float,
    step: float = DEFAULT_UNIT_STEP,
) -> float:
    """
    Левая сумма Римана с фиксированным шагом на [a, b].

    Последний шаг усечён до b, поэтому для неотрицательной f результат
    монотонно не убывает по b.

    Args:
        func: Подынтегральная функция
        a: Нижний предел
        b: Верхний предел (b >= a)
        step: Шаг (> 0)

    Returns:
        Σ f(x_k) * min(step, b - x_k); 0.0 если b <= a

    Examples:
        >>> unit_step_sum(lambda x: 2.0, 0.0, 2.5)
        5.0
    """
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")
    validate_finite(a, "a")
    validate_finite(b, "b")

    if b <= a:
        return 0.0

    # Узлы считаются от a по индексу, без накопления ошибки x += step
    full_steps = math.floor((b - a) / step)
    total = 0.0
    for k in range(full_steps):
        total += func(a + k * step) * step

    tail_start = a + full_steps * step
    tail = b - tail_start
    if tail > 0:
        total += func(tail_start) * tail

    return total
