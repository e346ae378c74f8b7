"""
Numerical Safeguards — Safe Math Primitives

Модуль обеспечивает численную устойчивость всех вычислений механизма:
- Безопасное деление (float) с документированным fallback вместо исключения
- Целочисленная fixed-point арифметика для дешёвого (approximate) контекста
- NaN/Inf санитизация для предотвращения распространения невалидных значений
- Валидация входных параметров

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Деление на ноль никогда не происходит (возвращается fallback)
2. NaN/Inf никогда не пропагируют (заменяются на fallback)
3. Все операции детерминированы и воспроизводимы
"""

import math
from typing import Final

# =============================================================================
# EPSILON-ПАРАМЕТРЫ
# =============================================================================

# Epsilon для общих вычислений (знаменатели в score-единицах)
EPS_CALC: Final[float] = 1e-12

# Базисные пункты: 10_000 bps = 100%
BPS_DENOM: Final[int] = 10_000

# Масштаб fixed-point представления score (4 знака после запятой)
FIXED_POINT_SCALE: Final[int] = 10_000


# =============================================================================
# БЕЗОПАСНОЕ ДЕЛЕНИЕ
# =============================================================================


def denom_safe_unsigned(value: float, eps: float = EPS_CALC) -> float:
    """
    Безопасный беззнаковый делитель с epsilon-защитой.

    denom_safe_unsigned(x, eps) = max(abs(x), eps)

    Args:
        value: Исходное значение (может быть любым)
        eps: Минимальный абсолютный порог (default: EPS_CALC)

    Returns:
        Безопасный делитель >= eps (всегда положительный)

    Examples:
        >>> denom_safe_unsigned(10.0, 1e-6)
        10.0
        >>> denom_safe_unsigned(0.0, 1e-6)
        1e-06
    """
    if eps <= 0:
        raise ValueError(f"eps must be positive, got {eps}")

    return max(abs(value), eps)


def safe_divide(
    numerator: float,
    denominator: float,
    eps: float = EPS_CALC,
    fallback: float = 0.0,
) -> float:
    """
    Безопасное деление с защитой от деления на ноль и NaN/Inf.

    ВАЖНО: если denominator точно равен 0.0, возвращается fallback.
    Для малых ненулевых значений знаменатель ограничивается eps с
    сохранением знака.

    Args:
        numerator: Числитель
        denominator: Знаменатель
        eps: Минимальный абсолютный порог для знаменателя
        fallback: Значение при делении на ноль (default: 0.0)

    Returns:
        Результат деления или fallback

    Examples:
        >>> safe_divide(10.0, 2.0)
        5.0
        >>> safe_divide(10.0, 0.0, fallback=-1.0)
        -1.0
    """
    num_clean = sanitize_float(numerator, fallback=0.0)
    denom_raw = sanitize_float(denominator, fallback=0.0)

    if denom_raw == 0.0:
        return fallback

    denom_safe = denom_safe_unsigned(denom_raw, eps)
    if denom_raw < 0:
        denom_safe = -denom_safe

    return sanitize_float(num_clean / denom_safe, fallback=fallback)


# =============================================================================
# FIXED-POINT АРИФМЕТИКА
# =============================================================================


def to_fixed(value: float, scale: int = FIXED_POINT_SCALE) -> int:
    """
    Конверсия float → fixed-point int (round half away from zero).

    Examples:
        >>> to_fixed(87.5)
        875000
        >>> to_fixed(-0.00005)
        -1
    """
    if not is_valid_float(value):
        raise ValueError(f"value must be a valid float (not NaN/Inf), got {value}")
    if scale <= 0:
        raise ValueError(f"scale must be positive, got {scale}")

    scaled = value * scale
    if scaled >= 0:
        return int(math.floor(scaled + 0.5))
    return int(math.ceil(scaled - 0.5))


def from_fixed(value: int, scale: int = FIXED_POINT_SCALE) -> float:
    """Конверсия fixed-point int → float."""
    if scale <= 0:
        raise ValueError(f"scale must be positive, got {scale}")
    return value / scale


def mul_div(a: int, b: int, denominator: int, fallback: int = 0) -> int:
    """
    Целочисленное (a * b) // denominator с защитой знаменателя.

    Умножение выполняется до деления, промежуточный результат не теряет
    точность (Python int не переполняется). Округление — floor.

    Args:
        a: Первый множитель
        b: Второй множитель
        denominator: Делитель
        fallback: Результат при denominator == 0

    Returns:
        floor(a * b / denominator) или fallback

    Examples:
        >>> mul_div(7000, 1000, 10_000)
        700
        >>> mul_div(5, 5, 0, fallback=5)
        5
    """
    if denominator == 0:
        return fallback
    return (a * b) // denominator


# =============================================================================
# NaN/Inf САНИТИЗАЦИЯ
# =============================================================================


def is_valid_float(value: float) -> bool:
    """True если значение конечно (не NaN, не Inf)."""
    return math.isfinite(value)


def sanitize_float(value: float, fallback: float = 0.0) -> float:
    """
    Санитизация float: замена NaN/Inf на fallback значение.

    Examples:
        >>> sanitize_float(10.0)
        10.0
        >>> sanitize_float(float('nan'))
        0.0
    """
    if is_valid_float(value):
        return value
    return fallback


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


#
# error_cls позволяет вызывающему модулю поднимать собственный подкласс
# ValueError (например, InvalidInputError) без обёрток try/except.


def validate_finite(
    value: float,
    name: str,
    error_cls: type[ValueError] = ValueError,
) -> None:
    """
    Валидация, что значение конечно.

    Raises:
        error_cls: Если value NaN/Inf
    """
    if not is_valid_float(value):
        raise error_cls(f"{name} must be a valid float (not NaN/Inf), got {value}")


def validate_non_negative(
    value: float,
    name: str,
    error_cls: type[ValueError] = ValueError,
) -> None:
    """
    Валидация, что значение неотрицательное.

    Raises:
        error_cls: Если value < 0 или NaN/Inf
    """
    validate_finite(value, name, error_cls)

    if value < 0:
        raise error_cls(f"{name} must be non-negative, got {value}")


def validate_in_range(
    value: float,
    name: str,
    min_value: float | None = None,
    max_value: float | None = None,
    error_cls: type[ValueError] = ValueError,
) -> None:
    """
    Валидация, что значение в заданном диапазоне (границы включительно).

    Raises:
        error_cls: Если value вне диапазона или NaN/Inf
    """
    validate_finite(value, name, error_cls)

    if min_value is not None and value < min_value:
        raise error_cls(f"{name} must be >= {min_value}, got {value}")

    if max_value is not None and value > max_value:
        raise error_cls(f"{name} must be <= {max_value}, got {value}")
