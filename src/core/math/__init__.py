"""
Core math modules

Математические примитивы и численные алгоритмы с гарантией стабильности
и фиксированным бюджетом вычислений.
"""

# Numerical Safeguards
from src.core.math.numerical_safeguards import (
    # Constants
    BPS_DENOM,
    EPS_CALC,
    FIXED_POINT_SCALE,
    # Safe division
    denom_safe_unsigned,
    safe_divide,
    # Fixed-point
    from_fixed,
    mul_div,
    to_fixed,
    # NaN/Inf sanitization
    is_valid_float,
    sanitize_float,
    # Validation
    validate_finite,
    validate_in_range,
    validate_non_negative,
)

# Empirical statistics
from src.core.math.empirical import (
    BANDWIDTH_EPS,
    empirical_cdf,
    gaussian_kde_pdf,
    silverman_bandwidth,
)

# Root finding
from src.core.math.root_finding import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_TOLERANCE,
    BisectionResult,
    bisect_fixed,
)

# Integration
from src.core.math.integration import (
    DEFAULT_SIMPSON_SEGMENTS,
    DEFAULT_UNIT_STEP,
    simpson_composite,
    unit_step_sum,
)

__all__ = [
    # Numerical Safeguards — Constants
    "BPS_DENOM",
    "EPS_CALC",
    "FIXED_POINT_SCALE",
    # Numerical Safeguards — Safe division
    "denom_safe_unsigned",
    "safe_divide",
    # Numerical Safeguards — Fixed-point
    "from_fixed",
    "mul_div",
    "to_fixed",
    # Numerical Safeguards — NaN/Inf sanitization
    "is_valid_float",
    "sanitize_float",
    # Numerical Safeguards — Validation
    "validate_finite",
    "validate_in_range",
    "validate_non_negative",
    # Empirical
    "BANDWIDTH_EPS",
    "empirical_cdf",
    "gaussian_kde_pdf",
    "silverman_bandwidth",
    # Root finding
    "DEFAULT_MAX_ITERATIONS",
    "DEFAULT_TOLERANCE",
    "BisectionResult",
    "bisect_fixed",
    # Integration
    "DEFAULT_SIMPSON_SEGMENTS",
    "DEFAULT_UNIT_STEP",
    "simpson_composite",
    "unit_step_sum",
]
