"""
Required minimum distribution lookup.

Simplified, illustrative divisor table (not the full IRS Uniform Lifetime
Table): ages 72-85, a flat 14.8 past 85.
"""

from typing import Dict, Optional

RMD_START_AGE = 72

RMD_DIVISORS: Dict[int, float] = {
    72: 27.4, 73: 26.5, 74: 25.5, 75: 24.6, 76: 23.7, 77: 22.9,
    78: 22.0, 79: 21.1, 80: 20.2, 81: 19.4, 82: 18.5, 83: 17.7,
    84: 16.8, 85: 16.0,
}

DIVISOR_BEYOND_TABLE = 14.8
DEFAULT_DIVISOR = 27.4


def rmd_divisor(age: int) -> float:
    """Divisor for a distribution-year age."""
    if age in RMD_DIVISORS:
        return RMD_DIVISORS[age]
    if age > 85:
        return DIVISOR_BEYOND_TABLE
    return DEFAULT_DIVISOR


def required_minimum_distribution(
    portfolio_value: float,
    user_age: int,
    spouse_age: Optional[int] = None,
) -> float:
    """
    Household RMD for the year.

    Each qualifying person draws against the WHOLE household portfolio, so a
    year where both qualify sums two divisions of the same value.
    """
    rmd = 0.0

    if user_age >= RMD_START_AGE:
        rmd += portfolio_value / rmd_divisor(user_age)

    if spouse_age and spouse_age >= RMD_START_AGE:
        rmd += portfolio_value / rmd_divisor(spouse_age)

    return rmd


__all__ = ["RMD_START_AGE", "RMD_DIVISORS", "rmd_divisor", "required_minimum_distribution"]
