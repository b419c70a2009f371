"""
Retirement projection engine.

Projects a household's portfolio year by year from the current year to the
later of the two life expectancies:
- base case using the pre/post retirement growth rate
- lower and upper scenario bounds grown independently
- required minimum distributions from age 72
- survivor expense adjustment once one partner has passed
- first year the portfolio reaches the inflation-adjusted savings goal
"""

from .models import (
    AccountType,
    FinancialInputs,
    HouseholdInfo,
    IncomeSource,
    LivingStatus,
    Owner,
    PersonalInfo,
    PortfolioSnapshot,
    RetirementAccount,
    RetirementCalculatorData,
    RetirementScenario,
)
from .results import Ages, AnnualProjection, ProjectionSummary, VarianceResult
from .engine import InvalidInputError, RetirementCalculator
from .variance import calculate_variance
from .rmd import rmd_divisor, required_minimum_distribution
from .validation import validate_snapshot
from .defaults import default_data
from .export import export_projections_csv, projections_to_frame

__version__ = "1.0.0"
__all__ = [
    # Inputs
    "AccountType",
    "FinancialInputs",
    "HouseholdInfo",
    "IncomeSource",
    "LivingStatus",
    "Owner",
    "PersonalInfo",
    "PortfolioSnapshot",
    "RetirementAccount",
    "RetirementCalculatorData",
    "RetirementScenario",
    # Results
    "Ages",
    "AnnualProjection",
    "ProjectionSummary",
    "VarianceResult",
    # Engine
    "InvalidInputError",
    "RetirementCalculator",
    "calculate_variance",
    "rmd_divisor",
    "required_minimum_distribution",
    # Helpers
    "validate_snapshot",
    "default_data",
    "export_projections_csv",
    "projections_to_frame",
]
