"""Engine outputs: per-year projections, run summary, variance."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from .models import LivingStatus


@dataclass(frozen=True)
class Ages:
    user: int
    spouse: Optional[int] = None


@dataclass(frozen=True)
class AnnualProjection:
    """State of the household portfolio at the end of one simulated year."""

    year: int
    age: Ages
    living_status: LivingStatus

    # income
    income_user: float
    income_spouse: float
    total_income: float

    # portfolio values
    portfolio_value_before: float
    contributions: float
    investment_growth: float
    required_minimum_distribution: float
    withdrawals: float
    portfolio_value_after: float

    # scenario bounds
    portfolio_value_after_lower_limit: float
    portfolio_value_after_upper_limit: float

    # expenses
    expenses: float
    surplus: float

    # account id -> balance at the start of the year
    account_balances: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Flat dictionary (one row of the projection table)."""
        return {
            "year": self.year,
            "age_user": self.age.user,
            "age_spouse": self.age.spouse,
            "living_status": self.living_status.value,
            "income_user": self.income_user,
            "income_spouse": self.income_spouse,
            "total_income": self.total_income,
            "portfolio_value_before": self.portfolio_value_before,
            "contributions": self.contributions,
            "investment_growth": self.investment_growth,
            "required_minimum_distribution": self.required_minimum_distribution,
            "withdrawals": self.withdrawals,
            "portfolio_value_after": self.portfolio_value_after,
            "portfolio_value_after_lower_limit": self.portfolio_value_after_lower_limit,
            "portfolio_value_after_upper_limit": self.portfolio_value_after_upper_limit,
            "expenses": self.expenses,
            "surplus": self.surplus,
            "account_balances": dict(self.account_balances),
        }


@dataclass(frozen=True)
class ProjectionSummary:
    """Whole-run result of RetirementCalculator.calculate()."""

    projections: List[AnnualProjection]
    goal_achieving_year: Optional[int]
    goal_achievement_probability: float    # exactly 1.0 or 0.0
    final_portfolio_value: float
    total_contributions: float
    total_withdrawals: float

    @property
    def years(self) -> List[int]:
        return [p.year for p in self.projections]

    def get_year(self, year: int) -> Optional[AnnualProjection]:
        """Projection for a calendar year, or None outside the horizon."""
        for p in self.projections:
            if p.year == year:
                return p
        return None

    def paths(self) -> Dict[str, np.ndarray]:
        """Base case and scenario bands as arrays, aligned on `years`."""
        return {
            "years": np.array(self.years, dtype=int),
            "base": np.array([p.portfolio_value_after for p in self.projections], dtype=float),
            "lower": np.array(
                [p.portfolio_value_after_lower_limit for p in self.projections], dtype=float
            ),
            "upper": np.array(
                [p.portfolio_value_after_upper_limit for p in self.projections], dtype=float
            ),
        }

    def to_dataframe(self) -> pd.DataFrame:
        """Projection table indexed by year (account balances flattened)."""
        rows = []
        for p in self.projections:
            row = p.to_dict()
            balances = row.pop("account_balances")
            for account_id, balance in balances.items():
                row[f"account_{account_id}"] = balance
            rows.append(row)
        df = pd.DataFrame(rows)
        if not df.empty:
            df = df.set_index("year")
        return df


@dataclass(frozen=True)
class VarianceResult:
    """Latest actual snapshot compared with the projected base case."""

    variance: float
    last_actual: float
    last_projected: float

    def to_dict(self) -> dict:
        return {
            "variance": self.variance,
            "last_actual": self.last_actual,
            "last_projected": self.last_projected,
        }
