"""Projection engine - pure, UI-independent year-by-year simulation.

One RetirementCalculator is built per calculation from a complete snapshot.
It keeps no state between calls; running totals and account balances are
local to calculate(), so repeated calls on the same snapshot return
identical results.
"""

import logging
from typing import Dict, List, Sequence

from .cashflows import annual_contributions, annual_income
from .models import LivingStatus, PortfolioSnapshot, RetirementCalculatorData
from .results import AnnualProjection, Ages, ProjectionSummary, VarianceResult
from .rmd import required_minimum_distribution
from .variance import calculate_variance

logger = logging.getLogger(__name__)


class InvalidInputError(ValueError):
    """Snapshot is missing required household fields or they are out of range."""


def classify_living_status(user_alive: bool, spouse_alive: bool) -> LivingStatus:
    if user_alive and spouse_alive:
        return LivingStatus.BOTH_ALIVE
    if user_alive:
        return LivingStatus.USER_ONLY
    if spouse_alive:
        return LivingStatus.SPOUSE_ONLY
    return LivingStatus.BOTH_PASSED


class RetirementCalculator:
    """Turns a calculator snapshot into an annual projection sequence."""

    def __init__(self, data: RetirementCalculatorData):
        self.data = data

    def _validate(self):
        user = self.data.household.user
        current_year = self.data.household.current_year

        if not user.birth_year or not current_year or not user.life_expectancy_age:
            raise InvalidInputError("Invalid birth year, current year, or life expectancy")
        if user.life_expectancy_age < 1 or user.life_expectancy_age > 150:
            raise InvalidInputError("Life expectancy must be between 1 and 150")
        if current_year < 1900 or current_year > 2100:
            raise InvalidInputError("Current year must be between 1900 and 2100")

    def current_portfolio_value(self) -> float:
        return sum(account.current_value for account in self.data.accounts)

    def calculate(self) -> ProjectionSummary:
        """Run the full projection to the later of the two life expectancies.

        Raises:
            InvalidInputError: required household fields missing or out of range.
        """
        try:
            return self._calculate()
        except Exception as e:
            logger.error("Calculation failed: %s", e)
            raise

    def _calculate(self) -> ProjectionSummary:
        self._validate()

        household = self.data.household
        inputs = self.data.financial_inputs
        user = household.user
        spouse = household.spouse

        current_year = household.current_year
        user_birth_year = user.birth_year
        user_life_expectancy = user.life_expectancy_age
        spouse_birth_year = spouse.birth_year if spouse else None
        spouse_life_expectancy = (spouse.life_expectancy_age if spouse else 0) or 0

        # 1. Horizon: last year either person can still be alive
        user_death_year = user_birth_year + user_life_expectancy
        latest_death_year = max(
            user_death_year,
            spouse_birth_year + spouse_life_expectancy if spouse_birth_year else user_death_year,
        )

        # 2. Three parallel running totals plus per-account balances
        portfolio_value = self.current_portfolio_value()
        portfolio_value_lower = portfolio_value
        portfolio_value_upper = portfolio_value
        account_balances: Dict[str, float] = {
            account.id: account.current_value for account in self.data.accounts
        }

        projections: List[AnnualProjection] = []

        # 3. Yearly loop
        for year in range(current_year, latest_death_year + 1):
            user_age = year - user_birth_year
            spouse_age = year - spouse_birth_year if spouse_birth_year else None

            user_alive = user_age <= user_life_expectancy
            spouse_alive = spouse_age <= spouse_life_expectancy if spouse_birth_year else False
            living_status = classify_living_status(user_alive, spouse_alive)

            income_user = annual_income(
                self.data.income_sources_user,
                user_age,
                user.retirement_age,
                year,
                current_year,
            )
            income_spouse = annual_income(
                self.data.income_sources_spouse,
                spouse_age or 0,
                spouse.retirement_age if spouse else 0,
                year,
                current_year,
            )
            total_income = income_user + income_spouse

            # Survivor adjustment. The two checks are independent, so with a
            # spouse configured and both passed the multiplier applies twice.
            monthly_expense = inputs.monthly_retirement_budget
            if not spouse_alive and spouse_birth_year:
                monthly_expense *= inputs.survivor_expense_percentage
            if not user_alive and spouse_birth_year:
                monthly_expense *= inputs.survivor_expense_percentage
            annual_expenses = monthly_expense * 12

            contributions = 0.0
            investment_growth = 0.0
            growth_lower = 0.0
            growth_upper = 0.0
            withdrawals = 0.0
            rmd = 0.0

            # unreachable while the horizon ends in a year someone is alive;
            # kept so a both-passed year records no activity
            if living_status != LivingStatus.BOTH_PASSED:
                contributions = annual_contributions(
                    self.data.accounts, household, user_age, spouse_age
                )

                is_retired = user_age >= user.retirement_age or bool(
                    spouse_birth_year and spouse_age >= spouse.retirement_age
                )
                growth_rate = (
                    inputs.investment_growth_post_retirement
                    if is_retired
                    else inputs.investment_growth_pre_retirement
                )
                investment_growth = portfolio_value * growth_rate

                # bounds grow on their own running totals
                growth_lower = portfolio_value_lower * inputs.growth_rate_lower_limit
                growth_upper = portfolio_value_upper * inputs.growth_rate_upper_limit

                rmd = required_minimum_distribution(portfolio_value, user_age, spouse_age)

                withdrawals = max(0.0, annual_expenses - total_income, rmd)

            portfolio_value = max(
                0.0, portfolio_value + contributions + investment_growth - withdrawals
            )
            portfolio_value_lower = max(
                0.0, portfolio_value_lower + contributions + growth_lower - withdrawals
            )
            portfolio_value_upper = max(
                0.0, portfolio_value_upper + contributions + growth_upper - withdrawals
            )

            projections.append(
                AnnualProjection(
                    year=year,
                    age=Ages(user=user_age, spouse=spouse_age),
                    living_status=living_status,
                    income_user=income_user,
                    income_spouse=income_spouse,
                    total_income=total_income,
                    portfolio_value_before=(
                        portfolio_value - contributions - investment_growth + withdrawals
                    ),
                    contributions=contributions,
                    investment_growth=investment_growth,
                    required_minimum_distribution=rmd,
                    withdrawals=withdrawals,
                    portfolio_value_after=portfolio_value,
                    portfolio_value_after_lower_limit=portfolio_value_lower,
                    portfolio_value_after_upper_limit=portfolio_value_upper,
                    expenses=annual_expenses,
                    surplus=total_income - annual_expenses,
                    account_balances=dict(account_balances),
                )
            )

            account_balances = self._reallocate(
                account_balances, contributions, investment_growth, withdrawals
            )

        # 7. Goal check against one target inflated over the whole horizon
        goal_target = inputs.savings_goal * (1 + inputs.inflation_rate) ** (
            latest_death_year - current_year
        )
        goal_achieving_year = next(
            (p.year for p in projections if p.portfolio_value_after >= goal_target), None
        )

        summary = ProjectionSummary(
            projections=projections,
            goal_achieving_year=goal_achieving_year,
            goal_achievement_probability=1.0 if goal_achieving_year is not None else 0.0,
            final_portfolio_value=projections[-1].portfolio_value_after if projections else 0.0,
            total_contributions=sum(p.contributions for p in projections),
            total_withdrawals=sum(p.withdrawals for p in projections),
        )
        logger.debug(
            "Projection complete: %d years, final value %.2f",
            len(projections),
            summary.final_portfolio_value,
        )
        return summary

    def _reallocate(
        self,
        balances: Dict[str, float],
        contributions: float,
        growth: float,
        withdrawals: float,
    ) -> Dict[str, float]:
        """Spread the year's aggregate flows by each account's opening share."""
        total = sum(balances.values())
        if total <= 0:
            return balances

        updated = dict(balances)
        for account in self.data.accounts:
            proportion = updated[account.id] / total
            balance = (
                updated[account.id]
                + contributions * proportion
                + growth * proportion
                - withdrawals * proportion
            )
            updated[account.id] = max(0.0, balance)
        return updated

    def calculate_variance(
        self,
        actual_snapshots: Sequence[PortfolioSnapshot],
        projections: Sequence[AnnualProjection],
    ) -> VarianceResult:
        """Latest actual snapshot minus the projected base case for its year."""
        return calculate_variance(actual_snapshots, projections)
