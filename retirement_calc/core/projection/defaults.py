"""Starter snapshot used when nothing has been saved yet."""

from datetime import date, datetime
from typing import Optional

from .models import (
    AccountType,
    FinancialInputs,
    HouseholdInfo,
    IncomeSource,
    Owner,
    PersonalInfo,
    RetirementAccount,
    RetirementCalculatorData,
    RetirementScenario,
)


def default_data(current_year: Optional[int] = None) -> RetirementCalculatorData:
    return RetirementCalculatorData(
        household=HouseholdInfo(
            current_year=current_year or date.today().year,
            user=PersonalInfo(
                name="You",
                birth_year=1970,
                retirement_age=65,
                life_expectancy_age=90,
            ),
            spouse=None,
        ),
        income_sources_user=(
            IncomeSource(
                id="1",
                name="Salary",
                annual_amount=100000,
                growth_rate=0.03,
                owner=Owner.USER,
            ),
        ),
        income_sources_spouse=(),
        accounts=(
            RetirementAccount(
                id="1",
                name="401(k)",
                type=AccountType.TRADITIONAL_401K,
                current_value=250000,
                annual_contribution=23500,
                employer_match=0.05,
                employer_match_cap=0.05,
                owner=Owner.USER,
                growth_rate=0.07,
            ),
        ),
        financial_inputs=FinancialInputs(
            inflation_rate=0.03,
            tax_rate=0.25,
            monthly_retirement_budget=8000,
            survivor_expense_percentage=0.75,
            savings_goal=1000000,
            investment_growth_pre_retirement=0.07,
            investment_growth_post_retirement=0.05,
            growth_rate_lower_limit=0.03,
            growth_rate_upper_limit=0.10,
        ),
        portfolio_snapshots=(),
        scenarios={"base": RetirementScenario(optimistic=0.09, conservative=0.05)},
        last_updated=datetime.now(),
    )
