"""
Shared snapshot builders for the projection tests.
"""
import pytest

from retirement_calc.core.projection import (
    AccountType,
    FinancialInputs,
    HouseholdInfo,
    IncomeSource,
    Owner,
    PersonalInfo,
    RetirementAccount,
    RetirementCalculatorData,
)


def make_inputs(**overrides) -> FinancialInputs:
    values = dict(
        inflation_rate=0.03,
        tax_rate=0.25,
        monthly_retirement_budget=8000,
        survivor_expense_percentage=0.75,
        savings_goal=1_000_000,
        investment_growth_pre_retirement=0.07,
        investment_growth_post_retirement=0.05,
        growth_rate_lower_limit=0.03,
        growth_rate_upper_limit=0.10,
    )
    values.update(overrides)
    return FinancialInputs(**values)


def make_account(id="1", current_value=250_000, annual_contribution=23_500,
                 employer_match=0.05, employer_match_cap=0.0, owner=Owner.USER):
    return RetirementAccount(
        id=id,
        name=f"Account {id}",
        type=AccountType.TRADITIONAL_401K,
        current_value=current_value,
        annual_contribution=annual_contribution,
        employer_match=employer_match,
        employer_match_cap=employer_match_cap,
        owner=owner,
        growth_rate=0.07,
    )


def make_data(
    birth_year=1970,
    current_year=2024,
    retirement_age=65,
    life_expectancy=90,
    spouse=None,
    accounts=None,
    income_user=None,
    income_spouse=(),
    **input_overrides,
) -> RetirementCalculatorData:
    if accounts is None:
        accounts = (make_account(),)
    if income_user is None:
        income_user = (
            IncomeSource(id="1", name="Salary", annual_amount=100_000, growth_rate=0.03),
        )
    return RetirementCalculatorData(
        household=HouseholdInfo(
            current_year=current_year,
            user=PersonalInfo("You", birth_year, retirement_age, life_expectancy),
            spouse=spouse,
        ),
        financial_inputs=make_inputs(**input_overrides),
        income_sources_user=income_user,
        income_sources_spouse=income_spouse,
        accounts=accounts,
    )


@pytest.fixture
def scenario_data():
    """Single person born 1970, projected from 2024 to age 90."""
    return make_data()


@pytest.fixture
def couple_data():
    """User lives to 80 (2030), spouse to 90 (2045); both already retired."""
    return make_data(
        birth_year=1950,
        retirement_age=65,
        life_expectancy=80,
        spouse=PersonalInfo("Partner", 1955, 65, 90),
        accounts=(make_account(current_value=1_000_000, annual_contribution=0),),
        income_user=(),
        monthly_retirement_budget=5000,
    )
