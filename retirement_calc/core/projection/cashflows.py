"""Income and contribution rules for a single simulated year."""

from typing import Iterable, Optional

from .models import HouseholdInfo, IncomeSource, Owner, RetirementAccount


def annual_income(
    sources: Iterable[IncomeSource],
    age: int,
    retirement_age: int,
    year: int,
    start_year: int,
) -> float:
    """
    Total income for one person in `year`.

    A source pays nothing once the person reaches its cessation age, and
    nothing at all once the person reaches retirement age. Otherwise the
    annual amount compounds at the source's own growth rate from start_year.
    """
    total = 0.0
    for source in sources:
        if source.cessation_age and age >= source.cessation_age:
            continue
        # personal income stops at retirement regardless of cessation age
        if age >= retirement_age:
            continue

        years_since_start = year - start_year
        total += source.annual_amount * (1 + source.growth_rate) ** years_since_start
    return total


def employer_match(account: RetirementAccount) -> float:
    """Match amount, capped in absolute dollars (not a share of salary)."""
    return min(account.employer_match * account.annual_contribution, account.employer_match_cap)


def annual_contributions(
    accounts: Iterable[RetirementAccount],
    household: HouseholdInfo,
    user_age: int,
    spouse_age: Optional[int] = None,
) -> float:
    """Flat contributions plus employer match for every owner still working."""
    spouse = household.spouse
    total = 0.0
    for account in accounts:
        if account.owner == Owner.USER:
            age = user_age
            retirement_age = household.user.retirement_age
        else:
            age = spouse_age or 0
            retirement_age = spouse.retirement_age if spouse else 0

        if age >= retirement_age:
            continue

        total += account.annual_contribution + employer_match(account)
    return total
