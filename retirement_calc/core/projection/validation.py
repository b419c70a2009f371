"""Form-level checks on a calculator snapshot.

The engine only enforces its own preconditions; these checks mirror what the
input forms enforce so a caller can surface problems before calculating.
"""

from typing import Dict, List

from .models import PersonalInfo, RetirementCalculatorData

RATE_MIN = -0.5
RATE_MAX = 0.5


def _check_person(label: str, person: PersonalInfo, issues: Dict[str, List[str]]):
    missing = [
        name for name in ("birth_year", "retirement_age", "life_expectancy_age")
        if getattr(person, name) is None
    ]
    if missing:
        issues["errors"].append(f"{label} is missing {', '.join(missing)}")
        return
    if not 1900 <= person.birth_year <= 2100:
        issues["errors"].append(f"{label} birth year {person.birth_year} outside 1900-2100")
    if person.retirement_age < 0:
        issues["errors"].append(f"{label} retirement age must be >= 0")
    if person.life_expectancy_age < person.retirement_age:
        issues["errors"].append(f"{label} life expectancy is below retirement age")


def validate_snapshot(data: RetirementCalculatorData) -> Dict[str, List[str]]:
    """Validate a snapshot for common input problems.

    Returns dict with 'errors' and 'warnings' lists.
    """
    issues = {"errors": [], "warnings": []}

    household = data.household
    _check_person("User", household.user, issues)
    if household.spouse is not None:
        _check_person("Spouse", household.spouse, issues)

    inputs = data.financial_inputs
    rates = {
        "inflation_rate": inputs.inflation_rate,
        "investment_growth_pre_retirement": inputs.investment_growth_pre_retirement,
        "investment_growth_post_retirement": inputs.investment_growth_post_retirement,
        "growth_rate_lower_limit": inputs.growth_rate_lower_limit,
        "growth_rate_upper_limit": inputs.growth_rate_upper_limit,
    }
    for name, value in rates.items():
        if not RATE_MIN <= value <= RATE_MAX:
            issues["errors"].append(f"{name} {value} outside [{RATE_MIN}, {RATE_MAX}]")

    if inputs.growth_rate_lower_limit > inputs.growth_rate_upper_limit:
        issues["errors"].append("growth_rate_lower_limit exceeds growth_rate_upper_limit")

    if not 0 <= inputs.survivor_expense_percentage <= 1:
        issues["warnings"].append(
            f"survivor_expense_percentage {inputs.survivor_expense_percentage} "
            f"is not a fraction - check percent vs decimal form"
        )

    if not data.accounts:
        issues["warnings"].append("No accounts: projection starts from a zero portfolio")

    account_ids = [a.id for a in data.accounts]
    if len(set(account_ids)) != len(account_ids):
        issues["errors"].append("Duplicate account ids")

    for account in data.accounts:
        if account.current_value < 0:
            issues["errors"].append(f"Account {account.name!r} has a negative value")
        if account.annual_contribution < 0:
            issues["errors"].append(f"Account {account.name!r} has a negative contribution")

    return issues
