"""Input value types for the projection engine.

A calculator snapshot is immutable: every edit goes through one of the
builder methods on RetirementCalculatorData, which return a new snapshot.
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Dict, Optional, Tuple


class Owner(Enum):
    """Household member an account or income source belongs to."""

    USER = "user"
    SPOUSE = "spouse"


class AccountType(Enum):
    """Account wrapper (informational, not used in the projection math)."""

    TRADITIONAL_401K = "Traditional401k"
    ROTH_401K = "Roth401k"
    TRADITIONAL_IRA = "TraditionalIRA"
    ROTH_IRA = "RothIRA"
    HSA = "HSA"
    PLAN_529 = "529"
    TAXABLE = "Taxable"


class LivingStatus(Enum):
    """Household classification for a simulated year."""

    BOTH_ALIVE = "bothAlive"
    USER_ONLY = "userOnly"
    SPOUSE_ONLY = "spouseOnly"
    BOTH_PASSED = "bothPassed"


@dataclass(frozen=True)
class PersonalInfo:
    """One member of the household."""

    name: str
    birth_year: int
    retirement_age: int
    life_expectancy_age: int

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "birth_year": self.birth_year,
            "retirement_age": self.retirement_age,
            "life_expectancy_age": self.life_expectancy_age,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PersonalInfo":
        return cls(
            name=data.get("name", ""),
            birth_year=data["birth_year"],
            retirement_age=data["retirement_age"],
            life_expectancy_age=data["life_expectancy_age"],
        )


@dataclass(frozen=True)
class HouseholdInfo:
    """Calendar year of the snapshot plus one or two people."""

    current_year: int
    user: PersonalInfo
    spouse: Optional[PersonalInfo] = None

    def to_dict(self) -> dict:
        return {
            "current_year": self.current_year,
            "user": self.user.to_dict(),
            "spouse": self.spouse.to_dict() if self.spouse else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "HouseholdInfo":
        spouse = data.get("spouse")
        return cls(
            current_year=data["current_year"],
            user=PersonalInfo.from_dict(data["user"]),
            spouse=PersonalInfo.from_dict(spouse) if spouse else None,
        )


@dataclass(frozen=True)
class IncomeSource:
    """Recurring inflow that compounds annually until cessation or retirement."""

    id: str
    name: str
    annual_amount: float
    growth_rate: float
    owner: Owner = Owner.USER
    cessation_age: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "owner", Owner(self.owner))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "annual_amount": self.annual_amount,
            "growth_rate": self.growth_rate,
            "owner": self.owner.value,
            "cessation_age": self.cessation_age,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "IncomeSource":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            annual_amount=data["annual_amount"],
            growth_rate=data.get("growth_rate", 0.0),
            owner=Owner(data.get("owner", "user")),
            cessation_age=data.get("cessation_age"),
        )


@dataclass(frozen=True)
class RetirementAccount:
    """A tax-advantaged or taxable account with its own reported balance.

    growth_rate is carried for display; the engine grows the combined pool
    with the household-wide pre/post retirement rate.
    """

    id: str
    name: str
    type: AccountType
    current_value: float
    annual_contribution: float = 0.0
    employer_match: float = 0.0       # fraction of the contribution
    employer_match_cap: float = 0.0   # absolute dollar ceiling on the match
    owner: Owner = Owner.USER
    growth_rate: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "type", AccountType(self.type))
        object.__setattr__(self, "owner", Owner(self.owner))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "current_value": self.current_value,
            "annual_contribution": self.annual_contribution,
            "employer_match": self.employer_match,
            "employer_match_cap": self.employer_match_cap,
            "owner": self.owner.value,
            "growth_rate": self.growth_rate,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RetirementAccount":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            type=AccountType(data.get("type", "Taxable")),
            current_value=data["current_value"],
            annual_contribution=data.get("annual_contribution", 0.0),
            employer_match=data.get("employer_match", 0.0),
            employer_match_cap=data.get("employer_match_cap", 0.0),
            owner=Owner(data.get("owner", "user")),
            growth_rate=data.get("growth_rate", 0.0),
        )


@dataclass(frozen=True)
class FinancialInputs:
    """Household-wide economic assumptions (all rates are decimals)."""

    inflation_rate: float
    tax_rate: float                        # kept for the data contract, not applied
    monthly_retirement_budget: float
    survivor_expense_percentage: float     # 0.75 keeps 75% of the budget
    savings_goal: float
    investment_growth_pre_retirement: float
    investment_growth_post_retirement: float
    growth_rate_lower_limit: float
    growth_rate_upper_limit: float

    def to_dict(self) -> dict:
        return {
            "inflation_rate": self.inflation_rate,
            "tax_rate": self.tax_rate,
            "monthly_retirement_budget": self.monthly_retirement_budget,
            "survivor_expense_percentage": self.survivor_expense_percentage,
            "savings_goal": self.savings_goal,
            "investment_growth_pre_retirement": self.investment_growth_pre_retirement,
            "investment_growth_post_retirement": self.investment_growth_post_retirement,
            "growth_rate_lower_limit": self.growth_rate_lower_limit,
            "growth_rate_upper_limit": self.growth_rate_upper_limit,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FinancialInputs":
        return cls(**{k: data[k] for k in cls.__dataclass_fields__})


@dataclass(frozen=True)
class RetirementScenario:
    """Named optimistic/conservative growth pair."""

    optimistic: float
    conservative: float

    def to_dict(self) -> dict:
        return {"optimistic": self.optimistic, "conservative": self.conservative}

    @classmethod
    def from_dict(cls, data: dict) -> "RetirementScenario":
        return cls(optimistic=data["optimistic"], conservative=data["conservative"])


@dataclass(frozen=True)
class PortfolioSnapshot:
    """User-entered actual portfolio value on a date."""

    date: date
    total_value: float
    account_values: Dict[str, float] = field(default_factory=dict)
    notes: str = ""

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "total_value": self.total_value,
            "account_values": dict(self.account_values),
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PortfolioSnapshot":
        when = data["date"]
        if isinstance(when, datetime):
            when = when.date()
        elif isinstance(when, str):
            when = datetime.fromisoformat(when).date()
        return cls(
            date=when,
            total_value=data["total_value"],
            account_values=dict(data.get("account_values") or {}),
            notes=data.get("notes") or "",
        )


@dataclass(frozen=True)
class RetirementCalculatorData:
    """Complete snapshot consumed by RetirementCalculator."""

    household: HouseholdInfo
    financial_inputs: FinancialInputs
    income_sources_user: Tuple[IncomeSource, ...] = ()
    income_sources_spouse: Tuple[IncomeSource, ...] = ()
    accounts: Tuple[RetirementAccount, ...] = ()
    portfolio_snapshots: Tuple[PortfolioSnapshot, ...] = ()
    scenarios: Dict[str, RetirementScenario] = field(default_factory=dict)
    last_updated: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        # accept lists from callers but always hold tuples
        for name in (
            "income_sources_user",
            "income_sources_spouse",
            "accounts",
            "portfolio_snapshots",
        ):
            object.__setattr__(self, name, tuple(getattr(self, name) or ()))

    # ---- builders ----

    def _touch(self, **changes) -> "RetirementCalculatorData":
        changes.setdefault("last_updated", datetime.now())
        return replace(self, **changes)

    def with_household(self, household: HouseholdInfo) -> "RetirementCalculatorData":
        return self._touch(household=household)

    def with_financial_inputs(self, inputs: FinancialInputs) -> "RetirementCalculatorData":
        return self._touch(financial_inputs=inputs)

    def add_account(self, account: RetirementAccount) -> "RetirementCalculatorData":
        return self._touch(accounts=self.accounts + (account,))

    def update_account(self, account_id: str, **updates) -> "RetirementCalculatorData":
        accounts = tuple(
            replace(a, **updates) if a.id == account_id else a for a in self.accounts
        )
        return self._touch(accounts=accounts)

    def delete_account(self, account_id: str) -> "RetirementCalculatorData":
        return self._touch(accounts=tuple(a for a in self.accounts if a.id != account_id))

    def income_sources_for(self, owner: Owner) -> Tuple[IncomeSource, ...]:
        if Owner(owner) == Owner.USER:
            return self.income_sources_user
        return self.income_sources_spouse

    def _with_income_sources(self, owner: Owner, sources) -> "RetirementCalculatorData":
        if Owner(owner) == Owner.USER:
            return self._touch(income_sources_user=tuple(sources))
        return self._touch(income_sources_spouse=tuple(sources))

    def add_income_source(
        self, source: IncomeSource, owner: Optional[Owner] = None
    ) -> "RetirementCalculatorData":
        owner = Owner(owner) if owner is not None else source.owner
        return self._with_income_sources(owner, self.income_sources_for(owner) + (source,))

    def update_income_source(
        self, source_id: str, owner: Owner, **updates
    ) -> "RetirementCalculatorData":
        sources = [
            replace(s, **updates) if s.id == source_id else s
            for s in self.income_sources_for(owner)
        ]
        return self._with_income_sources(owner, sources)

    def delete_income_source(self, source_id: str, owner: Owner) -> "RetirementCalculatorData":
        sources = [s for s in self.income_sources_for(owner) if s.id != source_id]
        return self._with_income_sources(owner, sources)

    def add_portfolio_snapshot(self, snapshot: PortfolioSnapshot) -> "RetirementCalculatorData":
        snapshots = sorted(self.portfolio_snapshots + (snapshot,), key=lambda s: s.date)
        return self._touch(portfolio_snapshots=tuple(snapshots))

    # ---- serialization ----

    def to_dict(self) -> dict:
        return {
            "household": self.household.to_dict(),
            "income_sources_user": [s.to_dict() for s in self.income_sources_user],
            "income_sources_spouse": [s.to_dict() for s in self.income_sources_spouse],
            "accounts": [a.to_dict() for a in self.accounts],
            "financial_inputs": self.financial_inputs.to_dict(),
            "portfolio_snapshots": [s.to_dict() for s in self.portfolio_snapshots],
            "scenarios": {k: v.to_dict() for k, v in self.scenarios.items()},
            "last_updated": self.last_updated.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RetirementCalculatorData":
        last_updated = data.get("last_updated")
        return cls(
            household=HouseholdInfo.from_dict(data["household"]),
            financial_inputs=FinancialInputs.from_dict(data["financial_inputs"]),
            income_sources_user=[
                IncomeSource.from_dict(s) for s in data.get("income_sources_user") or []
            ],
            income_sources_spouse=[
                IncomeSource.from_dict(s) for s in data.get("income_sources_spouse") or []
            ],
            accounts=[RetirementAccount.from_dict(a) for a in data.get("accounts") or []],
            portfolio_snapshots=[
                PortfolioSnapshot.from_dict(s) for s in data.get("portfolio_snapshots") or []
            ],
            scenarios={
                k: RetirementScenario.from_dict(v)
                for k, v in (data.get("scenarios") or {}).items()
            },
            last_updated=(
                datetime.fromisoformat(last_updated) if last_updated else datetime.now()
            ),
        )
