"""
Tests for the year-by-year projection engine.
"""
import pytest
import numpy as np

from retirement_calc.core.projection import (
    IncomeSource,
    InvalidInputError,
    LivingStatus,
    Owner,
    PersonalInfo,
    RetirementCalculator,
)
from retirement_calc.core.projection.engine import classify_living_status

from conftest import make_account, make_data


def _run(data):
    return RetirementCalculator(data).calculate()


@pytest.mark.unit
class TestHorizon:
    """Tests for the simulated year range."""

    def test_single_person_horizon(self):
        """Projection runs from the current year to birth year + life expectancy."""
        summary = _run(make_data(birth_year=1980, current_year=2000, life_expectancy=85))
        assert len(summary.projections) == 2065 - 2000 + 1
        assert summary.projections[0].year == 2000
        assert summary.projections[-1].year == 2065

    def test_years_are_consecutive(self, scenario_data):
        """Each year appears exactly once, in order."""
        years = _run(scenario_data).years
        assert years == list(range(2024, 2024 + len(years)))

    def test_couple_horizon_uses_later_death_year(self, couple_data):
        """Horizon ends at the longer-lived spouse's final year."""
        summary = _run(couple_data)
        assert summary.projections[-1].year == 1955 + 90
        assert len(summary.projections) == 2045 - 2024 + 1

    def test_short_lived_spouse_does_not_shorten_horizon(self):
        """A spouse dying earlier than the user leaves the horizon unchanged."""
        data = make_data(spouse=PersonalInfo("Partner", 1975, 60, 70))
        summary = _run(data)
        assert summary.projections[-1].year == 1970 + 90

    def test_horizon_before_current_year_is_empty(self):
        """Nothing to project when everyone passed before the current year."""
        summary = _run(make_data(birth_year=1900, current_year=2024, life_expectancy=80))
        assert summary.projections == []
        assert summary.final_portfolio_value == 0.0
        assert summary.goal_achieving_year is None
        assert summary.goal_achievement_probability == 0.0


@pytest.mark.unit
class TestBaseScenario:
    """Tests for the default single-person example."""

    def test_first_year_values(self, scenario_data):
        """First year: working, contributing, growing at the pre-retirement rate."""
        summary = _run(scenario_data)
        first = summary.projections[0]

        assert len(summary.projections) == 67
        assert first.age.user == 54
        assert first.age.spouse is None
        assert first.living_status == LivingStatus.USER_ONLY
        assert first.income_user == pytest.approx(100_000)
        assert first.income_spouse == 0
        assert first.contributions == pytest.approx(23_500)
        assert first.investment_growth == pytest.approx(17_500)
        assert first.withdrawals == 0
        assert first.expenses == pytest.approx(96_000)
        assert first.surplus == pytest.approx(4_000)
        assert first.portfolio_value_before == pytest.approx(250_000)
        assert first.portfolio_value_after == pytest.approx(291_000)

    def test_bounds_grow_at_their_own_rates(self, scenario_data):
        """Lower and upper bounds use the limit rates, not the base rate."""
        first = _run(scenario_data).projections[0]
        assert first.portfolio_value_after_lower_limit == pytest.approx(281_000)
        assert first.portfolio_value_after_upper_limit == pytest.approx(298_500)

    def test_income_compounds_annually(self, scenario_data):
        """Second-year salary includes one year of growth."""
        second = _run(scenario_data).projections[1]
        assert second.income_user == pytest.approx(103_000)
        assert second.investment_growth == pytest.approx(291_000 * 0.07)

    def test_portfolio_rises_while_working(self, scenario_data):
        """Pre-retirement years (age 54-64) only add to the portfolio."""
        values = [
            p.portfolio_value_after for p in _run(scenario_data).projections if p.age.user < 65
        ]
        assert len(values) == 11
        assert all(b > a for a, b in zip(values, values[1:]))

    def test_retirement_switches_growth_rate_and_stops_income(self, scenario_data):
        """From age 65 salary and contributions stop and the post rate applies."""
        summary = _run(scenario_data)
        prev = summary.get_year(2034)
        retired = summary.get_year(2035)
        assert retired.age.user == 65
        assert retired.income_user == 0
        assert retired.contributions == 0
        assert retired.investment_growth == pytest.approx(prev.portfolio_value_after * 0.05)
        assert retired.withdrawals == pytest.approx(96_000)

    def test_totals_match_projection_sums(self, scenario_data):
        """Summary totals aggregate the per-year values."""
        summary = _run(scenario_data)
        assert summary.total_contributions == pytest.approx(
            sum(p.contributions for p in summary.projections)
        )
        assert summary.total_withdrawals == pytest.approx(
            sum(p.withdrawals for p in summary.projections)
        )
        assert summary.final_portfolio_value == summary.projections[-1].portfolio_value_after

    def test_tax_rate_has_no_effect(self):
        """The tax rate is carried in the inputs but never applied."""
        taxed = _run(make_data(tax_rate=0.5))
        untaxed = _run(make_data(tax_rate=0.0))
        assert [p.to_dict() for p in taxed.projections] == [
            p.to_dict() for p in untaxed.projections
        ]


@pytest.mark.unit
class TestDeterminism:
    """Tests that calculate() keeps no state between calls."""

    def test_repeated_calculation_is_identical(self, couple_data):
        """Two runs over the same snapshot give identical results."""
        calc = RetirementCalculator(couple_data)
        first = calc.calculate()
        second = calc.calculate()
        assert [p.to_dict() for p in first.projections] == [
            p.to_dict() for p in second.projections
        ]
        assert first.final_portfolio_value == second.final_portfolio_value
        assert first.goal_achieving_year == second.goal_achieving_year

    def test_input_snapshot_not_mutated(self, scenario_data):
        """Account values in the snapshot are untouched by a run."""
        before = scenario_data.to_dict()
        _run(scenario_data)
        assert scenario_data.to_dict() == before


@pytest.mark.unit
class TestLivingStatus:
    """Tests for household classification and the survivor adjustment."""

    def test_classify_living_status(self):
        assert classify_living_status(True, True) == LivingStatus.BOTH_ALIVE
        assert classify_living_status(True, False) == LivingStatus.USER_ONLY
        assert classify_living_status(False, True) == LivingStatus.SPOUSE_ONLY
        assert classify_living_status(False, False) == LivingStatus.BOTH_PASSED

    def test_status_never_returns_to_both_alive(self, couple_data):
        """Once someone has passed the household never reverts."""
        statuses = [p.living_status for p in _run(couple_data).projections]
        first_loss = statuses.index(LivingStatus.SPOUSE_ONLY)
        assert all(s == LivingStatus.BOTH_ALIVE for s in statuses[:first_loss])
        assert all(s == LivingStatus.SPOUSE_ONLY for s in statuses[first_loss:])

    def test_user_passes_after_life_expectancy(self, couple_data):
        """User is alive through age 80 and gone from age 81."""
        summary = _run(couple_data)
        assert summary.get_year(2030).living_status == LivingStatus.BOTH_ALIVE
        assert summary.get_year(2031).living_status == LivingStatus.SPOUSE_ONLY

    def test_survivor_expenses_reduced(self, couple_data):
        """Survivor years spend the survivor share of the monthly budget."""
        summary = _run(couple_data)
        assert summary.get_year(2030).expenses == pytest.approx(5000 * 12)
        assert summary.get_year(2031).expenses == pytest.approx(5000 * 0.75 * 12)

    def test_user_survives_spouse(self):
        """Spouse passing first switches to userOnly and the survivor budget."""
        summary = _run(make_data(spouse=PersonalInfo("Partner", 1975, 60, 70)))
        for p in summary.projections:
            if p.year <= 2045:
                assert p.living_status == LivingStatus.BOTH_ALIVE
                assert p.expenses == pytest.approx(96_000)
            else:
                assert p.living_status == LivingStatus.USER_ONLY
                assert p.expenses == pytest.approx(96_000 * 0.75)
        assert summary.get_year(2046).living_status == LivingStatus.USER_ONLY

    def test_no_survivor_adjustment_without_spouse(self, scenario_data):
        """A single-person household always spends the full budget."""
        for p in _run(scenario_data).projections:
            assert p.expenses == pytest.approx(96_000)

    def test_last_year_has_someone_alive(self, couple_data):
        """The horizon stops at the last year somebody is alive."""
        last = _run(couple_data).projections[-1]
        assert last.living_status != LivingStatus.BOTH_PASSED


@pytest.mark.unit
class TestWithdrawalsAndRMD:
    """Tests for withdrawal sizing and the RMD floor."""

    def _rmd_data(self, spouse=None):
        return make_data(
            birth_year=1950,
            retirement_age=80,
            life_expectancy=90,
            spouse=spouse,
            accounts=(make_account(annual_contribution=0),),
            income_user=(IncomeSource(id="1", name="Pension", annual_amount=200_000, growth_rate=0),),
            monthly_retirement_budget=1000,
        )

    def test_rmd_forces_withdrawal_when_income_covers_expenses(self):
        """At 74 the RMD is withdrawn even though income exceeds expenses."""
        first = _run(self._rmd_data()).projections[0]
        assert first.age.user == 74
        assert first.required_minimum_distribution == pytest.approx(250_000 / 25.5)
        assert first.withdrawals == pytest.approx(250_000 / 25.5)

    def test_rmd_counted_per_person(self):
        """Both spouses over 72 each draw against the whole portfolio."""
        data = self._rmd_data(spouse=PersonalInfo("Partner", 1950, 80, 90))
        first = _run(data).projections[0]
        assert first.required_minimum_distribution == pytest.approx(2 * 250_000 / 25.5)

    def test_withdrawals_cover_shortfall_and_rmd(self, couple_data):
        """Withdrawals are never below the expense shortfall or the RMD."""
        for p in _run(couple_data).projections:
            shortfall = max(0.0, p.expenses - p.total_income)
            assert p.withdrawals >= p.required_minimum_distribution - 1e-9
            assert p.withdrawals >= shortfall - 1e-9

    def test_no_rmd_before_72(self, scenario_data):
        """Nobody under 72 takes a distribution."""
        for p in _run(scenario_data).projections:
            if p.age.user < 72:
                assert p.required_minimum_distribution == 0


@pytest.mark.unit
class TestNonNegative:
    """Tests for the zero floor on portfolio values."""

    def test_portfolio_never_negative(self):
        """Expenses far above the portfolio floor every path at zero."""
        data = make_data(
            birth_year=1950,
            retirement_age=60,
            accounts=(make_account(current_value=100_000, annual_contribution=0),),
            monthly_retirement_budget=50_000,
        )
        summary = _run(data)
        paths = summary.paths()
        for key in ("base", "lower", "upper"):
            assert (paths[key] >= 0).all()
        assert summary.final_portfolio_value == 0
        for p in summary.projections:
            assert all(v >= 0 for v in p.account_balances.values())


@pytest.mark.unit
class TestScenarioBounds:
    """Tests for the lower/upper scenario paths."""

    def test_bounds_bracket_base_case(self):
        """lower <= base <= upper when the rates are ordered the same way."""
        data = make_data(
            investment_growth_pre_retirement=0.06,
            investment_growth_post_retirement=0.06,
            growth_rate_lower_limit=0.03,
            growth_rate_upper_limit=0.09,
        )
        paths = _run(data).paths()
        assert (paths["lower"] <= paths["base"] + 1e-6).all()
        assert (paths["base"] <= paths["upper"] + 1e-6).all()

    def test_equal_rates_give_identical_paths(self):
        """Bounds with the base rate reproduce the base path."""
        data = make_data(
            investment_growth_pre_retirement=0.05,
            investment_growth_post_retirement=0.05,
            growth_rate_lower_limit=0.05,
            growth_rate_upper_limit=0.05,
        )
        paths = _run(data).paths()
        np.testing.assert_allclose(paths["lower"], paths["base"])
        np.testing.assert_allclose(paths["upper"], paths["base"])


@pytest.mark.unit
class TestGoal:
    """Tests for the savings goal check."""

    def test_goal_unreachable(self, scenario_data):
        """The default plan never reaches $1M inflated over 66 years."""
        summary = _run(scenario_data)
        assert summary.goal_achieving_year is None
        assert summary.goal_achievement_probability == 0.0

    def test_goal_reached_first_year(self):
        """With no inflation a goal below the first-year value hits immediately."""
        summary = _run(make_data(savings_goal=250_000, inflation_rate=0.0))
        assert summary.goal_achieving_year == 2024
        assert summary.goal_achievement_probability == 1.0

    def test_goal_inflated_over_full_horizon(self):
        """Target is inflated across the whole horizon, not to the year reached."""
        # 291,000 clears 250,000 but not 250,000 * 1.01**66
        summary = _run(make_data(savings_goal=250_000, inflation_rate=0.01))
        assert summary.goal_achieving_year != 2024
        target = 250_000 * 1.01 ** 66
        expected = next(
            p.year for p in summary.projections if p.portfolio_value_after >= target
        )
        assert summary.goal_achieving_year == expected


@pytest.mark.unit
class TestAccountBalances:
    """Tests for proportional per-account tracking."""

    def test_first_year_reports_opening_balances(self):
        data = make_data(accounts=(
            make_account(id="a", current_value=100_000),
            make_account(id="b", current_value=300_000),
        ))
        first = _run(data).projections[0]
        assert first.account_balances == {"a": 100_000, "b": 300_000}

    def test_balances_track_portfolio(self):
        """Next year's opening balances sum to this year's closing value."""
        data = make_data(accounts=(
            make_account(id="a", current_value=100_000),
            make_account(id="b", current_value=300_000),
        ))
        projections = _run(data).projections
        for prev, cur in zip(projections[:10], projections[1:11]):
            assert sum(cur.account_balances.values()) == pytest.approx(
                prev.portfolio_value_after
            )
        # shares stay 1:3
        second = projections[1].account_balances
        assert second["b"] == pytest.approx(3 * second["a"])

    def test_zero_total_leaves_balances_untouched(self):
        """Empty accounts stay at zero even as contributions grow the portfolio."""
        data = make_data(accounts=(make_account(current_value=0, annual_contribution=1000),))
        summary = _run(data)
        assert summary.projections[3].portfolio_value_after > 0
        assert all(p.account_balances == {"1": 0} for p in summary.projections)

    def test_spouse_account_contributes_until_spouse_retires(self):
        """Spouse-owned contributions follow the spouse's age."""
        data = make_data(
            spouse=PersonalInfo("Partner", 1964, 62, 90),
            accounts=(make_account(current_value=0, annual_contribution=10_000,
                                   owner=Owner.SPOUSE),),
            income_user=(),
        )
        summary = _run(data)
        assert summary.get_year(2025).contributions == pytest.approx(10_000)
        assert summary.get_year(2026).contributions == 0


@pytest.mark.unit
class TestInvalidInput:
    """Tests for the engine's precondition checks."""

    def test_missing_birth_year(self):
        with pytest.raises(InvalidInputError, match="Invalid birth year, current year, or life expectancy"):
            _run(make_data(birth_year=0))

    def test_missing_life_expectancy(self):
        with pytest.raises(InvalidInputError, match="Invalid birth year"):
            _run(make_data(life_expectancy=0))

    def test_life_expectancy_out_of_range(self):
        with pytest.raises(InvalidInputError, match="Life expectancy must be between 1 and 150"):
            _run(make_data(life_expectancy=151))

    def test_current_year_out_of_range(self):
        with pytest.raises(InvalidInputError, match="Current year must be between 1900 and 2100"):
            _run(make_data(current_year=1899))

    def test_invalid_input_is_value_error(self):
        """Callers catching ValueError see engine failures too."""
        with pytest.raises(ValueError):
            _run(make_data(current_year=2101))

    def test_failure_is_logged(self, caplog):
        with caplog.at_level("ERROR", logger="retirement_calc"):
            with pytest.raises(InvalidInputError):
                _run(make_data(life_expectancy=200))
        assert "Calculation failed" in caplog.text
