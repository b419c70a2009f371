"""Actual-vs-projected comparison for tracked portfolio snapshots."""

from typing import Sequence

from .models import PortfolioSnapshot
from .results import AnnualProjection, VarianceResult


def calculate_variance(
    actual_snapshots: Sequence[PortfolioSnapshot],
    projections: Sequence[AnnualProjection],
) -> VarianceResult:
    """
    Compare the most recent snapshot with the base-case projection for the
    same calendar year.

    actual_snapshots must be in chronological order. With no snapshots all
    three values are 0; with no projection for the snapshot year, variance
    and last_projected are 0.
    """
    if not actual_snapshots:
        return VarianceResult(variance=0.0, last_actual=0.0, last_projected=0.0)

    last_snapshot = actual_snapshots[-1]
    matching = next((p for p in projections if p.year == last_snapshot.date.year), None)

    if matching is None:
        return VarianceResult(
            variance=0.0, last_actual=last_snapshot.total_value, last_projected=0.0
        )

    return VarianceResult(
        variance=last_snapshot.total_value - matching.portfolio_value_after,
        last_actual=last_snapshot.total_value,
        last_projected=matching.portfolio_value_after,
    )
