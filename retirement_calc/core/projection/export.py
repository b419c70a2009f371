"""CSV export of the projection table (spreadsheet friendly)."""

import datetime
from typing import Optional

import pandas as pd

from .results import ProjectionSummary

EXPORT_COLUMNS = {
    "year": "year",
    "portfolio_value_after": "portfolioValueAfter",
    "portfolio_value_after_lower_limit": "portfolioValueAfterLowerLimit",
    "portfolio_value_after_upper_limit": "portfolioValueAfterUpperLimit",
    "contributions": "contributions",
    "withdrawals": "withdrawals",
    "expenses": "expenses",
    "surplus": "surplus",
}


def projections_to_frame(summary: ProjectionSummary) -> pd.DataFrame:
    rows = [
        {header: getattr(p, attr) for attr, header in EXPORT_COLUMNS.items()}
        for p in summary.projections
    ]
    return pd.DataFrame(rows, columns=list(EXPORT_COLUMNS.values()))


def default_export_name(today: Optional[datetime.date] = None) -> str:
    today = today or datetime.date.today()
    return f"retirement-projections-{today.isoformat()}.csv"


def export_projections_csv(summary: ProjectionSummary, path: Optional[str] = None) -> str:
    """Write the projection table to CSV. Returns the path written."""
    path = path or default_export_name()
    projections_to_frame(summary).to_csv(path, index=False)
    return path
