"""
Report export.

Amounts stay in the smallest currency unit so exported files keep the
same integer contract as the rest of the application.
"""
from pathlib import Path

import pandas as pd

from cashbook.domain.models import ReportSummary

COLUMNS = ["category_id", "category_name", "category_type", "total_amount"]

def summary_to_frame(summary: ReportSummary) -> pd.DataFrame:
    """Per-category totals as a DataFrame, in report order"""
    frame = pd.DataFrame(
        [c.to_dict() for c in summary.by_category],
        columns=COLUMNS,
    )
    return frame.astype({"total_amount": "int64"})

def totals_to_frame(summary: ReportSummary) -> pd.DataFrame:
    """Income, expense and balance as rows shaped like summary_to_frame()"""
    totals = summary.totals.to_dict()
    return pd.DataFrame(
        [
            {"category_id": "", "category_name": name, "category_type": "total", "total_amount": amount}
            for name, amount in totals.items()
        ],
        columns=COLUMNS,
    ).astype({"total_amount": "int64"})

def export_summary(summary: ReportSummary, filepath: Path | str) -> Path:
    """
    Write a report to CSV: category rows first, then the totals.

    Args:
        summary: Report to export
        filepath: Destination .csv file

    Returns:
        The written path
    """
    path = Path(filepath)
    if path.suffix.lower() != ".csv":
        raise ValueError(f"Export file must be .csv, got {path.suffix or 'no extension'}")

    path.parent.mkdir(parents=True, exist_ok=True)
    frames = [f for f in (summary_to_frame(summary), totals_to_frame(summary)) if not f.empty]
    frame = pd.concat(frames, ignore_index=True)
    frame.to_csv(path, index=False)
    return path
