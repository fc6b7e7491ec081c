"""
Column Profiler

Per-column summary statistics used to watch the dataset change between
stages: kind, dtype, null count and rate, median, unique count and the most
frequent values.
"""

from typing import Any, Dict, List
import logging

import pandas as pd

from credit_prep.data.schema import ColumnKind, classify


logger = logging.getLogger(__name__)

PROFILE_COLUMNS = [
    "Column", "Kind", "Dtype", "Null_Count", "Null_Rate",
    "Median", "N_Unique", "Top_Values",
]


def _top_values(series: pd.Series, top_n: int) -> str:
    counts = series.value_counts(dropna=True).head(top_n)
    return ", ".join(f"{value} ({count})" for value, count in counts.items())


def profile_column(series: pd.Series, top_n: int = 5) -> Dict[str, Any]:
    """Summary statistics of one column.

    Args:
        series: Column to profile.
        top_n: Number of most frequent values listed for text/boolean columns.

    Returns:
        Dict keyed by PROFILE_COLUMNS.
    """
    kind = classify(series)
    n = len(series)
    nulls = int(series.isna().sum())

    median = None
    if kind.is_numeric and nulls < n:
        median = float(series.median(skipna=True))

    top = ""
    if kind in (ColumnKind.TEXT, ColumnKind.BOOLEAN):
        top = _top_values(series, top_n)

    return {
        "Column": str(series.name),
        "Kind": kind.value,
        "Dtype": str(series.dtype),
        "Null_Count": nulls,
        "Null_Rate": round(nulls / n, 4) if n > 0 else 0.0,
        "Median": median,
        "N_Unique": int(series.nunique(dropna=True)),
        "Top_Values": top,
    }


def profile_columns(df: pd.DataFrame, top_n: int = 5) -> pd.DataFrame:
    """Profile every column of a DataFrame, in column order.

    Args:
        df: Dataset to profile.
        top_n: Number of most frequent values listed for text/boolean columns.

    Returns:
        One row per column with PROFILE_COLUMNS.
    """
    rows: List[Dict[str, Any]] = [profile_column(df[c], top_n) for c in df.columns]
    profile = pd.DataFrame(rows, columns=PROFILE_COLUMNS)

    with_nulls = profile[profile["Null_Count"] > 0]
    logger.debug(
        "PROFILE | %d columns, %d with nulls (%s total null cells)",
        len(profile), len(with_nulls), f"{int(profile['Null_Count'].sum()):,}",
    )
    return profile
