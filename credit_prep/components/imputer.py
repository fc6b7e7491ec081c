"""
Imputation Components

MedianImputer fills the nulls of a few designated columns with the column's
median. All medians are taken from the frame as given, before any column is
filled. NullRowDropper then removes every row that still has a null.
"""

from typing import Dict, List, Optional
import logging
import time

import numpy as np
import pandas as pd

from credit_prep.config.schema import ImputationConfig
from credit_prep.core.exceptions import DataValidationError
from credit_prep.pipeline.base import BaseStage, StageResult

logger = logging.getLogger(__name__)

IMPUTE_STEP_NAME = "05_impute"
DROP_STEP_NAME = "06_drop_nulls"


class MedianImputer(BaseStage):
    """Replace nulls in the configured columns with their medians.

    Args:
        config: ImputationConfig with the target columns.
    """

    step_name = IMPUTE_STEP_NAME
    step_order = 5

    def __init__(self, config: ImputationConfig):
        self.columns = list(config.columns)
        self.medians_: Dict[str, float] = {}

    def fit(self, df: pd.DataFrame) -> StageResult:
        """Compute every target column's median over its present values.

        Args:
            df: Input DataFrame.

        Returns:
            StageResult with the median and the fill count per column.

        Raises:
            DataValidationError: If a target column is missing.
        """
        t0 = time.time()
        missing = [c for c in self.columns if c not in df.columns]
        if missing:
            raise DataValidationError(
                f"Columns to impute not found: {missing}",
                validation_errors=[{"column": c, "error": "missing"} for c in missing],
            )

        self.medians_ = {}
        rows = []
        for col in self.columns:
            median = df[col].median(skipna=True)
            median = float(median) if pd.notna(median) else np.nan
            if np.isnan(median):
                logger.warning(f"{IMPUTE_STEP_NAME} | {col} has no values, left unfilled")
            self.medians_[col] = median
            rows.append({
                "Column": col,
                "Median": median,
                "Filled": int(df[col].isna().sum()) if not np.isnan(median) else 0,
            })

        results_df = pd.DataFrame(rows)
        duration = time.time() - t0
        logger.info(
            f"{IMPUTE_STEP_NAME} | Filled {int(results_df['Filled'].sum()) if rows else 0} "
            f"values across {len(self.columns)} columns"
        )

        return StageResult(
            step_name=self.step_name,
            input_columns=list(df.columns),
            output_columns=list(df.columns),
            rows_in=len(df),
            rows_out=len(df),
            results_df=results_df,
            metadata={"medians": dict(self.medians_)},
            duration_seconds=round(duration, 1),
        )

    def transform(self, df: pd.DataFrame) -> pd.DataFrame:
        """Fill each target column with the median computed in fit().

        Args:
            df: DataFrame to transform.

        Returns:
            New DataFrame.
        """
        out = df.copy()
        for col, median in self.medians_.items():
            if col not in out.columns or np.isnan(median):
                continue
            # Int64 cannot hold a fractional median
            if pd.api.types.is_integer_dtype(out[col].dtype) and not median.is_integer():
                out[col] = out[col].astype("Float64")
            out[col] = out[col].fillna(median)
        return out


class NullRowDropper(BaseStage):
    """Remove rows holding a null in any column (or in ``subset``).

    Args:
        subset: Optional columns to check; all columns when None.
    """

    step_name = DROP_STEP_NAME
    step_order = 6

    def __init__(self, subset: Optional[List[str]] = None):
        self.subset = list(subset) if subset else None

    def fit(self, df: pd.DataFrame) -> StageResult:
        t0 = time.time()
        checked = df[self.subset] if self.subset else df
        null_rows = int(checked.isna().any(axis=1).sum())
        per_column = checked.isna().sum()

        results_df = pd.DataFrame({
            "Column": per_column.index,
            "Null_Count": per_column.values.astype(int),
        })
        results_df = results_df[results_df["Null_Count"] > 0].reset_index(drop=True)

        logger.info(f"{DROP_STEP_NAME} | Dropping {null_rows:,} of {len(df):,} rows with nulls")

        return StageResult(
            step_name=self.step_name,
            input_columns=list(df.columns),
            output_columns=list(df.columns),
            rows_in=len(df),
            rows_out=len(df) - null_rows,
            results_df=results_df,
            metadata={"rows_dropped": null_rows},
            duration_seconds=round(time.time() - t0, 1),
        )

    def transform(self, df: pd.DataFrame) -> pd.DataFrame:
        return df.dropna(subset=self.subset).reset_index(drop=True)
