"""
Column Redactor Component

Drops personally identifying and otherwise unneeded columns (ID, Customer_ID,
Name, SSN, ...). Configured columns that are not in the frame are ignored.
"""

from typing import List
import logging
import time

import pandas as pd

from credit_prep.config.schema import RedactionConfig
from credit_prep.pipeline.base import BaseStage, StageResult

logger = logging.getLogger(__name__)

STEP_NAME = "02_redact"


class ColumnRedactor(BaseStage):
    """Remove a configured list of columns.

    Args:
        config: RedactionConfig with the columns to drop.
    """

    step_name = STEP_NAME
    step_order = 2

    def __init__(self, config: RedactionConfig):
        self.columns = list(config.columns)
        self.dropped_columns_: List[str] = []

    def fit(self, df: pd.DataFrame) -> StageResult:
        t0 = time.time()
        columns = list(df.columns)

        self.dropped_columns_ = [c for c in self.columns if c in df.columns]
        missing = [c for c in self.columns if c not in df.columns]
        if missing:
            logger.info(f"{STEP_NAME} | Not present, skipped: {missing}")

        results_df = pd.DataFrame({
            "Column": self.columns,
            "Status": ["Dropped" if c in df.columns else "Absent" for c in self.columns],
        })

        logger.info(f"{STEP_NAME} | Dropping {len(self.dropped_columns_)} columns")

        return StageResult(
            step_name=self.step_name,
            input_columns=columns,
            output_columns=[c for c in columns if c not in self.dropped_columns_],
            rows_in=len(df),
            rows_out=len(df),
            results_df=results_df,
            metadata={"absent_columns": missing},
            duration_seconds=round(time.time() - t0, 1),
        )

    def transform(self, df: pd.DataFrame) -> pd.DataFrame:
        return df.drop(columns=[c for c in self.columns if c in df.columns])
