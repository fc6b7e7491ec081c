"""
Categorical Encoder Component

Replaces the credit score label column with one boolean indicator column per
known category (Good / Standard / Poor by default). Matching is exact and
case-sensitive. A value outside the known categories is False in every
indicator, so that row carries no label afterwards.
"""

from typing import Dict, List
import logging
import time

import pandas as pd

from credit_prep.config.schema import EncodingConfig
from credit_prep.pipeline.base import BaseStage, StageResult

logger = logging.getLogger(__name__)

STEP_NAME = "01_encode"


class CategoricalEncoder(BaseStage):
    """One-hot encode a single categorical column into boolean indicators.

    Args:
        config: EncodingConfig with the source column and the ordered
            category -> indicator-column mapping.
    """

    step_name = STEP_NAME
    step_order = 1

    def __init__(self, config: EncodingConfig):
        self.column = config.column
        self.categories: Dict[str, str] = dict(config.categories)
        self.unknown_values_: List[str] = []

    def fit(self, df: pd.DataFrame) -> StageResult:
        """Count rows per category and the rows that match none of them.

        Args:
            df: Input DataFrame.

        Returns:
            StageResult with a per-category row count.
        """
        t0 = time.time()
        columns = list(df.columns)

        if self.column not in df.columns:
            logger.warning(f"{STEP_NAME} | Column {self.column!r} not present, nothing to encode")
            return StageResult(
                step_name=self.step_name,
                input_columns=columns,
                output_columns=columns,
                rows_in=len(df),
                rows_out=len(df),
                metadata={"skipped": True},
                duration_seconds=round(time.time() - t0, 1),
            )

        values = df[self.column]
        counts = values.value_counts(dropna=True)

        rows = []
        for category, indicator in self.categories.items():
            n = int(counts.get(category, 0))
            if n == 0:
                logger.info(f"{STEP_NAME} | Category {category!r} absent, {indicator} will be all False")
            rows.append({"Category": category, "Indicator": indicator, "Rows": n})

        known = values.isin(list(self.categories))
        unknown = values[~known & values.notna()]
        self.unknown_values_ = sorted(str(v) for v in unknown.unique())
        if len(unknown) > 0:
            logger.warning(
                f"{STEP_NAME} | {len(unknown)} rows have categories outside "
                f"{list(self.categories)}: {self.unknown_values_}"
            )

        output = [c for c in columns if c != self.column] + [
            ind for ind in self.categories.values() if ind not in columns
        ]
        duration = time.time() - t0

        return StageResult(
            step_name=self.step_name,
            input_columns=columns,
            output_columns=output,
            rows_in=len(df),
            rows_out=len(df),
            results_df=pd.DataFrame(rows),
            metadata={
                "column": self.column,
                "unknown_rows": int(len(unknown)),
                "unknown_values": self.unknown_values_,
                "null_rows": int(values.isna().sum()),
            },
            duration_seconds=round(duration, 1),
        )

    def transform(self, df: pd.DataFrame) -> pd.DataFrame:
        """Add the indicator columns and drop the source column.

        Args:
            df: DataFrame to transform.

        Returns:
            New DataFrame; unchanged copy if the source column is absent.
        """
        if self.column not in df.columns:
            return df.copy()

        values = df[self.column]
        out = df.drop(columns=[self.column])
        for category, indicator in self.categories.items():
            out[indicator] = (values == category).fillna(False).astype("boolean")
        return out
