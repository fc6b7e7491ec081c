"""
Numeric Text Normalizer Component

Some numeric columns of the credit dataset arrive as text because of stray
formatting characters (``"1_000"``, ``"33_"``, ``"__10000__"``). This stage
strips the noise characters and parses the rest as floats. Values that still
do not parse become missing. A column whose conversion fails as a whole is
reported and left as it was.
"""

from typing import Any, Dict, List, Optional
import logging
import re
import time

import pandas as pd

from credit_prep.config.schema import NormalizationConfig
from credit_prep.pipeline.base import BaseStage, StageResult

logger = logging.getLogger(__name__)

STEP_NAME = "03_normalize"


def parse_numeric_text(value: Any, noise_characters: str = "_") -> Optional[float]:
    """Parse one value the way the column pass does.

    Args:
        value: Raw cell value (text, number or null).
        noise_characters: Characters removed before parsing.

    Returns:
        Parsed float, or None when the value is absent or unparseable.

    Examples:
        >>> parse_numeric_text("1_000")
        1000.0
        >>> parse_numeric_text("--333_333") is None
        True
    """
    if value is None or value is pd.NA:
        return None
    if isinstance(value, float) and value != value:
        return None
    cleaned = str(value).translate({ord(ch): None for ch in noise_characters}).strip()
    try:
        parsed = float(cleaned)
    except ValueError:
        return None
    # float() accepts "nan"; the column pass stores that as <NA>
    return None if parsed != parsed else parsed


class NumericTextNormalizer(BaseStage):
    """Convert numeric-in-meaning text columns to nullable floats.

    Args:
        config: NormalizationConfig with the columns and noise characters.
    """

    step_name = STEP_NAME
    step_order = 3

    def __init__(self, config: NormalizationConfig):
        self.columns = list(config.columns)
        self.noise_characters = config.noise_characters
        self._pattern = f"[{re.escape(self.noise_characters)}]"
        self.converted_: Dict[str, pd.Series] = {}
        self.failed_columns_: List[str] = []

    def normalize_series(self, series: pd.Series) -> pd.Series:
        """Strip noise characters from every value and parse as Float64.

        Args:
            series: Column to convert.

        Returns:
            Float64 series; unparseable values are <NA>.
        """
        cleaned = (
            series.astype("string")
            .str.replace(self._pattern, "", regex=True)
            .str.strip()
        )
        return pd.to_numeric(cleaned, errors="coerce").astype("Float64")

    def fit(self, df: pd.DataFrame) -> StageResult:
        """Convert each configured column and record how many values were lost.

        Args:
            df: Input DataFrame.

        Returns:
            StageResult with per-column null counts before and after.
        """
        t0 = time.time()
        columns = list(df.columns)
        self.converted_ = {}
        self.failed_columns_ = []

        rows = []
        for col in self.columns:
            if col not in df.columns:
                logger.warning(f"{STEP_NAME} | Column {col!r} not present, skipped")
                continue

            series = df[col]
            nulls_before = int(series.isna().sum())
            try:
                converted = self.normalize_series(series)
            except Exception as e:
                logger.error(
                    f"{STEP_NAME} | Could not convert column {col!r} "
                    f"(dtype {series.dtype}): {e}"
                )
                self.failed_columns_.append(col)
                rows.append({
                    "Column": col,
                    "Dtype_Before": str(series.dtype),
                    "Nulls_Before": nulls_before,
                    "Nulls_After": nulls_before,
                    "Unparseable": 0,
                    "Status": "Failed",
                })
                continue

            self.converted_[col] = converted
            nulls_after = int(converted.isna().sum())
            if nulls_after > nulls_before:
                logger.info(
                    f"{STEP_NAME} | {col}: {nulls_after - nulls_before} unparseable values set to null"
                )
            rows.append({
                "Column": col,
                "Dtype_Before": str(series.dtype),
                "Nulls_Before": nulls_before,
                "Nulls_After": nulls_after,
                "Unparseable": nulls_after - nulls_before,
                "Status": "Converted",
            })

        duration = time.time() - t0
        logger.info(
            f"{STEP_NAME} | Converted {len(self.converted_)} columns, "
            f"{len(self.failed_columns_)} failed in {duration:.1f}s"
        )

        return StageResult(
            step_name=self.step_name,
            input_columns=columns,
            output_columns=columns,
            rows_in=len(df),
            rows_out=len(df),
            results_df=pd.DataFrame(rows),
            metadata={
                "noise_characters": self.noise_characters,
                "failed_columns": list(self.failed_columns_),
            },
            duration_seconds=round(duration, 1),
        )

    def transform(self, df: pd.DataFrame) -> pd.DataFrame:
        """Replace converted columns; failed or absent columns are kept as is.

        Args:
            df: DataFrame to transform (the one passed to fit()).

        Returns:
            New DataFrame.
        """
        out = df.copy()
        for col, converted in self.converted_.items():
            if col in out.columns:
                out[col] = converted.reindex(out.index)
        return out
