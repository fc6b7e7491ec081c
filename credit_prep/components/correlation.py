"""
Correlation Engine Component

Builds the Pearson correlation matrix of the analyzable (numeric and
boolean) columns of a null-free dataset. Only the lower triangle, diagonal
included, is computed: each unordered pair once. Cells above the diagonal
hold NaN, which means "not computed" and must never be read as 0.

A column whose values are all equal has zero variance and no defined
coefficient. With the default ``zero_variance="nan"`` policy its cells are
NaN; ``"raise"`` turns it into a CorrelationError.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence
import logging
import time

import numpy as np
import pandas as pd

from credit_prep.config.schema import CorrelationConfig
from credit_prep.core.exceptions import CorrelationError
from credit_prep.data.schema import ColumnKind, classify, columns_of_kind
from credit_prep.pipeline.base import BaseStage, StageResult

logger = logging.getLogger(__name__)

STEP_NAME = "04_correlation"


@dataclass
class CorrelationMatrix:
    """Lower-triangular correlation matrix with its axis labels.

    Attributes:
        columns: Ordered column names; both axes use this order.
        values: N rows of N floats; values[y][x] is defined for x <= y.
    """

    columns: List[str] = field(default_factory=list)
    values: List[List[float]] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.columns)

    def get(self, a: str, b: str) -> float:
        """Coefficient between two columns, whatever the argument order."""
        i, j = self.columns.index(a), self.columns.index(b)
        y, x = max(i, j), min(i, j)
        return self.values[y][x]

    def to_frame(self) -> pd.DataFrame:
        """Matrix as a DataFrame indexed and labelled by column name."""
        return pd.DataFrame(self.values, index=self.columns, columns=self.columns, dtype=float)

    def strongest_pairs(self, n: int = 10) -> pd.DataFrame:
        """Off-diagonal pairs sorted by absolute coefficient, NaN last."""
        rows = []
        for y in range(self.size):
            for x in range(y):
                r = self.values[y][x]
                rows.append({
                    "Feature_A": self.columns[x],
                    "Feature_B": self.columns[y],
                    "Correlation": r,
                    "Abs_Correlation": abs(r),
                })
        pairs = pd.DataFrame(rows, columns=["Feature_A", "Feature_B", "Correlation", "Abs_Correlation"])
        pairs = pairs.sort_values("Abs_Correlation", ascending=False, na_position="last")
        return pairs.head(n).reset_index(drop=True)


def is_constant(v: np.ndarray) -> bool:
    """True when every value equals the first, i.e. the variance is zero."""
    return len(v) > 0 and bool(np.all(v == v[0]))


def pearson(x: np.ndarray, y: np.ndarray) -> float:
    """Pearson correlation coefficient of two equal-length sequences.

    Covariance divided by the product of the standard deviations. Returns
    NaN when either sequence is empty or constant.
    """
    if len(x) != len(y):
        raise ValueError(f"Length mismatch: {len(x)} != {len(y)}")
    # the mean of a constant float column can differ from its values in the
    # last bit, which would turn 0/0 into a spurious 0.0
    if len(x) == 0 or is_constant(x) or is_constant(y):
        return float("nan")
    dx = x - x.mean()
    dy = y - y.mean()
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.sum(dx * dy) / np.sqrt(np.sum(dx * dx) * np.sum(dy * dy)))


def correlation_matrix(
    columns: Sequence[str],
    vectors: Sequence[np.ndarray],
    zero_variance: str = "nan",
) -> CorrelationMatrix:
    """Compute the lower-triangle Pearson matrix of aligned value vectors.

    Args:
        columns: Axis labels, one per vector.
        vectors: Real-valued sequences of equal length.
        zero_variance: "nan" to keep undefined coefficients as NaN,
            "raise" to fail on the first constant column.

    Returns:
        CorrelationMatrix with NaN above the diagonal.

    Raises:
        CorrelationError: Under the "raise" policy, for a constant column.
    """
    n = len(columns)
    if zero_variance == "raise":
        for name, v in zip(columns, vectors):
            if is_constant(v):
                raise CorrelationError(
                    "Correlation undefined for a zero-variance column",
                    column=name,
                )

    values = [[float("nan")] * n for _ in range(n)]
    for y in range(n):
        for x in range(y + 1):
            values[y][x] = pearson(vectors[x], vectors[y])
    return CorrelationMatrix(columns=list(columns), values=values)


class CorrelationEngine(BaseStage):
    """Compute the correlation matrix of the analyzable columns.

    The stage reports; it does not change the frame.

    Args:
        config: CorrelationConfig with the zero-variance policy and whether
            integer columns are analyzable.
    """

    step_name = STEP_NAME
    step_order = 4

    def __init__(self, config: Optional[CorrelationConfig] = None):
        config = config or CorrelationConfig()
        self.include_integer = config.include_integer
        self.zero_variance = config.zero_variance
        self.top_pairs = config.top_pairs
        self.matrix_: Optional[CorrelationMatrix] = None

    @property
    def analyzable_kinds(self) -> tuple:
        if self.include_integer:
            return (ColumnKind.NUMERIC, ColumnKind.INTEGER, ColumnKind.BOOLEAN)
        return (ColumnKind.NUMERIC, ColumnKind.BOOLEAN)

    def select_columns(self, df: pd.DataFrame) -> List[str]:
        """Analyzable column names in the frame's own order."""
        return columns_of_kind(df, *self.analyzable_kinds)

    def compute(self, df: pd.DataFrame) -> CorrelationMatrix:
        """Select, project and correlate the analyzable columns.

        Args:
            df: Dataset with nulls already removed.

        Returns:
            CorrelationMatrix over the selected columns.
        """
        selected = self.select_columns(df)
        vectors = [classify(df[c]).to_real(df[c]) for c in selected]
        return correlation_matrix(selected, vectors, zero_variance=self.zero_variance)

    def fit(self, df: pd.DataFrame) -> StageResult:
        t0 = time.time()
        columns = list(df.columns)

        if df.isna().any().any():
            logger.warning(f"{STEP_NAME} | Input still contains nulls; drop them before correlating")

        matrix = self.compute(df)
        self.matrix_ = matrix

        undefined = [
            c for i, c in enumerate(matrix.columns) if np.isnan(matrix.values[i][i])
        ]
        if undefined:
            logger.warning(f"{STEP_NAME} | Undefined (zero-variance) columns: {undefined}")

        duration = time.time() - t0
        logger.info(
            f"{STEP_NAME} | Pearson matrix over {matrix.size} of {len(columns)} columns "
            f"({len(df):,} rows) in {duration:.1f}s"
        )

        return StageResult(
            step_name=self.step_name,
            input_columns=columns,
            output_columns=columns,
            rows_in=len(df),
            rows_out=len(df),
            results_df=matrix.strongest_pairs(self.top_pairs),
            metadata={
                "analyzed_columns": matrix.columns,
                "undefined_columns": undefined,
                "zero_variance": self.zero_variance,
            },
            duration_seconds=round(duration, 1),
        )

    def transform(self, df: pd.DataFrame) -> pd.DataFrame:
        return df.copy()
