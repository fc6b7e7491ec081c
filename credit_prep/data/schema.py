"""
Column Kinds

A closed set of column kinds used across the pipeline. Every place that needs
to know whether a column is numeric, boolean or text goes through
``classify`` and ``ColumnKind`` instead of inspecting dtypes itself.
"""

from enum import Enum
from typing import List

import numpy as np
import pandas as pd

from credit_prep.core.exceptions import ColumnTypeError


class ColumnKind(str, Enum):
    """Kind of a dataset column and the nullable pandas dtype that stores it."""

    NUMERIC = "numeric"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    TEXT = "text"

    @property
    def dtype(self) -> str:
        """Nullable pandas dtype used for columns of this kind."""
        return _DTYPES[self]

    @property
    def is_numeric(self) -> bool:
        return self in (ColumnKind.NUMERIC, ColumnKind.INTEGER)

    def to_real(self, series: pd.Series) -> np.ndarray:
        """Project a column onto real numbers, one value per row.

        NUMERIC/INTEGER values map to floats (nulls stay NaN so rows remain
        aligned). BOOLEAN maps null and False to 0.0, True to 1.0.

        Args:
            series: Column of this kind.

        Returns:
            float64 array with the same length as the series.

        Raises:
            ColumnTypeError: For TEXT columns.
        """
        if self is ColumnKind.BOOLEAN:
            return series.astype("boolean").fillna(False).to_numpy(dtype=float)
        if self.is_numeric:
            return series.astype("Float64").to_numpy(dtype=float, na_value=np.nan)
        raise ColumnTypeError(
            "Text columns cannot be projected onto real numbers",
            column=str(series.name),
        )


_DTYPES = {
    ColumnKind.NUMERIC: "Float64",
    ColumnKind.INTEGER: "Int64",
    ColumnKind.BOOLEAN: "boolean",
    ColumnKind.TEXT: "string",
}


def classify(series: pd.Series) -> ColumnKind:
    """Return the kind of a column.

    Object columns whose non-null values are all Python/numpy booleans are
    BOOLEAN (this is how pandas reads a True/False column with gaps).
    Anything that is not boolean or numeric is TEXT.
    """
    if pd.api.types.is_bool_dtype(series.dtype):
        return ColumnKind.BOOLEAN
    if pd.api.types.is_integer_dtype(series.dtype):
        return ColumnKind.INTEGER
    if pd.api.types.is_float_dtype(series.dtype):
        return ColumnKind.NUMERIC
    if series.dtype == object:
        present = series.dropna()
        if len(present) > 0 and all(isinstance(v, (bool, np.bool_)) for v in present):
            return ColumnKind.BOOLEAN
    return ColumnKind.TEXT


def columns_of_kind(df: pd.DataFrame, *kinds: ColumnKind) -> List[str]:
    """Names of the columns whose kind is one of ``kinds``, in frame order."""
    return [c for c in df.columns if classify(df[c]) in kinds]
