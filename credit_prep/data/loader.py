"""
Data Loader

Reads the credit score CSV into nullable pandas columns. Column kinds are
inferred from the leading ``infer_schema_rows`` rows, then the whole file is
cast to those kinds. Rows further down that break the inferred kind make the
column fall back to a looser kind instead of failing the load.
"""

from pathlib import Path
from typing import Dict, Union
import logging

import pandas as pd

from credit_prep.core.exceptions import DataReaderError
from credit_prep.data.schema import ColumnKind, classify


logger = logging.getLogger(__name__)

DEFAULT_INFER_SCHEMA_ROWS = 6000

# Kinds tried, in order, when a column does not fit its inferred kind
_FALLBACKS = {
    ColumnKind.INTEGER: [ColumnKind.INTEGER, ColumnKind.NUMERIC, ColumnKind.TEXT],
    ColumnKind.NUMERIC: [ColumnKind.NUMERIC, ColumnKind.TEXT],
    ColumnKind.BOOLEAN: [ColumnKind.BOOLEAN, ColumnKind.TEXT],
    ColumnKind.TEXT: [ColumnKind.TEXT],
}

_BOOL_TOKENS = {"true": True, "false": False}


def infer_schema(path: Union[str, Path], n_rows: int = DEFAULT_INFER_SCHEMA_ROWS) -> Dict[str, ColumnKind]:
    """Infer a kind per column from the first ``n_rows`` rows of a CSV.

    Args:
        path: CSV file with a header row.
        n_rows: Number of leading rows to sample.

    Returns:
        Ordered mapping column name -> ColumnKind.
    """
    sample = pd.read_csv(path, nrows=n_rows, low_memory=False)
    return {col: classify(sample[col]) for col in sample.columns}


def cast_column(raw: pd.Series, kind: ColumnKind) -> pd.Series:
    """Cast a text column to the nullable dtype of ``kind``.

    Args:
        raw: Column read as text (nulls as NaN).
        kind: Target kind.

    Returns:
        Converted series.

    Raises:
        ValueError / TypeError / OverflowError: If a present value does not
            fit the kind (an integer too large for Int64 overflows).
    """
    if kind is ColumnKind.TEXT:
        return raw.astype("string")

    if kind is ColumnKind.BOOLEAN:
        mapped = raw.str.strip().str.lower().map(_BOOL_TOKENS)
        unparsed = mapped.isna() & raw.notna()
        if unparsed.any():
            bad = raw[unparsed].iloc[0]
            raise ValueError(f"Non-boolean value {bad!r} in column {raw.name!r}")
        return mapped.astype("boolean")

    numeric = pd.to_numeric(raw, errors="raise")
    # Int64 refuses non-integral floats, which is what triggers the fallback
    return numeric.astype(kind.dtype)


def load_csv(
    path: Union[str, Path],
    infer_schema_rows: int = DEFAULT_INFER_SCHEMA_ROWS,
) -> pd.DataFrame:
    """Load a CSV with sample-based kind inference.

    Args:
        path: CSV file with a header row.
        infer_schema_rows: Number of leading rows used to infer column kinds.

    Returns:
        DataFrame with Float64 / Int64 / boolean / string columns.

    Raises:
        DataReaderError: If the file is missing or cannot be parsed.
    """
    path = Path(path)
    if not path.exists():
        raise DataReaderError("Input file not found", source=str(path))

    logger.info("LOAD | Reading %s (schema from first %d rows)", path, infer_schema_rows)

    try:
        schema = infer_schema(path, infer_schema_rows)
        raw = pd.read_csv(path, dtype=str, keep_default_na=True, low_memory=False)
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as e:
        raise DataReaderError("Could not parse CSV", source=str(path), cause=e)

    columns = {}
    for col in raw.columns:
        inferred = schema.get(col, ColumnKind.TEXT)
        for kind in _FALLBACKS[inferred]:
            try:
                columns[col] = cast_column(raw[col], kind)
                break
            except (ValueError, TypeError, OverflowError) as e:
                logger.debug("LOAD | %s does not fit %s: %s", col, kind.value, e)
        if kind is not inferred:
            logger.warning(
                "LOAD | Column %s inferred as %s from the sample but read as %s",
                col, inferred.value, kind.value,
            )

    df = pd.DataFrame(columns, index=raw.index)
    logger.info("LOAD | Loaded %s rows, %d columns", f"{len(df):,}", len(df.columns))
    return df


def save_csv(df: pd.DataFrame, path: Union[str, Path]) -> Path:
    """Write a dataset as CSV (no index, nulls as empty fields).

    Args:
        df: Dataset to write.
        path: Output file; parent directories are created.

    Returns:
        Path written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    logger.info("SAVE | Wrote %s rows, %d columns to %s", f"{len(df):,}", len(df.columns), path)
    return path
