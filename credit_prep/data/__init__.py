"""
Data Module

CSV loading with sample-based kind inference, and the column kinds.
"""

from credit_prep.data.schema import ColumnKind, classify, columns_of_kind
from credit_prep.data.loader import load_csv, save_csv, infer_schema

__all__ = [
    "ColumnKind",
    "classify",
    "columns_of_kind",
    "load_csv",
    "save_csv",
    "infer_schema",
]
