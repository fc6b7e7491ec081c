"""
Quality Module

Column profiling for dataset inspection between stages.
"""

from credit_prep.quality.profiler import profile_columns, profile_column, PROFILE_COLUMNS

__all__ = ["profile_columns", "profile_column", "PROFILE_COLUMNS"]
