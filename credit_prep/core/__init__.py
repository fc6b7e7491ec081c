"""
Credit Score Preparation - Core Package

This package provides the core infrastructure for the pipeline:
- Logging utilities
- Custom exceptions
"""

from credit_prep.core.logger import get_logger, setup_logging, PipelineLogger
from credit_prep.core.exceptions import (
    PipelineException,
    ConfigurationError,
    DataReaderError,
    DataValidationError,
    ColumnTypeError,
    CorrelationError,
)

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    "PipelineLogger",
    # Exceptions
    "PipelineException",
    "ConfigurationError",
    "DataReaderError",
    "DataValidationError",
    "ColumnTypeError",
    "CorrelationError",
]
