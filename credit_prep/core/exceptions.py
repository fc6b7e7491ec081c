"""
Custom Exceptions for the Pipeline

Every error the pipeline raises on purpose derives from PipelineException, so
the orchestrator and the CLI can tell expected failures (bad config, unreadable
CSV, missing column, undefined correlation) from programming errors.
"""

from typing import Any, Dict, List, Optional


class PipelineException(Exception):
    """
    Base exception for all pipeline errors.

    Args:
        message: What went wrong
        details: Structured context, kept for logs and run metadata
        cause: Underlying exception when this one wraps another
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def _parts(self) -> List[str]:
        """Segments joined by ' | ' in str(); subclasses append their own."""
        parts = [self.message]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return parts

    def __str__(self) -> str:
        return " | ".join(self._parts())

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form for run metadata."""
        return {
            "type": type(self).__name__,
            "message": self.message,
            "details": self.details,
            "cause": str(self.cause) if self.cause else None,
        }


class ConfigurationError(PipelineException):
    """Config file missing, not valid YAML, or rejected by the schema."""


class DataReaderError(PipelineException):
    """
    The input CSV cannot be read (missing, empty, undecodable).

    Args:
        source: Path of the file that failed
    """

    def __init__(self, message: str, source: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.source = source

    def _parts(self) -> List[str]:
        parts = super()._parts()
        if self.source:
            parts.append(f"Source: {self.source}")
        return parts


class DataValidationError(PipelineException):
    """
    The data does not have the shape a stage needs.

    Examples:
    - Columns to impute are missing
    - Target column absent before the train/test split

    Args:
        validation_errors: One dict per problem found
    """

    def __init__(
        self,
        message: str,
        validation_errors: Optional[List[Dict[str, Any]]] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.validation_errors = validation_errors or []

    def _parts(self) -> List[str]:
        parts = super()._parts()
        if self.validation_errors:
            parts.append(f"{len(self.validation_errors)} validation error(s)")
        return parts


class ColumnTypeError(DataValidationError):
    """A column's kind does not support the operation (text to real numbers)."""

    def __init__(self, message: str, column: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.column = column

    def _parts(self) -> List[str]:
        parts = super()._parts()
        if self.column:
            parts.append(f"Column: {self.column}")
        return parts


class CorrelationError(PipelineException):
    """
    A correlation coefficient is undefined (zero-variance column) and the
    configured policy asks for a failure instead of NaN.
    """

    def __init__(self, message: str, column: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.column = column

    def _parts(self) -> List[str]:
        parts = super()._parts()
        if self.column:
            parts.append(f"Column: {self.column}")
        return parts
