"""
Pipeline Base Classes

Defines the contract (BaseStage and StageResult) that all pipeline stages
follow. A stage never mutates the frame it is given; ``transform`` returns a
new DataFrame.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

import pandas as pd


@dataclass
class StageResult:
    """Result of a pipeline stage.

    Attributes:
        step_name: Identifier for the stage (e.g., '02_redact').
        input_columns: Column names passed into the stage.
        output_columns: Column names after the stage.
        rows_in: Row count passed into the stage.
        rows_out: Row count after the stage.
        results_df: Detailed per-column results DataFrame.
        metadata: Arbitrary extra data (medians, failures, settings used).
        duration_seconds: Wall-clock time the stage took.
    """

    step_name: str
    input_columns: List[str]
    output_columns: List[str]
    rows_in: int
    rows_out: int
    results_df: pd.DataFrame = field(default_factory=pd.DataFrame)
    metadata: Dict[str, Any] = field(default_factory=dict)
    duration_seconds: float = 0.0

    @property
    def added_columns(self) -> List[str]:
        """Columns present after the stage but not before."""
        before = set(self.input_columns)
        return [c for c in self.output_columns if c not in before]

    @property
    def removed_columns(self) -> List[str]:
        """Columns present before the stage but not after."""
        after = set(self.output_columns)
        return [c for c in self.input_columns if c not in after]

    @property
    def rows_dropped(self) -> int:
        return self.rows_in - self.rows_out

    def summary(self) -> str:
        """Human-readable one-line summary."""
        return (
            f"{self.step_name}: {len(self.input_columns)} -> {len(self.output_columns)} columns "
            f"(+{len(self.added_columns)}/-{len(self.removed_columns)}), "
            f"{self.rows_in} -> {self.rows_out} rows in {self.duration_seconds:.1f}s"
        )


class BaseStage(ABC):
    """Base class for all pipeline stages.

    Subclasses implement fit() and transform(). The step_name and step_order
    attributes are used by the orchestrator for ordering and artifact naming.
    """

    step_name: str = ""
    step_order: int = 0

    @abstractmethod
    def fit(self, df: pd.DataFrame) -> StageResult:
        """Inspect the frame, remember what transform() needs, report it.

        Args:
            df: Input DataFrame (not modified).

        Returns:
            StageResult describing the outcome transform() will produce.
        """
        pass

    @abstractmethod
    def transform(self, df: pd.DataFrame) -> pd.DataFrame:
        """Apply the stage to a DataFrame.

        Args:
            df: Input DataFrame (not modified).

        Returns:
            New DataFrame.
        """
        pass

    def fit_transform(self, df: pd.DataFrame) -> Tuple[pd.DataFrame, StageResult]:
        """Convenience: fit + transform in one call.

        The returned StageResult reflects the transformed frame.

        Args:
            df: Input DataFrame.

        Returns:
            Tuple of (transformed DataFrame, StageResult).
        """
        result = self.fit(df)
        out = self.transform(df)
        result.output_columns = list(out.columns)
        result.rows_out = len(out)
        return out, result
