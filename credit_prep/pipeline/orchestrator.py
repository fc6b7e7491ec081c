"""
Pipeline Orchestrator

Runs the preparation pipeline end to end:

    load -> encode -> redact -> normalize -> [cleaned.csv]
         -> (analysis) reload cleaned.csv -> drop nulls -> correlation -> heatmap
         -> impute medians -> drop remaining nulls -> train/test split

Every stage returns a new frame; the orchestrator only sequences them, logs,
and saves the artifacts of the run.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import logging
import time

import pandas as pd

from credit_prep.components.correlation import CorrelationEngine, CorrelationMatrix
from credit_prep.components.encoder import CategoricalEncoder
from credit_prep.components.imputer import MedianImputer, NullRowDropper
from credit_prep.components.numeric_normalizer import NumericTextNormalizer
from credit_prep.components.redactor import ColumnRedactor
from credit_prep.components.training import TrainingData, TrainingDataPreparer
from credit_prep.config.schema import PipelineConfig
from credit_prep.core.logger import PipelineLogger, setup_logging
from credit_prep.data.loader import load_csv, save_csv
from credit_prep.io.output_manager import OutputManager
from credit_prep.pipeline.base import BaseStage, StageResult
from credit_prep.quality.profiler import profile_columns
from credit_prep.reporting.heatmap import build_heatmap, save_heatmap


logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Aggregate result of a full pipeline run.

    Attributes:
        stages: Ordered StageResults of every stage that ran.
        correlation: Correlation matrix from the analysis context.
        final_df: Imputed, null-free dataset.
        training: Train/test split for the AutoML step.
        artifacts: Artifact name -> path written during the run.
        total_duration: Total wall-clock time in seconds.
        status: 'pending', 'success' or 'failed'.
        error: Message of the exception that failed the run.
    """

    stages: List[StageResult] = field(default_factory=list)
    correlation: Optional[CorrelationMatrix] = None
    final_df: Optional[pd.DataFrame] = None
    training: Optional[TrainingData] = None
    artifacts: Dict[str, str] = field(default_factory=dict)
    total_duration: float = 0.0
    status: str = "pending"
    error: Optional[str] = None

    def summary(self) -> str:
        """Human-readable multi-line summary of the full run."""
        lines = [f"Pipeline {self.status} in {self.total_duration:.1f}s"]
        for stage in self.stages:
            lines.append(f"  {stage.summary()}")
        if self.correlation is not None:
            lines.append(f"  Correlation matrix: {self.correlation.size} columns")
        if self.final_df is not None:
            lines.append(f"  Final dataset: {len(self.final_df):,} rows, {len(self.final_df.columns)} columns")
        if self.training is not None:
            lines.append(f"  Train/Test: {self.training.n_train:,}/{self.training.n_test:,} rows")
        if self.error:
            lines.append(f"  Error: {self.error}")
        return "\n".join(lines)


class PipelineOrchestrator:
    """Orchestrates the credit score preparation pipeline.

    Args:
        config: Frozen pipeline configuration.
        output_manager: OutputManager for the current run.
    """

    def __init__(self, config: PipelineConfig, output_manager: OutputManager):
        self._config = config
        self._output_manager = output_manager
        self._plog = PipelineLogger(__name__)
        self._setup_logging()

    def _setup_logging(self) -> None:
        """Configure console logging plus the run's log file."""
        setup_logging(
            log_level=self._config.reproducibility.log_level,
            log_file=str(self._output_manager.get_log_path()),
        )
        self._plog.set_context(run=self._output_manager.run_id)
        logger.info("INIT | Run ID: %s", self._output_manager.run_id)

    # ------------------------------------------------------------------
    # Stage construction
    # ------------------------------------------------------------------

    def cleaning_stages(self) -> List[BaseStage]:
        """Enabled cleaning stages in execution order."""
        cfg = self._config
        stages: List[BaseStage] = []
        if cfg.encoding.enabled:
            stages.append(CategoricalEncoder(cfg.encoding))
        if cfg.redaction.enabled:
            stages.append(ColumnRedactor(cfg.redaction))
        if cfg.normalization.enabled:
            stages.append(NumericTextNormalizer(cfg.normalization))
        return stages

    def imputation_stages(self) -> List[BaseStage]:
        """Enabled imputation stages in execution order."""
        cfg = self._config.imputation
        stages: List[BaseStage] = []
        if cfg.enabled:
            stages.append(MedianImputer(cfg))
        if cfg.drop_remaining_nulls:
            stages.append(NullRowDropper())
        return stages

    def run_stages(
        self,
        df: pd.DataFrame,
        stages: List[BaseStage],
        collected: Optional[List[StageResult]] = None,
        report_prefix: str = "",
    ) -> pd.DataFrame:
        """Run stages in order, each on the previous stage's output.

        Args:
            df: Input DataFrame (not modified).
            stages: Stages to run.
            collected: Optional list that receives each StageResult.
            report_prefix: Prefix of the per-stage report file names.

        Returns:
            Output of the last stage.
        """
        for stage in stages:
            self._plog.step_start(stage.step_name)
            start = time.time()
            df, result = stage.fit_transform(df)
            result.duration_seconds = time.time() - start
            if collected is not None:
                collected.append(result)
            self._plog.stage_result(result)
            if self._config.output.save_stage_reports:
                self._output_manager.save_stage_results(result, prefix=report_prefix)
            self._plog.step_complete(stage.step_name, result.duration_seconds)
        return df

    # ------------------------------------------------------------------
    # Pipeline sections
    # ------------------------------------------------------------------

    def load(self) -> pd.DataFrame:
        """Load the input CSV configured in data.input_path."""
        df = load_csv(
            self._config.data.input_path,
            infer_schema_rows=self._config.data.infer_schema_rows,
        )
        self._plog.data_stats("raw", len(df), len(df.columns))
        return df

    def clean(self, df: pd.DataFrame, collected: Optional[List[StageResult]] = None) -> pd.DataFrame:
        """Encode the label, redact columns, normalize numeric text."""
        cleaned = self.run_stages(df, self.cleaning_stages(), collected)
        self._plog.data_stats("cleaned", len(cleaned), len(cleaned.columns))
        return cleaned

    def analyze_correlations(
        self,
        intermediate_path,
        collected: Optional[List[StageResult]] = None,
        artifacts: Optional[Dict[str, str]] = None,
    ) -> CorrelationMatrix:
        """Correlation analysis on a fresh read of the intermediate CSV.

        Args:
            intermediate_path: CSV written by the cleaning section.
            collected: Optional list that receives each StageResult.
            artifacts: Optional dict that receives written artifact paths.

        Returns:
            The correlation matrix.
        """
        analysis_df = load_csv(
            intermediate_path,
            infer_schema_rows=self._config.data.infer_schema_rows,
        )
        engine = CorrelationEngine(self._config.correlation)
        self.run_stages(analysis_df, [NullRowDropper(), engine], collected, report_prefix="analysis_")
        matrix = engine.matrix_

        out = self._config.output
        if out.save_correlation_matrix:
            path = self._output_manager.save_artifact(
                "correlation_matrix", matrix.to_frame(), fmt="csv", index=True
            )
            self._record(artifacts, "correlation_matrix", path)
        if out.save_heatmap:
            fig = build_heatmap(matrix, self._config.heatmap)
            path = save_heatmap(fig, self._output_manager.report_path("correlation_heatmap.html"))
            self._record(artifacts, "correlation_heatmap", path)
        return matrix

    def impute(self, df: pd.DataFrame, collected: Optional[List[StageResult]] = None) -> pd.DataFrame:
        """Median-fill the designated columns, then drop rows still holding nulls."""
        final = self.run_stages(df, self.imputation_stages(), collected)
        self._plog.data_stats("final", len(final), len(final.columns))
        return final

    def prepare_training(self, df: pd.DataFrame) -> TrainingData:
        preparer = TrainingDataPreparer(
            self._config.training, seed=self._config.reproducibility.global_seed
        )
        return preparer.prepare(df)

    # ------------------------------------------------------------------
    # Full run
    # ------------------------------------------------------------------

    def run_all(self, df: Optional[pd.DataFrame] = None) -> PipelineResult:
        """Run every section of the pipeline.

        Args:
            df: Raw dataset; loaded from data.input_path when None.

        Returns:
            PipelineResult. A failing stage is logged with its traceback and
            gives status 'failed' with the partial results collected so far.
        """
        result = PipelineResult()
        start_time = time.time()
        out = self._config.output

        try:
            raw = self.load() if df is None else df
            if out.save_profiles:
                self._save_profile("profile_raw", raw, result.artifacts)

            cleaned = self.clean(raw, result.stages)
            if out.save_profiles:
                self._save_profile("profile_cleaned", cleaned, result.artifacts)

            intermediate = save_csv(cleaned, self._output_manager.intermediate_path())
            self._record(result.artifacts, "intermediate", intermediate)

            if self._config.correlation.enabled:
                result.correlation = self.analyze_correlations(
                    intermediate, result.stages, result.artifacts
                )

            final = self.impute(cleaned, result.stages)
            result.final_df = final
            if out.save_profiles:
                self._save_profile("profile_final", final, result.artifacts)
            if out.save_final_dataset:
                path = save_csv(final, self._output_manager.run_dir / "data" / "final.csv")
                self._record(result.artifacts, "final_dataset", path)

            if self._config.training.enabled:
                result.training = self.prepare_training(final)

            result.status = "success"

        except Exception as e:
            logger.exception("PIPELINE | Failed: %s", e)
            result.status = "failed"
            result.error = str(e)

        result.total_duration = time.time() - start_time
        for name, path in self._output_manager.artifacts.items():
            result.artifacts.setdefault(name, path)
        logger.info("PIPELINE | %s", result.summary())

        self._output_manager.mark_complete(result.status)
        if self._config.reproducibility.save_metadata:
            self._output_manager.save_run_metadata(extra={
                "stages": [s.summary() for s in result.stages],
                "artifacts": result.artifacts,
                "error": result.error,
            })

        return result

    def _save_profile(self, name: str, df: pd.DataFrame, artifacts: Dict[str, str]) -> None:
        path = self._output_manager.save_artifact(name, profile_columns(df), fmt="csv")
        self._record(artifacts, name, path)

    @staticmethod
    def _record(artifacts: Optional[Dict[str, Any]], name: str, path) -> None:
        if artifacts is not None:
            artifacts[name] = str(path)
