"""
Output Manager

Owns the run directory of one pipeline run: config snapshot, intermediate and
final datasets, per-stage reports, the heatmap, the run log and the run
metadata.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional
import hashlib
import importlib.metadata
import json
import logging
import platform
import subprocess
import sys

import pandas as pd
import yaml

from credit_prep.config.schema import PipelineConfig


logger = logging.getLogger(__name__)

RUN_SUBDIRS = ["config", "data", "reports", "logs"]

# Distributions whose versions are recorded with every run
TRACKED_PACKAGES = ["pandas", "numpy", "scikit-learn", "plotly", "pydantic", "PyYAML"]


def _get_package_version(package: str) -> str:
    try:
        return importlib.metadata.version(package)
    except importlib.metadata.PackageNotFoundError:
        return "not installed"


def _get_git_hash() -> str:
    """Short HEAD hash, suffixed '-dirty' with local changes; 'no-git' outside a repo."""
    try:
        head = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            capture_output=True, text=True, timeout=5,
        )
        if head.returncode != 0:
            return "no-git"
        dirty = subprocess.run(["git", "diff", "--quiet"], capture_output=True, timeout=5)
    except (OSError, subprocess.SubprocessError):
        return "no-git"
    commit = head.stdout.strip()
    return f"{commit}-dirty" if dirty.returncode != 0 else commit


def _compute_input_hash(input_path: str, n_bytes: int = 1024 * 1024) -> str:
    """MD5 of the first ``n_bytes`` of the input CSV ('unknown' if unreadable)."""
    try:
        with open(input_path, "rb") as f:
            return hashlib.md5(f.read(n_bytes)).hexdigest()
    except OSError:
        return "unknown"


def collect_environment() -> Dict[str, Any]:
    """Interpreter, library, OS and git details recorded in run_metadata.json."""
    return {
        "git_commit": _get_git_hash(),
        "python_version": sys.version,
        "package_versions": {p: _get_package_version(p) for p in TRACKED_PACKAGES},
        "os_info": {
            "system": platform.system(),
            "release": platform.release(),
            "machine": platform.machine(),
        },
    }


class OutputManager:
    """Run directory layout and artifact writing for one pipeline run.

    Layout::

        {base_dir}/{run_id}/
            config/pipeline_config.yaml
            data/cleaned.csv, data/final.csv
            reports/profile_*.csv, reports/<step>.csv,
            reports/correlation_matrix.csv, reports/correlation_heatmap.html
            logs/pipeline.log
            run_metadata.json

    ``run_id`` is ``YYYYMMDD_HHMMSS_<hash6>``; the hash is taken from the
    serialized config, so two configs started in the same second still get
    different directories.

    Args:
        config: The pipeline configuration.
        run_start: Run start time. Defaults to now.
    """

    def __init__(self, config: PipelineConfig, run_start: Optional[datetime] = None):
        self._config = config
        self._run_start = run_start or datetime.now()
        self._run_end: Optional[datetime] = None
        self._status = "running"
        self._artifacts: Dict[str, str] = {}

        config_hash = hashlib.md5(config.model_dump_json().encode()).hexdigest()[:6]
        self._run_id = f"{self._run_start.strftime('%Y%m%d_%H%M%S')}_{config_hash}"
        self._run_dir = Path(config.output.base_dir) / self._run_id

        for sub in RUN_SUBDIRS:
            (self._run_dir / sub).mkdir(parents=True, exist_ok=True)
        logger.info("Output directory: %s", self._run_dir)

    @property
    def run_id(self) -> str:
        return self._run_id

    @property
    def run_dir(self) -> Path:
        return self._run_dir

    @property
    def status(self) -> str:
        return self._status

    @property
    def artifacts(self) -> Dict[str, str]:
        """Artifact name -> path of everything written through this manager."""
        return dict(self._artifacts)

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def intermediate_path(self) -> Path:
        """Where the cleaned dataset is handed to the analysis context."""
        if self._config.data.intermediate_path:
            return Path(self._config.data.intermediate_path)
        return self._run_dir / "data" / "cleaned.csv"

    def report_path(self, name: str) -> Path:
        return self._run_dir / "reports" / name

    def get_log_path(self) -> Path:
        return self._run_dir / "logs" / "pipeline.log"

    # ------------------------------------------------------------------
    # Writers
    # ------------------------------------------------------------------

    def save_config_snapshot(self, config: PipelineConfig) -> Path:
        """Write the effective config to config/pipeline_config.yaml."""
        path = self._run_dir / "config" / "pipeline_config.yaml"
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)
        logger.debug("Config snapshot saved to %s", path)
        return path

    def save_artifact(
        self,
        name: str,
        obj: Any,
        fmt: str = "csv",
        subdir: str = "reports",
        index: bool = False,
    ) -> Path:
        """Write a DataFrame (csv), a dict/list (json) or text under the run dir.

        Args:
            name: File stem, also the artifact's key in ``artifacts``.
            obj: Object to write.
            fmt: 'csv', 'json', or any other extension for plain text.
            subdir: Subdirectory of the run directory.
            index: Keep the DataFrame index (the correlation matrix needs it).

        Returns:
            Path written.
        """
        target_dir = self._run_dir / subdir
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / f"{name}.{fmt}"

        if fmt == "csv" and isinstance(obj, pd.DataFrame):
            obj.to_csv(path, index=index)
        elif fmt == "json":
            with open(path, "w", encoding="utf-8") as f:
                json.dump(obj, f, indent=2, default=str)
        else:
            path.write_text(str(obj), encoding="utf-8")

        self._artifacts[name] = str(path)
        logger.debug("Artifact saved: %s", path)
        return path

    def save_stage_results(self, result: Any, prefix: str = "") -> Optional[Path]:
        """Write a StageResult's per-column table to reports/<prefix><step_name>.csv.

        Stages with an empty results table write nothing.
        """
        if result.results_df is None or result.results_df.empty:
            return None
        return self.save_artifact(f"{prefix}{result.step_name}", result.results_df, fmt="csv")

    def save_run_metadata(self, extra: Optional[dict] = None) -> Path:
        """Write run_metadata.json: timing, status, environment, input hash.

        Args:
            extra: Additional entries (stage summaries, artifacts, error).
        """
        self._run_end = self._run_end or datetime.now()
        metadata = {
            "run_id": self._run_id,
            "run_start": self._run_start.isoformat(),
            "run_end": self._run_end.isoformat(),
            "duration_seconds": round((self._run_end - self._run_start).total_seconds(), 2),
            "status": self._status,
            "input_file": self._config.data.input_path,
            "input_file_hash": _compute_input_hash(self._config.data.input_path),
            **collect_environment(),
        }
        metadata.update(extra or {})

        path = self._run_dir / "run_metadata.json"
        with open(path, "w", encoding="utf-8") as f:
            json.dump(metadata, f, indent=2, default=str)
        logger.info("Run metadata saved to %s", path)
        return path

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def mark_complete(self, status: str = "success") -> None:
        """Record the final status ('success' or 'failed') and the end time."""
        self._status = status
        self._run_end = datetime.now()

    def mark_failed(self) -> None:
        self.mark_complete(status="failed")
