"""
Integration Tests for scripts/run_pipeline.py
"""

import importlib.util
from pathlib import Path

import pytest


SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "run_pipeline.py"


@pytest.fixture(scope="module")
def cli():
    spec = importlib.util.spec_from_file_location("run_pipeline", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestParseArgs:

    def test_defaults(self, cli):
        args = cli.parse_args([])
        assert args.config is None
        assert cli._build_cli_overrides(args) == {}

    def test_overrides(self, cli):
        args = cli.parse_args([
            "--input", "data/other.csv",
            "--output-dir", "out",
            "--infer-schema-rows", "100",
            "--target-column", "Is_Poor_Credit",
            "--zero-variance", "raise",
            "--log-level", "WARNING",
        ])
        assert cli._build_cli_overrides(args) == {
            "data.input_path": "data/other.csv",
            "output.base_dir": "out",
            "data.infer_schema_rows": 100,
            "training.target_column": "Is_Poor_Credit",
            "correlation.zero_variance": "raise",
            "reproducibility.log_level": "WARNING",
        }

    def test_rejects_unknown_policy(self, cli):
        with pytest.raises(SystemExit):
            cli.parse_args(["--zero-variance", "zero"])


class TestMain:

    def test_success(self, cli, tmp_config_yaml, credit_csv, tmp_path, capsys):
        exit_code = cli.main(["--config", str(tmp_config_yaml)])

        assert exit_code == 0
        out = capsys.readouterr().out
        assert "Pipeline completed: success" in out
        run_dirs = list((tmp_path / "outputs").iterdir())
        assert len(run_dirs) == 1
        assert (run_dirs[0] / "config" / "pipeline_config.yaml").exists()
        assert (run_dirs[0] / "data" / "final.csv").exists()
        assert (run_dirs[0] / "reports" / "correlation_heatmap.html").exists()

    def test_output_dir_override(self, cli, tmp_config_yaml, credit_csv, tmp_path):
        target = tmp_path / "elsewhere"
        exit_code = cli.main(["--config", str(tmp_config_yaml), "--output-dir", str(target)])

        assert exit_code == 0
        assert len(list(target.iterdir())) == 1

    def test_missing_config(self, cli, tmp_path, capsys):
        exit_code = cli.main(["--config", str(tmp_path / "absent.yaml")])

        assert exit_code == 2
        assert "Config file not found" in capsys.readouterr().err

    def test_failed_run(self, cli, tmp_config_yaml, credit_csv):
        exit_code = cli.main(["--config", str(tmp_config_yaml), "--target-column", "Credit_Score"])
        assert exit_code == 1
