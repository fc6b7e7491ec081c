"""
Unit Tests for the Pydantic Configuration Schema and Loader
"""

import pytest
import yaml
from pydantic import ValidationError

from credit_prep.config.schema import (
    PipelineConfig,
    DataConfig,
    EncodingConfig,
    CorrelationConfig,
    HeatmapConfig,
    TrainingConfig,
)
from credit_prep.config.loader import load_config, save_config, _set_nested, _deep_merge
from credit_prep.core.exceptions import ConfigurationError


# ===================================================================
# Schema Tests
# ===================================================================

class TestSchemaDefaults:
    """Defaults match the credit score dataset."""

    def test_pipeline_defaults(self):
        config = PipelineConfig()
        assert config.data.input_path == "data/train.csv"
        assert config.data.infer_schema_rows == 6000
        assert config.encoding.column == "Credit_Score"
        assert list(config.encoding.categories) == ["Good", "Standard", "Poor"]
        assert "SSN" in config.redaction.columns
        assert config.normalization.noise_characters == "_"
        assert config.correlation.zero_variance == "nan"
        assert config.imputation.columns == [
            "Monthly_Inhand_Salary", "Num_Credit_Inquiries", "Amount_invested_monthly",
        ]
        assert config.training.target_column == "Is_Good_Credit"

    def test_config_is_frozen(self):
        config = PipelineConfig()
        with pytest.raises(ValidationError):
            config.data = DataConfig(input_path="other.csv")

    def test_infer_schema_rows_positive(self):
        with pytest.raises(ValidationError):
            DataConfig(infer_schema_rows=0)

    def test_duplicate_indicator_names_rejected(self):
        with pytest.raises(ValidationError):
            EncodingConfig(categories={"Good": "Is_Good", "Standard": "Is_Good"})

    def test_zero_variance_policy_values(self):
        assert CorrelationConfig(zero_variance="raise").zero_variance == "raise"
        with pytest.raises(ValidationError):
            CorrelationConfig(zero_variance="zero")

    def test_heatmap_size_positive(self):
        with pytest.raises(ValidationError):
            HeatmapConfig(width=0)

    @pytest.mark.parametrize("test_size", [0.0, 1.0, 1.5])
    def test_test_size_bounds(self, test_size):
        with pytest.raises(ValidationError):
            TrainingConfig(test_size=test_size)

    def test_from_dict(self, sample_config_dict):
        config = PipelineConfig(**sample_config_dict)
        assert config.correlation.top_pairs == 5
        assert config.reproducibility.log_level == "DEBUG"


# ===================================================================
# Loader Tests
# ===================================================================

class TestLoadConfig:
    """Test YAML loading with overrides."""

    def test_defaults_without_yaml(self):
        config = load_config()
        assert config == PipelineConfig()

    def test_load_from_yaml(self, tmp_config_yaml, sample_config_dict):
        config = load_config(str(tmp_config_yaml))
        assert config.data.input_path == sample_config_dict["data"]["input_path"]
        assert config.heatmap.width == 800

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(str(tmp_path / "absent.yaml"))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("data: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_config(str(path))

    def test_invalid_values(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.dump({"training": {"test_size": 2.0}}))
        with pytest.raises(ConfigurationError, match="Invalid pipeline configuration"):
            load_config(str(path))

    def test_cli_overrides(self, tmp_config_yaml):
        config = load_config(
            str(tmp_config_yaml),
            cli_overrides={
                "data.infer_schema_rows": 100,
                "correlation.zero_variance": "raise",
                "training.target_column": None,
            },
        )
        assert config.data.infer_schema_rows == 100
        assert config.correlation.zero_variance == "raise"
        # None values are ignored
        assert config.training.target_column == "Is_Good_Credit"

    def test_programmatic_overrides(self, tmp_config_yaml):
        config = load_config(
            str(tmp_config_yaml),
            overrides={"heatmap": {"title": "Credit correlations"}},
        )
        assert config.heatmap.title == "Credit correlations"
        assert config.heatmap.width == 800

    def test_relative_input_resolved_against_yaml(self, tmp_path):
        config_dir = tmp_path / "config"
        data_dir = tmp_path / "data"
        config_dir.mkdir()
        data_dir.mkdir()
        (data_dir / "train.csv").write_text("a\n1\n")
        path = config_dir / "pipeline.yaml"
        path.write_text(yaml.dump({"data": {"input_path": "../data/train.csv"}}))

        config = load_config(str(path))

        assert config.data.input_path == str((data_dir / "train.csv").resolve())

    def test_relative_input_kept_when_absent(self, tmp_path):
        path = tmp_path / "pipeline.yaml"
        path.write_text(yaml.dump({"data": {"input_path": "data/train.csv"}}))

        assert load_config(str(path)).data.input_path == "data/train.csv"


class TestConfigHelpers:

    def test_set_nested_creates_levels(self):
        d = {}
        _set_nested(d, "a.b.c", 1)
        assert d == {"a": {"b": {"c": 1}}}

    def test_deep_merge(self):
        base = {"a": {"x": 1, "y": 2}, "b": 1}
        _deep_merge(base, {"a": {"y": 3}, "c": 4})
        assert base == {"a": {"x": 1, "y": 3}, "b": 1, "c": 4}

    @pytest.mark.parametrize("suffix", [".yaml", ".json"])
    def test_save_config_roundtrip(self, tmp_path, sample_config, suffix):
        path = tmp_path / f"saved{suffix}"
        save_config(sample_config, str(path))

        assert path.exists()
        if suffix == ".yaml":
            assert load_config(str(path)) == sample_config
