"""
Config Module

Pydantic-based configuration for the credit score preparation pipeline.
"""

from credit_prep.config.schema import (
    PipelineConfig,
    DataConfig,
    EncodingConfig,
    RedactionConfig,
    NormalizationConfig,
    CorrelationConfig,
    HeatmapConfig,
    ImputationConfig,
    TrainingConfig,
    OutputConfig,
    ReproducibilityConfig,
)
from credit_prep.config.loader import load_config, save_config

__all__ = [
    "PipelineConfig",
    "DataConfig",
    "EncodingConfig",
    "RedactionConfig",
    "NormalizationConfig",
    "CorrelationConfig",
    "HeatmapConfig",
    "ImputationConfig",
    "TrainingConfig",
    "OutputConfig",
    "ReproducibilityConfig",
    "load_config",
    "save_config",
]
