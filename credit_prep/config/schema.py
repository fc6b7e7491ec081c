"""
Pydantic Configuration Schema

Defines all configuration models for the credit score preparation pipeline.
All fields have defaults matching the credit score classification dataset.
"""

from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, Field, model_validator


class DataConfig(BaseModel):
    """Data source configuration."""

    model_config = {"frozen": True}

    input_path: str = "data/train.csv"
    intermediate_path: Optional[str] = None
    infer_schema_rows: int = Field(default=6000, ge=1)


class EncodingConfig(BaseModel):
    """Categorical label encoding configuration."""

    model_config = {"frozen": True}

    enabled: bool = True
    column: str = "Credit_Score"
    categories: Dict[str, str] = Field(
        default_factory=lambda: {
            "Good": "Is_Good_Credit",
            "Standard": "Is_Standard_Credit",
            "Poor": "Is_Poor_Credit",
        }
    )

    @model_validator(mode="after")
    def indicator_names_unique(self) -> "EncodingConfig":
        names = list(self.categories.values())
        if len(names) != len(set(names)):
            raise ValueError(f"Indicator column names must be unique: {names}")
        return self


class RedactionConfig(BaseModel):
    """Identifying / unneeded column removal configuration."""

    model_config = {"frozen": True}

    enabled: bool = True
    columns: List[str] = Field(
        default_factory=lambda: [
            "ID", "Customer_ID", "Name", "SSN", "Month", "Type_of_Loan",
        ]
    )


class NormalizationConfig(BaseModel):
    """Numeric-text normalization configuration."""

    model_config = {"frozen": True}

    enabled: bool = True
    noise_characters: str = Field(default="_", min_length=1)
    columns: List[str] = Field(
        default_factory=lambda: [
            "Age",
            "Annual_Income",
            "Num_of_Loan",
            "Num_of_Delayed_Payment",
            "Changed_Credit_Limit",
            "Outstanding_Debt",
            "Amount_invested_monthly",
            "Monthly_Balance",
        ]
    )


class CorrelationConfig(BaseModel):
    """Correlation matrix configuration."""

    model_config = {"frozen": True}

    enabled: bool = True
    include_integer: bool = True
    zero_variance: Literal["nan", "raise"] = "nan"
    top_pairs: int = Field(default=10, ge=0)


class HeatmapConfig(BaseModel):
    """Correlation heatmap rendering configuration."""

    model_config = {"frozen": True}

    title: str = "Correlation Matrix"
    width: int = Field(default=1000, gt=0)
    height: int = Field(default=1000, gt=0)
    colorscale: str = "RdBu"


class ImputationConfig(BaseModel):
    """Median imputation configuration."""

    model_config = {"frozen": True}

    enabled: bool = True
    columns: List[str] = Field(
        default_factory=lambda: [
            "Monthly_Inhand_Salary",
            "Num_Credit_Inquiries",
            "Amount_invested_monthly",
        ]
    )
    drop_remaining_nulls: bool = True


class TrainingConfig(BaseModel):
    """Train/test preparation for the AutoML step."""

    model_config = {"frozen": True}

    enabled: bool = True
    target_column: str = "Is_Good_Credit"
    drop_columns: List[str] = Field(
        default_factory=lambda: ["Is_Standard_Credit", "Is_Poor_Credit"]
    )
    test_size: float = Field(default=0.20, gt=0.0, lt=1.0)
    stratify: bool = True


class OutputConfig(BaseModel):
    """Output configuration."""

    model_config = {"frozen": True}

    base_dir: str = "outputs/credit_prep"
    save_profiles: bool = True
    save_stage_reports: bool = True
    save_correlation_matrix: bool = True
    save_heatmap: bool = True
    save_final_dataset: bool = True


class ReproducibilityConfig(BaseModel):
    """Reproducibility and logging configuration."""

    model_config = {"frozen": True}

    global_seed: int = 42
    save_config: bool = True
    save_metadata: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"


class PipelineConfig(BaseModel):
    """Top-level pipeline configuration combining all sections."""

    model_config = {"frozen": True}

    data: DataConfig = Field(default_factory=DataConfig)
    encoding: EncodingConfig = Field(default_factory=EncodingConfig)
    redaction: RedactionConfig = Field(default_factory=RedactionConfig)
    normalization: NormalizationConfig = Field(default_factory=NormalizationConfig)
    correlation: CorrelationConfig = Field(default_factory=CorrelationConfig)
    heatmap: HeatmapConfig = Field(default_factory=HeatmapConfig)
    imputation: ImputationConfig = Field(default_factory=ImputationConfig)
    training: TrainingConfig = Field(default_factory=TrainingConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    reproducibility: ReproducibilityConfig = Field(default_factory=ReproducibilityConfig)
