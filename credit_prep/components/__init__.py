"""
Pipeline Stage Components

Each stage follows the BaseStage interface from credit_prep.pipeline.base.
"""

from credit_prep.components.encoder import CategoricalEncoder
from credit_prep.components.redactor import ColumnRedactor
from credit_prep.components.numeric_normalizer import NumericTextNormalizer, parse_numeric_text
from credit_prep.components.correlation import (
    CorrelationEngine,
    CorrelationMatrix,
    correlation_matrix,
    pearson,
)
from credit_prep.components.imputer import MedianImputer, NullRowDropper
from credit_prep.components.training import TrainingDataPreparer, TrainingData

__all__ = [
    "CategoricalEncoder",
    "ColumnRedactor",
    "NumericTextNormalizer",
    "parse_numeric_text",
    "CorrelationEngine",
    "CorrelationMatrix",
    "correlation_matrix",
    "pearson",
    "MedianImputer",
    "NullRowDropper",
    "TrainingDataPreparer",
    "TrainingData",
]
