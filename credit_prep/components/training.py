"""
Training Data Preparation

Turns the final, null-free dataset into the feature/target frames an AutoML
regression or classification run consumes: separates the target, drops
columns that would leak it, and makes a (stratified) train/test split.
"""

from dataclasses import dataclass, field
from typing import List
import logging
import time

import pandas as pd
from sklearn.model_selection import train_test_split

from credit_prep.config.schema import TrainingConfig
from credit_prep.core.exceptions import DataValidationError

logger = logging.getLogger(__name__)

STEP_NAME = "07_training_split"


@dataclass
class TrainingData:
    """Train/test frames ready for model fitting."""

    X_train: pd.DataFrame
    X_test: pd.DataFrame
    y_train: pd.Series
    y_test: pd.Series
    feature_columns: List[str] = field(default_factory=list)
    target_column: str = ""
    metadata: dict = field(default_factory=dict)

    @property
    def n_train(self) -> int:
        return len(self.X_train)

    @property
    def n_test(self) -> int:
        return len(self.X_test)


class TrainingDataPreparer:
    """Split a dataset into train/test features and target.

    Not a BaseStage (it does not return a single frame), but follows the
    same logging conventions.

    Args:
        config: TrainingConfig with the target, leakage columns and split size.
        seed: Global random seed for reproducibility.
    """

    step_name = STEP_NAME

    def __init__(self, config: TrainingConfig, seed: int = 42):
        self.target_column = config.target_column
        self.drop_columns = list(config.drop_columns)
        self.test_size = config.test_size
        self.stratify = config.stratify
        self.seed = seed

    def prepare(self, df: pd.DataFrame) -> TrainingData:
        """Separate the target and split rows into train and test.

        Args:
            df: Final dataset (nulls removed).

        Returns:
            TrainingData.

        Raises:
            DataValidationError: If the target column is missing.
        """
        t0 = time.time()
        if self.target_column not in df.columns:
            raise DataValidationError(
                f"Target column {self.target_column!r} not found",
                details={"available": list(df.columns)},
            )

        excluded = {self.target_column, *self.drop_columns}
        features = [c for c in df.columns if c not in excluded]
        X = df[features]
        y = df[self.target_column]

        stratify = None
        if self.stratify:
            class_counts = y.value_counts()
            if len(class_counts) > 1 and class_counts.min() >= 2:
                stratify = y.astype(str)
            else:
                logger.warning(f"{STEP_NAME} | Target too sparse to stratify, using a plain split")

        X_train, X_test, y_train, y_test = train_test_split(
            X, y,
            test_size=self.test_size,
            random_state=self.seed,
            stratify=stratify,
        )

        logger.info(
            f"{STEP_NAME} | Train: {len(X_train):,} rows, Test: {len(X_test):,} rows, "
            f"{len(features)} features, target {self.target_column} "
            f"in {time.time() - t0:.1f}s"
        )

        return TrainingData(
            X_train=X_train.reset_index(drop=True),
            X_test=X_test.reset_index(drop=True),
            y_train=y_train.reset_index(drop=True),
            y_test=y_test.reset_index(drop=True),
            feature_columns=features,
            target_column=self.target_column,
            metadata={
                "test_size": self.test_size,
                "stratified": stratify is not None,
                "seed": self.seed,
                "dropped_columns": [c for c in self.drop_columns if c in df.columns],
            },
        )
