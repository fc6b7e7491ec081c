"""
Pytest Configuration and Shared Fixtures

Provides common fixtures for all test modules including:
- Sample configurations (Pydantic-based) writing into tmp_path
- A synthetic credit score dataset with the raw file's quirks
- The same dataset written to a CSV file
"""

import logging
import sys
import pytest
from pathlib import Path
from typing import Any, Dict

import numpy as np
import pandas as pd

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


# ===================================================================
# LOGGING ISOLATION
# ===================================================================

@pytest.fixture(autouse=True)
def _restore_root_logging():
    """Undo setup_logging() calls made by a test (handlers and root level)."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if not type(handler).__module__.startswith("_pytest"):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


# ===================================================================
# CONFIGURATION FIXTURES
# ===================================================================

@pytest.fixture
def sample_config_dict(tmp_path) -> Dict[str, Any]:
    """Minimal valid config dict that can be loaded into PipelineConfig."""
    return {
        "data": {
            "input_path": str(tmp_path / "train.csv"),
            "intermediate_path": None,
            "infer_schema_rows": 6000,
        },
        "encoding": {
            "enabled": True,
            "column": "Credit_Score",
            "categories": {
                "Good": "Is_Good_Credit",
                "Standard": "Is_Standard_Credit",
                "Poor": "Is_Poor_Credit",
            },
        },
        "redaction": {
            "enabled": True,
            "columns": ["ID", "Customer_ID", "Name", "SSN", "Month", "Type_of_Loan"],
        },
        "normalization": {
            "enabled": True,
            "noise_characters": "_",
            "columns": [
                "Age",
                "Annual_Income",
                "Num_of_Delayed_Payment",
                "Outstanding_Debt",
                "Amount_invested_monthly",
            ],
        },
        "correlation": {"enabled": True, "include_integer": True, "zero_variance": "nan", "top_pairs": 5},
        "heatmap": {"title": "Correlation Matrix", "width": 800, "height": 800, "colorscale": "RdBu"},
        "imputation": {
            "enabled": True,
            "columns": ["Monthly_Inhand_Salary", "Num_Credit_Inquiries", "Amount_invested_monthly"],
            "drop_remaining_nulls": True,
        },
        "training": {
            "enabled": True,
            "target_column": "Is_Good_Credit",
            "drop_columns": ["Is_Standard_Credit", "Is_Poor_Credit"],
            "test_size": 0.25,
            "stratify": True,
        },
        "output": {
            "base_dir": str(tmp_path / "outputs"),
            "save_profiles": True,
            "save_stage_reports": True,
            "save_correlation_matrix": True,
            "save_heatmap": True,
            "save_final_dataset": True,
        },
        "reproducibility": {
            "global_seed": 42,
            "save_config": True,
            "save_metadata": True,
            "log_level": "DEBUG",
        },
    }


@pytest.fixture
def sample_config(sample_config_dict):
    """Create a PipelineConfig from the sample dict."""
    from credit_prep.config.schema import PipelineConfig

    return PipelineConfig(**sample_config_dict)


# ===================================================================
# DATA FIXTURES
# ===================================================================

def make_credit_frame(n: int = 60, seed: int = 42) -> pd.DataFrame:
    """Synthetic credit score records shaped like the raw CSV.

    Properties:
    - Credit_Score cycles Good / Standard / Poor (n/3 of each)
    - Age, Annual_Income, Outstanding_Debt, Amount_invested_monthly,
      Num_of_Delayed_Payment are text with stray underscores
    - Annual_Income is unparseable garbage on every 17th row
    - Num_of_Delayed_Payment is blank on every 13th row
    - Monthly_Inhand_Salary is missing on every 7th row
    - Num_Credit_Inquiries is missing on every 11th row
    - Num_Bank_Accounts is an integer column
    """
    rng = np.random.RandomState(seed)
    idx = np.arange(n)

    income = rng.uniform(15000, 120000, n).round(2)
    salary = (income / 12).round(2)
    debt = rng.uniform(100, 5000, n).round(2)
    invested = rng.uniform(10, 800, n).round(2)

    data = {
        "ID": [f"0x{1600 + i:x}" for i in idx],
        "Customer_ID": [f"CUS_0x{3000 + i // 4:x}" for i in idx],
        "Month": [["January", "February", "March", "April"][i % 4] for i in idx],
        "Name": [f"Name {i}" for i in idx],
        "Age": [f"{20 + i % 40}_" if i % 5 == 0 else str(20 + i % 40) for i in idx],
        "SSN": [f"{100 + i:03d}-00-{1000 + i:04d}" for i in idx],
        "Occupation": [["Scientist", "Teacher", "_______", "Engineer"][i % 4] for i in idx],
        "Annual_Income": [
            "--333_333" if i % 17 == 0 else (f"{income[i]}_" if i % 3 == 0 else str(income[i]))
            for i in idx
        ],
        "Monthly_Inhand_Salary": [np.nan if i % 7 == 3 else salary[i] for i in idx],
        "Num_Bank_Accounts": [int(i % 8) for i in idx],
        "Num_Credit_Inquiries": [np.nan if i % 11 == 5 else float(i % 9) for i in idx],
        "Num_of_Delayed_Payment": [
            "" if i % 13 == 6 else (f"{i % 20}_" if i % 4 == 1 else str(i % 20))
            for i in idx
        ],
        "Outstanding_Debt": [f"{debt[i]}_" if i % 6 == 2 else str(debt[i]) for i in idx],
        "Amount_invested_monthly": [
            "__10000__" if i % 9 == 4 else str(invested[i]) for i in idx
        ],
        "Credit_Utilization_Ratio": rng.uniform(20, 45, n).round(4),
        "Type_of_Loan": ["Auto Loan, and Home Equity Loan"] * n,
        "Credit_Mix": [["Good", "Standard", "Bad"][i % 3] for i in idx],
        "Credit_Score": [["Good", "Standard", "Poor"][i % 3] for i in idx],
    }
    return pd.DataFrame(data)


@pytest.fixture
def raw_credit_df() -> pd.DataFrame:
    """Synthetic raw credit dataset (object columns, as pandas reads text)."""
    return make_credit_frame()


@pytest.fixture
def credit_csv(tmp_path, raw_credit_df) -> Path:
    """raw_credit_df written to tmp_path/train.csv (matches sample_config)."""
    path = tmp_path / "train.csv"
    raw_credit_df.to_csv(path, index=False)
    return path


@pytest.fixture
def loaded_credit_df(credit_csv) -> pd.DataFrame:
    """The synthetic CSV loaded through the pipeline's loader."""
    from credit_prep.data.loader import load_csv

    return load_csv(credit_csv)


@pytest.fixture
def linear_df() -> pd.DataFrame:
    """Small null-free frame with known correlations.

    - b = 2a (r = 1), c = -a (r = -1)
    - flag boolean, note text, count integer
    """
    a = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]
    return pd.DataFrame({
        "a": pd.array(a, dtype="Float64"),
        "note": pd.array(list("uvwxyz"), dtype="string"),
        "b": pd.array([2 * v for v in a], dtype="Float64"),
        "count": pd.array([3, 1, 4, 1, 5, 9], dtype="Int64"),
        "flag": pd.array([False, False, True, False, True, True], dtype="boolean"),
        "c": pd.array([-v for v in a], dtype="Float64"),
    })


# ===================================================================
# OUTPUT FIXTURES
# ===================================================================

@pytest.fixture
def tmp_config_yaml(tmp_path, sample_config_dict):
    """Write sample config to a temp YAML file and return its path."""
    import yaml

    config_path = tmp_path / "test_config.yaml"
    with open(config_path, "w") as f:
        yaml.dump(sample_config_dict, f)
    return config_path
