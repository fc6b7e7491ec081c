"""
Credit Score Preparation Pipeline

Loads the credit score CSV, cleans it, analyses feature correlations and
prepares train/test frames for an AutoML step.
"""

__version__ = "1.0.0"
__author__ = "Credit Scoring Team"
