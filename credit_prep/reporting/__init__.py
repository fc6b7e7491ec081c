"""
Reporting Module

Interactive correlation heatmap.
"""

from credit_prep.reporting.heatmap import build_heatmap, save_heatmap

__all__ = ["build_heatmap", "save_heatmap"]
