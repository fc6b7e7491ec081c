"""IO Module - Output directory management for pipeline runs."""

from credit_prep.io.output_manager import OutputManager, RUN_SUBDIRS

__all__ = ["OutputManager", "RUN_SUBDIRS"]
