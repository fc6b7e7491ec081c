"""
Pipeline Module

Stage contract shared by all components. The orchestrator lives in
credit_prep.pipeline.orchestrator (it imports the components, which import
this package).
"""

from credit_prep.pipeline.base import BaseStage, StageResult

__all__ = ["BaseStage", "StageResult"]
