"""
Analysis Module

Orchestration of the competitive, positioning and content pipelines.

Import the orchestrator from marketscope.analysis.orchestrator; this package
only re-exports the error types so low-level modules can depend on them.
"""

from .errors import (
    AnalysisError,
    GenerationFailed,
    InvalidState,
    NotFound,
    PersistenceFailed,
    ProviderDegraded,
)

__all__ = [
    "AnalysisError",
    "GenerationFailed",
    "InvalidState",
    "NotFound",
    "PersistenceFailed",
    "ProviderDegraded",
]
