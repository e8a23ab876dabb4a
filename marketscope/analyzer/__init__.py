"""
Analyzer Module

Claude-backed insight generation.
"""

from .client import AnalysisResponse, ClaudeClient, TokenUsage
from .insights import InsightGenerator, extract_json

__all__ = [
    "AnalysisResponse",
    "ClaudeClient",
    "TokenUsage",
    "InsightGenerator",
    "extract_json",
]
