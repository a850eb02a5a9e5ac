"""AI processing package."""

from hfdaily.ai.analyzer import (
    AnalysisStrategy,
    PaperAnalyzer,
    extract_json_array,
    extract_json_object,
)

__all__ = [
    "AnalysisStrategy",
    "PaperAnalyzer",
    "extract_json_array",
    "extract_json_object",
]
