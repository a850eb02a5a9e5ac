"""Models package."""

from hfdaily.models.paper import AnalysisBatchResult, AnalyzedPaper, Paper

__all__ = [
    "Paper",
    "AnalyzedPaper",
    "AnalysisBatchResult",
]
