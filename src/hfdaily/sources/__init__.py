"""Sources package."""

from hfdaily.sources.base import PaperSource
from hfdaily.sources.huggingface import HuggingFaceSource, parse_daily_papers

__all__ = [
    "PaperSource",
    "HuggingFaceSource",
    "parse_daily_papers",
]
