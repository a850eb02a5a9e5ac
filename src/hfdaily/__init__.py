"""Hugging Face daily papers digest for Google Chat."""

__version__ = "0.1.0"
