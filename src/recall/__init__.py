"""Recall: structure-aware retrieval over personal documents."""

__version__ = "0.1.0"
