"""Recall CLI commands."""
