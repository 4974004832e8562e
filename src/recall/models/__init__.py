"""Pydantic models for configuration and provider messages."""
