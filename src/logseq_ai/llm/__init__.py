"""Helpers for consuming LLM responses."""
