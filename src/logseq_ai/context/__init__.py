"""Prompt context extraction and block property inheritance."""
