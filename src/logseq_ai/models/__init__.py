"""Pydantic data models for logseq-ai."""
