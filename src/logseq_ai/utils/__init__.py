"""Shared utilities for logseq-ai."""
