"""logseq-ai - Make LLM output safe for Logseq's block outline."""

__version__ = "0.1.0"
