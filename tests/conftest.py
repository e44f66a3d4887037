"""Shared test fixtures for all test modules."""

import pytest

import logseq_ai.config


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """
    Keep tests away from the real home directory and LOGSEQ_AI_* settings.

    configure_logging() writes under ~/.cache and load_config() reads
    ~/.config by default; both are redirected into the test's tmp_path.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setattr(
        logseq_ai.config,
        "DEFAULT_CONFIG_PATH",
        home / ".config" / "logseq-ai" / "config.yaml",
    )

    for name in (
        "LOGSEQ_AI_ENABLE_FORMATTING",
        "LOGSEQ_AI_LOG_FORMATTING_MODIFICATIONS",
        "LOGSEQ_AI_PRESERVE_CODE_BLOCKS",
        "LOGSEQ_AI_MAX_CONTEXT_TOKENS",
        "LOGSEQ_AI_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)

    return home


@pytest.fixture
def qa_response():
    """Two-card flashcard response with a multi-line answer."""
    return (
        "Q: What are the primary colors?\n"
        "A: The primary colors are:\n"
        "Red\n"
        "Blue\n"
        "Yellow #card\n"
        "\n"
        "Q: What is 2+2?\n"
        "A: 4"
    )
