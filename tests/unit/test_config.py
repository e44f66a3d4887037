"""Unit tests for configuration models and loading."""

import pytest
from pydantic import ValidationError

from logseq_ai.config import load_config
from logseq_ai.models.config import Config, FormattingConfig


class TestConfigModels:
    """Test configuration defaults and validation."""

    def test_defaults(self):
        """Test default settings."""
        config = Config()

        assert config.formatting.enable_formatting
        assert config.formatting.log_formatting_modifications
        assert not config.formatting.preserve_code_blocks
        assert config.context.max_context_tokens == 8000

    def test_formatter_options(self):
        """Test mapping formatting settings to pipeline options."""
        config = Config(formatting=FormattingConfig(preserve_code_blocks=True, log_formatting_modifications=False))
        options = config.formatter_options("summarize")

        assert options.command_type == "summarize"
        assert options.preserve_code_blocks
        assert not options.log_modifications
        assert options.enable_formatting

    def test_context_minimum(self):
        """Test that tiny context budgets are rejected."""
        with pytest.raises(ValidationError):
            Config(context={"max_context_tokens": 10})

    def test_frozen(self):
        """Test that configuration is immutable."""
        config = Config()
        with pytest.raises(ValidationError):
            config.formatting.enable_formatting = False


class TestLoadConfig:
    """Test loading configuration from YAML and the environment."""

    def test_missing_default_file_uses_defaults(self):
        """Test that no config file is not an error."""
        assert load_config() == Config()

    def test_missing_explicit_file(self, tmp_path):
        """Test that an explicitly requested file must exist."""
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            load_config(tmp_path / "nope.yaml")

    def test_load_from_file(self, tmp_path):
        """Test reading settings from YAML."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("""
formatting:
  enable_formatting: false
  preserve_code_blocks: true

context:
  max_context_tokens: 4000
""")

        config = load_config(config_file)

        assert not config.formatting.enable_formatting
        assert config.formatting.preserve_code_blocks
        assert config.formatting.log_formatting_modifications
        assert config.context.max_context_tokens == 4000

    def test_empty_file(self, tmp_path):
        """Test that an empty file gives defaults."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")
        assert load_config(config_file) == Config()

    def test_non_mapping(self, tmp_path):
        """Test that a YAML list is rejected."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- one\n- two\n")

        with pytest.raises(ValueError, match="must contain a mapping"):
            load_config(config_file)

    def test_invalid_yaml(self, tmp_path):
        """Test that malformed YAML raises ValueError."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("formatting: [unclosed\n")

        with pytest.raises(ValueError, match="Invalid YAML"):
            load_config(config_file)

    def test_validation_error(self, tmp_path):
        """Test that invalid values raise ValueError."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("context:\n  max_context_tokens: 10\n")

        with pytest.raises(ValueError, match="Configuration validation failed"):
            load_config(config_file)

    def test_env_overrides(self, tmp_path, monkeypatch):
        """Test LOGSEQ_AI_* overrides on top of the file."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("formatting:\n  enable_formatting: true\n")

        monkeypatch.setenv("LOGSEQ_AI_ENABLE_FORMATTING", "no")
        monkeypatch.setenv("LOGSEQ_AI_PRESERVE_CODE_BLOCKS", "TRUE")
        monkeypatch.setenv("LOGSEQ_AI_MAX_CONTEXT_TOKENS", "2000")

        config = load_config(config_file)

        assert not config.formatting.enable_formatting
        assert config.formatting.preserve_code_blocks
        assert config.context.max_context_tokens == 2000

    def test_invalid_env_values_ignored(self, monkeypatch):
        """Test that unparseable overrides are ignored."""
        monkeypatch.setenv("LOGSEQ_AI_ENABLE_FORMATTING", "sometimes")
        monkeypatch.setenv("LOGSEQ_AI_MAX_CONTEXT_TOKENS", "lots")

        config = load_config()

        assert config.formatting.enable_formatting
        assert config.context.max_context_tokens == 8000

    def test_default_path(self, isolated_environment):
        """Test that the default location is read when present."""
        config_dir = isolated_environment / ".config" / "logseq-ai"
        config_dir.mkdir(parents=True)
        (config_dir / "config.yaml").write_text("formatting:\n  log_formatting_modifications: false\n")

        assert not load_config().formatting.log_formatting_modifications
