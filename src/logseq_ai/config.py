"""Configuration loader with YAML and environment variable support.

This module reads ~/.config/logseq-ai/config.yaml and allows environment
variable overrides using the LOGSEQ_AI_* prefix.

Environment variables:
- LOGSEQ_AI_ENABLE_FORMATTING: Override formatting.enable_formatting
- LOGSEQ_AI_LOG_FORMATTING_MODIFICATIONS: Override formatting.log_formatting_modifications
- LOGSEQ_AI_PRESERVE_CODE_BLOCKS: Override formatting.preserve_code_blocks
- LOGSEQ_AI_MAX_CONTEXT_TOKENS: Override context.max_context_tokens
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from logseq_ai.models.config import Config
from logseq_ai.utils.logging import get_logger


logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "logseq-ai" / "config.yaml"

_BOOL_ENV_OVERRIDES = {
    "LOGSEQ_AI_ENABLE_FORMATTING": "enable_formatting",
    "LOGSEQ_AI_LOG_FORMATTING_MODIFICATIONS": "log_formatting_modifications",
    "LOGSEQ_AI_PRESERVE_CODE_BLOCKS": "preserve_code_blocks",
}


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from YAML file with environment variable overrides.

    Unlike LLM credentials, every setting here has a default, so a missing
    config file is not an error.

    Args:
        config_path: Path to config file. If None, uses ~/.config/logseq-ai/config.yaml

    Returns:
        Validated Config object

    Raises:
        FileNotFoundError: If an explicitly given config file doesn't exist
        ValueError: If config file is invalid
    """
    explicit = config_path is not None
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if config_path.exists():
        logger.info("config_loading", path=str(config_path))
        try:
            with config_path.open() as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Configuration file must contain a mapping: {config_path}")
    elif explicit:
        raise FileNotFoundError(
            f"Configuration file not found at {config_path}\n\n"
            "Please create the file with the following format:\n\n"
            "formatting:\n"
            "  enable_formatting: true\n"
            "  log_formatting_modifications: true\n"
            "  preserve_code_blocks: false\n\n"
            "context:\n"
            "  max_context_tokens: 8000\n"
        )
    else:
        data = {}

    data = _apply_env_overrides(data)

    try:
        config = Config(**data)
    except Exception as e:
        logger.error("config_validation_error", path=str(config_path), error=str(e))
        raise ValueError(f"Configuration validation failed: {e}") from e

    logger.info("config_loaded", path=str(config_path))
    return config


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    """Apply environment variable overrides to configuration data.

    Args:
        data: Base configuration dictionary from YAML

    Returns:
        Configuration dictionary with environment overrides applied
    """
    if "formatting" not in data or data["formatting"] is None:
        data["formatting"] = {}
    if "context" not in data or data["context"] is None:
        data["context"] = {}

    for env_name, key in _BOOL_ENV_OVERRIDES.items():
        env_value = os.getenv(env_name)
        if env_value is None:
            continue
        parsed = _parse_bool(env_value)
        if parsed is not None:
            data["formatting"][key] = parsed
        else:
            logger.warning("config_env_override_ignored", variable=env_name, value=env_value)

    if env_max_tokens := os.getenv("LOGSEQ_AI_MAX_CONTEXT_TOKENS"):
        try:
            data["context"]["max_context_tokens"] = int(env_max_tokens)
        except ValueError:
            logger.warning(
                "config_env_override_ignored",
                variable="LOGSEQ_AI_MAX_CONTEXT_TOKENS",
                value=env_max_tokens,
            )

    return data


def _parse_bool(value: str) -> Optional[bool]:
    lower = value.strip().lower()
    if lower in ("true", "yes", "1"):
        return True
    if lower in ("false", "no", "0"):
        return False
    return None
