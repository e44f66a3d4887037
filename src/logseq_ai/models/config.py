"""Configuration models for logseq-ai."""

from pydantic import BaseModel, Field

from logseq_ai.models.formatting import CommandType, FormatterOptions


class FormattingConfig(BaseModel):
    """Configuration for LLM output sanitization."""

    enable_formatting: bool = Field(
        default=True,
        description="Sanitize LLM output before inserting blocks"
    )

    log_formatting_modifications: bool = Field(
        default=True,
        description="Log which formatting steps changed the content"
    )

    preserve_code_blocks: bool = Field(
        default=False,
        description="Keep fenced code blocks in responses"
    )

    model_config = {"frozen": True}


class ContextConfig(BaseModel):
    """Configuration for prompt context extraction."""

    max_context_tokens: int = Field(
        default=8000,
        ge=100,
        description="Maximum estimated tokens of page/block context sent with a prompt"
    )

    model_config = {"frozen": True}


class Config(BaseModel):
    """Root configuration for logseq-ai."""

    formatting: FormattingConfig = Field(
        default_factory=FormattingConfig, description="Sanitization settings"
    )
    context: ContextConfig = Field(
        default_factory=ContextConfig, description="Context extraction settings"
    )

    def formatter_options(self, command_type: CommandType = "ask") -> FormatterOptions:
        """Build pipeline options for a command from the formatting settings.

        Args:
            command_type: Command whose output is being formatted

        Returns:
            FormatterOptions reflecting this configuration
        """
        return FormatterOptions(
            enable_formatting=self.formatting.enable_formatting,
            log_modifications=self.formatting.log_formatting_modifications,
            preserve_code_blocks=self.formatting.preserve_code_blocks,
            command_type=command_type,
        )

    model_config = {"frozen": True}
