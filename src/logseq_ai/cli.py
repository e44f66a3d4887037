"""CLI entry point for logseq-ai.

Runs the sanitization pipeline and the command-specific splitters on LLM
output read from a file or stdin, and previews the resulting Logseq blocks.
"""

import json
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from logseq_ai import __version__
from logseq_ai.blocks.editor import InMemoryBlockEditor
from logseq_ai.blocks.plan import (
    apply_block_plan,
    plan_answer_blocks,
    plan_flashcard_blocks,
    plan_subtask_blocks,
    plan_summary_blocks,
)
from logseq_ai.config import load_config
from logseq_ai.context.extractor import extract_block_context
from logseq_ai.formatting.lists import max_list_depth, parse_nested_list
from logseq_ai.formatting.pipeline import sanitize_for_logseq
from logseq_ai.formatting.validation import validate_block_hierarchy
from logseq_ai.models.blocks import BlockPlan
from logseq_ai.models.config import Config
from logseq_ai.models.formatting import TASK_MARKERS, ListNode
from logseq_ai.utils.logging import configure_logging, get_logger


logger = get_logger(__name__)
console = Console()

PREVIEW_TARGET = "AI response"


def _read_input(source: Optional[Path]) -> str:
    """Read LLM output from a file, or from stdin when no file is given."""
    if source is None:
        return click.get_text_stream("stdin").read()
    return source.read_text(encoding="utf-8")


def _load_config(ctx: click.Context) -> Config:
    try:
        return load_config(ctx.obj.get("config_path"))
    except (FileNotFoundError, ValueError) as e:
        logger.error("config_load_failed", error=str(e))
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        ctx.exit(1)


def _show_plan(plan: BlockPlan, as_json: bool) -> None:
    """Print a plan as JSON or as the outline it would produce."""
    if as_json:
        click.echo(json.dumps(plan.model_dump(), indent=2, ensure_ascii=False))
        return

    editor = InMemoryBlockEditor()
    target_uuid = editor.add_block(PREVIEW_TARGET)
    apply_block_plan(editor, target_uuid, plan)
    click.echo(editor.render())


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file (default: ~/.config/logseq-ai/config.yaml)",
)
@click.option("--verbose", is_flag=True, help="Enable debug logging")
@click.version_option(version=__version__, prog_name="logseq-ai")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], verbose: bool):
    """logseq-ai - Make LLM output safe for Logseq's block outline."""
    configure_logging(verbose=verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@cli.command()
@click.argument("source", required=False, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--command-type",
    type=click.Choice(["ask", "summarize", "flashcard", "tasks", "custom"]),
    default="ask",
    show_default=True,
    help="Command whose output is being sanitized",
)
@click.option("--preserve-code-blocks", is_flag=True, help="Keep fenced code blocks")
@click.option("--no-formatting", is_flag=True, help="Pass content through unchanged")
@click.pass_context
def sanitize(
    ctx: click.Context,
    source: Optional[Path],
    command_type: str,
    preserve_code_blocks: bool,
    no_formatting: bool,
):
    """Sanitize LLM output and print the result."""
    config = _load_config(ctx)
    options = config.formatter_options(command_type)

    overrides = {}
    if preserve_code_blocks:
        overrides["preserve_code_blocks"] = True
    if no_formatting:
        overrides["enable_formatting"] = False
    if overrides:
        options = options.model_copy(update=overrides)

    click.echo(sanitize_for_logseq(_read_input(source), options))


@cli.command()
@click.argument("source", required=False, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Print the block plan as JSON")
def flashcards(source: Optional[Path], as_json: bool):
    """Split Q&A output into flashcard blocks."""
    plan = plan_flashcard_blocks(_read_input(source))
    _show_plan(plan, as_json)


@cli.command()
@click.argument("source", required=False, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--marker",
    type=click.Choice(TASK_MARKERS),
    default="TODO",
    show_default=True,
    help="Marker of the parent task",
)
@click.option("--json", "as_json", is_flag=True, help="Print the block plan as JSON")
@click.pass_context
def subtasks(ctx: click.Context, source: Optional[Path], marker: str, as_json: bool):
    """Turn a subtask list into task blocks."""
    config = _load_config(ctx)
    plan = plan_subtask_blocks(_read_input(source), marker, config.formatter_options("tasks"))

    if plan.is_empty():
        console.print("[yellow]Warning:[/yellow] Could not parse subtasks from the input.")
        ctx.exit(1)

    _show_plan(plan, as_json)


@cli.command()
@click.argument("source", required=False, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Print the block plan as JSON")
@click.pass_context
def summary(ctx: click.Context, source: Optional[Path], as_json: bool):
    """Turn a summary into a header block with one child per point."""
    config = _load_config(ctx)
    plan = plan_summary_blocks(_read_input(source), config.formatter_options("summarize"))
    _show_plan(plan, as_json)


@cli.command()
@click.argument("source", required=False, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Print the block plan as JSON")
@click.pass_context
def answer(ctx: click.Context, source: Optional[Path], as_json: bool):
    """Turn an ask response into a single answer block."""
    config = _load_config(ctx)
    plan = plan_answer_blocks(_read_input(source), config.formatter_options("ask"))
    _show_plan(plan, as_json)


@cli.command()
@click.argument("source", required=False, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def validate(ctx: click.Context, source: Optional[Path]):
    """Report content that may break the block hierarchy."""
    result = validate_block_hierarchy(_read_input(source))

    if not result.warnings and not result.errors:
        console.print("[green]✓[/green] No hierarchy issues found")
        return

    for warning in result.warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")
    for error in result.errors:
        console.print(f"[red]Error:[/red] {error}")

    if not result.is_valid:
        ctx.exit(1)


@cli.command()
@click.argument("source", required=False, type=click.Path(exists=True, dir_okay=False, path_type=Path))
def tree(source: Optional[Path]):
    """Show the nesting of list items in the input."""
    content = _read_input(source)
    roots = parse_nested_list(content)

    if not roots:
        console.print("No list items found")
        return

    display = Tree("[bold]List items[/bold]")

    def add_nodes(parent: Tree, nodes: list[ListNode]) -> None:
        for node in nodes:
            branch = parent.add(f"{escape(node.content)} [dim](level {node.level})[/dim]")
            add_nodes(branch, node.children)

    add_nodes(display, roots)
    console.print(display)
    console.print(f"[dim]Max depth: {max_list_depth(content)}[/dim]")


@cli.command()
@click.argument("source", required=False, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--type",
    "context_type",
    type=click.Choice(["page", "block", "selection"]),
    default="block",
    show_default=True,
    help="Where the blocks came from",
)
@click.option("--max-tokens", type=click.IntRange(min=1), help="Override the configured context budget")
@click.option("--json", "as_json", is_flag=True, help="Print the context as JSON")
@click.pass_context
def context(
    ctx: click.Context,
    source: Optional[Path],
    context_type: str,
    max_tokens: Optional[int],
    as_json: bool,
):
    """Build prompt context from exported block JSON.

    The input is one block or a list of blocks, each with `uuid`, `content`
    and optional `children`.
    """
    config = _load_config(ctx)

    try:
        blocks = json.loads(_read_input(source))
    except json.JSONDecodeError as e:
        logger.error("context_input_invalid", error=str(e))
        console.print(f"[red]Error:[/red] Invalid block JSON: {escape(str(e))}")
        ctx.exit(1)

    if isinstance(blocks, dict):
        blocks = [blocks]
    if not isinstance(blocks, list):
        console.print("[red]Error:[/red] Expected a block object or a list of blocks")
        ctx.exit(1)

    budget = max_tokens or config.context.max_context_tokens
    result = extract_block_context(blocks, budget, context_type=context_type)

    if as_json:
        click.echo(json.dumps(result.model_dump(), indent=2, ensure_ascii=False))
        return

    click.echo(result.content)
    if result.was_truncated:
        console.print(f"[yellow]Warning:[/yellow] Context truncated to {budget} tokens")


def main():
    """Entry point for the logseq-ai command."""
    cli(obj={})


if __name__ == "__main__":
    main()
