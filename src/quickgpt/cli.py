"""CLI entry point for quickgpt."""

import asyncio
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

from quickgpt.models.config import Config
from quickgpt.models.outcome import OutcomeKind
from quickgpt.rendering import render_blocks, render_outcome
from quickgpt.services.chat_client import ChatClient
from quickgpt.services.history_store import HistoryStore
from quickgpt.services.response_formatter import extract_code_blocks, parse
from quickgpt.utils.logging import configure_logging, get_logger
from quickgpt.wizard import default_config_path, run_setup_wizard


logger = get_logger(__name__)
console = Console()


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from ~/.config/quickgpt/config.yaml (or the given path).

    Returns:
        Validated Config instance

    Raises:
        click.ClickException: If config is missing, has invalid permissions, or validation fails
    """
    config_path = config_path or default_config_path()

    try:
        config = Config.load(config_path)
        logger.info("config_loaded", path=str(config_path))
        return config
    except FileNotFoundError as e:
        logger.error("config_not_found", path=str(config_path))
        raise click.ClickException(str(e))
    except PermissionError as e:
        logger.error("config_permission_error", path=str(config_path))
        raise click.ClickException(str(e))
    except Exception as e:
        logger.error("config_validation_error", error=str(e))
        raise click.ClickException(f"Configuration validation failed:\n{e}")


def _history_store(ctx: click.Context) -> HistoryStore:
    return HistoryStore(ctx.obj.get("history_path"))


@click.group()
@click.version_option(version="0.1.0", prog_name="quickgpt")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to configuration file (default: ~/.config/quickgpt/config.yaml)",
)
@click.option(
    "--history-file",
    "history_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to history file (default: ~/.local/share/quickgpt/history.json)",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], history_path: Optional[Path]):
    """quickgpt: ask a chat model a quick question from the terminal."""
    configure_logging()

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["history_path"] = history_path


@cli.command()
@click.argument("prompt", required=False)
@click.option("--model", help="Override the configured model for this request")
@click.option("--raw", is_flag=True, help="Print the reply without formatting")
@click.option("--code-only", is_flag=True, help="Print only the code blocks of the reply")
@click.option("--continue", "continue_id", help="Append this exchange to a stored conversation")
@click.pass_context
def ask(
    ctx: click.Context,
    prompt: Optional[str],
    model: Optional[str],
    raw: bool,
    code_only: bool,
    continue_id: Optional[str],
):
    """
    Send a prompt and show the formatted reply.

    Examples:
        quickgpt ask "Explain breadth-first search"
        quickgpt ask --code-only "BFS in Python"
        quickgpt ask                      # Prompt interactively
    """
    config = load_config(ctx.obj["config_path"])
    store = _history_store(ctx)

    if continue_id and store.get_conversation(continue_id) is None:
        raise click.ClickException(f"No conversation with id {continue_id}")

    if prompt is None:
        prompt = Prompt.ask("[bold cyan]Ask[/bold cyan]")

    prompt = prompt.strip()
    if not prompt:
        raise click.UsageError("Prompt is empty")

    logger.info("ask_command_started", prompt_length=len(prompt), model_override=model)
    store.record_prompt(prompt)

    request_config = config.to_request_config(model=model)

    with console.status("[bold green]Waiting for response..."):
        outcome = asyncio.run(ChatClient().complete(prompt, request_config))

    logger.info("ask_command_outcome", kind=outcome.kind.value)

    if outcome.kind == OutcomeKind.SUCCESS:
        if continue_id:
            store.continue_conversation(continue_id, prompt, outcome.text)
        else:
            store.start_conversation(
                request_config.system_prompt, prompt, outcome.text, request_config.model
            )

    if raw or outcome.is_error:
        if raw:
            click.echo(outcome.message)
        else:
            render_outcome(console, outcome, [])
        if outcome.is_error:
            ctx.exit(1)
        return

    if code_only:
        code_blocks = extract_code_blocks(outcome.text or "")
        if not code_blocks:
            click.echo("No code blocks in response.", err=True)
        for block in code_blocks:
            click.echo(block.source, nl=False)
        return

    blocks = parse(outcome.text or "")
    render_outcome(console, outcome, blocks)


@cli.command()
@click.pass_context
def recent(ctx: click.Context):
    """List recently used prompts, most recent first."""
    prompts = _history_store(ctx).recent_prompts()
    if not prompts:
        click.echo("No recent prompts")
        return

    for index, prompt in enumerate(prompts, start=1):
        click.echo(f"{index:2}. {prompt}")


@cli.command()
@click.pass_context
def last(ctx: click.Context):
    """Print the last prompt sent."""
    prompt = _history_store(ctx).last_prompt()
    if prompt is None:
        raise click.ClickException("No prompt has been sent yet")
    click.echo(prompt)


@cli.group()
def history():
    """Browse and manage stored conversations."""


@history.command("list")
@click.pass_context
def history_list(ctx: click.Context):
    """List stored conversations."""
    conversations = _history_store(ctx).conversations()
    if not conversations:
        click.echo("No conversations")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", no_wrap=True)
    table.add_column("When")
    table.add_column("Model")
    table.add_column("Title")

    for entry in conversations:
        table.add_row(
            entry.id,
            entry.timestamp.strftime("%Y-%m-%d"),
            entry.model,
            entry.title,
        )

    console.print(table)


@history.command("show")
@click.argument("conversation_id")
@click.pass_context
def history_show(ctx: click.Context, conversation_id: str):
    """Show a stored conversation."""
    entry = _history_store(ctx).get_conversation(conversation_id)
    if entry is None:
        raise click.ClickException(f"No conversation with id {conversation_id}")

    console.print(f"[bold]{entry.title}[/bold] [dim]({entry.model})[/dim]")
    for message in entry.messages:
        if message.role == "system":
            continue
        console.rule(f"[bold]{message.role}[/bold]", align="left")
        if message.role == "assistant":
            render_blocks(console, parse(message.content))
        else:
            console.print(message.content, markup=False)


@history.command("delete")
@click.argument("conversation_id")
@click.pass_context
def history_delete(ctx: click.Context, conversation_id: str):
    """Delete a stored conversation."""
    if not _history_store(ctx).delete_conversation(conversation_id):
        raise click.ClickException(f"No conversation with id {conversation_id}")
    click.echo(f"Deleted {conversation_id}")


@history.command("clear")
@click.confirmation_option(prompt="Delete all stored conversations?")
@click.pass_context
def history_clear(ctx: click.Context):
    """Delete all stored conversations."""
    _history_store(ctx).clear_history()
    click.echo("History cleared")


@cli.command()
@click.pass_context
def init(ctx: click.Context):
    """Create or update the configuration file interactively."""
    logger.info("init_command_started")
    run_setup_wizard(ctx.obj["config_path"])


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
