"""Rich rendering of formatted responses."""

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.syntax import Syntax

from quickgpt.models.content import CodeBlock, ContentBlock
from quickgpt.models.outcome import ChatOutcome


def render_code_block(block: CodeBlock) -> Panel:
    """
    Render a code block with line numbers, titled with its language.

    Unknown languages fall back to plain text highlighting.
    """
    syntax = Syntax(
        block.source.rstrip("\n"),
        block.language,
        line_numbers=True,
        word_wrap=True,
    )
    return Panel(syntax, title=f"[bold cyan]{block.language}[/bold cyan]", title_align="left")


def render_blocks(console: Console, blocks: list[ContentBlock]) -> None:
    """Print blocks in document order: markdown for text, panels for code."""
    for block in blocks:
        if isinstance(block, CodeBlock):
            console.print(render_code_block(block))
        else:
            console.print(Markdown(block.text))


def render_outcome(console: Console, outcome: ChatOutcome, blocks: list[ContentBlock]) -> None:
    """
    Show an outcome on the response surface.

    Errors and answers share the surface: failures print their message
    verbatim, successes print the formatted blocks.
    """
    if outcome.is_error:
        console.print(outcome.message, style="bold red", markup=False)
    elif blocks:
        render_blocks(console, blocks)
    else:
        console.print(outcome.message, style="dim", markup=False)
