"""Command-line interface for stt-correct.

Uses Typer for a developer tool that exercises the matcher and the diff
engine on ad-hoc text.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from stt_correct import __version__
from stt_correct.config import CorrectorConfig, resolve_config
from stt_correct.errors import SttCorrectError, format_error_for_display
from stt_correct.learning.diff import compute_word_diff
from stt_correct.logging import LogLevel, set_verbosity
from stt_correct.vocabulary.analyzer import analyze_text
from stt_correct.vocabulary.catalog import EntityCatalog
from stt_correct.vocabulary.correction import CorrectionLog, apply_corrections
from stt_correct.vocabulary.phonetic import double_metaphone, phrase_similarity, word_similarity

# Load environment variables (STT_CORRECT_CONFIG) from a local .env
load_dotenv()

app = typer.Typer(
    name="stt-correct",
    help="Entity-aware correction of speech-to-text transcripts.",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"stt-correct version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show version and exit"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log matching statistics to stderr"),
    ] = False,
) -> None:
    """Entity-aware correction of speech-to-text transcripts."""
    if verbose:
        set_verbosity(LogLevel.DEBUG)


def _load_config(config_path: Path | None) -> CorrectorConfig:
    try:
        return resolve_config(config_path)
    except SttCorrectError as e:
        console.print(f"[red]Error:[/red] {escape(format_error_for_display(e))}")
        raise typer.Exit(1)


@app.command()
def encode(
    words: Annotated[list[str], typer.Argument(help="Words to encode")],
) -> None:
    """Show primary and secondary phonetic codes for words."""
    table = Table(title="Phonetic Codes")
    table.add_column("Word", style="cyan")
    table.add_column("Primary", style="green")
    table.add_column("Secondary", style="yellow")

    for word in words:
        code = double_metaphone(word)
        table.add_row(word, code.primary or "-", code.secondary or "-")

    console.print(table)


@app.command()
def similarity(
    first: Annotated[str, typer.Argument(help="First word or phrase")],
    second: Annotated[str, typer.Argument(help="Second word or phrase")],
) -> None:
    """Score how alike two words or phrases are."""
    if len(first.split()) > 1 or len(second.split()) > 1:
        score = phrase_similarity(first, second)
    else:
        score = word_similarity(first, second)
    console.print(f"[cyan]{first}[/cyan] vs [cyan]{second}[/cyan]: [bold]{score:.3f}[/bold]")


@app.command()
def analyze(
    text: Annotated[str, typer.Argument(help="Transcript text to analyze")],
    entities_file: Annotated[
        Optional[Path],
        typer.Option("--entities", "-e", help="Entity catalog JSON file"),
    ] = None,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Config JSON file"),
    ] = None,
    min_similarity: Annotated[
        Optional[float],
        typer.Option("--min-similarity", "-m", help="Override minimum similarity (0.0-1.0)"),
    ] = None,
    apply: Annotated[
        bool,
        typer.Option("--apply", "-a", help="Print the corrected text"),
    ] = False,
    log_file: Annotated[
        Optional[Path],
        typer.Option("--log", help="Save applied corrections to a JSON log"),
    ] = None,
) -> None:
    """Find likely mis-transcribed entity names in text."""
    config = _load_config(config_path)

    catalog_path = entities_file or (Path(config.entities_file) if config.entities_file else None)
    if catalog_path is None:
        console.print("[red]Error:[/red] No entity catalog given. Use --entities or set entities_file in config.")
        raise typer.Exit(1)

    try:
        catalog = EntityCatalog.from_json_file(catalog_path)
    except SttCorrectError as e:
        console.print(f"[red]Error:[/red] {escape(format_error_for_display(e))}")
        raise typer.Exit(1)

    threshold = min_similarity if min_similarity is not None else config.analyzer.min_similarity
    corrections = analyze_text(
        text,
        catalog.snapshot(),
        min_similarity=threshold,
        min_word_length=config.analyzer.min_word_length,
    )

    if not corrections:
        console.print("[green]No corrections suggested.[/green]")
        return

    table = Table(title=f"Suggested Corrections ({len(corrections)})")
    table.add_column("Span", style="dim")
    table.add_column("Original", style="yellow")
    table.add_column("Replacement", style="green")
    table.add_column("Matched As", style="cyan")
    table.add_column("Type")
    table.add_column("Score", justify="right")

    for c in corrections:
        table.add_row(
            f"{c.start_index}-{c.end_index}",
            c.original,
            c.replacement,
            c.matched_as,
            c.entity_type,
            f"{c.similarity:.2f}",
        )

    console.print(table)

    if apply:
        console.print(Panel(apply_corrections(text, corrections), title="Corrected Text"))

    if log_file:
        log = CorrectionLog(source="cli")
        log.extend(corrections)
        log.save(log_file)
        console.print(f"[dim]Saved {len(log)} corrections to {log_file}[/dim]")


@app.command()
def diff(
    original: Annotated[str, typer.Argument(help="Text as shown")],
    edited: Annotated[str, typer.Argument(help="Text as submitted")],
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Config JSON file"),
    ] = None,
) -> None:
    """Show learnable corrections between two versions of a text."""
    config = _load_config(config_path)
    changes = compute_word_diff(original, edited, config.diff)

    if not changes:
        console.print("[green]No learnable changes.[/green]")
        return

    table = Table(title=f"Detected Changes ({len(changes)})")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Original", style="yellow")
    table.add_column("Corrected", style="green")
    table.add_column("Left Context", style="dim")
    table.add_column("Right Context", style="dim")

    for change in changes:
        table.add_row(
            str(change.original_index),
            change.original,
            change.corrected,
            " ".join(change.left_context),
            " ".join(change.right_context),
        )

    console.print(table)


if __name__ == "__main__":
    app()
