"""
CLI Interface
=============
Command-line interface for the Fragenkatalog parser.

Usage:
    python -m fragekatalog parse <pdf_path> [options]
    python -m fragekatalog batch [directory] [options]
    python -m fragekatalog validate <json_path>
    python -m fragekatalog info <pdf_path>
"""

from __future__ import annotations

import os
import sys

import click
from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from . import __version__
from .batch import discover_section_files, parse_batch
from .engine import ParserConfig, ParserEngine
from .models import QuestionCatalog, ValidationReport
from .storage import default_output_path, load_catalog, write_catalog
from .text_source import ExtractionError
from .validator import ValidationEngine

console = Console()

_LOG_LEVELS = click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"])


@click.group()
@click.version_option(version=__version__, prog_name="fragekatalog")
def cli():
    """Fragenkatalog Parser: exam question catalog PDF to questions.json."""
    pass


@cli.command()
@click.argument("pdf_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output", "-o",
    default=None,
    help="Output JSON file (defaults to questions.json beside the PDF)",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Show statistics and a sample question",
)
@click.option(
    "--pdftotext",
    "pdftotext_path",
    default="pdftotext",
    help="Path to the pdftotext executable",
)
@click.option(
    "--log-level",
    default="WARNING",
    type=_LOG_LEVELS,
    help="Logging level",
)
@click.option(
    "--log-file",
    default=None,
    help="Path to log file",
)
@click.option(
    "--json-output",
    is_flag=True,
    default=False,
    help="Print the catalog JSON to stdout instead of writing a file",
)
def parse(
    pdf_path: str,
    output: str,
    verbose: bool,
    pdftotext_path: str,
    log_level: str,
    log_file: str,
    json_output: bool,
):
    """Parse a single catalog PDF."""

    if json_output:
        log_level = "ERROR"

    config = ParserConfig(
        pdftotext_path=pdftotext_path,
        log_level=log_level,
        log_file=log_file,
    )

    if not json_output:
        console.print()
        console.print(
            Panel.fit(
                f"[bold cyan]Fragenkatalog Parser v{__version__}[/]\n"
                f"[dim]Parsing: {os.path.basename(pdf_path)}[/]",
                border_style="cyan",
            )
        )
        console.print()

    try:
        engine = ParserEngine(config)
        catalog = engine.parse(pdf_path)
    except (FileNotFoundError, ExtractionError) as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)

    if json_output:
        click.echo(catalog.to_json(indent=2))
        return

    output_path = output or default_output_path(pdf_path)
    write_catalog(catalog, output_path)
    console.print(
        f"[green]Successfully wrote {catalog.total_count} questions to:[/] "
        f"{output_path}"
    )

    if verbose:
        _display_catalog(catalog)
        if engine.last_report is not None:
            _display_validation_table(engine.last_report)


@cli.command()
@click.argument(
    "directory",
    default=".",
    type=click.Path(exists=True, file_okay=False),
)
@click.option("--output", "-o", default=None, help="Output JSON file")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Verbose output")
@click.option(
    "--pdftotext",
    "pdftotext_path",
    default="pdftotext",
    help="Path to the pdftotext executable",
)
@click.option("--log-level", default="WARNING", type=_LOG_LEVELS, help="Logging level")
def batch(
    directory: str,
    output: str,
    verbose: bool,
    pdftotext_path: str,
    log_level: str,
):
    """Parse all *_sg<N>.pdf files of a directory into one catalog."""

    config = ParserConfig(pdftotext_path=pdftotext_path, log_level=log_level)
    engine = ParserEngine(config)

    console.print()
    console.print(
        Panel.fit(
            f"[bold cyan]Batch Fragenkatalog Parser[/]\n"
            f"[dim]Directory: {directory}[/]",
            border_style="cyan",
        )
    )
    console.print()

    section_files = discover_section_files(directory)
    if not section_files:
        console.print(f"[red]Error:[/] No *_sg<N>.pdf files found in {directory}")
        sys.exit(1)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Processing PDFs...", total=len(section_files))

        def on_file(section):
            progress.update(
                task,
                description=f"Parsing SG{section.number}: {section.path.name}",
            )
            progress.advance(task)

        result = parse_batch(engine, directory, progress_callback=on_file)

    _display_batch_summary(result)

    output_path = output or default_output_path(directory)
    write_catalog(result.catalog, output_path)
    console.print(
        f"[green]Successfully wrote {result.catalog.total_count} questions to:[/] "
        f"{output_path}"
    )

    if verbose:
        _display_catalog(result.catalog)


@cli.command()
@click.argument("json_path", type=click.Path(exists=True, dir_okay=False))
def validate(json_path: str):
    """Validate a previously written questions.json."""

    catalog = load_catalog(json_path)
    report = ValidationEngine().validate(catalog.questions)

    console.print()
    console.print(
        Panel.fit(
            f"[bold cyan]Validation Report[/]\n"
            f"[dim]File: {json_path}[/]",
            border_style="cyan",
        )
    )
    _display_validation_table(report)


@cli.command()
@click.argument("pdf_path", type=click.Path(exists=True, dir_okay=False))
def info(pdf_path: str):
    """Display PDF file information."""

    import fitz

    with fitz.open(pdf_path) as doc:
        table = Table(title="PDF Information", border_style="cyan")
        table.add_column("Property", style="bold")
        table.add_column("Value")

        table.add_row("File", os.path.basename(pdf_path))
        table.add_row("Pages", str(doc.page_count))
        table.add_row(
            "File Size",
            f"{os.path.getsize(pdf_path) / 1024 / 1024:.2f} MB",
        )

        metadata = doc.metadata or {}
        for key in ["title", "author", "subject", "creator", "producer"]:
            val = metadata.get(key, "")
            if val:
                table.add_row(key.title(), val)

    console.print()
    console.print(table)
    console.print()


# ─── Display Helpers ──────────────────────────────────────────────────────────


def _display_catalog(catalog: QuestionCatalog):
    """Statistics plus the first question as a sample."""
    console.print()

    table = Table(title="Statistics", border_style="cyan")
    table.add_column("Property", style="bold")
    table.add_column("Value")
    table.add_row("Title", catalog.title)
    table.add_row("Year", str(catalog.year))
    table.add_row("State", catalog.state)
    table.add_row("Total Questions", str(catalog.total_count))
    table.add_row("Total Correct Answers", str(catalog.correct_answer_count))
    console.print(table)

    if catalog.questions:
        q = catalog.questions[0]
        lines = [f"[bold]Q{q.id}:[/] {q.text}", f"[dim]Category: {q.category}[/]"]
        for opt in q.options:
            mark = " [green]\\[CORRECT][/]" if opt.correct else ""
            lines.append(f"  {opt.letter}) {opt.text}{mark}")
        console.print()
        console.print(Panel("\n".join(lines), title="Sample Question"))
    console.print()


def _display_validation_table(report: ValidationReport):
    """Display validation report as a rich table."""
    table = Table(title="Validation Report", border_style="green")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_column("Status", justify="center")

    def status_icon(count, threshold=0):
        if count <= threshold:
            return "[green]✓[/]"
        return "[red]✗[/]"

    table.add_row(
        "Total Questions",
        str(report.total_questions),
        "[green]✓[/]" if report.total_questions > 0 else "[red]✗[/]",
    )
    table.add_row(
        "Correct Answers",
        f"{report.correct_answers} ({report.answered_rate}% answered)",
        "[green]✓[/]" if report.answered_rate >= 100 else "[yellow]⚠[/]",
    )
    table.add_row(
        "Missing Question Numbers",
        str(len(report.missing_question_numbers)),
        status_icon(len(report.missing_question_numbers)),
    )
    table.add_row(
        "Duplicate Question Numbers",
        str(len(report.duplicate_question_numbers)),
        status_icon(len(report.duplicate_question_numbers)),
    )
    table.add_row(
        "Questions Without Correct Answer",
        str(len(report.questions_without_correct_answer)),
        status_icon(len(report.questions_without_correct_answer)),
    )
    table.add_row(
        "Questions With Letter Gaps",
        str(len(report.questions_with_letter_gaps)),
        status_icon(len(report.questions_with_letter_gaps)),
    )

    console.print(table)
    console.print()

    if report.category_breakdown:
        category_table = Table(title="Questions per Category", border_style="yellow")
        category_table.add_column("Category", style="bold")
        category_table.add_column("Count", justify="right")
        for category, count in sorted(report.category_breakdown.items()):
            category_table.add_row(category or "(none)", str(count))
        console.print(category_table)
        console.print()


def _display_batch_summary(result):
    """Display batch processing summary."""
    table = Table(title="Batch Processing Summary", border_style="cyan")
    table.add_column("SG", justify="right")
    table.add_column("PDF", style="bold")
    table.add_column("Questions", justify="right")
    table.add_column("Status", justify="center")

    for section, count in result.parsed:
        table.add_row(str(section.number), section.path.name, str(count), "[green]✓[/]")
    for section, error in result.failed:
        table.add_row(str(section.number), section.path.name, "-", "[red]✗ FAILED[/]")

    console.print()
    console.print(table)
    console.print()
    console.print(
        f"[bold]Total:[/] {result.catalog.total_count} questions from "
        f"{len(result.parsed)} PDFs, {len(result.failed)} failures"
    )
    console.print()


# ─── Entry point (for python -m fragekatalog.cli) ─────────────────────────────


if __name__ == "__main__":
    cli()
