"""Main CLI interface for dep-uplift."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from ..core.analyzer import AnalysisResult, ChangeAnalyzer
from ..core.config import ALL_ECOSYSTEMS, AnalysisConfig
from ..core.parsers import registry
from ..core.types import DepUpliftError
from ..core.version import clean_version, determine_change_type
from ..git.content import GitContentProvider, LocalFileContentProvider
from ..output.formatters import ConsoleFormatter, JSONFormatter, MarkdownFormatter
from ..utils.logging import get_logger, setup_logging

app = typer.Typer(
    name="depuplift",
    help="Report dependency version changes between two revisions of a repository",
    add_completion=False
)

console = Console()
logger = get_logger("CLI")

OUTPUT_FORMATS = ("console", "json", "markdown")


def _validate_format(output_format: str) -> str:
    output_format = output_format.lower()
    if output_format not in OUTPUT_FORMATS:
        console.print(f"[red]Error: Unknown format '{output_format}'. Choose from: {', '.join(OUTPUT_FORMATS)}[/red]")
        raise typer.Exit(1)
    return output_format


def _render(result: AnalysisResult, output_format: str, output: Optional[Path]) -> None:
    """Print or save an analysis result in the requested format.

    Args:
        result: Analysis result to render
        output_format: One of ``OUTPUT_FORMATS``
        output: File to write instead of printing; console output is saved as JSON
    """
    if output_format == "markdown":
        markdown_formatter = MarkdownFormatter()
        if output:
            markdown_formatter.save(result.changes, output)
            console.print(f"Markdown report saved to {output}")
        else:
            typer.echo(markdown_formatter.format(result.changes), nl=False)
        return

    json_formatter = JSONFormatter(output)
    if output_format == "json" and not output:
        typer.echo(json_formatter.to_string(result))
        return

    if output_format == "console":
        ConsoleFormatter(console).format_results(result)

    if output:
        json_formatter.save_results(json_formatter.format_results(result))
        console.print(f"Results saved to {output}")


@app.command()
def compare(
    base: str = typer.Argument(..., help="Base revision (commit id or ref)"),
    head: str = typer.Argument("HEAD", help="Head revision (commit id or ref)"),
    repo: Path = typer.Option(
        Path("."),
        "--repo",
        "-r",
        help="Path to the git repository"
    ),
    ecosystems: str = typer.Option(
        ALL_ECOSYSTEMS,
        "--ecosystems",
        "-e",
        help="Comma separated ecosystems to report on, or 'all'"
    ),
    include_dev: bool = typer.Option(
        True,
        "--include-dev/--no-include-dev",
        help="Report development, test and other non-production dependencies"
    ),
    output_format: str = typer.Option(
        "console",
        "--format",
        "-f",
        help="Output format: console, json or markdown"
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the report to a file"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    )
) -> None:
    """Compare dependency versions between two revisions."""
    setup_logging(level=logging.WARNING, verbose=verbose)
    output_format = _validate_format(output_format)

    if not repo.is_dir():
        console.print(f"[red]Error: Repository path does not exist: {repo}[/red]")
        raise typer.Exit(1)

    try:
        config = AnalysisConfig.from_inputs(ecosystems=ecosystems, include_dev_dependencies=include_dev)
        analyzer = ChangeAnalyzer(GitContentProvider(repo), config)
        result = asyncio.run(analyzer.analyze_revisions(base, head))
        _render(result, output_format, output)
    except (DepUpliftError, OSError) as e:
        logger.error(f"Comparison failed: {e}")
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)


@app.command()
def diff(
    old_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Dependency file before the change"),
    new_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Dependency file after the change"),
    name: Optional[str] = typer.Option(
        None,
        "--name",
        "-n",
        help="File name used to pick the parser (defaults to the new file's name)"
    ),
    include_dev: bool = typer.Option(
        True,
        "--include-dev/--no-include-dev",
        help="Report development, test and other non-production dependencies"
    ),
    output_format: str = typer.Option(
        "console",
        "--format",
        "-f",
        help="Output format: console, json or markdown"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    )
) -> None:
    """Compare two versions of a dependency file stored on disk."""
    setup_logging(level=logging.WARNING, verbose=verbose)
    output_format = _validate_format(output_format)

    file_name = name or new_file.name
    if not registry.is_dependency_file(file_name):
        console.print(f"[red]Error: Unsupported dependency file: {file_name}[/red]")
        raise typer.Exit(1)

    try:
        config = AnalysisConfig.from_inputs(include_dev_dependencies=include_dev)
        provider = LocalFileContentProvider({"old": old_file, "new": new_file})
        analyzer = ChangeAnalyzer(provider, config)
        result = asyncio.run(analyzer.analyze([file_name], "old", "new"))
        _render(result, output_format, None)
    except DepUpliftError as e:
        logger.error(f"Diff failed: {e}")
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)


@app.command()
def classify(
    old_version: str = typer.Argument(..., help="Previous version"),
    new_version: str = typer.Argument(..., help="New version")
) -> None:
    """Show how a version change would be classified."""
    if clean_version(old_version) == clean_version(new_version):
        console.print(f"{escape(old_version)} → {escape(new_version)}: [dim]no change[/dim]")
        return

    change_type = determine_change_type(old_version, new_version)
    ConsoleFormatter(console).format_classification(old_version, new_version, change_type)


@app.command()
def info() -> None:
    """Show dep-uplift information."""

    console.print(Panel.fit(
        "[bold blue]dep-uplift[/bold blue]\n"
        "Reports dependency version changes between two revisions\n"
        "of a repository, classified as major, minor, patch or prerelease",
        title="Information"
    ))

    console.print(f"\n[bold]Supported Ecosystems:[/bold] {', '.join(registry.get_supported_ecosystems())}")

    console.print("[bold]Recognised Files:[/bold]")
    for ecosystem, files in registry.get_supported_files().items():
        console.print(f"  {ecosystem}: {', '.join(files)}")


def main() -> None:
    """Main entry point for the dep-uplift CLI."""
    app()


if __name__ == "__main__":
    main()
