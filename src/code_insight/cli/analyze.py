"""The analysis command."""

from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from ..aggregator import ReportAggregator
from ..corpus import FilesystemCorpus
from ..exceptions import CodeInsightError
from ..formatters import get_formatter
from ..logging_config import setup_logging
from ..models import AnalysisReport
from . import app
from ._common import console, resolve_config


class Section(str, Enum):
    all = "all"
    summary = "summary"
    complexity = "complexity"
    security = "security"
    duplication = "duplication"
    dependencies = "dependencies"


class FailOn(str, Enum):
    critical = "critical"
    any = "any"


def _should_fail(report: AnalysisReport, fail_on: Optional[FailOn]) -> bool:
    if fail_on is FailOn.critical:
        return report.summary.critical_security_issues > 0
    if fail_on is FailOn.any:
        return report.summary.security_issues > 0
    return False


@app.command()
def analyze(
    path: Optional[Path] = typer.Option(
        None,
        "-C",
        "--path",
        help="Project root to analyze (default: current directory)",
        file_okay=False,
        dir_okay=True,
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
    section: Section = typer.Option(
        Section.all,
        "--section",
        "-s",
        help="Report section to show",
        case_sensitive=False,
    ),
    no_audit: bool = typer.Option(
        False,
        "--no-audit",
        help="Skip the npm vulnerability audit",
    ),
    outdated: bool = typer.Option(
        False,
        "--outdated",
        help="Also check for outdated npm packages",
    ),
    fail_on: Optional[FailOn] = typer.Option(
        None,
        "--fail-on",
        help="Exit 1 if security issues meet threshold: critical | any",
        case_sensitive=False,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    workers: Optional[int] = typer.Option(
        None,
        "-w",
        "--workers",
        help="Threads used to run the analyses (default: 4)",
        min=1,
        max=32,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
    ),
):
    """
    Analyze a project for complexity, security issues, duplication and
    dependency risk.

    [bold cyan]Examples:[/bold cyan]

      code-insight

      code-insight --json

      code-insight --section security

      code-insight -C /path/to/project --no-audit --fail-on critical
    """
    from .. import __version__

    if version:
        console.print(f"[bold cyan]Code Insight[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)

    target = path if path is not None else Path.cwd()
    logger = setup_logging(verbose=verbose)

    try:
        settings = resolve_config(
            config=config,
            workers=workers,
            no_audit=no_audit,
            outdated=outdated,
            verbose=verbose,
        )
        formatter = get_formatter("json" if json_output else "rich", sections=[section.value])

        aggregator = ReportAggregator(FilesystemCorpus(settings), config=settings)
        report = aggregator.analyze_project(str(target))
        formatter.render(report)

        if _should_fail(report, fail_on):
            raise typer.Exit(1)

    except typer.Exit:
        raise

    except CodeInsightError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        logger.info("Analysis interrupted by user")
        console.print("\n[yellow]Analysis interrupted[/yellow]")
        raise typer.Exit(130)

    except Exception as e:
        logger.exception("Unexpected error during analysis")
        console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        if verbose:
            console.print_exception()
        raise typer.Exit(1)
