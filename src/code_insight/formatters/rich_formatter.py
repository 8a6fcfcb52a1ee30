"""Rich terminal formatter for Code Insight."""

from typing import Iterable, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..models import HIGH_RATINGS, AnalysisReport
from .base import BaseFormatter

MAX_ROWS = 5

_RATING_STYLE = {
    "low": "green",
    "medium": "yellow",
    "high": "red",
    "very-high": "red bold",
}


def _rating_label(rating: str) -> str:
    style = _RATING_STYLE.get(rating, "white")
    return f"[{style}]{rating}[/{style}]"


def _score_label(score: int) -> str:
    if score >= 80:
        return f"[green]{score}[/green]"
    elif score >= 50:
        return f"[yellow]{score}[/yellow]"
    else:
        return f"[red]{score}[/red]"


def _lookup_label(value: Optional[object]) -> str:
    """Render an audit annotation, keeping unknown visibly distinct."""
    if value is None:
        return "[dim]unknown[/dim]"
    if value is True:
        return "[yellow]yes[/yellow]"
    if value is False:
        return "no"
    if value:
        return f"[red]{value}[/red]"
    return str(value)


class RichFormatter(BaseFormatter):
    """Rich terminal output: summary panel, per-section tables, recommendations."""

    def __init__(
        self,
        sections: Optional[Iterable[str]] = None,
        console: Optional[Console] = None,
    ):
        super().__init__(sections)
        self.console = console or Console()

    def render(self, report: AnalysisReport) -> None:
        self._print_summary(report)
        if "complexity" in self.sections:
            self._print_complexity(report)
        if "security" in self.sections:
            self._print_security(report)
        if "duplication" in self.sections:
            self._print_duplication(report)
        if "dependencies" in self.sections:
            self._print_dependencies(report)
        self._print_recommendations(report)

    def format(self, report: AnalysisReport) -> str:
        with self.console.capture() as capture:
            self.render(report)
        return capture.get()

    # -- sections ----------------------------------------------------------

    def _print_summary(self, report: AnalysisReport) -> None:
        s = report.summary
        body = (
            f"[bold]Project:[/bold] {escape(report.project_path)}\n"
            f"[bold]Analyzed:[/bold] {s.total_files} files\n\n"
            f"High complexity files:  {s.high_complexity_files}\n"
            f"Security issues:        {s.security_issues}\n"
            f"Critical security:      {s.critical_security_issues}\n"
            f"Duplication rate:       {s.duplication_rate:.1f}%"
        )
        self.console.print()
        self.console.print(
            Panel(body, title="[bold cyan]Code Analysis Report[/bold cyan]", expand=False)
        )
        self.console.print()

    def _print_complexity(self, report: AnalysisReport) -> None:
        flagged = [c for c in report.complexity if c.rating in HIGH_RATINGS]
        flagged.sort(key=lambda c: c.average_complexity, reverse=True)

        self.console.print("[bold]Complexity Analysis[/bold]")
        if not flagged:
            self.console.print("  [green]No high-complexity files.[/green]\n")
            return

        table = Table(show_header=True, header_style="bold", expand=False)
        table.add_column("File", style="cyan", no_wrap=True)
        table.add_column("Avg", justify="right")
        table.add_column("Functions", justify="right")
        table.add_column("Rating")
        for result in flagged[:MAX_ROWS]:
            table.add_row(
                escape(result.file),
                f"{result.average_complexity:.1f}",
                str(len(result.functions)),
                _rating_label(result.rating),
            )
        self.console.print(table)
        self._print_more(len(flagged), "files")

    def _print_security(self, report: AnalysisReport) -> None:
        self.console.print("[bold]Security Issues[/bold]")
        if not report.security:
            self.console.print("  [green]No security issues found![/green]\n")
            return

        table = Table(show_header=True, header_style="bold", expand=False)
        table.add_column("File", style="cyan", no_wrap=True)
        table.add_column("Issues", justify="right")
        table.add_column("Critical", justify="right")
        table.add_column("High", justify="right")
        table.add_column("Score", justify="right")
        for result in report.security[:MAX_ROWS]:
            table.add_row(
                escape(result.file),
                str(len(result.issues)),
                str(result.count("critical")),
                str(result.count("high")),
                _score_label(result.score),
            )
        self.console.print(table)
        self._print_more(len(report.security), "files")

    def _print_duplication(self, report: AnalysisReport) -> None:
        dup = report.duplication
        self.console.print("[bold]Code Duplication[/bold]")
        self.console.print(f"  Duplicate lines:   {dup.total_duplicate_lines}")
        self.console.print(f"  Duplication rate:  {dup.duplication_percentage:.1f}%")
        if not dup.duplicates:
            self.console.print()
            return

        self.console.print(f"  Found {len(dup.duplicates)} duplicate fragments")
        table = Table(show_header=True, header_style="bold", expand=False)
        table.add_column("Fragment", style="cyan", no_wrap=True)
        table.add_column("Duplicate of", style="cyan", no_wrap=True)
        table.add_column("Lines", justify="right")
        table.add_column("Similarity", justify="right")
        for fragment in dup.duplicates[:MAX_ROWS]:
            a, b = fragment.fragment1, fragment.fragment2
            table.add_row(
                escape(f"{a.file}:{a.start_line}-{a.end_line}"),
                escape(f"{b.file}:{b.start_line}-{b.end_line}"),
                str(fragment.lines),
                f"{fragment.similarity:.0%}",
            )
        self.console.print(table)
        self._print_more(len(dup.duplicates), "fragments")

    def _print_dependencies(self, report: AnalysisReport) -> None:
        deps = report.dependencies
        lock = "[green]yes[/green]" if deps.has_package_lock else "[red]no[/red]"
        self.console.print("[bold]Dependencies[/bold]")
        self.console.print(f"  Total:                 {deps.dependency_count}")
        self.console.print(f"  With vulnerabilities:  {len(deps.vulnerable)}")
        self.console.print(f"  Package lock:          {lock}")

        flagged = [d for d in deps.dependencies if d.vulnerabilities or d.outdated]
        if not flagged:
            self.console.print()
            return

        table = Table(show_header=True, header_style="bold", expand=False)
        table.add_column("Package", style="cyan", no_wrap=True)
        table.add_column("Version")
        table.add_column("Type")
        table.add_column("Vulnerabilities", justify="right")
        table.add_column("Outdated")
        for dep in flagged[:MAX_ROWS]:
            table.add_row(
                escape(dep.name),
                escape(dep.version),
                dep.type,
                _lookup_label(dep.vulnerabilities),
                _lookup_label(dep.outdated),
            )
        self.console.print(table)
        self._print_more(len(flagged), "packages")

    def _print_recommendations(self, report: AnalysisReport) -> None:
        if not report.recommendations:
            return
        self.console.print("[bold]Recommendations[/bold]")
        for i, rec in enumerate(report.recommendations, 1):
            self.console.print(f"  {i}. {escape(rec)}")
        self.console.print()

    def _print_more(self, total: int, noun: str) -> None:
        if total > MAX_ROWS:
            self.console.print(f"  [dim]... and {total - MAX_ROWS} more {noun}[/dim]")
        self.console.print()
