"""CLI entry point."""

import typer

app = typer.Typer(
    name="code-insight",
    help="Code Insight - Static Code Analysis Engine",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import the command module to register its callback
from .analyze import analyze as _analyze_callback  # noqa: F401, E402


def main() -> None:
    app()
