"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import AnalysisConfig, load_config

console = Console()


def resolve_config(
    config: Optional[Path] = None,
    workers: Optional[int] = None,
    no_audit: bool = False,
    outdated: bool = False,
    verbose: bool = False,
) -> AnalysisConfig:
    """Build configuration from CLI options."""
    overrides = {}
    if workers is not None:
        overrides["workers"] = workers
    if no_audit:
        overrides["audit_enabled"] = False
    if outdated:
        overrides["outdated_enabled"] = True
    if verbose:
        overrides["verbose"] = True
    return load_config(config_file=config, **overrides)
