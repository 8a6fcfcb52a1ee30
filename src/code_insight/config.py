"""Configuration loading and management for Code Insight.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.code-insight.toml)
    3. Project config (./code-insight.toml)
    4. Explicit config file
    5. Environment variables (CODE_INSIGHT_* prefix)
    6. Keyword overrides (typically CLI flags)

Example:
    >>> config = load_config(verbose=True, workers=2)
    >>> config.verbosity
    'verbose'
    >>> config.thresholds.min_fragment_size
    6
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import CodeInsightError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]
DuplicateRanking = Literal["scan", "value"]

ENV_PREFIX = "CODE_INSIGHT_"


@dataclass(frozen=True)
class ThresholdConfig:
    """Algorithm thresholds for the duplication detector and recommendations.

    Attributes:
        min_fragment_size: Minimum window length (lines) for a reported fragment
        similarity_threshold: Share of matching lines a window needs, in [0, 1]
        max_fragment_window: Hard cap on window expansion per anchor
        max_duplicates: Number of fragments kept in the report
        min_anchor_length: Minimum normalized length of an anchor line
        min_match_length: Normalized lines this short never count as matches
        duplicate_ranking: "scan" keeps the first fragments found,
            "value" keeps the largest by lines x similarity
        duplication_warning_pct: Duplication rate that triggers a recommendation
    """

    # === Duplication ===
    min_fragment_size: int = 6
    similarity_threshold: float = 0.85
    max_fragment_window: int = 50
    max_duplicates: int = 50
    min_anchor_length: int = 5
    min_match_length: int = 3
    duplicate_ranking: DuplicateRanking = "scan"

    # === Recommendations ===
    duplication_warning_pct: float = 10.0

    def __post_init__(self) -> None:
        """Validate threshold configuration."""
        if not 0.0 <= self.similarity_threshold <= 1.0:
            raise ValueError("similarity_threshold must be between 0.0 and 1.0")
        if self.min_fragment_size < 1:
            raise ValueError("min_fragment_size must be at least 1")
        if self.max_fragment_window < self.min_fragment_size:
            raise ValueError("max_fragment_window must be >= min_fragment_size")
        if self.max_duplicates < 1:
            raise ValueError("max_duplicates must be at least 1")
        if self.min_anchor_length < 0 or self.min_match_length < 0:
            raise ValueError("line length thresholds must be non-negative")
        if self.duplicate_ranking not in ("scan", "value"):
            raise ValueError("duplicate_ranking must be 'scan' or 'value'")
        if self.duplication_warning_pct < 0:
            raise ValueError("duplication_warning_pct must be non-negative")


DEFAULT_THRESHOLDS = ThresholdConfig()


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for one analysis run.

    Attributes:
        Performance:
            workers: Threads used to fan out the four analyses

        Dependency audit:
            audit_enabled: Run the external vulnerability audit
            audit_timeout_seconds: Abandon the audit after this many seconds
            outdated_enabled: Run the external outdated-package check
            outdated_timeout_seconds: Timeout for the outdated check

        File enumeration:
            max_file_size_mb: Larger files are skipped
            max_files: Enumeration stops after this many files
            follow_symlinks: Follow symbolic links while walking
            exclude_dirs: Directory names never descended into

        Output:
            verbosity: Logging verbosity level
    """

    workers: int = 4

    audit_enabled: bool = True
    audit_timeout_seconds: int = 30
    outdated_enabled: bool = False
    outdated_timeout_seconds: int = 60

    max_file_size_mb: float = 10.0
    max_files: int = 10000
    follow_symlinks: bool = False
    exclude_dirs: list[str] = field(
        default_factory=lambda: [
            "node_modules",
            ".git",
            "dist",
            "build",
            "out",
            "target",
            "__pycache__",
            ".venv",
            "venv",
            "env",
            "coverage",
            ".next",
            ".nuxt",
            ".vscode",
            ".idea",
        ]
    )

    verbosity: Verbosity = "normal"

    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.workers < 1:
            raise ValueError("workers must be at least 1")
        if self.audit_timeout_seconds < 1:
            raise ValueError("audit_timeout_seconds must be at least 1")
        if self.outdated_timeout_seconds < 1:
            raise ValueError("outdated_timeout_seconds must be at least 1")
        if self.max_file_size_mb <= 0:
            raise ValueError("max_file_size_mb must be positive")
        if self.max_files < 1:
            raise ValueError("max_files must be at least 1")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError("verbosity must be quiet, normal or verbose")

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return int(self.max_file_size_mb * 1024 * 1024)


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated AnalysisConfig instance

    Raises:
        CodeInsightError: If a config file is invalid or missing
    """
    merged: dict = {}

    global_config = Path.home() / ".code-insight.toml"
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except CodeInsightError:
            raise
        except Exception as e:
            raise CodeInsightError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / "code-insight.toml"
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except CodeInsightError:
            raise
        except Exception as e:
            raise CodeInsightError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise CodeInsightError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except CodeInsightError:
            raise
        except Exception as e:
            raise CodeInsightError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    # Verbosity flags arrive as booleans from the CLI
    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update(overrides)

    thresholds_dict = merged.pop("thresholds", None)
    if thresholds_dict is not None:
        if isinstance(thresholds_dict, dict):
            try:
                merged["thresholds"] = ThresholdConfig(**thresholds_dict)
            except (TypeError, ValueError) as e:
                raise CodeInsightError(f"Invalid [thresholds] config: {e}")
        elif isinstance(thresholds_dict, ThresholdConfig):
            merged["thresholds"] = thresholds_dict

    try:
        return AnalysisConfig(**merged)
    except (TypeError, ValueError) as e:
        raise CodeInsightError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from CODE_INSIGHT_* environment variables.

    Every scalar AnalysisConfig field maps to CODE_INSIGHT_<FIELD_NAME>,
    e.g. CODE_INSIGHT_WORKERS=8 or CODE_INSIGHT_AUDIT_ENABLED=false.
    List fields are not configurable from the environment.
    """
    type_hints = get_type_hints(AnalysisConfig)

    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Returns None for types that cannot come from the environment.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if origin is list or type_hint is list:
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        CodeInsightError: If no TOML parser is available
        Exception: If TOML parsing fails
    """
    try:
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise CodeInsightError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
