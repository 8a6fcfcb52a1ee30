"""Filesystem-backed corpus with path validation and resource limits."""

import fnmatch
import os
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from ..config import AnalysisConfig
from ..exceptions import FileAccessError, InvalidPathError
from ..logging_config import get_logger
from ..models import SourceFile
from .base import is_source_file

logger = get_logger(__name__)

# Generated or non-source artifacts that are never worth reading.
DEFAULT_SKIP_PATTERNS = (
    "*.min.js",
    "*.min.css",
    "*.map",
    "*.d.ts",
)

# Null byte in the first 8 KB marks a binary file.
_BINARY_SNIFF_BYTES = 8192


def validate_root_directory(path: Path) -> Path:
    """
    Validate that a project root can be analyzed.

    Args:
        path: Directory path to validate

    Returns:
        Resolved absolute path

    Raises:
        InvalidPathError: If path is missing, not a directory or unreadable
    """
    try:
        resolved = path.resolve()
    except (OSError, RuntimeError) as e:
        raise InvalidPathError(path, f"Cannot resolve path: {e}")

    if not resolved.exists():
        raise InvalidPathError(resolved, "Directory does not exist")

    if not resolved.is_dir():
        raise InvalidPathError(resolved, "Path is not a directory")

    if not os.access(resolved, os.R_OK):
        raise InvalidPathError(resolved, "Directory is not readable")

    return resolved


class FilesystemCorpus:
    """Walks a project directory and snapshots its analyzable source files.

    Files come back sorted by their POSIX-style relative path so every run
    over the same tree sees the same corpus order. Only paths accepted by
    ``include`` are read or counted against ``max_files``.
    """

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        skip_patterns: Iterable[str] = DEFAULT_SKIP_PATTERNS,
        include: Callable[[str], bool] = is_source_file,
    ):
        self.config = config or AnalysisConfig()
        self.skip_patterns = tuple(skip_patterns)
        self.include = include

    def enumerate(self, project_path: str) -> List[SourceFile]:
        root = validate_root_directory(Path(project_path))

        files: List[SourceFile] = []
        for rel_path in self._walk(root):
            if len(files) >= self.config.max_files:
                logger.warning(
                    "File limit (%d) reached, remaining files are not analyzed",
                    self.config.max_files,
                )
                break
            try:
                content = self._read(root / rel_path)
            except FileAccessError as e:
                logger.debug("Skipping %s: %s", rel_path, e)
                continue
            if content is None:
                continue
            files.append(SourceFile(path=rel_path, content=content))

        logger.debug("Enumerated %d files under %s", len(files), root)
        return files

    def _walk(self, root: Path) -> List[str]:
        excluded = set(self.config.exclude_dirs)
        found: List[str] = []
        for dirpath, dirnames, filenames in os.walk(
            root, followlinks=self.config.follow_symlinks
        ):
            dirnames[:] = sorted(d for d in dirnames if d not in excluded)
            for name in filenames:
                if any(fnmatch.fnmatch(name, pattern) for pattern in self.skip_patterns):
                    continue
                full = Path(dirpath) / name
                if full.is_symlink() and not self.config.follow_symlinks:
                    continue
                rel_path = full.relative_to(root).as_posix()
                if self.include(rel_path):
                    found.append(rel_path)
        return sorted(found)

    def _read(self, filepath: Path) -> Optional[str]:
        """Read a text file, returning None for binary or oversized files.

        Raises:
            FileAccessError: If the file cannot be read
        """
        try:
            size = filepath.stat().st_size
            if size > self.config.max_file_size_bytes:
                logger.debug("Skipping %s: %d bytes exceeds size limit", filepath, size)
                return None
            data = filepath.read_bytes()
        except OSError as e:
            raise FileAccessError(filepath, f"OS error: {e}")

        if b"\x00" in data[:_BINARY_SNIFF_BYTES]:
            return None
        return data.decode("utf-8", errors="replace")
