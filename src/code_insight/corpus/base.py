"""Corpus interface and the analyzable-file filter."""

from pathlib import PurePosixPath
from typing import Protocol, Sequence, runtime_checkable

from ..models import SourceFile

ANALYZABLE_EXTENSIONS = frozenset(
    {".ts", ".tsx", ".js", ".jsx", ".py", ".java", ".go", ".rs", ".cs", ".php"}
)


@runtime_checkable
class FileCorpus(Protocol):
    """Supplies the source files of a project snapshot.

    Implementations return each file at most once and raise
    ``InvalidPathError`` when the project itself cannot be read.
    """

    def enumerate(self, project_path: str) -> Sequence[SourceFile]:
        ...


def is_source_file(path: str) -> bool:
    """True when the file extension is one the analyses understand."""
    return PurePosixPath(path.replace("\\", "/")).suffix.lower() in ANALYZABLE_EXTENSIONS
