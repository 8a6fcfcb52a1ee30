"""Project file enumeration.

``FileCorpus`` is the interface the aggregator consumes; ``FilesystemCorpus``
is the default implementation that walks a directory on disk.
"""

from .base import ANALYZABLE_EXTENSIONS, FileCorpus, is_source_file
from .filesystem import FilesystemCorpus, validate_root_directory

__all__ = [
    "ANALYZABLE_EXTENSIONS",
    "FileCorpus",
    "FilesystemCorpus",
    "is_source_file",
    "validate_root_directory",
]
