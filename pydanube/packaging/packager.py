"""Package a directory for deployment."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from .archive import build_archive
from .ignore import load_ignore_rules
from .scanner import DirectoryScanner

logger = logging.getLogger(__name__)


@dataclass
class PackageResult:
    """Result of packaging a directory."""

    buffer: bytes
    """gzip-compressed tar archive"""

    files: list[str] = field(default_factory=list)
    """Relative paths packed into the archive"""

    @property
    def file_count(self) -> int:
        return len(self.files)

    @property
    def size(self) -> int:
        """Archive size in bytes."""
        return len(self.buffer)


def package_directory(
    directory: Union[str, Path], extra_ignore: Optional[Iterable[str]] = None
) -> PackageResult:
    """Collect and archive the deployable files of a directory.

    Args:
        directory: Directory to deploy
        extra_ignore: Additional ignore patterns (from danube.json)

    Returns:
        PackageResult with the archive and the packed file list

    Raises:
        DanubePackagingError: If no files survive the ignore rules
        OSError: If the directory or a file cannot be read
    """
    root = Path(directory)
    rules = load_ignore_rules(root, extra_ignore)
    logger.debug(
        f"Packaging {root} with {len(rules.patterns)} ignore pattern(s) "
        f"from {', '.join(source.name for source in rules.sources)}"
    )

    files = DirectoryScanner(rules.compile()).collect(root)
    buffer = build_archive(root, files)
    return PackageResult(buffer=buffer, files=files)
