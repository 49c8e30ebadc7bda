"""Directory scanning for packaging."""

import logging
import os
import stat
from pathlib import Path
from typing import Union

from .ignore import IgnoreMatcher

logger = logging.getLogger(__name__)

# Ordered relative paths (forward slashes) selected for packaging
FileManifest = list[str]


class DirectoryScanner:
    """Walks a directory tree and builds the packaging manifest.

    Excluded directories are pruned before they are read, so large ignored
    trees such as ``node_modules`` cost a single pattern check.

    Examples:
        >>> from pydanube.packaging.ignore import load_ignore_rules
        >>> matcher = load_ignore_rules(Path("dist")).compile()
        >>> files = DirectoryScanner(matcher).collect(Path("dist"))
    """

    def __init__(self, matcher: IgnoreMatcher):
        """Initialize directory scanner.

        Args:
            matcher: Compiled ignore rules for the packaging root
        """
        self.matcher = matcher

    def collect(self, root: Union[str, Path]) -> FileManifest:
        """Recursively collect the files to package.

        Directories come before their contents and the entries of each
        directory are visited sorted by name, so an unchanged tree always
        yields the same manifest. Regular files and symbolic links (whether
        or not their target exists) are included. Symbolic links to
        directories are recorded as links and not followed. FIFOs, sockets
        and device files are skipped.

        Args:
            root: Packaging root

        Returns:
            Relative paths of the included files

        Raises:
            OSError: If a directory cannot be listed
        """
        files: FileManifest = []
        self._scan(Path(root), "", files)
        return files

    def _scan(self, directory: Path, prefix: str, files: FileManifest) -> None:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda entry: entry.name)

        for entry in entries:
            relative_path = f"{prefix}{entry.name}"

            if self.matcher.is_excluded(relative_path):
                logger.debug(f"Ignoring: {relative_path}")
                continue

            if entry.is_symlink():
                files.append(relative_path)
            elif entry.is_dir(follow_symlinks=False):
                if self.matcher.is_excluded(relative_path, is_directory=True):
                    logger.debug(f"Ignoring directory: {relative_path}/")
                    continue
                self._scan(Path(entry.path), f"{relative_path}/", files)
            elif entry.is_file(follow_symlinks=False):
                files.append(relative_path)
            else:
                logger.debug(f"Skipping special file: {relative_path}")


def collect_files(root: Union[str, Path], matcher: IgnoreMatcher) -> FileManifest:
    """Collect the files under ``root`` that survive ``matcher``."""
    return DirectoryScanner(matcher).collect(root)


def get_directory_size(directory: Union[str, Path]) -> int:
    """Total size in bytes of the regular files under a directory.

    Symbolic links and special files are not counted.
    """
    size = 0
    with os.scandir(directory) as it:
        for entry in it:
            st = entry.stat(follow_symlinks=False)
            if stat.S_ISREG(st.st_mode):
                size += st.st_size
            elif stat.S_ISDIR(st.st_mode):
                size += get_directory_size(entry.path)
    return size
