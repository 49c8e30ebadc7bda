"""Gitignore-style ignore rules for packaging.

Patterns are collected from several sources, always in this order:

1. Built-in defaults (``.git``, ``node_modules``, ``.danube``)
2. ``.gitignore`` at the packaging root
3. ``.daubeignore`` at the packaging root
4. Extra patterns from ``danube.json``

Later patterns override earlier ones, so a ``!pattern`` in ``.daubeignore``
can re-include something ``.gitignore`` excluded. Pattern syntax follows
gitignore: ``*`` and ``**`` globs, a leading ``/`` anchors to the root, a
trailing ``/`` only matches directories and a leading ``!`` negates.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import pathspec

logger = logging.getLogger(__name__)

DEFAULT_IGNORE_PATTERNS = [".git", "node_modules", ".danube"]
GITIGNORE_FILE_NAME = ".gitignore"
IGNORE_FILE_NAME = ".daubeignore"


def parse_ignore_text(text: str) -> list[str]:
    """Split ignore file content into pattern lines.

    Blank lines and ``#`` comments are dropped. A pattern starting with a
    literal hash must be written as ``\\#``.

    Args:
        text: Ignore file content

    Returns:
        List of patterns, in file order
    """
    patterns = []
    for line in text.splitlines():
        if not line.strip() or line.startswith("#"):
            continue
        patterns.append(line)
    return patterns


@dataclass
class IgnoreSource:
    """One contributor of ignore patterns."""

    name: str
    patterns: list[str]


def _contents_only(pattern: str) -> str:
    """Rewrite a trailing ``/**`` so it cannot match the directory itself.

    ``dist/**`` excludes everything inside ``dist`` but not ``dist``, which
    must still be walked so that ``!dist/index.html`` can re-include a file.
    ``dist/?*`` matches the same descendants and never the bare ``dist/``.
    """
    stripped = pattern.rstrip()
    if stripped.endswith("/**"):
        return stripped[:-2] + "?*"
    return pattern


class IgnoreMatcher:
    """Compiled ignore rules, queried with paths relative to the root."""

    def __init__(self, patterns: Iterable[str]):
        self.patterns = list(patterns)
        self._spec = pathspec.GitIgnoreSpec.from_lines(
            [_contents_only(pattern) for pattern in self.patterns]
        )

    def matches(self, path: str) -> bool:
        """Evaluate the rules against a single path string.

        A path ending in ``/`` is treated as a directory by the
        directory-only patterns.
        """
        return self._spec.match_file(path)

    def is_excluded(self, path: str, is_directory: bool = False) -> bool:
        """Check whether a relative path is excluded.

        The bare path is checked first. Directories are checked a second
        time with a trailing ``/`` so that directory-only patterns such as
        ``logs/`` exclude a directory named ``logs`` but never a file with
        that name.

        Args:
            path: Path relative to the packaging root, with forward slashes
            is_directory: Whether the path denotes a directory

        Returns:
            True if the path must not be packaged
        """
        path = path.rstrip("/")
        if self.matches(path):
            return True
        return is_directory and self.matches(path + "/")


def is_ignored(patterns: Iterable[str], path: str, is_directory: bool = False) -> bool:
    """Evaluate an ordered pattern list against one path.

    Pure function: compiles the patterns and checks ``path`` without
    touching the filesystem.

    Examples:
        >>> is_ignored(["logs/"], "logs", is_directory=True)
        True
        >>> is_ignored(["logs/"], "logs")
        False
        >>> is_ignored(["*.log", "!keep.log"], "keep.log")
        False
    """
    return IgnoreMatcher(patterns).is_excluded(path, is_directory=is_directory)


@dataclass
class IgnoreRuleSet:
    """Ordered collection of ignore pattern sources.

    The defaults are always the first source. Built once per packaging
    operation and discarded with it.
    """

    sources: list[IgnoreSource] = field(
        default_factory=lambda: [
            IgnoreSource("defaults", list(DEFAULT_IGNORE_PATTERNS))
        ]
    )

    def add(self, name: str, patterns: Iterable[str]) -> None:
        """Append a source; its patterns take precedence over earlier ones."""
        self.sources.append(IgnoreSource(name, list(patterns)))

    def add_file(self, path: Path) -> bool:
        """Append the patterns of an ignore file if it exists.

        Args:
            path: Ignore file

        Returns:
            True if the file was read, False if it does not exist
        """
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            logger.debug(f"No {path.name} at {path.parent}")
            return False
        patterns = parse_ignore_text(text)
        logger.debug(f"Loaded {len(patterns)} pattern(s) from {path}")
        self.add(path.name, patterns)
        return True

    @property
    def patterns(self) -> list[str]:
        """All patterns, flattened in precedence order."""
        return [pattern for source in self.sources for pattern in source.patterns]

    def compile(self) -> IgnoreMatcher:
        return IgnoreMatcher(self.patterns)


def load_ignore_rules(
    root: Path, extra_patterns: Optional[Iterable[str]] = None
) -> IgnoreRuleSet:
    """Build the rule set for a packaging root.

    Args:
        root: Directory being packaged
        extra_patterns: Additional patterns, e.g. from danube.json

    Returns:
        IgnoreRuleSet with defaults, .gitignore, .daubeignore and extras
    """
    rules = IgnoreRuleSet()
    rules.add_file(root / GITIGNORE_FILE_NAME)
    rules.add_file(root / IGNORE_FILE_NAME)
    extra = list(extra_patterns or [])
    if extra:
        rules.add("danube.json", extra)
    return rules
