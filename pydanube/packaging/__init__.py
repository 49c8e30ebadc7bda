"""Directory packaging for deploys: ignore rules, scanning and archiving."""

from .archive import ARCHIVE_FILE_NAME, build_archive
from .ignore import (
    DEFAULT_IGNORE_PATTERNS,
    GITIGNORE_FILE_NAME,
    IGNORE_FILE_NAME,
    IgnoreMatcher,
    IgnoreRuleSet,
    IgnoreSource,
    is_ignored,
    load_ignore_rules,
    parse_ignore_text,
)
from .packager import PackageResult, package_directory
from .scanner import DirectoryScanner, FileManifest, collect_files, get_directory_size

__all__ = [
    "ARCHIVE_FILE_NAME",
    "DEFAULT_IGNORE_PATTERNS",
    "GITIGNORE_FILE_NAME",
    "IGNORE_FILE_NAME",
    "DirectoryScanner",
    "FileManifest",
    "IgnoreMatcher",
    "IgnoreRuleSet",
    "IgnoreSource",
    "PackageResult",
    "build_archive",
    "collect_files",
    "get_directory_size",
    "is_ignored",
    "load_ignore_rules",
    "package_directory",
    "parse_ignore_text",
]
