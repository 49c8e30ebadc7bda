"""Utility functions for pydanube."""

import re
from datetime import datetime
from typing import Optional

# =============================================================================
# Constants
# =============================================================================

# Retry configuration for idempotent requests
DEFAULT_MAX_RETRIES: int = 3
DEFAULT_RETRY_DELAY: float = 1.0  # seconds

# Request timeout (uploads of large archives can take a while)
DEFAULT_TIMEOUT: float = 30.0  # seconds
DEFAULT_UPLOAD_TIMEOUT: float = 300.0  # seconds


# =============================================================================
# Timestamp parsing utilities
# =============================================================================


def parse_iso_timestamp(timestamp_str: Optional[str]) -> Optional[datetime]:
    """Parse ISO format timestamp from the DanubeData API.

    Args:
        timestamp_str: ISO format timestamp string (e.g., "2025-01-15T10:30:00.000000Z")

    Returns:
        datetime object in local timezone or None if parsing fails
    """
    if not timestamp_str:
        return None

    try:
        # The 'Z' suffix indicates UTC time
        if timestamp_str.endswith("Z"):
            timestamp_str = timestamp_str[:-1] + "+00:00"

        try:
            dt = datetime.fromisoformat(timestamp_str)
        except ValueError:
            # Python < 3.11 only accepts 0, 3 or 6 fractional digits
            if "." in timestamp_str:
                timestamp_str = timestamp_str.split(".")[0] + "+00:00"
            dt = datetime.fromisoformat(timestamp_str)

        if dt.tzinfo is not None:
            # Convert to local naive datetime
            return datetime.fromtimestamp(dt.timestamp())
        return dt
    except (ValueError, AttributeError):
        return None


def format_date(timestamp_str: Optional[str]) -> str:
    """Format an API timestamp for display, "-" when missing."""
    dt = parse_iso_timestamp(timestamp_str)
    if dt is None:
        return timestamp_str or "-"
    return dt.strftime("%Y-%m-%d %H:%M:%S")


# =============================================================================
# Size formatting utilities
# =============================================================================


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB", "256 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / 1024 / 1024:.1f} MB"
    else:
        return f"{size_bytes / 1024 / 1024 / 1024:.1f} GB"


# =============================================================================
# Version utilities
# =============================================================================


def compare_versions(a: str, b: str) -> int:
    """Compare two dotted release versions.

    Only the first three numeric components are considered; missing or
    non-numeric components count as 0.

    Returns:
        Negative if a < b, zero if equal, positive if a > b

    Examples:
        >>> compare_versions("1.2.0", "1.10.0") < 0
        True
        >>> compare_versions("2.0", "2.0.0")
        0
    """

    def _parts(version: str) -> list[int]:
        parts = []
        for piece in version.split(".")[:3]:
            match = re.match(r"\d+", piece)
            parts.append(int(match.group(0)) if match else 0)
        while len(parts) < 3:
            parts.append(0)
        return parts

    for left, right in zip(_parts(a), _parts(b)):
        if left != right:
            return left - right
    return 0
