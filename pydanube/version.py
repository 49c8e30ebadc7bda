"""Installed version and update check."""

import json
import logging
import os
import time
from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as distribution_version
from pathlib import Path
from typing import Optional

import httpx

from .config import config
from .utils import compare_versions

logger = logging.getLogger(__name__)

PACKAGE_NAME = "pydanube"
PYPI_URL = f"https://pypi.org/pypi/{PACKAGE_NAME}/json"
CACHE_FILE_NAME = "update-check.json"
CACHE_TTL: float = 24 * 60 * 60  # seconds


@dataclass
class UpdateCheckResult:
    current: str
    latest: str

    @property
    def update_available(self) -> bool:
        return compare_versions(self.latest, self.current) > 0


def get_current_version() -> str:
    """Version of the installed distribution."""
    try:
        return distribution_version(PACKAGE_NAME)
    except PackageNotFoundError:
        from . import __version__

        return __version__


def _cache_path() -> Path:
    return config.config_dir / CACHE_FILE_NAME


def _read_cache() -> Optional[dict]:
    try:
        data = json.loads(_cache_path().read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    if not isinstance(data, dict) or "latest" not in data:
        return None
    if not isinstance(data.get("checkedAt"), (int, float)):
        return None
    return data


def _write_cache(latest: str) -> None:
    path = _cache_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps({"latest": latest, "checkedAt": time.time()}, indent=2) + "\n",
            encoding="utf-8",
        )
    except OSError as e:
        logger.debug(f"Could not write update cache {path}: {e}")


def check_for_update(timeout: float = 5.0) -> Optional[UpdateCheckResult]:
    """Look up the latest release on PyPI.

    The answer is cached for 24 hours. The check is skipped when the CI or
    DANUBE_NO_UPDATE_CHECK environment variable is set. Failures are logged
    and reported as None; an update check never breaks a command.

    Returns:
        UpdateCheckResult, or None if the check was skipped or failed
    """
    if os.environ.get("CI") or os.environ.get("DANUBE_NO_UPDATE_CHECK"):
        return None

    current = get_current_version()

    cache = _read_cache()
    if cache and time.time() - cache["checkedAt"] < CACHE_TTL:
        return UpdateCheckResult(current=current, latest=str(cache["latest"]))

    try:
        response = httpx.get(PYPI_URL, timeout=timeout)
        response.raise_for_status()
        latest = str(response.json()["info"]["version"])
    except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
        logger.debug(f"Update check failed: {e}")
        return None

    _write_cache(latest)
    return UpdateCheckResult(current=current, latest=latest)
