"""Per-directory project configuration.

Two files live in the directory the CLI is run from:

- ``.danube/project.json``: the static site this directory is linked to,
  written by ``danube link``
- ``danube.json``: optional deploy settings (``outputDir`` and extra
  ``ignore`` patterns)
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

PROJECT_DIR = ".danube"
PROJECT_FILE = "project.json"
DANUBE_JSON = "danube.json"


@dataclass
class ProjectConfig:
    """Link between a local directory and a remote static site."""

    site_id: int
    team_id: int
    site_name: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProjectConfig":
        return cls(
            site_id=int(data["siteId"]),
            team_id=int(data["teamId"]),
            site_name=str(data.get("siteName") or "unknown"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "siteId": self.site_id,
            "teamId": self.team_id,
            "siteName": self.site_name,
        }


@dataclass
class DanubeJson:
    """Deploy settings from danube.json."""

    output_dir: Optional[str] = None
    ignore: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DanubeJson":
        ignore = data.get("ignore") or []
        return cls(
            output_dir=data.get("outputDir") or None,
            ignore=[str(pattern) for pattern in ignore],
        )


def _resolve_cwd(cwd: Optional[Path]) -> Path:
    return Path(cwd) if cwd is not None else Path.cwd()


def read_project_config(cwd: Optional[Path] = None) -> Optional[ProjectConfig]:
    """Read the linked project.

    DANUBE_SITE_ID and DANUBE_TEAM_ID (with optional DANUBE_SITE_NAME) take
    precedence over the project file so CI jobs do not need to run
    ``danube link``.

    Args:
        cwd: Project directory (defaults to the current directory)

    Returns:
        ProjectConfig, or None if the directory is not linked
    """
    env_site_id = os.environ.get("DANUBE_SITE_ID")
    env_team_id = os.environ.get("DANUBE_TEAM_ID")
    if env_site_id and env_team_id:
        try:
            return ProjectConfig(
                site_id=int(env_site_id),
                team_id=int(env_team_id),
                site_name=os.environ.get("DANUBE_SITE_NAME") or "unknown",
            )
        except ValueError:
            logger.warning("Ignoring non-numeric DANUBE_SITE_ID/DANUBE_TEAM_ID")

    path = _resolve_cwd(cwd) / PROJECT_DIR / PROJECT_FILE
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return ProjectConfig.from_dict(data)
    except FileNotFoundError:
        return None
    except (OSError, ValueError, KeyError, TypeError) as e:
        logger.debug(f"Could not read project config {path}: {e}")
        return None


def write_project_config(project: ProjectConfig, cwd: Optional[Path] = None) -> Path:
    """Write .danube/project.json.

    Returns:
        Path of the written file
    """
    directory = _resolve_cwd(cwd) / PROJECT_DIR
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / PROJECT_FILE
    path.write_text(json.dumps(project.to_dict(), indent=2) + "\n", encoding="utf-8")
    return path


def read_danube_json(cwd: Optional[Path] = None) -> Optional[DanubeJson]:
    """Read danube.json, returning None when it is missing or invalid."""
    path = _resolve_cwd(cwd) / DANUBE_JSON
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as e:
        logger.warning(f"Ignoring invalid {DANUBE_JSON}: {e}")
        return None
    if not isinstance(data, dict):
        return None
    return DanubeJson.from_dict(data)
