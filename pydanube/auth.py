"""Authentication and project-link helpers for CLI commands."""

from typing import Any

from .config import config
from .exceptions import DanubeAuthenticationError, DanubeNotLinkedError
from .output import OutputFormatter
from .project import ProjectConfig, read_project_config


def require_token(ctx: Any, out: OutputFormatter) -> str:
    """Get the API token or exit with an error.

    The ``--token`` option (or DANUBE_TOKEN) wins over the stored token.

    Args:
        ctx: Click context
        out: Output formatter

    Returns:
        API token
    """
    token = ctx.obj.get("token") or config.token
    if not token:
        out.error(str(DanubeAuthenticationError()))
        ctx.exit(1)
    return token


def require_project(ctx: Any, out: OutputFormatter) -> ProjectConfig:
    """Get the linked project of the current directory or exit with an error."""
    project = read_project_config()
    if project is None:
        out.error(str(DanubeNotLinkedError()))
        ctx.exit(1)
    return project
