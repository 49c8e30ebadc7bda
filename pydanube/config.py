"""User configuration for pydanube.

The API token and API base URL are stored in ``~/.danube/config.json``.
Environment variables take precedence over the stored values so the CLI can
run unattended in CI:

- ``DANUBE_TOKEN``: API token
- ``DANUBE_API_BASE``: API base URL
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://danubedata.ro"
CONFIG_DIR_NAME = ".danube"
CONFIG_FILE_NAME = "config.json"


class Config:
    """Access to the stored user configuration."""

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize configuration.

        Args:
            config_dir: Directory holding config.json (defaults to ~/.danube)
        """
        self._config_dir = config_dir

    @property
    def config_dir(self) -> Path:
        """Directory holding the configuration file."""
        if self._config_dir is not None:
            return self._config_dir
        return Path.home() / CONFIG_DIR_NAME

    def get_config_path(self) -> Path:
        """Path of the configuration file."""
        return self.config_dir / CONFIG_FILE_NAME

    def load(self) -> dict[str, Any]:
        """Read the stored configuration.

        Returns:
            Stored settings, or an empty dict when the file is missing or invalid
        """
        path = self.get_config_path()
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.debug(f"Could not read config file {path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    @property
    def token(self) -> Optional[str]:
        """API token from DANUBE_TOKEN or the config file."""
        env_token = os.environ.get("DANUBE_TOKEN")
        if env_token:
            return env_token
        return self.load().get("token") or None

    @property
    def api_base(self) -> str:
        """API base URL from DANUBE_API_BASE, the config file or the default."""
        env_base = os.environ.get("DANUBE_API_BASE")
        if env_base:
            return env_base.rstrip("/")
        stored = self.load().get("apiBase")
        return (stored or DEFAULT_API_BASE).rstrip("/")

    def is_configured(self) -> bool:
        """Check whether a token is available."""
        return bool(self.token)

    def save_token(self, token: str, api_base: Optional[str] = None) -> Path:
        """Store the API token.

        The file is created with mode 0600 since it holds a credential.

        Args:
            token: API token
            api_base: API base URL to store alongside the token

        Returns:
            Path of the written file
        """
        path = self.get_config_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        data = {"token": token, "apiBase": api_base or self.api_base}
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(json.dumps(data, indent=2) + "\n")
        logger.debug(f"Saved configuration to {path}")
        return path

    def clear(self) -> bool:
        """Remove the stored configuration.

        Returns:
            True if a file was removed, False if there was nothing to remove
        """
        try:
            self.get_config_path().unlink()
        except FileNotFoundError:
            return False
        return True


config = Config()
