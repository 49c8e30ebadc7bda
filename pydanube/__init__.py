"""PyDanube - CLI tool for deploying static sites to DanubeData."""

__version__ = "0.1.0"

from .api import DanubeClient  # noqa: E402
from .exceptions import (  # noqa: E402
    DanubeAPIError,
    DanubeAuthenticationError,
    DanubeConfigError,
    DanubeError,
    DanubeInvalidResponseError,
    DanubeNetworkError,
    DanubeNotFoundError,
    DanubeNotLinkedError,
    DanubePackagingError,
    DanubePermissionError,
    DanubeRateLimitError,
)
from .packaging import PackageResult, package_directory  # noqa: E402
from .poller import (  # noqa: E402
    DeploymentPoller,
    PollOutcome,
    PollResult,
    poll_until_terminal,
)

__all__ = [
    "__version__",
    "DanubeClient",
    "DanubeAPIError",
    "DanubeAuthenticationError",
    "DanubeConfigError",
    "DanubeError",
    "DanubeInvalidResponseError",
    "DanubeNetworkError",
    "DanubeNotFoundError",
    "DanubeNotLinkedError",
    "DanubePackagingError",
    "DanubePermissionError",
    "DanubeRateLimitError",
    "DeploymentPoller",
    "PackageResult",
    "PollOutcome",
    "PollResult",
    "package_directory",
    "poll_until_terminal",
]
