"""API client for DanubeData."""

from __future__ import annotations

import logging
import random
import time
from typing import Any

import httpx

from .config import config
from .exceptions import (
    DanubeAPIError,
    DanubeAuthenticationError,
    DanubeInvalidResponseError,
    DanubeNetworkError,
    DanubeNotFoundError,
    DanubePermissionError,
    DanubeRateLimitError,
)
from .models import StaticSiteDeployment, StaticSiteDomain
from .utils import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_DELAY,
    DEFAULT_TIMEOUT,
    DEFAULT_UPLOAD_TIMEOUT,
)

logger = logging.getLogger(__name__)

# Only requests without side effects are safe to send more than once
RETRYABLE_METHODS = frozenset({"GET", "HEAD"})


class DanubeClient:
    """Client for interacting with the DanubeData API."""

    def __init__(
        self,
        token: str | None = None,
        api_url: str | None = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize DanubeData API client.

        Args:
            token: Optional API token (uses config if not provided)
            api_url: Optional API base URL (uses config if not provided)
            max_retries: Maximum number of retry attempts for GET requests
            retry_delay: Initial delay between retries in seconds
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)

        Raises:
            DanubeAuthenticationError: If no token is available
        """
        self.token = token or config.token
        self.api_url = (api_url or config.api_base).rstrip("/")
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.timeout = timeout
        self._transport = transport

        if not self.token:
            raise DanubeAuthenticationError()

        self._client: httpx.Client | None = None

    def _get_client(self) -> httpx.Client:
        """Get or create the httpx client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                headers={
                    "Accept": "application/json",
                    "Authorization": f"Bearer {self.token}",
                },
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        """Close the client and release connections."""
        if self._client is not None and not self._client.is_closed:
            self._client.close()
            self._client = None

    def __enter__(self) -> DanubeClient:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def _should_retry(self, method: str, exception: Exception, attempt: int) -> bool:
        """Determine if a request should be retried.

        Args:
            method: HTTP method of the failed request
            exception: The exception that occurred
            attempt: Current attempt number (0-based)

        Returns:
            True if the request should be retried, False otherwise
        """
        if method.upper() not in RETRYABLE_METHODS:
            return False
        if attempt >= self.max_retries:
            return False

        if isinstance(exception, (DanubeNetworkError, DanubeRateLimitError)):
            return True

        # Server errors (5xx)
        if isinstance(exception, DanubeAPIError) and exception.status_code:
            return 500 <= exception.status_code < 600

        return False

    def _calculate_retry_delay(self, attempt: int) -> float:
        """Calculate delay before next retry using exponential backoff.

        Args:
            attempt: Current attempt number (0-based)

        Returns:
            Delay in seconds
        """
        base_delay = self.retry_delay * (2**attempt)
        # +/- 25% jitter
        jitter = base_delay * 0.25 * (2 * random.random() - 1)
        return max(0.0, base_delay + jitter)

    def _error_from_response(self, response: httpx.Response) -> DanubeAPIError:
        """Map an error response to an exception.

        Args:
            response: Non-2xx response

        Returns:
            Exception describing the failure
        """
        status_code = response.status_code

        body: Any = None
        try:
            if response.content:
                body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            body = {}

        message = body.get("message") or f"Request failed with status {status_code}"
        errors = body.get("errors") if isinstance(body.get("errors"), dict) else None

        if status_code == 401:
            return DanubeAuthenticationError()
        if status_code == 403:
            return DanubePermissionError(message, status_code=status_code)
        if status_code == 404:
            return DanubeNotFoundError(message, status_code=status_code)
        if status_code == 429:
            return DanubeRateLimitError(
                "Rate limit exceeded - please try again later",
                status_code=status_code,
            )
        return DanubeAPIError(message, status_code=status_code, errors=errors)

    def _parse_response(self, response: httpx.Response) -> Any:
        """Decode a successful response body."""
        if response.status_code == 204 or not response.content:
            return None

        content_type = response.headers.get("Content-Type", "")
        if "application/json" not in content_type:
            if "text/html" in content_type:
                raise DanubeAuthenticationError(
                    "Invalid token - server returned HTML instead of JSON",
                    status_code=response.status_code,
                )
            raise DanubeInvalidResponseError(
                f"Unexpected response type: {content_type}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise DanubeInvalidResponseError(
                "Invalid JSON response from server",
                status_code=response.status_code,
            ) from e

    def _request(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        """Make an API request.

        GET requests are retried on network errors, rate limits and server
        errors. Other methods are sent exactly once.

        Args:
            method: HTTP method
            endpoint: API endpoint path
            **kwargs: Additional arguments passed to httpx

        Returns:
            Decoded JSON body, or None for empty responses

        Raises:
            DanubeAPIError: If the request fails
        """
        url = f"{self.api_url}/{endpoint.lstrip('/')}"
        client = self._get_client()

        attempt = 0
        while True:
            try:
                logger.debug(f"{method} {url} (attempt {attempt + 1})")
                response = client.request(method, url, **kwargs)
                try:
                    response.raise_for_status()
                except httpx.HTTPStatusError as e:
                    raise self._error_from_response(e.response) from e
                return self._parse_response(response)

            except DanubeAPIError as error:
                if not self._should_retry(method, error, attempt):
                    raise
                delay = self._calculate_retry_delay(attempt)
                if isinstance(error, DanubeRateLimitError):
                    retry_after = response.headers.get("Retry-After", "")
                    if retry_after.isdigit():
                        delay = float(retry_after)
                logger.debug(f"{error}; retrying in {delay:.1f}s")
                time.sleep(delay)
                attempt += 1

            except httpx.RequestError as e:
                error = DanubeNetworkError(f"Network error: {e}")
                if not self._should_retry(method, error, attempt):
                    raise error from e
                delay = self._calculate_retry_delay(attempt)
                logger.debug(f"{error}; retrying in {delay:.1f}s")
                time.sleep(delay)
                attempt += 1

    # =========================
    # Generic requests
    # =========================

    def get(self, endpoint: str, **kwargs: Any) -> Any:
        return self._request("GET", endpoint, **kwargs)

    def post(self, endpoint: str, body: Any = None, **kwargs: Any) -> Any:
        if body is not None:
            kwargs["json"] = body
        return self._request("POST", endpoint, **kwargs)

    def delete(self, endpoint: str, **kwargs: Any) -> Any:
        return self._request("DELETE", endpoint, **kwargs)

    def upload(self, endpoint: str, data: bytes, filename: str) -> Any:
        """Upload a file as the ``archive`` field of a multipart form.

        Args:
            endpoint: API endpoint path
            data: File contents
            filename: File name sent with the form field

        Returns:
            Decoded JSON response
        """
        files = {"archive": (filename, data, "application/gzip")}
        return self._request(
            "POST",
            endpoint,
            files=files,
            timeout=httpx.Timeout(max(self.timeout, DEFAULT_UPLOAD_TIMEOUT)),
        )

    # =========================
    # User & teams
    # =========================

    def get_user(self) -> Any:
        """Get the authenticated user."""
        return self.get("/api/user")

    def get_teams(self) -> Any:
        """Get the teams of the authenticated user.

        Returns:
            Response with 'data' (list of teams) and 'current_team_id'
        """
        return self.get("/api/v1/user/teams")

    # =========================
    # Static sites
    # =========================

    def get_static_sites(self, team_id: int) -> Any:
        """List the static sites of a team (paginated response)."""
        return self.get(f"/api/v1/teams/{team_id}/static-sites")

    def create_static_site(self, team_id: int, name: str) -> Any:
        """Create a static site.

        Returns:
            Response with 'message' and 'data' (the created site)
        """
        return self.post(f"/api/v1/teams/{team_id}/static-sites", {"name": name})

    def deploy(
        self, site_id: int, archive: bytes, filename: str = "deploy.tar.gz"
    ) -> Any:
        """Upload a packaged site and start a build.

        Args:
            site_id: Static site ID
            archive: gzip-compressed tar archive
            filename: Archive file name

        Returns:
            Response with at least 'status'
        """
        return self.upload(f"/api/v1/static-sites/{site_id}/deploy", archive, filename)

    def get_latest_build(self, site_id: int) -> Any:
        """Get the most recent build of a site.

        Returns:
            Response with 'data', which is None until the build exists
        """
        return self.get(f"/api/v1/static-sites/{site_id}/builds/latest")

    # =========================
    # Deployments
    # =========================

    def get_deployments(self, site_id: int) -> Any:
        """List deployments of a site (paginated response)."""
        return self.get(f"/api/v1/static-sites/{site_id}/deployments")

    def find_deployment(self, site_id: int, revision: int) -> StaticSiteDeployment:
        """Find a deployment by revision number.

        Raises:
            DanubeNotFoundError: If no deployment has that revision
        """
        result = self.get_deployments(site_id) or {}
        for item in result.get("data", []):
            deployment = StaticSiteDeployment.from_dict(item)
            if deployment.revision == revision:
                return deployment
        raise DanubeNotFoundError(f"Deployment revision {revision} not found.")

    def activate_deployment(self, site_id: int, deployment_id: int) -> Any:
        """Make a deployment the live one (rollback)."""
        return self.post(
            f"/api/v1/static-sites/{site_id}/deployments/{deployment_id}/activate"
        )

    # =========================
    # Domains
    # =========================

    def get_domains(self, site_id: int) -> Any:
        """List domains of a site."""
        return self.get(f"/api/v1/static-sites/{site_id}/domains")

    def find_domain(self, site_id: int, domain: str) -> StaticSiteDomain:
        """Find a domain of a site by name.

        Raises:
            DanubeNotFoundError: If the site has no such domain
        """
        result = self.get_domains(site_id) or {}
        for item in result.get("data", []):
            if item.get("domain") == domain:
                return StaticSiteDomain.from_dict(item)
        raise DanubeNotFoundError(f"Domain {domain} not found.")

    def add_domain(self, site_id: int, domain: str) -> Any:
        """Add a custom domain.

        Returns:
            Response with 'message' and 'data' (the domain, including the
            DNS verification record)
        """
        return self.post(f"/api/v1/static-sites/{site_id}/domains", {"domain": domain})

    def delete_domain(self, site_id: int, domain_id: int) -> Any:
        """Remove a custom domain."""
        return self.delete(f"/api/v1/static-sites/{site_id}/domains/{domain_id}")

    def verify_domain(self, site_id: int, domain_id: int) -> Any:
        """Start DNS verification of a custom domain."""
        return self.post(f"/api/v1/static-sites/{site_id}/domains/{domain_id}/verify")
