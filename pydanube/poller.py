"""Waiting for a deploy build to finish.

After an archive is uploaded, the latest build of the site is polled at a
fixed interval until it is live, it failed, or the wait times out. A timeout
is not a failure: the build may still finish on the server, the client just
stops watching.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from .models import StaticSiteBuild

logger = logging.getLogger(__name__)

POLL_INTERVAL: float = 2.0  # seconds
POLL_TIMEOUT: float = 5 * 60.0  # seconds

BUILD_STATUS_LIVE = "live"
BUILD_STATUS_FAILED = "failed"


class PollOutcome(Enum):
    """Terminal outcome of waiting for a build."""

    LIVE = "live"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass
class DeploymentPollState:
    """Mutable state of one polling run."""

    started_at: float
    last_observed_status: Optional[str] = None
    attempts: int = 0


@dataclass
class PollResult:
    """Result of a polling run."""

    outcome: PollOutcome
    build: Optional[StaticSiteBuild] = None
    error_message: Optional[str] = None
    attempts: int = 0
    elapsed: float = 0.0

    @property
    def is_live(self) -> bool:
        return self.outcome is PollOutcome.LIVE

    @property
    def is_failed(self) -> bool:
        return self.outcome is PollOutcome.FAILED

    @property
    def timed_out(self) -> bool:
        return self.outcome is PollOutcome.TIMED_OUT


class DeploymentPoller:
    """Polls build status until a terminal state or the timeout.

    Every iteration first checks the elapsed time, then sleeps for
    ``interval`` and fetches the status once. A response without a build
    record (``{"data": None}``) just continues the loop. Exceptions raised by
    ``fetch_status`` are not caught.

    Examples:
        >>> poller = DeploymentPoller(lambda: client.get_latest_build(site_id))
        >>> result = poller.poll()
        >>> if result.is_failed:
        ...     print(result.error_message)
    """

    def __init__(
        self,
        fetch_status: Callable[[], Any],
        interval: float = POLL_INTERVAL,
        timeout: float = POLL_TIMEOUT,
        sleep: Optional[Callable[[float], None]] = None,
        clock: Optional[Callable[[], float]] = None,
        on_status: Optional[Callable[[str], None]] = None,
    ):
        """Initialize the poller.

        Args:
            fetch_status: Returns the latest-build response ``{"data": ...}``
            interval: Seconds to sleep before each fetch
            timeout: Seconds after which waiting stops
            sleep: Sleep function (defaults to time.sleep)
            clock: Monotonic time source (defaults to time.monotonic)
            on_status: Called with every observed status
        """
        self.fetch_status = fetch_status
        self.interval = interval
        self.timeout = timeout
        self._sleep = sleep
        self._clock = clock
        self.on_status = on_status

    def _now(self) -> float:
        return self._clock() if self._clock is not None else time.monotonic()

    def _wait(self) -> None:
        if self._sleep is not None:
            self._sleep(self.interval)
        else:
            time.sleep(self.interval)

    def poll(self) -> PollResult:
        """Run the polling loop.

        Returns:
            PollResult with outcome LIVE, FAILED or TIMED_OUT
        """
        state = DeploymentPollState(started_at=self._now())
        build: Optional[StaticSiteBuild] = None

        while self._now() - state.started_at < self.timeout:
            self._wait()
            response = self.fetch_status()
            state.attempts += 1

            record = response.get("data") if isinstance(response, dict) else None
            if not record:
                logger.debug("No build yet, waiting")
                continue

            build = StaticSiteBuild.from_dict(record)
            if build.status != state.last_observed_status:
                logger.debug(f"Build status: {build.status}")
            state.last_observed_status = build.status
            if self.on_status is not None:
                self.on_status(build.status)

            if build.status == BUILD_STATUS_LIVE:
                return self._result(PollOutcome.LIVE, state, build)
            if build.status == BUILD_STATUS_FAILED:
                return self._result(
                    PollOutcome.FAILED, state, build, build.error_message
                )

        logger.debug(
            f"Timed out after {state.attempts} check(s), "
            f"last status: {state.last_observed_status}"
        )
        return self._result(PollOutcome.TIMED_OUT, state, build)

    def _result(
        self,
        outcome: PollOutcome,
        state: DeploymentPollState,
        build: Optional[StaticSiteBuild],
        error_message: Optional[str] = None,
    ) -> PollResult:
        return PollResult(
            outcome=outcome,
            build=build,
            error_message=error_message,
            attempts=state.attempts,
            elapsed=self._now() - state.started_at,
        )


def poll_until_terminal(
    fetch_status: Callable[[], Any],
    interval: float = POLL_INTERVAL,
    timeout: float = POLL_TIMEOUT,
    **kwargs: Any,
) -> PollResult:
    """Poll ``fetch_status`` until the build is live, failed or timed out.

    Keyword arguments are passed to DeploymentPoller.
    """
    poller = DeploymentPoller(
        fetch_status, interval=interval, timeout=timeout, **kwargs
    )
    return poller.poll()
