"""Endpoint fallback and retry policy for external queries.

The orchestrator knows nothing about geography: it runs one query through an
ordered list of endpoints, retrying each a bounded number of times.
"""

import logging
import time
from enum import Enum
from typing import Callable, Dict, List, Sequence

from ..core.errors import (
    AllEndpointsExhaustedError,
    RoutePoisError,
    TransientSourceError,
)

logger = logging.getLogger(__name__)


class Outcome(Enum):
    """What to do after one attempt."""

    SUCCESS = "success"
    RETRY = "retry"
    ABORT_ENDPOINT = "abort_endpoint"


def classify_failure(error: Exception) -> Outcome:
    """Retry transient failures, move on to the next endpoint for anything else."""
    if isinstance(error, TransientSourceError):
        return Outcome.RETRY
    return Outcome.ABORT_ENDPOINT


class FetchOrchestrator:
    """Try N endpoints with bounded retry and linear backoff."""

    def __init__(
        self,
        endpoints: Sequence[str],
        send: Callable[[str, str], List[Dict]],
        max_retries: int = 2,
        base_delay: float = 0.4,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the orchestrator.

        Args:
            endpoints: Endpoint URLs in fallback order
            send: Callable(endpoint, query) returning raw elements; it must
                raise a RoutePoisError subclass on failure
            max_retries: Attempts per endpoint
            base_delay: Backoff unit in seconds, multiplied by the attempt number
            sleep: Sleep function (injected for tests)
        """
        self.endpoints = list(endpoints)
        self.send = send
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.sleep = sleep

    def fetch(self, query: str) -> List[Dict]:
        """
        Run a query, falling back across endpoints.

        Returns:
            Raw elements from the first successful attempt

        Raises:
            AllEndpointsExhaustedError: With the last failure reason
        """
        last_reason = "no endpoint"

        for endpoint in self.endpoints:
            for attempt in range(1, self.max_retries + 1):
                try:
                    return self.send(endpoint, query)
                except RoutePoisError as e:
                    last_reason = f"{endpoint}#{attempt}:{e}"
                    outcome = classify_failure(e)

                if outcome is Outcome.ABORT_ENDPOINT:
                    logger.info("Endpoint failed, trying next: %s", last_reason)
                    break

                delay = self.base_delay * attempt
                logger.info("Transient failure (%s), retrying in %.1fs", last_reason, delay)
                self.sleep(delay)

        raise AllEndpointsExhaustedError(last_reason)
