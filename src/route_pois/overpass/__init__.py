"""Overpass API access with endpoint fallback."""

from .client import OverpassClient, RETRYABLE_STATUS
from .orchestrator import FetchOrchestrator, Outcome, classify_failure


def build_orchestrator(config, client: OverpassClient) -> FetchOrchestrator:
    """
    Create an orchestrator sending queries through an Overpass client.

    Args:
        config: Config with endpoints and retry settings
        client: OverpassClient used for every attempt (the caller closes it)

    Returns:
        FetchOrchestrator
    """
    return FetchOrchestrator(
        config.endpoints,
        client.post,
        max_retries=config.max_retries,
        base_delay=config.backoff,
    )


__all__ = [
    "OverpassClient",
    "RETRYABLE_STATUS",
    "FetchOrchestrator",
    "Outcome",
    "classify_failure",
    "build_orchestrator",
]
