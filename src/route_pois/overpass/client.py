"""HTTP transport for the Overpass API."""

import logging
from typing import Dict, List, Optional

import requests

from ..core.errors import EndpointError, TransientSourceError

logger = logging.getLogger(__name__)

# Rate limited, bad gateway, service unavailable, gateway timeout
RETRYABLE_STATUS = frozenset({429, 502, 503, 504})


class OverpassClient:
    """Send Overpass QL queries to one endpoint at a time."""

    def __init__(self, timeout: float = 35.0, session: Optional[requests.Session] = None):
        """
        Initialize the client.

        Args:
            timeout: Per-request timeout in seconds
            session: requests Session to reuse (a new one is created if None)
        """
        self.timeout = timeout
        self.session = session or requests.Session()

    def post(self, endpoint: str, query: str) -> List[Dict]:
        """
        Run a query against an endpoint.

        Args:
            endpoint: Overpass interpreter URL
            query: Overpass QL query

        Returns:
            List of raw Overpass elements

        Raises:
            TransientSourceError: On a retryable HTTP status
            EndpointError: On any other failure (status, timeout, network, JSON)
        """
        try:
            response = self.session.post(
                endpoint,
                data={'data': query},
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            raise EndpointError(f"timeout after {self.timeout}s") from e
        except requests.RequestException as e:
            raise EndpointError(str(e)) from e

        if response.status_code in RETRYABLE_STATUS:
            raise TransientSourceError(response.status_code, endpoint)

        if not 200 <= response.status_code < 300:
            raise EndpointError(f"Overpass unavailable ({response.status_code})")

        try:
            body = response.json()
        except ValueError as e:
            raise EndpointError("invalid JSON response") from e

        if not isinstance(body, dict):
            raise EndpointError("unexpected Overpass response")

        elements = body.get('elements') or []
        if not isinstance(elements, list):
            raise EndpointError("unexpected Overpass response")

        elements = [element for element in elements if isinstance(element, dict)]
        logger.debug("%s returned %d elements", endpoint, len(elements))
        return elements

    def close(self):
        self.session.close()
