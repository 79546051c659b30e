"""Shared plumbing for clients of the case store HTTP API."""

import logging
from typing import Dict, Optional

import httpx

logger = logging.getLogger(__name__)

CASES_API_PREFIX = "/api/v1/cases"


class BaseServiceClient:
    """Base class for the case and configuration store clients.

    Requests go straight to the store; the acting user is passed along in
    the X-User-ID header and requests are traced with X-Correlation-ID.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize store client.

        Args:
            base_url: Store base URL (e.g., http://fm-case-service:8000)
            timeout: Request timeout in seconds (default: 30.0)
            transport: Optional httpx transport (e.g. httpx.MockTransport in tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

        logger.info(f"Initialized {self.__class__.__name__} with base_url={base_url}")

    def _cases_url(self, *segments: str) -> str:
        """Build a URL under the cases API, e.g. ``_cases_url(case_id, "custom_fields")``."""
        path = "/".join((CASES_API_PREFIX,) + segments)
        return f"{self.base_url}{path}"

    def _headers(
        self,
        user_id: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if user_id:
            headers["X-User-ID"] = user_id
        if correlation_id:
            headers["X-Correlation-ID"] = correlation_id
        return headers

    def _get_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
