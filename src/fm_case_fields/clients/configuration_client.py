"""HTTP client for the case configuration store."""

import logging
from typing import List, Optional

import httpx

from fm_case_fields.clients.base import BaseServiceClient
from fm_case_fields.config import Settings, get_settings
from fm_case_fields.models import Configuration, ConfigurationPatchRequest
from fm_case_fields.utils.resilience import create_custom_retry
from fm_case_fields.validation.configuration_validators import reconcile_configuration

logger = logging.getLogger(__name__)


class ConfigurationServiceClient(BaseServiceClient):
    """Async client for reading and updating owner configurations.

    Reads are retried on transport errors. Updates are reconciled against the
    stored configuration before anything is sent.

    Usage:
        client = ConfigurationServiceClient()
        configuration = await client.get_configuration(owner="securitySolution")
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_min_wait: float = 0.5,
    ):
        """Initialize client.

        Args:
            base_url: Base URL of the store (default: settings.case_service_url)
            timeout: Request timeout in seconds (default: settings.case_service_timeout)
            settings: Settings to use instead of the process-wide ones
            transport: Optional httpx transport
            retry_min_wait: Minimum back-off between read attempts (seconds)
        """
        self.settings = settings or get_settings()
        super().__init__(
            base_url=base_url or self.settings.case_service_url,
            timeout=timeout or self.settings.case_service_timeout,
            transport=transport,
        )
        self._read_retry = create_custom_retry(
            max_attempts=self.settings.case_service_max_retries,
            min_wait=retry_min_wait,
            max_wait=max(retry_min_wait, 4),
            multiplier=retry_min_wait,
        )

    async def _fetch_configurations(
        self, owner: str, user_id: Optional[str], correlation_id: Optional[str]
    ) -> List[Configuration]:
        async with self._get_client() as client:
            response = await client.get(
                self._cases_url("configure"),
                params={"owner": owner},
                headers=self._headers(user_id=user_id, correlation_id=correlation_id),
            )
            response.raise_for_status()
            return [Configuration(**item) for item in response.json()]

    async def get_configurations(
        self, owner: str, user_id: Optional[str] = None, correlation_id: Optional[str] = None
    ) -> List[Configuration]:
        """Get every configuration stored for an owner.

        Args:
            owner: Owner to read configurations for
            user_id: User ID for X-User-ID header
            correlation_id: Optional correlation ID for request tracing

        Returns:
            Configurations of the owner, possibly empty

        Raises:
            httpx.HTTPStatusError: On an error response
            httpx.TransportError: If every attempt failed to reach the store
        """
        configurations = await self._read_retry(self._fetch_configurations)(
            owner, user_id, correlation_id
        )
        logger.debug(f"Fetched {len(configurations)} configuration(s) for owner={owner}")
        return configurations

    async def get_configuration(
        self, owner: str, user_id: Optional[str] = None, correlation_id: Optional[str] = None
    ) -> Optional[Configuration]:
        """Get the active configuration of an owner, or None if there is none."""
        configurations = await self.get_configurations(owner, user_id, correlation_id)
        return configurations[0] if configurations else None

    async def update_configuration(
        self,
        configuration_id: str,
        request: ConfigurationPatchRequest,
        owner: str,
        user_id: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> Configuration:
        """Reconcile and store a configuration update.

        Args:
            configuration_id: Identifier of the configuration to update
            request: Proposed configuration
            owner: Owner of the configuration
            user_id: User ID for X-User-ID header
            correlation_id: Optional correlation ID for request tracing

        Returns:
            Updated configuration

        Raises:
            CustomFieldValidationError: If the proposed custom fields are rejected
            httpx.HTTPStatusError: On an error response
        """
        current = await self.get_configuration(owner, user_id, correlation_id)
        original_custom_fields = current.custom_fields if current else []

        reconcile_configuration(
            request.custom_fields,
            original_custom_fields,
            self.settings.max_custom_fields_per_case,
        )

        payload = {"version": request.version}
        if request.custom_fields is not None:
            payload["customFields"] = [
                custom_field.to_payload() for custom_field in request.custom_fields
            ]

        async with self._get_client() as client:
            response = await client.patch(
                self._cases_url("configure", configuration_id),
                json=payload,
                headers=self._headers(user_id=user_id, correlation_id=correlation_id),
            )
            response.raise_for_status()
            return Configuration(**response.json())
