"""HTTP client for the case store.

Every write or search first fetches the owner's configuration, then runs the
custom field validators, and only then calls the store. A validation failure
means the store is never called.
"""

import logging
from typing import List, Optional

import httpx

from fm_case_fields.clients.base import BaseServiceClient
from fm_case_fields.clients.configuration_client import ConfigurationServiceClient
from fm_case_fields.config import Settings, get_settings
from fm_case_fields.models import (
    Case,
    CaseCustomFieldsReplaceRequest,
    CasePatchRequest,
    CasePostRequest,
    CasesSearchRequest,
    CasesSearchResponse,
    CustomFieldConfiguration,
)
from fm_case_fields.validation.case_validators import (
    fill_missing_custom_fields,
    validate_custom_fields,
    validate_custom_fields_count,
)
from fm_case_fields.validation.search_validators import (
    build_custom_fields_filter,
    validate_search_custom_fields,
)

logger = logging.getLogger(__name__)


class CaseServiceClient(BaseServiceClient):
    """Async HTTP client for the case store with custom field validation.

    Usage:
        client = CaseServiceClient(base_url="http://fm-case-service:8000")
        case = await client.create_case(
            CasePostRequest(owner="securitySolution", title="Phishing report"),
            user_id="user-456",
        )
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        settings: Optional[Settings] = None,
        configuration_client: Optional[ConfigurationServiceClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize client.

        Args:
            base_url: Base URL of the case store (default: settings.case_service_url)
            timeout: Request timeout in seconds (default: settings.case_service_timeout)
            settings: Settings to use instead of the process-wide ones
            configuration_client: Client used to read owner configurations
            transport: Optional httpx transport, shared with the default configuration client
        """
        self.settings = settings or get_settings()
        super().__init__(
            base_url=base_url or self.settings.case_service_url,
            timeout=timeout or self.settings.case_service_timeout,
            transport=transport,
        )
        self.configuration_client = configuration_client or ConfigurationServiceClient(
            base_url=self.base_url,
            timeout=self.timeout,
            settings=self.settings,
            transport=transport,
        )

    async def _get_custom_fields_configuration(
        self, owner: Optional[str], user_id: Optional[str], correlation_id: Optional[str]
    ) -> Optional[List[CustomFieldConfiguration]]:
        if not owner:
            return None
        configuration = await self.configuration_client.get_configuration(
            owner, user_id=user_id, correlation_id=correlation_id
        )
        return configuration.custom_fields if configuration else None

    async def get_case(
        self, case_id: str, user_id: Optional[str] = None, correlation_id: Optional[str] = None
    ) -> Case:
        """Get case by ID.

        Raises:
            httpx.HTTPStatusError: If case not found or other HTTP error
        """
        async with self._get_client() as client:
            response = await client.get(
                self._cases_url(case_id),
                headers=self._headers(user_id=user_id, correlation_id=correlation_id),
            )
            response.raise_for_status()
            return Case(**response.json())

    async def create_case(
        self, request: CasePostRequest, user_id: Optional[str] = None,
        correlation_id: Optional[str] = None
    ) -> Case:
        """Validate and create a new case.

        Configured fields the request omits are filled with their default
        value (or None) before validation, so the stored case carries every
        configured key.

        Args:
            request: Case to create
            user_id: User ID for X-User-ID header
            correlation_id: Optional correlation ID for request tracing

        Returns:
            Created case

        Raises:
            CustomFieldValidationError: If the custom fields are rejected
            httpx.HTTPStatusError: On an error response
        """
        validate_custom_fields_count(request.custom_fields, self.settings.max_custom_fields_per_case)

        configuration = await self._get_custom_fields_configuration(
            request.owner, user_id, correlation_id
        )
        custom_fields = fill_missing_custom_fields(request.custom_fields, configuration)
        validate_custom_fields(custom_fields, configuration)

        payload = request.model_dump(mode='json', by_alias=True, exclude={"custom_fields"})
        payload["customFields"] = [custom_field.model_dump(mode='json') for custom_field in custom_fields]

        async with self._get_client() as client:
            response = await client.post(
                self._cases_url(),
                json=payload,
                headers=self._headers(user_id=user_id, correlation_id=correlation_id),
            )
            response.raise_for_status()
            case = Case(**response.json())

        logger.info(f"Created case {case.id} for owner={case.owner}")
        return case

    async def update_case(
        self, case_id: str, request: CasePatchRequest, user_id: Optional[str] = None,
        correlation_id: Optional[str] = None
    ) -> Case:
        """Validate and update an existing case.

        Custom fields are validated only when the request carries them; keys
        the request omits are left unset.

        Raises:
            CustomFieldValidationError: If the custom fields are rejected
            httpx.HTTPStatusError: On an error response
        """
        if request.custom_fields is not None:
            validate_custom_fields_count(
                request.custom_fields, self.settings.max_custom_fields_per_case
            )
            current = await self.get_case(case_id, user_id, correlation_id)
            configuration = await self._get_custom_fields_configuration(
                current.owner, user_id, correlation_id
            )
            validate_custom_fields(request.custom_fields, configuration)

        payload = request.model_dump(
            mode='json', by_alias=True, exclude_none=True, exclude={"custom_fields"}
        )
        if request.custom_fields is not None:
            # null values are meaningful here, so these are dumped separately
            payload["customFields"] = [
                custom_field.model_dump(mode='json') for custom_field in request.custom_fields
            ]

        async with self._get_client() as client:
            response = await client.patch(
                self._cases_url(case_id),
                json=payload,
                headers=self._headers(user_id=user_id, correlation_id=correlation_id),
            )
            response.raise_for_status()
            return Case(**response.json())

    async def replace_custom_fields(
        self, case_id: str, request: CaseCustomFieldsReplaceRequest,
        user_id: Optional[str] = None, correlation_id: Optional[str] = None
    ) -> Case:
        """Replace every custom field value of a case.

        Every configured key must be present in the request.

        Raises:
            CustomFieldValidationError: If the custom fields are rejected
            httpx.HTTPStatusError: On an error response
        """
        validate_custom_fields_count(request.custom_fields, self.settings.max_custom_fields_per_case)

        current = await self.get_case(case_id, user_id, correlation_id)
        configuration = await self._get_custom_fields_configuration(
            current.owner, user_id, correlation_id
        )
        validate_custom_fields(request.custom_fields, configuration, strict=True)

        async with self._get_client() as client:
            response = await client.put(
                self._cases_url(case_id, "custom_fields"),
                json=request.model_dump(mode='json', by_alias=True),
                headers=self._headers(user_id=user_id, correlation_id=correlation_id),
            )
            response.raise_for_status()
            return Case(**response.json())

    async def search_cases(
        self, request: CasesSearchRequest, user_id: Optional[str] = None,
        correlation_id: Optional[str] = None
    ) -> CasesSearchResponse:
        """Validate custom field filters and search cases.

        The filters are sent to the store as a prebuilt Elasticsearch query
        under ``customFieldsFilter``.

        Raises:
            CustomFieldValidationError: If the custom field filters are rejected
            httpx.HTTPStatusError: On an error response
        """
        payload = request.model_dump(mode='json', by_alias=True, exclude={"custom_fields"})

        if request.custom_fields:
            configuration = await self._get_custom_fields_configuration(
                request.owner, user_id, correlation_id
            )
            validate_search_custom_fields(
                request.custom_fields, configuration, self.settings.max_custom_field_filters
            )
            payload["customFieldsFilter"] = build_custom_fields_filter(
                request.custom_fields, configuration
            )

        async with self._get_client() as client:
            response = await client.post(
                self._cases_url("_search"),
                json=payload,
                headers=self._headers(user_id=user_id, correlation_id=correlation_id),
            )
            response.raise_for_status()
            return CasesSearchResponse(**response.json())
