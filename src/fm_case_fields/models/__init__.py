"""
Shared data models for case custom fields.

Pydantic models for owner configurations, cases, and the API requests that
carry custom field values and filters.
"""

from fm_case_fields.models.custom_field import (
    CustomFieldType,
    CustomFieldConfiguration,
    CustomFieldValue,
    CustomFieldValueField,
)
from fm_case_fields.models.configuration import Configuration
from fm_case_fields.models.case import Case, CaseSeverity, CaseStatus
from fm_case_fields.models.api_models import (
    CasePostRequest,
    CasePatchRequest,
    CaseCustomFieldsReplaceRequest,
    ConfigurationPatchRequest,
    CasesSearchRequest,
    CasesSearchResponse,
)

__all__ = [
    # Custom fields
    "CustomFieldType", "CustomFieldConfiguration", "CustomFieldValue",
    "CustomFieldValueField",
    # Configuration
    "Configuration",
    # Case
    "Case", "CaseSeverity", "CaseStatus",
    # API
    "CasePostRequest", "CasePatchRequest", "CaseCustomFieldsReplaceRequest",
    "ConfigurationPatchRequest", "CasesSearchRequest", "CasesSearchResponse",
]
