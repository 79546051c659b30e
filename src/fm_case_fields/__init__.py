"""FaultMaven Case Fields Library

Custom field configuration, validation and reconciliation shared by
FaultMaven case services.
"""

__version__ = "0.1.0"

# Export shared models first (no dependencies)
from fm_case_fields.models import (
    Case, Configuration, CustomFieldType, CustomFieldConfiguration, CustomFieldValue,
    CasePostRequest, CasePatchRequest, CaseCustomFieldsReplaceRequest,
    ConfigurationPatchRequest, CasesSearchRequest,
)

from fm_case_fields.exceptions import (
    CustomFieldValidationError,
    UnknownCustomFieldTypeError,
    to_http_exception,
)

from fm_case_fields.registry import get_custom_field_type

from fm_case_fields.validation import (
    validate_custom_fields,
    reconcile_configuration,
    validate_search_custom_fields,
)


# Clients pull in httpx and tenacity; import them on first use
def __getattr__(name):
    """Lazy import for the store clients."""
    if name in ("CaseServiceClient", "ConfigurationServiceClient"):
        from fm_case_fields import clients
        return getattr(clients, name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")

__all__ = [
    # Models
    "Case", "Configuration", "CustomFieldType", "CustomFieldConfiguration",
    "CustomFieldValue", "CasePostRequest", "CasePatchRequest",
    "CaseCustomFieldsReplaceRequest", "ConfigurationPatchRequest", "CasesSearchRequest",
    # Errors
    "CustomFieldValidationError", "UnknownCustomFieldTypeError", "to_http_exception",
    # Registry and validation
    "get_custom_field_type",
    "validate_custom_fields",
    "reconcile_configuration",
    "validate_search_custom_fields",
    # Clients (lazy loaded)
    "CaseServiceClient",
    "ConfigurationServiceClient",
]
