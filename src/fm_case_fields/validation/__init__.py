"""Custom field validators.

- case_validators: custom field values in case create/update requests
- configuration_validators: reconciliation of configuration updates
- search_validators: custom field filters of case searches
"""

from fm_case_fields.validation.case_validators import (
    fill_missing_custom_fields,
    validate_custom_field_keys_partial,
    validate_custom_field_keys_strict,
    validate_custom_field_types_in_request,
    validate_custom_fields,
    validate_custom_field_values,
    validate_custom_fields_count,
    validate_duplicated_custom_field_keys_in_request,
    validate_required_custom_fields,
)
from fm_case_fields.validation.configuration_validators import (
    CustomFieldChanges,
    classify_custom_field_changes,
    reconcile_configuration,
    validate_optional_custom_fields_in_request,
    validate_required_custom_fields_in_request,
)
from fm_case_fields.validation.search_validators import (
    build_custom_fields_filter,
    validate_search_custom_fields,
)

__all__ = [
    # Cases
    "validate_custom_fields",
    "validate_duplicated_custom_field_keys_in_request",
    "validate_custom_field_keys_partial",
    "validate_custom_field_keys_strict",
    "validate_custom_field_types_in_request",
    "validate_custom_field_values",
    "validate_required_custom_fields",
    "validate_custom_fields_count",
    "fill_missing_custom_fields",
    # Configuration
    "reconcile_configuration",
    "classify_custom_field_changes",
    "validate_required_custom_fields_in_request",
    "validate_optional_custom_fields_in_request",
    "CustomFieldChanges",
    # Search
    "validate_search_custom_fields",
    "build_custom_fields_filter",
]
