"""Validation and query building for custom field search filters.

A search request filters cases by ``{key: [values]}``. Filters are validated
against the owner's configuration before they are turned into a backing-store
query.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from fm_case_fields.exceptions import (
    CustomFieldNotFilterableError,
    CustomFieldsConfigurationMissingError,
    InvalidCustomFieldFilterValueError,
    TooManyCustomFieldFiltersError,
    UnknownCustomFieldKeyError,
    format_keys,
)
from fm_case_fields.models.custom_field import CustomFieldConfiguration
from fm_case_fields.registry import get_custom_field_type

logger = logging.getLogger(__name__)

CustomFieldFilters = Optional[Mapping[str, Sequence[Any]]]


def validate_search_custom_fields(
    custom_field_filters: CustomFieldFilters,
    configuration: Optional[Sequence[CustomFieldConfiguration]],
    max_filters: int,
) -> None:
    """Validate the custom field filters of a search request.

    Steps:
    1. No-op when there are no filters
    2. Fail if the owner has no configured fields
    3. Fail if there are more filter keys than ``max_filters``
    4. Per key: unknown key, then non-filterable type, then value shape

    Violations of step 4 are collected over every key and raised with that
    precedence, so one error lists all offending keys of its class.

    Raises:
        CustomFieldsConfigurationMissingError: Filters supplied but nothing configured
        TooManyCustomFieldFiltersError: Too many filter keys
        UnknownCustomFieldKeyError: Filter keys that are not configured
        CustomFieldNotFilterableError: Filter keys whose type cannot be filtered
        InvalidCustomFieldFilterValueError: Filter values rejected by the type
    """
    if not custom_field_filters:
        return

    if not configuration:
        logger.warning("Custom field filters supplied but no custom fields are configured")
        raise CustomFieldsConfigurationMissingError()

    if len(custom_field_filters) > max_filters:
        logger.warning(
            f"Search request has {len(custom_field_filters)} custom field filters, "
            f"maximum is {max_filters}"
        )
        raise TooManyCustomFieldFiltersError(
            f"Maximum {max_filters} customFields are allowed.",
            context={"count": len(custom_field_filters), "max": max_filters},
        )

    configured = {custom_field.key: custom_field for custom_field in configuration}

    unknown: List[str] = []
    not_filterable: Dict[str, str] = {}
    invalid_values: Dict[str, str] = {}

    for key, values in custom_field_filters.items():
        custom_field = configured.get(key)
        if custom_field is None:
            unknown.append(key)
            continue

        descriptor = get_custom_field_type(custom_field.type)
        if not descriptor.is_filterable:
            not_filterable[key] = custom_field.type.value
            continue

        try:
            descriptor.validate_filtering_values(values)
        except ValueError as e:
            invalid_values[key] = str(e)

    if unknown:
        logger.warning(f"Unknown custom field filter keys: {unknown}")
        raise UnknownCustomFieldKeyError(
            f"Invalid custom field key: {format_keys(unknown)}",
            context={"keys": unknown},
        )

    if not_filterable:
        keys = list(not_filterable)
        types = list(dict.fromkeys(not_filterable.values()))
        logger.warning(f"Filtering requested on non-filterable custom fields: {keys}")
        raise CustomFieldNotFilterableError(
            f"Filtering by custom field of type {format_keys(types)} is not allowed.",
            context={"keys": keys, "types": types},
        )

    if invalid_values:
        keys = list(invalid_values)
        logger.warning(f"Invalid custom field filter values: {invalid_values}")
        raise InvalidCustomFieldFilterValueError(
            " ".join(dict.fromkeys(invalid_values.values())),
            context={"keys": keys, "errors": invalid_values},
        )


def build_custom_fields_filter(
    custom_field_filters: CustomFieldFilters,
    configuration: Sequence[CustomFieldConfiguration],
) -> Optional[Dict[str, Any]]:
    """Translate validated filters into an Elasticsearch bool query.

    Each key contributes one nested clause (values OR-ed); clauses are AND-ed.
    Call :func:`validate_search_custom_fields` first.

    Returns:
        Bool query, or None when there are no filters
    """
    if not custom_field_filters:
        return None

    configured = {custom_field.key: custom_field for custom_field in configuration}
    clauses = [
        get_custom_field_type(configured[key].type).build_filter_clause(key, values)
        for key, values in custom_field_filters.items()
    ]
    return {"bool": {"filter": clauses}}
