"""Validators for custom field values in case requests.

Each validator is pure and synchronous: it reads the request's custom fields
and the owner's configured fields, and raises a
:class:`~fm_case_fields.exceptions.CustomFieldValidationError` listing every
violation of its class. Nothing is returned on success.

Key existence comes in two flavors, chosen per endpoint:

- :func:`validate_custom_field_keys_partial` (case create/update): omitted
  configured keys are fine and mean "leave unset".
- :func:`validate_custom_field_keys_strict` (full replacement of a case's
  values): every configured key must be present.
"""

import logging
from typing import Dict, List, Optional, Sequence

from fm_case_fields.exceptions import (
    CustomFieldsConfigurationMissingError,
    CustomFieldTypeMismatchError,
    DuplicateCustomFieldKeyError,
    InvalidCustomFieldValueError,
    MissingCustomFieldKeyError,
    MissingRequiredCustomFieldsError,
    TooManyCustomFieldsError,
    UnknownCustomFieldKeyError,
    format_keys,
)
from fm_case_fields.models.custom_field import (
    CustomFieldConfiguration,
    CustomFieldValue,
    CustomFieldValueField,
)
from fm_case_fields.registry import get_custom_field_type

logger = logging.getLogger(__name__)

RequestCustomFields = Optional[Sequence[CustomFieldValue]]
ConfiguredCustomFields = Optional[Sequence[CustomFieldConfiguration]]


def _require_configuration(configuration: ConfiguredCustomFields) -> Sequence[CustomFieldConfiguration]:
    if not configuration:
        logger.warning("Custom fields supplied but no custom fields are configured")
        raise CustomFieldsConfigurationMissingError()
    return configuration


def validate_duplicated_custom_field_keys_in_request(
    request_custom_fields: RequestCustomFields,
) -> None:
    """Throw if a key appears more than once in the request.

    Each duplicated key is listed once, in the order its first repeat is seen.

    Raises:
        DuplicateCustomFieldKeyError: If any key repeats
    """
    seen = set()
    duplicated: Dict[str, None] = {}

    for custom_field in request_custom_fields or []:
        if custom_field.key in seen:
            duplicated[custom_field.key] = None
        else:
            seen.add(custom_field.key)

    if duplicated:
        keys = list(duplicated)
        logger.warning(f"Duplicated custom field keys in request: {keys}")
        raise DuplicateCustomFieldKeyError(
            f"Invalid duplicated custom field keys in request: {format_keys(keys)}",
            context={"keys": keys},
        )


def _unknown_keys(
    request_custom_fields: Sequence[CustomFieldValue],
    configuration: Sequence[CustomFieldConfiguration],
) -> List[str]:
    configured_keys = {custom_field.key for custom_field in configuration}
    return [
        custom_field.key for custom_field in request_custom_fields
        if custom_field.key not in configured_keys
    ]


def validate_custom_field_keys_partial(
    request_custom_fields: RequestCustomFields,
    configuration: ConfiguredCustomFields,
) -> None:
    """Throw if the request references keys that are not configured.

    Configured keys missing from the request are tolerated.

    Raises:
        CustomFieldsConfigurationMissingError: If the request has fields but nothing is configured
        UnknownCustomFieldKeyError: If any request key is not configured
    """
    if request_custom_fields is None or not request_custom_fields:
        return

    configuration = _require_configuration(configuration)

    unknown = _unknown_keys(request_custom_fields, configuration)
    if unknown:
        logger.warning(f"Unknown custom field keys in request: {unknown}")
        raise UnknownCustomFieldKeyError(
            f"Invalid custom field keys: {format_keys(unknown)}",
            context={"keys": unknown},
        )


def validate_custom_field_keys_strict(
    request_custom_fields: RequestCustomFields,
    configuration: ConfiguredCustomFields,
) -> None:
    """Throw if request keys and configured keys differ in either direction.

    Unknown keys are reported before missing ones.

    Raises:
        CustomFieldsConfigurationMissingError: If the request has fields but nothing is configured
        UnknownCustomFieldKeyError: If any request key is not configured
        MissingCustomFieldKeyError: If any configured key is absent from the request
    """
    if request_custom_fields is None:
        return

    if not request_custom_fields and not configuration:
        return

    validate_custom_field_keys_partial(request_custom_fields, configuration)

    request_keys = {custom_field.key for custom_field in request_custom_fields}
    missing = [
        custom_field.key for custom_field in configuration or []
        if custom_field.key not in request_keys
    ]
    if missing:
        logger.warning(f"Configured custom field keys missing from request: {missing}")
        raise MissingCustomFieldKeyError(
            f"Missing custom field keys: {format_keys(missing)}",
            context={"keys": missing},
        )


def validate_custom_field_types_in_request(
    request_custom_fields: RequestCustomFields,
    configuration: ConfiguredCustomFields,
) -> None:
    """Throw if a request field declares a type other than the configured one.

    Fields are matched by key. Fields without a declared type, and keys that
    are not configured, are not type mismatches.

    Raises:
        CustomFieldsConfigurationMissingError: If the request has fields but nothing is configured
        CustomFieldTypeMismatchError: Listing every mismatching key
    """
    if not request_custom_fields:
        return

    configured_types = {
        custom_field.key: custom_field.type
        for custom_field in _require_configuration(configuration)
    }

    mismatched = [
        custom_field.key for custom_field in request_custom_fields
        if custom_field.type is not None
        and custom_field.key in configured_types
        and configured_types[custom_field.key] != custom_field.type
    ]

    if mismatched:
        logger.warning(f"Custom fields with wrong type in request: {mismatched}")
        raise CustomFieldTypeMismatchError(
            f"The following custom fields have the wrong type in the request: "
            f"{format_keys(mismatched)}",
            context={"keys": mismatched},
        )


def validate_custom_field_values(
    request_custom_fields: RequestCustomFields,
    configuration: ConfiguredCustomFields,
) -> None:
    """Throw if a request value does not fit the configured type of its key.

    Values are checked against the configured type whether or not the request
    declares one. Keys that are not configured are skipped.

    Raises:
        CustomFieldsConfigurationMissingError: If the request has fields but nothing is configured
        InvalidCustomFieldValueError: Listing every key with an invalid value
    """
    if not request_custom_fields:
        return

    configured_types = {
        custom_field.key: custom_field.type
        for custom_field in _require_configuration(configuration)
    }

    errors: Dict[str, str] = {}
    for custom_field in request_custom_fields:
        configured_type = configured_types.get(custom_field.key)
        if configured_type is None:
            continue
        try:
            get_custom_field_type(configured_type).validate_value(custom_field.field.value)
        except ValueError as e:
            errors[custom_field.key] = str(e)

    if errors:
        keys = list(errors)
        logger.warning(f"Invalid custom field values in request: {errors}")
        raise InvalidCustomFieldValueError(
            f"Invalid custom field values in request for the following keys: {format_keys(keys)}",
            context={"keys": keys, "errors": errors},
        )


def validate_required_custom_fields(
    request_custom_fields: RequestCustomFields,
    configuration: ConfiguredCustomFields,
) -> None:
    """Throw if a required field is absent from the request or explicitly null.

    Missing fields are reported by label.

    Raises:
        CustomFieldsConfigurationMissingError: If the request has fields but no configuration exists
        MissingRequiredCustomFieldsError: Listing every missing required field
    """
    if configuration is None:
        if request_custom_fields:
            logger.warning("Custom fields supplied but no custom fields are configured")
            raise CustomFieldsConfigurationMissingError()
        return

    required = [custom_field for custom_field in configuration if custom_field.required]
    if not required:
        return

    request_by_key = {custom_field.key: custom_field for custom_field in request_custom_fields or []}

    missing = [
        custom_field for custom_field in required
        if custom_field.key not in request_by_key or request_by_key[custom_field.key].is_null
    ]

    if missing:
        labels = [custom_field.label for custom_field in missing]
        keys = [custom_field.key for custom_field in missing]
        logger.warning(f"Missing required custom fields: {keys}")
        raise MissingRequiredCustomFieldsError(
            "Missing required custom fields: " + ", ".join(f'"{label}"' for label in labels),
            context={"keys": keys, "labels": labels},
        )


def validate_custom_fields_count(
    request_custom_fields: RequestCustomFields,
    max_custom_fields: int,
) -> None:
    """Throw if the request carries more values than a case may hold."""
    if request_custom_fields and len(request_custom_fields) > max_custom_fields:
        logger.warning(
            f"Request carries {len(request_custom_fields)} custom fields, "
            f"maximum is {max_custom_fields}"
        )
        raise TooManyCustomFieldsError(
            f"The length of the field customFields is too long. "
            f"Array must be of length <= {max_custom_fields}.",
            context={"count": len(request_custom_fields), "max": max_custom_fields},
        )


def validate_custom_fields(
    request_custom_fields: RequestCustomFields,
    configuration: ConfiguredCustomFields,
    strict: bool = False,
) -> None:
    """Run every case custom field check in order.

    Order: duplicates, keys (partial or strict), required fields, types, values. The
    first failing check raises; later checks do not run.

    Args:
        request_custom_fields: Custom fields of the request, None when not supplied
        configuration: Configured custom fields of the owner
        strict: Require every configured key to be present (full replacement)
    """
    validate_duplicated_custom_field_keys_in_request(request_custom_fields)
    if strict:
        validate_custom_field_keys_strict(request_custom_fields, configuration)
    else:
        validate_custom_field_keys_partial(request_custom_fields, configuration)
    validate_required_custom_fields(request_custom_fields, configuration)
    validate_custom_field_types_in_request(request_custom_fields, configuration)
    validate_custom_field_values(request_custom_fields, configuration)


def fill_missing_custom_fields(
    request_custom_fields: RequestCustomFields,
    configuration: ConfiguredCustomFields,
) -> List[CustomFieldValue]:
    """Complete a validated request with every configured key it omits.

    Omitted fields take the configured default value, or None when the field
    has no default. Request order is kept; filled fields follow in
    configuration order.

    Returns:
        New list of custom field values covering every configured key
    """
    result = list(request_custom_fields or [])
    present = {custom_field.key for custom_field in result}

    for configured in configuration or []:
        if configured.key in present:
            continue
        default = configured.default_value if configured.has_default_value else None
        result.append(
            CustomFieldValue(
                key=configured.key,
                type=configured.type,
                field=CustomFieldValueField(value=None if default is None else [default]),
            )
        )

    return result
