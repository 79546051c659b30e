"""Configuration reconciler.

Validates a proposed custom field schema against the schema currently stored
for the owner, independently of any case:

- keys are unique and the number of fields is capped
- an existing key keeps its type (removing a key is allowed)
- required fields carry a default value, optional fields do not
- default values match their field type

:func:`reconcile_configuration` runs every check and reports how the schema
changes.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from fm_case_fields.exceptions import (
    CustomFieldTypeChangeError,
    DuplicateCustomFieldKeyError,
    InvalidDefaultValueError,
    OptionalCustomFieldDefaultError,
    RequiredCustomFieldDefaultError,
    TooManyCustomFieldsError,
    format_keys,
)
from fm_case_fields.models.custom_field import CustomFieldConfiguration
from fm_case_fields.registry import get_custom_field_type

logger = logging.getLogger(__name__)

ProposedCustomFields = Optional[Sequence[CustomFieldConfiguration]]


@dataclass
class CustomFieldChanges:
    """Classification of a schema update, by key."""

    added: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    retyped: List[str] = field(default_factory=list)
    unchanged: List[str] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.removed or self.retyped)


def classify_custom_field_changes(
    proposed_custom_fields: ProposedCustomFields,
    original_custom_fields: Optional[Sequence[CustomFieldConfiguration]],
) -> CustomFieldChanges:
    """Compare two schemas key by key.

    A key counts as unchanged when its type is unchanged, even if label,
    required flag or default value differ.
    """
    proposed = {custom_field.key: custom_field for custom_field in proposed_custom_fields or []}
    original = {custom_field.key: custom_field for custom_field in original_custom_fields or []}

    changes = CustomFieldChanges()
    for key, custom_field in proposed.items():
        if key not in original:
            changes.added.append(key)
        elif original[key].type != custom_field.type:
            changes.retyped.append(key)
        else:
            changes.unchanged.append(key)

    changes.removed = [key for key in original if key not in proposed]
    return changes


def validate_duplicated_custom_field_keys_in_configuration(
    proposed_custom_fields: ProposedCustomFields,
) -> None:
    """Throw if the proposed schema defines a key more than once."""
    seen = set()
    duplicated: Dict[str, None] = {}
    for custom_field in proposed_custom_fields or []:
        if custom_field.key in seen:
            duplicated[custom_field.key] = None
        seen.add(custom_field.key)

    if duplicated:
        keys = list(duplicated)
        logger.warning(f"Duplicated custom field keys in configuration request: {keys}")
        raise DuplicateCustomFieldKeyError(
            f"Invalid duplicated custom field keys in request: {format_keys(keys)}",
            context={"keys": keys},
        )


def validate_custom_fields_count_in_configuration(
    proposed_custom_fields: ProposedCustomFields,
    max_custom_fields: int,
) -> None:
    if proposed_custom_fields and len(proposed_custom_fields) > max_custom_fields:
        logger.warning(
            f"Configuration request defines {len(proposed_custom_fields)} custom fields, "
            f"maximum is {max_custom_fields}"
        )
        raise TooManyCustomFieldsError(
            f"The length of the field customFields is too long. "
            f"Array must be of length <= {max_custom_fields}.",
            context={"count": len(proposed_custom_fields), "max": max_custom_fields},
        )


def validate_custom_field_types_in_request(
    proposed_custom_fields: ProposedCustomFields,
    original_custom_fields: Optional[Sequence[CustomFieldConfiguration]],
) -> None:
    """Throw if the proposed schema changes the type of an existing key.

    Keys are matched by key, not position. Keys removed by the proposal and
    keys added by it are not type changes.

    Raises:
        CustomFieldTypeChangeError: Listing every retyped key
    """
    if not proposed_custom_fields or not original_custom_fields:
        return

    retyped = classify_custom_field_changes(proposed_custom_fields, original_custom_fields).retyped

    if retyped:
        logger.warning(f"Configuration request changes custom field types: {retyped}")
        raise CustomFieldTypeChangeError(
            f"Invalid custom field types in request for the following keys: {format_keys(retyped)}",
            context={"keys": retyped},
        )


def validate_required_custom_fields_in_request(
    proposed_custom_fields: ProposedCustomFields,
) -> None:
    """Throw if a required field has no usable default value.

    Falsy defaults (False, 0, "") are usable. An absent default and an
    explicit None are not.

    Raises:
        RequiredCustomFieldDefaultError: Listing every required key without a default
    """
    invalid = [
        custom_field.key for custom_field in proposed_custom_fields or []
        if custom_field.required
        and (not custom_field.has_default_value or custom_field.default_value is None)
    ]

    if invalid:
        logger.warning(f"Required custom fields without default value: {invalid}")
        raise RequiredCustomFieldDefaultError(
            f"The following required custom fields are missing the default value: "
            f"{format_keys(invalid)}",
            context={"keys": invalid},
        )


def validate_optional_custom_fields_in_request(
    proposed_custom_fields: ProposedCustomFields,
) -> None:
    """Throw if an optional field defines a default value.

    Presence of ``default_value`` is what counts: None, 0 and "" all fail.

    Raises:
        OptionalCustomFieldDefaultError: Listing every offending key
    """
    invalid = [
        custom_field.key for custom_field in proposed_custom_fields or []
        if not custom_field.required and custom_field.has_default_value
    ]

    if invalid:
        logger.warning(f"Optional custom fields defining a default value: {invalid}")
        raise OptionalCustomFieldDefaultError(
            f"The following optional custom fields try to define a default value: "
            f"{format_keys(invalid)}",
            context={"keys": invalid},
        )


def validate_default_value_types(proposed_custom_fields: ProposedCustomFields) -> None:
    """Throw if a default value does not match its field type."""
    errors: Dict[str, str] = {}
    for custom_field in proposed_custom_fields or []:
        if not custom_field.has_default_value:
            continue
        try:
            get_custom_field_type(custom_field.type).validate_default_value(custom_field.default_value)
        except ValueError as e:
            errors[custom_field.key] = str(e)

    if errors:
        keys = list(errors)
        logger.warning(f"Custom fields with invalid default values: {errors}")
        raise InvalidDefaultValueError(
            f"Invalid default value for the following custom fields: {format_keys(keys)}",
            context={"keys": keys, "errors": errors},
        )


def reconcile_configuration(
    proposed_custom_fields: ProposedCustomFields,
    original_custom_fields: Optional[Sequence[CustomFieldConfiguration]],
    max_custom_fields: int,
) -> CustomFieldChanges:
    """Validate a proposed schema against the stored one.

    Order: duplicate keys, field count, type changes, required defaults,
    optional defaults, default value shapes. The first failing check raises.

    Args:
        proposed_custom_fields: Schema of the update request; None leaves the schema untouched
        original_custom_fields: Schema currently stored for the owner
        max_custom_fields: Maximum number of configured fields

    Returns:
        Changes the proposal applies to the stored schema
    """
    if proposed_custom_fields is None:
        return CustomFieldChanges(
            unchanged=[custom_field.key for custom_field in original_custom_fields or []]
        )

    validate_duplicated_custom_field_keys_in_configuration(proposed_custom_fields)
    validate_custom_fields_count_in_configuration(proposed_custom_fields, max_custom_fields)
    validate_custom_field_types_in_request(proposed_custom_fields, original_custom_fields)
    validate_required_custom_fields_in_request(proposed_custom_fields)
    validate_optional_custom_fields_in_request(proposed_custom_fields)
    validate_default_value_types(proposed_custom_fields)

    changes = classify_custom_field_changes(proposed_custom_fields, original_custom_fields)
    logger.info(
        f"Configuration reconciled: added={changes.added}, removed={changes.removed}, "
        f"unchanged={len(changes.unchanged)}"
    )
    return changes
