"""
Custom field type registry.

Maps every :class:`CustomFieldType` to a descriptor exposing the behavior the
validators need: value shape, filterability, filter value shape, default value
shape, and the backing-store filter clause. Call sites only ever go through
:func:`get_custom_field_type`; adding a type means adding one entry to
``CUSTOM_FIELD_TYPE_SCHEMA``.

The registry is built once at import time and is read-only. Import fails if a
``CustomFieldType`` member has no schema entry.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Type, Union

from fm_case_fields.constants import CUSTOM_FIELDS_NESTED_PATH, MAX_CUSTOM_FIELD_TEXT_VALUE_LENGTH
from fm_case_fields.exceptions import UnknownCustomFieldTypeError
from fm_case_fields.models.custom_field import CustomFieldType

logger = logging.getLogger(__name__)


# Data-driven type schema - single source of truth
CUSTOM_FIELD_TYPE_SCHEMA: Dict[CustomFieldType, Dict[str, Any]] = {
    CustomFieldType.TEXT: {
        "element_type": str,
        "value_field": "string",
        "is_filterable": False,
        "max_value_length": MAX_CUSTOM_FIELD_TEXT_VALUE_LENGTH,
        "allow_empty_value": False,
    },
    CustomFieldType.TOGGLE: {
        "element_type": bool,
        "value_field": "boolean",
        "is_filterable": True,
    },
    CustomFieldType.LIST: {
        "element_type": str,
        "value_field": "string",
        "is_filterable": True,
        "allow_empty_value": False,
    },
}

_ELEMENT_TYPE_NAMES = {str: "string", bool: "boolean"}


def _is_element(value: Any, element_type: Type) -> bool:
    # bool is an int subclass, and ints are never valid elements
    if element_type is bool:
        return isinstance(value, bool)
    return isinstance(value, element_type) and not isinstance(value, bool)


@dataclass(frozen=True)
class CustomFieldTypeDescriptor:
    """Validation and query behavior of one custom field type."""

    type: CustomFieldType
    element_type: Type
    value_field: str
    is_filterable: bool
    max_value_length: Optional[int] = None
    allow_empty_value: bool = True

    @property
    def element_type_name(self) -> str:
        return _ELEMENT_TYPE_NAMES[self.element_type]

    def _check_element(self, element: Any) -> None:
        if not _is_element(element, self.element_type):
            raise ValueError(
                f"Invalid value {element!r} supplied for custom field of type "
                f"{self.type.value}: expected a {self.element_type_name}"
            )
        if self.element_type is str:
            if not self.allow_empty_value and not element.strip():
                raise ValueError(
                    f"Value of custom field of type {self.type.value} must not be empty"
                )
            if self.max_value_length is not None and len(element) > self.max_value_length:
                raise ValueError(
                    f"The length of the value is too long. "
                    f"The maximum length is {self.max_value_length}."
                )

    def validate_value(self, values: Optional[Sequence[Any]]) -> None:
        """Validate the ``field.value`` list of a case custom field.

        Raises:
            ValueError: If an element does not match the type
        """
        if values is None:
            return
        for element in values:
            self._check_element(element)

    def validate_filtering_values(self, values: Sequence[Any]) -> None:
        """Validate the values of a search filter on this type.

        ``None`` is always accepted and means "no value". An empty list is rejected.
        Use ``[None]`` to match cases where the field has no value.

        Raises:
            ValueError: If the type is not filterable or a value has the wrong shape
        """
        if not self.is_filterable:
            raise ValueError(
                f"Filtering by custom field of type {self.type.value} is not allowed."
            )
        if not values:
            raise ValueError(
                f"At least one filtering value is required for custom field of type {self.type.value}."
            )
        for value in values:
            if value is not None and not _is_element(value, self.element_type):
                raise ValueError(
                    f"Unsupported filtering value for custom field of type {self.type.value}."
                )

    def validate_default_value(self, value: Any) -> None:
        """Validate a configured default value.

        Raises:
            ValueError: If the default does not match the type
        """
        if value is None:
            return
        if not _is_element(value, self.element_type):
            raise ValueError(
                f"Default value of custom field of type {self.type.value} "
                f"must be a {self.element_type_name}, got {value!r}"
            )
        if self.element_type is str and self.max_value_length is not None:
            if len(value) > self.max_value_length:
                raise ValueError(
                    f"Default value is too long. The maximum length is {self.max_value_length}."
                )

    def build_filter_clause(self, key: str, values: Sequence[Any]) -> Dict[str, Any]:
        """Build the nested Elasticsearch clause matching ``key`` with any of ``values``.

        Args:
            key: Custom field key
            values: Filter values, already validated; None matches an unset value

        Returns:
            Nested query clause over the custom fields path
        """
        value_path = f"{CUSTOM_FIELDS_NESTED_PATH}.value.{self.value_field}"
        concrete = [value for value in values if value is not None]

        should: List[Dict[str, Any]] = []
        if concrete:
            should.append({"terms": {value_path: concrete}})
        if len(concrete) != len(values):
            should.append({"bool": {"must_not": [{"exists": {"field": value_path}}]}})

        must: List[Dict[str, Any]] = [{"term": {f"{CUSTOM_FIELDS_NESTED_PATH}.key": key}}]
        if should:
            must.append({"bool": {"should": should, "minimum_should_match": 1}})

        return {
            "nested": {
                "path": CUSTOM_FIELDS_NESTED_PATH,
                "query": {"bool": {"must": must}},
            }
        }


def _build_registry(
    schema: Dict[CustomFieldType, Dict[str, Any]]
) -> Mapping[CustomFieldType, CustomFieldTypeDescriptor]:
    missing = [member.value for member in CustomFieldType if member not in schema]
    if missing:
        raise RuntimeError(f"Custom field types without a registry entry: {missing}")

    return MappingProxyType({
        field_type: CustomFieldTypeDescriptor(type=field_type, **entry)
        for field_type, entry in schema.items()
    })


CUSTOM_FIELD_TYPES: Mapping[CustomFieldType, CustomFieldTypeDescriptor] = _build_registry(
    CUSTOM_FIELD_TYPE_SCHEMA
)


def get_custom_field_type(type_tag: Union[CustomFieldType, str]) -> CustomFieldTypeDescriptor:
    """Look up the descriptor of a custom field type.

    Args:
        type_tag: Enum member or raw type string (e.g. "toggle")

    Returns:
        Descriptor for the type

    Raises:
        UnknownCustomFieldTypeError: If the tag is not a registered type
    """
    try:
        field_type = CustomFieldType(type_tag)
    except ValueError:
        logger.error(f"Unknown custom field type requested: {type_tag!r}")
        raise UnknownCustomFieldTypeError(type_tag) from None
    return CUSTOM_FIELD_TYPES[field_type]


def filterable_custom_field_types() -> Tuple[CustomFieldType, ...]:
    return tuple(
        field_type for field_type, descriptor in CUSTOM_FIELD_TYPES.items()
        if descriptor.is_filterable
    )
