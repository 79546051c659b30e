"""Custom field models.

A custom field is a tenant-defined typed attribute attached to a case. Its
schema entry (:class:`CustomFieldConfiguration`) lives in the owner's
configuration; the value a case carries for it (:class:`CustomFieldValue`)
travels in case requests.

Value shape:
- ``field.value`` is either ``None`` (no value) or a single-element list
- text and list values are strings, toggle values are booleans
"""

from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field, StrictBool, StrictStr, field_validator, model_validator

from fm_case_fields.constants import (
    CUSTOM_FIELD_KEY_PATTERN,
    MAX_CUSTOM_FIELD_KEY_LENGTH,
    MAX_CUSTOM_FIELD_LABEL_LENGTH,
)


class CustomFieldType(str, Enum):
    """Supported custom field types.

    Every member must have a descriptor in :mod:`fm_case_fields.registry`;
    the registry refuses to build otherwise.
    """

    TEXT = "text"
    TOGGLE = "toggle"
    LIST = "list"


CustomFieldElement = Union[StrictStr, StrictBool]


class CustomFieldConfiguration(BaseModel):
    """One entry of an owner's custom field schema.

    ``default_value`` is presence-tracked: whether the key was supplied at all
    is read from ``model_fields_set``, so ``None``, ``False``, ``0`` and ``""``
    all count as "defined". Its shape is checked by the configuration
    reconciler against the field type, not here.
    """

    key: str = Field(
        description="Unique key of the field within a configuration",
        min_length=1,
        max_length=MAX_CUSTOM_FIELD_KEY_LENGTH,
        pattern=CUSTOM_FIELD_KEY_PATTERN,
    )

    label: str = Field(
        description="Human readable label",
        min_length=1,
        max_length=MAX_CUSTOM_FIELD_LABEL_LENGTH,
    )

    type: CustomFieldType = Field(description="Field type tag")

    required: bool = Field(
        default=False,
        description="Whether every case of the owner must carry a value"
    )

    default_value: Optional[Any] = Field(
        default=None,
        description="Value used when a case omits the field (required fields only)"
    )

    @field_validator('label')
    @classmethod
    def label_not_blank(cls, v):
        if not v.strip():
            raise ValueError("label must not be blank")
        return v

    @property
    def has_default_value(self) -> bool:
        """True when ``default_value`` was supplied, whatever its value."""
        return "default_value" in self.model_fields_set

    def to_payload(self) -> dict:
        """Serialize for the store, omitting ``default_value`` unless it was supplied."""
        exclude = set() if self.has_default_value else {"default_value"}
        return self.model_dump(mode='json', exclude=exclude)


class CustomFieldValueField(BaseModel):
    """Value holder of a request-side custom field."""

    value: Optional[List[CustomFieldElement]] = Field(
        default=None,
        description="None, or a single-element list holding the value"
    )

    @field_validator('value')
    @classmethod
    def single_element(cls, v):
        if v is not None and len(v) != 1:
            raise ValueError("custom field value must be null or a single-element list")
        return v


class CustomFieldValue(BaseModel):
    """A custom field value as carried by case requests and cases."""

    key: str = Field(description="Key of the configured field this value belongs to")

    type: Optional[CustomFieldType] = Field(
        default=None,
        description="Declared type; omitted on some request paths"
    )

    field: CustomFieldValueField = Field(default_factory=CustomFieldValueField)

    @model_validator(mode='after')
    def value_matches_type(self):
        """Check the value element against the declared type, when given."""
        if self.type is not None and self.field.value is not None:
            from fm_case_fields.registry import get_custom_field_type

            get_custom_field_type(self.type).validate_value(self.field.value)
        return self

    @property
    def value(self) -> Optional[Union[str, bool]]:
        """The single value element, or None when the field is unset."""
        if self.field.value is None:
            return None
        return self.field.value[0]

    @property
    def is_null(self) -> bool:
        return self.field.value is None

    @classmethod
    def of(
        cls,
        key: str,
        value: Optional[Union[str, bool]],
        type: Optional[CustomFieldType] = None,
    ) -> "CustomFieldValue":
        """Build a value from a bare element (None for no value)."""
        return cls(
            key=key,
            type=type,
            field=CustomFieldValueField(value=None if value is None else [value]),
        )
