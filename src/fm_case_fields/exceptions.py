"""Custom field validation errors.

Every validator in this package raises a subclass of
:class:`CustomFieldValidationError`. They are request-validation failures:
services surface them to the client as HTTP 400 responses carrying the error
message, and never retry them.

Validators aggregate all violations of one class before raising, so the
``context`` of an error lists every offending key, not only the first one.
"""

from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status


class CustomFieldValidationError(ValueError):
    """Base class for custom field request validation failures."""

    error_code = "CUSTOM_FIELD_VALIDATION_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        self.context = context or {}

    @property
    def keys(self) -> List[str]:
        """Offending custom field keys, when the error carries any."""
        return list(self.context.get("keys", []))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.error_code,
            "message": self.message,
            "context": self.context,
        }


class CustomFieldsConfigurationMissingError(CustomFieldValidationError):
    """Custom fields were supplied but the owner has no configuration."""

    error_code = "CUSTOM_FIELDS_CONFIGURATION_MISSING"

    def __init__(self, owner: Optional[str] = None):
        super().__init__("No custom fields configured.", context={"owner": owner})


class DuplicateCustomFieldKeyError(CustomFieldValidationError):
    error_code = "DUPLICATE_CUSTOM_FIELD_KEY"


class UnknownCustomFieldKeyError(CustomFieldValidationError):
    error_code = "UNKNOWN_CUSTOM_FIELD_KEY"


class MissingCustomFieldKeyError(CustomFieldValidationError):
    error_code = "MISSING_CUSTOM_FIELD_KEY"


class CustomFieldTypeMismatchError(CustomFieldValidationError):
    """A case request declares a type that differs from the configured one."""

    error_code = "CUSTOM_FIELD_TYPE_MISMATCH"


class InvalidCustomFieldValueError(CustomFieldValidationError):
    """A case request value does not fit the configured type of its field."""

    error_code = "INVALID_CUSTOM_FIELD_VALUE"


class CustomFieldTypeChangeError(CustomFieldValidationError):
    """A configuration update tries to change the type of an existing field."""

    error_code = "CUSTOM_FIELD_TYPE_CHANGE"


class MissingRequiredCustomFieldsError(CustomFieldValidationError):
    error_code = "MISSING_REQUIRED_CUSTOM_FIELDS"


class TooManyCustomFieldsError(CustomFieldValidationError):
    error_code = "TOO_MANY_CUSTOM_FIELDS"


class TooManyCustomFieldFiltersError(CustomFieldValidationError):
    error_code = "TOO_MANY_CUSTOM_FIELD_FILTERS"


class CustomFieldNotFilterableError(CustomFieldValidationError):
    error_code = "CUSTOM_FIELD_NOT_FILTERABLE"


class InvalidCustomFieldFilterValueError(CustomFieldValidationError):
    error_code = "INVALID_CUSTOM_FIELD_FILTER_VALUE"


class RequiredCustomFieldDefaultError(CustomFieldValidationError):
    """A required field in a configuration update has no usable default."""

    error_code = "REQUIRED_CUSTOM_FIELD_DEFAULT_MISSING"


class OptionalCustomFieldDefaultError(CustomFieldValidationError):
    """An optional field in a configuration update defines a default."""

    error_code = "OPTIONAL_CUSTOM_FIELD_DEFAULT_DEFINED"


class InvalidDefaultValueError(CustomFieldValidationError):
    error_code = "INVALID_CUSTOM_FIELD_DEFAULT_VALUE"


class UnknownCustomFieldTypeError(LookupError):
    """Raised by the type registry for a type tag it does not know.

    This is a configuration error, not a request error: it is not a
    :class:`CustomFieldValidationError` and maps to a server error.
    """

    def __init__(self, type_tag: Any):
        super().__init__(f"Unknown custom field type: {type_tag}")
        self.type_tag = type_tag


def format_keys(keys: List[str]) -> str:
    """Join keys the way error messages list them ("a,b,c")."""
    return ",".join(keys)


def to_http_exception(error: CustomFieldValidationError) -> HTTPException:
    """Convert a validation error into the HTTPException a route should raise.

    Args:
        error: Validation error raised by one of the validators

    Returns:
        HTTPException with status 400 and the validator message as detail
    """
    return HTTPException(status_code=error.status_code, detail=error.message)
