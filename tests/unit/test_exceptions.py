from fastapi import HTTPException

from fm_case_fields.exceptions import (
    CustomFieldValidationError,
    CustomFieldsConfigurationMissingError,
    UnknownCustomFieldKeyError,
    format_keys,
    to_http_exception,
)


def test_errors_are_value_errors() -> None:
    assert issubclass(UnknownCustomFieldKeyError, ValueError)
    assert issubclass(UnknownCustomFieldKeyError, CustomFieldValidationError)


def test_to_http_exception() -> None:
    error = UnknownCustomFieldKeyError("Invalid custom field keys: a,b", context={"keys": ["a", "b"]})
    http_error = to_http_exception(error)

    assert isinstance(http_error, HTTPException)
    assert http_error.status_code == 400
    assert http_error.detail == "Invalid custom field keys: a,b"


def test_to_dict() -> None:
    error = CustomFieldsConfigurationMissingError(owner="cases")
    assert error.to_dict() == {
        "error": "CUSTOM_FIELDS_CONFIGURATION_MISSING",
        "message": "No custom fields configured.",
        "context": {"owner": "cases"},
    }


def test_format_keys() -> None:
    assert format_keys(["1", "2"]) == "1,2"
