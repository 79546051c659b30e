import pytest

from fm_case_fields.exceptions import (
    CustomFieldsConfigurationMissingError,
    CustomFieldTypeMismatchError,
    DuplicateCustomFieldKeyError,
    InvalidCustomFieldValueError,
    MissingCustomFieldKeyError,
    MissingRequiredCustomFieldsError,
    TooManyCustomFieldsError,
    UnknownCustomFieldKeyError,
)
from fm_case_fields.models import CustomFieldConfiguration, CustomFieldType, CustomFieldValue
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

TEXT = CustomFieldType.TEXT
TOGGLE = CustomFieldType.TOGGLE


def _value(key, value=None, type=None):
    return CustomFieldValue.of(key, value, type)


def _config(key, type, required=False, label=None, **kwargs):
    return CustomFieldConfiguration(
        key=key, label=label or f"{key} label", type=type, required=required, **kwargs
    )


class TestDuplicatedKeys:
    def test_lists_each_duplicated_key_once_in_first_seen_order(self) -> None:
        request = [
            _value("triplicated_key"),
            _value("triplicated_key"),
            _value("triplicated_key"),
            _value("duplicated_key"),
            _value("duplicated_key"),
        ]
        with pytest.raises(DuplicateCustomFieldKeyError) as exc_info:
            validate_duplicated_custom_field_keys_in_request(request)

        assert str(exc_info.value) == (
            "Invalid duplicated custom field keys in request: triplicated_key,duplicated_key"
        )
        assert exc_info.value.keys == ["triplicated_key", "duplicated_key"]

    def test_order_follows_first_repeat(self) -> None:
        request = [_value("a"), _value("b"), _value("b"), _value("a")]
        with pytest.raises(DuplicateCustomFieldKeyError) as exc_info:
            validate_duplicated_custom_field_keys_in_request(request)
        assert exc_info.value.keys == ["b", "a"]

    def test_unique_keys(self) -> None:
        validate_duplicated_custom_field_keys_in_request([_value("1"), _value("2")])

    def test_no_request_fields(self) -> None:
        validate_duplicated_custom_field_keys_in_request(None)
        validate_duplicated_custom_field_keys_in_request([])


class TestKeysPartial:
    def test_all_keys_configured(self, configured_fields) -> None:
        validate_custom_field_keys_partial([_value("escalated", True, TOGGLE)], configured_fields)

    def test_missing_keys_tolerated(self, configured_fields) -> None:
        validate_custom_field_keys_partial([], configured_fields)
        validate_custom_field_keys_partial([_value("region", "emea")], configured_fields)

    def test_unknown_keys_listed(self, configured_fields) -> None:
        request = [_value("invalid_key"), _value("summary", "x"), _value("other_key")]
        with pytest.raises(UnknownCustomFieldKeyError) as exc_info:
            validate_custom_field_keys_partial(request, configured_fields)
        assert str(exc_info.value) == "Invalid custom field keys: invalid_key,other_key"

    def test_no_configuration_no_request(self) -> None:
        validate_custom_field_keys_partial(None, None)

    @pytest.mark.parametrize("configuration", [None, []])
    def test_configuration_missing(self, configuration) -> None:
        with pytest.raises(CustomFieldsConfigurationMissingError, match="No custom fields configured."):
            validate_custom_field_keys_partial([_value("first_key")], configuration)


class TestKeysStrict:
    def test_every_key_present(self, configured_fields) -> None:
        request = [_value("summary", "x"), _value("escalated"), _value("region")]
        validate_custom_field_keys_strict(request, configured_fields)

    def test_missing_keys_rejected(self, configured_fields) -> None:
        with pytest.raises(MissingCustomFieldKeyError) as exc_info:
            validate_custom_field_keys_strict([_value("summary", "x")], configured_fields)
        assert str(exc_info.value) == "Missing custom field keys: escalated,region"

    def test_empty_request_against_configuration(self, configured_fields) -> None:
        with pytest.raises(MissingCustomFieldKeyError):
            validate_custom_field_keys_strict([], configured_fields)

    def test_unknown_keys_reported_first(self, configured_fields) -> None:
        with pytest.raises(UnknownCustomFieldKeyError):
            validate_custom_field_keys_strict([_value("nope")], configured_fields)

    def test_nothing_to_compare(self) -> None:
        validate_custom_field_keys_strict(None, None)
        validate_custom_field_keys_strict([], None)


class TestTypes:
    def test_matching_types(self, configured_fields) -> None:
        request = [_value("summary", "x", TEXT), _value("escalated", None, TOGGLE)]
        validate_custom_field_types_in_request(request, configured_fields)

    def test_single_mismatch(self) -> None:
        with pytest.raises(CustomFieldTypeMismatchError) as exc_info:
            validate_custom_field_types_in_request(
                [_value("x", True, TOGGLE)], [_config("x", TEXT)]
            )
        assert str(exc_info.value) == (
            "The following custom fields have the wrong type in the request: x"
        )

    def test_multiple_mismatches_matched_by_key(self) -> None:
        request = [
            _value("third_key", "abc", TEXT),
            _value("first_key", None, TOGGLE),
            _value("second_key", True, TOGGLE),
        ]
        configuration = [
            _config("first_key", TEXT),
            _config("second_key", TEXT),
            _config("third_key", TOGGLE),
        ]
        with pytest.raises(CustomFieldTypeMismatchError) as exc_info:
            validate_custom_field_types_in_request(request, configuration)
        assert exc_info.value.keys == ["third_key", "first_key", "second_key"]

    def test_undeclared_type_is_not_a_mismatch(self, configured_fields) -> None:
        validate_custom_field_types_in_request([_value("escalated", True)], configured_fields)

    def test_no_request_fields(self) -> None:
        validate_custom_field_types_in_request(None, None)
        validate_custom_field_types_in_request([], None)

    @pytest.mark.parametrize("configuration", [None, []])
    def test_configuration_missing(self, configuration) -> None:
        with pytest.raises(CustomFieldsConfigurationMissingError):
            validate_custom_field_types_in_request([_value("first_key", None, TOGGLE)], configuration)


class TestValues:
    def test_untyped_value_checked_against_configured_type(self, configured_fields) -> None:
        with pytest.raises(InvalidCustomFieldValueError) as exc_info:
            validate_custom_field_values([_value("escalated", "yes")], configured_fields)
        assert str(exc_info.value) == (
            "Invalid custom field values in request for the following keys: escalated"
        )
        assert exc_info.value.keys == ["escalated"]

    def test_untyped_text_value_too_long(self, configured_fields) -> None:
        with pytest.raises(InvalidCustomFieldValueError) as exc_info:
            validate_custom_field_values([_value("summary", "x" * 500)], configured_fields)
        assert "The maximum length is 160." in exc_info.value.context["errors"]["summary"]

    def test_every_invalid_key_listed(self, configured_fields) -> None:
        request = [_value("summary", True), _value("escalated", "no"), _value("region", "emea")]
        with pytest.raises(InvalidCustomFieldValueError) as exc_info:
            validate_custom_field_values(request, configured_fields)
        assert exc_info.value.keys == ["summary", "escalated"]

    def test_valid_untyped_values(self, configured_fields) -> None:
        request = [_value("summary", "x" * 160), _value("escalated", False), _value("region", None)]
        validate_custom_field_values(request, configured_fields)

    def test_unknown_keys_skipped(self, configured_fields) -> None:
        validate_custom_field_values([_value("nope", True)], configured_fields)

    @pytest.mark.parametrize("configuration", [None, []])
    def test_configuration_missing(self, configuration) -> None:
        with pytest.raises(CustomFieldsConfigurationMissingError):
            validate_custom_field_values([_value("escalated", True)], configuration)


class TestRequired:
    def test_absent_required_field_listed_by_label(self) -> None:
        configuration = [
            _config("a", TEXT, required=True, label="a"),
            _config("b", TOGGLE, required=False),
        ]
        with pytest.raises(MissingRequiredCustomFieldsError) as exc_info:
            validate_required_custom_fields([_value("b", True, TOGGLE)], configuration)

        assert str(exc_info.value) == 'Missing required custom fields: "a"'
        assert exc_info.value.context["labels"] == ["a"]
        assert exc_info.value.keys == ["a"]

    def test_explicit_null_counts_as_missing(self) -> None:
        configuration = [
            _config("first_key", TEXT, required=True, label="First"),
            _config("second_key", TOGGLE, required=True, label="Second"),
        ]
        request = [_value("first_key", "value", TEXT), _value("second_key", None, TOGGLE)]
        with pytest.raises(MissingRequiredCustomFieldsError) as exc_info:
            validate_required_custom_fields(request, configuration)
        assert str(exc_info.value) == 'Missing required custom fields: "Second"'

    def test_all_required_present(self) -> None:
        configuration = [
            _config("first_key", TEXT, required=True),
            _config("second_key", TOGGLE, required=True),
        ]
        request = [_value("first_key", "value", TEXT), _value("second_key", False, TOGGLE)]
        validate_required_custom_fields(request, configuration)

    def test_only_optional_fields_configured(self) -> None:
        validate_required_custom_fields(None, [_config("first_key", TEXT), _config("second_key", TOGGLE)])

    def test_no_configuration_no_request(self) -> None:
        validate_required_custom_fields(None, None)

    def test_configuration_missing(self) -> None:
        with pytest.raises(CustomFieldsConfigurationMissingError):
            validate_required_custom_fields([_value("first_key", None, TOGGLE)], None)


class TestComposite:
    def test_valid_request(self) -> None:
        configuration = [_config("x", TEXT), _config("y", TOGGLE)]
        validate_custom_fields([_value("x", "hi", TEXT), _value("y", True, TOGGLE)], configuration)

    def test_request_omitted(self, configured_fields) -> None:
        # required check still applies when the case carries no values
        with pytest.raises(MissingRequiredCustomFieldsError):
            validate_custom_fields(None, configured_fields)

    def test_duplicates_checked_before_keys(self, configured_fields) -> None:
        request = [_value("unknown"), _value("unknown")]
        with pytest.raises(DuplicateCustomFieldKeyError):
            validate_custom_fields(request, configured_fields)

    def test_keys_checked_before_required(self, configured_fields) -> None:
        with pytest.raises(UnknownCustomFieldKeyError):
            validate_custom_fields([_value("unknown")], configured_fields)

    def test_required_checked_before_types(self, configured_fields) -> None:
        with pytest.raises(MissingRequiredCustomFieldsError):
            validate_custom_fields([_value("escalated", "emea", CustomFieldType.LIST)], configured_fields)

    def test_type_mismatch_reported_last(self, configured_fields) -> None:
        request = [_value("summary", "x", TEXT), _value("escalated", "emea", CustomFieldType.LIST)]
        with pytest.raises(CustomFieldTypeMismatchError) as exc_info:
            validate_custom_fields(request, configured_fields)
        assert exc_info.value.keys == ["escalated"]

    def test_untyped_value_rejected_after_type_check(self, configured_fields) -> None:
        request = [_value("summary", "x"), _value("escalated", "yes")]
        with pytest.raises(InvalidCustomFieldValueError):
            validate_custom_fields(request, configured_fields)

    def test_strict_mode_requires_every_key(self, configured_fields) -> None:
        with pytest.raises(MissingCustomFieldKeyError):
            validate_custom_fields([_value("summary", "x", TEXT)], configured_fields, strict=True)


def test_count_limit() -> None:
    request = [_value(f"key_{i}") for i in range(3)]
    validate_custom_fields_count(request, 3)
    with pytest.raises(TooManyCustomFieldsError, match="Array must be of length <= 2"):
        validate_custom_fields_count(request, 2)


class TestFillMissing:
    def test_fills_with_defaults_and_none(self, configured_fields) -> None:
        filled = fill_missing_custom_fields([_value("region", "emea")], configured_fields)

        assert [custom_field.key for custom_field in filled] == ["region", "summary", "escalated"]
        assert filled[1].value == "n/a"
        assert filled[1].type == TEXT
        assert filled[2].is_null

    def test_falsy_default_is_kept(self) -> None:
        configuration = [_config("flag", TOGGLE, required=True, default_value=False)]
        filled = fill_missing_custom_fields(None, configuration)
        assert filled[0].field.value == [False]

    def test_does_not_touch_request(self, configured_fields) -> None:
        request = [_value("summary", "given")]
        fill_missing_custom_fields(request, configured_fields)
        assert len(request) == 1

    def test_no_configuration(self) -> None:
        assert fill_missing_custom_fields(None, None) == []
