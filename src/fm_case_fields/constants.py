"""Hard limits of the custom field data contract.

These values are part of the persisted schema and are not configurable at
runtime. Tunable caps live in :mod:`fm_case_fields.config`.
"""

MAX_CUSTOM_FIELD_KEY_LENGTH = 36
MAX_CUSTOM_FIELD_LABEL_LENGTH = 50
MAX_CUSTOM_FIELD_TEXT_VALUE_LENGTH = 160

CUSTOM_FIELD_KEY_PATTERN = r"^[a-z0-9_-]+$"

DEFAULT_MAX_CUSTOM_FIELDS_PER_CASE = 10
DEFAULT_MAX_CUSTOM_FIELD_FILTERS = 10

# Nested document path of custom field values in the case index
CUSTOM_FIELDS_NESTED_PATH = "customFields"
