from __future__ import annotations

import pytest

from fm_case_fields.config import Settings, reset_settings
from fm_case_fields.models import CustomFieldConfiguration, CustomFieldType


@pytest.fixture(autouse=True)
def _fresh_settings():
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        case_service_url="http://case-store.test",
        case_service_timeout=5.0,
        case_service_max_retries=3,
        max_custom_fields_per_case=10,
        max_custom_field_filters=2,
    )


@pytest.fixture
def configured_fields() -> list[CustomFieldConfiguration]:
    return [
        CustomFieldConfiguration(
            key="summary", label="Summary", type=CustomFieldType.TEXT,
            required=True, default_value="n/a",
        ),
        CustomFieldConfiguration(
            key="escalated", label="Escalated", type=CustomFieldType.TOGGLE, required=False,
        ),
        CustomFieldConfiguration(
            key="region", label="Region", type=CustomFieldType.LIST, required=False,
        ),
    ]
