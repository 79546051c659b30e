from fm_case_fields.config import Settings, get_settings


def test_defaults(monkeypatch) -> None:
    for name in (
        "CASE_SERVICE_URL",
        "CASE_SERVICE_TIMEOUT",
        "CASE_SERVICE_MAX_RETRIES",
        "MAX_CUSTOM_FIELDS_PER_CASE",
        "MAX_CUSTOM_FIELD_FILTERS",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()
    assert settings.case_service_url == "http://fm-case-service:8000"
    assert settings.max_custom_fields_per_case == 10
    assert settings.max_custom_field_filters == 10


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("CASE_SERVICE_URL", "http://cases.internal:9000")
    monkeypatch.setenv("MAX_CUSTOM_FIELD_FILTERS", "3")

    settings = get_settings()
    assert settings.case_service_url == "http://cases.internal:9000"
    assert settings.max_custom_field_filters == 3
    assert get_settings() is settings
