"""Runtime settings for case custom field validation and the store clients.

Settings are read from environment variables. A ``.env`` file in the working
directory is loaded once, on first access, without overriding variables that
are already set.

Environment Variables:
    CASE_SERVICE_URL: Base URL of the case store (default: http://fm-case-service:8000)
    CASE_SERVICE_TIMEOUT: Request timeout in seconds (default: 30.0)
    CASE_SERVICE_MAX_RETRIES: Attempts for configuration reads (default: 3)
    MAX_CUSTOM_FIELDS_PER_CASE: Cap on configured fields and case values (default: 10)
    MAX_CUSTOM_FIELD_FILTERS: Cap on custom field filters per search (default: 10)
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from fm_case_fields.constants import (
    DEFAULT_MAX_CUSTOM_FIELD_FILTERS,
    DEFAULT_MAX_CUSTOM_FIELDS_PER_CASE,
)

logger = logging.getLogger(__name__)


class Settings(BaseModel):
    """Tunable limits and store connection settings."""

    case_service_url: str = Field(
        default="http://fm-case-service:8000",
        description="Base URL of the case and configuration store"
    )
    case_service_timeout: float = Field(default=30.0, gt=0)
    case_service_max_retries: int = Field(default=3, ge=1)
    max_custom_fields_per_case: int = Field(
        default=DEFAULT_MAX_CUSTOM_FIELDS_PER_CASE,
        ge=1,
        description="Maximum configured custom fields, and custom field values per case"
    )
    max_custom_field_filters: int = Field(
        default=DEFAULT_MAX_CUSTOM_FIELD_FILTERS,
        ge=1,
        description="Maximum custom field keys in one search request"
    )

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, falling back to defaults."""
        env_map = {
            "case_service_url": "CASE_SERVICE_URL",
            "case_service_timeout": "CASE_SERVICE_TIMEOUT",
            "case_service_max_retries": "CASE_SERVICE_MAX_RETRIES",
            "max_custom_fields_per_case": "MAX_CUSTOM_FIELDS_PER_CASE",
            "max_custom_field_filters": "MAX_CUSTOM_FIELD_FILTERS",
        }
        values = {}
        for field_name, env_key in env_map.items():
            env_value = os.getenv(env_key)
            if env_value:
                values[field_name] = env_value
        return cls(**values)


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the process-wide settings instance, loading it on first use."""
    global _settings
    if _settings is None:
        load_dotenv(override=False)
        _settings = Settings.from_env()
        logger.info(
            f"Settings loaded: case_service_url={_settings.case_service_url}, "
            f"max_custom_fields_per_case={_settings.max_custom_fields_per_case}, "
            f"max_custom_field_filters={_settings.max_custom_field_filters}"
        )
    return _settings


def reset_settings() -> None:
    """Drop the cached settings (for testing)."""
    global _settings
    _settings = None
