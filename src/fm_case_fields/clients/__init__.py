"""Async HTTP clients for the case and configuration stores."""

from fm_case_fields.clients.base import BaseServiceClient
from fm_case_fields.clients.case_service_client import CaseServiceClient
from fm_case_fields.clients.configuration_client import ConfigurationServiceClient

__all__ = [
    "BaseServiceClient",
    "CaseServiceClient",
    "ConfigurationServiceClient",
]
