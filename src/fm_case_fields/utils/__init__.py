"""Utility Functions"""

from fm_case_fields.utils.resilience import (
    create_custom_retry,
)

__all__ = [
    "create_custom_retry",
]
