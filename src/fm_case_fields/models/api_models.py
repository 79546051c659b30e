"""API request/response models for case and configuration endpoints.

These models carry custom field data into the validators. They check shape
only (types, lengths, value cardinality); whether the custom fields agree with
the owner's configuration is decided by :mod:`fm_case_fields.validation`.
"""

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field, StrictBool, StrictStr

from fm_case_fields.models.case import Case, CaseSeverity, CaseStatus
from fm_case_fields.models.custom_field import CustomFieldConfiguration, CustomFieldValue


# ============================================================
# Case Creation and Updates
# ============================================================

class CasePostRequest(BaseModel):
    """Request to create a new case."""

    owner: str = Field(description="Owner the case is created for")
    title: str = Field(min_length=1, max_length=160)
    description: str = Field(default="", max_length=30000)
    severity: CaseSeverity = Field(default=CaseSeverity.LOW)
    tags: List[str] = Field(default_factory=list)

    custom_fields: Optional[List[CustomFieldValue]] = Field(
        default=None,
        alias="customFields",
        description="Custom field values; omitted keys are filled from the configuration"
    )

    class Config:
        populate_by_name = True


class CasePatchRequest(BaseModel):
    """Request to update an existing case.

    When ``custom_fields`` is supplied it replaces the case's values and is
    validated with partial key semantics (omitted keys stay unset).
    """

    version: str = Field(description="Version of the case being updated")
    title: Optional[str] = Field(default=None, min_length=1, max_length=160)
    description: Optional[str] = Field(default=None, max_length=30000)
    status: Optional[CaseStatus] = None
    severity: Optional[CaseSeverity] = None
    tags: Optional[List[str]] = None

    custom_fields: Optional[List[CustomFieldValue]] = Field(
        default=None,
        alias="customFields"
    )

    class Config:
        populate_by_name = True


class CaseCustomFieldsReplaceRequest(BaseModel):
    """Full replacement of a case's custom field values.

    Every configured key must be present; validated with strict key semantics.
    """

    version: str = Field(description="Version of the case being updated")
    custom_fields: List[CustomFieldValue] = Field(alias="customFields")

    class Config:
        populate_by_name = True


# ============================================================
# Configuration Updates
# ============================================================

class ConfigurationPatchRequest(BaseModel):
    """Proposed replacement of an owner's custom field schema."""

    version: str = Field(description="Version of the configuration being replaced")

    custom_fields: Optional[List[CustomFieldConfiguration]] = Field(
        default=None,
        alias="customFields",
        description="New schema; None leaves the custom fields untouched"
    )

    class Config:
        populate_by_name = True


# ============================================================
# Search
# ============================================================

CustomFieldFilterValue = Optional[Union[StrictStr, StrictBool]]


class CasesSearchRequest(BaseModel):
    """Case search with optional custom field filters.

    ``custom_fields`` maps a configured key to the values to match; ``None``
    in the list matches cases with no value for the key.
    """

    owner: Optional[str] = None
    search: Optional[str] = None
    status: Optional[CaseStatus] = None
    severity: Optional[CaseSeverity] = None
    tags: List[str] = Field(default_factory=list)

    custom_fields: Dict[str, List[CustomFieldFilterValue]] = Field(
        default_factory=dict,
        alias="customFields"
    )

    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=20, ge=1, le=100)

    class Config:
        populate_by_name = True


class CasesSearchResponse(BaseModel):
    cases: List[Case] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    per_page: int = 20
