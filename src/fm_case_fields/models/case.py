"""Case model.

Only the custom field values of a case are validated by this package; the
remaining attributes are carried through so that clients can round-trip a
case from the case store.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from fm_case_fields.models.custom_field import CustomFieldValue


class CaseStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in-progress"
    CLOSED = "closed"


class CaseSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Case(BaseModel):
    """Case as returned by the case store."""

    id: str = Field(description="Case identifier")
    version: str = Field(default="", description="Optimistic concurrency token")
    owner: str = Field(description="Tenant/solution namespace of the case")

    title: str = Field(max_length=160)
    description: str = Field(default="")
    status: CaseStatus = Field(default=CaseStatus.OPEN)
    severity: CaseSeverity = Field(default=CaseSeverity.LOW)
    tags: List[str] = Field(default_factory=list)

    custom_fields: List[CustomFieldValue] = Field(
        default_factory=list,
        alias="customFields",
        description="Custom field values; may hold orphaned keys no longer configured"
    )

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        populate_by_name = True

    def get_custom_field(self, key: str) -> Optional[CustomFieldValue]:
        for custom_field in self.custom_fields:
            if custom_field.key == key:
                return custom_field
        return None
