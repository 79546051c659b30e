"""Owner configuration model.

One configuration is active per owner. It carries the ordered custom field
schema that governs which custom fields are valid for the owner's cases.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from fm_case_fields.models.custom_field import CustomFieldConfiguration


class Configuration(BaseModel):
    """Persisted configuration of an owner, as read from the configuration store."""

    id: str = Field(description="Configuration identifier")

    version: str = Field(
        default="",
        description="Optimistic concurrency token of the stored document"
    )

    owner: str = Field(description="Tenant/solution namespace the configuration belongs to")

    custom_fields: List[CustomFieldConfiguration] = Field(
        default_factory=list,
        alias="customFields",
        description="Custom field schema, in display order"
    )

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        populate_by_name = True

    @model_validator(mode='after')
    def unique_keys(self):
        """Stored configurations never hold the same key twice"""
        seen = set()
        for custom_field in self.custom_fields:
            if custom_field.key in seen:
                raise ValueError(f"Duplicated custom field key in configuration: {custom_field.key}")
            seen.add(custom_field.key)
        return self

    @property
    def fields_by_key(self) -> Dict[str, CustomFieldConfiguration]:
        return {custom_field.key: custom_field for custom_field in self.custom_fields}

    def get_field(self, key: str) -> Optional[CustomFieldConfiguration]:
        return self.fields_by_key.get(key)

    @property
    def required_fields(self) -> List[CustomFieldConfiguration]:
        return [custom_field for custom_field in self.custom_fields if custom_field.required]
