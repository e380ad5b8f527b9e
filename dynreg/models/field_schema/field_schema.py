from pydantic import Field, StringConstraints, field_validator
from typing import Annotated, List, Literal, Optional
from datetime import datetime

from dynreg.models.base import CamelModel

# ---------- Field Schema Models ----------#

FieldType = Literal["text", "email", "phone", "number", "textarea", "select"]

TenantId = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class FieldOption(CamelModel):
    label: Optional[str] = None
    value: str


class FieldValidation(CamelModel):
    required: bool = False
    min_length: Optional[int] = Field(default=None, ge=0)
    max_length: Optional[int] = Field(default=None, ge=0)
    pattern: Optional[str] = None


class FieldDefinition(CamelModel):
    id: str = Field(..., min_length=1)
    label: str
    type: FieldType = "text"
    placeholder: Optional[str] = ""
    options: List[FieldOption] = Field(default_factory=list)
    validation: FieldValidation = Field(default_factory=FieldValidation)
    error_message: Optional[str] = None


def ensure_unique_field_ids(fields: List[FieldDefinition]) -> List[FieldDefinition]:
    seen = set()
    duplicates = []
    for field in fields:
        if field.id in seen and field.id not in duplicates:
            duplicates.append(field.id)
        seen.add(field.id)
    if duplicates:
        raise ValueError(f"Duplicate field ids: {', '.join(duplicates)}")
    return fields


class FieldSchema(CamelModel):
    tenant_id: TenantId
    fields: List[FieldDefinition]

    @field_validator("fields")
    @classmethod
    def check_unique_field_ids(cls, fields: List[FieldDefinition]) -> List[FieldDefinition]:
        return ensure_unique_field_ids(fields)


class FieldSchemaUpdate(CamelModel):
    fields: List[FieldDefinition]

    @field_validator("fields")
    @classmethod
    def check_unique_field_ids(cls, fields: List[FieldDefinition]) -> List[FieldDefinition]:
        return ensure_unique_field_ids(fields)


class FieldSchemaOut(FieldSchema):
    id: str = Field(..., alias="_id")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
