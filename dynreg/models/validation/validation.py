from pydantic import Field
from typing import Dict, Union

from dynreg.models.base import CamelModel

# Accepted submission values are limited to JSON scalars
FieldValue = Union[str, int, float, bool]


class ValidationResult(CamelModel):
    is_valid: bool
    errors: Dict[str, str] = Field(default_factory=dict)
    validated_fields: Dict[str, FieldValue] = Field(default_factory=dict)
