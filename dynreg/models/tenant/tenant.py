from pydantic import Field, StringConstraints
from typing import Annotated, Optional
from datetime import datetime

from dynreg.models.base import CamelModel
from dynreg.models.field_schema.field_schema import TenantId

# ---------- Tenant Models ----------

class Tenant(CamelModel):
    tenant_id: TenantId
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    description: Optional[str] = ""
    # Informational only, never enforced on registration
    is_active: bool = True


class TenantOut(Tenant):
    id: str = Field(..., alias="_id")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
