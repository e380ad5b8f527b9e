from pydantic import Field
from typing import Dict, List, Optional
from datetime import datetime

from dynreg.models.base import CamelModel
from dynreg.models.validation.validation import FieldValue

# ---------- Registered User Models ----------#

class RegisteredUserOut(CamelModel):
    id: str = Field(..., alias="_id")
    tenant_id: str
    fields: Dict[str, FieldValue]
    created_at: datetime
    updated_at: datetime


class RegistrationOut(CamelModel):
    user_id: str
    tenant_id: str
    fields: Dict[str, FieldValue]
    database_name: str
    collection_name: str
    created_at: datetime


class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_users: int
    limit: int


class RegisteredUserPage(CamelModel):
    users: List[RegisteredUserOut]
    pagination: Pagination
    database_name: Optional[str] = None
    collection_name: Optional[str] = None
