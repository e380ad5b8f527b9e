from typing import Any, Dict, Optional

from dynreg.models.base import CamelModel


class ApiResponse(CamelModel):
    """Envelope shared by every endpoint."""

    success: bool = True
    message: Optional[str] = None
    data: Optional[Any] = None
    errors: Optional[Dict[str, str]] = None
