"""
API response models.
"""

from typing import Optional, Any
from pydantic import BaseModel


class ErrorDetail(BaseModel):
    """Detailed error information."""
    code: str
    message: str
    details: Optional[dict[str, Any]] = None


class ErrorResponse(BaseModel):
    """Standard error response."""
    detail: ErrorDetail


class HealthResponse(BaseModel):
    """Response from GET /health."""
    ok: bool = True
    status: str = "healthy"
    version: str
