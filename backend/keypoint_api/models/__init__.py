"""
Pydantic models for request/response schemas.
"""

from keypoint_api.models.keypoint import (
    KeypointModel,
    ShapeParams,
    PositionRequest,
    ShapeRequest,
    ShapeParametersRequest,
    MatrixRequest,
    RescaleRequest,
    DecomposeRequest,
    KeypointResponse,
)
from keypoint_api.models.responses import (
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
)

__all__ = [
    "KeypointModel",
    "ShapeParams",
    "PositionRequest",
    "ShapeRequest",
    "ShapeParametersRequest",
    "MatrixRequest",
    "RescaleRequest",
    "DecomposeRequest",
    "KeypointResponse",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
]
