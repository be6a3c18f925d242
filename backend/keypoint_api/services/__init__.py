"""
Keypoint shape logic.
"""

from keypoint_api.services.keypoint import (
    AffineKeypoint,
    KeypointError,
    InvalidArgumentError,
    KeypointResult,
    checked,
)

__all__ = [
    "AffineKeypoint",
    "KeypointError",
    "InvalidArgumentError",
    "KeypointResult",
    "checked",
]
