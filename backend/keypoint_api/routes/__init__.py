"""
API route modules.
"""

from keypoint_api.routes.keypoints import router as keypoints_router

__all__ = [
    "keypoints_router",
]
