"""
Keypoint request/response schemas.
"""

from typing import Optional
from pydantic import BaseModel, Field

from keypoint_api.services.keypoint import AffineKeypoint


class KeypointModel(BaseModel):
    """Wire form of an affine keypoint."""
    x: float = 0.0
    y: float = 0.0
    weight: float = 1.0
    constraint_point_id: int = Field(default=-1, description="-1 when unset")
    a11: float = 1.0
    a12: float = 0.0
    a21: float = 0.0
    a22: float = 1.0

    @classmethod
    def from_keypoint(cls, kp: AffineKeypoint) -> "KeypointModel":
        return cls(
            x=kp.x,
            y=kp.y,
            weight=kp.weight,
            constraint_point_id=kp.constraint_point_id,
            a11=kp.a11,
            a12=kp.a12,
            a21=kp.a21,
            a22=kp.a22,
        )

    def to_keypoint(self) -> AffineKeypoint:
        return AffineKeypoint.from_matrix(
            self.x, self.y, self.weight, self.constraint_point_id,
            self.a11, self.a12, self.a21, self.a22,
        )


class ShapeParams(BaseModel):
    """Scale/orientation/shear decomposition of a keypoint matrix."""
    scale: float
    scale_x: float
    scale_y: float
    orientation_rad: float
    orientation_deg: float
    shear_rad: float
    shear_deg: float


class PositionRequest(BaseModel):
    """Request body for POST /api/v1/keypoints."""
    x: float
    y: float
    weight: float = 1.0
    constraint_point_id: int = -1


class ShapeRequest(PositionRequest):
    """Request body for POST /api/v1/keypoints/shape (isotropic)."""
    scale: float = Field(description="Isotropic scale, must be >= 0")
    orientation: float = Field(default=0.0, description="Orientation in radians")


class ShapeParametersRequest(PositionRequest):
    """Request body for POST /api/v1/keypoints/shape-parameters."""
    scale_x: float = Field(description="Scale of the first axis, must be >= 0")
    scale_y: float = Field(description="Scale of the second axis, must be >= 0")
    orientation: float = Field(default=0.0, description="Orientation in radians")
    shear: float = Field(default=0.0, description="Shear of the second axis in radians")


class MatrixRequest(PositionRequest):
    """Request body for POST /api/v1/keypoints/matrix. No validation applied."""
    a11: float
    a12: float
    a21: float
    a22: float


class RescaleRequest(BaseModel):
    """Request body for POST /api/v1/keypoints/rescale."""
    keypoint: KeypointModel
    scale_x: float = Field(description="Factor for x and the first matrix column, must be > 0")
    scale_y: Optional[float] = Field(
        default=None,
        description="Factor for y and the second matrix column. Defaults to scale_x."
    )


class DecomposeRequest(BaseModel):
    """Request body for POST /api/v1/keypoints/decompose."""
    keypoint: KeypointModel


class KeypointResponse(BaseModel):
    """A keypoint together with its shape decomposition."""
    keypoint: KeypointModel
    shape: ShapeParams

    @classmethod
    def from_keypoint(cls, kp: AffineKeypoint) -> "KeypointResponse":
        return cls(
            keypoint=KeypointModel.from_keypoint(kp),
            shape=ShapeParams(**kp.to_params_dict()),
        )
