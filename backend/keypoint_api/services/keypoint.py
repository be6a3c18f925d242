"""
Affine keypoint types and shape math.

An affine keypoint is an image position plus a 2x2 matrix that maps the
canonical unit neighborhood onto the feature's local support region:

    A = [[a11, a12],
         [a21, a22]]

The first column carries scale_x and the orientation, the second column
carries scale_y and the orientation plus shear:

    a11 =  scale_x * cos(orientation)
    a12 = -scale_y * sin(orientation + shear)
    a21 =  scale_x * sin(orientation)
    a22 =  scale_y * cos(orientation + shear)
"""

import logging
import math
from dataclasses import dataclass, replace
from typing import Callable, Optional

import numpy as np

from keypoint_api.config import settings

logger = logging.getLogger(__name__)


class KeypointError(Exception):
    """Error during keypoint construction or mutation."""
    def __init__(self, code: str, message: str, details: dict = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InvalidArgumentError(KeypointError, ValueError):
    """A scale factor violated its sign precondition."""
    def __init__(self, message: str, details: dict = None):
        super().__init__("INVALID_ARGUMENT", message, details)


def _rejected(name: str, value: float) -> dict:
    # JSON cannot carry nan or inf
    return {"parameter": name, "value": value if math.isfinite(value) else repr(value)}


def _check_non_negative(name: str, value: float) -> None:
    if not value >= 0:
        logger.debug(f"Rejected {name}={value}: must be >= 0")
        raise InvalidArgumentError(
            f"{name} must be >= 0, got {value}",
            details=_rejected(name, value),
        )


def _check_positive(name: str, value: float) -> None:
    if not value > 0:
        logger.debug(f"Rejected {name}={value}: must be > 0")
        raise InvalidArgumentError(
            f"{name} must be > 0, got {value}",
            details=_rejected(name, value),
        )


@dataclass
class AffineKeypoint:
    """
    A detected keypoint with its local affine shape.

    Calling the class directly is the raw-matrix path: the eight fields are
    stored verbatim and nothing is validated, so reflected or degenerate
    matrices are allowed. `weight` and `constraint_point_id` are passed
    through untouched; -1 means no constraint point.
    """
    x: float = 0.0
    y: float = 0.0
    weight: float = 1.0
    constraint_point_id: int = -1
    a11: float = 1.0
    a12: float = 0.0
    a21: float = 0.0
    a22: float = 1.0

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_matrix(
        cls,
        x: float,
        y: float,
        weight: float,
        constraint_point_id: int,
        a11: float,
        a12: float,
        a21: float,
        a22: float,
    ) -> "AffineKeypoint":
        """Build a keypoint from raw matrix entries without validation."""
        return cls(
            x=float(x),
            y=float(y),
            weight=float(weight),
            constraint_point_id=int(constraint_point_id),
            a11=float(a11),
            a12=float(a12),
            a21=float(a21),
            a22=float(a22),
        )

    @classmethod
    def from_position(
        cls,
        x: float,
        y: float,
        weight: float = 1.0,
        constraint_point_id: int = -1,
    ) -> "AffineKeypoint":
        """Keypoint at (x, y) with unit scale and zero orientation."""
        return cls.from_matrix(x, y, weight, constraint_point_id, 1.0, 0.0, 0.0, 1.0)

    @classmethod
    def from_shape(
        cls,
        x: float,
        y: float,
        weight: float,
        constraint_point_id: int,
        scale: float,
        orientation: float,
    ) -> "AffineKeypoint":
        """
        Keypoint with an isotropic scale and an orientation in radians.

        Raises:
            InvalidArgumentError: if scale is negative.
        """
        _check_non_negative("scale", scale)
        scale_cos = scale * math.cos(orientation)
        scale_sin = scale * math.sin(orientation)
        return cls.from_matrix(
            x, y, weight, constraint_point_id,
            scale_cos, -scale_sin,
            scale_sin, scale_cos,
        )

    @classmethod
    def from_shape_parameters(
        cls,
        x: float,
        y: float,
        weight: float,
        constraint_point_id: int,
        scale_x: float,
        scale_y: float,
        orientation: float,
        shear: float,
    ) -> "AffineKeypoint":
        """
        Keypoint with anisotropic scale, orientation and shear (radians).

        With scale_x == scale_y and shear == 0 this is identical to
        `from_shape`.

        Raises:
            InvalidArgumentError: if scale_x or scale_y is negative.
        """
        _check_non_negative("scale_x", scale_x)
        _check_non_negative("scale_y", scale_y)
        return cls.from_matrix(
            x, y, weight, constraint_point_id,
            scale_x * math.cos(orientation),
            -scale_y * math.sin(orientation + shear),
            scale_x * math.sin(orientation),
            scale_y * math.cos(orientation + shear),
        )

    @classmethod
    def from_array(
        cls,
        x: float,
        y: float,
        matrix,
        weight: float = 1.0,
        constraint_point_id: int = -1,
    ) -> "AffineKeypoint":
        """Build a keypoint from any 2x2 array-like matrix."""
        m = np.asarray(matrix, dtype=np.float64)
        if m.shape != (2, 2):
            raise InvalidArgumentError(
                f"matrix must have shape (2, 2), got {m.shape}",
                details={"parameter": "matrix", "shape": list(m.shape)},
            )
        return cls.from_matrix(
            x, y, weight, constraint_point_id,
            m[0, 0], m[0, 1], m[1, 0], m[1, 1],
        )

    # ------------------------------------------------------------------
    # Rescale
    # ------------------------------------------------------------------

    def rescale(self, scale_x: float, scale_y: Optional[float] = None) -> None:
        """
        Rescale position and shape in place.

        The first matrix column follows scale_x, the second follows scale_y.
        A single argument rescales uniformly. Both factors are checked
        before anything is modified.

        Raises:
            InvalidArgumentError: if a factor is not strictly positive.
        """
        if scale_y is None:
            scale_y = scale_x
        _check_positive("scale_x", scale_x)
        _check_positive("scale_y", scale_y)

        self.x *= scale_x
        self.y *= scale_y
        self.a11 *= scale_x
        self.a12 *= scale_y
        self.a21 *= scale_x
        self.a22 *= scale_y
        logger.debug(f"Rescaled keypoint by ({scale_x}, {scale_y})")

    def rescaled(self, scale_x: float, scale_y: Optional[float] = None) -> "AffineKeypoint":
        """Return a rescaled copy, leaving this keypoint untouched."""
        copy = replace(self)
        copy.rescale(scale_x, scale_y)
        return copy

    # ------------------------------------------------------------------
    # Decomposition
    # ------------------------------------------------------------------

    def compute_scale_x(self) -> float:
        return math.hypot(self.a11, self.a21)

    def compute_scale_y(self) -> float:
        return math.hypot(self.a12, self.a22)

    def compute_scale(self) -> float:
        """Mean of the two axis scales."""
        return (self.compute_scale_x() + self.compute_scale_y()) / 2.0

    def compute_orientation(self) -> float:
        """Angle of the first matrix column, in (-pi, pi]."""
        return math.atan2(self.a21, self.a11)

    def compute_shear(self) -> float:
        """
        Angle of the second column minus the orientation.

        Not wrapped: the result may fall outside (-pi, pi] when the two
        column angles straddle the atan2 branch cut.
        """
        return math.atan2(-self.a12, self.a22) - self.compute_orientation()

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def matrix(self) -> np.ndarray:
        """Get the 2x2 affine shape matrix."""
        return np.array([
            [self.a11, self.a12],
            [self.a21, self.a22],
        ], dtype=np.float64)

    @property
    def matrix_list(self) -> list:
        """Get the 2x2 matrix as a nested list for JSON serialization."""
        return [[float(self.a11), float(self.a12)],
                [float(self.a21), float(self.a22)]]

    def to_params_dict(self) -> dict:
        """Get the shape decomposition as a dictionary."""
        digits = settings.params_decimals
        orientation = self.compute_orientation()
        shear = self.compute_shear()
        return {
            "scale": round(self.compute_scale(), digits),
            "scale_x": round(self.compute_scale_x(), digits),
            "scale_y": round(self.compute_scale_y(), digits),
            "orientation_rad": round(orientation, digits),
            "orientation_deg": round(math.degrees(orientation), digits),
            "shear_rad": round(shear, digits),
            "shear_deg": round(math.degrees(shear), digits),
        }


@dataclass
class KeypointResult:
    """Outcome of a checked keypoint operation."""
    keypoint: Optional[AffineKeypoint] = None
    error: Optional[KeypointError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def checked(operation: Callable, *args, **kwargs) -> KeypointResult:
    """
    Run a keypoint factory or rescale and report failure as a value.

    Factories return the new keypoint. For `rescale` on a bound keypoint the
    result holds that same keypoint after mutation.
    """
    try:
        value = operation(*args, **kwargs)
    except InvalidArgumentError as e:
        return KeypointResult(error=e)
    if value is None:
        value = getattr(operation, "__self__", None)
    return KeypointResult(keypoint=value)
