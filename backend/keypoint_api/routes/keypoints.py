"""
Keypoint construction, rescale and decomposition endpoints.
"""

import logging

from fastapi import APIRouter, HTTPException, status

from keypoint_api.models.keypoint import (
    PositionRequest,
    ShapeRequest,
    ShapeParametersRequest,
    MatrixRequest,
    RescaleRequest,
    DecomposeRequest,
    KeypointResponse,
    ShapeParams,
)
from keypoint_api.models.responses import ErrorResponse
from keypoint_api.services.keypoint import AffineKeypoint, KeypointError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/keypoints", tags=["keypoints"])

INVALID_INPUT = {400: {"model": ErrorResponse, "description": "Invalid scale factor"}}


def bad_request(e: KeypointError) -> HTTPException:
    """Map a keypoint error onto a 400 response."""
    logger.warning(f"Rejected keypoint request: {e.code} - {e.message}")
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={
            "code": e.code,
            "message": e.message,
            "details": e.details,
        },
    )


@router.post("", response_model=KeypointResponse)
async def create_keypoint(request: PositionRequest) -> KeypointResponse:
    """
    Create a keypoint at a position with unit scale and zero orientation.
    """
    kp = AffineKeypoint.from_position(
        request.x, request.y, request.weight, request.constraint_point_id,
    )
    logger.info(f"Created keypoint at ({kp.x}, {kp.y})")
    return KeypointResponse.from_keypoint(kp)


@router.post("/shape", response_model=KeypointResponse, responses=INVALID_INPUT)
async def create_from_shape(request: ShapeRequest) -> KeypointResponse:
    """
    Create a keypoint from an isotropic scale and an orientation.
    """
    try:
        kp = AffineKeypoint.from_shape(
            request.x, request.y, request.weight, request.constraint_point_id,
            request.scale, request.orientation,
        )
    except KeypointError as e:
        raise bad_request(e)
    logger.info(f"Created keypoint at ({kp.x}, {kp.y}) with scale {request.scale}")
    return KeypointResponse.from_keypoint(kp)


@router.post("/shape-parameters", response_model=KeypointResponse, responses=INVALID_INPUT)
async def create_from_shape_parameters(request: ShapeParametersRequest) -> KeypointResponse:
    """
    Create a keypoint from anisotropic scales, orientation and shear.
    """
    try:
        kp = AffineKeypoint.from_shape_parameters(
            request.x, request.y, request.weight, request.constraint_point_id,
            request.scale_x, request.scale_y, request.orientation, request.shear,
        )
    except KeypointError as e:
        raise bad_request(e)
    logger.info(
        f"Created keypoint at ({kp.x}, {kp.y}) with scales "
        f"({request.scale_x}, {request.scale_y})"
    )
    return KeypointResponse.from_keypoint(kp)


@router.post("/matrix", response_model=KeypointResponse)
async def create_from_matrix(request: MatrixRequest) -> KeypointResponse:
    """
    Create a keypoint from raw matrix entries.

    Entries are stored as given; reflected or degenerate matrices are accepted.
    """
    kp = AffineKeypoint.from_matrix(
        request.x, request.y, request.weight, request.constraint_point_id,
        request.a11, request.a12, request.a21, request.a22,
    )
    logger.info(f"Created keypoint at ({kp.x}, {kp.y}) from matrix")
    return KeypointResponse.from_keypoint(kp)


@router.post("/rescale", response_model=KeypointResponse, responses=INVALID_INPUT)
async def rescale_keypoint(request: RescaleRequest) -> KeypointResponse:
    """
    Rescale a keypoint's position and shape.

    Omitting scale_y rescales uniformly.
    """
    kp = request.keypoint.to_keypoint()
    try:
        kp.rescale(request.scale_x, request.scale_y)
    except KeypointError as e:
        raise bad_request(e)
    logger.info(f"Rescaled keypoint by ({request.scale_x}, {request.scale_y})")
    return KeypointResponse.from_keypoint(kp)


@router.post("/decompose", response_model=ShapeParams)
async def decompose_keypoint(request: DecomposeRequest) -> ShapeParams:
    """
    Recover scale, orientation and shear from a keypoint matrix.
    """
    kp = request.keypoint.to_keypoint()
    return ShapeParams(**kp.to_params_dict())
