"""
FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from keypoint_api import __version__
from keypoint_api.config import settings
from keypoint_api.models.responses import HealthResponse
from keypoint_api.routes import keypoints_router

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info(f"Affine keypoint service v{__version__}")
    logger.info(f"Keypoint routes mounted at {settings.api_v1_prefix}/keypoints")
    logger.info(
        f"Shape parameters reported to {settings.params_decimals} decimals, "
        "angles in radians and degrees"
    )

    yield

    logger.info("Keypoint service stopped")


# Create FastAPI app
app = FastAPI(
    title="Affine Keypoint Service",
    description="API for building, rescaling and decomposing affine keypoint shapes",
    version=__version__,
    lifespan=lifespan,
    docs_url=f"{settings.api_v1_prefix}/docs",
    redoc_url=f"{settings.api_v1_prefix}/redoc",
    openapi_url=f"{settings.api_v1_prefix}/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Global exception handler for consistent error responses
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
            }
        },
    )


app.include_router(keypoints_router, prefix=settings.api_v1_prefix)


@app.get("/health", tags=["health"], response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(version=__version__)


@app.get("/", include_in_schema=False)
async def root():
    """Service info."""
    return {
        "message": "Affine Keypoint Service API",
        "version": __version__,
        "docs": f"{settings.api_v1_prefix}/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "keypoint_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
