"""FastAPI application factory."""

import logging

from fastapi import FastAPI

from .config import settings
from .api.router import api_router
from .cameras.local import LocalDirectoryCamera
from .cameras.registry import register_camera

# Configure logging for our modules
logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(name)s: %(message)s")
logging.getLogger("camscan").setLevel(settings.log_level.upper())

logger = logging.getLogger(__name__)


def register_configured_cameras() -> None:
    for root in settings.camera_roots:
        if not root.is_dir():
            logger.warning(f"Camera root {root} is not a directory, skipping")
            continue
        camera = LocalDirectoryCamera(root)
        register_camera(camera)
        logger.info(f"Registered camera {camera.camera_id} at {root}")


def create_app() -> FastAPI:
    app = FastAPI(
        title="camscan",
        version="0.1.0",
        description="Camera filesystem scanner",
    )

    register_configured_cameras()
    app.include_router(api_router, prefix="/api")

    return app
