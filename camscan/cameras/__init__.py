"""Camera implementations."""

from .base import BaseCamera
from .local import LocalDirectoryCamera
from .registry import register_camera, unregister_camera, get_camera, get_all_cameras

__all__ = [
    "BaseCamera",
    "LocalDirectoryCamera",
    "register_camera",
    "unregister_camera",
    "get_camera",
    "get_all_cameras",
]
