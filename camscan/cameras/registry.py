"""Camera registration."""

from typing import Optional
from .base import BaseCamera

_registry: dict[str, BaseCamera] = {}


def register_camera(camera: BaseCamera) -> None:
    _registry[camera.camera_id] = camera


def unregister_camera(camera_id: str) -> Optional[BaseCamera]:
    return _registry.pop(camera_id, None)


def get_camera(camera_id: str) -> Optional[BaseCamera]:
    return _registry.get(camera_id)


def get_all_cameras() -> dict[str, BaseCamera]:
    return dict(_registry)
