"""Camera information models."""

from typing import Optional
from pydantic import BaseModel


class CameraInfo(BaseModel):
    camera_id: str
    name: str
    available: bool = False
    filesystem_access: bool = False
    detail: str = ""
    storage_devices: Optional[int] = None
