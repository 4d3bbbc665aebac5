"""Abstract camera interface."""

from abc import ABC, abstractmethod

from ..models.common import FileSystemItem, StorageDevice
from ..models.system import CameraInfo


class BaseCamera(ABC):
    """All cameras implement this interface.

    Both listing calls may be slow and may fail independently; the scanner
    treats any exception they raise as a failed listing.
    """

    camera_id: str = ""
    name: str = ""

    @property
    def supports_filesystem_access(self) -> bool:
        return True

    @abstractmethod
    async def list_storage_devices(self) -> list[StorageDevice]:
        """Return the camera's root storage devices."""
        ...

    @abstractmethod
    async def list_children(self, folder: FileSystemItem) -> list[FileSystemItem]:
        """Return the immediate children of ``folder``."""
        ...

    async def check_availability(self) -> CameraInfo:
        try:
            devices = await self.list_storage_devices()
        except Exception as e:
            return CameraInfo(
                camera_id=self.camera_id,
                name=self.name,
                filesystem_access=self.supports_filesystem_access,
                detail=f"Cannot enumerate storage: {e}",
            )
        return CameraInfo(
            camera_id=self.camera_id,
            name=self.name,
            available=bool(devices),
            filesystem_access=self.supports_filesystem_access,
            detail=f"{len(devices)} storage devices" if devices else "No storage devices",
            storage_devices=len(devices),
        )
