"""Core shared models."""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict

# Extensions cameras commonly write for stills, including vendor RAW formats.
KNOWN_IMAGE_EXTENSIONS = frozenset({
    "jpg", "jpeg", "heic", "heif", "hif", "tif", "tiff", "png", "dng",
    "cr2", "cr3", "crw", "nef", "nrw", "arw", "srf", "sr2", "orf",
    "rw2", "raf", "pef", "raw", "srw", "x3f", "3fr", "iiq",
})


class ItemKind(str, Enum):
    FOLDER = "folder"
    FILE = "file"


class FileSystemItem(BaseModel):
    """A folder or file on one of a camera's storage devices.

    Items are immutable and compare by value, so they can be collected in
    sets. ``path`` is unique within a camera.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    name: str
    kind: ItemKind
    storage_id: str
    size: Optional[int] = None
    modified: Optional[datetime] = None
    metadata_loaded: bool = True

    @property
    def is_folder(self) -> bool:
        return self.kind == ItemKind.FOLDER

    @property
    def is_file(self) -> bool:
        return self.kind == ItemKind.FILE

    @property
    def extension(self) -> str:
        dot = self.name.rfind(".")
        if dot <= 0 or dot == len(self.name) - 1:
            return ""
        return self.name[dot + 1:].lower()

    @property
    def is_known_image_type(self) -> bool:
        return self.is_file and self.extension in KNOWN_IMAGE_EXTENSIONS


class StorageDevice(BaseModel):
    storage_id: str
    description: str = ""
    root_folder: Optional[FileSystemItem] = None  # None: nothing listable on this device
    capacity: Optional[int] = None
    free_space: Optional[int] = None
