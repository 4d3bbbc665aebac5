"""Data models."""

from .common import FileSystemItem, ItemKind, StorageDevice, KNOWN_IMAGE_EXTENSIONS
from .scan import (
    BranchError,
    ScanConfig,
    ScanJob,
    ScanOptions,
    ScanProgress,
    ScanResult,
    ScanStatus,
)
from .system import CameraInfo

__all__ = [
    "FileSystemItem",
    "ItemKind",
    "StorageDevice",
    "KNOWN_IMAGE_EXTENSIONS",
    "BranchError",
    "ScanConfig",
    "ScanJob",
    "ScanOptions",
    "ScanProgress",
    "ScanResult",
    "ScanStatus",
    "CameraInfo",
]
