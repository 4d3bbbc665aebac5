"""Camera backed by a local directory tree, e.g. a mounted memory card."""

import asyncio
import logging
import os
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..models.common import FileSystemItem, ItemKind, StorageDevice
from .base import BaseCamera

logger = logging.getLogger(__name__)


class LocalDirectoryCamera(BaseCamera):
    """Serves ``root`` as a camera.

    Every non-hidden sub-directory of ``root`` is a storage device (a card
    slot) and that sub-directory is its root folder. Item paths are
    ``"<storage_id>/<path relative to the storage directory>"``.
    """

    def __init__(self, root: Path, camera_id: Optional[str] = None, name: Optional[str] = None):
        self.root = Path(root)
        self.camera_id = camera_id or self.root.name or str(self.root)
        self.name = name or self.camera_id

    async def list_storage_devices(self) -> list[StorageDevice]:
        return await asyncio.to_thread(self._list_storage_devices)

    async def list_children(self, folder: FileSystemItem) -> list[FileSystemItem]:
        return await asyncio.to_thread(self._list_children, folder)

    def _list_storage_devices(self) -> list[StorageDevice]:
        devices = []
        with os.scandir(self.root) as entries:
            for entry in sorted(entries, key=lambda e: e.name):
                if entry.name.startswith(".") or not entry.is_dir(follow_symlinks=False):
                    continue
                devices.append(StorageDevice(
                    storage_id=entry.name,
                    description=entry.name,
                    root_folder=FileSystemItem(
                        path=entry.name,
                        name=entry.name,
                        kind=ItemKind.FOLDER,
                        storage_id=entry.name,
                    ),
                    **_disk_usage(Path(entry.path)),
                ))
        return devices

    def _list_children(self, folder: FileSystemItem) -> list[FileSystemItem]:
        directory = self._resolve(folder)
        children = []
        with os.scandir(directory) as entries:
            for entry in entries:
                if entry.name.startswith("."):
                    continue
                item = self._make_item(entry, folder)
                if item is not None:
                    children.append(item)
        logger.debug(f"Listed {folder.path}: {len(children)} children")
        return children

    def _resolve(self, folder: FileSystemItem) -> Path:
        directory = (self.root / folder.path).resolve()
        if not directory.is_relative_to(self.root.resolve()):
            raise ValueError(f"Folder outside camera root: {folder.path}")
        return directory

    def _make_item(self, entry: os.DirEntry, parent: FileSystemItem) -> Optional[FileSystemItem]:
        path = f"{parent.path}/{entry.name}"
        if entry.is_dir(follow_symlinks=False):
            return FileSystemItem(
                path=path, name=entry.name, kind=ItemKind.FOLDER, storage_id=parent.storage_id,
            )
        if not entry.is_file(follow_symlinks=False):
            return None
        try:
            stat = entry.stat(follow_symlinks=False)
        except FileNotFoundError:
            logger.warning(f"File disappeared during listing: {entry.path}")
            return None
        except OSError as e:
            # Still report the file; metadata will simply be missing.
            logger.warning(f"Cannot stat {entry.path}: {e}")
            return FileSystemItem(
                path=path, name=entry.name, kind=ItemKind.FILE,
                storage_id=parent.storage_id, metadata_loaded=False,
            )
        return FileSystemItem(
            path=path,
            name=entry.name,
            kind=ItemKind.FILE,
            storage_id=parent.storage_id,
            size=stat.st_size,
            modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
        )


def _disk_usage(path: Path) -> dict:
    try:
        total, _used, free = shutil.disk_usage(path)
    except OSError:
        return {}
    return {"capacity": total, "free_space": free}
