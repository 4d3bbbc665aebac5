"""Shared fixtures: an in-memory camera with scriptable failures."""

import asyncio
import threading
from typing import Iterable, Optional

import pytest

from camscan.cameras.base import BaseCamera
from camscan.models import FileSystemItem, ItemKind, StorageDevice


def folder(path: str) -> FileSystemItem:
    return FileSystemItem(
        path=path, name=path.rsplit("/", 1)[-1], kind=ItemKind.FOLDER, storage_id=path.split("/")[0]
    )


def file(path: str, size: int = 0, metadata_loaded: bool = True) -> FileSystemItem:
    return FileSystemItem(
        path=path,
        name=path.rsplit("/", 1)[-1],
        kind=ItemKind.FILE,
        storage_id=path.split("/")[0],
        size=size,
        metadata_loaded=metadata_loaded,
    )


def names(items: Iterable[FileSystemItem]) -> set[str]:
    return {item.name for item in items}


class FakeCamera(BaseCamera):
    """Camera whose storage is a nested dict.

    ``tree`` maps storage ids to folder dicts; a dict value is a folder and
    anything else is a file (an int is used as its size). Listing a path in
    ``fail`` raises ``OSError``; listing a path in ``hang`` never returns.
    """

    def __init__(
        self,
        tree: dict,
        camera_id: str = "fake",
        fail: Iterable[str] = (),
        hang: Iterable[str] = (),
        rootless: Iterable[str] = (),
        delay: float = 0.0,
        threaded: bool = False,
        filesystem_access: bool = True,
        storage_error: Optional[Exception] = None,
    ):
        self.camera_id = camera_id
        self.name = camera_id
        self.tree = tree
        self.fail = set(fail)
        self.hang = set(hang)
        self.rootless = set(rootless)
        self.delay = delay
        self.threaded = threaded
        self.filesystem_access = filesystem_access
        self.storage_error = storage_error
        self.listed: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    @property
    def supports_filesystem_access(self) -> bool:
        return self.filesystem_access

    async def list_storage_devices(self) -> list[StorageDevice]:
        if self.storage_error is not None:
            raise self.storage_error
        return [
            StorageDevice(
                storage_id=storage_id,
                description=f"Card {storage_id}",
                root_folder=None if storage_id in self.rootless else folder(storage_id),
            )
            for storage_id in self.tree
        ]

    async def list_children(self, item: FileSystemItem) -> list[FileSystemItem]:
        with self._lock:
            self.listed.append(item.path)
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if item.path in self.hang:
                await asyncio.Event().wait()
            if self.threaded:
                return await asyncio.to_thread(self._children, item)
            return self._children(item)
        finally:
            with self._lock:
                self.in_flight -= 1

    def _children(self, item: FileSystemItem) -> list[FileSystemItem]:
        if item.path in self.fail:
            raise OSError(f"I/O error reading {item.path}")
        node = self.tree
        for part in item.path.split("/"):
            node = node[part]
        children = []
        for name, value in node.items():
            path = f"{item.path}/{name}"
            if isinstance(value, dict):
                children.append(folder(path))
            else:
                children.append(file(path, size=value if isinstance(value, int) else 0))
        return children


@pytest.fixture
def card_tree() -> dict:
    return {
        "StorageA": {
            "DCIM": {
                "100CANON": {"IMG_0001.JPG": 1000, "IMG_0002.CR3": 5000, "IMG_0003.JPG": 1200},
                "101CANON": {"IMG_0101.JPG": 900, "MVI_0102.MP4": 90000},
            },
            "MISC": {"DPOF": {"AUTPRINT.MRK": 10}},
        },
        "StorageB": {
            "DCIM": {"100CANON": {"IMG_0201.JPG": 800}},
        },
    }
