"""Concurrent traversal of a camera's filesystem."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from ..cameras.base import BaseCamera
from ..errors import (
    FilesystemAccessUnavailableError,
    NoRootFoldersError,
    NoStorageDevicesError,
    ScanCancelledError,
    listing_error,
)
from ..models.common import FileSystemItem
from ..models.scan import ScanOptions, ScanProgress
from .request import Predicate, ScanOutcome, ScanRequest, ScanState

logger = logging.getLogger(__name__)

Completion = Callable[[ScanOutcome], None]
T = TypeVar("T")


class ScanHandle:
    """A running scan. Returned by ``FileScanner.scan``.

    Must be used from the event loop thread that started the scan.
    """

    def __init__(
        self,
        camera: BaseCamera,
        request: ScanRequest,
        options: ScanOptions,
        completion: Optional[Completion],
    ):
        self._camera = camera
        self._request = request
        self._options = options
        self._completion = completion
        self._loop = asyncio.get_running_loop()
        self._future: asyncio.Future = self._loop.create_future()
        self._semaphore = asyncio.Semaphore(options.max_concurrent_listings)
        self._tasks: set[asyncio.Task] = set()

    @property
    def state(self) -> ScanState:
        return self._request.state

    @property
    def done(self) -> bool:
        return self._future.done()

    @property
    def progress(self) -> ScanProgress:
        return self._request.progress()

    def cancel(self) -> bool:
        """Stop the scan. Returns False if it had already completed."""
        outcome = self._request.fail(ScanCancelledError("Scan cancelled"))
        if outcome is None:
            return False
        self._deliver(outcome)
        return True

    async def wait(self) -> ScanOutcome:
        return await asyncio.shield(self._future)

    def _start(self) -> None:
        self._spawn(self._enumerate())

    def _spawn(self, coro: Awaitable) -> None:
        task = self._loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _call(self, awaitable: Awaitable[T]) -> T:
        if self._options.listing_timeout is None:
            return await awaitable
        return await asyncio.wait_for(awaitable, timeout=self._options.listing_timeout)

    async def _enumerate(self) -> None:
        request = self._request
        camera = self._camera
        request.set_state(ScanState.ENUMERATING)

        if not camera.supports_filesystem_access:
            self._deliver(request.fail(FilesystemAccessUnavailableError(
                f"Camera {camera.name!r} does not currently allow filesystem access"
            )))
            return

        try:
            devices = await self._call(camera.list_storage_devices())
        except Exception as e:
            self._deliver(request.fail(listing_error("storage devices", e)))
            return

        if not devices:
            self._deliver(request.fail(NoStorageDevicesError(
                f"Camera {camera.name!r} has no storage devices"
            )))
            return

        roots = [d.root_folder for d in devices if d.root_folder is not None]
        if not roots:
            self._deliver(request.fail(NoRootFoldersError(
                f"None of the {len(devices)} storage devices expose a root folder"
            )))
            return

        logger.info(
            f"Scanning {camera.name}: {len(devices)} storage devices, {len(roots)} root folders"
        )
        request.set_storage_devices(len(devices))
        request.set_state(ScanState.TRAVERSING)
        for root in roots:
            if request.begin_listing(root, is_root=True):
                self._spawn(self._list(root, depth=0, is_root=True))
        self._deliver(request.roots_enumerated())

    async def _list(self, folder: FileSystemItem, depth: int, is_root: bool = False) -> None:
        request = self._request
        max_depth = self._options.max_depth
        outcome = None
        try:
            async with self._semaphore:
                if request.halted:
                    children = []
                else:
                    logger.debug(f"Listing {folder.path}")
                    children = await self._call(self._camera.list_children(folder))
            subfolders = request.add_children(folder, children)
            if max_depth is None or depth < max_depth:
                for child in subfolders:
                    if request.begin_listing(child):
                        self._spawn(self._list(child, depth + 1))
        except Exception as e:
            error = listing_error(folder.path, e)
            logger.warning(str(error))
            outcome = request.fail_listing(folder, error, is_root=is_root)
        finally:
            finished = request.end_listing()
        self._deliver(outcome if outcome is not None else finished)

    def _deliver(self, outcome: Optional[ScanOutcome]) -> None:
        if outcome is None:
            return
        if outcome.ok:
            logger.info(
                f"Scan of {self._camera.name} finished: {len(outcome.items)} matches, "
                f"{len(outcome.branch_errors)} branch failures"
            )
        else:
            logger.info(f"Scan of {self._camera.name} failed: {outcome.error}")
            current = asyncio.current_task()
            for task in list(self._tasks):
                if task is not current:
                    task.cancel()

        if not self._future.done():
            self._future.set_result(outcome)
        if self._completion is not None:
            try:
                self._completion(outcome)
            except Exception:
                logger.exception("Scan completion callback raised")


class FileScanner:
    """Finds the items on a camera that match a predicate.

    The scanner holds configuration only, so one instance can serve any
    number of concurrent scans.
    """

    def __init__(self, options: Optional[ScanOptions] = None):
        self.options = options

    def scan(
        self,
        camera: BaseCamera,
        predicate: Optional[Predicate] = None,
        completion: Optional[Completion] = None,
        options: Optional[ScanOptions] = None,
    ) -> ScanHandle:
        """Start walking ``camera``'s storage devices and return immediately.

        ``predicate`` decides which items are collected; ``None`` collects
        every file and no folders. ``completion`` is called exactly once, on
        the event loop thread, with the ``ScanOutcome``.
        """
        if camera is None:
            raise ValueError("camera is required")
        options = options or self.options or ScanOptions.from_settings()
        request = ScanRequest(predicate, options)
        handle = ScanHandle(camera, request, options, completion)
        handle._start()
        return handle

    async def scan_for_files(
        self,
        camera: BaseCamera,
        predicate: Optional[Predicate] = None,
        options: Optional[ScanOptions] = None,
    ) -> ScanOutcome:
        handle = self.scan(camera, predicate, options=options)
        try:
            return await handle.wait()
        except asyncio.CancelledError:
            handle.cancel()
            raise


file_scanner = FileScanner()
