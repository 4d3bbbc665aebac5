"""Per-scan shared state."""

import logging
import threading
from enum import Enum
from typing import Callable, Optional
from pydantic import BaseModel, ConfigDict, Field

from ..errors import NoRootFoldersError, ScanError
from ..models.common import FileSystemItem
from ..models.scan import ScanOptions, ScanProgress

logger = logging.getLogger(__name__)

Predicate = Callable[[FileSystemItem], bool]


class ScanState(str, Enum):
    IDLE = "idle"
    ENUMERATING = "enumerating"
    TRAVERSING = "traversing"
    FINALIZING = "finalizing"
    COMPLETED = "completed"


class BranchFailure(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    path: str
    error: ScanError
    is_root: bool = False


class ScanOutcome(BaseModel):
    """What a scan delivers to its completion callback."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    items: list[FileSystemItem] = Field(default_factory=list)
    error: Optional[ScanError] = None
    branch_errors: list[BranchFailure] = Field(default_factory=list)
    progress: ScanProgress = Field(default_factory=ScanProgress)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> list[FileSystemItem]:
        if self.error is not None:
            raise self.error
        return self.items


class ScanRequest:
    """Mutable state of one traversal.

    Listing results may be recorded from any thread. Every mutation happens
    under one lock, and each method that can finish the scan returns the
    ``ScanOutcome`` to deliver exactly once; all other callers get ``None``.
    """

    def __init__(self, predicate: Optional[Predicate], options: ScanOptions):
        self._predicate = predicate
        self._fail_fast = options.fail_fast
        self._include_folders = options.include_matching_folders
        self._lock = threading.Lock()

        self._matches: dict[str, FileSystemItem] = {}
        self._visited: set[str] = set()
        self._pending = 0
        self._roots_done = False
        self._root_count = 0
        self._root_failures = 0
        self._first_error: Optional[ScanError] = None
        self._branch_errors: list[BranchFailure] = []
        self._completed = False
        self._state = ScanState.IDLE
        self._progress = ScanProgress()

    @property
    def state(self) -> ScanState:
        return self._state

    @property
    def completed(self) -> bool:
        return self._completed

    @property
    def halted(self) -> bool:
        """True once no new listings should be issued."""
        with self._lock:
            return self._halted_locked()

    def matches(self, item: FileSystemItem) -> bool:
        if item.is_folder:
            if not self._include_folders or self._predicate is None:
                return False
            return bool(self._predicate(item))
        return self._predicate is None or bool(self._predicate(item))

    def set_state(self, state: ScanState) -> None:
        with self._lock:
            if not self._completed:
                self._state = state

    def set_storage_devices(self, count: int) -> None:
        with self._lock:
            self._progress.storage_devices = count

    def begin_listing(self, folder: FileSystemItem, is_root: bool = False) -> bool:
        """Claim ``folder`` for listing. False if it must not be listed.

        Only claimed root folders count towards the roots that must all fail
        before the scan reports ``NoRootFoldersError``.
        """
        with self._lock:
            if self._halted_locked() or folder.path in self._visited:
                return False
            self._visited.add(folder.path)
            if is_root:
                self._root_count += 1
            self._pending += 1
            self._progress.folders_pending = self._pending
            return True

    def add_children(
        self, folder: FileSystemItem, children: list[FileSystemItem]
    ) -> list[FileSystemItem]:
        """Record a successful listing and return the sub-folders to descend into."""
        matched = [child for child in children if self.matches(child)]
        with self._lock:
            if self._completed:
                return []
            self._progress.folders_listed += 1
            self._progress.items_seen += len(children)
            for item in matched:
                self._matches.setdefault(item.path, item)
            self._progress.items_matched = len(self._matches)
            if self._halted_locked():
                return []
        return [child for child in children if child.is_folder]

    def fail_listing(
        self, folder: FileSystemItem, error: ScanError, is_root: bool = False
    ) -> Optional[ScanOutcome]:
        """Record a failed listing. Returns an outcome when the failure ends the scan."""
        with self._lock:
            if self._completed:
                logger.debug(f"Discarding failure for {folder.path} after completion")
                return None
            self._branch_errors.append(BranchFailure(path=folder.path, error=error, is_root=is_root))
            self._progress.folders_failed += 1
            if is_root:
                self._root_failures += 1
            if self._first_error is None:
                self._first_error = error
            if not self._fail_fast:
                return None
            if is_root and self._root_failures == self._root_count:
                return self._complete_locked(self._no_root_folders_locked())
            return self._complete_locked(self._first_error)

    def end_listing(self) -> Optional[ScanOutcome]:
        """Release one pending listing, successful or not."""
        with self._lock:
            self._pending -= 1
            self._progress.folders_pending = self._pending
            return self._finish_if_idle_locked()

    def roots_enumerated(self) -> Optional[ScanOutcome]:
        with self._lock:
            self._roots_done = True
            return self._finish_if_idle_locked()

    def fail(self, error: ScanError) -> Optional[ScanOutcome]:
        """End the scan with ``error`` unless it already completed."""
        with self._lock:
            if self._completed:
                return None
            if self._first_error is None:
                self._first_error = error
            return self._complete_locked(error)

    def progress(self) -> ScanProgress:
        with self._lock:
            return self._progress.model_copy()

    def _halted_locked(self) -> bool:
        return self._completed or (self._fail_fast and self._first_error is not None)

    def _finish_if_idle_locked(self) -> Optional[ScanOutcome]:
        if self._completed or self._pending > 0 or not self._roots_done:
            return None
        self._state = ScanState.FINALIZING
        if self._root_count and self._root_failures == self._root_count:
            return self._complete_locked(self._no_root_folders_locked())
        return self._complete_locked(None)

    def _no_root_folders_locked(self) -> NoRootFoldersError:
        err = NoRootFoldersError(
            f"None of the {self._root_count} root folders could be listed"
        )
        root_errors = [f.error for f in self._branch_errors if f.is_root]
        if root_errors:
            err.__cause__ = root_errors[0]
        return err

    def _complete_locked(self, error: Optional[ScanError]) -> ScanOutcome:
        self._completed = True
        self._state = ScanState.COMPLETED
        items = [] if error is not None else list(self._matches.values())
        return ScanOutcome(
            items=items,
            error=error,
            branch_errors=list(self._branch_errors),
            progress=self._progress.model_copy(),
        )
