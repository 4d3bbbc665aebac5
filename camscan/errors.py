"""Errors reported by camera filesystem scans."""

from typing import Optional


class ScanError(RuntimeError):
    """Base class for scan errors.

    ``code`` is a stable identifier for API payloads; ``number`` keeps the
    numeric codes the camera demo apps report.
    """

    code = "scan_error"
    number = 2000


class FilesystemAccessUnavailableError(ScanError):
    """The camera is not currently in a mode that allows filesystem access."""

    code = "filesystem_access_unavailable"
    number = 2000


class NoStorageDevicesError(ScanError):
    """The camera reported no storage devices."""

    code = "no_storage_devices"
    number = 2001


class NoRootFoldersError(ScanError):
    """No storage device exposed a root folder that could be listed."""

    code = "no_root_folders"
    number = 2002


class ListingError(ScanError):
    """A camera listing call failed. The original exception is ``__cause__``."""

    code = "listing_failed"
    number = 2003

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        super().__init__(message or f"Failed to list {path}")


class ScanCancelledError(ScanError):
    """The scan was cancelled before it completed."""

    code = "cancelled"
    number = 2004


def listing_error(path: str, exc: BaseException) -> ListingError:
    """Wrap ``exc`` from listing ``path`` unless it is already a ListingError."""
    if isinstance(exc, ListingError):
        return exc
    detail = str(exc) or type(exc).__name__
    err = ListingError(path, f"Failed to list {path}: {detail}")
    err.__cause__ = exc
    return err
