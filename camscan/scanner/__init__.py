"""Camera filesystem scanning."""

from .file_scanner import FileScanner, ScanHandle, file_scanner
from .request import BranchFailure, ScanOutcome, ScanRequest, ScanState
from . import predicates

__all__ = [
    "FileScanner",
    "ScanHandle",
    "file_scanner",
    "BranchFailure",
    "ScanOutcome",
    "ScanRequest",
    "ScanState",
    "predicates",
]
