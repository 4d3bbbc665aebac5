"""Scan-related models."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field
import uuid

from ..config import settings
from .common import FileSystemItem


class ScanStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class ScanOptions(BaseModel):
    """Traversal policy for a single scan."""

    fail_fast: bool = False
    include_matching_folders: bool = False
    max_concurrent_listings: int = Field(default=8, ge=1)
    listing_timeout: Optional[float] = Field(default=None, gt=0)
    max_depth: Optional[int] = Field(default=None, ge=0)

    @classmethod
    def from_settings(cls, **overrides) -> "ScanOptions":
        values = {
            "fail_fast": settings.fail_fast,
            "include_matching_folders": settings.include_matching_folders,
            "max_concurrent_listings": settings.max_concurrent_listings,
            "listing_timeout": settings.listing_timeout,
            "max_depth": settings.max_depth,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


class ScanProgress(BaseModel):
    storage_devices: int = 0
    folders_listed: int = 0
    folders_pending: int = 0
    folders_failed: int = 0
    items_seen: int = 0
    items_matched: int = 0


class ScanConfig(BaseModel):
    camera_id: str
    file_extensions: list[str] = Field(default_factory=list)  # e.g. ["jpg", ".cr3"]
    images_only: bool = False
    name_contains: Optional[str] = None
    fail_fast: Optional[bool] = None
    include_matching_folders: Optional[bool] = None
    max_depth: Optional[int] = Field(default=None, ge=0)


class BranchError(BaseModel):
    path: str
    error: str


class ScanJob(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:8])
    config: ScanConfig
    status: ScanStatus = ScanStatus.PENDING
    progress: ScanProgress = Field(default_factory=ScanProgress)
    created_at: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))
    completed_at: Optional[datetime] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    branch_errors: list[BranchError] = Field(default_factory=list)


class ScanResult(BaseModel):
    job_id: str
    files: list[FileSystemItem] = Field(default_factory=list)
    total_files: int = 0
    total_size: int = 0
