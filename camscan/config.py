"""Application settings."""

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    host: str = "127.0.0.1"
    port: int = 8788
    debug: bool = False
    log_level: str = "INFO"
    # Each root is served as one camera; its sub-directories are the storage devices.
    camera_roots: list[Path] = []

    max_concurrent_listings: int = 8
    listing_timeout: Optional[float] = None
    fail_fast: bool = False
    include_matching_folders: bool = False
    max_depth: Optional[int] = None

    model_config = {"env_prefix": "CAMSCAN_"}


settings = Settings()
