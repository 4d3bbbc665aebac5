"""Scan job lifecycle and async orchestration."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional, Callable

from ..cameras.registry import get_camera
from ..errors import ScanCancelledError
from ..models.common import FileSystemItem
from ..models.scan import BranchError, ScanConfig, ScanJob, ScanOptions, ScanStatus
from ..scanner.file_scanner import FileScanner, ScanHandle, file_scanner
from ..scanner.predicates import predicate_from_filters
from ..scanner.request import ScanOutcome

logger = logging.getLogger(__name__)

PROGRESS_INTERVAL = 1.0


class ScanManager:
    def __init__(self, scanner: Optional[FileScanner] = None):
        self._scanner = scanner or file_scanner
        self._jobs: dict[str, ScanJob] = {}
        self._results: dict[str, list[FileSystemItem]] = {}
        self._handles: dict[str, ScanHandle] = {}
        self._tasks: dict[str, asyncio.Task] = {}
        self._progress_listeners: dict[str, list[Callable]] = {}

    def create_job(self, config: ScanConfig) -> ScanJob:
        job = ScanJob(config=config)
        self._jobs[job.id] = job
        self._results[job.id] = []
        return job

    def get_job(self, job_id: str) -> Optional[ScanJob]:
        return self._jobs.get(job_id)

    def get_results(self, job_id: str) -> list[FileSystemItem]:
        return self._results.get(job_id, [])

    def add_progress_listener(self, job_id: str, callback: Callable) -> None:
        self._progress_listeners.setdefault(job_id, []).append(callback)

    def remove_progress_listener(self, job_id: str, callback: Callable) -> None:
        listeners = self._progress_listeners.get(job_id, [])
        if callback in listeners:
            listeners.remove(callback)

    async def start_scan(self, job_id: str) -> None:
        job = self._jobs.get(job_id)
        if not job:
            return

        task = asyncio.create_task(self._run_scan(job))
        self._tasks[job_id] = task

    async def cancel_scan(self, job_id: str) -> bool:
        job = self._jobs.get(job_id)
        if not job or job.status not in (ScanStatus.PENDING, ScanStatus.RUNNING):
            return False
        handle = self._handles.get(job_id)
        task = self._tasks.get(job_id)
        if handle:
            # _run_scan records the outcome and notifies listeners. The scan
            # may already have finished, in which case nothing is cancelled.
            cancelled = handle.cancel()
            if task:
                await task
            return cancelled
        if task:
            task.cancel()
            job.status = ScanStatus.CANCELLED
            await self._notify_progress(job)
        else:
            job.status = ScanStatus.CANCELLED
        return True

    async def wait(self, job_id: str) -> Optional[ScanJob]:
        task = self._tasks.get(job_id)
        if task:
            await task
        return self._jobs.get(job_id)

    async def _run_scan(self, job: ScanJob) -> None:
        config = job.config
        camera = get_camera(config.camera_id)
        if camera is None:
            job.status = ScanStatus.FAILED
            job.error = f"Unknown camera: {config.camera_id}"
            job.error_code = "unknown_camera"
            await self._notify_progress(job)
            return

        predicate = predicate_from_filters(
            config.file_extensions, config.images_only, config.name_contains,
        )
        options = ScanOptions.from_settings(
            fail_fast=config.fail_fast,
            include_matching_folders=config.include_matching_folders,
            max_depth=config.max_depth,
        )

        job.status = ScanStatus.RUNNING
        await self._notify_progress(job)
        logger.info(f"[{job.id}] Scanning camera {camera.name}")

        handle = self._scanner.scan(camera, predicate, options=options)
        self._handles[job.id] = handle
        waiter = asyncio.ensure_future(handle.wait())
        try:
            # Publish progress while the scan runs; the outcome itself arrives once.
            while not waiter.done():
                await asyncio.wait({waiter}, timeout=PROGRESS_INTERVAL)
                job.progress = handle.progress
                await self._notify_progress(job)
            outcome = waiter.result()
        except asyncio.CancelledError:
            handle.cancel()
            outcome = await handle.wait()
        finally:
            self._handles.pop(job.id, None)

        self._record_outcome(job, outcome)
        await self._notify_progress(job)

    def _record_outcome(self, job: ScanJob, outcome: ScanOutcome) -> None:
        job.progress = outcome.progress
        job.completed_at = datetime.now(tz=timezone.utc)
        job.branch_errors = [
            BranchError(path=f.path, error=str(f.error)) for f in outcome.branch_errors
        ]
        if outcome.ok:
            self._results[job.id] = sorted(outcome.items, key=lambda i: i.path)
            job.status = ScanStatus.COMPLETED
            logger.info(
                f"[{job.id}] Done: {len(outcome.items)} matches, "
                f"{len(outcome.branch_errors)} unreadable folders"
            )
        elif isinstance(outcome.error, ScanCancelledError):
            job.status = ScanStatus.CANCELLED
        else:
            job.status = ScanStatus.FAILED
            job.error = str(outcome.error)
            job.error_code = outcome.error.code

    async def _notify_progress(self, job: ScanJob) -> None:
        listeners = self._progress_listeners.get(job.id, [])
        for cb in listeners:
            try:
                await cb(job)
            except Exception:
                logger.exception(f"[{job.id}] Progress listener failed")

    def get_result_stats(self, job_id: str) -> dict:
        files = self._results.get(job_id, [])
        total_size = sum(f.size or 0 for f in files)
        by_storage = {}
        by_extension = {}
        for f in files:
            by_storage[f.storage_id] = by_storage.get(f.storage_id, 0) + 1
            ext = f.extension or "(no ext)"
            by_extension[ext] = by_extension.get(ext, 0) + 1

        return {
            "total_files": len(files),
            "total_size": total_size,
            "by_storage": by_storage,
            "by_extension": by_extension,
        }


# Singleton
scan_manager = ScanManager()
