"""Tests for scan job orchestration."""

import asyncio

import pytest

from camscan.cameras.registry import register_camera, unregister_camera
from camscan.models import ScanConfig, ScanStatus
from camscan.services.scan_manager import ScanManager

from conftest import FakeCamera


@pytest.fixture
def camera(card_tree):
    camera = FakeCamera(card_tree, camera_id="manager-cam", fail=["StorageA/MISC"])
    register_camera(camera)
    yield camera
    unregister_camera(camera.camera_id)


def run_job(manager: ScanManager, config: ScanConfig):
    async def run():
        job = manager.create_job(config)
        await manager.start_scan(job.id)
        return await manager.wait(job.id)

    return asyncio.run(run())


class TestScanManager:
    def test_completed_job_stores_sorted_results(self, camera):
        manager = ScanManager()
        job = run_job(manager, ScanConfig(camera_id="manager-cam", file_extensions=["jpg"]))

        assert job.status == ScanStatus.COMPLETED
        paths = [f.path for f in manager.get_results(job.id)]
        assert paths == sorted(paths)
        assert len(paths) == 4
        assert [e.path for e in job.branch_errors] == ["StorageA/MISC"]
        assert job.completed_at is not None

    def test_fail_fast_job_fails(self, camera):
        manager = ScanManager()
        job = run_job(manager, ScanConfig(camera_id="manager-cam", fail_fast=True))

        assert job.status == ScanStatus.FAILED
        assert job.error_code == "listing_failed"
        assert manager.get_results(job.id) == []

    def test_unknown_camera(self):
        manager = ScanManager()
        job = run_job(manager, ScanConfig(camera_id="nope"))

        assert job.status == ScanStatus.FAILED
        assert job.error_code == "unknown_camera"

    def test_structural_error_code(self):
        register_camera(FakeCamera({}, camera_id="empty-cam"))
        try:
            manager = ScanManager()
            job = run_job(manager, ScanConfig(camera_id="empty-cam"))
        finally:
            unregister_camera("empty-cam")

        assert job.error_code == "no_storage_devices"

    def test_cancel_running_job(self, card_tree):
        register_camera(FakeCamera(card_tree, camera_id="hang-cam", hang=["StorageB"]))
        manager = ScanManager()

        async def run():
            job = manager.create_job(ScanConfig(camera_id="hang-cam"))
            await manager.start_scan(job.id)
            await asyncio.sleep(0.05)
            assert await manager.cancel_scan(job.id)
            assert not await manager.cancel_scan(job.id)
            return job

        try:
            job = asyncio.run(run())
        finally:
            unregister_camera("hang-cam")

        assert job.status == ScanStatus.CANCELLED
        assert manager.get_results(job.id) == []

    def test_cancel_after_scan_finished_reports_false(self, camera):
        manager = ScanManager()
        calls = []

        async def run():
            blocked = asyncio.Event()
            gate = asyncio.Event()

            async def slow_listener(job):
                calls.append(job.status)
                # The second notification comes after the scan has finished,
                # before the job records its outcome.
                if len(calls) == 2:
                    blocked.set()
                    await gate.wait()

            job = manager.create_job(ScanConfig(camera_id="manager-cam"))
            manager.add_progress_listener(job.id, slow_listener)
            await manager.start_scan(job.id)
            await blocked.wait()

            cancel = asyncio.create_task(manager.cancel_scan(job.id))
            await asyncio.sleep(0.01)
            gate.set()
            return job, await cancel

        job, cancelled = asyncio.run(run())

        assert cancelled is False
        assert job.status == ScanStatus.COMPLETED

    def test_progress_listeners_see_final_state(self, camera):
        manager = ScanManager()
        seen = []

        async def listener(job):
            seen.append(job.status)

        async def run():
            job = manager.create_job(ScanConfig(camera_id="manager-cam"))
            manager.add_progress_listener(job.id, listener)
            await manager.start_scan(job.id)
            return await manager.wait(job.id)

        asyncio.run(run())

        assert seen[0] == ScanStatus.RUNNING
        assert seen[-1] == ScanStatus.COMPLETED

    def test_result_stats(self, camera):
        manager = ScanManager()
        job = run_job(manager, ScanConfig(camera_id="manager-cam"))
        stats = manager.get_result_stats(job.id)

        assert stats["total_files"] == 6
        assert stats["by_storage"] == {"StorageA": 5, "StorageB": 1}
        assert stats["by_extension"]["jpg"] == 4
        assert stats["total_size"] == 1000 + 5000 + 1200 + 900 + 90000 + 800
