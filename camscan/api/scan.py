"""Scan API endpoints."""

from fastapi import APIRouter, HTTPException

from ..cameras.registry import get_camera
from ..models.scan import ScanConfig
from ..services.scan_manager import scan_manager

router = APIRouter(prefix="/scan", tags=["scan"])


@router.post("/start")
async def start_scan(config: ScanConfig):
    if get_camera(config.camera_id) is None:
        raise HTTPException(status_code=404, detail="Camera not found")
    job = scan_manager.create_job(config)
    await scan_manager.start_scan(job.id)
    return {"job_id": job.id, "status": job.status}


@router.get("/jobs/{job_id}")
async def get_scan_job(job_id: str):
    job = scan_manager.get_job(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Scan job not found")
    return job


@router.post("/jobs/{job_id}/cancel")
async def cancel_scan(job_id: str):
    success = await scan_manager.cancel_scan(job_id)
    if not success:
        raise HTTPException(status_code=404, detail="Scan job not found or already finished")
    return {"cancelled": True}
