"""Camera API endpoints."""

from fastapi import APIRouter, HTTPException

from ..cameras.registry import get_all_cameras, get_camera

router = APIRouter(prefix="/cameras", tags=["cameras"])


@router.get("")
async def list_cameras():
    return [await camera.check_availability() for camera in get_all_cameras().values()]


@router.get("/{camera_id}")
async def get_camera_info(camera_id: str):
    camera = get_camera(camera_id)
    if not camera:
        raise HTTPException(status_code=404, detail="Camera not found")
    return await camera.check_availability()


@router.get("/{camera_id}/storage")
async def list_storage_devices(camera_id: str):
    camera = get_camera(camera_id)
    if not camera:
        raise HTTPException(status_code=404, detail="Camera not found")
    try:
        return await camera.list_storage_devices()
    except OSError as e:
        raise HTTPException(status_code=503, detail=f"Cannot enumerate storage: {e}")
