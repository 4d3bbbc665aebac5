"""Results API endpoints."""

from typing import Optional
from fastapi import APIRouter, HTTPException, Query

from ..services.scan_manager import scan_manager

router = APIRouter(prefix="/results", tags=["results"])


@router.get("/{job_id}")
async def get_results(
    job_id: str,
    offset: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    search: Optional[str] = None,
    extension: Optional[str] = None,
    storage: Optional[str] = None,
    sort_by: str = Query("path", pattern="^(path|name|size|modified|extension|storage)$"),
    sort_order: str = Query("asc", pattern="^(asc|desc)$"),
):
    job = scan_manager.get_job(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Scan job not found")

    files = scan_manager.get_results(job_id)

    # Filter
    if search:
        search_lower = search.lower()
        files = [f for f in files if search_lower in f.path.lower()]
    if extension:
        ext = extension.lower().lstrip(".")
        files = [f for f in files if f.extension == ext]
    if storage:
        files = [f for f in files if f.storage_id == storage]

    total = len(files)

    # Sort
    sort_key_map = {
        "path": lambda f: f.path.lower(),
        "name": lambda f: f.name.lower(),
        "size": lambda f: f.size or 0,
        "modified": lambda f: f.modified.timestamp() if f.modified else 0.0,
        "extension": lambda f: f.extension,
        "storage": lambda f: f.storage_id,
    }
    key_fn = sort_key_map[sort_by]
    files = sorted(files, key=key_fn, reverse=sort_order == "desc")

    # Paginate
    page = files[offset:offset + limit]

    return {
        "job_id": job_id,
        "total": total,
        "offset": offset,
        "limit": limit,
        "files": page,
    }


@router.get("/{job_id}/stats")
async def get_result_stats(job_id: str):
    job = scan_manager.get_job(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Scan job not found")
    return scan_manager.get_result_stats(job_id)
