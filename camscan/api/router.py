"""Aggregate all API sub-routers."""

from fastapi import APIRouter

from . import cameras, scan, results, ws

api_router = APIRouter()

api_router.include_router(cameras.router)
api_router.include_router(scan.router)
api_router.include_router(results.router)
api_router.include_router(ws.router)
