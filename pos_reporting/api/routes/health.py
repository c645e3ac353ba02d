"""Health and readiness endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from pos_reporting.core.config import Settings, get_settings

router = APIRouter()


@router.get("/", summary="Service health check")
def root(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    return {"status": "ok", "service": settings.app_name}


@router.get("/healthz", summary="Liveness check")
def health_check(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    return {"status": "ok", "service": settings.app_name}


@router.get("/readyz", summary="Readiness check")
def readiness_check(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    return {"status": "ready", "service": settings.app_name}
