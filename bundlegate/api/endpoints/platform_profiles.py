from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, HTTPException

from bundlegate.core.platform.registry import PlatformProfileRegistry


router = APIRouter(prefix="/api/v1/platform-profiles", tags=["platform_profiles"])

PROJECT_ROOT = Path(__file__).resolve().parents[3]


@router.get("/")
def list_profiles():
    reg = PlatformProfileRegistry(PROJECT_ROOT)
    return {
        "profiles": reg.list_names(),
    }


@router.get("/{name}")
def get_profile(name: str):
    reg = PlatformProfileRegistry(PROJECT_ROOT)
    profile = reg.get(name)
    if profile is None:
        raise HTTPException(status_code=404, detail="Platform profile not found")
    return profile.model_dump()
