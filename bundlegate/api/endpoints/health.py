from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter

from bundlegate.core.manifest import constants as C
from bundlegate.core.observability.metrics import inc_named
from bundlegate.core.platform.registry import PlatformProfileRegistry
from bundlegate.core.platform.resolver import PlatformMatcher

router = APIRouter()

PROJECT_ROOT = Path(__file__).resolve().parents[3]


# ------------------------------------------------------------
# Unversioned health
# ------------------------------------------------------------
@router.get("/health/live")
async def live():
    inc_named("health_live")
    return {"status": "ok"}


# ------------------------------------------------------------
# Versioned health
# ------------------------------------------------------------
@router.get("/api/v1/health/live")
def liveness():
    inc_named("health_live")
    return {"status": "ok"}


@router.get("/api/v1/health/ready")
def readiness():
    """Ready once profiles load and the environment platform resolves."""
    inc_named("health_ready")
    profiles = PlatformProfileRegistry(PROJECT_ROOT).list_names()
    matcher = PlatformMatcher.from_environment(PROJECT_ROOT)
    return {
        "status": "ready",
        "platform_profiles": len(profiles),
        "platform": {
            "os_name": matcher.get(C.FRAMEWORK_OS_NAME),
            "processor": matcher.get(C.FRAMEWORK_PROCESSOR),
        },
    }
