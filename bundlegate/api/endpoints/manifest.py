from __future__ import annotations

import logging
from pathlib import Path

from fastapi import APIRouter, HTTPException

from bundlegate.api.schemas.manifest import ManifestDescriptorResponse, ManifestParseRequest
from bundlegate.core.manifest import ManifestError, ManifestParser
from bundlegate.core.manifest import constants as C
from bundlegate.core.observability.metrics import record_parse
from bundlegate.core.platform.registry import PlatformProfileRegistry
from bundlegate.core.platform.resolver import PlatformMatcher

router = APIRouter(prefix="/api/v1/manifest", tags=["manifest"])

PROJECT_ROOT = Path(__file__).resolve().parents[3]

log = logging.getLogger("bundlegate.manifest")


def _matcher_for(req: ManifestParseRequest) -> PlatformMatcher:
    if req.platform_profile:
        profile = PlatformProfileRegistry(PROJECT_ROOT).get(req.platform_profile)
        if profile is None:
            raise HTTPException(status_code=404, detail="platform_profile_not_found")
        return PlatformMatcher.from_profile(profile, overrides=req.properties)
    if req.properties:
        return PlatformMatcher(req.properties)
    return PlatformMatcher.from_environment(PROJECT_ROOT)


@router.post("/parse", response_model=ManifestDescriptorResponse)
def parse_manifest(req: ManifestParseRequest):
    matcher = _matcher_for(req)
    manifest_version = req.headers.get(C.BUNDLE_MANIFESTVERSION)
    if manifest_version is None:
        manifest_version = C.MANIFEST_VERSION_LEGACY

    try:
        parser = ManifestParser(req.headers, resolver=matcher)
        body = parser.describe(req.revision)
    except ManifestError as exc:
        record_parse(manifest_version, exc.code)
        log.info("manifest rejected code=%s message=%s", exc.code, exc.message)
        raise HTTPException(status_code=422, detail=exc.to_dict())

    record_parse(manifest_version, "ok")
    return body
