from __future__ import annotations

import os

from fastapi import FastAPI

from bundlegate.api.endpoints import health
from bundlegate.api.endpoints import metrics as metrics_ep
from bundlegate.api.endpoints.manifest import router as manifest_router
from bundlegate.api.endpoints.platform_profiles import router as platform_profiles_router
from bundlegate.api.middleware.error_shaping import SafeErrorMiddleware
from bundlegate.api.middleware.request_context import RequestContextMiddleware


env = (os.getenv("BUNDLEGATE_ENV") or "dev").strip().lower()

# Interactive docs stay off in prod
app = FastAPI(
    title="bundlegate",
    description="Bundle manifest validation and normalization",
    version="0.1.0",
    docs_url=None if env == "prod" else "/docs",
    redoc_url=None if env == "prod" else "/redoc",
)

# Starlette reverses add_middleware order: the LAST call = OUTERMOST wrapper.
# Runtime order (outermost → innermost): SafeErrorMiddleware → RequestContext → handler
app.add_middleware(RequestContextMiddleware)
app.add_middleware(SafeErrorMiddleware)

app.include_router(health.router)
app.include_router(metrics_ep.router)
app.include_router(manifest_router)
app.include_router(platform_profiles_router)
