from __future__ import annotations

import logging
from typing import Callable, Dict, Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from bundlegate.core.manifest.errors import ManifestError

log = logging.getLogger("bundlegate.errors")


def _request_id(request: Request):
    return getattr(request.state, "request_id", None) or request.headers.get("x-request-id")


class SafeErrorMiddleware(BaseHTTPMiddleware):
    """
    Last line of error shaping.

    - ManifestError that escaped a handler -> 422 with its code, no traceback
    - anything else -> bare 500, traceback logged server-side only
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except ManifestError as e:
            rid = _request_id(request)
            log.warning("Manifest rejected code=%s rid=%s path=%s", e.code, rid, request.url.path)
            payload: Dict[str, Any] = {"detail": e.to_dict()}
            if rid:
                payload["request_id"] = rid
            return JSONResponse(status_code=422, content=payload)
        except Exception:
            rid = _request_id(request)
            log.exception("Unhandled error rid=%s path=%s", rid, request.url.path)
            payload = {"detail": "Internal Server Error"}
            if rid:
                payload["request_id"] = rid
            return JSONResponse(status_code=500, content=payload)
