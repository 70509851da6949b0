from fastapi import APIRouter
from bundlegate.core.observability.metrics import snapshot_named, snapshot_requests

router = APIRouter()

_PARSE_PREFIX = "manifest_parse|"


def _render():
    req = snapshot_requests()
    named = snapshot_named()
    body = {"requests": req}
    body.update(named)

    # Parse outcomes grouped by result ("ok" or error code)
    body["manifest_parses"] = {
        k[len(_PARSE_PREFIX):]: v for k, v in named.items() if k.startswith(_PARSE_PREFIX)
    }

    if "requests_total" in req:
        body["requests_total"] = req["requests_total"]

    return body


@router.get("/api/v1/metrics/snapshot")
def metrics_snapshot():
    return _render()
