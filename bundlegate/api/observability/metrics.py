from __future__ import annotations

import re
from prometheus_client import Counter, Histogram


def normalize_path(path: str) -> str:
    """Reduce high-cardinality paths for metrics labels."""
    p = path or "/"

    # ints
    p = re.sub(r"/\d+", "/:id", p)

    # Platform profile names
    p = re.sub(r"^(/api/v1/platform-profiles)/[^/]+$", r"\1/:name", p)

    return p


HTTP_REQUESTS_TOTAL = Counter(
    "bundlegate_http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "bundlegate_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
)
