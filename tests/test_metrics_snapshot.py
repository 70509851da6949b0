from fastapi.testclient import TestClient
from bundlegate.api.main import app


def test_metrics_snapshot_endpoint_exists():
    c = TestClient(app)
    # generate some traffic
    c.get("/health/live")
    r = c.get("/api/v1/metrics/snapshot")
    assert r.status_code == 200
    body = r.json()
    assert "requests" in body
    assert isinstance(body["requests"], dict)
    assert body["requests_total"] >= 1
    assert body["health_live"] >= 1


def test_metrics_snapshot_groups_parse_outcomes():
    c = TestClient(app)
    c.post("/api/v1/manifest/parse", json={"headers": {}, "properties": {"org.osgi.framework.os.name": "Linux"}})
    body = c.get("/api/v1/metrics/snapshot").json()
    assert body["manifest_parses"].get("ok", 0) >= 1
    assert body["manifest_parses_total"] >= 1
