def test_health_live(client):
    assert client.get("/health/live").json() == {"status": "ok"}
    assert client.get("/api/v1/health/live").json() == {"status": "ok"}


def test_health_ready_reports_platform(client, monkeypatch):
    monkeypatch.setenv("BUNDLEGATE_PLATFORM_PROFILE", "linux_aarch64")
    r = client.get("/api/v1/health/ready")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ready"
    assert body["platform_profiles"] >= 4
    assert body["platform"] == {"os_name": "Linux", "processor": "AArch64"}
