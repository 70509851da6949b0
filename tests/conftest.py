import os

import pytest
from fastapi.testclient import TestClient

from bundlegate.api.main import app
from bundlegate.core.manifest import constants as C
from bundlegate.core.platform.resolver import PlatformMatcher


@pytest.fixture(scope="session", autouse=True)
def _force_test_env():
    # Make runtime behave deterministically in tests
    os.environ.setdefault("BUNDLEGATE_ENV", "dev")


@pytest.fixture(autouse=True)
def _no_platform_overrides(monkeypatch, tmp_path):
    # Never pick up a platform_overrides.yaml from the working tree
    monkeypatch.setenv("BUNDLEGATE_PLATFORM_FILE", str(tmp_path / "no_overrides.yaml"))
    monkeypatch.delenv("BUNDLEGATE_PLATFORM_PROFILE", raising=False)


@pytest.fixture()
def client():
    return TestClient(app)


@pytest.fixture()
def linux_props():
    return {
        C.FRAMEWORK_OS_NAME: "Linux",
        C.FRAMEWORK_OS_VERSION: "5.15.0",
        C.FRAMEWORK_PROCESSOR: "x86_64",
        C.FRAMEWORK_LANGUAGE: "en",
    }


@pytest.fixture()
def linux_matcher(linux_props):
    return PlatformMatcher(linux_props)
