import pytest

from bundlegate.core.manifest import ManifestParser
from bundlegate.core.manifest.errors import MalformedManifest
from bundlegate.core.manifest.version import Version


def test_absent_manifest_version_is_legacy():
    p = ManifestParser({})
    assert p.manifest_version == "1"


@pytest.mark.parametrize("value", ["1", "3", "2.0", " 2"])
def test_only_version_two_may_be_declared(value):
    with pytest.raises(MalformedManifest) as exc:
        ManifestParser({"Bundle-ManifestVersion": value})
    assert value in str(exc.value)


def test_legacy_tolerates_bad_bundle_version():
    p = ManifestParser({"Bundle-Version": "not a version"})
    assert p.bundle_version is None


def test_modern_rejects_bad_bundle_version():
    with pytest.raises(MalformedManifest):
        ManifestParser(
            {
                "Bundle-ManifestVersion": "2",
                "Bundle-SymbolicName": "com.example",
                "Bundle-Version": "1.x",
            }
        )


def test_bundle_version_is_parsed():
    p = ManifestParser({"Bundle-Version": "1.2.3.final"})
    assert p.bundle_version == Version(1, 2, 3, "final")


def test_headers_are_read_only_and_case_preserved():
    p = ManifestParser({"Bundle-Name": "Example"})
    assert p.get("Bundle-Name") == "Example"
    assert p.get("bundle-name") is None
    with pytest.raises(TypeError):
        p.headers["Bundle-Name"] = "x"


def test_round_trip_descriptor_without_native_code():
    p = ManifestParser({"Export-Package": "a.b", "Import-Package": "c.d"})
    assert len(p.exports) == 1
    assert len(p.imports) == 2
    assert p.get_libraries("rev-1") is None

    same = ManifestParser({"Export-Package": "a.b", "Import-Package": "a.b"})
    assert len(same.imports) == 1
