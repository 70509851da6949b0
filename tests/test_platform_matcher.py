from bundlegate.core.manifest import constants as C
from bundlegate.core.manifest.clauses import parse_native_code_header
from bundlegate.core.manifest.version import Version
from bundlegate.core.platform.resolver import (
    PlatformMatcher,
    detect_host_properties,
    normalize_os_name,
    normalize_os_version,
    normalize_processor,
)


def _one(header):
    (clause,) = parse_native_code_header(header)
    return clause


def test_aliases():
    assert normalize_os_name("Windows 10") == "win32"
    assert normalize_os_name("Mac OS X") == normalize_os_name("darwin")
    assert normalize_processor("amd64") == normalize_processor("x86_64") == "x86-64"
    assert normalize_processor("i686") == "x86"


def test_os_version_normalization():
    assert normalize_os_version("6.1.0-13-amd64") == Version(6, 1, 0)
    assert normalize_os_version("10") == Version(10, 0, 0)
    assert normalize_os_version("garbage") == Version(0, 0, 0)


def test_undeclared_fields_always_match(linux_matcher):
    assert linux_matcher.match(_one("lib/a.so"))


def test_os_name_and_processor(linux_matcher):
    assert linux_matcher.match(_one("lib/a.so;osname=linux;processor=amd64"))
    assert linux_matcher.match(_one("lib/a.so;osname=Win32;osname=Linux"))
    assert not linux_matcher.match(_one("lib/a.so;osname=Linux;processor=aarch64"))
    assert not linux_matcher.match(_one("lib/a.dll;osname=Windows XP"))


def test_os_version_ranges(linux_matcher):
    assert linux_matcher.match(_one('lib/a.so;osversion="[5.0,6.0)"'))
    assert linux_matcher.match(_one('lib/a.so;osversion="[2.6,3.0)";osversion=5.10'))
    assert not linux_matcher.match(_one('lib/a.so;osversion="[6.0,7.0)"'))


def test_language(linux_matcher):
    assert linux_matcher.match(_one("lib/a.so;language=EN"))
    assert not linux_matcher.match(_one("lib/a.so;language=de"))


def test_selection_filter(linux_props):
    m = PlatformMatcher({**linux_props, "vendor": "acme"})
    assert m.match(_one('lib/a.so;selection-filter="(vendor=acme)"'))
    assert not m.match(_one('lib/a.so;selection-filter="(vendor=other)"'))
    assert m.match(_one('lib/a.so;selection-filter="(org.osgi.framework.os.name=Linux)"'))


def test_detect_host_properties_has_every_key():
    props = detect_host_properties()
    for key in (C.FRAMEWORK_OS_NAME, C.FRAMEWORK_OS_VERSION, C.FRAMEWORK_PROCESSOR, C.FRAMEWORK_LANGUAGE):
        assert props[key]


def test_from_environment_uses_profile(monkeypatch):
    monkeypatch.setenv("BUNDLEGATE_PLATFORM_PROFILE", "windows_x86_64")
    m = PlatformMatcher.from_environment()
    assert m.get(C.FRAMEWORK_OS_NAME) == "Windows 10"
    assert m.match(_one("lib/foo.dll;osname=Win32;processor=x86-64"))


def test_from_environment_applies_override_file(monkeypatch, tmp_path):
    f = tmp_path / "platform.yaml"
    f.write_text("org.osgi.framework.processor: aarch64\nvendor: acme\n", encoding="utf-8")
    monkeypatch.setenv("BUNDLEGATE_PLATFORM_PROFILE", "linux_x86_64")
    monkeypatch.setenv("BUNDLEGATE_PLATFORM_FILE", str(f))
    m = PlatformMatcher.from_environment()
    assert m.get(C.FRAMEWORK_PROCESSOR) == "aarch64"
    assert m.get("vendor") == "acme"
    assert m.get(C.FRAMEWORK_OS_NAME) == "Linux"


def test_unknown_profile_falls_back_to_host(monkeypatch, caplog):
    monkeypatch.setenv("BUNDLEGATE_PLATFORM_PROFILE", "no_such_profile")
    m = PlatformMatcher.from_environment()
    assert m.get(C.FRAMEWORK_OS_NAME) == detect_host_properties()[C.FRAMEWORK_OS_NAME]
    assert "Unknown platform profile" in caplog.text
