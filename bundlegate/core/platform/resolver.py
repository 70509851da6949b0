from __future__ import annotations

import locale
import logging
import os
import platform
import re
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Protocol

from bundlegate.core.manifest import constants as C
from bundlegate.core.manifest.clauses import NativeLibraryClause
from bundlegate.core.manifest.filters import parse_filter
from bundlegate.core.manifest.version import EMPTY_VERSION, Version, VersionRange

from .loader import load_platform_overrides
from .models import PlatformProfile
from .registry import PlatformProfileRegistry

_log = logging.getLogger("bundlegate.platform")

PROJECT_ROOT = Path(__file__).resolve().parents[3]


class PropertyResolver(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...


_OS_ALIASES = {
    "linux": "linux",
    "mac os x": "macosx",
    "macosx": "macosx",
    "macos": "macosx",
    "darwin": "macosx",
    "sunos": "solaris",
    "solaris": "solaris",
    "freebsd": "freebsd",
    "netbsd": "netbsd",
    "openbsd": "openbsd",
    "aix": "aix",
    "hp-ux": "hpux",
    "hpux": "hpux",
    "os/2": "os2",
    "os2": "os2",
    "qnx": "qnx",
    "procnto": "qnx",
}

_PROCESSOR_ALIASES = {
    "x86-64": "x86-64",
    "x86_64": "x86-64",
    "amd64": "x86-64",
    "em64t": "x86-64",
    "x86": "x86",
    "pentium": "x86",
    "i386": "x86",
    "i486": "x86",
    "i586": "x86",
    "i686": "x86",
    "aarch64": "aarch64",
    "arm64": "aarch64",
    "arm": "arm",
    "armv7l": "arm",
    "armv6l": "arm",
    "power": "powerpc",
    "powerpc": "powerpc",
    "ppc": "powerpc",
    "ppc64": "ppc64",
    "ppc64le": "ppc64le",
    "sparc": "sparc",
    "mips": "mips",
    "s390x": "s390x",
    "riscv64": "riscv64",
}

_OS_VERSION_RE = re.compile(r"^\s*(\d+)(?:\.(\d+))?(?:\.(\d+))?")


def normalize_os_name(value: str) -> str:
    v = (value or "").strip().lower()
    if v.startswith("win"):
        return "win32"
    return _OS_ALIASES.get(v, v)


def normalize_processor(value: str) -> str:
    v = (value or "").strip().lower()
    return _PROCESSOR_ALIASES.get(v, v)


def normalize_os_version(value: Optional[str]) -> Version:
    """Leading numeric part of a kernel/OS release string ("6.1.0-13-amd64" -> 6.1.0)."""
    m = _OS_VERSION_RE.match(value or "")
    if not m:
        return EMPTY_VERSION
    return Version(*(int(g) if g else 0 for g in m.groups()))


def _detect_language() -> str:
    lang = None
    try:
        lang = locale.getlocale()[0]
    except ValueError:
        lang = None
    if not lang:
        return "en"
    return lang.split("_", 1)[0].lower()


def detect_host_properties() -> Dict[str, str]:
    system = platform.system() or "unknown"
    if system == "Darwin":
        os_name = "Mac OS X"
        os_version = platform.mac_ver()[0] or platform.release()
    else:
        os_name = system
        os_version = platform.release()

    return {
        C.FRAMEWORK_OS_NAME: os_name,
        C.FRAMEWORK_OS_VERSION: str(normalize_os_version(os_version)),
        C.FRAMEWORK_PROCESSOR: platform.machine() or "unknown",
        C.FRAMEWORK_LANGUAGE: _detect_language(),
    }


def profile_properties(profile: PlatformProfile) -> Dict[str, str]:
    props = dict(profile.properties)
    props.update(
        {
            C.FRAMEWORK_OS_NAME: profile.os_name,
            C.FRAMEWORK_OS_VERSION: profile.os_version,
            C.FRAMEWORK_PROCESSOR: profile.processor,
            C.FRAMEWORK_LANGUAGE: profile.language,
        }
    )
    return props


class PlatformMatcher:
    """
    Matches Bundle-NativeCode clauses against a fixed set of platform properties.

    Each field a clause declares must match; fields it leaves out are ignored.
    Instances are immutable and safe to share between threads.
    """

    def __init__(self, properties: Mapping[str, str]):
        self._properties: Mapping[str, str] = MappingProxyType(dict(properties))

    @classmethod
    def from_profile(cls, profile: PlatformProfile, overrides: Optional[Mapping[str, str]] = None) -> "PlatformMatcher":
        props = profile_properties(profile)
        props.update(overrides or {})
        return cls(props)

    @classmethod
    def from_environment(cls, project_root: Optional[Path] = None) -> "PlatformMatcher":
        """
        Host platform, optionally replaced by BUNDLEGATE_PLATFORM_PROFILE and
        then patched with the property override file.
        """
        props = detect_host_properties()

        profile_name = (os.getenv("BUNDLEGATE_PLATFORM_PROFILE") or "").strip()
        if profile_name:
            registry = PlatformProfileRegistry(project_root or PROJECT_ROOT)
            profile = registry.get(profile_name)
            if profile is None:
                _log.warning("Unknown platform profile %r; using detected host properties", profile_name)
            else:
                props = profile_properties(profile)

        props.update(load_platform_overrides())
        return cls(props)

    @property
    def properties(self) -> Mapping[str, str]:
        return self._properties

    def get(self, key: str) -> Optional[str]:
        return self._properties.get(key)

    def match(self, clause: NativeLibraryClause) -> bool:
        if clause.os_names:
            current = normalize_os_name(self.get(C.FRAMEWORK_OS_NAME) or "")
            if not any(normalize_os_name(n) == current for n in clause.os_names):
                return False

        if clause.processors:
            current = normalize_processor(self.get(C.FRAMEWORK_PROCESSOR) or "")
            if not any(normalize_processor(p) == current for p in clause.processors):
                return False

        if clause.os_versions:
            current_version = normalize_os_version(self.get(C.FRAMEWORK_OS_VERSION))
            if not any(VersionRange.parse(r).includes(current_version) for r in clause.os_versions):
                return False

        if clause.languages:
            current = (self.get(C.FRAMEWORK_LANGUAGE) or "").strip().lower()
            if not any(lang.strip().lower() == current for lang in clause.languages):
                return False

        if clause.selection_filter:
            if not parse_filter(clause.selection_filter).matches(self._properties):
                return False

        return True
