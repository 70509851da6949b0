from __future__ import annotations

from .models import PlatformProfile


def builtin_profiles() -> list[PlatformProfile]:
    # Deterministic reference platforms. Host detection is separate.
    return [
        PlatformProfile(
            name="linux_x86_64",
            os_name="Linux",
            os_version="6.1.0",
            processor="x86-64",
            family="linux",
            description="Linux on 64-bit x86",
        ),
        PlatformProfile(
            name="linux_aarch64",
            os_name="Linux",
            os_version="6.1.0",
            processor="AArch64",
            family="linux",
            description="Linux on 64-bit ARM",
        ),
        PlatformProfile(
            name="windows_x86_64",
            os_name="Windows 10",
            os_version="10.0.0",
            processor="x86-64",
            family="windows",
            description="Windows 10 on 64-bit x86",
        ),
        PlatformProfile(
            name="macos_aarch64",
            os_name="Mac OS X",
            os_version="14.0.0",
            processor="AArch64",
            family="macos",
            description="macOS on Apple silicon",
        ),
    ]
