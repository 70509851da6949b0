from .models import PlatformProfile
from .registry import PlatformProfileRegistry
from .loader import load_platform_overrides
from .resolver import PlatformMatcher, PropertyResolver, detect_host_properties

__all__ = [
    "PlatformProfile",
    "PlatformProfileRegistry",
    "load_platform_overrides",
    "PlatformMatcher",
    "PropertyResolver",
    "detect_host_properties",
]
