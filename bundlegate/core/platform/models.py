from __future__ import annotations

from pydantic import BaseModel, Field
from typing import Dict, Literal, Optional


OsFamily = Literal["linux", "windows", "macos", "freebsd", "solaris", "other"]


class PlatformProfile(BaseModel):
    """A named set of platform properties used to match Bundle-NativeCode clauses."""

    name: str
    os_name: str
    os_version: str = "0.0.0"
    processor: str
    language: str = "en"
    family: OsFamily = "other"

    # Extra properties visible to selection filters.
    properties: Dict[str, str] = Field(default_factory=dict)

    description: Optional[str] = None
