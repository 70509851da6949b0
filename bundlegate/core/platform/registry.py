from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional
import json
import logging

import yaml
from pydantic import ValidationError

from .models import PlatformProfile
from .builtins import builtin_profiles

_log = logging.getLogger("bundlegate.platform")


class PlatformProfileRegistry:
    """Loads deterministic platform profiles.

    Resolution order:
      1) Built-in profiles (always present)
      2) Optional templates/platform_profiles/*.json|*.yaml (override by name)
    """

    def __init__(self, project_root: Path):
        self.project_root = project_root
        self._profiles: Dict[str, PlatformProfile] = {}
        self._load_all()

    def _load_all(self) -> None:
        self._profiles = {p.name: p for p in builtin_profiles()}

        templates_dir = self.project_root / "templates" / "platform_profiles"
        if not templates_dir.exists():
            return

        for p in sorted(templates_dir.iterdir()):
            if p.suffix not in (".json", ".yaml", ".yml"):
                continue
            try:
                text = p.read_text(encoding="utf-8")
                data = json.loads(text) if p.suffix == ".json" else yaml.safe_load(text)
                profile = PlatformProfile(**data)
            except (OSError, ValueError, TypeError, yaml.YAMLError, ValidationError) as exc:
                # Invalid optional files are skipped; built-ins stay authoritative.
                _log.warning("Skipping invalid platform profile %s: %s", p, exc)
                continue
            self._profiles[profile.name] = profile

    def list_names(self) -> list[str]:
        return sorted(self._profiles.keys())

    def get(self, name: str) -> Optional[PlatformProfile]:
        return self._profiles.get(name)
