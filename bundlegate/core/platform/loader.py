"""
Platform property overrides.

Reads an optional YAML/JSON file of platform properties and lays it over the
detected host values. This allows pinning the platform that Bundle-NativeCode
clauses are matched against without code changes.

Override file format (YAML or JSON):
    org.osgi.framework.os.name: Linux
    org.osgi.framework.processor: x86-64
    org.osgi.framework.os.version: 5.15.0

Environment variable:
    BUNDLEGATE_PLATFORM_FILE: path to the override file (optional).
    Default search path: <project_root>/platform_overrides.yaml
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional

import yaml

_log = logging.getLogger("bundlegate.platform")


def _parse_override_dict(raw: dict) -> Dict[str, str]:
    """Keep scalar entries as strings; skip nested or null values."""
    out: Dict[str, str] = {}
    for key, value in raw.items():
        k = str(key).strip()
        if not k:
            continue
        if value is None or isinstance(value, (dict, list)):
            _log.warning("Skipping invalid platform property %r (expected a scalar value)", key)
            continue
        out[k] = str(value).strip()
    return out


def load_platform_overrides(path: Optional[Path] = None) -> Dict[str, str]:
    """
    Load platform property overrides from a YAML or JSON file.

    Returns an empty dict if the file is absent, not readable, or malformed.
    The caller keeps the detected host properties in that case.
    """
    resolved = _resolve_path(path)
    if resolved is None or not resolved.exists():
        return {}

    try:
        raw_text = resolved.read_text(encoding="utf-8")
    except OSError as exc:
        _log.warning("Cannot read platform override file %s: %s", resolved, exc)
        return {}

    # Try JSON first, YAML second
    try:
        data = json.loads(raw_text)
    except json.JSONDecodeError:
        try:
            data = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            _log.warning("Failed to parse platform file %s as JSON or YAML: %s", resolved, exc)
            return {}

    if not isinstance(data, dict):
        _log.warning("Platform override file %s must be a flat mapping, got %s", resolved, type(data).__name__)
        return {}

    overrides = _parse_override_dict(data)
    if overrides:
        _log.info("Loaded %d platform overrides from %s", len(overrides), resolved)
    return overrides


def _resolve_path(path: Optional[Path]) -> Optional[Path]:
    """Determine the override file path from argument or env var or default."""
    if path is not None:
        return Path(path)
    env_path = os.getenv("BUNDLEGATE_PLATFORM_FILE", "").strip()
    if env_path:
        return Path(env_path)
    project_root = Path(__file__).resolve().parents[3]
    return project_root / "platform_overrides.yaml"
