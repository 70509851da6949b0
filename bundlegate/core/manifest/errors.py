from __future__ import annotations

from typing import Any, Dict, Optional


class ManifestError(Exception):
    """Base class for every manifest rejection. Construction never degrades."""

    code = "manifest.error"

    def __init__(self, message: str, *, data: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.data = data or {}

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data:
            out["data"] = dict(self.data)
        return out


class MalformedManifest(ManifestError):
    code = "manifest.malformed"


class ClauseSyntaxError(MalformedManifest):
    code = "manifest.clause_syntax"


class MalformedVersion(ManifestError, ValueError):
    code = "manifest.malformed_version"


class ReservedNamespace(ManifestError):
    code = "manifest.reserved_namespace"


class DuplicateDeclaration(ManifestError):
    code = "manifest.duplicate_declaration"


class UnsupportedLegacySyntax(ManifestError):
    code = "manifest.unsupported_legacy_syntax"


class MissingRequiredHeader(ManifestError):
    code = "manifest.missing_required_header"


class ReservedAttribute(ManifestError):
    code = "manifest.reserved_attribute"


class NoMatchingNativeClause(ManifestError):
    code = "manifest.no_matching_native_clause"
