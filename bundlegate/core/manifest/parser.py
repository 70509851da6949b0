from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from . import constants as C
from .clauses import NativeLibraryClause, parse_native_code_header, parse_package_header
from .declarations import (
    DynamicImportDeclaration,
    ExportDeclaration,
    ImportDeclaration,
    build_dynamic_imports,
    build_exports,
    build_imports,
)
from .errors import MalformedManifest, MalformedVersion
from .native import ClauseMatcher, ResolvedNativeLibrary, resolve_libraries, select_native_clause
from .normalize import normalize_r3, normalize_r4
from .version import Version

_log = logging.getLogger("bundlegate.manifest")


class ManifestParser:
    """
    Validated, normalized view of one bundle's manifest headers.

    Construction either succeeds completely or raises a ManifestError; there is
    no partially built parser. Native clause selection runs lazily against the
    resolver given here (or the detected host platform when none is given).
    """

    def __init__(
        self,
        headers: Mapping[str, str],
        resolver: Optional[ClauseMatcher] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._headers: Mapping[str, str] = MappingProxyType(dict(headers or {}))
        self._resolver = resolver
        self._logger = logger or _log

        manifest_version = self.get(C.BUNDLE_MANIFESTVERSION)
        if manifest_version is not None and manifest_version != C.MANIFEST_VERSION_MODERN:
            raise MalformedManifest(
                f"Unknown '{C.BUNDLE_MANIFESTVERSION}' value: {manifest_version}",
                data={"header": C.BUNDLE_MANIFESTVERSION, "value": manifest_version},
            )

        self._bundle_version: Optional[Version] = None
        raw_version = self.get(C.BUNDLE_VERSION)
        if raw_version is not None:
            try:
                self._bundle_version = Version.parse(raw_version)
            except MalformedVersion as exc:
                # Legacy bundles never had to follow the version syntax.
                if self.manifest_version == C.MANIFEST_VERSION_MODERN:
                    raise MalformedManifest(
                        f"Invalid '{C.BUNDLE_VERSION}' value: {raw_version}",
                        data={"header": C.BUNDLE_VERSION, "value": raw_version},
                    ) from exc

        self._exports: Tuple[ExportDeclaration, ...] = build_exports(
            parse_package_header(self.get(C.EXPORT_PACKAGE)), self._logger
        )
        self._imports: Tuple[ImportDeclaration, ...] = build_imports(
            parse_package_header(self.get(C.IMPORT_PACKAGE))
        )
        self._dynamics: Tuple[DynamicImportDeclaration, ...] = build_dynamic_imports(
            parse_package_header(self.get(C.DYNAMICIMPORT_PACKAGE))
        )

        clauses = parse_native_code_header(self.get(C.BUNDLE_NATIVECODE))
        self._libraries_optional = bool(clauses) and clauses[-1].is_optional_marker
        self._library_clauses: Tuple[NativeLibraryClause, ...] = (
            clauses[:-1] if self._libraries_optional else clauses
        )

        self._symbolic_name: Optional[str] = None
        if self.manifest_version == C.MANIFEST_VERSION_MODERN:
            self._symbolic_name = self._parse_symbolic_name()
            self._exports = normalize_r4(self._exports, self._symbolic_name, self._bundle_version)
        else:
            self._exports, self._imports = normalize_r3(self._exports, self._imports, self._dynamics)

    def _parse_symbolic_name(self) -> Optional[str]:
        raw = self.get(C.BUNDLE_SYMBOLICNAME)
        if raw is None:
            return None
        clauses = parse_package_header(raw)
        return clauses[0].name if clauses else None

    # ------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------
    def get(self, key: str) -> Optional[str]:
        return self._headers.get(key)

    @property
    def headers(self) -> Mapping[str, str]:
        return self._headers

    @property
    def manifest_version(self) -> str:
        v = self.get(C.BUNDLE_MANIFESTVERSION)
        return C.MANIFEST_VERSION_LEGACY if v is None else v

    @property
    def symbolic_name(self) -> Optional[str]:
        return self._symbolic_name

    @property
    def bundle_version(self) -> Optional[Version]:
        return self._bundle_version

    @property
    def exports(self) -> Tuple[ExportDeclaration, ...]:
        return self._exports

    @property
    def imports(self) -> Tuple[ImportDeclaration, ...]:
        return self._imports

    @property
    def dynamic_imports(self) -> Tuple[DynamicImportDeclaration, ...]:
        return self._dynamics

    @property
    def library_clauses(self) -> Tuple[NativeLibraryClause, ...]:
        return self._library_clauses

    @property
    def libraries_optional(self) -> bool:
        return self._libraries_optional

    # ------------------------------------------------------------
    # Native libraries
    # ------------------------------------------------------------
    def _matcher(self) -> ClauseMatcher:
        if self._resolver is None:
            from bundlegate.core.platform.resolver import PlatformMatcher

            return PlatformMatcher.from_environment()
        return self._resolver

    def selected_library_clause(self) -> Optional[NativeLibraryClause]:
        if not self._library_clauses:
            return None
        return select_native_clause(self._library_clauses, self._matcher(), self._libraries_optional)

    def get_libraries(self, revision: Any) -> Optional[Tuple[ResolvedNativeLibrary, ...]]:
        """
        Native libraries of the selected clause, bound to `revision`.

        Returns None when the manifest has no native code or the optional
        clause applies. Raises NoMatchingNativeClause when native code is
        mandatory and no clause matches the platform.
        """
        clause = self.selected_library_clause()
        if clause is None:
            return None
        return resolve_libraries(revision, clause)

    # ------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------
    def describe(self, revision: Any = None, *, include_libraries: bool = True) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "manifest_version": self.manifest_version,
            "symbolic_name": self.symbolic_name,
            "bundle_version": str(self.bundle_version) if self.bundle_version is not None else None,
            "exports": [_render_declaration(e) for e in self.exports],
            "imports": [_render_declaration(i) for i in self.imports],
            "dynamic_imports": [_render_declaration(d) for d in self.dynamic_imports],
            "native_clauses": [_render_clause(c) for c in self.library_clauses],
            "native_optional": self.libraries_optional,
        }
        if include_libraries:
            libs = self.get_libraries(revision)
            out["libraries"] = None if libs is None else [lib.entry for lib in libs]
        return out


def _render_declaration(decl) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "name": decl.name,
        "directives": {d.name: d.value for d in decl.directives},
        "attributes": {a.name: str(a.value) for a in decl.attributes},
    }
    if isinstance(decl, ImportDeclaration):
        out["version_range"] = str(decl.version_range)
    return out


def _render_clause(clause: NativeLibraryClause) -> Dict[str, Any]:
    return {
        "library_files": list(clause.library_files or ()),
        "os_names": list(clause.os_names),
        "processors": list(clause.processors),
        "os_versions": list(clause.os_versions),
        "languages": list(clause.languages),
        "selection_filter": clause.selection_filter,
    }
