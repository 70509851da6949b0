from .clauses import (
    Attribute,
    Directive,
    NativeLibraryClause,
    PackageClause,
    parse_native_code_header,
    parse_package_header,
)
from .declarations import DynamicImportDeclaration, ExportDeclaration, ImportDeclaration
from .errors import (
    ClauseSyntaxError,
    DuplicateDeclaration,
    MalformedManifest,
    MalformedVersion,
    ManifestError,
    MissingRequiredHeader,
    NoMatchingNativeClause,
    ReservedAttribute,
    ReservedNamespace,
    UnsupportedLegacySyntax,
)
from .native import ResolvedNativeLibrary, select_native_clause
from .parser import ManifestParser
from .version import Version, VersionRange

__all__ = [
    "Attribute",
    "Directive",
    "NativeLibraryClause",
    "PackageClause",
    "parse_native_code_header",
    "parse_package_header",
    "DynamicImportDeclaration",
    "ExportDeclaration",
    "ImportDeclaration",
    "ClauseSyntaxError",
    "DuplicateDeclaration",
    "MalformedManifest",
    "MalformedVersion",
    "ManifestError",
    "MissingRequiredHeader",
    "NoMatchingNativeClause",
    "ReservedAttribute",
    "ReservedNamespace",
    "UnsupportedLegacySyntax",
    "ResolvedNativeLibrary",
    "select_native_clause",
    "ManifestParser",
    "Version",
    "VersionRange",
]
