"""
Compatibility passes run after declarations are built.

Legacy (manifest version 1) bundles assume a single class space: every export
implies an import of the same package, and every export may see every import.
Modern (manifest version 2) bundles get the implicit bundle-symbolic-name and
bundle-version attributes on each export.
"""
from __future__ import annotations

from typing import Dict, Optional, Sequence, Tuple, Union

from . import constants as C
from .clauses import Attribute, Directive
from .declarations import DynamicImportDeclaration, ExportDeclaration, ImportDeclaration
from .errors import MissingRequiredHeader, ReservedAttribute, UnsupportedLegacySyntax
from .version import EMPTY_VERSION, Version

_RESERVED_EXPORT_ATTRIBUTES = (C.BUNDLE_SYMBOLICNAME_ATTRIBUTE, C.BUNDLE_VERSION_ATTRIBUTE)


def _check_legacy_shape(decl: Union[ExportDeclaration, ImportDeclaration], kind: str) -> None:
    if decl.directives:
        raise UnsupportedLegacySyntax(
            f"R3 {kind}s cannot contain directives: {decl.name}",
            data={"package": decl.name},
        )
    attrs = decl.attributes
    if len(attrs) > 1 or (len(attrs) == 1 and attrs[0].name != C.VERSION_ATTRIBUTE):
        raise UnsupportedLegacySyntax(
            f"R3 {kind} syntax does not support attributes: {decl.name}",
            data={"package": decl.name, "attributes": [a.name for a in attrs]},
        )


def check_r3_declarations(
    exports: Sequence[ExportDeclaration],
    imports: Sequence[ImportDeclaration],
) -> None:
    for e in exports:
        _check_legacy_shape(e, "export")
    for i in imports:
        _check_legacy_shape(i, "import")
        if i.version_high is not None:
            raise UnsupportedLegacySyntax(
                f"R3 imports cannot declare a version range: {i.name}",
                data={"package": i.name, "version": str(i.version_range)},
            )


def imply_imports(
    exports: Sequence[ExportDeclaration],
    imports: Sequence[ImportDeclaration],
) -> Tuple[ImportDeclaration, ...]:
    """Existing imports first, then one import per export that has none."""
    merged: Dict[str, ImportDeclaration] = {i.name: i for i in imports}
    for e in exports:
        if e.name not in merged:
            merged[e.name] = ImportDeclaration.from_export(e)
    return tuple(merged.values())


def attach_uses(
    exports: Sequence[ExportDeclaration],
    imports: Sequence[ImportDeclaration],
) -> Tuple[ExportDeclaration, ...]:
    uses = Directive(C.USES_DIRECTIVE, ",".join(i.name for i in imports))
    return tuple(e.with_directives([uses]) for e in exports)


def check_r3_dynamic_imports(dynamics: Sequence[DynamicImportDeclaration]) -> None:
    for d in dynamics:
        if d.directives:
            raise UnsupportedLegacySyntax(
                f"R3 dynamic imports cannot contain directives: {d.name}",
                data={"package": d.name},
            )
        if d.attributes:
            raise UnsupportedLegacySyntax(
                f"R3 dynamic imports cannot contain attributes: {d.name}",
                data={"package": d.name},
            )


def normalize_r3(
    exports: Sequence[ExportDeclaration],
    imports: Sequence[ImportDeclaration],
    dynamics: Sequence[DynamicImportDeclaration],
) -> Tuple[Tuple[ExportDeclaration, ...], Tuple[ImportDeclaration, ...]]:
    """Returns (exports, imports) after the legacy pass."""
    check_r3_declarations(exports, imports)
    new_imports = imply_imports(exports, imports)
    new_exports = attach_uses(exports, new_imports)
    check_r3_dynamic_imports(dynamics)
    return new_exports, new_imports


def normalize_r4(
    exports: Sequence[ExportDeclaration],
    symbolic_name: Optional[str],
    bundle_version: Optional[Version],
) -> Tuple[ExportDeclaration, ...]:
    if not symbolic_name:
        raise MissingRequiredHeader(
            "R4 bundle manifests must include bundle symbolic name.",
            data={"header": C.BUNDLE_SYMBOLICNAME},
        )

    target = bundle_version if bundle_version is not None else EMPTY_VERSION
    out = []
    for e in exports:
        for a in e.attributes:
            if a.name in _RESERVED_EXPORT_ATTRIBUTES:
                raise ReservedAttribute(
                    f"Exports must not specify bundle symbolic name or bundle version: {e.name}",
                    data={"package": e.name, "attribute": a.name},
                )
        out.append(
            e.with_attributes(
                list(e.attributes)
                + [
                    Attribute(C.BUNDLE_SYMBOLICNAME_ATTRIBUTE, symbolic_name),
                    Attribute(C.BUNDLE_VERSION_ATTRIBUTE, target),
                ]
            )
        )
    return tuple(out)
