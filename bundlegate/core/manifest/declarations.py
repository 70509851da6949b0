from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Dict, Iterable, Optional, Sequence, Tuple

from . import constants as C
from .clauses import Attribute, Directive, PackageClause
from .errors import DuplicateDeclaration, ReservedNamespace
from .version import EMPTY_VERSION, ANY_VERSION, Version, VersionRange

_log = logging.getLogger("bundlegate.manifest")


def _find(items: Iterable, name: str):
    for item in items:
        if item.name == name:
            return item
    return None


@dataclass(frozen=True)
class ExportDeclaration:
    name: str
    directives: Tuple[Directive, ...] = ()
    attributes: Tuple[Attribute, ...] = ()

    @classmethod
    def from_clause(cls, clause: PackageClause) -> "ExportDeclaration":
        attrs = tuple(
            replace(a, value=Version.parse(a.value)) if a.name == C.VERSION_ATTRIBUTE else a
            for a in clause.attributes
        )
        return cls(name=clause.name, directives=clause.directives, attributes=attrs)

    @property
    def version(self) -> Version:
        a = _find(self.attributes, C.VERSION_ATTRIBUTE)
        return a.value if a is not None else EMPTY_VERSION

    @property
    def uses(self) -> Tuple[str, ...]:
        d = _find(self.directives, C.USES_DIRECTIVE)
        if d is None:
            return ()
        return tuple(p.strip() for p in d.value.split(",") if p.strip())

    @property
    def mandatory_attributes(self) -> Tuple[str, ...]:
        return tuple(a.name for a in self.attributes if a.mandatory)

    def attribute(self, name: str) -> Optional[Attribute]:
        return _find(self.attributes, name)

    def directive(self, name: str) -> Optional[Directive]:
        return _find(self.directives, name)

    def with_directives(self, directives: Sequence[Directive]) -> "ExportDeclaration":
        return replace(self, directives=tuple(directives))

    def with_attributes(self, attributes: Sequence[Attribute]) -> "ExportDeclaration":
        return replace(self, attributes=tuple(attributes))


@dataclass(frozen=True)
class ImportDeclaration:
    name: str
    version_range: VersionRange = ANY_VERSION
    directives: Tuple[Directive, ...] = ()
    attributes: Tuple[Attribute, ...] = ()

    @classmethod
    def from_clause(cls, clause: PackageClause) -> "ImportDeclaration":
        rng = ANY_VERSION
        attrs = []
        for a in clause.attributes:
            if a.name == C.VERSION_ATTRIBUTE:
                rng = VersionRange.parse(a.value)
                a = replace(a, value=rng)
            attrs.append(a)
        return cls(name=clause.name, version_range=rng, directives=clause.directives, attributes=tuple(attrs))

    @classmethod
    def from_export(cls, export: ExportDeclaration) -> "ImportDeclaration":
        """Import implied by an export: same package, at least the exported version."""
        attrs = []
        rng = ANY_VERSION
        for a in export.attributes:
            if a.name == C.VERSION_ATTRIBUTE:
                rng = VersionRange.at_least(a.value)
                a = replace(a, value=rng)
            attrs.append(a)
        return cls(name=export.name, version_range=rng, attributes=tuple(attrs))

    @property
    def version_low(self) -> Version:
        return self.version_range.low

    @property
    def version_high(self) -> Optional[Version]:
        return self.version_range.high

    @property
    def is_optional(self) -> bool:
        d = _find(self.directives, C.RESOLUTION_DIRECTIVE)
        return d is not None and d.value.strip() == C.RESOLUTION_OPTIONAL

    def attribute(self, name: str) -> Optional[Attribute]:
        return _find(self.attributes, name)

    def directive(self, name: str) -> Optional[Directive]:
        return _find(self.directives, name)


@dataclass(frozen=True)
class DynamicImportDeclaration(ImportDeclaration):
    """Same shape as an import; the name may end in a ".*" wildcard or be "*"."""

    def matches(self, package: str) -> bool:
        if self.name == "*":
            return True
        if self.name.endswith(".*"):
            return package.startswith(self.name[:-1])
        return package == self.name


def _check_reserved(name: str, verb: str) -> None:
    if name.startswith(C.RESERVED_PACKAGE_PREFIX):
        raise ReservedNamespace(
            f"{verb} {C.RESERVED_PACKAGE_PREFIX}* packages not allowed: {name}",
            data={"package": name},
        )


def build_exports(
    clauses: Iterable[PackageClause],
    logger: Optional[logging.Logger] = None,
) -> Tuple[ExportDeclaration, ...]:
    """
    Fold export clauses by package name.

    The first declaration of a name wins; repeats are logged and dropped.
    """
    log = logger or _log
    exports: Dict[str, ExportDeclaration] = {}
    for clause in clauses:
        if clause.name in exports:
            log.warning("Duplicate export - %s", clause.name)
            continue
        _check_reserved(clause.name, "Exporting")
        exports[clause.name] = ExportDeclaration.from_clause(clause)
    return tuple(exports.values())


def build_imports(clauses: Iterable[PackageClause]) -> Tuple[ImportDeclaration, ...]:
    imports: Dict[str, ImportDeclaration] = {}
    for clause in clauses:
        if clause.name in imports:
            raise DuplicateDeclaration(f"Duplicate import - {clause.name}", data={"package": clause.name})
        _check_reserved(clause.name, "Importing")
        imports[clause.name] = ImportDeclaration.from_clause(clause)
    return tuple(imports.values())


def build_dynamic_imports(clauses: Iterable[PackageClause]) -> Tuple[DynamicImportDeclaration, ...]:
    # Dynamic imports may repeat; keep them all in declaration order.
    return tuple(DynamicImportDeclaration.from_clause(c) for c in clauses)
