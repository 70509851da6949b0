"""
Header clause tokenizer.

Package headers (Export-Package, Import-Package, DynamicImport-Package):

    clause ( "," clause )*
    clause = path ( ";" path )* ( ";" param )*
    param  = name "=" value      (attribute)
           | name ":=" value     (directive)

Values may be double-quoted; quotes protect "," and ";". Every path of a clause
gets its own PackageClause sharing the clause's params.

Bundle-NativeCode uses the same grammar with library paths and the matcher
parameters osname/processor/osversion/language/selection-filter. A lone "*"
clause marks native code as optional.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from . import constants as C
from .errors import ClauseSyntaxError
from .filters import parse_filter
from .version import VersionRange


@dataclass(frozen=True)
class Attribute:
    name: str
    value: Any
    mandatory: bool = False


@dataclass(frozen=True)
class Directive:
    name: str
    value: str


@dataclass(frozen=True)
class PackageClause:
    name: str
    attributes: Tuple[Attribute, ...] = ()
    directives: Tuple[Directive, ...] = ()

    def attribute(self, name: str) -> Optional[Attribute]:
        for a in self.attributes:
            if a.name == name:
                return a
        return None

    def directive(self, name: str) -> Optional[Directive]:
        for d in self.directives:
            if d.name == name:
                return d
        return None


@dataclass(frozen=True)
class NativeLibraryClause:
    # None means "native code is optional" (the "*" clause)
    library_files: Optional[Tuple[str, ...]]
    os_names: Tuple[str, ...] = ()
    processors: Tuple[str, ...] = ()
    os_versions: Tuple[str, ...] = ()
    languages: Tuple[str, ...] = ()
    selection_filter: Optional[str] = None

    @property
    def is_optional_marker(self) -> bool:
        return self.library_files is None


def split_delimited(value: Optional[str], delim: str) -> List[str]:
    """Split on `delim` outside double quotes; pieces are stripped, empties dropped."""
    if not value:
        return []

    out: List[str] = []
    buf: List[str] = []
    quoted = False
    for ch in value:
        if ch == '"':
            quoted = not quoted
            buf.append(ch)
        elif ch == delim and not quoted:
            piece = "".join(buf).strip()
            if piece:
                out.append(piece)
            buf = []
        else:
            buf.append(ch)

    if quoted:
        raise ClauseSyntaxError(f"Unbalanced quote in header value: {value!r}", data={"value": value})

    piece = "".join(buf).strip()
    if piece:
        out.append(piece)
    return out


def _unquote(value: str) -> str:
    v = value.strip()
    if len(v) >= 2 and v[0] == '"' and v[-1] == '"':
        return v[1:-1]
    return v


def _split_clause(clause: str) -> Tuple[List[str], List[Tuple[str, str]], List[Tuple[str, str]]]:
    """Return (paths, attributes, directives) for one clause, in declaration order."""
    paths: List[str] = []
    attrs: List[Tuple[str, str]] = []
    dirs: List[Tuple[str, str]] = []

    for piece in split_delimited(clause, ";"):
        idx = piece.find("=")
        if idx < 0:
            if attrs or dirs:
                raise ClauseSyntaxError(
                    f"Path {piece!r} must precede all parameters in clause: {clause!r}",
                    data={"clause": clause},
                )
            paths.append(_unquote(piece))
            continue

        name = piece[:idx].strip()
        value = _unquote(piece[idx + 1:])
        if name.endswith(":"):
            name = name[:-1].strip()
            target = dirs
        else:
            target = attrs
        if not name:
            raise ClauseSyntaxError(f"Parameter without a name in clause: {clause!r}", data={"clause": clause})
        target.append((name, value))

    if not paths:
        raise ClauseSyntaxError(f"Clause declares no path: {clause!r}", data={"clause": clause})
    return paths, attrs, dirs


def _normalize_version_attribute(attrs: List[Tuple[str, str]], clause: str) -> List[Tuple[str, str]]:
    # specification-version is the legacy spelling of version.
    version = [v for n, v in attrs if n == C.VERSION_ATTRIBUTE]
    spec_version = [v for n, v in attrs if n == C.SPECIFICATION_VERSION_ATTRIBUTE]
    if version and spec_version and version[0].strip() != spec_version[0].strip():
        raise ClauseSyntaxError(
            f"Both version and specification-version are specified but differ: {clause!r}",
            data={"clause": clause},
        )
    out: List[Tuple[str, str]] = []
    for n, v in attrs:
        if n == C.SPECIFICATION_VERSION_ATTRIBUTE:
            if version:
                continue
            n = C.VERSION_ATTRIBUTE
        out.append((n, v))
    return out


def _reject_duplicates(pairs: List[Tuple[str, str]], kind: str, clause: str) -> None:
    seen = set()
    for n, _ in pairs:
        if n in seen:
            raise ClauseSyntaxError(
                f"Duplicate {kind} {n!r} in clause: {clause!r}",
                data={"clause": clause, kind: n},
            )
        seen.add(n)


def parse_package_header(value: Optional[str]) -> Tuple[PackageClause, ...]:
    """Tokenize an import/export/dynamic-import header into package clauses."""
    out: List[PackageClause] = []
    for clause in split_delimited(value, ","):
        paths, attrs, dirs = _split_clause(clause)
        _reject_duplicates(dirs, "directive", clause)
        attrs = _normalize_version_attribute(attrs, clause)
        _reject_duplicates(attrs, "attribute", clause)

        mandatory = set()
        for n, v in dirs:
            if n == C.MANDATORY_DIRECTIVE:
                mandatory = {m.strip() for m in v.split(",") if m.strip()}

        attributes = tuple(Attribute(n, v, n in mandatory) for n, v in attrs)
        directives = tuple(Directive(n, v) for n, v in dirs)
        for path in paths:
            out.append(PackageClause(name=path, attributes=attributes, directives=directives))
    return tuple(out)


def parse_native_code_header(value: Optional[str]) -> Tuple[NativeLibraryClause, ...]:
    """Tokenize Bundle-NativeCode. A "*" clause is only allowed last."""
    raw = split_delimited(value, ",")
    out: List[NativeLibraryClause] = []

    for i, clause in enumerate(raw):
        if clause == C.NATIVE_OPTIONAL_MARKER:
            if i != len(raw) - 1:
                raise ClauseSyntaxError(
                    "Optional native code clause '*' must be the last clause",
                    data={"value": value},
                )
            out.append(NativeLibraryClause(library_files=None))
            continue

        # Directives carry no meaning on native code clauses and are ignored.
        paths, attrs, _dirs = _split_clause(clause)
        params: Dict[str, List[str]] = {}
        for n, v in attrs:
            params.setdefault(n.lower(), []).append(v)

        filters = params.get(C.NATIVE_SELECTION_FILTER, [])
        if len(filters) > 1:
            raise ClauseSyntaxError(
                f"Only one selection-filter is allowed per clause: {clause!r}",
                data={"clause": clause},
            )
        selection_filter = filters[0] if filters else None
        if selection_filter is not None:
            parse_filter(selection_filter)
        for r in params.get(C.NATIVE_OSVERSION, []):
            VersionRange.parse(r)

        out.append(
            NativeLibraryClause(
                library_files=tuple(p.lstrip("/") for p in paths),
                os_names=tuple(params.get(C.NATIVE_OSNAME, [])),
                processors=tuple(params.get(C.NATIVE_PROCESSOR, [])),
                os_versions=tuple(params.get(C.NATIVE_OSVERSION, [])),
                languages=tuple(params.get(C.NATIVE_LANGUAGE, [])),
                selection_filter=selection_filter,
            )
        )
    return tuple(out)
