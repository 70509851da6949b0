"""
Bundle-NativeCode clause selection.

When several clauses match the running platform the winner is picked by
narrowing stages, each a plain function over a candidate list:

  1. clauses declaring an osversion range, keeping the ones whose low bound is
     the highest low bound declared by any candidate
  2. clauses declaring a language
  3. first clause declaring a language, else the first match overall
"""
from __future__ import annotations

import posixpath
from dataclasses import dataclass
from typing import Any, List, Optional, Protocol, Sequence, Tuple

from .clauses import NativeLibraryClause
from .errors import NoMatchingNativeClause
from .version import EMPTY_VERSION, Version, VersionRange


class ClauseMatcher(Protocol):
    def match(self, clause: NativeLibraryClause) -> bool:
        ...


Candidates = List[NativeLibraryClause]


def matching_clauses(clauses: Sequence[NativeLibraryClause], matcher: ClauseMatcher) -> Candidates:
    return [c for c in clauses if matcher.match(c)]


def os_version_floor(candidates: Sequence[NativeLibraryClause]) -> Version:
    """Highest low bound across every osversion range declared by any candidate."""
    floor = EMPTY_VERSION
    for c in candidates:
        for r in c.os_versions:
            low = VersionRange.parse(r).low
            if low >= floor:
                floor = low
    return floor


def with_os_version(candidates: Sequence[NativeLibraryClause]) -> Candidates:
    return [c for c in candidates if c.os_versions]


def at_os_version_floor(candidates: Sequence[NativeLibraryClause], floor: Version) -> Candidates:
    return [c for c in candidates if any(VersionRange.parse(r).low == floor for r in c.os_versions)]


def with_language(candidates: Sequence[NativeLibraryClause]) -> Candidates:
    return [c for c in candidates if c.languages]


def first_sorted_clause(matches: Sequence[NativeLibraryClause]) -> NativeLibraryClause:
    """Tie-break between two or more matching clauses."""
    floor = os_version_floor(matches)
    versioned = with_os_version(matches)

    if len(versioned) == 1:
        return versioned[0]

    working: Candidates = list(matches)
    if len(versioned) > 1:
        at_floor = at_os_version_floor(versioned, floor)
        if len(at_floor) == 1:
            return at_floor[0]
        if at_floor:
            working = at_floor

    languages = with_language(working)
    # No language narrowing falls back to the first match, not the working set.
    return languages[0] if languages else matches[0]


def select_native_clause(
    clauses: Sequence[NativeLibraryClause],
    matcher: ClauseMatcher,
    optional: bool = False,
) -> Optional[NativeLibraryClause]:
    """
    Pick the clause that applies to the current platform.

    Returns None when nothing matches and native code is optional; raises
    NoMatchingNativeClause when nothing matches and it is not.
    """
    if not clauses:
        return None

    matches = matching_clauses(clauses, matcher)
    if not matches:
        if optional:
            return None
        raise NoMatchingNativeClause(
            "Unable to select a native library clause.",
            data={"clauses": len(clauses)},
        )
    if len(matches) == 1:
        return matches[0]
    return first_sorted_clause(matches)


_LIBRARY_PATTERNS = {
    "windows": ("{}.dll",),
    "macos": ("lib{}.dylib", "lib{}.jnilib"),
}


@dataclass(frozen=True)
class ResolvedNativeLibrary:
    """One library file of the selected clause, bound to its owning revision."""

    revision: Any
    entry: str
    os_names: Tuple[str, ...] = ()
    processors: Tuple[str, ...] = ()
    os_versions: Tuple[str, ...] = ()
    languages: Tuple[str, ...] = ()
    selection_filter: Optional[str] = None

    @property
    def name(self) -> str:
        return posixpath.basename(self.entry)

    def match(self, library_name: str, os_family: str = "linux") -> bool:
        """True if a short name (as passed to a loader) maps onto this entry."""
        if self.name == library_name:
            return True
        patterns = _LIBRARY_PATTERNS.get(os_family, ("lib{}.so",))
        return any(self.name == p.format(library_name) for p in patterns)


def resolve_libraries(revision: Any, clause: NativeLibraryClause) -> Tuple[ResolvedNativeLibrary, ...]:
    return tuple(
        ResolvedNativeLibrary(
            revision=revision,
            entry=path,
            os_names=clause.os_names,
            processors=clause.processors,
            os_versions=clause.os_versions,
            languages=clause.languages,
            selection_filter=clause.selection_filter,
        )
        for path in (clause.library_files or ())
    )
