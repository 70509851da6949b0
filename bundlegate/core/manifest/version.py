from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering
from typing import Optional

from .errors import MalformedVersion


_QUALIFIER_RE = re.compile(r"^[A-Za-z0-9_\-]+$")


@total_ordering
@dataclass(frozen=True)
class Version:
    """major.minor.micro.qualifier, ordered numerically then by qualifier text."""

    major: int = 0
    minor: int = 0
    micro: int = 0
    qualifier: str = ""

    @classmethod
    def parse(cls, text: Optional[str]) -> "Version":
        """
        Parse `major[.minor[.micro[.qualifier]]]`.

        Blank input yields 0.0.0. Anything else that does not fit the grammar
        raises MalformedVersion.
        """
        s = (text or "").strip()
        if not s:
            return EMPTY_VERSION

        parts = s.split(".", 3)
        nums = []
        for p in parts[:3]:
            if not (p.isascii() and p.isdigit()):
                raise MalformedVersion(f"Invalid version: {text!r}", data={"value": text})
            nums.append(int(p))
        while len(nums) < 3:
            nums.append(0)

        qualifier = parts[3] if len(parts) == 4 else ""
        if len(parts) == 4 and not _QUALIFIER_RE.match(qualifier):
            raise MalformedVersion(f"Invalid version qualifier: {text!r}", data={"value": text})

        return cls(nums[0], nums[1], nums[2], qualifier)

    def _key(self):
        return (self.major, self.minor, self.micro, self.qualifier)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() < other._key()

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.micro}"
        return f"{base}.{self.qualifier}" if self.qualifier else base


EMPTY_VERSION = Version()


@dataclass(frozen=True)
class VersionRange:
    """
    Version interval.

    A bare version ("1.2") means "at least 1.2" with no upper bound. The
    interval form uses brackets for inclusive ends and parentheses for
    exclusive ones: "[1.0,2.0)".
    """

    low: Version = EMPTY_VERSION
    high: Optional[Version] = None
    low_inclusive: bool = True
    high_inclusive: bool = False

    @classmethod
    def parse(cls, text: Optional[str]) -> "VersionRange":
        s = (text or "").strip()
        if not s:
            return ANY_VERSION

        if s[0] in "[(":
            if s[-1] not in "])" or "," not in s:
                raise MalformedVersion(f"Invalid version range: {text!r}", data={"value": text})
            lo_text, hi_text = s[1:-1].split(",", 1)
            low = Version.parse(lo_text)
            high = Version.parse(hi_text)
            if high < low:
                raise MalformedVersion(
                    f"Version range low bound exceeds high bound: {text!r}",
                    data={"value": text},
                )
            return cls(
                low=low,
                high=high,
                low_inclusive=s[0] == "[",
                high_inclusive=s[-1] == "]",
            )

        return cls(low=Version.parse(s))

    @classmethod
    def at_least(cls, version: Version) -> "VersionRange":
        return cls(low=version)

    def includes(self, version: Version) -> bool:
        if self.low_inclusive:
            if version < self.low:
                return False
        elif version <= self.low:
            return False

        if self.high is None:
            return True
        if self.high_inclusive:
            return version <= self.high
        return version < self.high

    def __str__(self) -> str:
        if self.high is None:
            return str(self.low)
        left = "[" if self.low_inclusive else "("
        right = "]" if self.high_inclusive else ")"
        return f"{left}{self.low},{self.high}{right}"


ANY_VERSION = VersionRange()
