"""
LDAP-style selection filters (RFC 1960 subset) for Bundle-NativeCode clauses.

Supported:
  (&(a=b)(c=d))   and
  (|(a=b)(c=d))   or
  (!(a=b))        not
  (a=b) (a~=b) (a>=b) (a<=b)
  (a=*)           presence
  (a=fo*b*r)      substring

Keys compare case-insensitively. Comparison operators try numeric, then
version, then plain string ordering.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Mapping, Optional, Tuple

from .errors import ClauseSyntaxError, MalformedVersion
from .version import Version


@dataclass(frozen=True)
class Filter:
    op: str                                # "&" | "|" | "!" | "=" | "~=" | ">=" | "<=" | "present" | "substring"
    key: Optional[str] = None
    value: Optional[str] = None
    parts: Tuple[str, ...] = ()            # substring pieces
    children: Tuple["Filter", ...] = ()

    def matches(self, properties: Mapping[str, object]) -> bool:
        return _evaluate(self, _lower_keys(properties))

    def __str__(self) -> str:
        if self.op in ("&", "|", "!"):
            return "(" + self.op + "".join(str(c) for c in self.children) + ")"
        if self.op == "present":
            return f"({self.key}=*)"
        if self.op == "substring":
            return f"({self.key}=" + "*".join(_escape(p) for p in self.parts) + ")"
        return f"({self.key}{self.op}{_escape(self.value or '')})"


def _escape(s: str) -> str:
    out = []
    for ch in s:
        if ch in "()*\\":
            out.append("\\")
        out.append(ch)
    return "".join(out)


def _lower_keys(properties: Mapping[str, object]) -> dict:
    return {str(k).lower(): v for k, v in (properties or {}).items()}


class _Parser:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def fail(self, why: str) -> ClauseSyntaxError:
        return ClauseSyntaxError(
            f"Invalid selection filter {self.text!r}: {why} at position {self.pos}",
            data={"filter": self.text, "position": self.pos},
        )

    def skip_ws(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def expect(self, ch: str) -> None:
        self.skip_ws()
        if self.peek() != ch:
            raise self.fail(f"expected {ch!r}")
        self.pos += 1

    def parse(self) -> Filter:
        f = self.parse_filter()
        self.skip_ws()
        if self.pos != len(self.text):
            raise self.fail("trailing characters")
        return f

    def parse_filter(self) -> Filter:
        self.expect("(")
        self.skip_ws()
        ch = self.peek()
        if ch in ("&", "|"):
            self.pos += 1
            children = self.parse_list()
            if not children:
                raise self.fail(f"empty {ch} expression")
            f = Filter(op=ch, children=tuple(children))
        elif ch == "!":
            self.pos += 1
            f = Filter(op="!", children=(self.parse_filter(),))
        else:
            f = self.parse_item()
        self.expect(")")
        return f

    def parse_list(self) -> List[Filter]:
        out: List[Filter] = []
        self.skip_ws()
        while self.peek() == "(":
            out.append(self.parse_filter())
            self.skip_ws()
        return out

    def parse_item(self) -> Filter:
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos] not in "=<>~()":
            self.pos += 1
        key = self.text[start:self.pos].strip()
        if not key:
            raise self.fail("missing attribute name")

        op_start = self.text[self.pos:self.pos + 2]
        if op_start in ("~=", ">=", "<="):
            self.pos += 2
            op = op_start
        elif self.peek() == "=":
            self.pos += 1
            op = "="
        else:
            raise self.fail("missing operator")

        parts = self.parse_value()
        if op != "=":
            if len(parts) != 1:
                raise self.fail(f"wildcard not allowed with {op}")
            return Filter(op=op, key=key, value=parts[0])

        if len(parts) == 1:
            return Filter(op="=", key=key, value=parts[0])
        if parts == ["", ""]:
            return Filter(op="present", key=key)
        return Filter(op="substring", key=key, parts=tuple(parts))

    def parse_value(self) -> List[str]:
        # Returns the value split on unescaped '*'.
        parts: List[str] = []
        buf: List[str] = []
        while True:
            ch = self.peek()
            if ch == "":
                raise self.fail("unterminated value")
            if ch == ")":
                break
            if ch == "(":
                raise self.fail("unescaped '('")
            if ch == "\\":
                self.pos += 1
                if self.peek() == "":
                    raise self.fail("dangling escape")
                buf.append(self.peek())
                self.pos += 1
                continue
            if ch == "*":
                parts.append("".join(buf))
                buf = []
                self.pos += 1
                continue
            buf.append(ch)
            self.pos += 1
        parts.append("".join(buf))
        return parts


def parse_filter(text: str) -> Filter:
    """Parse a selection filter, raising ClauseSyntaxError on bad syntax."""
    if not text or not text.strip():
        raise ClauseSyntaxError("Empty selection filter", data={"filter": text})
    return _Parser(text.strip()).parse()


def _coerce_compare(actual: str, expected: str, cmp: Callable[[object, object], bool]) -> bool:
    for convert in (float, Version.parse):
        try:
            return cmp(convert(actual), convert(expected))
        except (ValueError, MalformedVersion):
            continue
    return cmp(actual, expected)


def _substring_match(value: str, parts: Tuple[str, ...]) -> bool:
    first, last = parts[0], parts[-1]
    if not value.startswith(first):
        return False
    pos = len(first)
    for mid in parts[1:-1]:
        idx = value.find(mid, pos)
        if idx < 0:
            return False
        pos = idx + len(mid)
    return value.endswith(last) and len(value) - len(last) >= pos


def _compare_one(f: Filter, actual: object) -> bool:
    if isinstance(actual, (list, tuple, set)):
        return any(_compare_one(f, a) for a in actual)

    a = str(actual)
    if f.op == "substring":
        return _substring_match(a, f.parts)
    expected = f.value or ""
    if f.op == "=":
        return a == expected
    if f.op == "~=":
        return "".join(a.split()).lower() == "".join(expected.split()).lower()
    if f.op == ">=":
        return _coerce_compare(a, expected, lambda x, y: x >= y)
    if f.op == "<=":
        return _coerce_compare(a, expected, lambda x, y: x <= y)
    return False


def _evaluate(f: Filter, props: dict) -> bool:
    if f.op == "&":
        return all(_evaluate(c, props) for c in f.children)
    if f.op == "|":
        return any(_evaluate(c, props) for c in f.children)
    if f.op == "!":
        return not _evaluate(f.children[0], props)

    key = (f.key or "").lower()
    if key not in props or props[key] is None:
        return False
    if f.op == "present":
        return True
    return _compare_one(f, props[key])
