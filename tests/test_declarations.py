import logging

import pytest

from bundlegate.core.manifest.clauses import parse_package_header
from bundlegate.core.manifest.declarations import (
    DynamicImportDeclaration,
    build_dynamic_imports,
    build_exports,
    build_imports,
)
from bundlegate.core.manifest.errors import DuplicateDeclaration, ReservedNamespace
from bundlegate.core.manifest.version import Version


def test_exports_keep_first_duplicate_and_warn(caplog):
    clauses = parse_package_header("a.b;version=1.0, c.d, a.b;version=2.0")
    with caplog.at_level(logging.WARNING, logger="bundlegate.manifest"):
        exports = build_exports(clauses)

    assert [e.name for e in exports] == ["a.b", "c.d"]
    assert exports[0].version == Version(1, 0, 0)
    assert "Duplicate export - a.b" in caplog.text


def test_exports_use_supplied_logger():
    seen = []

    class _Sink(logging.Handler):
        def emit(self, record):
            seen.append((record.levelno, record.getMessage()))

    logger = logging.getLogger("tests.duplicate_sink")
    logger.addHandler(_Sink())
    build_exports(parse_package_header("a.b, a.b"), logger)
    assert seen == [(logging.WARNING, "Duplicate export - a.b")]


def test_export_version_defaults_to_zero():
    (e,) = build_exports(parse_package_header("a.b"))
    assert e.version == Version(0, 0, 0)
    assert e.attributes == ()


def test_duplicate_import_is_fatal():
    with pytest.raises(DuplicateDeclaration) as exc:
        build_imports(parse_package_header("a.b, c.d, a.b"))
    assert "a.b" in str(exc.value)


@pytest.mark.parametrize("build", [build_exports, build_imports])
def test_reserved_namespace_rejected(build):
    with pytest.raises(ReservedNamespace):
        build(parse_package_header("java.foo"))


def test_javax_is_not_reserved():
    assert [i.name for i in build_imports(parse_package_header("javax.net"))] == ["javax.net"]


def test_import_version_range_and_resolution():
    (i,) = build_imports(parse_package_header('a.b;version="[1.0,2.0)";resolution:=optional'))
    assert i.version_low == Version(1, 0, 0)
    assert i.version_high == Version(2, 0, 0)
    assert i.is_optional


def test_dynamic_imports_preserve_duplicates_and_order():
    dyn = build_dynamic_imports(parse_package_header("com.acme.*, a.b, com.acme.*"))
    assert [d.name for d in dyn] == ["com.acme.*", "a.b", "com.acme.*"]
    assert all(isinstance(d, DynamicImportDeclaration) for d in dyn)


def test_dynamic_import_wildcards():
    wildcard, exact, anything = build_dynamic_imports(parse_package_header("com.acme.*, a.b, *"))
    assert wildcard.matches("com.acme.util")
    assert not wildcard.matches("com.acmex")
    assert exact.matches("a.b") and not exact.matches("a.b.c")
    assert anything.matches("whatever")


def test_export_replacement_does_not_mutate():
    (e,) = build_exports(parse_package_header("a.b;version=1.0"))
    e2 = e.with_directives([])
    assert e2 is not e
    assert e2.attributes == e.attributes
