import pytest

from bundlegate.core.manifest.clauses import (
    parse_native_code_header,
    parse_package_header,
    split_delimited,
)
from bundlegate.core.manifest.errors import ClauseSyntaxError, MalformedManifest, MalformedVersion


def test_empty_header_yields_nothing():
    assert parse_package_header(None) == ()
    assert parse_package_header("   ") == ()


def test_split_respects_quotes():
    assert split_delimited('a;v="[1,2)", b', ",") == ['a;v="[1,2)"', "b"]


def test_unbalanced_quote_is_rejected():
    with pytest.raises(ClauseSyntaxError):
        split_delimited('a;v="1.0', ",")


def test_attributes_and_directives_are_separated():
    (c,) = parse_package_header('com.acme.api;version="1.2";uses:="com.acme.spi,com.acme.util";vendor=acme')
    assert c.name == "com.acme.api"
    assert [a.name for a in c.attributes] == ["version", "vendor"]
    assert c.attribute("version").value == "1.2"
    assert c.directive("uses").value == "com.acme.spi,com.acme.util"


def test_multiple_paths_share_parameters():
    clauses = parse_package_header("a.b;c.d;version=1.0, e.f")
    assert [c.name for c in clauses] == ["a.b", "c.d", "e.f"]
    assert clauses[0].attributes == clauses[1].attributes
    assert clauses[2].attributes == ()


def test_specification_version_normalizes_to_version():
    (c,) = parse_package_header("a.b;specification-version=1.1")
    assert [a.name for a in c.attributes] == ["version"]
    assert c.attribute("version").value == "1.1"


def test_conflicting_version_spellings_are_rejected():
    with pytest.raises(ClauseSyntaxError):
        parse_package_header("a.b;version=1.0;specification-version=2.0")


def test_duplicate_attribute_in_clause_is_rejected():
    with pytest.raises(ClauseSyntaxError):
        parse_package_header("a.b;vendor=x;vendor=y")


def test_path_after_parameter_is_rejected():
    with pytest.raises(ClauseSyntaxError):
        parse_package_header("a.b;vendor=x;c.d")


def test_mandatory_directive_marks_attributes():
    (c,) = parse_package_header('a.b;vendor=acme;tier=gold;mandatory:="vendor"')
    assert c.attribute("vendor").mandatory is True
    assert c.attribute("tier").mandatory is False


def test_clause_syntax_error_is_a_malformed_manifest():
    assert issubclass(ClauseSyntaxError, MalformedManifest)


def test_native_code_clauses():
    clauses = parse_native_code_header(
        '/lib/linux/libfoo.so;lib/linux/libbar.so;osname=Linux;osname=FreeBSD;processor=x86-64;'
        'osversion="[2.6,7.0)";language=en;selection-filter="(vendor=acme)", '
        "lib/win/foo.dll;osname=Win32"
    )
    first, second = clauses
    assert first.library_files == ("lib/linux/libfoo.so", "lib/linux/libbar.so")
    assert first.os_names == ("Linux", "FreeBSD")
    assert first.processors == ("x86-64",)
    assert first.os_versions == ("[2.6,7.0)",)
    assert first.languages == ("en",)
    assert first.selection_filter == "(vendor=acme)"
    assert second.library_files == ("lib/win/foo.dll",)
    assert second.processors == ()


def test_optional_marker_must_be_last():
    clauses = parse_native_code_header("lib/a.so;osname=Linux, *")
    assert clauses[-1].is_optional_marker
    assert clauses[-1].library_files is None

    with pytest.raises(ClauseSyntaxError):
        parse_native_code_header("*, lib/a.so;osname=Linux")


def test_native_code_rejects_bad_filter_and_range():
    with pytest.raises(ClauseSyntaxError):
        parse_native_code_header('lib/a.so;selection-filter="(vendor=acme"')
    with pytest.raises(MalformedVersion):
        parse_native_code_header('lib/a.so;osversion="[3.0,1.0)"')


def test_native_code_directives_are_ignored():
    (c,) = parse_native_code_header("lib/a.so;osname=Linux;vendor:=acme")
    assert c.library_files == ("lib/a.so",)
    assert c.os_names == ("Linux",)
    assert c.selection_filter is None
