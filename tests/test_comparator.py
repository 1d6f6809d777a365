"""Tests for comparator."""

import pytest

from ifcmp.comparator import Comparator, DiscrepancyType, check_interface, signatures_equal
from ifcmp.errors import InterfaceNotFound, ParseError
from ifcmp.parser import MethodSignature, Parameter


def make_method(name: str, params: list = None, results: list = None,
                index: int = 0) -> MethodSignature:
    """Helper to create method signatures from (names, type) pairs."""
    return MethodSignature(
        name=name,
        params=tuple(Parameter(names=tuple(names), type=type_) for names, type_ in (params or [])),
        results=tuple(results or []),
        index=index,
    )


def make_map(*methods: MethodSignature) -> dict:
    return {m.name: m for m in methods}


def write_pair(tmp_path, source: str, readme: str):
    """Helper writing a Go file and a README, returning their paths."""
    source_path = tmp_path / "client.go"
    source_path.write_text("package client\n\n" + source)
    readme_path = tmp_path / "README.md"
    readme_path.write_text(readme)
    return readme_path, source_path


def go_block(code: str) -> str:
    return f"# Usage\n\n```go\n{code}```\n"


class TestSignaturesEqual:
    """Tests for the equality relation."""

    def test_identical(self):
        """Test that identical signatures are equal."""
        a = make_method("Foo", [(["a"], "int")], ["error"])
        assert signatures_equal(a, make_method("Foo", [(["a"], "int")], ["error"]))

    def test_index_ignored(self):
        """Test that declaration position takes no part in equality."""
        a = make_method("Foo", [(["a"], "int")], ["error"], index=0)
        b = make_method("Foo", [(["a"], "int")], ["error"], index=7)
        assert signatures_equal(a, b)

    def test_param_name_differs(self):
        """Test detection of renamed parameters."""
        a = make_method("Foo", [(["a"], "int")])
        b = make_method("Foo", [(["b"], "int")])
        assert not signatures_equal(a, b)

    def test_param_name_order_matters(self):
        """Test that parameter name order is significant."""
        a = make_method("Foo", [(["a", "b"], "int")])
        b = make_method("Foo", [(["b", "a"], "int")])
        assert not signatures_equal(a, b)

    def test_grouping_matters(self):
        """Test that `a, b int` differs from `a int, b int`."""
        a = make_method("Foo", [(["a", "b"], "int")])
        b = make_method("Foo", [(["a"], "int"), (["b"], "int")])
        assert not signatures_equal(a, b)

    def test_result_order_matters(self):
        """Test that result order is significant."""
        a = make_method("Foo", results=["int", "error"])
        b = make_method("Foo", results=["error", "int"])
        assert not signatures_equal(a, b)

    def test_result_count_matters(self):
        """Test detection of a dropped result."""
        assert not signatures_equal(make_method("Foo", results=["error"]), make_method("Foo"))

    def test_variadic_matters(self):
        """Test that a variadic parameter differs from a plain one."""
        a = MethodSignature("Log", (Parameter(("args",), "string", variadic=True),))
        b = MethodSignature("Log", (Parameter(("args",), "string"),))
        assert not signatures_equal(a, b)


class TestComparator:
    """Tests for diffing method maps."""

    def test_no_drift(self):
        """Test when source and README are in sync."""
        methods = [make_method("Foo", [(["a"], "int")], ["error"]),
                   make_method("Bar", results=["string"], index=1)]
        result = Comparator().compare(make_map(*methods), make_map(*methods))
        assert result.ok
        assert result.discrepancies == []
        assert result.stats['matched'] == 2

    def test_mismatch(self):
        """Test detection of signature mismatches."""
        actual = make_map(make_method("Foo", [(["a"], "int")], ["error"]))
        documented = make_map(make_method("Foo", [(["a"], "string")], ["error"]))
        result = Comparator().compare(actual, documented)
        assert len(result.discrepancies) == 1
        d = result.discrepancies[0]
        assert d.kind == DiscrepancyType.MISMATCH
        assert d.method == "Foo"
        assert d.actual == actual["Foo"]
        assert d.documented == documented["Foo"]

    def test_missing_from_docs(self):
        """Test detection of methods missing from the README."""
        actual = make_map(make_method("Foo", results=["error"]),
                          make_method("Bar", results=["error"], index=1))
        documented = make_map(make_method("Foo", results=["error"]))
        result = Comparator().compare(actual, documented)
        assert [(d.kind, d.method) for d in result.discrepancies] == [
            (DiscrepancyType.MISSING_FROM_DOCS, "Bar"),
        ]
        assert result.discrepancies[0].documented is None

    def test_missing_from_source(self):
        """Test detection of documented methods missing from the source."""
        actual = make_map(make_method("Foo"))
        documented = make_map(make_method("Foo"), make_method("Ghost", index=1))
        result = Comparator().compare(actual, documented)
        assert len(result.discrepancies) == 1
        assert result.discrepancies[0].kind == DiscrepancyType.MISSING_FROM_SOURCE
        assert result.discrepancies[0].actual is None

    def test_swap_turns_missing_around(self):
        """Test that swapping the sides swaps the missing kinds."""
        only = make_method("Extra", [(["x"], "int")], ["bool"])
        left = make_map(make_method("Foo"), only)
        right = make_map(make_method("Foo"))

        forward = Comparator().compare(left, right).discrepancies
        backward = Comparator().compare(right, left).discrepancies

        assert forward[0].kind == DiscrepancyType.MISSING_FROM_DOCS
        assert backward[0].kind == DiscrepancyType.MISSING_FROM_SOURCE
        assert forward[0].actual == backward[0].documented == only

    def test_declaration_order_does_not_matter(self):
        """Test that reordered methods still match."""
        actual = make_map(make_method("Foo", index=0), make_method("Bar", index=1))
        documented = make_map(make_method("Bar", index=0), make_method("Foo", index=1))
        assert Comparator().compare(actual, documented).ok

    def test_deterministic_ordering(self):
        """Test that discrepancies are sorted by name within each group."""
        actual = make_map(make_method("Zeta", results=["int"]), make_method("Alpha", results=["int"]),
                          make_method("Mid", results=["int"]))
        documented = make_map(make_method("Zeta"), make_method("Beta"), make_method("Aardvark"))
        result = Comparator().compare(actual, documented)
        assert [d.method for d in result.discrepancies] == ["Alpha", "Mid", "Zeta", "Aardvark", "Beta"]

    def test_empty_documented_side(self):
        """Test comparing against an empty README side."""
        actual = make_map(make_method("Foo"), make_method("Bar"))
        result = Comparator().compare(actual, {})
        assert all(d.kind == DiscrepancyType.MISSING_FROM_DOCS for d in result.discrepancies)
        assert len(result.discrepancies) == 2

    def test_summary(self):
        """Test that summary counts are calculated correctly."""
        actual = make_map(make_method("Foo", results=["int"]), make_method("Bar"))
        documented = make_map(make_method("Foo"), make_method("Baz"))
        summary = Comparator().compare(actual, documented).to_dict()['summary']
        assert summary == {'total': 3, 'mismatch': 1, 'missing_from_docs': 1, 'missing_from_source': 1}


class TestCheckInterface:
    """End-to-end checks over real files."""

    def test_identical_declaration(self, tmp_path):
        """Test a README that copies the declaration verbatim."""
        code = "type Client interface {\n\tFoo(a int) error\n}\n"
        readme, source = write_pair(tmp_path, code, go_block(code))
        check = check_interface(readme, source, "Client")
        assert check.ok
        assert check.result.discrepancies == []

    def test_parameter_type_mismatch(self, tmp_path):
        """Test detection of a changed parameter type."""
        readme, source = write_pair(
            tmp_path,
            "type Client interface {\n\tFoo(a int) error\n}\n",
            go_block("type Client interface {\n\tFoo(a string) error\n}\n"),
        )
        check = check_interface(readme, source, "Client")
        assert [(d.kind, d.method) for d in check.result.discrepancies] == [
            (DiscrepancyType.MISMATCH, "Foo"),
        ]

    def test_method_missing_from_readme(self, tmp_path):
        """Test detection of a method the README leaves out."""
        readme, source = write_pair(
            tmp_path,
            "type Client interface {\n\tFoo() error\n\tBar() error\n}\n",
            go_block("type Client interface {\n\tFoo() error\n}\n"),
        )
        check = check_interface(readme, source, "Client")
        assert [(d.kind, d.method) for d in check.result.discrepancies] == [
            (DiscrepancyType.MISSING_FROM_DOCS, "Bar"),
        ]

    def test_wrong_language_block_ignored(self, tmp_path):
        """Test that blocks tagged with another language are not read."""
        readme, source = write_pair(
            tmp_path,
            "type Client interface {\n\tFoo() error\n\tBar() error\n}\n",
            "```text\ntype Client interface {\n\tFoo() error\n\tBar() error\n}\n```\n",
        )
        check = check_interface(readme, source, "Client")
        kinds = {d.kind for d in check.result.discrepancies}
        assert kinds == {DiscrepancyType.MISSING_FROM_DOCS}
        assert len(check.result.discrepancies) == 2
        assert check.trace.documented_methods == []

    def test_interface_missing_from_source(self, tmp_path):
        """Test that a missing source interface is fatal."""
        readme, source = write_pair(
            tmp_path,
            "type Other interface {\n\tFoo()\n}\n",
            go_block("type Client interface {\n\tFoo()\n}\n"),
        )
        with pytest.raises(InterfaceNotFound):
            check_interface(readme, source, "Client")

    def test_reordered_methods_match(self, tmp_path):
        """Test that method order in the README is irrelevant."""
        readme, source = write_pair(
            tmp_path,
            "type Client interface {\n\tOpen() error\n\tClose() error\n}\n",
            go_block("type Client interface {\n\tClose() error\n\tOpen() error\n}\n"),
        )
        assert check_interface(readme, source, "Client").ok

    def test_readme_declares_struct(self, tmp_path):
        """Test that a README struct degrades to an empty method set."""
        readme, source = write_pair(
            tmp_path,
            "type Client interface {\n\tOpen() error\n}\n",
            go_block("// type Client interface was replaced\ntype Client struct{}\n"),
        )
        check = check_interface(readme, source, "Client")
        assert [d.kind for d in check.result.discrepancies] == [DiscrepancyType.MISSING_FROM_DOCS]
        assert any("not an interface" in e.message for e in check.trace.for_stage('docs'))

    def test_readme_parse_error_reports_readme_line(self, tmp_path):
        """Test that README syntax errors name the README."""
        readme, source = write_pair(
            tmp_path,
            "type Client interface {\n\tOpen() error\n}\n",
            go_block("type Client interface {\n\tOpen() error\n"),
        )
        with pytest.raises(ParseError) as exc:
            check_interface(readme, source, "Client")
        assert exc.value.path == str(readme)

    def test_documented_lines_point_into_readme(self, tmp_path):
        """Test that documented lines are README lines."""
        readme, source = write_pair(
            tmp_path,
            "type Client interface {\n\tOpen() error\n}\n",
            go_block("type Client interface {\n\tOpen() (bool, error)\n}\n"),
        )
        check = check_interface(readme, source, "Client")
        d = check.result.discrepancies[0]
        # "# Usage", blank, fence, header, then the method.
        assert d.documented.line == 5
        assert d.actual.line == 4

    def test_unresolved_types_blind_spot_and_strict(self, tmp_path):
        """Test unresolved types with and without strict mode."""
        readme, source = write_pair(
            tmp_path,
            "type Client interface {\n\tTags() map[string]string\n}\n",
            go_block("type Client interface {\n\tTags() map[string]int\n}\n"),
        )
        assert check_interface(readme, source, "Client").ok
        strict = check_interface(readme, source, "Client", strict=True)
        assert [d.kind for d in strict.result.discrepancies] == [DiscrepancyType.MISMATCH]

    def test_trace_lists_methods_in_declaration_order(self, tmp_path):
        """Test that the trace keeps declaration order."""
        code = "type Client interface {\n\tZed()\n\tAlpha(n int) error\n}\n"
        readme, source = write_pair(tmp_path, code, go_block(code))
        trace = check_interface(readme, source, "Client").trace
        assert trace.actual_methods == ["Zed()", "Alpha(n int) error"]
        assert trace.synthetic_unit.startswith("package main\n")

    def test_readme_package_clause_rejected(self, tmp_path):
        """Test that a README block may not bring its own package clause."""
        code = "type Client interface {\n\tOpen() error\n}\n"
        readme, source = write_pair(tmp_path, code, go_block("package client\n\n" + code))
        with pytest.raises(ParseError) as exc:
            check_interface(readme, source, "Client")
        assert exc.value.path == str(readme)
        # "# Usage", blank, fence, then the clause.
        assert exc.value.line == 4
