"""Tests for the recursive-descent tree builder and ParseResult."""

import logging

import pytest

from driver_xml.shared.config import ParserConfig
from driver_xml.shared.errors import (
    InvalidCharacterError,
    InvalidNameError,
    NestingDepthError,
    TagMismatchError,
    TruncatedInputError,
    UnclosedElementError,
    XmlStatus,
)
from driver_xml.shared.result import DiagnosticSeverity
from driver_xml.tokenization.extractor import Cursor
from driver_xml.tree import builder as builder_module
from driver_xml.tree.builder import ParseResult, TreeBuilder
from driver_xml.tree.nodes import NodeKind, Tag


def build(data: bytes, **config: object) -> Tag:
    """Build a tree with a fresh builder."""
    return TreeBuilder(ParserConfig(**config)).build(Cursor(data))  # type: ignore[arg-type]


class TestScenarios:
    """Test the reference documents."""

    def test_nested_elements_with_attribute(self) -> None:
        """Test Root -> a[x="1"] -> b -> "hi"."""
        root = build(b'<a x="1"><b>hi</b></a>')

        assert root.structure() == (
            "tag", "Root", (), (
                ("tag", "a", (("x", "1"),), (
                    ("tag", "b", (), (("text", b"hi"),)),
                )),
            )
        )

    def test_empty_tag(self) -> None:
        """Test Root -> EmptyTag a without attributes."""
        root = build(b"<a/>")

        assert root.child_count == 1
        assert root.children[0].kind is NodeKind.EMPTY_TAG
        assert root.children[0].attributes == []

    def test_mismatched_close_tag(self) -> None:
        """Test that <a><b></a> is rejected as malformed."""
        with pytest.raises(TagMismatchError) as exc_info:
            build(b"<a><b></a>")

        assert exc_info.value.status is XmlStatus.MALFORMED_INPUT
        assert exc_info.value.open_name == "b"
        assert exc_info.value.close_name == "a"
        assert exc_info.value.offset == 6

    def test_processing_instruction(self) -> None:
        """Test Root -> a -> PI{proc, data}."""
        root = build(b"<a><?proc data?></a>")

        pi = root.children[0].children[0]
        assert pi.kind is NodeKind.PROCESSING_INSTRUCTION
        assert (pi.target, pi.data) == ("proc", "data")


class TestStructure:
    """Test structural handling of valid input."""

    def test_empty_and_whitespace_input(self) -> None:
        """Test that empty input yields an empty root."""
        assert build(b"").child_count == 0
        assert build(b" \r\n\t ").child_count == 0

    def test_top_level_text_and_siblings(self) -> None:
        """Test multiple top-level nodes in order."""
        root = build(b"hello<a/><b></b>")

        assert [child.kind for child in root.children] == [
            NodeKind.CHARACTER_DATA, NodeKind.EMPTY_TAG, NodeKind.TAG
        ]
        assert root.children[0].data == b"hello"

    def test_text_keeps_leading_whitespace(self) -> None:
        """Test that text carries its leading whitespace verbatim."""
        root = build(b"<a>\n  hi there\n</a>")

        assert root.children[0].children[0].data == b"\n  hi there\n"

    def test_whitespace_between_markup_dropped(self) -> None:
        """Test that whitespace-only runs produce no nodes."""
        root = build(b"<a>\n  <b/>\n  <c/>\n</a>")

        assert [child.name for child in root.children[0].children] == ["b", "c"]

    def test_skipped_markup(self) -> None:
        """Test that comments, declarations and boxed sections leave no nodes."""
        root = build(b'<!DOCTYPE x><!-- <a> --><a><![CDATA[<z>]]></a>')

        assert root.child_count == 1
        assert root.children[0].child_count == 0

    def test_element_named_root_is_ordinary(self) -> None:
        """Test that a real element named Root is not the document root."""
        root = build(b"<Root><a/></Root>")

        inner = root.children[0]
        assert inner.name == "Root"
        assert not inner.is_root
        assert inner.children[0].name == "a"

    def test_names_are_case_sensitive(self) -> None:
        """Test that close tags must match case exactly."""
        with pytest.raises(TagMismatchError):
            build(b"<a></A>")


class TestErrors:
    """Test error detection."""

    def test_close_tag_without_open_element(self) -> None:
        """Test a close tag at document level."""
        with pytest.raises(TagMismatchError) as exc_info:
            build(b"<a/></a>")

        assert exc_info.value.open_name is None
        assert exc_info.value.offset == 4

    @pytest.mark.parametrize("data,name", [
        (b"<a>text", "a"),
        (b"<a><b></b>", "a"),
        (b"<Root>", "Root"),
        (b"<a><b>", "b"),
    ])
    def test_unclosed_elements(self, data: bytes, name: str) -> None:
        """Test that input ending inside an element is truncated."""
        with pytest.raises(UnclosedElementError) as exc_info:
            build(data)

        assert exc_info.value.status is XmlStatus.TRUNCATED_INPUT
        assert exc_info.value.name == name

    def test_unterminated_markup(self) -> None:
        """Test that extractor truncation propagates."""
        with pytest.raises(TruncatedInputError):
            build(b"<a><!-- never closed")

    def test_invalid_tag_name(self) -> None:
        """Test that a bad tag name is malformed input."""
        with pytest.raises(InvalidNameError) as exc_info:
            build(b"<a><1b/></a>")

        assert exc_info.value.status is XmlStatus.MALFORMED_INPUT
        assert exc_info.value.offset == 4

    def test_invalid_close_tag_name(self) -> None:
        """Test that a bad close tag name is malformed input."""
        with pytest.raises(InvalidNameError):
            build(b"<a></ a>")

    def test_invalid_character(self) -> None:
        """Test that control bytes are rejected by default."""
        with pytest.raises(InvalidCharacterError):
            build(b"<a>\x07</a>")

    def test_character_validation_can_be_disabled(self) -> None:
        """Test that validation is configurable."""
        root = build(b"<a>\xe9</a>", validate_characters=False)

        assert root.children[0].children[0].data == b"\xe9"


class TestDepthLimit:
    """Test the nesting depth limit."""

    def test_within_limit(self) -> None:
        """Test nesting exactly at the limit."""
        root = build(b"<a><b><c></c></b></a>", max_nesting_depth=3)

        assert root.max_depth() == 3

    def test_beyond_limit(self) -> None:
        """Test that one level more is out of resources."""
        with pytest.raises(NestingDepthError) as exc_info:
            build(b"<a><b><c><d></d></c></b></a>", max_nesting_depth=3)

        assert exc_info.value.status is XmlStatus.OUT_OF_RESOURCES
        assert exc_info.value.max_depth == 3

    def test_empty_tag_at_limit_allowed(self) -> None:
        """Test that empty tags do not open a level."""
        root = build(b"<a><b/></a>", max_nesting_depth=1)

        assert root.find_tag_by_name("b") is not None

    def test_default_limit_handles_deep_documents(self) -> None:
        """Test a document nested to the default limit."""
        depth = 256
        data = b"<n>" * depth + b"</n>" * depth

        root = build(data)

        assert root.max_depth() == depth


class TestInvalidAttributes:
    """Test discarding of elements with bad attributes."""

    def test_tag_with_bad_attribute_is_discarded(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that the whole branch goes and siblings survive."""
        caplog.set_level(logging.WARNING, logger="driver_xml")
        builder = TreeBuilder()

        root = builder.build(Cursor(b"<r><a x=1><b/>text</a><c/></r>"))

        r = root.children[0]
        assert [child.name for child in r.children] == ["c"]
        # a + b + text
        assert builder.nodes_discarded == 3
        assert len(builder.diagnostics) == 1
        assert builder.diagnostics[0].severity is DiagnosticSeverity.WARNING
        assert "Discarded element 'a'" in builder.diagnostics[0].message
        assert any("Discarded element" in rec.getMessage() for rec in caplog.records)

    def test_close_tag_of_discarded_element_is_matched(self) -> None:
        """Test that the discarded branch still consumes its close tag."""
        with pytest.raises(TagMismatchError):
            TreeBuilder().build(Cursor(b'<a x="1" y></b>'))

    def test_empty_tag_with_bad_attribute_is_discarded(self) -> None:
        """Test that collected attributes count towards the release."""
        builder = TreeBuilder()

        root = builder.build(Cursor(b'<r><e y="1" z/><f/></r>'))

        assert [child.name for child in root.children[0].children] == ["f"]
        # attribute y + e
        assert builder.nodes_discarded == 2


class TestBuilderState:
    """Test statistics kept by the builder."""

    def test_counters(self) -> None:
        """Test node, chunk and depth counters."""
        builder = TreeBuilder()

        builder.build(Cursor(b'<a x="1"><b>hi</b><?p?></a>'))

        assert builder.nodes_created == 4
        assert builder.extractor.chunks_extracted == 6
        assert builder.max_depth_reached == 2

    def test_tag_names_scanned_once(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that each start, empty and close tag name is extracted once."""
        calls = []
        original = builder_module.extract_tag_name

        def counting(text: bytes, base_offset: int = 0) -> tuple:
            calls.append(text)
            return original(text, base_offset)

        monkeypatch.setattr(builder_module, "extract_tag_name", counting)

        root = TreeBuilder().build(Cursor(b'<a k="v"><b/></a>'))

        assert calls == [b'<a k="v">', b"<b/>", b"</a>"]
        assert root.children[0].find_attribute_by_name("k").value == "v"

    def test_reuse_resets_state(self) -> None:
        """Test that a second build starts from clean counters."""
        builder = TreeBuilder()
        builder.build(Cursor(b"<r><a x=1/></r>"))

        builder.build(Cursor(b"<z/>"))

        assert builder.nodes_created == 1
        assert builder.nodes_discarded == 0
        assert builder.diagnostics == []


class TestParseResult:
    """Test ParseResult."""

    def test_success_result(self) -> None:
        """Test derived properties of a successful result."""
        root = build(b"<a><b/></a>")
        result = ParseResult(root=root, correlation_id="cid")

        assert result.success
        assert result.element_count == 2
        assert result.discarded_count == 0
        assert not result.has_errors()
        result.raise_for_status()

    def test_failed_result(self) -> None:
        """Test a failure carrying its error."""
        error = TagMismatchError("a", "b")
        result = ParseResult(status=error.status, error=error)
        result.add_diagnostic(DiagnosticSeverity.CRITICAL, str(error), "test")

        assert not result.success
        assert result.element_count == 0
        assert result.has_errors()
        with pytest.raises(TagMismatchError):
            result.raise_for_status()

    def test_diagnostics_by_severity(self) -> None:
        """Test filtering diagnostics."""
        result = ParseResult(correlation_id="cid")
        result.add_diagnostic(DiagnosticSeverity.INFO, "note", "test")
        result.add_diagnostic(DiagnosticSeverity.WARNING, "careful", "test", offset=3)

        warnings = result.get_diagnostics_by_severity(DiagnosticSeverity.WARNING)

        assert [d.message for d in warnings] == ["careful"]
        assert warnings[0].offset == 3
        assert warnings[0].correlation_id == "cid"

    def test_summary(self) -> None:
        """Test the summary dictionary."""
        result = ParseResult(root=build(b"<a><b/></a>"))

        summary = result.summary()

        assert summary["success"] is True
        assert summary["status"] == "SUCCESS"
        assert summary["error"] is None
        assert summary["element_count"] == 2
        assert summary["max_depth"] == 2
        assert "performance" in summary
