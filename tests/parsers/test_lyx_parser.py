"""Tests for the LyX certdoc parser."""

import io
from pathlib import Path

import pytest

from reqtraq.errors import (
    EncodingError,
    MalformedTagError,
    MalformedTitleError,
    PathResolutionError,
    StructureMismatchError,
    UnknownRequirementTypeError,
)
from reqtraq.parsers.lyx import LyxStack, linkify, parse_lyx
from reqtraq.utilities.git import RepoContext

HEADER = r"""#LyX 2.3 created this file. For more info see http://www.lyx.org/
\lyxformat 544
\begin_document
\begin_header
\textclass article
\begin_preamble
\usepackage{enumitem}
\end_preamble
\use_hyperref false
\end_header

\begin_body
"""

FOOTER = r"""\end_body
\end_document
"""


def note(text: str) -> str:
    return f"""\\begin_inset Note Note
status open

\\begin_layout Plain Layout
{text}
\\end_layout

\\end_inset
"""


def requirement(title: str, *paragraphs: str) -> str:
    """A req:/req block with a title paragraph and body paragraphs."""
    body = "".join(f"\\begin_layout Standard\n{p}\n\\end_layout\n\n" for p in paragraphs)
    return (
        "\\begin_layout Standard\n"
        + note("req:")
        + f"\n{title}\n\\end_layout\n\n"
        + body
        + "\\begin_layout Standard\n"
        + note("/req")
        + "\n\n\\end_layout\n\n"
    )


def write_lyx(path: Path, *blocks: str) -> Path:
    path.write_text(HEADER + "".join(blocks) + FOOTER, encoding="utf-8")
    return path


class TestLyxStack:
    """Tests for LyxStack."""

    def test_push_pop(self):
        s = LyxStack()
        s.push(1, r"\begin_layout Standard", "Standard")
        s.push(2, r"\begin_inset Note Note", "Note")

        assert s.top().element == "inset"
        assert s.top().arg == "Note"

        s.pop(3, r"\end_inset")
        assert s.top().element == "layout"
        s.pop(4, r"\end_layout")
        assert len(s) == 0

    def test_top_of_empty_stack(self):
        top = LyxStack().top()

        assert top.element == ""
        assert top.line_no == 0

    def test_mismatch(self):
        s = LyxStack()
        s.push(7, r"\begin_layout Standard", "Standard")

        with pytest.raises(StructureMismatchError) as exc_info:
            s.pop(9, r"\end_inset")

        message = str(exc_info.value)
        assert "begin layout line 7" in message
        assert "end inset line 9" in message

    def test_pop_empty(self):
        with pytest.raises(StructureMismatchError):
            LyxStack().pop(1, r"\end_layout")

    def test_in_note_layout(self):
        s = LyxStack()
        assert not s.in_note_layout()

        s.push(1, r"\begin_layout Standard", "Standard")
        s.push(2, r"\begin_inset Note Note", "Note")
        assert not s.in_note_layout()

        s.push(3, r"\begin_layout Plain Layout", "Plain")
        assert s.in_note_layout()

    def test_layout_in_other_inset(self):
        s = LyxStack()
        s.push(1, r"\begin_inset ERT", "ERT")
        s.push(2, r"\begin_layout Plain Layout", "Plain")

        assert not s.in_note_layout()


class TestLinkify:
    """Tests for linkify."""

    def test_no_ids(self):
        line = "Plain text without references."

        assert linkify(line, "repo", "certdocs") == line

    def test_single_id(self):
        out = linkify("See REQ-0-DDLN-SYS-006 for details.", "reqtraq", "certdocs")

        assert out.startswith("See \n\\begin_inset CommandInset href\n")
        assert 'name "REQ-0-DDLN-SYS-006"' in out
        assert (
            'target "http://a.daedalean.ai/docs/reqtraq/certdocs/0-DDLN-100-ORD.pdf#REQ-0-DDLN-SYS-006"'
            in out
        )
        assert out.endswith("\\end_inset\n\n for details.")

    def test_multiple_ids_keep_order(self):
        out = linkify(
            "REQ-0-DDLN-SWH-001 and REQ-0-DDLN-SWL-002", "r", "d", base_url="https://docs"
        )

        first = out.index("https://docs/r/d/0-DDLN-211-SRD.pdf#REQ-0-DDLN-SWH-001")
        second = out.index("https://docs/r/d/0-DDLN-212-SDD.pdf#REQ-0-DDLN-SWL-002")
        assert first < second
        assert " and " in out

    def test_unknown_type(self):
        with pytest.raises(UnknownRequirementTypeError, match="REQ-0-DDLN-XYZ-001"):
            linkify("REQ-0-DDLN-XYZ-001", "r", "d")


class TestParseLyx:
    """Tests for parse_lyx."""

    def test_reference_document(self, fixtures_dir, fixture_repo):
        f = fixtures_dir / "valid_system_requirement" / "123-TEST-100-ORD.lyx"
        out = io.StringIO()

        reqs = parse_lyx(f, out, repo=fixture_repo)

        assert len(reqs) == 5
        assert reqs[0] == (
            "REQ-123-TEST-SYS-001 System requirement 1\n"
            "The system shall do thing 1.\n"
            "SAFETY IMPACT: Impact 1\n"
            "RATIONALE: Rationale 1\n"
            "VERIFICATION: Test 1"
        )
        for i, text in enumerate(reqs, start=1):
            assert text.startswith(f"REQ-123-TEST-SYS-00{i} ")

    def test_reference_document_rewritten(self, fixtures_dir, fixture_repo):
        f = fixtures_dir / "valid_system_requirement" / "123-TEST-100-ORD.lyx"
        out = io.StringIO()

        parse_lyx(f, out, repo=fixture_repo)
        rewritten = out.getvalue()

        assert "\\use_hyperref true" in rewritten
        assert "\\use_hyperref false" not in rewritten
        for i in range(1, 6):
            assert f"hypertarget{{REQ-123-TEST-SYS-00{i}}}" in rewritten
        assert (
            "http://a.daedalean.ai/docs/reqtraq/valid_system_requirement/"
            "123-TEST-100-ORD.pdf#REQ-123-TEST-SYS-001"
        ) in rewritten
        # Titles are anchors, not links.
        assert 'name "REQ-123-TEST-SYS-003"' not in rewritten

    def test_round_trip_without_requirements(self, tmp_path, tmp_repo):
        text = (
            "#LyX 2.3 created this file.\n"
            "\\begin_document\n"
            "\\begin_body\n\n"
            "\\begin_layout Standard\n"
            "Mentions REQ-0-DDLN-SYS-001 outside of any block.\n"
            "\\end_layout\n\n"
            "\\begin_layout Standard\n"
            + note("just a note")
            + "\n\\end_layout\n\n"
            "\\end_body\n"
            "\\end_document"
        )
        f = tmp_path / "0-DDLN-100-ORD.lyx"
        f.write_text(text, encoding="utf-8")
        out = io.StringIO()

        assert parse_lyx(f, out, repo=tmp_repo) == []
        assert out.getvalue() == text + "\n"

    def test_every_line_echoed(self, tmp_path, tmp_repo):
        f = write_lyx(
            tmp_path / "0-T-100-ORD.lyx",
            requirement("REQ-0-T-SYS-001 Title", "Body"),
        )
        out = io.StringIO()

        parse_lyx(f, out, repo=tmp_repo)

        original = f.read_text(encoding="utf-8").splitlines()
        rewritten = out.getvalue()
        assert rewritten.endswith("\n")
        # Anchor and hyperref rewrite only add or change lines.
        assert len(rewritten.splitlines()) >= len(original)
        assert "\\use_hyperref true" in rewritten
        # The anchor goes into the first paragraph after the title.
        anchor = rewritten.index("hypertarget{REQ-0-T-SYS-001}")
        assert rewritten.index("REQ-0-T-SYS-001 Title") < anchor < rewritten.index("\nBody\n")

    def test_title_with_two_ids(self, tmp_path, tmp_repo):
        f = write_lyx(
            tmp_path / "0-T-100-ORD.lyx",
            requirement("REQ-0-T-SYS-001 REQ-0-T-SYS-002 Title", "Body"),
        )

        with pytest.raises(MalformedTitleError, match="too many IDs"):
            parse_lyx(f, io.StringIO(), repo=tmp_repo)

    def test_title_without_id(self, tmp_path, tmp_repo):
        f = write_lyx(tmp_path / "0-T-100-ORD.lyx", requirement("A title", "Body"))

        with pytest.raises(MalformedTitleError, match="missing ID") as exc_info:
            parse_lyx(f, io.StringIO(), repo=tmp_repo)

        assert exc_info.value.line_no is not None
        assert exc_info.value.path == str(f)

    def test_nested_req_tag(self, tmp_path, tmp_repo):
        block = (
            "\\begin_layout Standard\n"
            + note("req:")
            + "\nREQ-0-T-SYS-001 Title\n\\end_layout\n\n"
            + "\\begin_layout Standard\n"
            + note("req:")
            + "\n\\end_layout\n\n"
        )
        f = write_lyx(tmp_path / "0-T-100-ORD.lyx", block)

        with pytest.raises(MalformedTagError, match="unclosed"):
            parse_lyx(f, io.StringIO(), repo=tmp_repo)

    def test_closing_tag_without_opener(self, tmp_path, tmp_repo):
        block = "\\begin_layout Standard\n" + note("/req") + "\n\\end_layout\n\n"
        f = write_lyx(tmp_path / "0-T-100-ORD.lyx", block)

        with pytest.raises(MalformedTagError, match="no corresponding opening"):
            parse_lyx(f, io.StringIO(), repo=tmp_repo)

    def test_unclosed_block_at_end_of_file(self, tmp_path, tmp_repo):
        block = "\\begin_layout Standard\n" + note("req:") + "\nREQ-0-T-SYS-001 Title\n\\end_layout\n\n"
        f = write_lyx(tmp_path / "0-T-100-ORD.lyx", block)

        with pytest.raises(MalformedTagError, match="never closed"):
            parse_lyx(f, io.StringIO(), repo=tmp_repo)

    def test_tags_are_case_insensitive(self, tmp_path, tmp_repo):
        block = requirement("REQ-0-T-SYS-001 Title", "Body").replace("req:", "REQ:")
        f = write_lyx(tmp_path / "0-T-100-ORD.lyx", block)

        assert len(parse_lyx(f, io.StringIO(), repo=tmp_repo)) == 1

    def test_structure_mismatch(self, tmp_path, tmp_repo):
        block = "\\begin_layout Standard\nText\n\\end_inset\n"
        f = write_lyx(tmp_path / "0-T-100-ORD.lyx", block)

        with pytest.raises(StructureMismatchError):
            parse_lyx(f, io.StringIO(), repo=tmp_repo)

    def test_split_id_is_rejoined(self, tmp_path, tmp_repo):
        """An ID wrapped over two lines of a paragraph is moved to the second line."""
        paragraph = "Derived from REQ-0-T-\nSYS-002 as well."
        f = write_lyx(
            tmp_path / "0-T-100-ORD.lyx",
            requirement("REQ-0-T-SYS-001 Title", paragraph),
        )

        reqs = parse_lyx(f, io.StringIO(), repo=tmp_repo)

        assert reqs == ["REQ-0-T-SYS-001 Title\nDerived from REQ-0-T-SYS-002 as well.\n"]

    def test_unknown_type_in_body(self, tmp_path, tmp_repo):
        f = write_lyx(
            tmp_path / "0-T-100-ORD.lyx",
            requirement("REQ-0-T-SYS-001 Title", "See REQ-0-T-FOO-001."),
        )

        with pytest.raises(UnknownRequirementTypeError, match="cannot linkify"):
            parse_lyx(f, io.StringIO(), repo=tmp_repo)

    def test_file_outside_repo(self, tmp_path):
        f = write_lyx(tmp_path / "0-T-100-ORD.lyx")
        repo = RepoContext(root=tmp_path / "elsewhere", name="r")

        with pytest.raises(PathResolutionError):
            parse_lyx(f, io.StringIO(), repo=repo)

    def test_missing_file(self, tmp_path, tmp_repo):
        with pytest.raises(OSError):
            parse_lyx(tmp_path / "missing.lyx", io.StringIO(), repo=tmp_repo)

    def test_anchor_not_written_inside_note(self, tmp_path, tmp_repo):
        """A one-paragraph requirement gets its anchor in the next paragraph."""
        block = (
            "\\begin_layout Standard\n"
            + note("req:")
            + "\nREQ-0-T-SYS-001 Title\n"
            + note("/req")
            + "\\end_layout\n\n"
            + "\\begin_layout Standard\nAfter.\n\\end_layout\n\n"
        )
        f = write_lyx(tmp_path / "0-T-100-ORD.lyx", block)
        out = io.StringIO()

        reqs = parse_lyx(f, out, repo=tmp_repo)

        rewritten = out.getvalue()
        assert reqs == ["REQ-0-T-SYS-001 Title"]
        assert rewritten.count("hypertarget{REQ-0-T-SYS-001}") == 1
        anchor = rewritten.index("hypertarget{REQ-0-T-SYS-001}")
        assert rewritten.index("/req") < anchor < rewritten.index("After.")
        assert "\\begin_layout Standard\n\\begin_inset ERT" in rewritten

    def test_not_utf8(self, tmp_path, tmp_repo):
        f = tmp_path / "0-T-100-ORD.lyx"
        text = HEADER + requirement("REQ-0-T-SYS-001 Déjà vu", "Body") + FOOTER
        f.write_bytes(text.encode("latin-1"))

        with pytest.raises(EncodingError) as exc_info:
            parse_lyx(f, io.StringIO(), repo=tmp_repo)

        assert exc_info.value.path == str(f)
