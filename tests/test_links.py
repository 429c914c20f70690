"""Tests for link extraction and the mergeable-name rule."""

from __future__ import annotations

from wikimerge.links import extract_links, is_mergeable_name, marker


class TestExtractLinks:
    def test_no_links(self) -> None:
        assert extract_links("Just plain text") == []

    def test_document_order(self) -> None:
        assert extract_links("[[B]] then [[A]] then [[C]]") == ["B", "A", "C"]

    def test_duplicates_preserved(self) -> None:
        assert extract_links("[[A]] and again [[A]]") == ["A", "A"]

    def test_whitespace_trimmed(self) -> None:
        assert extract_links("[[  Spaced Note \t]]") == ["Spaced Note"]

    def test_images_skipped(self) -> None:
        text = "[[a.jpg]] [[b.JPEG]] [[c.png]] [[d.Gif]] [[e.bmp]] [[f.svg]] [[g.webp]] [[note]]"
        assert extract_links(text) == ["note"]

    def test_image_extension_only_at_end(self) -> None:
        assert extract_links("[[png notes]] [[photo.png.md]]") == ["png notes", "photo.png.md"]

    def test_targets_never_contain_closing_bracket(self) -> None:
        links = extract_links("[[a]b]] [[ok]] [[]] [[x]]]")
        assert links == ["ok", "x"]
        assert all("]" not in link for link in links)

    def test_empty_marker_ignored(self) -> None:
        assert extract_links("[[]]") == []

    def test_alias_and_heading_kept_verbatim(self) -> None:
        assert extract_links("[[Note|Shown]] [[Note#Part]]") == ["Note|Shown", "Note#Part"]

    def test_multiline_text(self) -> None:
        text = "# Title\n\n- [[One]]\n- [[Two]]\n"
        assert extract_links(text) == ["One", "Two"]


def test_marker() -> None:
    assert marker("Child") == "[[Child]]"


class TestIsMergeableName:
    def test_markdown_note(self) -> None:
        assert is_mergeable_name("Child.md") is True

    def test_markdown_case_insensitive(self) -> None:
        assert is_mergeable_name("README.MD") is True

    def test_non_markdown(self) -> None:
        assert is_mergeable_name("data.csv") is False
        assert is_mergeable_name("Child") is False

    def test_generated_attachment_name(self) -> None:
        assert is_mergeable_name("3f9a7b2c8e1d4f5a6b7c8d9e0f1a2b3c.png") is False
        assert is_mergeable_name("3F9A7B2C8E1D4F5A6B7C8D9E0F1A2B3C.md") is False

    def test_almost_hex_name_is_mergeable(self) -> None:
        # 31 hex chars
        assert is_mergeable_name("3f9a7b2c8e1d4f5a6b7c8d9e0f1a2b3.md") is True
