"""Tests for front matter splitting and normalization."""

import os
import time

import pytest

from echo_pkg.errors import BuildIOError, ParseError
from echo_pkg.frontmatter import load_document, normalize, split_front_matter, trim_blank_lines
from echo_pkg.markup import create_markdown_parser


class TestSplitFrontMatter:
    """Test cases for split_front_matter."""

    def test_with_front_matter(self):
        """Test metadata and body are separated."""
        metadata, body = split_front_matter("---\ntitle: About\n---\n<p>About us</p>\n")
        assert metadata == {'title': 'About'}
        assert body == "<p>About us</p>\n"

    def test_without_front_matter(self):
        """Test plain files have empty metadata."""
        metadata, body = split_front_matter("<p>Plain</p>")
        assert metadata == {}
        assert body == "<p>Plain</p>"

    def test_empty_front_matter(self):
        """Test an empty block yields empty metadata."""
        metadata, body = split_front_matter("---\n---\nbody")
        assert metadata == {}
        assert body == "body"

    def test_dashes_inside_body(self):
        """Test a horizontal rule in the body is not taken for front matter."""
        metadata, body = split_front_matter("<p>a</p>\n---\n<p>b</p>\n---\n")
        assert metadata == {}
        assert body.startswith("<p>a</p>")

    def test_invalid_yaml(self):
        """Test malformed YAML raises ParseError with the path."""
        with pytest.raises(ParseError, match="broken.html"):
            split_front_matter("---\ntitle: [unclosed\n---\nbody", path='broken.html')

    def test_non_mapping(self):
        """Test front matter that is not a mapping is rejected."""
        with pytest.raises(ParseError, match="mapping"):
            split_front_matter("---\n- a\n- b\n---\nbody")


class TestTrimBlankLines:
    """Test cases for trim_blank_lines."""

    def test_trims_both_ends(self):
        """Test leading and trailing blank lines are removed."""
        assert trim_blank_lines("\n\n  \r\n<p>hi</p>\n\n \n") == "<p>hi</p>"

    def test_keeps_indentation_of_first_line(self):
        """Test whitespace on the first content line is preserved."""
        assert trim_blank_lines("\n    <p>hi</p>") == "    <p>hi</p>"

    def test_keeps_inner_blank_lines(self):
        """Test blank lines between content lines are preserved."""
        assert trim_blank_lines("<p>a</p>\n\n<p>b</p>") == "<p>a</p>\n\n<p>b</p>"

    @pytest.mark.parametrize('gap', ["\n" * 40, "\n \n" * 40, "\r\n\t" * 40])
    def test_long_inner_gap_is_fast(self, gap):
        """Test a long run of blank lines inside the body is kept and trimmed quickly."""
        body = "\n<p>a</p>" + gap + "<p>b</p>" + gap
        start = time.perf_counter()
        result = trim_blank_lines(body)
        assert time.perf_counter() - start < 1.0
        assert result == "<p>a</p>" + gap + "<p>b</p>"


class TestNormalize:
    """Test cases for normalize."""

    def test_notes_rendered_and_removed(self):
        """Test notes become HTML and leave the stored data."""
        markdown = create_markdown_parser()
        doc = normalize("---\ntitle: Card\nnotes: Use **sparingly**.\n---\n<div></div>", markdown=markdown)
        assert doc.data == {'title': 'Card'}
        assert '<strong>sparingly</strong>' in doc.notes

    def test_notes_absent(self):
        """Test missing notes give an empty string and no data key."""
        doc = normalize("---\ntitle: Card\n---\n<div></div>")
        assert doc.notes == ''
        assert 'notes' not in doc.data

    def test_spec_extracted(self):
        """Test spec is kept apart from the data."""
        doc = normalize("---\nspec: 320px wide\ntitle: Card\n---\n<div></div>")
        assert doc.spec == '320px wide'
        assert doc.data == {'title': 'Card'}

    def test_spec_kept_in_data(self):
        """Test spec stays in the data when extraction is off."""
        doc = normalize("---\nspec: 320px wide\n---\n<div></div>", extract_spec=False)
        assert doc.spec is None
        assert doc.data == {'spec': '320px wide'}

    def test_body_trimmed(self):
        """Test the body has its surrounding blank lines removed."""
        doc = normalize("---\ntitle: x\n---\n\n\n<p>hi</p>\n\n")
        assert doc.body == "<p>hi</p>"


class TestLoadDocument:
    """Test cases for load_document."""

    def test_reads_file(self, temp_dir):
        """Test a file on disk is read and normalized."""
        path = os.path.join(temp_dir, 'about.html')
        with open(path, 'w', encoding='utf-8') as f:
            f.write("---\ntitle: About\n---\n<p>About us</p>\n")
        doc = load_document(path)
        assert doc.data == {'title': 'About'}
        assert doc.body == "<p>About us</p>"

    def test_missing_file(self, temp_dir):
        """Test a missing file raises BuildIOError."""
        with pytest.raises(BuildIOError):
            load_document(os.path.join(temp_dir, 'missing.html'))
