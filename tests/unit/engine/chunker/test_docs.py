# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Tests for doc comment attachment."""

from __future__ import annotations

import pytest

from codeseam.core.chunks import ChunkSpan
from codeseam.engine.chunker.boundary import BoundaryDetector
from codeseam.engine.chunker.docs import DocCommentAttacher
from codeseam.engine.chunker.profiles import get_profile
from codeseam.engine.chunker.scanner import Scanner


pytestmark = [pytest.mark.unit]


def documented(
    source: bytes, language: str, *, tolerance: int | None = None
) -> tuple[ChunkSpan, ...]:
    profile = get_profile(language)
    stream = Scanner(profile).scan(source)
    spans = BoundaryDetector(profile).detect(stream)
    return DocCommentAttacher(profile, blank_line_tolerance=tolerance).attach(stream, spans)


def doc_of(source: bytes, language: str, **kwargs: int | None) -> str | None:
    (span, *_) = documented(source, language, **kwargs)
    return span.doc_comment


@pytest.mark.unit
class TestLineComments:
    """Runs of line comments directly above a declaration."""

    def test_adjacent_comment_attaches(self) -> None:
        source = b"// Adds two numbers.\nint add(int a, int b) { return a + b; }\n"
        assert doc_of(source, "c") == "Adds two numbers."

    def test_consecutive_comments_are_joined(self) -> None:
        source = b"// First line.\n// Second line.\nint f(void) { return 0; }\n"
        assert doc_of(source, "c") == "First line.\nSecond line."

    def test_blank_line_detaches_the_comment(self) -> None:
        source = b"// Orphan.\n\nint f(void) { return 0; }\n"
        assert doc_of(source, "c") is None

    def test_tolerance_allows_blank_lines(self) -> None:
        source = b"// Kept.\n\nint f(void) { return 0; }\n"
        assert doc_of(source, "c", tolerance=1) == "Kept."
        assert doc_of(b"// Kept.\n\n\nint f(void) { return 0; }\n", "c", tolerance=1) is None

    def test_trailing_comment_belongs_to_the_code_before_it(self) -> None:
        source = b"int x; // counter\nint f(void) { return 0; }\n"
        assert doc_of(source, "c") is None

    def test_triple_slash_marker_is_stripped(self) -> None:
        assert doc_of(b"/// Doc for f.\nint f() { return 0; }\n", "cpp") == "Doc for f."

    def test_python_hash_comment_wins_over_docstring(self) -> None:
        source = b'# Helper.\ndef g():\n    """Docstring."""\n'
        assert doc_of(source, "python") == "Helper."


@pytest.mark.unit
class TestBlockComments:
    """Block comments and their gutters."""

    def test_javadoc_gutter_is_stripped(self) -> None:
        source = b"""/**
 * Computes things.
 *
 * @param x the input
 */
int f(int x) { return x; }
"""
        assert doc_of(source, "c") == "Computes things.\n\n@param x the input"

    def test_single_line_block_comment(self) -> None:
        assert doc_of(b"/* Short. */\nvoid g(void) {}\n", "c") == "Short."

    def test_only_the_nearest_block_is_taken(self) -> None:
        source = b"/* a */\n// b\nint f(void) { return 0; }\n"
        assert doc_of(source, "c") == "b"


@pytest.mark.unit
class TestPlacement:
    """Docs on nested and prefixed declarations."""

    def test_nested_declarations_get_their_own_docs(self) -> None:
        source = b"// The class.\nclass A {\n    // Runs.\n    void run() {}\n    void stop() {}\n};\n"
        (span,) = documented(source, "cpp")
        assert span.doc_comment == "The class."
        assert [child.doc_comment for child in span.children] == ["Runs.", None]

    def test_doc_above_attributes(self) -> None:
        source = b"/// A point.\n#[derive(Debug)]\npub struct Point {}\n"
        assert doc_of(source, "rust") == "A point."

    def test_doc_above_decorator(self) -> None:
        source = b'@dataclass\nclass Point:\n    """A point."""\n\n    x: int\n'
        assert doc_of(source, "python") == "A point."
        source = b"# Decorated.\n@dataclass\nclass Point:\n    x: int\n"
        assert doc_of(source, "python") == "Decorated."


@pytest.mark.unit
class TestDocstrings:
    """Python docstrings."""

    def test_docstring_is_dedented(self) -> None:
        source = b'def f():\n    """Summary line.\n\n    More detail.\n    """\n    return 1\n'
        assert doc_of(source, "python") == "Summary line.\n\nMore detail."

    def test_single_quoted_docstrings(self) -> None:
        assert doc_of(b"def f():\n    '''Single quoted.'''\n", "python") == "Single quoted."
        assert doc_of(b"def f():\n    'Short.'\n", "python") == "Short."

    def test_string_after_code_is_not_a_docstring(self) -> None:
        assert doc_of(b'def f():\n    x = 1\n    "not a doc"\n', "python") is None

    def test_brace_languages_have_no_docstrings(self) -> None:
        assert doc_of(b'int f(void) { "text"; return 0; }\n', "c") is None
