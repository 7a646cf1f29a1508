# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Tests for the lexical scanner.

Covers:
- Full, gap-free coverage of the input
- Comment, string, char literal and directive recognition per profile
- Truncated literal reporting without aborting the scan
- Bracket pairing in the code view
"""

from __future__ import annotations

import pytest

from codeseam.core.tokens import Token, TokenKind
from codeseam.engine.chunker.profiles import get_profile
from codeseam.engine.chunker.scanner import Scanner, TokenStream, scan


pytestmark = [pytest.mark.unit]


def kinds(stream: TokenStream) -> list[tuple[TokenKind, str]]:
    """Non-whitespace tokens as `(kind, text)`."""
    return [(token.kind, token.text) for token in stream if token.kind is not TokenKind.WHITESPACE]


def of_kind(stream: TokenStream, kind: TokenKind) -> list[str]:
    return [token.text for token in stream if token.kind is kind]


@pytest.mark.unit
class TestCoverage:
    """The token stream covers every byte exactly once."""

    @pytest.mark.parametrize(
        ("language", "source"),
        [
            ("c", b'int main(void) { puts("}{"); /* } */ return 0; }\n'),
            ("cpp", b'auto s = R"x(raw ) " text)x"; // done\n'),
            ("python", b'def f():\n    """doc"""\n    return {"a": 1}\n'),
            ("rust", b"fn f<'a>(s: &'a str) -> char { 'x' }\n"),
            ("javascript", b"const re = /[}]+/g; const t = `a ${b} c`;\n"),
            ("go", b"func f() string { return `raw\n}` }\n"),
            ("c", b'char *s = "unterminated\nint x;\n'),
        ],
    )
    def test_tokens_are_contiguous(self, language: str, source: bytes) -> None:
        stream = scan(source, get_profile(language))
        position = 0
        for token in stream:
            assert token.start == position
            assert token.end > token.start
            position = token.end
        assert position == len(source)
        assert b"".join(token.range.slice(source) for token in stream) == source

    def test_empty_input_yields_no_tokens(self) -> None:
        assert len(scan(b"", get_profile("c"))) == 0

    def test_stream_is_re_enumerable(self) -> None:
        stream = scan(b"int x = 1;", get_profile("c"))
        assert list(stream) == list(stream)
        assert isinstance(stream[0], Token)

    def test_str_input_is_encoded_as_utf8(self) -> None:
        source = 'const s = "héllo";'
        stream = scan(source, get_profile("javascript"))
        assert stream.source == source.encode("utf-8")
        assert of_kind(stream, TokenKind.STRING) == ['"héllo"']


@pytest.mark.unit
class TestComments:
    """Line and block comments."""

    def test_line_and_block_comments(self) -> None:
        stream = scan(b"// one\nint x; /* two */\n", get_profile("c"))
        assert of_kind(stream, TokenKind.LINE_COMMENT) == ["// one"]
        assert of_kind(stream, TokenKind.BLOCK_COMMENT) == ["/* two */"]

    def test_block_comments_do_not_nest(self) -> None:
        stream = scan(b"/* outer /* inner */ x */", get_profile("c"))
        assert of_kind(stream, TokenKind.BLOCK_COMMENT) == ["/* outer /* inner */"]
        assert "x" in of_kind(stream, TokenKind.CODE)

    def test_python_hash_comment(self) -> None:
        stream = scan(b"x = 1  # note\n", get_profile("python"))
        assert of_kind(stream, TokenKind.LINE_COMMENT) == ["# note"]

    def test_comment_markers_inside_strings_are_text(self) -> None:
        stream = scan(b'char *u = "http://x/*y*/";', get_profile("c"))
        assert of_kind(stream, TokenKind.LINE_COMMENT) == []
        assert of_kind(stream, TokenKind.BLOCK_COMMENT) == []


@pytest.mark.unit
class TestLiterals:
    """Strings, characters and raw strings."""

    def test_escaped_quote_does_not_end_string(self) -> None:
        stream = scan(b'char *s = "a \\" } b"; int y;', get_profile("c"))
        assert of_kind(stream, TokenKind.STRING) == ['"a \\" } b"']
        assert "y" in of_kind(stream, TokenKind.CODE)

    def test_char_literals(self) -> None:
        stream = scan(b"char c = '{'; char q = '\\'';", get_profile("c"))
        assert of_kind(stream, TokenKind.CHAR) == ["'{'", "'\\''"]

    def test_rust_lifetimes_are_not_char_literals(self) -> None:
        stream = scan(b"fn f<'a>(x: &'a u8) -> char { 'z' }", get_profile("rust"))
        assert of_kind(stream, TokenKind.CHAR) == ["'z'"]

    def test_cpp_raw_string(self) -> None:
        stream = scan(b'auto s = R"delim(a ") } b)delim";', get_profile("cpp"))
        assert of_kind(stream, TokenKind.STRING) == ['R"delim(a ") } b)delim"']

    def test_cpp_digit_separators(self) -> None:
        stream = scan(b"int n = 1'000'000; char c = 'x';", get_profile("cpp"))
        assert "1'000'000" in of_kind(stream, TokenKind.CODE)
        assert of_kind(stream, TokenKind.CHAR) == ["'x'"]

    def test_rust_raw_string(self) -> None:
        stream = scan(b'let s = r#"a "quoted" }"#;', get_profile("rust"))
        assert of_kind(stream, TokenKind.STRING) == ['r#"a "quoted" }"#']

    def test_python_triple_quoted_string_spans_lines(self) -> None:
        stream = scan(b'x = """a\n}\nb"""\n', get_profile("python"))
        assert of_kind(stream, TokenKind.STRING) == ['"""a\n}\nb"""']

    def test_javascript_template_literal(self) -> None:
        stream = scan(b"const t = `line\n{`;", get_profile("javascript"))
        assert of_kind(stream, TokenKind.STRING) == ["`line\n{`"]

    def test_javascript_regex_literal(self) -> None:
        stream = scan(b"const re = /[{]+/g;", get_profile("javascript"))
        assert of_kind(stream, TokenKind.STRING) == ["/[{]+/g"]

    def test_javascript_division_is_not_a_regex(self) -> None:
        stream = scan(b"const half = total / 2 / 1;", get_profile("javascript"))
        assert of_kind(stream, TokenKind.STRING) == []


@pytest.mark.unit
class TestDirectives:
    """Preprocessor lines."""

    def test_directive_with_continuation(self) -> None:
        source = b"#define MAX(a, b) \\\n    ((a) > (b) ? (a) : (b))\nint x;\n"
        stream = scan(source, get_profile("c"))
        directives = of_kind(stream, TokenKind.DIRECTIVE)
        assert directives == ["#define MAX(a, b) \\\n    ((a) > (b) ? (a) : (b))"]

    def test_hash_inside_expression_is_not_a_directive(self) -> None:
        stream = scan(b"int x = 1; # not at line start\n", get_profile("c"))
        assert of_kind(stream, TokenKind.DIRECTIVE) == []

    def test_directive_braces_are_not_structural(self) -> None:
        stream = scan(b"#define OPEN {\nint x;\n", get_profile("c"))
        assert "{" not in of_kind(stream, TokenKind.CODE)


@pytest.mark.unit
class TestTruncation:
    """Unterminated literals are flagged and scanning continues."""

    def test_unterminated_block_comment_runs_to_eof(self) -> None:
        source = b"int x; /* never closed\nint y;"
        stream = scan(source, get_profile("c"))
        last = stream[len(stream) - 1]
        assert last.kind is TokenKind.BLOCK_COMMENT
        assert last.truncated
        assert last.end == len(source)
        assert stream.truncated_offsets == (last.start,)

    def test_unterminated_single_line_string_stops_at_newline(self) -> None:
        stream = scan(b'char *s = "open\nint y;\n', get_profile("c"))
        strings = [token for token in stream if token.kind is TokenKind.STRING]
        assert len(strings) == 1
        assert strings[0].truncated
        assert strings[0].text == '"open'
        assert "y" in of_kind(stream, TokenKind.CODE)

    def test_clean_input_has_no_truncations(self) -> None:
        assert scan(b'int x = "ok";', get_profile("c")).truncated_offsets == ()


@pytest.mark.unit
class TestCodeView:
    """The structural view over code tokens."""

    def test_only_code_tokens(self) -> None:
        view = Scanner(get_profile("c")).scan(b'f("{"); /* { */ g();').code_view()
        assert view.texts == ("f", "(", ")", ";", "g", "(", ")", ";")

    def test_bracket_matching(self) -> None:
        view = scan(b"a(b[c]{d})", get_profile("c")).code_view()
        texts = view.texts
        assert view.match[texts.index("(")] == texts.index(")")
        assert view.match[texts.index("[")] == texts.index("]")
        assert view.match[texts.index("{")] == texts.index("}")

    def test_unpaired_opener_closes_at_limit(self) -> None:
        view = scan(b"f(x { y", get_profile("c")).code_view()
        assert view.match[1] == -1
        assert view.close_of(1, len(view)) == len(view)

    def test_mismatched_closer_closes_enclosing_opener(self) -> None:
        view = scan(b"{ ( }", get_profile("c")).code_view()
        assert view.match[0] == 2
        assert view.match[1] == -1

    def test_find_skips_bracket_groups(self) -> None:
        view = scan(b"f(a; b); c;", get_profile("c")).code_view()
        assert view.find(0, len(view), ";") == view.texts.index(")") + 1

    def test_shift_operators_are_not_merged(self) -> None:
        view = scan(b"std::vector<std::vector<int>> v;", get_profile("cpp")).code_view()
        assert view.texts.count(">") == 2
        assert "::" in view.texts

    def test_line_helpers(self) -> None:
        view = scan(b"def f():\n    return 1\n", get_profile("python")).code_view()
        ret = view.texts.index("return")
        assert view.starts_line(ret)
        assert view.newline_before(ret)
        assert view.indent(ret) == 4
        assert not view.starts_line(ret + 1)
