# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Lexical scanner.

Splits raw source bytes into classified tokens covering the whole input, with no
gaps or overlaps. Literal and comment tokens shield their contents from the
structural passes: a brace inside a string never reaches the boundary detector.

The scanner decodes input as latin-1 internally so that every character index is
also a byte offset. Token text is re-decoded from the original bytes as utf-8.

Unterminated strings, char literals and block comments are kept as single
tokens flagged `truncated`; scanning always continues to end of input.
"""

from __future__ import annotations

import logging
import re

from collections.abc import Iterator, Sequence
from functools import cache, cached_property
from typing import TYPE_CHECKING, NamedTuple, overload, override

from codeseam.core.spans import ByteRange
from codeseam.core.tokens import Token, TokenKind
from codeseam.engine.chunker.profiles.profile import CharLiteralStyle, RawStringStyle


if TYPE_CHECKING:
    from codeseam.engine.chunker.profiles.profile import LanguageProfile, StringDelimiter


logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"[ \t\r\n\f\v]+")
_IDENTIFIER = re.compile(r"[A-Za-z_$\x80-\xff][0-9A-Za-z_$\x80-\xff]*")
_NUMBER = re.compile(r"\.?[0-9](?:[eEpP][+-]|[0-9A-Za-z_.])*")
_NUMBER_WITH_SEPARATORS = re.compile(r"\.?[0-9](?:[eEpP][+-]|[0-9A-Za-z_.]|'(?=[0-9A-Za-z]))*")
_CPP_RAW_STRING = re.compile(r'(?:u8|[uUL])?R"([^()\\ \t\n]{0,16})\(')
_RUST_RAW_STRING = re.compile(r'b?r(#*)"')
_REGEX_LITERAL = re.compile(r"/(?![/*])(?:\\.|\[(?:\\.|[^\]\\\n])*\]|[^/\\\[\n])+/[A-Za-z]*")
# After these, `/` begins an operand rather than a division.
_REGEX_PRECEDERS = frozenset(
    "( , = : [ ! & | ? { } ; + - * % < > ~ ^ => == != === !== && || ?? return typeof case".split()
)
_STRICT_CHAR = re.compile(
    r"b?'(?:\\(?:x[0-9A-Fa-f]{2}|u\{[0-9A-Fa-f]{1,6}\}|[^\n])|[\xc0-\xff][\x80-\xbf]{1,3}|[^'\\\n])'"
)

# Shift operators are never merged so that `>>` can close two template lists.
OPERATORS: tuple[str, ...] = (
    "...",
    "===",
    "!==",
    "->*",
    "::",
    "->",
    "=>",
    "==",
    "!=",
    "<=",
    ">=",
    "&&",
    "||",
    "++",
    "--",
    "+=",
    "-=",
    "*=",
    "/=",
    "%=",
    "&=",
    "|=",
    "^=",
    "**",
    "?.",
    "??",
    ":=",
)

OPENERS = frozenset("({[")
CLOSERS = frozenset(")}]")
_PAIRS = {")": "(", "}": "{", "]": "["}


class _Lexicon(NamedTuple):
    """Per-profile lexical tables, compiled once."""

    line_comments: tuple[str, ...]
    block_comments: tuple[tuple[str, str], ...]
    strings: tuple[tuple[StringDelimiter, re.Pattern[str]], ...]
    char_literals: CharLiteralStyle
    raw_strings: RawStringStyle
    directive_prefix: str | None
    tag_markers: tuple[str, ...]
    number: re.Pattern[str]
    regex_literals: bool


def _string_body_pattern(delimiter: StringDelimiter) -> re.Pattern[str]:
    """Match a string body through its closing delimiter."""
    close = re.escape(delimiter.close)
    newline = "" if delimiter.multiline else r"\n"
    if delimiter.escape:
        escape = re.escape(delimiter.escape)
        return re.compile(rf"(?:{escape}[\s\S]|(?!{close})[^{escape}{newline}])*{close}")
    any_char = r"[\s\S]" if delimiter.multiline else r"[^\n]"
    return re.compile(rf"(?:(?!{close}){any_char})*{close}")


@cache
def _lexicon_for(key: tuple[object, ...]) -> _Lexicon:
    (line_comments, block_comments, strings, chars, raws, directive, tags, separators, regexes) = key
    ordered = sorted(strings, key=lambda d: len(d.open), reverse=True)  # type: ignore[attr-defined]
    return _Lexicon(
        line_comments=tuple(sorted(line_comments, key=len, reverse=True)),  # type: ignore[arg-type]
        block_comments=tuple(block_comments),  # type: ignore[arg-type]
        strings=tuple((d, _string_body_pattern(d)) for d in ordered),
        char_literals=chars,  # type: ignore[arg-type]
        raw_strings=raws,  # type: ignore[arg-type]
        directive_prefix=directive,  # type: ignore[arg-type]
        tag_markers=tuple(sorted(tags, key=len, reverse=True)),  # type: ignore[arg-type]
        number=_NUMBER_WITH_SEPARATORS if separators else _NUMBER,
        regex_literals=bool(regexes),
    )


class TokenStream(Sequence[Token]):
    """The scanner's output: an immutable, re-enumerable token sequence."""

    def __init__(self, source: bytes, tokens: Sequence[Token]) -> None:
        self.source = source
        self._tokens: tuple[Token, ...] = tuple(tokens)

    @overload
    def __getitem__(self, index: int) -> Token: ...
    @overload
    def __getitem__(self, index: slice) -> Sequence[Token]: ...
    @override
    def __getitem__(self, index: int | slice) -> Token | Sequence[Token]:
        return self._tokens[index]

    @override
    def __len__(self) -> int:
        return len(self._tokens)

    @override
    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens)

    @cached_property
    def code_indices(self) -> tuple[int, ...]:
        """Positions of code tokens in the stream."""
        return tuple(i for i, token in enumerate(self._tokens) if token.kind is TokenKind.CODE)

    @cached_property
    def truncated_offsets(self) -> tuple[int, ...]:
        """Start offsets of truncated tokens, ascending."""
        return tuple(token.start for token in self._tokens if token.truncated)

    def code_view(self) -> CodeView:
        return CodeView(self)


class CodeView:
    """The structural view of a token stream: code tokens only, with bracket pairs.

    Indices into a `CodeView` count code tokens. `match[i]` holds the index of
    the bracket pairing with the bracket at `i`, or -1 when it has no partner.
    """

    def __init__(self, stream: TokenStream) -> None:
        self.stream = stream
        self.source = stream.source
        self.stream_index: tuple[int, ...] = stream.code_indices
        self.tokens: tuple[Token, ...] = tuple(stream[i] for i in self.stream_index)
        self.texts: tuple[str, ...] = tuple(token.text for token in self.tokens)
        self.match: list[int] = self._match_brackets(self.texts)

    def __len__(self) -> int:
        return len(self.tokens)

    @staticmethod
    def _match_brackets(texts: Sequence[str]) -> list[int]:
        """Pair brackets with a stack, recovering from mismatches.

        A closer that does not pair with the innermost opener closes the nearest
        enclosing opener of its type; openers skipped that way stay unpaired. A
        closer with no opener of its type is ignored.
        """
        match = [-1] * len(texts)
        stack: list[int] = []
        for i, text in enumerate(texts):
            if text in OPENERS:
                stack.append(i)
            elif text in CLOSERS:
                wanted = _PAIRS[text]
                for depth in range(len(stack) - 1, -1, -1):
                    if texts[stack[depth]] == wanted:
                        opener = stack[depth]
                        del stack[depth:]
                        match[opener] = i
                        match[i] = opener
                        break
        return match

    def text(self, i: int) -> str:
        return self.texts[i] if 0 <= i < len(self.texts) else ""

    def start(self, i: int) -> int:
        return self.tokens[i].start

    def end(self, i: int) -> int:
        return self.tokens[i].end

    def is_identifier(self, i: int) -> bool:
        return 0 <= i < len(self.texts) and _IDENTIFIER.fullmatch(self.texts[i]) is not None

    def close_of(self, i: int, limit: int) -> int:
        """Index of the bracket closing the one at `i`; `limit` when unpaired."""
        partner = self.match[i]
        return partner if i < partner < limit else limit

    def newline_before(self, i: int) -> bool:
        """Whether a line break separates code token `i` from the previous one."""
        if i <= 0:
            return True
        return self.source.find(b"\n", self.tokens[i - 1].end, self.tokens[i].start) != -1

    def starts_line(self, i: int) -> bool:
        """Whether code token `i` is the first thing on its line."""
        return self.line_begins_at(self.tokens[i].start)

    def indent(self, i: int) -> int:
        """Column of the line holding code token `i`, tabs expanded to 8."""
        return self.indent_at(self.tokens[i].start)

    def line_begins_at(self, offset: int) -> bool:
        line_start = self.source.rfind(b"\n", 0, offset) + 1
        return not self.source[line_start:offset].strip()

    def indent_at(self, offset: int) -> int:
        line_start = self.source.rfind(b"\n", 0, offset) + 1
        prefix = self.source[line_start:offset].decode("latin-1")
        return len(prefix) - len(prefix.lstrip()) + prefix.count("\t") * 7

    def join(self, lo: int, hi: int) -> str:
        """The source text from code token `lo` through code token `hi - 1`."""
        if hi <= lo:
            return ""
        raw = self.source[self.tokens[lo].start : self.tokens[hi - 1].end]
        return raw.decode("utf-8", errors="replace")

    def find(self, lo: int, hi: int, *texts: str) -> int:
        """First index in `[lo, hi)` whose text is one of `texts`, skipping bracket groups."""
        i = lo
        while i < hi:
            text = self.texts[i]
            if text in texts:
                return i
            i = self.close_of(i, hi) + 1 if text in OPENERS else i + 1
        return -1


class Scanner:
    """Tokenizes source bytes under one language profile."""

    def __init__(self, profile: LanguageProfile) -> None:
        self.profile = profile
        self._lexicon = _lexicon_for(profile.lexical_key)

    def scan(self, source: bytes | str) -> TokenStream:
        """Scan `source` into a token stream covering every byte."""
        if isinstance(source, str):
            source = source.encode("utf-8")
        text = source.decode("latin-1")
        tokens: list[Token] = []
        pos, length = 0, len(text)
        previous: str | None = None
        while pos < length:
            kind, end, truncated = self._next(text, pos, previous)
            if kind is TokenKind.CODE:
                previous = text[pos:end]
            tokens.append(
                Token(
                    kind=kind,
                    range=ByteRange(pos, end),
                    text=source[pos:end].decode("utf-8", errors="replace"),
                    truncated=truncated,
                )
            )
            pos = end
        stream = TokenStream(source, tokens)
        if stream.truncated_offsets:
            logger.debug(
                "%s scan found %d truncated literal(s)",
                self.profile.name,
                len(stream.truncated_offsets),
            )
        return stream

    def _next(  # noqa: C901
        self, text: str, pos: int, previous: str | None
    ) -> tuple[TokenKind, int, bool]:
        """Classify the token starting at `pos`: `(kind, end, truncated)`.

        `previous` is the text of the last code token, which decides whether a
        slash opens a regular expression literal.
        """
        lex = self._lexicon
        char = text[pos]
        if found := _WHITESPACE.match(text, pos):
            return TokenKind.WHITESPACE, found.end(), False
        if lex.directive_prefix and text.startswith(lex.directive_prefix, pos) and _at_line_start(
            text, pos
        ):
            return TokenKind.DIRECTIVE, _directive_end(text, pos), False
        for marker in lex.tag_markers:
            if text.startswith(marker, pos):
                return TokenKind.DIRECTIVE, pos + len(marker), False
        for open_, close in lex.block_comments:
            if text.startswith(open_, pos):
                end = text.find(close, pos + len(open_))
                if end == -1:
                    return TokenKind.BLOCK_COMMENT, len(text), True
                return TokenKind.BLOCK_COMMENT, end + len(close), False
        for opener in lex.line_comments:
            if text.startswith(opener, pos):
                end = text.find("\n", pos)
                return TokenKind.LINE_COMMENT, len(text) if end == -1 else end, False
        if raw := self._raw_string(text, pos):
            return TokenKind.STRING, *raw
        for delimiter, body in lex.strings:
            if text.startswith(delimiter.open, pos):
                return TokenKind.STRING, *_string_end(text, pos, delimiter, body)
        if (
            char == "/"
            and lex.regex_literals
            and (previous is None or previous in _REGEX_PRECEDERS)
            and (found := _REGEX_LITERAL.match(text, pos))
        ):
            return TokenKind.STRING, found.end(), False
        if char == "'" or (char == "b" and text.startswith("b'", pos)):
            if literal := self._char_literal(text, pos):
                return TokenKind.CHAR, *literal
        if found := _IDENTIFIER.match(text, pos):
            return TokenKind.CODE, found.end(), False
        if found := lex.number.match(text, pos):
            return TokenKind.CODE, found.end(), False
        for operator in OPERATORS:
            if text.startswith(operator, pos):
                return TokenKind.CODE, pos + len(operator), False
        return TokenKind.CODE, pos + 1, False

    def _raw_string(self, text: str, pos: int) -> tuple[int, bool] | None:
        style = self._lexicon.raw_strings
        if style is RawStringStyle.CPP and (found := _CPP_RAW_STRING.match(text, pos)):
            closing = f"){found.group(1)}\""
        elif style is RawStringStyle.RUST and (found := _RUST_RAW_STRING.match(text, pos)):
            closing = f'"{found.group(1)}'
        else:
            return None
        end = text.find(closing, found.end())
        if end == -1:
            return len(text), True
        return end + len(closing), False

    def _char_literal(self, text: str, pos: int) -> tuple[int, bool] | None:
        style = self._lexicon.char_literals
        if style is CharLiteralStyle.NONE:
            return None
        if style is CharLiteralStyle.STRICT:
            found = _STRICT_CHAR.match(text, pos)
            return (found.end(), False) if found else None
        if text[pos] != "'":
            return None
        i = pos + 1
        while i < len(text):
            char = text[i]
            if char == "\\":
                i += 2
                continue
            if char == "'":
                return i + 1, False
            if char == "\n":
                return i, True
            i += 1
        return len(text), True


def _at_line_start(text: str, pos: int) -> bool:
    line_start = text.rfind("\n", 0, pos) + 1
    return not text[line_start:pos].strip()


def _directive_end(text: str, pos: int) -> int:
    """End of a preprocessor line, following backslash continuations."""
    end = text.find("\n", pos)
    while end != -1:
        last = end - 1
        if last > pos and text[last] == "\r":
            last -= 1
        if text[last] != "\\":
            break
        end = text.find("\n", end + 1)
    return len(text) if end == -1 else end


def _string_end(
    text: str, pos: int, delimiter: StringDelimiter, body: re.Pattern[str]
) -> tuple[int, bool]:
    start = pos + len(delimiter.open)
    if found := body.match(text, start):
        return found.end(), False
    if delimiter.multiline:
        return len(text), True
    newline = text.find("\n", start)
    return (len(text) if newline == -1 else newline), True


def scan(source: bytes | str, profile: LanguageProfile) -> TokenStream:
    """Scan `source` with `profile`'s lexical rules."""
    return Scanner(profile).scan(source)


__all__ = ("CodeView", "Scanner", "TokenStream", "scan")
