# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Attach documentation comments to the declarations they precede.

A doc comment is the comment block directly above a declaration: a run of
consecutive line comments, or one block comment. Whitespace between the
comment and the declaration may hold at most one line break, plus as many blank
lines as the profile's tolerance allows. A comment that shares its line with
earlier code documents that code, not the declaration below it.

For profiles with docstrings, a declaration that has no comment above it takes
the string literal that opens its body.
"""

from __future__ import annotations

import bisect
import re

from collections.abc import Sequence
from textwrap import dedent

from codeseam.core.chunks import ChunkSpan
from codeseam.core.tokens import Token, TokenKind
from codeseam.engine.chunker.profiles.profile import LanguageProfile
from codeseam.engine.chunker.scanner import TokenStream


_BLOCK_GUTTER = re.compile(r"^\s*\*(?!/) ?")
_STRING_QUOTES = re.compile(r"""^[rRbBuUfF]*("{3}|'{3}|"|')(.*)\1$""", re.DOTALL)


class DocCommentAttacher:
    """Finds and cleans the doc comment of each span in a forest."""

    def __init__(
        self, profile: LanguageProfile, *, blank_line_tolerance: int | None = None
    ) -> None:
        self.profile = profile
        self.tolerance = (
            profile.doc_blank_line_tolerance if blank_line_tolerance is None else blank_line_tolerance
        )
        self._markers = sorted(
            (*profile.line_comments, "///", "//!"), key=len, reverse=True
        )

    def attach(self, stream: TokenStream, spans: Sequence[ChunkSpan]) -> tuple[ChunkSpan, ...]:
        """Return `spans` with `doc_comment` filled in, recursively."""
        return tuple(self._attach_one(stream, span) for span in spans)

    def _attach_one(self, stream: TokenStream, span: ChunkSpan) -> ChunkSpan:
        doc = self.comment_before(stream, span.first_token)
        if doc is None and self.profile.docstrings:
            doc = self.docstring(stream, span)
        children = tuple(self._attach_one(stream, child) for child in span.children)
        return span._replace(doc_comment=doc, children=children)

    def comment_before(self, stream: TokenStream, first_token: int) -> str | None:
        """The cleaned doc comment immediately above the token at `first_token`."""
        max_newlines = self.tolerance + 1
        collected: list[Token] = []
        block = False
        i = first_token - 1
        while i >= 0:
            token = stream[i]
            if token.kind is TokenKind.WHITESPACE:
                if token.newline_count() > max_newlines:
                    break
                if collected and token.newline_count() == 0:
                    # Comment shares its line with code or another comment before it.
                    previous = stream[i - 1] if i > 0 else None
                    if previous is not None and previous.kind is not TokenKind.LINE_COMMENT:
                        return self._owned_by_code(stream, i - 1, collected, block)
                i -= 1
                continue
            if token.kind is TokenKind.LINE_COMMENT and not block:
                collected.append(token)
                i -= 1
                continue
            if token.kind is TokenKind.BLOCK_COMMENT and not collected:
                collected.append(token)
                block = True
                i -= 1
                continue
            if collected and self._same_line(stream, i, collected[-1]):
                return None
            break
        if not collected:
            return None
        return self._clean(collected, block)

    def _owned_by_code(
        self, stream: TokenStream, i: int, collected: list[Token], block: bool
    ) -> str | None:
        """A comment whose line starts with something else belongs to that thing."""
        token = stream[i]
        if token.kind is TokenKind.BLOCK_COMMENT and not block:
            # `/* a */ // b` on one line: the pair still documents what follows.
            return self._clean(collected, block)
        return None

    @staticmethod
    def _same_line(stream: TokenStream, i: int, comment: Token) -> bool:
        between = stream.source[stream[i].end : comment.start]
        return b"\n" not in between

    def _clean(self, comments: list[Token], block: bool) -> str | None:
        if block:
            text = self._strip_block(comments[0].text)
        else:
            text = "\n".join(self._strip_line(token.text) for token in reversed(comments))
        lines = text.splitlines()
        while lines and not lines[0].strip():
            lines.pop(0)
        while lines and not lines[-1].strip():
            lines.pop()
        if not lines:
            return None
        return dedent("\n".join(line.rstrip() for line in lines))

    def _strip_line(self, text: str) -> str:
        for marker in self._markers:
            if text.startswith(marker):
                text = text[len(marker) :]
                break
        return text.removeprefix(" ")

    def _strip_block(self, text: str) -> str:
        opener = next(
            (open_ for open_, _ in self.profile.block_comments if text.startswith(open_)), ""
        )
        closer = next(
            (close for open_, close in self.profile.block_comments if open_ == opener), ""
        )
        body = text[len(opener) :]
        while body[:1] in ("*", "!"):
            body = body[1:]
        if closer and body.endswith(closer):
            body = body[: -len(closer)]
        body = body.rstrip("*")
        lines = body.splitlines()
        if len(lines) > 1 and all(
            _BLOCK_GUTTER.match(line) or not line.strip() for line in lines[1:]
        ):
            lines = [lines[0], *(_BLOCK_GUTTER.sub("", line, count=1) for line in lines[1:])]
        if lines:
            lines[0] = lines[0].strip()
        return "\n".join(lines)

    def docstring(self, stream: TokenStream, span: ChunkSpan) -> str | None:
        """The string literal opening the body of an indentation-delimited span."""
        if span.body_range is None:
            return None
        first = bisect.bisect_left(stream, span.body_range.start, key=lambda token: token.start)
        for index in range(first, len(stream)):
            token = stream[index]
            if token.start >= span.body_range.end:
                return None
            if token.kind is TokenKind.WHITESPACE or token.kind.is_comment:
                continue
            if token.kind is not TokenKind.STRING:
                return None
            match = _STRING_QUOTES.match(token.text)
            if match is None:
                return None
            lines = match.group(2).expandtabs().splitlines()
            if not lines:
                return None
            cleaned = "\n".join([lines[0].strip(), dedent("\n".join(lines[1:]))]).strip()
            return cleaned or None
        return None


__all__ = ("DocCommentAttacher",)
