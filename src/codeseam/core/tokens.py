# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Token types produced by the lexical scanner."""

from __future__ import annotations

from typing import Annotated, NamedTuple

from pydantic import Field

from codeseam.core.spans import ByteRange
from codeseam.core.types.enum import BaseEnum


class TokenKind(str, BaseEnum):
    """Classification of a scanned span of source text."""

    WHITESPACE = "whitespace"
    CODE = "code"
    STRING = "string"
    CHAR = "char"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"
    DIRECTIVE = "directive"

    @property
    def is_comment(self) -> bool:
        return self in (TokenKind.LINE_COMMENT, TokenKind.BLOCK_COMMENT)

    @property
    def is_literal(self) -> bool:
        return self in (TokenKind.STRING, TokenKind.CHAR)

    @property
    def is_structural(self) -> bool:
        """Only code tokens take part in keyword and bracket matching."""
        return self is TokenKind.CODE


class Token(NamedTuple):
    """A classified, immutable span of source text."""

    kind: Annotated[TokenKind, Field(description="What the span is.")]
    range: Annotated[ByteRange, Field(description="Byte offsets of the span.")]
    text: Annotated[str, Field(description="The span's text, decoded as utf-8.")]
    truncated: Annotated[
        bool,
        Field(description="An unterminated string, char literal or comment ran into end of input."),
    ] = False

    @property
    def start(self) -> int:
        return self.range.start

    @property
    def end(self) -> int:
        return self.range.end

    @property
    def is_code(self) -> bool:
        return self.kind is TokenKind.CODE

    def newline_count(self) -> int:
        return self.text.count("\n")


__all__ = ("Token", "TokenKind")
