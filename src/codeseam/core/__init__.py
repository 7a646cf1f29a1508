# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Core data model: byte ranges, tokens and chunks."""

from codeseam.core.chunks import Chunk, ChunkFlag, ChunkKind, ChunkSpan
from codeseam.core.spans import ByteRange
from codeseam.core.tokens import Token, TokenKind
from codeseam.core.types import BaseEnum, BasedModel


__all__ = (
    "BaseEnum",
    "BasedModel",
    "ByteRange",
    "Chunk",
    "ChunkFlag",
    "ChunkKind",
    "ChunkSpan",
    "Token",
    "TokenKind",
)
