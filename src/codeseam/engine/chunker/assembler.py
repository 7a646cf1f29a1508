# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Turn detected spans into identified, linked `Chunk` records.

The assembler flattens a span forest depth-first into `Chunk` records, in
source order, gives each a deterministic id and links it to its parent. Before
flattening it applies the declaration policy, which decides what to do with a
body-less declaration whose definition lives in the same scope.
"""

from __future__ import annotations

import logging
import re

from collections.abc import Sequence

from codeseam.core.chunks import Chunk, ChunkSpan
from codeseam.core.types.enum import BaseEnum
from codeseam.core.utils.generation import chunk_id


logger = logging.getLogger(__name__)

_SPACES = re.compile(r"\s+")


class DeclarationPolicy(str, BaseEnum):
    """What to do with a prototype when its definition is in the same scope."""

    KEEP_ALL = "keep_all"
    """Keep every declaration, body-less or not."""
    SIGNATURE = "signature"
    """Drop a declaration matching a definition by kind, name and parameter list."""
    PROXIMITY = "proximity"
    """Drop a declaration immediately followed by a definition of the same name."""


def _parameters(signature: str) -> str:
    """The whitespace-normalized text of the last top-level parameter list in a signature."""
    depth = 0
    close = -1
    for index in range(len(signature) - 1, -1, -1):
        char = signature[index]
        if char == ")":
            if depth == 0 and close == -1:
                close = index
            depth += 1
        elif char == "(":
            depth -= 1
            if depth == 0 and close != -1:
                return _SPACES.sub(" ", signature[index + 1 : close]).strip()
    return ""


def _definition_key(span: ChunkSpan) -> tuple[str, str, str]:
    return (span.kind.value, span.name, _parameters(span.signature))


class ChunkAssembler:
    """Builds `Chunk` records from a span forest. Holds no per-input state."""

    def __init__(self, *, policy: DeclarationPolicy = DeclarationPolicy.SIGNATURE) -> None:
        self.policy = policy

    def assemble(
        self,
        spans: Sequence[ChunkSpan],
        *,
        language: str,
        file_path: str | None = None,
    ) -> list[Chunk]:
        """Flatten `spans` into chunks, parents before children, in source order."""
        chunks: list[Chunk] = []
        self._emit(self.apply_policy(spans), None, chunks, file_path or language, language, file_path)
        return chunks

    def _emit(
        self,
        spans: Sequence[ChunkSpan],
        parent_id: str | None,
        chunks: list[Chunk],
        namespace: str,
        language: str,
        file_path: str | None,
    ) -> None:
        for span in spans:
            chunk = Chunk(
                id=chunk_id(namespace, len(chunks), span.kind, span.full_range),
                kind=span.kind,
                name=span.name,
                signature=span.signature,
                full_range=span.full_range,
                body_range=span.body_range,
                doc_comment=span.doc_comment,
                parent_id=parent_id,
                language=language,
                flags=span.flags,
                depth=span.depth,
                file_path=file_path,
            )
            chunks.append(chunk)
            self._emit(span.children, chunk.id, chunks, namespace, language, file_path)

    def apply_policy(self, spans: Sequence[ChunkSpan]) -> tuple[ChunkSpan, ...]:
        """Drop redundant declarations at every level, per the assembler's policy."""
        kept = self._filter_scope(spans)
        return tuple(
            span._replace(children=self.apply_policy(span.children)) if span.children else span
            for span in kept
        )

    def _filter_scope(self, spans: Sequence[ChunkSpan]) -> list[ChunkSpan]:
        if self.policy is DeclarationPolicy.KEEP_ALL:
            return list(spans)
        if self.policy is DeclarationPolicy.PROXIMITY:
            kept = [
                span
                for span, following in zip(spans, (*spans[1:], None), strict=True)
                if not (
                    span.is_declaration_only
                    and following is not None
                    and not following.is_declaration_only
                    and following.name == span.name
                )
            ]
        else:
            defined = {_definition_key(span) for span in spans if not span.is_declaration_only}
            kept = [
                span
                for span in spans
                if not (span.is_declaration_only and _definition_key(span) in defined)
            ]
        if dropped := len(spans) - len(kept):
            logger.debug("Dropped %d redundant declaration(s) under %s policy", dropped, self.policy)
        return kept


__all__ = ("ChunkAssembler", "DeclarationPolicy")
