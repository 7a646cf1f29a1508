# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Chunk models.

`ChunkSpan` is the boundary detector's intermediate, recursive result. `Chunk`
is what callers receive: a flat, immutable record that references its parent
by id. A run returns a forest of chunks ordered depth-first in source order.
"""

from __future__ import annotations

from typing import Annotated, Any, NamedTuple

from pydantic import Field, NonNegativeInt, computed_field

from codeseam.core.spans import ByteRange
from codeseam.core.types.aliases import ChunkId
from codeseam.core.types.enum import BaseEnum
from codeseam.core.types.models import FROZEN_BASEDMODEL_CONFIG, BasedModel


class ChunkKind(str, BaseEnum):
    """The kind of declaration a chunk represents."""

    FUNCTION = "function"
    METHOD = "method"
    CLASS = "class"
    STRUCT = "struct"
    ENUM = "enum"
    UNION = "union"
    NAMESPACE = "namespace"
    TEMPLATE = "template"
    OTHER_DECLARATION = "other_declaration"

    @property
    def is_container(self) -> bool:
        """Kinds whose bodies may hold nested declarations."""
        return self in (
            ChunkKind.CLASS,
            ChunkKind.STRUCT,
            ChunkKind.UNION,
            ChunkKind.ENUM,
            ChunkKind.NAMESPACE,
            ChunkKind.TEMPLATE,
        )

    @property
    def owns_methods(self) -> bool:
        """Kinds whose direct function members are methods."""
        return self in (ChunkKind.CLASS, ChunkKind.STRUCT, ChunkKind.UNION, ChunkKind.ENUM)

    @property
    def is_callable(self) -> bool:
        return self in (ChunkKind.FUNCTION, ChunkKind.METHOD)


class ChunkFlag(str, BaseEnum):
    """Recoverable anomalies recorded on a chunk instead of being raised."""

    TRUNCATED_LITERAL = "truncated_literal"
    """A string, char literal or comment inside the chunk is unterminated."""
    INCOMPLETE = "incomplete"
    """The chunk's body never closed; its range runs to end of input."""


class ChunkSpan(NamedTuple):
    """A detected declaration, before ids and parents are assigned."""

    kind: ChunkKind
    name: str
    full_range: ByteRange
    body_range: ByteRange | None
    signature: str
    children: tuple[ChunkSpan, ...] = ()
    flags: frozenset[ChunkFlag] = frozenset()
    doc_comment: str | None = None
    depth: int = 0
    first_token: int = 0
    """Index of the span's first token in the token stream."""

    @property
    def is_declaration_only(self) -> bool:
        """A body-less declaration such as a prototype or forward declaration."""
        return self.body_range is None

    def walk(self):
        """Yield this span and its descendants depth-first."""
        yield self
        for child in self.children:
            yield from child.walk()


class Chunk(BasedModel):
    """A semantically meaningful, contiguous span of source text for one declaration."""

    model_config = FROZEN_BASEDMODEL_CONFIG

    id: Annotated[ChunkId, Field(description="Identifier unique within a run and stable across runs.")]
    kind: Annotated[ChunkKind, Field(description="The kind of declaration.")]
    name: Annotated[
        str, Field(description="Best-effort identifier; empty for anonymous constructs.")
    ] = ""
    signature: Annotated[
        str, Field(description="Declaration header text (return type, parameters, qualifiers) without the body.")
    ] = ""
    full_range: Annotated[ByteRange, Field(description="Signature and body together.")]
    body_range: Annotated[
        ByteRange | None,
        Field(description="The body, delimiters included. Absent for body-less declarations."),
    ] = None
    doc_comment: Annotated[
        str | None, Field(description="Attached documentation comment, markers stripped.")
    ] = None
    parent_id: Annotated[
        ChunkId | None, Field(description="Id of the enclosing chunk, if any.")
    ] = None
    language: Annotated[str, Field(description="Language tag the chunk was produced under.")]
    flags: Annotated[
        frozenset[ChunkFlag], Field(description="Recoverable anomalies.")
    ] = frozenset()
    depth: Annotated[NonNegativeInt, Field(description="Nesting depth; 0 at top level.")] = 0
    file_path: Annotated[str | None, Field(description="Source path, when known.")] = None

    @computed_field
    @property
    def is_incomplete(self) -> bool:
        """Whether the body ran to end of input without closing."""
        return ChunkFlag.INCOMPLETE in self.flags

    @property
    def has_truncated_literal(self) -> bool:
        return ChunkFlag.TRUNCATED_LITERAL in self.flags

    def text(self, source: bytes) -> str:
        """The chunk's full text, read from the source it was produced from."""
        return self.full_range.slice(source).decode("utf-8", errors="replace")

    def body_text(self, source: bytes) -> str | None:
        if self.body_range is None:
            return None
        return self.body_range.slice(source).decode("utf-8", errors="replace")

    def line_range(self, source: bytes) -> tuple[int, int]:
        """1-based, inclusive start and end lines of the chunk."""
        start_line = source.count(b"\n", 0, self.full_range.start) + 1
        end_offset = max(self.full_range.start, self.full_range.end - 1)
        return start_line, source.count(b"\n", 0, end_offset) + 1

    def serialize_for_cli(self) -> dict[str, Any]:
        """A compact, display-oriented view of the chunk."""
        return {
            "id": self.id,
            "kind": self.kind.value,
            "name": self.name,
            "range": [self.full_range.start, self.full_range.end],
            "parent": self.parent_id,
            "flags": sorted(flag.value for flag in self.flags),
        }


__all__ = ("Chunk", "ChunkFlag", "ChunkKind", "ChunkSpan")
