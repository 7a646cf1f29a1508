# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Tests for byte ranges, chunk records and chunk ids."""

from __future__ import annotations

import pytest

from pydantic import ValidationError

from codeseam.core.chunks import Chunk, ChunkFlag, ChunkKind, ChunkSpan
from codeseam.core.spans import ByteRange
from codeseam.core.utils.generation import CHUNK_ID_LENGTH, chunk_id, get_blake_hash


pytestmark = [pytest.mark.unit]

SOURCE = b"int add(int a, int b) {\n    return a + b;\n}\n"


def make_chunk(**overrides: object) -> Chunk:
    values: dict[str, object] = {
        "id": "a" * CHUNK_ID_LENGTH,
        "kind": ChunkKind.FUNCTION,
        "name": "add",
        "signature": "int add(int a, int b)",
        "full_range": ByteRange(0, 43),
        "body_range": ByteRange(22, 43),
        "language": "c",
    }
    values.update(overrides)
    return Chunk.model_validate(values)


@pytest.mark.unit
class TestByteRange:
    """Half-open range arithmetic."""

    def test_length_and_emptiness(self) -> None:
        assert ByteRange(3, 10).length == 7
        assert ByteRange(5, 5).is_empty
        assert not ByteRange(5, 6).is_empty

    def test_contains(self) -> None:
        outer = ByteRange(0, 20)
        assert outer.contains(ByteRange(5, 10))
        assert outer.contains(outer)
        assert not outer.contains(outer, strict=True)
        assert outer.contains(ByteRange(0, 19), strict=True)
        assert not outer.contains(ByteRange(15, 25))

    def test_overlaps_is_exclusive_at_the_edges(self) -> None:
        assert ByteRange(0, 10).overlaps(ByteRange(9, 12))
        assert not ByteRange(0, 10).overlaps(ByteRange(10, 12))

    def test_slice(self) -> None:
        assert ByteRange(0, 3).slice(SOURCE) == b"int"


@pytest.mark.unit
class TestChunk:
    """The public chunk record."""

    def test_is_frozen(self) -> None:
        chunk = make_chunk()
        with pytest.raises(ValidationError):
            chunk.name = "other"  # type: ignore[misc]

    def test_text_and_body_text(self) -> None:
        chunk = make_chunk()
        assert chunk.text(SOURCE) == SOURCE[:43].decode()
        assert chunk.body_text(SOURCE) == "{\n    return a + b;\n}"

    def test_body_less_chunk_has_no_body_text(self) -> None:
        chunk = make_chunk(body_range=None, full_range=ByteRange(0, 22))
        assert chunk.body_text(SOURCE) is None

    def test_line_range_is_one_based_and_inclusive(self) -> None:
        assert make_chunk().line_range(SOURCE) == (1, 3)

    def test_flags(self) -> None:
        chunk = make_chunk(flags=frozenset({ChunkFlag.INCOMPLETE}))
        assert chunk.is_incomplete
        assert not chunk.has_truncated_literal

    def test_serialize_for_cli(self) -> None:
        data = make_chunk(flags=frozenset({ChunkFlag.TRUNCATED_LITERAL})).serialize_for_cli()
        assert data["kind"] == "function"
        assert data["range"] == [0, 43]
        assert data["parent"] is None
        assert data["flags"] == ["truncated_literal"]

    def test_kind_accepts_string_values(self) -> None:
        assert make_chunk(kind="namespace").kind is ChunkKind.NAMESPACE


@pytest.mark.unit
class TestChunkKind:
    """Kind groupings used by the detector."""

    @pytest.mark.parametrize(
        ("kind", "container", "callable_"),
        [
            (ChunkKind.FUNCTION, False, True),
            (ChunkKind.METHOD, False, True),
            (ChunkKind.CLASS, True, False),
            (ChunkKind.NAMESPACE, True, False),
            (ChunkKind.OTHER_DECLARATION, False, False),
        ],
    )
    def test_groupings(self, kind: ChunkKind, container: bool, callable_: bool) -> None:
        assert kind.is_container is container
        assert kind.is_callable is callable_

    def test_namespaces_do_not_own_methods(self) -> None:
        assert ChunkKind.CLASS.owns_methods
        assert not ChunkKind.NAMESPACE.owns_methods


@pytest.mark.unit
class TestChunkSpan:
    """The detector's intermediate result."""

    def test_walk_is_depth_first(self) -> None:
        leaf = ChunkSpan(ChunkKind.METHOD, "run", ByteRange(10, 20), ByteRange(15, 20), "void run()")
        other = ChunkSpan(ChunkKind.METHOD, "stop", ByteRange(21, 30), None, "void stop();")
        parent = ChunkSpan(
            ChunkKind.CLASS, "A", ByteRange(0, 40), ByteRange(8, 40), "class A", children=(leaf, other)
        )
        assert [span.name for span in parent.walk()] == ["A", "run", "stop"]
        assert other.is_declaration_only
        assert not leaf.is_declaration_only


@pytest.mark.unit
class TestChunkIds:
    """Deterministic id derivation."""

    def test_id_is_deterministic(self) -> None:
        first = chunk_id("src/a.c", 0, ChunkKind.FUNCTION, ByteRange(0, 10))
        second = chunk_id("src/a.c", 0, ChunkKind.FUNCTION, ByteRange(0, 10))
        assert first == second
        assert len(first) == CHUNK_ID_LENGTH

    @pytest.mark.parametrize(
        "changed",
        [
            ("src/b.c", 0, ChunkKind.FUNCTION, ByteRange(0, 10)),
            ("src/a.c", 1, ChunkKind.FUNCTION, ByteRange(0, 10)),
            ("src/a.c", 0, ChunkKind.STRUCT, ByteRange(0, 10)),
            ("src/a.c", 0, ChunkKind.FUNCTION, ByteRange(0, 11)),
        ],
    )
    def test_every_component_changes_the_id(
        self, changed: tuple[str, int, ChunkKind, ByteRange]
    ) -> None:
        assert chunk_id(*changed) != chunk_id("src/a.c", 0, ChunkKind.FUNCTION, ByteRange(0, 10))

    def test_blake_hash_accepts_str_and_bytes(self) -> None:
        assert get_blake_hash("abc") == get_blake_hash(b"abc")
        assert len(get_blake_hash(b"abc")) == 64
