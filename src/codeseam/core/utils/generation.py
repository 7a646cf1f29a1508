# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Utility functions for generating identifiers and hashes."""

from __future__ import annotations

from blake3 import blake3

from codeseam.core.spans import ByteRange
from codeseam.core.types.aliases import BlakeHashKey, ChunkId


CHUNK_ID_LENGTH = 32


def get_blake_hash[AnyStr: (str, bytes)](value: AnyStr) -> BlakeHashKey:
    """Hash a value using blake3 and return the hex digest."""
    return BlakeHashKey(
        blake3(value.encode("utf-8") if isinstance(value, str) else value).hexdigest()
    )


def chunk_id(namespace: str, ordinal: int, kind: str, full_range: ByteRange) -> ChunkId:
    """Derive a deterministic chunk id from its position in a run.

    The namespace is the file path when one is known, otherwise the language tag.
    """
    key = f"{namespace}\x00{ordinal}\x00{kind}\x00{full_range.start}:{full_range.end}"
    return ChunkId(get_blake_hash(key)[:CHUNK_ID_LENGTH])


__all__ = ("CHUNK_ID_LENGTH", "chunk_id", "get_blake_hash")
