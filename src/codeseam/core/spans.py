# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Byte ranges into a source buffer."""

from __future__ import annotations

from typing import Annotated, NamedTuple

from pydantic import Field, NonNegativeInt


class ByteRange(NamedTuple):
    """A half-open `[start, end)` range of byte offsets into a source buffer."""

    start: Annotated[NonNegativeInt, Field(description="First byte offset, inclusive.")]
    end: Annotated[NonNegativeInt, Field(description="Last byte offset, exclusive.")]

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        return self.end <= self.start

    def contains(self, other: ByteRange, *, strict: bool = False) -> bool:
        """Whether `other` lies within this range.

        With `strict`, `other` must also differ from this range.
        """
        inside = self.start <= other.start and other.end <= self.end
        return inside and (other != self) if strict else inside

    def overlaps(self, other: ByteRange) -> bool:
        return self.start < other.end and other.start < self.end

    def slice(self, source: bytes) -> bytes:
        """Materialize the range against the source it was produced from."""
        return source[self.start : self.end]


__all__ = ("ByteRange",)
