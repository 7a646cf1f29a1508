# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Type aliases used throughout codeseam."""

from __future__ import annotations

from typing import NewType


type LanguageNameT = str

LanguageName = NewType("LanguageName", str)
"""A registered language profile name, lowercase (e.g. `cpp`)."""

ChunkId = NewType("ChunkId", str)
"""A deterministic chunk identifier (truncated blake3 hex digest)."""

BlakeHashKey = NewType("BlakeHashKey", str)

FileExt = NewType("FileExt", str)
"""A file extension including the leading dot, lowercase."""


__all__ = ("BlakeHashKey", "ChunkId", "FileExt", "LanguageName", "LanguageNameT")
