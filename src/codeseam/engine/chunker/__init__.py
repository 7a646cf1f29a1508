# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""The structural chunker: scanner, boundary detector, doc attacher and assembler."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from codeseam.core.utils.lazy_import import create_lazy_getattr


if TYPE_CHECKING:
    from codeseam.engine.chunker.assembler import ChunkAssembler, DeclarationPolicy
    from codeseam.engine.chunker.boundary import BoundaryDetector
    from codeseam.engine.chunker.docs import DocCommentAttacher
    from codeseam.engine.chunker.pool import ChunkingPool, FileChunkResult, chunk_files
    from codeseam.engine.chunker.profiles import (
        Language,
        LanguageProfile,
        detect_language,
        get_profile,
        register_profile,
        registered_languages,
    )
    from codeseam.engine.chunker.scanner import CodeView, Scanner, TokenStream, scan
    from codeseam.engine.chunker.structural import StructuralChunker, chunk, chunk_file

_dynamic_imports: MappingProxyType[str, tuple[str, str]] = MappingProxyType({
    "BoundaryDetector": (__spec__.parent, "boundary"),
    "ChunkAssembler": (__spec__.parent, "assembler"),
    "ChunkingPool": (__spec__.parent, "pool"),
    "CodeView": (__spec__.parent, "scanner"),
    "DeclarationPolicy": (__spec__.parent, "assembler"),
    "DocCommentAttacher": (__spec__.parent, "docs"),
    "FileChunkResult": (__spec__.parent, "pool"),
    "Language": (__spec__.parent, "profiles"),
    "LanguageProfile": (__spec__.parent, "profiles"),
    "Scanner": (__spec__.parent, "scanner"),
    "StructuralChunker": (__spec__.parent, "structural"),
    "TokenStream": (__spec__.parent, "scanner"),
    "chunk": (__spec__.parent, "structural"),
    "chunk_file": (__spec__.parent, "structural"),
    "chunk_files": (__spec__.parent, "pool"),
    "detect_language": (__spec__.parent, "profiles"),
    "get_profile": (__spec__.parent, "profiles"),
    "register_profile": (__spec__.parent, "profiles"),
    "registered_languages": (__spec__.parent, "profiles"),
    "scan": (__spec__.parent, "scanner"),
})

__getattr__ = create_lazy_getattr(_dynamic_imports, globals(), __name__)

__all__ = (
    "BoundaryDetector",
    "ChunkAssembler",
    "ChunkingPool",
    "CodeView",
    "DeclarationPolicy",
    "DocCommentAttacher",
    "FileChunkResult",
    "Language",
    "LanguageProfile",
    "Scanner",
    "StructuralChunker",
    "TokenStream",
    "chunk",
    "chunk_file",
    "chunk_files",
    "detect_language",
    "get_profile",
    "register_profile",
    "registered_languages",
    "scan",
)


def __dir__() -> list[str]:
    """List available attributes for the chunker package."""
    return list(__all__)
