# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""codeseam: split source code into declaration-level chunks.

    >>> from codeseam import chunk
    >>> [(c.kind.value, c.name) for c in chunk(b"class A { void run() {} };", "cpp")]
    [('class', 'A'), ('method', 'run')]
"""

from codeseam._version import __version__
from codeseam.core.chunks import Chunk, ChunkFlag, ChunkKind
from codeseam.core.spans import ByteRange
from codeseam.engine.chunker.assembler import DeclarationPolicy
from codeseam.engine.chunker.pool import ChunkingPool, FileChunkResult, chunk_files
from codeseam.engine.chunker.profiles import (
    Language,
    LanguageProfile,
    detect_language,
    get_profile,
    register_profile,
    registered_languages,
)
from codeseam.engine.chunker.structural import StructuralChunker, chunk, chunk_file
from codeseam.exceptions import (
    ChunkingError,
    ChunkLimitExceededError,
    CodeSeamError,
    ConfigurationError,
    FileTooLargeError,
    UnsupportedLanguageError,
)
from codeseam.exceptions import ValidationError as CodeSeamValidationError


__all__ = (
    "ByteRange",
    "Chunk",
    "ChunkFlag",
    "ChunkKind",
    "ChunkLimitExceededError",
    "ChunkingError",
    "ChunkingPool",
    "CodeSeamError",
    "CodeSeamValidationError",
    "ConfigurationError",
    "DeclarationPolicy",
    "FileChunkResult",
    "FileTooLargeError",
    "Language",
    "LanguageProfile",
    "StructuralChunker",
    "UnsupportedLanguageError",
    "__version__",
    "chunk",
    "chunk_file",
    "chunk_files",
    "detect_language",
    "get_profile",
    "register_profile",
    "registered_languages",
)
