# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""The structural chunker: source bytes in, ordered chunks out.

`StructuralChunker` runs the four stages for one input at a time:

    scan -> detect boundaries -> attach doc comments -> assemble

It holds only configuration, so one instance can serve many threads.
"""

from __future__ import annotations

import logging

from pathlib import Path

from codeseam.config.chunker import ChunkerSettings
from codeseam.core.chunks import Chunk, ChunkFlag
from codeseam.engine.chunker.assembler import ChunkAssembler
from codeseam.engine.chunker.boundary import BoundaryDetector
from codeseam.engine.chunker.docs import DocCommentAttacher
from codeseam.engine.chunker.profiles import (
    Language,
    LanguageProfile,
    detect_language,
    get_profile,
    registered_languages,
)
from codeseam.engine.chunker.scanner import Scanner
from codeseam.exceptions import (
    ChunkLimitExceededError,
    FileTooLargeError,
    UnsupportedLanguageError,
    ValidationError,
)


logger = logging.getLogger(__name__)


class StructuralChunker:
    """Splits source files into declaration-level chunks.

    Example:
        >>> chunker = StructuralChunker()
        >>> chunks = chunker.chunk(b"int add(int a, int b) { return a + b; }", "c")
        >>> [(c.kind.value, c.name) for c in chunks]
        [('function', 'add')]
    """

    def __init__(self, settings: ChunkerSettings | None = None) -> None:
        self.settings = settings or ChunkerSettings()
        self._assembler = ChunkAssembler(policy=self.settings.declaration_policy)

    def chunk(
        self,
        source: bytes | str,
        language: str | Language | LanguageProfile,
        *,
        file_path: str | Path | None = None,
    ) -> list[Chunk]:
        """Chunk one source text.

        Args:
            source: The source, as bytes or as text (encoded to UTF-8).
            language: A registered language tag, a `Language`, or a profile.
            file_path: Recorded on each chunk and used to namespace chunk ids.

        Raises:
            UnsupportedLanguageError: no profile answers to `language`.
            FileTooLargeError: the source exceeds `max_file_size_mb`.
            ChunkLimitExceededError: more chunks than `max_chunks_per_file`.
        """
        profile = get_profile(language)
        data = self._as_bytes(source)
        path = str(file_path) if file_path is not None else None
        performance = self.settings.performance
        if len(data) > performance.max_file_size_bytes:
            raise FileTooLargeError(
                f"Source is {len(data)} bytes, over the {performance.max_file_size_mb} MB limit",
                details={
                    "file_path": path,
                    "size_bytes": len(data),
                    "max_size_bytes": performance.max_file_size_bytes,
                },
                suggestions=["Raise `chunker.performance.max_file_size_mb` to chunk larger files."],
            )
        if not data:
            return []
        stream = Scanner(profile).scan(data)
        spans = BoundaryDetector(
            profile, max_nesting_depth=performance.max_nesting_depth
        ).detect(stream)
        attacher = DocCommentAttacher(
            profile,
            blank_line_tolerance=self.settings.doc_comments.tolerance_for(profile.name),
        )
        spans = attacher.attach(stream, spans)
        chunks = self._assembler.assemble(spans, language=profile.name, file_path=path)
        logger.debug(
            "Chunked %s (%s): %d tokens, %d chunks",
            path or "<source>",
            profile.name,
            len(stream),
            len(chunks),
        )
        self._report_anomalies(chunks, path)
        limit = performance.max_chunks_per_file
        if limit is not None and len(chunks) > limit:
            raise ChunkLimitExceededError(
                f"Produced {len(chunks)} chunks, over the limit of {limit}",
                details={
                    "file_path": path,
                    "language": profile.name,
                    "chunk_count": len(chunks),
                    "max_chunks": limit,
                },
                suggestions=["Raise `chunker.performance.max_chunks_per_file`."],
            )
        return chunks

    def chunk_file(
        self, path: str | Path, *, language: str | Language | LanguageProfile | None = None
    ) -> list[Chunk]:
        """Read and chunk one file, detecting its language when not given.

        Raises:
            UnsupportedLanguageError: the language is unknown or cannot be detected.
        """
        path = Path(path)
        performance = self.settings.performance
        size = path.stat().st_size
        if size > performance.max_file_size_bytes:
            raise FileTooLargeError(
                f"{path.name} is {size} bytes, over the {performance.max_file_size_mb} MB limit",
                details={
                    "file_path": str(path),
                    "size_bytes": size,
                    "max_size_bytes": performance.max_file_size_bytes,
                },
            )
        data = path.read_bytes()
        if language is None:
            language = detect_language(path, data)
            if language is None:
                raise UnsupportedLanguageError(
                    None, available=registered_languages(), file_path=str(path)
                )
        return self.chunk(data, language, file_path=path)

    @staticmethod
    def _as_bytes(source: bytes | str) -> bytes:
        if isinstance(source, bytes):
            return source
        if isinstance(source, str):
            return source.encode("utf-8")
        if isinstance(source, bytearray | memoryview):
            return bytes(source)
        raise ValidationError(
            f"Source must be bytes or str, not {type(source).__name__}",
            details={"type": type(source).__name__},
        )

    @staticmethod
    def _report_anomalies(chunks: list[Chunk], path: str | None) -> None:
        for chunk in chunks:
            if ChunkFlag.INCOMPLETE in chunk.flags:
                logger.warning(
                    "%s: %s %r has no closing delimiter; it runs to the end of its scope",
                    path or "<source>",
                    chunk.kind,
                    chunk.name,
                )
        if truncated := sum(ChunkFlag.TRUNCATED_LITERAL in chunk.flags for chunk in chunks):
            logger.warning(
                "%s: %d chunk(s) contain an unterminated string or comment",
                path or "<source>",
                truncated,
            )


def chunk(
    source: bytes | str,
    language: str | Language | LanguageProfile,
    *,
    file_path: str | Path | None = None,
    settings: ChunkerSettings | None = None,
) -> list[Chunk]:
    """Split `source` into an ordered forest of chunks.

    Chunks come back parents first, in source order; `parent_id` links each
    nested chunk to its enclosing one. Empty input yields an empty list.
    """
    return StructuralChunker(settings).chunk(source, language, file_path=file_path)


def chunk_file(
    path: str | Path,
    *,
    language: str | Language | LanguageProfile | None = None,
    settings: ChunkerSettings | None = None,
) -> list[Chunk]:
    """Read one file and chunk it; see `StructuralChunker.chunk_file`."""
    return StructuralChunker(settings).chunk_file(path, language=language)


__all__ = ("StructuralChunker", "chunk", "chunk_file")
