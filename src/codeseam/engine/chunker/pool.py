# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Chunk many files concurrently, one file per task.

Language profiles are resolved in the calling process and shipped with each
task, so profiles registered at runtime work with process workers too. A file
that fails yields a result carrying its error; the rest of the batch goes on.
"""

from __future__ import annotations

import logging

from collections.abc import Iterable, Iterator
from concurrent.futures import (
    Executor,
    Future,
    ProcessPoolExecutor,
    ThreadPoolExecutor,
    as_completed,
)
from pathlib import Path
from types import TracebackType
from typing import NamedTuple, Self

from codeseam.config.chunker import ChunkerSettings
from codeseam.core.chunks import Chunk
from codeseam.engine.chunker.profiles import (
    Language,
    LanguageProfile,
    detect_file_language,
    get_profile,
    registered_languages,
)
from codeseam.engine.chunker.structural import StructuralChunker
from codeseam.exceptions import CodeSeamError, UnsupportedLanguageError


logger = logging.getLogger(__name__)

type SourceItem = tuple[bytes | str, str | Language | LanguageProfile, str | Path | None]
"""`(source, language, file_path)` for one file."""


class FileChunkResult(NamedTuple):
    """The outcome of chunking one file."""

    file_path: str | None
    language: str | None
    chunks: list[Chunk]
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _chunk_source(
    source: bytes | str, profile: LanguageProfile, file_path: str | None, settings: ChunkerSettings
) -> FileChunkResult:
    try:
        chunks = StructuralChunker(settings).chunk(source, profile, file_path=file_path)
    except CodeSeamError as e:
        return FileChunkResult(file_path, profile.name, [], e)
    return FileChunkResult(file_path, profile.name, chunks)


def _chunk_path(path: Path, profile: LanguageProfile, settings: ChunkerSettings) -> FileChunkResult:
    try:
        chunks = StructuralChunker(settings).chunk_file(path, language=profile)
    except (CodeSeamError, OSError) as e:
        return FileChunkResult(str(path), profile.name, [], e)
    return FileChunkResult(str(path), profile.name, chunks)


class ChunkingPool:
    """A pool of chunking workers.

    Uses a process or thread executor per `ConcurrencySettings.executor`, with
    `max_parallel_files` workers. Results come back in completion order.

    Example:
        >>> with ChunkingPool() as pool:
        ...     for result in pool.chunk_files(paths):
        ...         if result.ok:
        ...             index(result.chunks)
    """

    def __init__(self, settings: ChunkerSettings | None = None) -> None:
        self.settings = settings or ChunkerSettings()
        self._executor: Executor | None = None

    @property
    def executor(self) -> Executor:
        if self._executor is None:
            concurrency = self.settings.concurrency
            executor_class = (
                ProcessPoolExecutor if concurrency.executor == "process" else ThreadPoolExecutor
            )
            self._executor = executor_class(max_workers=concurrency.max_parallel_files)
            logger.debug(
                "Started %s with %d workers", executor_class.__name__, concurrency.max_parallel_files
            )
        return self._executor

    def chunk_many(self, items: Iterable[SourceItem]) -> Iterator[FileChunkResult]:
        """Chunk `(source, language, file_path)` items, yielding results as they finish."""
        futures: dict[Future[FileChunkResult], tuple[str | None, str | None]] = {}
        for source, language, file_path in items:
            path = str(file_path) if file_path is not None else None
            try:
                profile = get_profile(language)
            except UnsupportedLanguageError as e:
                yield FileChunkResult(path, str(language), [], e)
                continue
            future = self.executor.submit(_chunk_source, source, profile, path, self.settings)
            futures[future] = (path, profile.name)
        yield from self._collect(futures)

    def chunk_files(self, paths: Iterable[str | Path]) -> Iterator[FileChunkResult]:
        """Read, detect and chunk each file, yielding results as they finish."""
        futures: dict[Future[FileChunkResult], tuple[str | None, str | None]] = {}
        for raw_path in paths:
            path = Path(raw_path)
            try:
                tag = detect_file_language(path)
                if tag is None:
                    raise UnsupportedLanguageError(
                        None, available=registered_languages(), file_path=str(path)
                    )
                profile = get_profile(tag)
            except (UnsupportedLanguageError, OSError) as e:
                yield FileChunkResult(str(path), None, [], e)
                continue
            future = self.executor.submit(_chunk_path, path, profile, self.settings)
            futures[future] = (str(path), profile.name)
        yield from self._collect(futures)

    @staticmethod
    def _collect(
        futures: dict[Future[FileChunkResult], tuple[str | None, str | None]],
    ) -> Iterator[FileChunkResult]:
        for future in as_completed(futures):
            if future.cancelled():
                continue
            path, language = futures[future]
            try:
                result = future.result()
            except Exception as e:
                # A worker died or raised something the task did not expect.
                logger.warning("Failed to chunk %s: %s", path or "<source>", e)
                yield FileChunkResult(path, language, [], e)
                continue
            if result.error is not None:
                logger.warning("Failed to chunk %s: %s", path or "<source>", result.error)
            yield result

    def shutdown(self, *, cancel_pending: bool = True, wait: bool = True) -> None:
        """Stop the workers. With `cancel_pending`, tasks not yet started are dropped."""
        if self._executor is None:
            return
        self._executor.shutdown(wait=wait, cancel_futures=cancel_pending)
        self._executor = None

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.shutdown(cancel_pending=exc_type is not None)


def chunk_files(
    paths: Iterable[str | Path], *, settings: ChunkerSettings | None = None
) -> Iterator[FileChunkResult]:
    """Chunk files on a temporary pool; see `ChunkingPool.chunk_files`."""
    with ChunkingPool(settings) as pool:
        yield from pool.chunk_files(paths)


__all__ = ("ChunkingPool", "FileChunkResult", "SourceItem", "chunk_files")
