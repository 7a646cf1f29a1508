# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Configuration models for the structural chunker."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import ConfigDict, Field, NonNegativeInt, PositiveInt

from codeseam.core.types.aliases import LanguageNameT
from codeseam.core.types.models import FROZEN_BASEDMODEL_CONFIG, BasedModel
from codeseam.engine.chunker.assembler import DeclarationPolicy
from codeseam.engine.chunker.boundary import DEFAULT_MAX_NESTING_DEPTH, MAX_NESTING_DEPTH


class DocCommentSettings(BasedModel):
    """Doc comment attachment configuration."""

    model_config = FROZEN_BASEDMODEL_CONFIG

    blank_line_tolerance: Annotated[
        NonNegativeInt | None,
        Field(
            description="""Blank lines allowed between a doc comment and the declaration it documents. `None` uses each language profile's own tolerance (0 for the built-in profiles, so any blank line detaches a comment)."""
        ),
    ] = None

    per_language: Annotated[
        dict[LanguageNameT, NonNegativeInt],
        Field(
            default_factory=dict,
            description="""Per-language overrides of `blank_line_tolerance`, keyed by language tag.""",
        ),
    ]

    def tolerance_for(self, language: str) -> int | None:
        """The configured tolerance for `language`, or None to defer to its profile."""
        return self.per_language.get(language, self.blank_line_tolerance)


class PerformanceSettings(BasedModel):
    """Performance and resource limit configuration."""

    model_config = FROZEN_BASEDMODEL_CONFIG

    max_file_size_mb: Annotated[
        PositiveInt, Field(description="""Maximum file size in MB to attempt chunking""")
    ] = 10

    max_chunks_per_file: Annotated[
        PositiveInt | None,
        Field(
            description="""Maximum chunks to generate from a single file. `None` (the default) sets no limit."""
        ),
    ] = None

    max_nesting_depth: Annotated[
        PositiveInt,
        Field(
            le=MAX_NESTING_DEPTH,
            description=f"""Maximum bracket nesting the boundary detector descends into, at most {MAX_NESTING_DEPTH}. Deeper bodies stay whole inside their enclosing chunk.""",
        ),
    ] = DEFAULT_MAX_NESTING_DEPTH

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024


class ConcurrencySettings(BasedModel):
    """Concurrency configuration."""

    model_config = FROZEN_BASEDMODEL_CONFIG

    max_parallel_files: Annotated[
        PositiveInt,
        Field(
            description="""Maximum files to chunk concurrently (equivalent to number of workers or threads)"""
        ),
    ] = 4

    executor: Annotated[
        Literal["process", "thread"],
        Field(
            description="""Use ProcessPoolExecutor (process) vs ThreadPoolExecutor (thread) for concurrent chunking. Chunking is CPU-bound, so processes scale better; threads avoid the cost of starting workers and pickling results for small batches."""
        ),
    ] = "process"


class ChunkerSettings(BasedModel):
    """Configuration for the chunker system."""

    model_config = BasedModel.model_config | ConfigDict(validate_assignment=True)

    declaration_policy: Annotated[
        DeclarationPolicy,
        Field(
            description="""How to treat a body-less declaration whose definition is in the same scope: `keep_all` keeps both, `signature` drops the declaration when kind, name and parameters match a definition, `proximity` drops it when the definition immediately follows."""
        ),
    ] = DeclarationPolicy.SIGNATURE

    doc_comments: Annotated[
        DocCommentSettings, Field(description="""Doc comment attachment settings.""")
    ] = DocCommentSettings()

    performance: Annotated[
        PerformanceSettings,
        Field(description="""Performance and resource limit configuration settings."""),
    ] = PerformanceSettings()

    concurrency: Annotated[
        ConcurrencySettings, Field(description="""Concurrency configuration settings.""")
    ] = ConcurrencySettings()


DefaultChunkerSettings = ChunkerSettings()


__all__ = (
    "ChunkerSettings",
    "ConcurrencySettings",
    "DefaultChunkerSettings",
    "DocCommentSettings",
    "PerformanceSettings",
)
