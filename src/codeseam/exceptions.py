# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Unified exception hierarchy for codeseam.

All codeseam exceptions inherit from CodeSeamError. Recoverable per-construct
anomalies (truncated literals, unbalanced structures) are never raised; they are
recorded as flags on the affected chunk. Only call-level failures live here.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, ClassVar


class CodeSeamError(Exception):
    """Base exception for all codeseam errors.

    Provides structured error information including details and suggestions
    for resolution.
    """

    _detail_keys: ClassVar[tuple[str, ...]] = (
        "language",
        "chunk_count",
        "max_chunks",
        "size_bytes",
        "max_size_bytes",
        "line_number",
    )

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
        suggestions: list[str] | None = None,
    ) -> None:
        """Initialize codeseam error.

        Args:
            message: Human-readable error message
            details: Additional context about the error
            suggestions: Actionable suggestions for resolving the error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.suggestions = suggestions or []

    def __str__(self) -> str:
        """Return descriptive error message with context details."""
        parts = [self.message]
        if self.details:
            detail_parts: list[str] = []
            if self.details.get("file_path"):
                detail_parts.append(f"file: {self.details['file_path']}")
            detail_parts.extend(
                f"{key.replace('_', ' ')}: {self.details[key]}"
                for key in type(self)._detail_keys
                if key in self.details
            )
            if detail_parts:
                parts.append(f"({', '.join(detail_parts)})")
        return " ".join(parts)

    @property
    def report(self) -> str:
        """Generate a full error report with details and suggestions."""
        return "\n".join((
            f"Error: {self.message}",
            "Details: " + ", ".join(f"{k}: {v}" for k, v in self.details.items())
            if self.details
            else "No additional details provided.",
            "Suggestions: " + ", ".join(self.suggestions)
            if self.suggestions
            else "No suggestions provided.",
        ))

    def __reduce__(self) -> tuple[Any, ...]:
        # Subclasses take different constructor arguments; restore from state instead.
        return (_restore_error, (type(self), self.message), self.__dict__)


def _restore_error(cls: type[CodeSeamError], message: str) -> CodeSeamError:
    error = cls.__new__(cls)
    Exception.__init__(error, message)
    return error


class ConfigurationError(CodeSeamError):
    """Configuration and settings errors.

    Raised when there are issues with configuration files, environment variables,
    settings validation, or language profile registration.
    """


class ValidationError(CodeSeamError):
    """Input validation and schema errors."""


class ChunkingError(CodeSeamError):
    """Errors raised while chunking a single file."""


class UnsupportedLanguageError(ChunkingError):
    """No language profile is registered for the requested language tag.

    Fatal for the call: no partial chunking is performed.
    """

    def __init__(
        self,
        language: str | None,
        *,
        available: Sequence[str] = (),
        file_path: str | None = None,
    ) -> None:
        """Initialize UnsupportedLanguageError.

        Args:
            language: The tag that failed to resolve (None when detection failed)
            available: Currently registered language names
            file_path: The file being chunked, if known
        """
        details: dict[str, Any] = {"language": language, "available": tuple(available)}
        if file_path:
            details["file_path"] = file_path
        super().__init__(
            f"Unsupported language: {language!r}"
            if language
            else "Could not determine the language of the input",
            details=details,
            suggestions=[
                f"Use one of: {', '.join(available)}" if available else "Register a profile",
                "Register a LanguageProfile with `codeseam.register_profile` before chunking.",
            ],
        )
        self.language = language


class FileTooLargeError(ChunkingError):
    """Input exceeds the configured maximum file size."""


class ChunkLimitExceededError(ChunkingError):
    """A file produced more chunks than the configured limit."""


__all__ = (
    "ChunkLimitExceededError",
    "ChunkingError",
    "CodeSeamError",
    "ConfigurationError",
    "FileTooLargeError",
    "UnsupportedLanguageError",
    "ValidationError",
)
