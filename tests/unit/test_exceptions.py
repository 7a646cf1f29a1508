# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Tests for the exception hierarchy."""

from __future__ import annotations

import pickle

import pytest

from codeseam.exceptions import (
    ChunkingError,
    ChunkLimitExceededError,
    CodeSeamError,
    FileTooLargeError,
    UnsupportedLanguageError,
)


pytestmark = [pytest.mark.unit]


@pytest.mark.unit
class TestMessages:
    """String forms and reports."""

    def test_str_includes_known_details(self) -> None:
        error = FileTooLargeError(
            "File too large",
            details={"file_path": "big.c", "size_bytes": 20, "max_size_bytes": 10, "other": 1},
        )
        assert str(error) == "File too large (file: big.c, size bytes: 20, max size bytes: 10)"

    def test_str_without_details(self) -> None:
        assert str(CodeSeamError("Plain")) == "Plain"

    def test_report(self) -> None:
        error = ChunkLimitExceededError(
            "Too many chunks", details={"chunk_count": 3}, suggestions=["Raise the limit"]
        )
        assert error.report.splitlines() == [
            "Error: Too many chunks",
            "Details: chunk_count: 3",
            "Suggestions: Raise the limit",
        ]
        assert CodeSeamError("Bare").report.splitlines()[1:] == [
            "No additional details provided.",
            "No suggestions provided.",
        ]

    def test_hierarchy(self) -> None:
        assert issubclass(UnsupportedLanguageError, ChunkingError)
        assert issubclass(FileTooLargeError, CodeSeamError)


@pytest.mark.unit
class TestUnsupportedLanguage:
    """Fields of the unsupported-language error."""

    def test_known_tag(self) -> None:
        error = UnsupportedLanguageError("cobol", available=("c", "go"), file_path="a.cob")
        assert error.language == "cobol"
        assert error.details["available"] == ("c", "go")
        assert "cobol" in str(error)
        assert "file: a.cob" in str(error)
        assert error.suggestions[0] == "Use one of: c, go"

    def test_detection_failed(self) -> None:
        error = UnsupportedLanguageError(None)
        assert error.message == "Could not determine the language of the input"
        assert error.details["available"] == ()


@pytest.mark.unit
class TestPickling:
    """Errors cross process boundaries intact."""

    @pytest.mark.parametrize(
        "error",
        [
            UnsupportedLanguageError("cobol", available=("c",), file_path="a.cob"),
            ChunkLimitExceededError("Too many chunks", details={"chunk_count": 9}),
        ],
    )
    def test_round_trip(self, error: CodeSeamError) -> None:
        restored = pickle.loads(pickle.dumps(error))
        assert type(restored) is type(error)
        assert str(restored) == str(error)
        assert restored.details == error.details
        assert restored.suggestions == error.suggestions
