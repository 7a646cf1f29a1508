# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Global pytest configuration and fixtures for codeseam tests."""

import os

from collections.abc import Iterator
from pathlib import Path

import pytest

from codeseam.config.chunker import ChunkerSettings, ConcurrencySettings, PerformanceSettings
from codeseam.config.settings import reset_settings


FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding the sample source files."""
    return FIXTURES_DIR


@pytest.fixture
def c_source() -> bytes:
    """The C sample file."""
    return (FIXTURES_DIR / "sample.c").read_bytes()


@pytest.fixture
def cpp_source() -> bytes:
    """The C++ sample file."""
    return (FIXTURES_DIR / "sample.cpp").read_bytes()


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep the global settings instance and CODESEAM_* variables out of every test."""
    for key in [key for key in os.environ if key.upper().startswith("CODESEAM_")]:
        monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def performance_settings() -> PerformanceSettings:
    """Create PerformanceSettings with test-friendly values."""
    return PerformanceSettings(max_file_size_mb=1, max_chunks_per_file=500, max_nesting_depth=50)


@pytest.fixture
def chunker_settings(performance_settings: PerformanceSettings) -> ChunkerSettings:
    """Create ChunkerSettings with test configuration."""
    return ChunkerSettings(
        performance=performance_settings,
        concurrency=ConcurrencySettings(max_parallel_files=2, executor="thread"),
    )
