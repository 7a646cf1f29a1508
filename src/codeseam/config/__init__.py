# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Configuration models and the process-wide settings instance."""

from __future__ import annotations

from codeseam.config.chunker import (
    ChunkerSettings,
    ConcurrencySettings,
    DefaultChunkerSettings,
    DocCommentSettings,
    PerformanceSettings,
)
from codeseam.config.logging import DefaultLoggingSettings, LoggingConfigDict, LoggingSettings
from codeseam.config.settings import CodeSeamSettings, get_settings, reset_settings


__all__ = (
    "ChunkerSettings",
    "CodeSeamSettings",
    "ConcurrencySettings",
    "DefaultChunkerSettings",
    "DefaultLoggingSettings",
    "DocCommentSettings",
    "LoggingConfigDict",
    "LoggingSettings",
    "PerformanceSettings",
    "get_settings",
    "reset_settings",
)
