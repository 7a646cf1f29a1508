# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Shared base types."""

from codeseam.core.types.aliases import BlakeHashKey, ChunkId, FileExt, LanguageName, LanguageNameT
from codeseam.core.types.enum import BaseEnum
from codeseam.core.types.models import BASEDMODEL_CONFIG, FROZEN_BASEDMODEL_CONFIG, BasedModel


__all__ = (
    "BASEDMODEL_CONFIG",
    "FROZEN_BASEDMODEL_CONFIG",
    "BaseEnum",
    "BasedModel",
    "BlakeHashKey",
    "ChunkId",
    "FileExt",
    "LanguageName",
    "LanguageNameT",
)
