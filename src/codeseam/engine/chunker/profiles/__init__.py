# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Language profiles: per-language structural rules and their registry."""

from codeseam.engine.chunker.profiles.profile import (
    BlockStyle,
    CharLiteralStyle,
    LanguageFamily,
    LanguageProfile,
    RawStringStyle,
    Recognized,
    Recognizer,
    Recognizers,
    StringDelimiter,
)
from codeseam.engine.chunker.profiles.registry import (
    Language,
    detect_file_language,
    detect_language,
    get_profile,
    profiles,
    register_profile,
    registered_languages,
)


__all__ = (
    "BlockStyle",
    "CharLiteralStyle",
    "Language",
    "LanguageFamily",
    "LanguageProfile",
    "RawStringStyle",
    "Recognized",
    "Recognizer",
    "Recognizers",
    "StringDelimiter",
    "detect_file_language",
    "detect_language",
    "get_profile",
    "profiles",
    "register_profile",
    "registered_languages",
)
