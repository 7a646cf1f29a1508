# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""The language profile registry.

Profiles are registered at process start, before any concurrent chunking
begins, and are only read afterwards. Lookups are case-insensitive and accept
any of a profile's tags.
"""

from __future__ import annotations

import logging

from pathlib import Path, PurePath
from types import MappingProxyType

from codeseam.core.types.aliases import FileExt, LanguageName
from codeseam.core.types.enum import BaseEnum
from codeseam.engine.chunker.profiles.builtin import BUILTIN_PROFILES, C_MARKERS, CPP_MARKERS
from codeseam.engine.chunker.profiles.profile import LanguageProfile
from codeseam.exceptions import ConfigurationError, UnsupportedLanguageError


logger = logging.getLogger(__name__)


class Language(str, BaseEnum):
    """Registered languages. Grows when collaborators register new profiles."""

    C = "c"
    CPP = "cpp"
    JAVA = "java"
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    GO = "go"
    RUST = "rust"
    PYTHON = "python"
    PHP = "php"
    SCALA = "scala"
    RUBY = "ruby"


_C = LanguageName(Language.C.value)
_CPP = LanguageName(Language.CPP.value)


_profiles: dict[LanguageName, LanguageProfile] = {}
"""Canonical name -> profile."""

_tags: dict[str, LanguageName] = {}
"""Any tag (name or alias) -> canonical name."""

_extensions: dict[FileExt, LanguageName] = {}
"""File extension -> canonical name. Later registrations win."""


def register_profile(profile: LanguageProfile, *, replace: bool = False) -> LanguageProfile:
    """Register a language profile under its name and aliases.

    `replace` swaps out a registered profile of the same name. It never takes
    over a tag that belongs to a different profile. File extensions may move
    between profiles; the takeover is logged.

    Raises:
        ConfigurationError: a tag belongs to another profile, or the name is
            registered and `replace` is false.
    """
    name = LanguageName(profile.name)
    if taken := [tag for tag in profile.tags if _tags.get(tag, name) != name]:
        raise ConfigurationError(
            f"Language profile {name!r} claims tags owned by another profile",
            details={
                "language": name,
                "conflicting_tags": taken,
                "owners": sorted({_tags[tag] for tag in taken}),
            },
            suggestions=["Rename the profile or drop the conflicting aliases."],
        )
    if not replace and name in _profiles:
        raise ConfigurationError(
            f"Language profile {name!r} is already registered",
            details={"language": name},
            suggestions=["Pass `replace=True` to override the registered profile."],
        )
    if previous := _profiles.get(name):
        _drop_tags(previous)
    _profiles[name] = profile
    _tags.update(dict.fromkeys(profile.tags, name))
    for ext in map(FileExt, profile.extensions):
        if (owner := _extensions.get(ext, name)) != name:
            logger.info("Extension %s moves from %s to %s", ext, owner, name)
        _extensions[ext] = name
    if not Language.is_member(name):
        _ = Language.add_member(name, name)
    logger.debug("Registered language profile %s", name)
    return profile


def _drop_tags(profile: LanguageProfile) -> None:
    for tag in profile.tags:
        if _tags.get(tag) == profile.name:
            del _tags[tag]
    for ext in map(FileExt, profile.extensions):
        if _extensions.get(ext) == profile.name:
            del _extensions[ext]


def get_profile(language: str | Language | LanguageProfile) -> LanguageProfile:
    """Resolve a language tag to its registered profile.

    Raises:
        UnsupportedLanguageError: no profile answers to the tag.
    """
    if isinstance(language, LanguageProfile):
        return language
    tag = str(language.value if isinstance(language, Language) else language).strip().lower()
    if (name := _tags.get(tag)) and (profile := _profiles.get(name)):
        return profile
    raise UnsupportedLanguageError(str(language), available=registered_languages())


def registered_languages() -> tuple[LanguageName, ...]:
    """Canonical names of all registered profiles, sorted."""
    return tuple(sorted(_profiles))


def profiles() -> MappingProxyType[LanguageName, LanguageProfile]:
    """A read-only view of the registered profiles by name."""
    return MappingProxyType(_profiles)


def _looks_like_cpp(content: str) -> bool:
    return any(marker in content for marker in CPP_MARKERS)


def detect_language(
    path: str | PurePath, content: str | bytes | None = None
) -> LanguageName | None:
    """Guess a file's language from its extension, and for C headers, its content.

    `.h` files are C++ when they carry C++ markers, C when they only carry C
    markers, and C++ otherwise. `.c` files with C++ markers are C++.
    Returns None for extensions no profile claims.
    """
    suffix = FileExt(PurePath(path).suffix.lower())
    text = content.decode("utf-8", errors="replace") if isinstance(content, bytes) else content
    if suffix == ".h":
        if text is None:
            return _CPP
        if _looks_like_cpp(text):
            return _CPP
        if any(marker in text for marker in C_MARKERS):
            return _C
        return _CPP
    if suffix == ".c":
        return _CPP if text is not None and _looks_like_cpp(text) else _C
    return _extensions.get(suffix)


def detect_file_language(path: Path) -> LanguageName | None:
    """Detect a file's language, reading its content only when the extension is ambiguous."""
    if path.suffix.lower() in (".h", ".c"):
        return detect_language(path, path.read_bytes())
    return detect_language(path)


def _register_builtins() -> None:
    for profile in BUILTIN_PROFILES:
        _ = register_profile(profile, replace=True)


_register_builtins()


__all__ = (
    "Language",
    "detect_file_language",
    "detect_language",
    "get_profile",
    "profiles",
    "register_profile",
    "registered_languages",
)
