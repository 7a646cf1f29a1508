# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Base enum class for codeseam enums."""

from __future__ import annotations

import contextlib

from collections.abc import Callable
from enum import Enum, unique
from functools import cached_property
from types import MappingProxyType
from typing import Self, override

import textcase

from aenum import extend_enum  # type: ignore


type EnumExtend = Callable[[Enum, str], Enum]
extend_enum: EnumExtend = extend_enum  # pyright: ignore[reportUnknownVariableType]


@unique
class BaseEnum(Enum):
    """Common functionality for string-valued codeseam enums.

    Members convert flexibly from strings (any case, dashes or underscores), so
    values coming from settings files and environment variables resolve cleanly.
    `aenum.extend_enum` lets us add members at runtime, which is how language
    profiles registered by collaborators become `Language` members.
    """

    @staticmethod
    def _deconstruct_string(value: str) -> list[str]:
        """Split a string into lowercase word parts."""
        value = value.strip().lower().replace("-", "_").replace(" ", "_")
        return [v for v in value.split("_") if v]

    @staticmethod
    def _variations(s: str) -> set[str]:
        return {
            s,
            textcase.upper(s),
            textcase.lower(s),
            textcase.pascal(s),
            textcase.snake(s),
            textcase.kebab(s),
            textcase.camel(s),
        }

    @cached_property
    def aka(self) -> tuple[str, ...]:
        """Every spelling this member answers to."""
        names: set[str] = {self.value, self.name}
        if alias := getattr(self, "alias", None):
            names |= {alias} if isinstance(alias, str) else set(alias)
        names |= {n for name in names.copy() for n in self._variations(name)}
        return tuple(sorted(names))

    @classmethod
    def aliases(cls) -> MappingProxyType[str, Self]:
        """Map every known spelling to its member."""
        alias_map: dict[str, Self] = {}
        for member in cls:
            for alias in member.aka:
                alias_map.setdefault(alias.lower(), member)
        return MappingProxyType(alias_map)

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Convert a string to the corresponding enum member.

        Tries the value, then the name, then known aliases, then a word-part
        comparison before giving up with a `ValueError`.
        """
        lowered = str(value).strip().lower()
        if literal := next(
            (
                member
                for member in cls
                if member.value.lower() == lowered or member.name.lower() == lowered
            ),
            None,
        ):
            return literal
        if found := cls.aliases().get(lowered):
            return found
        parts = cls._deconstruct_string(value)
        if found := next(
            (member for member in cls if cls._deconstruct_string(member.name) == parts), None
        ):
            return found
        raise ValueError(f"{value} is not a valid {cls.__qualname__} member")

    @classmethod
    @override
    def _missing_(cls, value: object) -> Self | None:
        """Resolve loosely spelled string values."""
        if not isinstance(value, str):
            return None
        with contextlib.suppress(ValueError):
            return cls.from_string(value)
        return None

    @classmethod
    def is_member(cls, value: str) -> bool:
        """Check if a value resolves to a member of the enum."""
        with contextlib.suppress(ValueError):
            _ = cls.from_string(value)
            return True
        return False

    def __str__(self) -> str:
        """Return the member value."""
        return self.value

    @classmethod
    def add_member(cls, name: str, value: str) -> Self:
        """Dynamically add a new member to the enum."""
        name = textcase.snake(name.replace("+", "_plus_").replace("#", "_sharp")).upper()
        extend_enum(cls, name, value)  # pyright: ignore[reportCallIssue, reportUnknownVariableType]
        return cls(value)


__all__ = ("BaseEnum",)
