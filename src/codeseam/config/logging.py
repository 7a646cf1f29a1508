# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Logging configuration types for codeseam."""

from __future__ import annotations

from typing import Annotated, Any, Literal, NewType, NotRequired, Required, TypedDict

from pydantic import Field


# ===========================================================================
# *  TypedDict classes for Python Stdlib Logging Configuration (`dictConfig`)
# ===========================================================================

type LogLevel = Literal[0, 10, 20, 30, 40, 50]
"""NOTSET, DEBUG, INFO, WARNING, ERROR, CRITICAL."""

FormatterID = NewType("FormatterID", str)

HandlerID = NewType("HandlerID", str)


class FormattersDict(TypedDict, total=False):
    """One formatter entry for `logging.config.dictConfig`."""

    format: NotRequired[str]
    datefmt: NotRequired[str]
    style: NotRequired[str]
    validate: NotRequired[bool]


class HandlersDict(TypedDict, total=False):
    """One handler entry for `logging.config.dictConfig`."""

    class_name: Required[
        Annotated[
            str,
            Field(
                description="""Import path of the handler class, like `rich.logging.RichHandler`.""",
                serialization_alias="class",
            ),
        ]
    ]
    level: NotRequired[LogLevel]
    formatter: NotRequired[FormatterID]
    filters: NotRequired[list[str]]


class LoggersDict(TypedDict, total=False):
    """One logger entry for `logging.config.dictConfig`."""

    level: NotRequired[LogLevel]
    propagate: NotRequired[bool]
    handlers: NotRequired[list[HandlerID]]


class LoggingConfigDict(TypedDict, total=False):
    """A `logging.config.dictConfig` mapping."""

    version: Required[Literal[1]]
    formatters: NotRequired[dict[FormatterID, FormattersDict]]
    handlers: NotRequired[dict[HandlerID, HandlersDict]]
    loggers: NotRequired[dict[str, LoggersDict]]
    root: NotRequired[LoggersDict]
    incremental: NotRequired[bool]
    disable_existing_loggers: NotRequired[bool]


class LoggingSettings(TypedDict, total=False):
    """Global logging settings."""

    level: NotRequired[LogLevel]
    use_rich: NotRequired[bool]
    dict_config: NotRequired[
        Annotated[
            LoggingConfigDict,
            Field(
                description="""Logging configuration in dictionary format that matches the format expected by [`logging.config.dictConfig`](https://docs.python.org/3/library/logging.config.html)."""
            ),
        ]
    ]
    rich_kwargs: NotRequired[
        Annotated[
            dict[str, Any],
            Field(
                description="""Additional keyword arguments for the `rich` logging handler, [`rich.logging.RichHandler`], if enabled."""
            ),
        ]
    ]


DefaultLoggingSettings: LoggingSettings = {"level": 30, "use_rich": True}


__all__ = (
    "DefaultLoggingSettings",
    "FormatterID",
    "FormattersDict",
    "HandlerID",
    "HandlersDict",
    "LogLevel",
    "LoggersDict",
    "LoggingConfigDict",
    "LoggingSettings",
)
