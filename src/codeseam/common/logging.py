# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Set up a logger with optional rich formatting."""

from __future__ import annotations

import logging

from logging.config import dictConfig
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

from codeseam.config.logging import LoggingConfigDict, LoggingSettings


def get_rich_handler(**kwargs: Any) -> RichHandler:
    return RichHandler(console=Console(markup=True, soft_wrap=True), markup=True, **kwargs)


def _setup_logger_with_rich_handler(
    rich_options: dict[str, Any] | None, name: str | None, level: int
) -> logging.Logger:
    handler = get_rich_handler(**(rich_options or {}))
    logger = logging.getLogger(name)
    logger.setLevel(level)
    # Clear existing handlers to prevent duplication
    logger.handlers.clear()
    logger.addHandler(handler)
    return logger


def setup_logger(
    name: str | None = "codeseam",
    *,
    level: int = logging.WARNING,
    rich: bool = True,
    rich_options: dict[str, Any] | None = None,
    logging_kwargs: LoggingConfigDict | None = None,
) -> logging.Logger:
    """Set up a logger with optional rich formatting.

    With `logging_kwargs`, the mapping is applied through `dictConfig` first; a
    rich handler is still attached to `name` when `rich` is set.
    """
    if logging_kwargs:
        dictConfig({**logging_kwargs})
        if rich:
            return _setup_logger_with_rich_handler(rich_options, name, level)
        return logging.getLogger(name)
    if not rich:
        logging.basicConfig(level=level)
        logger = logging.getLogger(name)
        logger.setLevel(level)
        return logger
    return _setup_logger_with_rich_handler(rich_options, name, level)


def setup_logger_from_settings(
    settings: LoggingSettings, name: str | None = "codeseam"
) -> logging.Logger:
    """Apply a `LoggingSettings` mapping, as loaded by `CodeSeamSettings`."""
    return setup_logger(
        name,
        level=settings.get("level", logging.WARNING),
        rich=settings.get("use_rich", True),
        rich_options=settings.get("rich_kwargs"),
        logging_kwargs=settings.get("dict_config"),
    )


__all__ = ("get_rich_handler", "setup_logger", "setup_logger_from_settings")
