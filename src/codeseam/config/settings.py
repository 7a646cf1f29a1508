# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Process-wide settings for codeseam.

Settings come from, highest precedence first:

1. Arguments passed to `CodeSeamSettings(...)`
2. Environment variables (CODESEAM_*, nested with `__`, e.g.
   `CODESEAM_CHUNKER__DECLARATION_POLICY=proximity`)
3. `.env` files (`.local.env`, `.env`, `.codeseam.env`)
4. `codeseam.local.toml`, `codeseam.toml`, `.codeseam.toml` in the working directory
5. Defaults
"""

from __future__ import annotations

import logging

from pathlib import Path
from typing import Annotated, Any

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    DotEnvSettingsSource,
    EnvSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from codeseam.config.chunker import ChunkerSettings
from codeseam.config.logging import DefaultLoggingSettings, LoggingSettings
from codeseam.core.types.models import generate_field_title
from codeseam.exceptions import ConfigurationError


logger = logging.getLogger(__name__)

CONFIG_FILE_LOCATIONS: tuple[str, ...] = ("codeseam.local.toml", "codeseam.toml", ".codeseam.toml")


class CodeSeamSettings(BaseSettings):
    """Top-level settings: chunker behavior and logging."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
        field_title_generator=generate_field_title,
        nested_model_default_partial_update=True,
        env_ignore_empty=True,
        env_nested_delimiter="__",
        env_prefix="CODESEAM_",
        str_strip_whitespace=True,
        title="codeseam Settings",
        use_attribute_docstrings=True,
        validate_assignment=True,
        populate_by_name=True,
    )

    chunker: Annotated[
        ChunkerSettings, Field(description="""Chunker configuration settings.""")
    ] = ChunkerSettings()

    logging: Annotated[
        LoggingSettings, Field(description="""Logging configuration settings.""")
    ] = DefaultLoggingSettings

    @classmethod
    def from_config(cls, path: Path, **kwargs: Any) -> CodeSeamSettings:
        """Load settings from a specific TOML file. Its values, and `kwargs`, win over the environment."""
        if path.suffix.lower() != ".toml":
            raise ConfigurationError(
                f"Unsupported configuration file format: {path.suffix}",
                details={"file_path": str(path)},
                suggestions=["Use a `.toml` configuration file."],
            )
        if not path.exists():
            raise ConfigurationError(
                f"Configuration file {path} does not exist", details={"file_path": str(path)}
            )
        source = TomlConfigSettingsSource(cls, toml_file=path)
        return cls(**{**source(), **kwargs})

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the sources of settings for codeseam.

        Init arguments win over the environment, which wins over `.env` files,
        which win over TOML files.
        """
        config_files = [
            TomlConfigSettingsSource(settings_cls, toml_file=Path(location))
            for location in CONFIG_FILE_LOCATIONS
        ]
        return (
            init_settings,
            EnvSettingsSource(
                settings_cls,
                env_prefix="CODESEAM_",
                case_sensitive=False,
                env_nested_delimiter="__",
                env_parse_enums=True,
                env_ignore_empty=True,
            ),
            DotEnvSettingsSource(
                settings_cls,
                env_file=(".local.env", ".env", ".codeseam.env"),
                env_prefix="CODESEAM_",
                env_nested_delimiter="__",
                env_ignore_empty=True,
            ),
            *config_files,
        )


# Global settings instance
_settings: CodeSeamSettings | None = None
"""The global settings instance. Use `get_settings()` to access it."""


def get_settings(config_file: Path | None = None) -> CodeSeamSettings:
    """Get the global settings instance, creating it on first use.

    With `config_file`, the instance is rebuilt from that file.
    """
    global _settings
    if config_file is not None:
        _settings = CodeSeamSettings.from_config(config_file)
        logger.debug("Loaded settings from %s", config_file)
    if _settings is None:
        _settings = CodeSeamSettings()
    return _settings


def reset_settings() -> None:
    """Forget the global settings instance so the next `get_settings()` reloads it."""
    global _settings
    _settings = None


__all__ = ("CONFIG_FILE_LOCATIONS", "CodeSeamSettings", "get_settings", "reset_settings")
