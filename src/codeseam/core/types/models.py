# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Base pydantic model implementations for codeseam."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any

import textcase

from pydantic import BaseModel, ConfigDict


def generate_title(model: type[Any]) -> str:
    """Generate a title for a model's JSON schema."""
    return textcase.title(model.__name__)


def generate_field_title(name: str, _info: Any) -> str:
    """Generate a title for a model field."""
    return textcase.title(name)


BASEDMODEL_CONFIG = ConfigDict(
    arbitrary_types_allowed=True,
    field_title_generator=generate_field_title,
    model_title_generator=generate_title,
    serialize_by_alias=True,
    str_strip_whitespace=False,
    use_attribute_docstrings=True,
    validate_by_alias=True,
    validate_by_name=True,
    cache_strings="all",
)
FROZEN_BASEDMODEL_CONFIG = BASEDMODEL_CONFIG | ConfigDict(frozen=True)


class BasedModel(BaseModel):
    """A baser `BaseModel` for all models in codeseam."""

    model_config = BASEDMODEL_CONFIG

    def serialize_for_cli(self) -> dict[str, Any]:
        """Serialize the model for display, recursing into nested models."""
        fields = set(type(self).model_fields.keys()) | set(type(self).model_computed_fields.keys())
        self_map: dict[str, Any] = {}
        for field in fields:
            attr = getattr(self, field, None)
            if attr is not None and hasattr(attr, "serialize_for_cli"):
                self_map[field] = attr.serialize_for_cli()
            elif isinstance(attr, Sequence | Iterator) and not isinstance(attr, str | bytes):
                self_map[field] = [
                    item.serialize_for_cli() if hasattr(item, "serialize_for_cli") else item
                    for item in attr
                ]
        return self.model_dump(mode="json", exclude_none=True) | self_map


__all__ = ("BASEDMODEL_CONFIG", "FROZEN_BASEDMODEL_CONFIG", "BasedModel")
