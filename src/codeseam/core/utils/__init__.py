# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Core utilities."""

from codeseam.core.utils.generation import CHUNK_ID_LENGTH, chunk_id, get_blake_hash
from codeseam.core.utils.lazy_import import create_lazy_getattr


__all__ = ("CHUNK_ID_LENGTH", "chunk_id", "create_lazy_getattr", "get_blake_hash")
