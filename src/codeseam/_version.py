# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Version information for codeseam."""
from typing import Final


__version__: Final[str] = "0.1.0"

__all__ = ("__version__",)
