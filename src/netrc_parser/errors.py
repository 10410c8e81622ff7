# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: 2025 The Linux Foundation

"""Exceptions raised while reading and writing netrc files."""

from __future__ import annotations

from typing import Optional


class NetrcError(Exception):
    """Base exception for netrc operations."""


class LexError(NetrcError):
    """Raised when netrc text contains a sequence matching no token shape."""

    def __init__(self, char: str, position: int, source: str) -> None:
        """Initialize with the offending character and the full input."""
        self.char = char
        self.position = position
        self.source = source
        self.line = source.count("\n", 0, position) + 1
        self.column = position - (source.rfind("\n", 0, position) + 1) + 1
        super().__init__(
            f"Unexpected character during netrc parsing at character {char} "
            f"(line {self.line}, column {self.column}):\n{source}"
        )


class CryptoError(NetrcError):
    """Raised when the external encryption tool fails."""

    def __init__(
        self,
        message: str,
        returncode: Optional[int] = None,
        stderr: str = "",
    ) -> None:
        """Initialize with message, exit status and captured stderr."""
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


__all__ = ["CryptoError", "LexError", "NetrcError"]
