# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: 2025 The Linux Foundation

"""
Token types produced by the netrc lexer.

Every token exposes ``content``, the exact text it was read from. Joining
the content of all tokens of a file in order gives back the file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

# Token constants to avoid S105 false positives
TOKEN_MACHINE = "machine"  # noqa: S105
TOKEN_DEFAULT = "default"  # noqa: S105
TOKEN_MACDEF = "macdef"  # noqa: S105
TOKEN_LOGIN = "login"  # noqa: S105
TOKEN_PASSWORD = "password"  # noqa: S105
TOKEN_ACCOUNT = "account"  # noqa: S105

KEYWORDS = frozenset({TOKEN_MACHINE, TOKEN_DEFAULT, TOKEN_MACDEF})


@dataclass
class Whitespace:
    """Run of spaces, tabs and newlines between other tokens."""

    text: str

    @property
    def content(self) -> str:
        return self.text

    @property
    def has_newline(self) -> bool:
        return "\n" in self.text


@dataclass
class Comment:
    """A ``#`` comment up to (not including) the end of its line."""

    text: str

    @property
    def content(self) -> str:
        return self.text


@dataclass
class MacroDefinition:
    """Opaque ``macdef`` block, kept exactly as written."""

    body: str

    @property
    def content(self) -> str:
        return self.body

    @property
    def name(self) -> str:
        words = self.body.split(None, 2)
        return words[1] if len(words) > 1 else ""


@dataclass
class MachineHeader:
    """``machine <host>`` keyword opening a machine stanza."""

    host: str
    separator: str = " "

    @property
    def content(self) -> str:
        return f"{TOKEN_MACHINE}{self.separator}{self.host}"


@dataclass
class DefaultHeader:
    """Bare ``default`` keyword opening the default stanza."""

    @property
    def content(self) -> str:
        return TOKEN_DEFAULT


@dataclass
class Property:
    """
    A ``<name> <value>`` pair inside a stanza.

    ``stray`` is set when the pair was read outside any stanza, before
    the first header or after a blank line. It does not take part in
    equality.
    """

    name: str
    value: str
    separator: str = " "
    stray: bool = field(default=False, compare=False)

    @property
    def content(self) -> str:
        return f"{self.name}{self.separator}{self.value}"

    def __repr__(self) -> str:
        """Mask password values in repr for security."""
        value = "****" if self.name == TOKEN_PASSWORD else repr(self.value)
        return f"Property(name={self.name!r}, value={value})"


Header = Union[MachineHeader, DefaultHeader]
Token = Union[Whitespace, Comment, MacroDefinition, MachineHeader, DefaultHeader, Property]


__all__ = [
    "KEYWORDS",
    "TOKEN_ACCOUNT",
    "TOKEN_DEFAULT",
    "TOKEN_LOGIN",
    "TOKEN_MACDEF",
    "TOKEN_MACHINE",
    "TOKEN_PASSWORD",
    "Comment",
    "DefaultHeader",
    "Header",
    "MacroDefinition",
    "MachineHeader",
    "Property",
    "Token",
    "Whitespace",
]
