# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: 2025 The Linux Foundation

"""
Lossless tokenizer for .netrc files.

The lexer turns netrc text into a flat list of typed tokens that keep
their exact source text, so the file can be rebuilt byte for byte. It
follows the format documented at:
https://everything.curl.dev/usingcurl/netrc.html

The lexer has two modes. It starts at top level and enters stanza mode
on a ``machine <host>`` or ``default`` header; a blank line returns it
to top level. Properties read at top level are flagged ``stray``.
"""

from __future__ import annotations

import logging
import re

from .errors import LexError
from .tokens import (
    Comment,
    DefaultHeader,
    MacroDefinition,
    MachineHeader,
    Property,
    Token,
    Whitespace,
)

log = logging.getLogger(__name__)

MODE_TOP_LEVEL = "top-level"
MODE_STANZA = "stanza"


class NetrcLexer:
    """
    Scanner producing netrc tokens left to right.

    At each position the most specific shape is tried first: whitespace,
    comment, macro definition, machine header, default header, then a
    property pair. Input matching none of them raises ``LexError``.
    """

    _WHITESPACE_PATTERN = re.compile(r"\s+")
    _BLANK_LINE_PATTERN = re.compile(r"\n[ \t\r\f\v]*\n")
    _COMMENT_PATTERN = re.compile(r"#[^\n]*")
    _MACDEF_PATTERN = re.compile(r"macdef(?=\s|$)")
    # A macro body ends before a blank line or before a line opening
    # another machine, default or macdef.
    _MACDEF_END_PATTERN = re.compile(
        r"\n[ \t\r\f\v]*(?:\n|(?:machine|default|macdef)(?=\s|$))"
    )
    _MACHINE_PATTERN = re.compile(r"machine([ \t]+)(\S+)")
    _DEFAULT_PATTERN = re.compile(r"default(?=\s|#|$)")
    _PROPERTY_PATTERN = re.compile(r"([A-Za-z]+)([ \t]+)(\S+)")

    def __init__(self, text: str) -> None:
        """
        Initialize lexer with file content.

        Args:
            text: The raw content of a .netrc file.
        """
        self._text = text
        self.mode = MODE_TOP_LEVEL

    def tokenize(self) -> list[Token]:
        """
        Split the whole input into tokens.

        Returns:
            Tokens in source order.

        Raises:
            LexError: If some input matches no token shape.
        """
        tokens: list[Token] = []
        pos = 0
        while pos < len(self._text):
            token, pos = self._next_token(pos)
            tokens.append(token)
        log.debug("Tokenized %d characters into %d tokens", len(self._text), len(tokens))
        return tokens

    def _next_token(self, pos: int) -> tuple[Token, int]:
        """Read one token starting at ``pos``; return it and the end offset."""
        text = self._text

        match = self._WHITESPACE_PATTERN.match(text, pos)
        if match:
            whitespace = Whitespace(match.group(0))
            if self._BLANK_LINE_PATTERN.search(whitespace.text):
                self.mode = MODE_TOP_LEVEL
            return whitespace, match.end()

        match = self._COMMENT_PATTERN.match(text, pos)
        if match:
            return Comment(match.group(0)), match.end()

        match = self._MACDEF_PATTERN.match(text, pos)
        if match:
            end = self._macro_end(match.end())
            self.mode = MODE_TOP_LEVEL
            return MacroDefinition(text[pos:end]), end

        match = self._MACHINE_PATTERN.match(text, pos)
        if match:
            self.mode = MODE_STANZA
            header = MachineHeader(host=match.group(2), separator=match.group(1))
            return header, match.end()

        match = self._DEFAULT_PATTERN.match(text, pos)
        if match:
            self.mode = MODE_STANZA
            return DefaultHeader(), match.end()

        match = self._PROPERTY_PATTERN.match(text, pos)
        if match:
            stray = self.mode == MODE_TOP_LEVEL
            if stray:
                log.debug("Stray property %r outside of any stanza", match.group(1))
            prop = Property(
                name=match.group(1),
                value=match.group(3),
                separator=match.group(2),
                stray=stray,
            )
            return prop, match.end()

        raise LexError(text[pos], pos, text)

    def _macro_end(self, start: int) -> int:
        """Return the offset where a macro body starting at ``start`` ends."""
        match = self._MACDEF_END_PATTERN.search(self._text, start)
        if match:
            return match.start()
        # No terminator: the body runs to the end, minus trailing whitespace.
        return max(start, len(self._text.rstrip()))


def tokenize(text: str) -> list[Token]:
    """
    Tokenize netrc text.

    Args:
        text: Raw netrc content.

    Returns:
        Tokens whose concatenated ``content`` equals ``text``.

    Raises:
        LexError: If ``text`` contains input matching no token shape.
    """
    return NetrcLexer(text).tokenize()


__all__ = ["MODE_STANZA", "MODE_TOP_LEVEL", "NetrcLexer", "tokenize"]
