# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: 2025 The Linux Foundation

"""
Mutable document model for .netrc files.

``build`` groups the flat token stream from the lexer into a
``Document``: an ordered list of passthrough tokens (comments,
whitespace, macro definitions) and ``Stanza`` nodes, each stanza owning
the tokens that follow its header. Edits touch only the tokens they
change, so everything else serializes exactly as it was read.

Properties added to an existing stanza are appended after its last
property using the stanza's ``FormattingHint``. New stanzas are written
one property per line, two-space indent, ``login``, ``password`` and
``account`` first, then any other field in the order given.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from .lexer import tokenize
from .tokens import (
    TOKEN_ACCOUNT,
    TOKEN_LOGIN,
    TOKEN_PASSWORD,
    Comment,
    DefaultHeader,
    Header,
    MacroDefinition,
    MachineHeader,
    Property,
    Token,
    Whitespace,
)

log = logging.getLogger(__name__)

DEFAULT_INDENT = "  "
NEW_STANZA_ORDER = (TOKEN_LOGIN, TOKEN_PASSWORD, TOKEN_ACCOUNT)

_NAME_PATTERN = re.compile(r"[A-Za-z]+")
_VALUE_PATTERN = re.compile(r"\S+")

Fields = Mapping[str, Optional[str]]


def _check_name(name: str) -> None:
    if not _NAME_PATTERN.fullmatch(name):
        msg = f"Invalid netrc property name: {name!r}"
        raise ValueError(msg)


def _check_value(kind: str, value: Any) -> None:
    if not isinstance(value, str) or not _VALUE_PATTERN.fullmatch(value):
        msg = f"Invalid netrc {kind}: values must be non-empty strings without whitespace"
        raise ValueError(msg)


def coerce_fields(fields: Any) -> dict[str, Optional[str]]:
    """
    Turn a mapping, pydantic model or record of fields into a plain dict.

    Pydantic models contribute only the fields that were explicitly set,
    so an unset field leaves an existing property alone while an explicit
    ``None`` removes it. Other values are converted with ``str``, so
    ``{"port": 22}`` is written as ``port 22``.
    """
    if fields is None:
        return {}
    if hasattr(fields, "model_dump"):
        fields = fields.model_dump(exclude_unset=True)
    elif hasattr(fields, "to_dict"):
        fields = fields.to_dict()
    return {
        str(name): None if value is None else str(value)
        for name, value in dict(fields).items()
    }


@dataclass
class FormattingHint:
    """Layout used when inserting a property into a stanza."""

    indent: str = DEFAULT_INDENT
    multiline: bool = True

    @property
    def prefix(self) -> str:
        """Whitespace written before an inserted property."""
        return f"\n{self.indent}" if self.multiline else " "

    @classmethod
    def from_tokens(cls, tokens: list[Token]) -> FormattingHint:
        """
        Derive the hint from a stanza's existing tokens.

        A stanza is multiline when a line break separates its header from
        its last property. The indent is copied from the last property
        that starts its own line.
        """
        last = _last_property_index(tokens)
        if last is None:
            return cls()
        multiline = any(
            isinstance(token, Whitespace) and token.has_newline
            for token in tokens[:last]
        )
        if not multiline:
            return cls(indent=DEFAULT_INDENT, multiline=False)
        indent = DEFAULT_INDENT
        for index in range(last, 0, -1):
            previous = tokens[index - 1]
            if (
                isinstance(tokens[index], Property)
                and isinstance(previous, Whitespace)
                and previous.has_newline
            ):
                indent = previous.text.rsplit("\n", 1)[1]
                break
        return cls(indent=indent, multiline=True)


def _last_property_index(tokens: list[Token]) -> Optional[int]:
    for index in range(len(tokens) - 1, -1, -1):
        if isinstance(tokens[index], Property):
            return index
    return None


def _skip_same_line(tokens: list[Token], index: int) -> int:
    """Advance ``index`` past whitespace and comments on the current line."""
    while index < len(tokens):
        token = tokens[index]
        if isinstance(token, Comment) or (isinstance(token, Whitespace) and not token.has_newline):
            index += 1
            continue
        break
    return index


@dataclass
class Stanza:
    """
    A ``machine`` or ``default`` block.

    ``tokens`` holds everything after the header up to the next header
    or macro definition: properties plus the whitespace and comments
    between and after them.
    """

    header: Header
    tokens: list[Token] = field(default_factory=list)
    hint: FormattingHint = field(default_factory=FormattingHint)
    addressable: bool = True

    @property
    def is_default(self) -> bool:
        return isinstance(self.header, DefaultHeader)

    @property
    def host(self) -> Optional[str]:
        if isinstance(self.header, MachineHeader):
            return self.header.host
        return None

    @property
    def properties(self) -> list[Property]:
        return [token for token in self.tokens if isinstance(token, Property)]

    @property
    def content(self) -> str:
        return self.header.content + "".join(token.content for token in self.tokens)

    def refresh_hint(self) -> None:
        self.hint = FormattingHint.from_tokens(self.tokens)

    def get(self, name: str) -> Optional[str]:
        """Return the value of the first property called ``name``."""
        for prop in self.properties:
            if prop.name == name:
                return prop.value
        return None

    def has(self, name: str) -> bool:
        return self.get(name) is not None

    def to_dict(self) -> dict[str, str]:
        """Return the first value of every property name, in file order."""
        result: dict[str, str] = {}
        for prop in self.properties:
            result.setdefault(prop.name, prop.value)
        return result

    def set(self, name: str, value: Optional[str]) -> None:
        """
        Set a property, keeping its position and layout.

        The first property called ``name`` is updated in place. A new name
        is appended after the last property. An empty or ``None`` value
        removes every property called ``name``.
        """
        if not value:
            self.remove(name)
            return
        _check_name(name)
        _check_value(name, value)
        for prop in self.properties:
            if prop.name == name:
                prop.value = value
                return
        index = self._insertion_index()
        self.tokens[index:index] = [Whitespace(self.hint.prefix), Property(name=name, value=value)]

    def remove(self, name: str) -> bool:
        """Remove every property called ``name``; return True if any was found."""
        removed = False
        while True:
            index = next(
                (
                    i
                    for i, token in enumerate(self.tokens)
                    if isinstance(token, Property) and token.name == name
                ),
                None,
            )
            if index is None:
                return removed
            self._remove_property_at(index)
            removed = True

    def detach_trailing(self) -> list[Token]:
        """
        Split off the tokens that follow the stanza's last line.

        Comments and blank lines after the last property belong to the
        stanza only because the builder is greedy; deleting the stanza
        must leave them in place. The stanza keeps its own lines, up to and
        including the line break that ends the last one.
        """
        last = _last_property_index(self.tokens)
        end = _skip_same_line(self.tokens, 0 if last is None else last + 1)
        if end >= len(self.tokens):
            return []
        token = self.tokens[end]
        trailing: list[Token] = []
        if isinstance(token, Whitespace):
            head, _, rest = token.text.partition("\n")
            self.tokens[end] = Whitespace(head + "\n")
            if rest:
                trailing.append(Whitespace(rest))
            end += 1
        trailing.extend(self.tokens[end:])
        del self.tokens[end:]
        return trailing

    def _insertion_index(self) -> int:
        last = _last_property_index(self.tokens)
        if last is None:
            return _skip_same_line(self.tokens, 0)
        if self.hint.multiline:
            return _skip_same_line(self.tokens, last + 1)
        return last + 1

    def _remove_property_at(self, index: int) -> None:
        start, end = index, index + 1
        if self.hint.multiline:
            # Take the trailing comment along with its line.
            end = _skip_same_line(self.tokens, end)
            while end > index + 1 and isinstance(self.tokens[end - 1], Whitespace):
                end -= 1
        if start > 0 and isinstance(self.tokens[start - 1], Whitespace):
            before = self.tokens[start - 1].content
            cut = before.rfind("\n")
            if cut > 0:
                self.tokens[start - 1] = Whitespace(before[:cut])
            else:
                start -= 1
        del self.tokens[start:end]


Node = Union[Token, Stanza]


def mark_addressable(stanzas: Iterable[Stanza]) -> None:
    """
    Flag the stanzas that lookups resolve to.

    The first machine stanza for each host and the first default stanza
    are addressable, matching what a fresh parse of the text would pick.
    Later duplicates are kept for serialization only.
    """
    seen_hosts: set[str] = set()
    seen_default = False
    for stanza in stanzas:
        if stanza.is_default:
            stanza.addressable = not seen_default
            seen_default = True
            continue
        host = stanza.host or ""
        stanza.addressable = host not in seen_hosts
        if not stanza.addressable:
            log.debug("Ignoring duplicate entry for machine %s", host)
        seen_hosts.add(host)


class Document:
    """
    In-memory netrc file.

    Hosts are looked up with a linear scan in document order. Only the
    first machine stanza for a host and the first default stanza are
    addressable; later duplicates are kept verbatim for serialization.
    When the addressable stanza goes away the next duplicate takes over,
    so the in-memory view always matches a fresh parse of the output.
    """

    def __init__(self, nodes: Optional[list[Node]] = None, indent: str = DEFAULT_INDENT) -> None:
        """
        Initialize document.

        Args:
            nodes: Top-level tokens and stanzas in file order.
            indent: Indent used for properties of newly created stanzas.
        """
        self.nodes: list[Node] = nodes if nodes is not None else []
        self.indent = indent
        self.modified = False

    def __repr__(self) -> str:
        return f"Document(hosts={self.list_hosts()!r}, modified={self.modified!r})"

    @property
    def stanzas(self) -> list[Stanza]:
        return [node for node in self.nodes if isinstance(node, Stanza)]

    def _machines(self) -> Iterable[Stanza]:
        for stanza in self.stanzas:
            if stanza.addressable and not stanza.is_default:
                yield stanza

    def list_hosts(self) -> list[str]:
        """Return addressable hosts in document order."""
        return [stanza.host for stanza in self._machines() if stanza.host is not None]

    def get_host(self, host: str) -> Optional[Stanza]:
        for stanza in self._machines():
            if stanza.host == host:
                return stanza
        return None

    def set_host(self, host: str, fields: Optional[Fields]) -> Optional[Stanza]:
        """
        Create or update the machine stanza for ``host``.

        Args:
            host: Machine name.
            fields: Property values; ``None`` values remove the property.
                Passing ``None`` instead of a mapping deletes the host.

        Returns:
            The stanza, or None when the host was deleted.
        """
        if fields is None:
            self.delete_host(host)
            return None
        values = coerce_fields(fields)
        stanza = self.get_host(host)
        if stanza is None:
            _check_value("host", host)
            log.debug("Adding machine %s", host)
            return self._append_stanza(MachineHeader(host=host), values)
        for name, value in values.items():
            self.set_property(stanza, name, value)
        return stanza

    def delete_host(self, host: str) -> bool:
        """Remove the stanza for ``host``; return False if it was absent."""
        stanza = self.get_host(host)
        if stanza is None:
            return False
        log.debug("Removing machine %s", host)
        self._remove_stanza(stanza)
        return True

    def rename_host(self, host: str, new_host: str) -> bool:
        """
        Rename a machine stanza in place.

        Every stanza already named ``new_host``, including duplicates that
        could shadow the renamed one, is removed first. A later duplicate
        of ``host`` takes its place as the addressable entry.
        """
        stanza = self.get_host(host)
        if stanza is None or host == new_host:
            return False
        _check_value("host", new_host)
        for other in [s for s in self.stanzas if not s.is_default and s.host == new_host]:
            self._remove_stanza(other)
        if isinstance(stanza.header, MachineHeader):
            stanza.header.host = new_host
        mark_addressable(self.stanzas)
        self.modified = True
        return True

    def get_property(self, stanza: Stanza, name: str) -> Optional[str]:
        return stanza.get(name)

    def set_property(self, stanza: Stanza, name: str, value: Optional[str]) -> None:
        if not value:
            if stanza.remove(name):
                self.modified = True
            return
        if stanza.get(name) == value:
            return
        stanza.set(name, value)
        self.modified = True

    def remove_property(self, stanza: Stanza, name: str) -> None:
        self.set_property(stanza, name, None)

    def get_default(self) -> Optional[Stanza]:
        for stanza in self.stanzas:
            if stanza.addressable and stanza.is_default:
                return stanza
        return None

    def set_default(self, fields: Optional[Fields]) -> Optional[Stanza]:
        """
        Create, update or remove the default stanza.

        Empty or ``None`` fields remove the first default stanza.
        """
        values = coerce_fields(fields)
        stanza = self.get_default()
        if not values:
            if stanza is not None:
                log.debug("Removing default entry")
                self._remove_stanza(stanza)
            return None
        if stanza is None:
            log.debug("Adding default entry")
            return self._append_stanza(DefaultHeader(), values)
        for name, value in values.items():
            self.set_property(stanza, name, value)
        return stanza

    def _append_stanza(self, header: Header, values: dict[str, Optional[str]]) -> Stanza:
        stanza = Stanza(header=header, hint=FormattingHint(indent=self.indent))
        ordered = [name for name in NEW_STANZA_ORDER if name in values]
        ordered += [name for name in values if name not in NEW_STANZA_ORDER]
        for name in ordered:
            stanza.set(name, values[name])
        stanza.tokens.append(Whitespace("\n"))

        index = len(self.nodes)
        for position in range(len(self.nodes) - 1, -1, -1):
            if isinstance(self.nodes[position], Stanza):
                index = position + 1
                break
        index = self._end_line_before(index)
        self.nodes.insert(index, stanza)
        self.modified = True
        return stanza

    def _end_line_before(self, index: int) -> int:
        """Make sure the text before ``index`` ends with a line break."""
        before = "".join(node.content for node in self.nodes[:index])
        if not before or before.endswith("\n"):
            return index
        previous = self.nodes[index - 1]
        tokens = previous.tokens if isinstance(previous, Stanza) else None
        last = tokens[-1] if tokens else previous
        stripped = before.rstrip(" \t")
        if isinstance(last, Whitespace) and stripped.endswith("\n") and last.text.strip(" \t"):
            # Drop the indentation left dangling after the last line break.
            trimmed = Whitespace(last.text.rstrip(" \t"))
            if tokens:
                tokens[-1] = trimmed
            else:
                self.nodes[index - 1] = trimmed
            return index
        if tokens is not None:
            tokens.append(Whitespace("\n"))
            return index
        self.nodes.insert(index, Whitespace("\n"))
        return index + 1

    def _remove_stanza(self, stanza: Stanza) -> None:
        index = next(i for i, node in enumerate(self.nodes) if node is stanza)
        trailing = stanza.detach_trailing()
        self.nodes[index:index + 1] = trailing
        # A duplicate further down now comes first.
        mark_addressable(self.stanzas)
        self.modified = True


def build(tokens: list[Token], indent: str = DEFAULT_INDENT) -> Document:
    """
    Group a token stream into a ``Document``.

    A header opens a stanza that absorbs the following properties,
    comments and whitespace until the next header or macro definition.
    Macro definitions and tokens before the first header stay at top
    level. Duplicate hosts and extra default stanzas are kept but not
    addressable.

    Args:
        tokens: Output of the lexer.
        indent: Indent for properties of stanzas created later.

    Returns:
        The document.
    """
    nodes: list[Node] = []
    current: Optional[Stanza] = None

    for token in tokens:
        if isinstance(token, (MachineHeader, DefaultHeader)):
            current = Stanza(header=token)
            nodes.append(current)
        elif isinstance(token, MacroDefinition):
            current = None
            nodes.append(token)
        elif current is not None:
            if isinstance(token, Property) and token.stray:
                log.debug("Keeping stray property %r with the preceding entry", token.name)
            current.tokens.append(token)
        else:
            nodes.append(token)

    stanzas = [node for node in nodes if isinstance(node, Stanza)]
    for stanza in stanzas:
        stanza.refresh_hint()
    mark_addressable(stanzas)
    return Document(nodes, indent=indent)


def parse(text: str, indent: str = DEFAULT_INDENT) -> Document:
    """Tokenize and build a document from netrc text."""
    return build(tokenize(text), indent=indent)


__all__ = [
    "DEFAULT_INDENT",
    "NEW_STANZA_ORDER",
    "Document",
    "FormattingHint",
    "Stanza",
    "build",
    "coerce_fields",
    "mark_addressable",
    "parse",
]
