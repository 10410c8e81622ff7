# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: 2025 The Linux Foundation

"""
Serialization of netrc documents back to text.

Untouched nodes are written from their captured tokens, so an unmodified
document reproduces its source exactly. Stanzas and properties created by
edits carry their own whitespace tokens, laid out by the document model;
the serializer never reorders anything.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from .document import Document, Stanza

log = logging.getLogger(__name__)


def iter_chunks(document: Document) -> Iterator[str]:
    """Yield the text of every node in document order."""
    for node in document.nodes:
        if isinstance(node, Stanza):
            yield node.header.content
            for token in node.tokens:
                yield token.content
        else:
            yield node.content


def serialize(document: Document) -> str:
    """
    Render a document as netrc text.

    A modified document holding at least one stanza always ends with a
    line break; an unmodified one is returned exactly as it was read.

    Args:
        document: Document to render.

    Returns:
        The netrc text.
    """
    text = "".join(iter_chunks(document))
    if document.modified and document.stanzas and not text.endswith("\n"):
        text += "\n"
    log.debug("Serialized %d nodes into %d characters", len(document.nodes), len(text))
    return text


__all__ = ["iter_chunks", "serialize"]
