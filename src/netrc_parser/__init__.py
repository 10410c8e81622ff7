# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: 2025 The Linux Foundation

"""
netrc-parser

Read, edit and write .netrc files while keeping comments, layout and
macro definitions exactly as they were.
"""

from .document import Document, FormattingHint, Stanza, build, parse
from .errors import CryptoError, LexError, NetrcError
from .gpg import GpgCipher
from .lexer import tokenize
from .log import setup_logging
from .models import MachineFields, NetrcSettings
from .netrc import (
    MachineRecord,
    MachinesView,
    Netrc,
    check_netrc_permissions,
    default_netrc,
    find_netrc_file,
)
from .serializer import serialize

__all__ = [
    "CryptoError",
    "Document",
    "FormattingHint",
    "GpgCipher",
    "LexError",
    "MachineFields",
    "MachineRecord",
    "MachinesView",
    "Netrc",
    "NetrcError",
    "NetrcSettings",
    "Stanza",
    "build",
    "check_netrc_permissions",
    "default_netrc",
    "find_netrc_file",
    "parse",
    "serialize",
    "setup_logging",
    "tokenize",
]
