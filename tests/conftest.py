# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: 2025 The Linux Foundation

"""
Pytest configuration and shared fixtures for netrc-parser tests.

This module provides sample netrc content and helpers for writing it to
temporary files.
"""

from pathlib import Path

import pytest

GOOD_NETRC = """# I am a comment
machine mail.google.com
\tlogin joe@gmail.com
  account justagmail #end of line comment with trailing space
  password somethingSecret
 # I am another comment

macdef allput
put src/*

macdef allput2
  put src/*
put src2/*

machine ray login demo password mypassword

machine weirdlogin login uname password pass#pass

default
  login anonymous
  password joe@example.com
"""


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep netrc-related environment variables from leaking into tests."""
    for name in ("NETRC", "NETRC_PARSER_GPG", "NETRC_PARSER_DEBUG"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def good_netrc_text():
    """
    Netrc content with comments, macros, inline and multiline entries.

    Returns:
        str: Sample netrc content
    """
    return GOOD_NETRC


@pytest.fixture
def write_netrc(tmp_path):
    """
    Factory writing netrc content to a file with owner-only permissions.

    Returns:
        Callable: ``write_netrc(content, name=".netrc") -> Path``
    """

    def _write(content: str, name: str = ".netrc") -> Path:
        path = tmp_path / name
        path.write_text(content)
        path.chmod(0o600)
        return path

    return _write
