# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: 2025 The Linux Foundation
# ruff: noqa: S105

"""
Tests for serializing netrc documents.

Tests cover exact round trips of unmodified files, the locality of
edits and trailing line breaks.
"""

import pytest

from netrc_parser.document import parse
from netrc_parser.serializer import iter_chunks, serialize

INDENTED_NETRC = """# I am a comment
    machine mail.google.com
      login joe@gmail.com
      account gmail
      password somethingSecret
    # I am another comment

    default
      login anonymous
      password joe@example.com

    machine ray login demo password mypassword
"""

SAVING_NETRC = """# I am a comment
machine mail.google.com
\tlogin joe@gmail.com
  password somethingSecret #end of line comment with trailing space
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


class TestRoundTrip:
    """Tests that unmodified documents serialize to their source."""

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "\n",
            "# just a comment",
            "machine a login b",
            "machine a login b\n\n\n",
            "machine a\r\n  login b\r\n",
            "machine a login x\nmachine a login y\n",
            "login stray\nmachine a login b\n",
            "macdef init\ncd /pub\n\nmachine a login b\n",
            INDENTED_NETRC,
            SAVING_NETRC,
        ],
    )
    def test_unmodified_round_trip(self, text: str) -> None:
        """Test byte-identical output for an unmodified document."""
        assert serialize(parse(text)) == text

    def test_sample_file(self, good_netrc_text: str) -> None:
        """Test the shared sample file."""
        assert serialize(parse(good_netrc_text)) == good_netrc_text

    def test_chunks_cover_document(self, good_netrc_text: str) -> None:
        """Test that the chunks join to the output."""
        document = parse(good_netrc_text)
        assert "".join(iter_chunks(document)) == serialize(document)


class TestEdits:
    """Tests for the text produced after edits."""

    def test_edit_is_local(self) -> None:
        """Test that changing one value leaves every other byte alone."""
        text = "machine a login x password y\n# keep me\nmachine b\n  login z\n"
        document = parse(text)
        document.set_property(document.get_host("b"), "login", "zz")
        assert serialize(document) == text.replace("login z\n", "login zz\n")

    def test_full_editing_session(self) -> None:
        """Test a series of edits on a file with comments and macros."""
        document = parse(SAVING_NETRC)
        mail = document.get_host("mail.google.com")
        document.set_property(mail, "login", "joe2@gmail.com")
        document.set_property(mail, "account", "justanaccount")
        ray = document.get_host("ray")
        document.set_property(ray, "login", "demo2")
        document.set_property(ray, "account", "newaccount")
        document.set_host("new", {"login": "myuser", "password": "mypass"})
        document.set_host("anothernew", {})
        document.set_host("anothernew", {"login": "myuser"})

        assert serialize(document) == """# I am a comment
machine mail.google.com
\tlogin joe2@gmail.com
  password somethingSecret #end of line comment with trailing space
  account justanaccount
 # I am another comment

macdef allput
put src/*

macdef allput2
  put src/*
put src2/*

machine ray login demo2 password mypassword account newaccount

machine weirdlogin login uname password pass#pass

default
  login anonymous
  password joe@example.com
machine new
  login myuser
  password mypass
machine anothernew
  login myuser
"""

    def test_serialize_is_idempotent(self) -> None:
        """Test that serializing twice gives the same text."""
        document = parse("machine a login x")
        document.set_property(document.get_host("a"), "password", "p")
        first = serialize(document)
        assert serialize(document) == first
        assert serialize(parse(first)) == first

    def test_reparse_after_edits(self, good_netrc_text: str) -> None:
        """Test that edited output parses back to the same values."""
        document = parse(good_netrc_text)
        document.set_host("mail.google.com", {"password": "changed", "port": "993"})
        document.delete_host("ray")
        reparsed = parse(serialize(document))
        assert reparsed.list_hosts() == ["mail.google.com", "weirdlogin"]
        assert reparsed.get_host("mail.google.com").to_dict() == {
            "login": "joe@gmail.com",
            "account": "justagmail",
            "password": "changed",
            "port": "993",
        }


class TestTrailingNewline:
    """Tests for the final line break."""

    def test_unmodified_keeps_missing_newline(self) -> None:
        """Test that an unmodified file without a final newline is kept."""
        assert serialize(parse("machine a login b")) == "machine a login b"

    def test_modified_adds_newline(self) -> None:
        """Test that a modified document ends with a line break."""
        document = parse("machine a login b")
        document.set_property(document.get_host("a"), "login", "c")
        assert serialize(document) == "machine a login c\n"

    def test_modified_without_stanzas(self) -> None:
        """Test that removing the only entry leaves surrounding text as is."""
        document = parse("# note\nmachine a login b")
        document.delete_host("a")
        assert serialize(document) == "# note\n"
