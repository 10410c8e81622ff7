# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: 2025 The Linux Foundation

"""
Pydantic models for netrc handling.

This module defines:
- Settings controlling file handling and the GPG collaborator
- Field records accepted when creating or updating entries
"""

import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

ENV_GPG_BINARY = "NETRC_PARSER_GPG"


class NetrcSettings(BaseModel):
    """Configuration for loading and saving netrc files."""

    gpg_binary: str = Field("gpg", description="GPG executable used for encrypted files")
    decrypt_args: list[str] = Field(
        default_factory=lambda: ["--batch", "--quiet", "--decrypt"],
        description="Arguments passed to gpg when decrypting from stdin",
    )
    encrypt_args: list[str] = Field(
        default_factory=lambda: ["-a", "--batch", "--default-recipient-self", "-e"],
        description="Arguments passed to gpg when encrypting from stdin",
    )
    encrypted_suffix: str = Field(".gpg", description="File suffix marking encrypted netrc files")
    file_mode: int = Field(0o600, description="Permission bits applied to saved files")
    check_permissions: bool = Field(
        True, description="Warn when a loaded file is readable by group or others"
    )
    default_indent: str = Field("  ", description="Indent for properties of new entries")

    @classmethod
    def from_env(cls) -> "NetrcSettings":
        """Build settings, taking the GPG binary from the environment if set."""
        gpg_binary = os.getenv(ENV_GPG_BINARY, "").strip()
        if gpg_binary:
            return cls(gpg_binary=gpg_binary)
        return cls()


class MachineFields(BaseModel):
    """
    Property values for a machine or default entry.

    Only fields that are explicitly set are applied; an explicit ``None``
    removes the property. Extra keyword fields become extra properties.
    """

    model_config = ConfigDict(extra="allow")

    login: Optional[str] = Field(None, description="Login name")
    password: Optional[str] = Field(None, description="Password", repr=False)
    account: Optional[str] = Field(None, description="Additional account password")
