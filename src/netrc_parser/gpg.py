# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: 2025 The Linux Foundation

"""
GPG encryption for .netrc.gpg files.

The document model treats encryption as an opaque byte transform. This
module runs the external ``gpg`` binary for it, either blocking
(``subprocess.run``) or through an asyncio subprocess. Both feed the data
on stdin and read the result from stdout; a non-zero exit status raises
``CryptoError``.
"""

import asyncio
import logging
import subprocess
from typing import Optional

from .errors import CryptoError
from .models import NetrcSettings

logger = logging.getLogger(__name__)


class GpgCipher:
    """
    Encrypt and decrypt netrc content with gpg.

    Example:
        >>> cipher = GpgCipher()
        >>> plain = cipher.decrypt(Path("~/.netrc.gpg").expanduser().read_bytes())
        >>> armored = await cipher.encrypt_async(plain)
    """

    def __init__(self, settings: Optional[NetrcSettings] = None):
        """
        Initialize cipher.

        Args:
            settings: Settings naming the gpg binary and its arguments.
        """
        self.settings = settings or NetrcSettings()

    @property
    def decrypt_command(self) -> list[str]:
        return [self.settings.gpg_binary, *self.settings.decrypt_args]

    @property
    def encrypt_command(self) -> list[str]:
        return [self.settings.gpg_binary, *self.settings.encrypt_args]

    def decrypt(self, data: bytes) -> bytes:
        """Decrypt ``data``, blocking until gpg exits."""
        return self._run(self.decrypt_command, data)

    def encrypt(self, data: bytes) -> bytes:
        """Encrypt ``data`` for the default recipient, blocking until gpg exits."""
        return self._run(self.encrypt_command, data)

    async def decrypt_async(self, data: bytes) -> bytes:
        """Decrypt ``data`` without blocking the event loop."""
        return await self._run_async(self.decrypt_command, data)

    async def encrypt_async(self, data: bytes) -> bytes:
        """Encrypt ``data`` without blocking the event loop."""
        return await self._run_async(self.encrypt_command, data)

    def _run(self, args: list[str], data: bytes) -> bytes:
        logger.debug(f"Running gpg with args {args}")
        try:
            result = subprocess.run(
                args,
                input=data,
                capture_output=True,
                check=False,
            )
        except OSError as e:
            msg = f"Could not run {args[0]}: {e}"
            raise CryptoError(msg) from e
        _check_exit(args, result.returncode, result.stderr)
        return result.stdout

    async def _run_async(self, args: list[str], data: bytes) -> bytes:
        logger.debug(f"Running gpg asynchronously with args {args}")
        try:
            proc = await asyncio.create_subprocess_exec(
                *args,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            msg = f"Could not run {args[0]}: {e}"
            raise CryptoError(msg) from e
        stdout, stderr = await proc.communicate(data)
        _check_exit(args, proc.returncode, stderr)
        return stdout


def _check_exit(args: list[str], returncode: Optional[int], stderr: bytes) -> None:
    if returncode == 0:
        return
    error_output = stderr.decode("utf-8", errors="replace").strip()
    logger.debug(f"{args[0]} exited with code {returncode}: {error_output}")
    raise CryptoError(
        f"gpg exited with code {returncode}",
        returncode=returncode,
        stderr=error_output,
    )


__all__ = ["GpgCipher"]
