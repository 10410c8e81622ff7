# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: 2025 The Linux Foundation

"""
Tests for the gpg collaborator.

The gpg binary is never run; ``subprocess.run`` and
``asyncio.create_subprocess_exec`` are mocked.
"""

import subprocess
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from netrc_parser.errors import CryptoError
from netrc_parser.gpg import GpgCipher
from netrc_parser.models import NetrcSettings


def _completed(returncode: int = 0, stdout: bytes = b"", stderr: bytes = b""):
    return subprocess.CompletedProcess(
        args=["gpg"], returncode=returncode, stdout=stdout, stderr=stderr
    )


def _process(returncode: int = 0, stdout: bytes = b"", stderr: bytes = b""):
    proc = MagicMock()
    proc.returncode = returncode
    proc.communicate = AsyncMock(return_value=(stdout, stderr))
    return proc


class TestCommands:
    """Tests for the gpg command lines."""

    def test_default_commands(self) -> None:
        """Test the default decrypt and encrypt arguments."""
        cipher = GpgCipher()
        assert cipher.decrypt_command == ["gpg", "--batch", "--quiet", "--decrypt"]
        assert cipher.encrypt_command == [
            "gpg",
            "-a",
            "--batch",
            "--default-recipient-self",
            "-e",
        ]

    def test_custom_binary(self) -> None:
        """Test a configured gpg binary."""
        cipher = GpgCipher(NetrcSettings(gpg_binary="/usr/local/bin/gpg2"))
        assert cipher.decrypt_command[0] == "/usr/local/bin/gpg2"
        assert cipher.encrypt_command[0] == "/usr/local/bin/gpg2"


class TestBlocking:
    """Tests for the blocking decrypt and encrypt."""

    def test_decrypt_success(self) -> None:
        """Test that data goes to stdin and stdout is returned."""
        cipher = GpgCipher()
        with patch("subprocess.run", return_value=_completed(stdout=b"plain")) as mock_run:
            assert cipher.decrypt(b"secret") == b"plain"

        mock_run.assert_called_once_with(
            ["gpg", "--batch", "--quiet", "--decrypt"],
            input=b"secret",
            capture_output=True,
            check=False,
        )

    def test_encrypt_success(self) -> None:
        """Test encrypting for the default recipient."""
        cipher = GpgCipher()
        with patch("subprocess.run", return_value=_completed(stdout=b"armored")) as mock_run:
            assert cipher.encrypt(b"plain") == b"armored"

        args = mock_run.call_args[0][0]
        assert "--default-recipient-self" in args

    def test_nonzero_exit_raises(self) -> None:
        """Test that a failing gpg raises CryptoError with details."""
        cipher = GpgCipher()
        failed = _completed(returncode=2, stderr=b"gpg: decryption failed: No secret key\n")
        with patch("subprocess.run", return_value=failed):
            with pytest.raises(CryptoError) as excinfo:
                cipher.decrypt(b"secret")

        assert excinfo.value.returncode == 2
        assert excinfo.value.stderr == "gpg: decryption failed: No secret key"
        assert "exited with code 2" in str(excinfo.value)

    def test_missing_binary_raises(self) -> None:
        """Test that a missing gpg binary raises CryptoError."""
        cipher = GpgCipher(NetrcSettings(gpg_binary="no-such-gpg"))
        with patch("subprocess.run", side_effect=FileNotFoundError("no-such-gpg")):
            with pytest.raises(CryptoError, match="Could not run no-such-gpg"):
                cipher.encrypt(b"plain")


class TestAsync:
    """Tests for the asyncio decrypt and encrypt."""

    @pytest.mark.asyncio
    async def test_decrypt_success(self) -> None:
        """Test decrypting through an asyncio subprocess."""
        cipher = GpgCipher()
        proc = _process(stdout=b"plain")
        with patch(
            "asyncio.create_subprocess_exec", new=AsyncMock(return_value=proc)
        ) as mock_exec:
            assert await cipher.decrypt_async(b"secret") == b"plain"

        assert mock_exec.call_args[0] == ("gpg", "--batch", "--quiet", "--decrypt")
        proc.communicate.assert_awaited_once_with(b"secret")

    @pytest.mark.asyncio
    async def test_encrypt_failure(self) -> None:
        """Test that a failing asyncio subprocess raises CryptoError."""
        cipher = GpgCipher()
        proc = _process(returncode=1, stderr=b"gpg: no default secret key\n")
        with patch("asyncio.create_subprocess_exec", new=AsyncMock(return_value=proc)):
            with pytest.raises(CryptoError) as excinfo:
                await cipher.encrypt_async(b"plain")

        assert excinfo.value.returncode == 1
        assert "no default secret key" in excinfo.value.stderr

    @pytest.mark.asyncio
    async def test_missing_binary(self) -> None:
        """Test that a missing binary raises CryptoError."""
        cipher = GpgCipher()
        with patch(
            "asyncio.create_subprocess_exec",
            new=AsyncMock(side_effect=FileNotFoundError("gpg")),
        ):
            with pytest.raises(CryptoError):
                await cipher.decrypt_async(b"secret")
