# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: 2025 The Linux Foundation

"""
Read, edit and write .netrc files without losing their formatting.

This module is the public entry point. ``Netrc`` binds one file to a
``Document`` and offers host-keyed views over it:

- ``machines``: mapping of host to ``MachineRecord``
- ``default``: the ``default`` entry, if any

File handling follows the usual netrc conventions:
- ``NETRC`` environment variable, else ``~/.netrc`` (``_netrc`` on Windows)
- an existing ``.gpg`` sibling is preferred and decrypted with gpg
- a missing file loads as an empty document
- files are replaced atomically, readable and writable by the owner only

Concurrent edits of the same file by other processes between load and
save are not detected; the last save wins.
"""

from __future__ import annotations

import asyncio
import logging
import os
import stat
import tempfile
from collections.abc import Iterator, MutableMapping
from pathlib import Path
from typing import Any, Optional, Union

from .document import Document, Stanza, parse
from .gpg import GpgCipher
from .models import NetrcSettings
from .serializer import serialize
from .tokens import TOKEN_ACCOUNT, TOKEN_LOGIN, TOKEN_PASSWORD

log = logging.getLogger(__name__)

ENV_NETRC = "NETRC"

# Bytes that are not UTF-8 survive a load/save cycle unchanged.
TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "surrogateescape"


def _home_directory() -> Path:
    """Return the home directory, honouring Windows environment overrides."""
    if os.name == "nt":
        homedrive = os.getenv("HOMEDRIVE")
        homepath = os.getenv("HOMEPATH")
        candidates = [
            os.getenv("HOME"),
            os.path.join(homedrive, homepath) if homedrive and homepath else None,
            os.getenv("USERPROFILE"),
        ]
        for candidate in candidates:
            if candidate:
                return Path(candidate)
    try:
        return Path.home()
    except RuntimeError:
        return Path(tempfile.gettempdir())


def find_netrc_file(
    explicit_path: Optional[Union[str, Path]] = None,
    settings: Optional[NetrcSettings] = None,
) -> Path:
    """
    Resolve the netrc file to use.

    Resolution order:
    1. Explicit path (if provided)
    2. ``NETRC`` environment variable
    3. ~/.netrc (~/_netrc on Windows)

    For the default location an existing encrypted sibling
    (``~/.netrc.gpg``) is preferred.

    Args:
        explicit_path: Explicit path to a netrc file.
        settings: Settings naming the encrypted suffix.

    Returns:
        Path to the netrc file. It may not exist yet.
    """
    if explicit_path is not None:
        log.debug("Using explicit netrc file: %s", explicit_path)
        return Path(explicit_path)

    env_path = os.getenv(ENV_NETRC, "").strip()
    if env_path:
        log.debug("Using netrc file from %s: %s", ENV_NETRC, env_path)
        return Path(env_path).expanduser()

    settings = settings or NetrcSettings()
    name = "_netrc" if os.name == "nt" else ".netrc"
    candidate = _home_directory() / name
    encrypted = candidate.with_name(candidate.name + settings.encrypted_suffix)
    if encrypted.is_file():
        log.debug("Found encrypted netrc file: %s", encrypted)
        return encrypted
    return candidate


def check_netrc_permissions(path: Path, file_mode: int = 0o600) -> bool:
    """
    Check that group and others get no more access than ``file_mode`` allows.

    Only the group and other bits are compared; the owner's bits are the
    owner's business. Always passes on Windows.

    Args:
        path: Path to the netrc file.
        file_mode: Permission bits netrc files are expected to have.

    Returns:
        True if permissions are secure or cannot be checked, False otherwise.
    """
    if os.name == "nt":
        return True

    try:
        mode = stat.S_IMODE(path.stat().st_mode)
    except OSError as e:
        log.warning("Could not check permissions for %s: %s", path, e)
        return True

    excess = mode & ~file_mode & (stat.S_IRWXG | stat.S_IRWXO)
    if excess:
        log.warning(
            "Netrc file %s has insecure permissions %04o. Consider running: chmod %o %s",
            path,
            mode,
            file_mode,
            path,
        )
        return False
    return True


def _read_netrc(path: Path, settings: NetrcSettings) -> Optional[bytes]:
    """Read raw file bytes; a missing file yields None."""
    try:
        data = path.read_bytes()
    except FileNotFoundError:
        log.debug("Netrc file %s does not exist, starting empty", path)
        return None
    if settings.check_permissions:
        check_netrc_permissions(path, settings.file_mode)
    return data


def _write_netrc(path: Path, data: bytes, mode: int) -> None:
    """
    Replace ``path`` with ``data`` atomically, with permission bits ``mode``.

    The body goes to a temporary sibling that is then renamed over the
    target, so a failure at any step leaves the old file intact. A
    symlinked netrc file is replaced at its target.
    """
    target = path.resolve()
    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, target)
    except Exception:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    log.debug("Wrote %d bytes to %s", len(data), target)


class MachineRecord:
    """
    Accessor for one machine or default entry.

    Reads and writes go straight to the underlying stanza, so the file
    keeps its layout when saved.
    """

    def __init__(self, document: Document, stanza: Stanza) -> None:
        self._document = document
        self._stanza = stanza

    def __repr__(self) -> str:
        """Mask password in repr for security."""
        values = {
            name: ("****" if name == TOKEN_PASSWORD else value)
            for name, value in self.to_dict().items()
        }
        if self.is_default:
            return f"MachineRecord(default, {values!r})"
        return f"MachineRecord(host={self.host!r}, {values!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MachineRecord):
            return NotImplemented
        return self._stanza is other._stanza

    __hash__ = None  # type: ignore[assignment]

    @property
    def is_default(self) -> bool:
        return self._stanza.is_default

    @property
    def host(self) -> Optional[str]:
        return self._stanza.host

    @host.setter
    def host(self, new_host: str) -> None:
        if self.host is None:
            msg = "The default entry has no host"
            raise AttributeError(msg)
        self._document.rename_host(self.host, new_host)

    def get(self, name: str) -> Optional[str]:
        return self._document.get_property(self._stanza, name)

    def set(self, name: str, value: Optional[str]) -> None:
        self._document.set_property(self._stanza, name, value)

    def remove(self, name: str) -> None:
        self._document.remove_property(self._stanza, name)

    def has(self, name: str) -> bool:
        return self._stanza.has(name)

    def to_dict(self) -> dict[str, str]:
        return self._stanza.to_dict()

    @property
    def login(self) -> Optional[str]:
        return self.get(TOKEN_LOGIN)

    @login.setter
    def login(self, value: Optional[str]) -> None:
        self.set(TOKEN_LOGIN, value)

    @property
    def password(self) -> Optional[str]:
        return self.get(TOKEN_PASSWORD)

    @password.setter
    def password(self, value: Optional[str]) -> None:
        self.set(TOKEN_PASSWORD, value)

    @property
    def account(self) -> Optional[str]:
        return self.get(TOKEN_ACCOUNT)

    @account.setter
    def account(self, value: Optional[str]) -> None:
        self.set(TOKEN_ACCOUNT, value)


class MachinesView(MutableMapping):
    """
    Host-keyed view over the machine entries of a document.

    ``view[host] = fields`` creates or updates an entry; ``view[host] =
    None`` and ``del view[host]`` remove it. Deleting a missing host is a
    no-op rather than a KeyError.
    """

    def __init__(self, document: Document) -> None:
        self._document = document

    def __getitem__(self, host: str) -> MachineRecord:
        stanza = self._document.get_host(host)
        if stanza is None:
            raise KeyError(host)
        return MachineRecord(self._document, stanza)

    def __setitem__(self, host: str, fields: Any) -> None:
        self._document.set_host(host, fields)

    def __delitem__(self, host: str) -> None:
        self._document.delete_host(host)

    def __contains__(self, host: object) -> bool:
        return isinstance(host, str) and self._document.get_host(host) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self._document.list_hosts())

    def __len__(self) -> int:
        return len(self._document.list_hosts())

    def __repr__(self) -> str:
        return f"MachinesView({self._document.list_hosts()!r})"


class Netrc:
    """
    A .netrc file that can be loaded, edited and saved.

    ``load``/``save`` are coroutines; ``load_sync``/``save_sync`` block.
    Both pairs run the same parsing and serialization and differ only in
    how they wait for disk and gpg.

    Example:
        >>> netrc = Netrc("~/.netrc")
        >>> netrc.load_sync()
        >>> netrc.machines["api.example.com"] = {"login": "me", "password": "s3cret"}
        >>> netrc.save_sync()
    """

    def __init__(
        self,
        file: Optional[Union[str, Path]] = None,
        settings: Optional[NetrcSettings] = None,
    ) -> None:
        """
        Initialize netrc for a file.

        Args:
            file: Path to the netrc file; resolved with ``find_netrc_file``
                when omitted.
            settings: File handling and gpg settings; read from the
                environment when omitted.
        """
        self.settings = settings or NetrcSettings.from_env()
        if file is not None:
            file = Path(file).expanduser()
        self.file = find_netrc_file(explicit_path=file, settings=self.settings)
        self.cipher = GpgCipher(self.settings)
        self.document = Document(indent=self.settings.default_indent)

    def __repr__(self) -> str:
        return f"Netrc(file={str(self.file)!r}, hosts={self.document.list_hosts()!r})"

    @property
    def encrypted(self) -> bool:
        """Return True if the file is stored gpg-encrypted."""
        return self.file.name.endswith(self.settings.encrypted_suffix)

    @property
    def machines(self) -> MachinesView:
        return MachinesView(self.document)

    @property
    def default(self) -> Optional[MachineRecord]:
        stanza = self.document.get_default()
        if stanza is None:
            return None
        return MachineRecord(self.document, stanza)

    @default.setter
    def default(self, fields: Any) -> None:
        self.document.set_default(fields)

    @property
    def output(self) -> str:
        """Return the current file content as text."""
        return serialize(self.document)

    def lookup(self, host: str) -> Optional[MachineRecord]:
        """
        Get the entry used for ``host``.

        Returns:
            The machine entry for ``host`` if present, otherwise the
            default entry, otherwise None.
        """
        stanza = self.document.get_host(host) or self.document.get_default()
        if stanza is None:
            log.debug("No netrc entry found for %s", host)
            return None
        return MachineRecord(self.document, stanza)

    def load_sync(self) -> Document:
        """
        Load and parse the file, blocking.

        Returns:
            The new document.

        Raises:
            LexError: If the file content cannot be tokenized.
            CryptoError: If gpg fails to decrypt the file.
            OSError: If the file exists but cannot be read.
        """
        log.debug("load %s", self.file)
        data = _read_netrc(self.file, self.settings)
        if data is not None and self.encrypted:
            data = self.cipher.decrypt(data)
        return self._replace_document(data)

    async def load(self) -> Document:
        """Load and parse the file without blocking the event loop."""
        log.debug("load %s", self.file)
        data = await asyncio.get_running_loop().run_in_executor(
            None, _read_netrc, self.file, self.settings
        )
        if data is not None and self.encrypted:
            data = await self.cipher.decrypt_async(data)
        return self._replace_document(data)

    def save_sync(self) -> None:
        """
        Serialize the document and write it, blocking.

        The file is only touched once the full body, encrypted if
        needed, has been produced.

        Raises:
            CryptoError: If gpg fails to encrypt; the file is left as is.
            OSError: If the file cannot be written.
        """
        log.debug("save %s", self.file)
        data = self.output.encode(TEXT_ENCODING, errors=TEXT_ERRORS)
        if self.encrypted:
            data = self.cipher.encrypt(data)
        _write_netrc(self.file, data, self.settings.file_mode)

    async def save(self) -> None:
        """Serialize the document and write it without blocking the event loop."""
        log.debug("save %s", self.file)
        data = self.output.encode(TEXT_ENCODING, errors=TEXT_ERRORS)
        if self.encrypted:
            data = await self.cipher.encrypt_async(data)
        await asyncio.get_running_loop().run_in_executor(
            None, _write_netrc, self.file, data, self.settings.file_mode
        )

    def _replace_document(self, data: Optional[bytes]) -> Document:
        if data is None:
            document = Document(indent=self.settings.default_indent)
        else:
            document = parse(
                data.decode(TEXT_ENCODING, errors=TEXT_ERRORS),
                indent=self.settings.default_indent,
            )
        self.document = document
        log.debug("machines: %s", document.list_hosts())
        return document


def default_netrc(settings: Optional[NetrcSettings] = None) -> Netrc:
    """
    Load the user's default netrc file.

    Each call returns a new, independently loaded ``Netrc``.
    """
    netrc = Netrc(settings=settings)
    netrc.load_sync()
    return netrc


__all__ = [
    "MachineRecord",
    "MachinesView",
    "Netrc",
    "check_netrc_permissions",
    "default_netrc",
    "find_netrc_file",
]
