"""Byte transports over a TCP socket, a device node or a named pipe."""

from __future__ import annotations

import enum
import errno
import ipaddress
import os
import socket
from typing import Optional


class InputType(enum.IntEnum):
    SOCKET = 0
    DEVICE = 1
    PIPE = 2


class Transport:
    """A read/write channel that hides whether it is a socket or a file node.

    For ``InputType.SOCKET`` the address must be a dotted IPv4 address and
    ``port`` the TCP port to connect to; the other kinds open a path for
    reading and writing.
    """

    def __init__(self, kind, path_or_address: str, port: int = 0) -> None:
        self.kind = InputType(kind)
        self.path_or_address = path_or_address
        self.port = port
        self._sock: Optional[socket.socket] = None
        self._fd: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self._sock is not None or self._fd is not None

    def open(self) -> Transport:
        """Connect or open the underlying channel; raises OSError on failure."""
        if self.is_open:
            return self
        if self.kind is InputType.SOCKET:
            try:
                ipaddress.IPv4Address(self.path_or_address)
            except ValueError as exc:
                raise OSError(
                    errno.EINVAL, f"invalid IPv4 address {self.path_or_address!r}"
                ) from exc
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            try:
                sock.connect((self.path_or_address, self.port))
            except OSError:
                sock.close()
                raise
            self._sock = sock
        else:
            self._fd = os.open(self.path_or_address, os.O_RDWR)
        return self

    def _require_open(self) -> None:
        if not self.is_open:
            raise OSError(errno.EBADF, "transport is not open")

    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes; an empty result means end of input."""
        self._require_open()
        if self._sock is not None:
            return self._sock.recv(size)
        return os.read(self._fd, size)

    def write(self, data: bytes) -> int:
        """Write bytes and return how many were accepted."""
        self._require_open()
        if self._sock is not None:
            return self._sock.send(data)
        return os.write(self._fd, data)

    def close(self) -> None:
        """Close the channel; closing twice is harmless."""
        if self._sock is not None:
            self._sock.close()
            self._sock = None
        if self._fd is not None:
            os.close(self._fd)
            self._fd = None

    def __enter__(self) -> Transport:
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()