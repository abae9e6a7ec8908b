"""I2C bus access through the Linux i2c-dev interface."""

from __future__ import annotations

import fcntl
import logging
import os
from typing import Optional

from ampctl.logger import LOGGER_NAME, LogPriority

_log = logging.getLogger(LOGGER_NAME)

I2C_SLAVE = 0x0703
"""ioctl request that selects the device address for later transfers."""


class I2CError(Exception):
    """An I2C bus could not be opened or a transfer failed."""


class I2CBus:
    """One I2C bus, opened as /dev/i2c-<bus_id>."""

    def __init__(self, bus_id: int, my_addr: int = 0) -> None:
        self.bus_id = bus_id
        self.my_addr = my_addr if my_addr >= 0 else 0
        self.path = f"/dev/i2c-{bus_id}"
        self.fd: Optional[int] = None

    def open(self) -> I2CBus:
        """Open the bus device for reading and writing."""
        if self.fd is not None:
            return self
        try:
            self.fd = os.open(self.path, os.O_RDWR)
        except OSError as exc:
            raise I2CError(f"cannot open {self.path}: {exc.strerror or exc}") from exc
        return self

    def _select(self, device_address: int, op: str) -> int:
        if not 0 <= device_address <= 0xFF:
            raise ValueError(f"device address {device_address} out of range")
        if self.fd is None:
            raise I2CError(f"bus {self.bus_id} is not open")
        try:
            fcntl.ioctl(self.fd, I2C_SLAVE, device_address)
        except OSError as exc:
            _log.log(
                LogPriority.WARN.level,
                "%s: Failed to set I2C slave address: %s (%d)",
                op,
                exc.strerror,
                exc.errno or 0,
            )
            raise I2CError(
                f"cannot select device 0x{device_address:02x} on bus {self.bus_id}"
            ) from exc
        return self.fd

    def write(self, device_address: int, data: bytes) -> int:
        """Send bytes to a device; raises I2CError unless all were sent."""
        fd = self._select(device_address, "i2c_write")
        payload = bytes(data)
        try:
            written = os.write(fd, payload)
        except OSError as exc:
            raise I2CError(f"write to 0x{device_address:02x} failed") from exc
        if written != len(payload):
            raise I2CError(
                f"short write to 0x{device_address:02x}: {written} of {len(payload)}"
            )
        return written

    def read(self, device_address: int, length: int) -> bytes:
        """Read exactly ``length`` bytes from a device."""
        fd = self._select(device_address, "i2c_read")
        try:
            data = os.read(fd, length)
        except OSError as exc:
            raise I2CError(f"read from 0x{device_address:02x} failed") from exc
        if len(data) != length:
            raise I2CError(
                f"short read from 0x{device_address:02x}: {len(data)} of {length}"
            )
        return data

    def close(self) -> None:
        """Close the bus device, if open."""
        if self.fd is not None:
            os.close(self.fd)
            self.fd = None

    def __enter__(self) -> I2CBus:
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()