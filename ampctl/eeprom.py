"""Named settings stored in a memory-mapped EEPROM image."""

from __future__ import annotations

import enum
import logging
import mmap
import os
import struct
import time
from dataclasses import dataclass
from typing import Optional, Sequence

from ampctl.crc32 import crc32_buffer
from ampctl.logger import LOGGER_NAME, LogPriority
from ampctl.state import GlobalState

_log = logging.getLogger(LOGGER_NAME)

CHECKSUM_SIZE = 4
PENDING_MAX_AGE = 60
"""Seconds a pending change may wait before it is written out."""


class EepromError(Exception):
    """The EEPROM image cannot be used as requested."""


class EepromType(enum.IntEnum):
    BOOL = 0
    CALL = 1  # callsign
    GRID = 2  # grid square
    STR = 3
    CHANNEL = 4  # channel memory
    CLASS = 5  # licence class
    FLOAT = 6
    FREQ = 7
    INT = 8
    IP4 = 9
    MODE = 10  # operating mode (modulation)


_STRING_TYPES = {EepromType.CALL, EepromType.GRID, EepromType.STR}
_FLOAT_TYPES = {EepromType.FLOAT, EepromType.FREQ}
_FLOAT_FORMATS = {4: "<f", 8: "<d"}


@dataclass(frozen=True)
class LayoutEntry:
    """Where a named setting lives in the image and how it is encoded."""

    key: str
    offset: int
    size: int
    type: EepromType


class Eeprom:
    """Access to the settings image, by address or by setting name."""

    def __init__(
        self,
        rig: GlobalState,
        layout: Sequence[LayoutEntry] = (),
        size: Optional[int] = None,
    ) -> None:
        self.rig = rig
        self.layout = list(layout)
        self.size = size
        self._file = None
        self._dirty_since: Optional[float] = None

    def __enter__(self) -> Eeprom:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -- image handling -------------------------------------------------

    def open(self, path) -> Eeprom:
        """Map the image file read/write; raises EepromError on failure."""
        try:
            fh = open(path, "r+b")
        except OSError as exc:
            _log.log(
                LogPriority.CRIT.level,
                "EEPROM Initialization failed: %s: %s",
                path,
                exc.strerror or exc,
            )
            raise EepromError(f"cannot open EEPROM image {path}") from exc
        try:
            length = os.fstat(fh.fileno()).st_size
            if length == 0:
                raise EepromError(f"EEPROM image {path} is empty")
            if self.size is None:
                self.size = length
            elif length < self.size:
                raise EepromError(
                    f"EEPROM image {path} holds {length} bytes, {self.size} needed"
                )
            if self.size < CHECKSUM_SIZE:
                raise EepromError("EEPROM too small to hold a checksum")
            mapped = mmap.mmap(fh.fileno(), length)
        except (OSError, ValueError) as exc:
            fh.close()
            raise EepromError(f"cannot map EEPROM image {path}") from exc
        except EepromError:
            fh.close()
            raise
        self._file = fh
        self.rig.eeprom_fd = fh.fileno()
        self.rig.eeprom_mmap = mapped
        self.rig.eeprom_ready = True
        _log.log(LogPriority.INFO.level, "EEPROM Initialized (mmap) %s", path)
        return self

    def close(self) -> None:
        """Unmap and close the image, if open."""
        if self.rig.eeprom_mmap is not None:
            self.rig.eeprom_mmap.flush()
            self.rig.eeprom_mmap.close()
        if self._file is not None:
            self._file.close()
        self._file = None
        self.rig.eeprom_mmap = None
        self.rig.eeprom_fd = None
        self.rig.eeprom_ready = False

    def _map(self):
        if self.rig.eeprom_mmap is None:
            raise EepromError("EEPROM is not open")
        return self.rig.eeprom_mmap

    # -- access by address ----------------------------------------------

    def read(self, offset: int) -> int:
        """One byte at an address; addresses start at 1."""
        if offset <= 0:
            raise EepromError(f"address {offset} not available")
        mapped = self._map()
        if offset >= len(mapped):
            raise EepromError(f"address {offset} beyond end of EEPROM")
        return mapped[offset]

    def read_block(self, offset: int, length: int) -> bytes:
        """A run of bytes starting at an address; addresses start at 1."""
        if offset <= 0 or length <= 0:
            raise EepromError(f"invalid block read at {offset} of {length} bytes")
        mapped = self._map()
        if offset + length > len(mapped):
            raise EepromError(f"block at {offset} of {length} bytes beyond end")
        return bytes(mapped[offset : offset + length])

    # -- access by name -------------------------------------------------

    def offset_index(self, key: str) -> int:
        """Index of the first layout entry whose name starts with key, ignoring case."""
        wanted = key.lower()
        for idx, entry in enumerate(self.layout):
            if entry.key.lower().startswith(wanted):
                _log.log(
                    LogPriority.DEBUG.level, "match for key %s at index %d", key, idx
                )
                return idx
        _log.log(
            LogPriority.DEBUG.level, "No match found for key %s in eeprom_layout", key
        )
        raise KeyError(key)

    def _entry(self, idx: int) -> LayoutEntry:
        if not 0 <= idx < len(self.layout):
            raise IndexError(f"no layout entry {idx}")
        return self.layout[idx]

    def _entry_bytes(self, idx: int) -> bytes:
        entry = self._entry(idx)
        mapped = self._map()
        end = entry.offset + entry.size
        if entry.offset < 0 or end > len(mapped):
            raise EepromError(f"setting {entry.key} lies outside the EEPROM")
        return bytes(mapped[entry.offset : end])

    def get_int(self, idx: int) -> int:
        """Unsigned little-endian integer held by a layout entry."""
        return int.from_bytes(self._entry_bytes(idx), "little")

    def get_float(self, idx: int) -> float:
        """Floating point value held by a 4 or 8 byte layout entry."""
        raw = self._entry_bytes(idx)
        try:
            fmt = _FLOAT_FORMATS[len(raw)]
        except KeyError:
            raise EepromError(
                f"setting {self.layout[idx].key} is {len(raw)} bytes, not a float"
            ) from None
        return struct.unpack(fmt, raw)[0]

    def get_str(self, idx: int) -> str:
        """NUL-terminated text held by a layout entry."""
        raw = self._entry_bytes(idx).split(b"\0", 1)[0]
        return raw.decode("utf-8", errors="replace")

    def get_int_by_key(self, key: str) -> int:
        return self.get_int(self.offset_index(key))

    def get_str_by_key(self, key: str) -> str:
        return self.get_str(self.offset_index(key))

    # -- checksum -------------------------------------------------------

    def _checksum_offset(self) -> int:
        size = self.size if self.size is not None else len(self._map())
        return size - CHECKSUM_SIZE

    def checksum_generate(self) -> int:
        """CRC-32 of the image up to the stored checksum; 0 if not open."""
        if self.rig.eeprom_mmap is None:
            return 0
        end = self._checksum_offset()
        return crc32_buffer(bytes(self.rig.eeprom_mmap[:end]))

    def _stored_checksum(self) -> int:
        if self.rig.eeprom_mmap is None:
            return 0
        start = self._checksum_offset()
        return int.from_bytes(
            self.rig.eeprom_mmap[start : start + CHECKSUM_SIZE], "little"
        )

    def validate_checksum(self) -> bool:
        """True when the stored checksum matches the image."""
        current = self._stored_checksum()
        calculated = self.checksum_generate()
        if calculated != current:
            _log.log(
                LogPriority.WARN.level,
                "* Verify checksum failed: calculated <%x> but read <%x> *",
                calculated,
                current,
            )
            return False
        _log.log(
            LogPriority.INFO.level,
            "EEPROM checksum <%x> is correct, loading settings...",
            calculated,
        )
        return True

    # -- configuration --------------------------------------------------

    def _render(self, idx: int, entry: LayoutEntry) -> str:
        kind = entry.type
        if kind == EepromType.BOOL:
            return "true" if self.get_int(idx) else "false"
        if kind in _STRING_TYPES:
            return self.get_str(idx)
        if kind in _FLOAT_TYPES:
            return f"{self.get_float(idx):f}"
        if kind == EepromType.INT:
            return f"{self.get_int(idx):d}"
        if kind not in (EepromType.CHANNEL, EepromType.CLASS):
            _log.log(LogPriority.DEBUG.level, "unhandled type %d", int(kind))
        return ""

    def load_config(self) -> dict[str, str]:
        """Validate the image and return every setting rendered as text.

        A checksum mismatch marks the EEPROM corrupted and raises EepromError.
        """
        if not self.validate_checksum():
            _log.log(
                LogPriority.WARN.level,
                "Ignoring saved configuration due to EEPROM checksum mismatch",
            )
            self.rig.eeprom_corrupted = True
            raise EepromError("EEPROM checksum mismatch")
        settings: dict[str, str] = {}
        for idx, entry in enumerate(self.layout):
            value = self._render(idx, entry)
            _log.log(
                LogPriority.DEBUG.level,
                "key: %s type: %d offset: %d size: %d |%s|",
                entry.key,
                int(entry.type),
                entry.offset,
                entry.size,
                value,
            )
            settings[entry.key] = value
        _log.log(LogPriority.INFO.level, "Configuration successfully loaded from EEPROM")
        return settings

    def write_config(self, force: bool = False) -> bool:
        """Commit pending changes with a fresh checksum.

        Returns False when nothing is pending. A corrupted image is only
        overwritten when ``force`` is set; otherwise EepromError is raised.
        """
        if not self.rig.eeprom_dirty:
            return False
        if self.rig.eeprom_corrupted and not force:
            _log.log(LogPriority.WARN.level, "Not saving EEPROM since corrupt flag set")
            raise EepromError("EEPROM corrupt flag set; not saving")
        mapped = self._map()
        checksum = self.checksum_generate()
        start = self._checksum_offset()
        mapped[start : start + CHECKSUM_SIZE] = checksum.to_bytes(
            CHECKSUM_SIZE, "little"
        )
        mapped.flush()
        self.rig.eeprom_dirty = False
        self.rig.eeprom_corrupted = False
        self._dirty_since = None
        _log.log(LogPriority.INFO.level, "EEPROM saved, checksum <%x>", checksum)
        return True

    def serial_number(self) -> str:
        """The device serial number setting."""
        serial = self.get_str_by_key("device/serial")
        _log.log(LogPriority.INFO.level, "Device serial number: %s", serial)
        return serial

    def write_pending_changes(self) -> bool:
        """Write pending changes once they are older than PENDING_MAX_AGE."""
        if not self.rig.eeprom_dirty:
            self._dirty_since = None
            return False
        now = time.monotonic()
        if self._dirty_since is None:
            self._dirty_since = now
        if now - self._dirty_since <= PENDING_MAX_AGE:
            return False
        return self.write_config(False)