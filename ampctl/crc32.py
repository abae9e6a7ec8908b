"""32-bit CRC (ANSI X3.66 / ADCCP frame check sequence)."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterable

POLYNOMIAL = 0xEDB88320
MASK = 0xFFFFFFFF


def _make_table() -> tuple[int, ...]:
    table = []
    for n in range(256):
        c = n
        for _ in range(8):
            c = (c >> 1) ^ POLYNOMIAL if c & 1 else c >> 1
        table.append(c)
    return tuple(table)


_TABLE = _make_table()


def update_crc32(byte: int, crc: int) -> int:
    """Fold one octet into a running (un-inverted) CRC register."""
    return _TABLE[(crc ^ byte) & 0xFF] ^ (crc >> 8)


def _accumulate(data: Iterable[int], crc: int = MASK) -> int:
    for byte in data:
        crc = update_crc32(byte, crc)
    return crc


def crc32_buffer(data: bytes) -> int:
    """CRC-32 of a whole buffer."""
    return _accumulate(data) ^ MASK


def crc32_file(path) -> tuple[int, int]:
    """CRC-32 and byte count of a file; raises OSError if it cannot be read."""
    crc = MASK
    count = 0
    with open(path, "rb") as fh:
        for chunk in iter(lambda: fh.read(65536), b""):
            crc = _accumulate(chunk, crc)
            count += len(chunk)
    return crc ^ MASK, count


def main(argv=None) -> int:
    """Print CRC, size and name for each file given."""
    args = sys.argv[1:] if argv is None else list(argv)
    any_ok = False
    for name in args:
        try:
            crc, count = crc32_file(Path(name))
        except OSError as exc:
            print(f"{name}: {exc.strerror or exc}", file=sys.stderr)
            continue
        any_ok = True
        print(f"{crc:08X} {count:7d} {name}")
    return 0 if any_ok else 1


if __name__ == "__main__":
    sys.exit(main())