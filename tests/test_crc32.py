import zlib

import pytest

from ampctl.crc32 import crc32_buffer, crc32_file, main, update_crc32


def test_table_entries_match_reference():
    assert update_crc32(1, 0) == 0x77073096
    assert update_crc32(0x80, 0) == 0xEDB88320
    assert update_crc32(0xFF, 0) == 0x2D02EF8D


def test_empty_buffer():
    assert crc32_buffer(b"") == 0


def test_check_value():
    assert crc32_buffer(b"123456789") == 0xCBF43926


@pytest.mark.parametrize(
    "data", [b"a", b"hello world", bytes(range(256)), b"\x00" * 1000]
)
def test_matches_zlib(data):
    assert crc32_buffer(data) == zlib.crc32(data)


def test_update_folds_incrementally():
    data = b"amplifier"
    crc = 0xFFFFFFFF
    for byte in data:
        crc = update_crc32(byte, crc)
    assert crc ^ 0xFFFFFFFF == crc32_buffer(data)


def test_file_crc_and_count(tmp_path):
    data = bytes(range(256)) * 300
    path = tmp_path / "image.bin"
    path.write_bytes(data)
    assert crc32_file(path) == (zlib.crc32(data), len(data))


def test_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        crc32_file(tmp_path / "nope.bin")


def test_main_prints_line(tmp_path, capsys):
    data = b"eeprom contents"
    path = tmp_path / "ee.bin"
    path.write_bytes(data)
    assert main([str(path)]) == 0
    out = capsys.readouterr().out
    assert out == f"{zlib.crc32(data):08X} {len(data):7d} {path}\n"


def test_main_all_missing_fails(tmp_path, capsys):
    assert main([str(tmp_path / "nope.bin")]) == 1
    assert capsys.readouterr().out == ""


def test_main_no_files_fails():
    assert main([]) == 1