import errno
import os
import socket

import pytest

from ampctl.transport import InputType, Transport


def test_input_type_values_follow_declaration_order():
    assert [InputType(i) for i in range(3)] == list(InputType)
    assert InputType(0) is InputType.SOCKET


def test_unknown_kind_is_rejected():
    with pytest.raises(ValueError):
        Transport(7, "somewhere")


def test_device_round_trip_between_two_transports(tmp_path):
    node = tmp_path / "ttyFAKE"
    node.write_bytes(b"")
    with Transport(InputType.DEVICE, str(node)) as writer:
        assert writer.write(b"FA014250000;") == 12
    with Transport(InputType.DEVICE, str(node)) as reader:
        assert reader.read(64) == b"FA014250000;"


def test_pipe_round_trip(tmp_path):
    fifo = tmp_path / "cat"
    os.mkfifo(fifo)
    with Transport(InputType.PIPE, str(fifo)) as t:
        assert t.write(b"^FC3;") == 5
        assert t.read(5) == b"^FC3;"


def test_missing_device_raises(tmp_path):
    t = Transport(InputType.DEVICE, str(tmp_path / "absent"))
    with pytest.raises(FileNotFoundError):
        t.open()
    assert t.is_open is False


def test_invalid_socket_address_raises():
    t = Transport(InputType.SOCKET, "not-an-address", 4532)
    with pytest.raises(OSError) as info:
        t.open()
    assert info.value.errno == errno.EINVAL
    assert t.is_open is False


def test_socket_round_trip():
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(("127.0.0.1", 0))
    server.listen(1)
    port = server.getsockname()[1]
    try:
        with Transport(InputType.SOCKET, "127.0.0.1", port) as t:
            conn, _ = server.accept()
            with conn:
                assert t.write(b"ping") == 4
                assert conn.recv(4) == b"ping"
                conn.sendall(b"pong")
                assert t.read(4) == b"pong"
    finally:
        server.close()


def test_read_and_write_require_open(tmp_path):
    t = Transport(InputType.DEVICE, str(tmp_path / "x"))
    with pytest.raises(OSError) as info:
        t.read(1)
    assert info.value.errno == errno.EBADF
    with pytest.raises(OSError):
        t.write(b"x")


def test_close_is_idempotent(tmp_path):
    node = tmp_path / "dev"
    node.write_bytes(b"")
    t = Transport(InputType.DEVICE, str(node)).open()
    assert t.is_open is True
    t.close()
    t.close()
    assert t.is_open is False